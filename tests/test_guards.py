from talenttrek.core.session import SessionContext, landing_route_for
from talenttrek.schemas.schemas import Role, UserMetadata
from talenttrek.services.identity_service import Identity

from conftest import signup_recruiter, signup_student


def test_anonymous_user_is_sent_to_signin_with_return_path(client):
    response = client.get("/student/jobs?q=dev")
    assert response.status_code == 303
    assert response.headers["location"] == "/signin?next=/student/jobs%3Fq%3Ddev"


def test_anonymous_recruiter_page(client):
    response = client.get("/recruiter/dashboard")
    assert response.status_code == 303
    assert response.headers["location"] == "/signin?next=/recruiter/dashboard"


def test_student_cannot_open_recruiter_pages(client, caplog):
    signup_student(client)
    with caplog.at_level("INFO", logger="talenttrek.core.guards"):
        response = client.get("/recruiter/dashboard")

    assert response.status_code == 303
    assert response.headers["location"] == "/"
    assert "doesn't match required role (recruiter)" in caplog.text


def test_recruiter_cannot_open_student_pages(client):
    signup_recruiter(client)
    response = client.get("/student/applications")
    assert response.status_code == 303
    assert response.headers["location"] == "/"


def test_signed_in_user_is_bounced_from_auth_pages(client):
    signup_student(client)
    for path in ("/signin", "/signup"):
        response = client.get(path)
        assert response.status_code == 303
        assert response.headers["location"] == "/student/jobs"


def test_auth_pages_render_for_anonymous_user(client):
    assert client.get("/signin?next=/student/jobs").json() == {
        "page": "signin", "error": None, "next": "/student/jobs"
    }
    assert client.get("/signup").json()["page"] == "signup"


def test_landing_routes():
    assert landing_route_for(Role.student) == "/student/jobs"
    assert landing_route_for(Role.recruiter) == "/recruiter/dashboard"
    assert landing_route_for(None) == "/recruiter/dashboard"


def test_role_parse_is_closed():
    assert Role.parse("Student") is Role.student
    assert Role.parse(" recruiter ") is Role.recruiter
    assert Role.parse("admin") is None
    assert Role.parse(None) is None


def test_unknown_stored_role_resolves_to_no_role():
    identity = Identity(id="u1", email="x@example.com", metadata=UserMetadata(role="superuser"))
    assert identity.role is None


class CountingIdentityService:
    def __init__(self, identity):
        self.identity = identity
        self.calls = 0

    def get_user(self, user_id):
        self.calls += 1
        return self.identity


def test_session_context_caches_and_notifies_on_invalidate():
    from talenttrek.core.auth import create_access_token

    identity = Identity(id="u1", email="x@example.com", metadata=UserMetadata(role="student"))
    service = CountingIdentityService(identity)
    context = SessionContext(create_access_token({"sub": "u1"}), service)

    seen = []
    unsubscribe = context.subscribe(seen.append)

    assert context.resolve().user_id == "u1"
    assert context.resolve().role is Role.student
    assert service.calls == 1

    context.invalidate()
    assert service.calls == 2
    assert len(seen) == 1 and seen[0].user_id == "u1"

    unsubscribe()
    context.invalidate()
    assert len(seen) == 1


def test_session_context_without_token():
    service = CountingIdentityService(None)
    assert SessionContext(None, service).resolve() is None
    assert service.calls == 0


def test_unknown_path_is_page_not_found(client):
    response = client.get("/no/such/page")
    assert response.status_code == 404
    assert response.json() == {"detail": "404 - Page Not Found"}


def test_landing_page_is_public(client):
    page = client.get("/").json()
    assert [cta["label"] for cta in page["calls_to_action"]] == ["Find Jobs", "Post a Job"]
    assert page["testimonials"]


def test_health_reports_connectivity(client, monkeypatch):
    monkeypatch.setattr("talenttrek.db.mongodb.test_mongo_connection", lambda: False)
    assert client.get("/health").json() == {
        "status": "healthy", "database": "connected", "mongodb": "disconnected"
    }
