from datetime import date

from talenttrek.schemas.schemas import UserMetadata
from talenttrek.services.aggregation import (
    build_application_details, build_job_cards, compute_profile_changes,
    filter_application_details, salary_label, status_style
)
from talenttrek.services.identity_service import Identity, IdentityResolver

COMPANY = {
    "company_id": "c1", "name": "Acme", "description": "", "location": "Berlin",
    "user_id": "r1", "created_at": "2024-05-01T09:00:00+00:00",
}
JOB = {
    "job_id": "j1", "company_id": "c1", "title": "Backend Developer", "description": "APIs",
    "requirements": "Python", "salary": 50000.0, "location": "Remote",
    "created_at": "2024-05-02T09:00:00+00:00",
}


def _application(app_id, user_id, status="pending", applied_at="2024-05-03T10:00:00+00:00", job_id="j1"):
    return {
        "application_id": app_id, "job_id": job_id, "user_id": user_id,
        "status": status, "applied_at": applied_at, "cover_letter": None,
    }


class FakeIdentityService:
    def __init__(self, identities):
        self.identities = identities
        self.batches = []

    def get_users_by_ids(self, ids):
        self.batches.append(set(ids))
        return {i: self.identities[i] for i in ids if i in self.identities}


def test_status_style():
    assert status_style("Accepted") == "success"
    assert status_style("rejected") == "danger"
    assert status_style("PENDING") == "warning"
    assert status_style("interview") == "info"
    assert status_style("on hold") == "neutral"
    assert status_style(None) == "neutral"


def test_salary_label():
    assert salary_label(120000) == "$120,000 / yr"
    assert salary_label(None) == "Salary TBD"


def test_job_cards_tolerate_missing_company():
    orphan = {**JOB, "job_id": "j2", "company_id": "gone"}
    cards = build_job_cards([JOB, orphan], [COMPANY], [_application("a1", "s1")])
    assert [(c.company_name, c.has_applied) for c in cards] == [("Acme", True), ("Unknown Company", False)]


def test_application_details_resolve_applicants_in_one_batch():
    service = FakeIdentityService({
        "s1": Identity(id="s1", email="s1@example.com", metadata=UserMetadata(name="Sam", role="student")),
    })
    apps = [_application("a1", "s1"), _application("a2", "s1"), _application("a3", "ghost")]

    details = build_application_details(apps, [JOB], [COMPANY], IdentityResolver(service))

    assert service.batches == [{"s1", "ghost"}]
    assert details[0].user.name == "Sam"
    assert details[2].user.name == "Unknown User"
    assert details[2].user.email == "N/A"
    assert details[2].user.linkedin == "#"
    assert details[0].company.name == "Acme"


def test_resolver_caches_between_calls():
    service = FakeIdentityService({})
    resolver = IdentityResolver(service)
    resolver.resolve(["a", "b"])
    resolver.resolve(["b", "a"])
    resolver.applicant("a")
    assert len(service.batches) == 1


def test_application_filters_combine():
    service = FakeIdentityService({
        "s1": Identity(id="s1", email="sam@example.com", metadata=UserMetadata(name="Sam")),
        "s2": Identity(id="s2", email="kim@example.com", metadata=UserMetadata(name="Kim")),
    })
    details = build_application_details(
        [
            _application("a1", "s1", status="Accepted"),
            _application("a2", "s2", status="pending", applied_at="2024-05-04T10:00:00+00:00"),
        ],
        [JOB], [COMPANY], IdentityResolver(service),
    )

    assert len(filter_application_details(details)) == 2
    assert [d.application_id for d in filter_application_details(details, status="accepted")] == ["a1"]
    assert [d.application_id for d in filter_application_details(details, day=date(2024, 5, 4))] == ["a2"]
    assert [d.application_id for d in filter_application_details(details, search="KIM@")] == ["a2"]
    assert filter_application_details(details, status="pending", search="sam") == []


def test_profile_changes_are_minimal():
    current = UserMetadata(name="Ada", phone="1", linkedin="", profilephoto="")
    assert compute_profile_changes(current, {"name": "Ada", "phone": "2", "linkedin": None}) == {"phone": "2"}
    assert compute_profile_changes(current, {"name": "Ada"}) == {}
    assert compute_profile_changes(current, {"linkedin": "https://x"}) == {"linkedin": "https://x"}
