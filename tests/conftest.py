"""
Shared fixtures.

The app runs against a throwaway SQLite file. Object storage and the
question generator are replaced with in-memory fakes through
dependency_overrides, so no MongoDB or DeepSeek is needed.
"""

import os
import tempfile
from itertools import count

_tmp_dir = tempfile.mkdtemp(prefix="talenttrek-tests-")
os.environ["TALENTTREK_DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp_dir, 'talenttrek.db')}"
os.environ["TALENTTREK_JWT_SECRET_KEY"] = "test-secret"
os.environ["TALENTTREK_DEEPSEEK_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from talenttrek.core.errors import QuestionGenerationError, UploadError
from talenttrek.db.postgres import get_db_session, init_schema
from talenttrek.main import app
from talenttrek.schemas.schemas import InterviewQuestion
from talenttrek.services.question_service import get_question_generator
from talenttrek.services.storage_service import get_object_storage, public_url

init_schema()

PASSWORD = "secret123"
_emails = count(1)


class FakeStorage:
    def __init__(self):
        self.files = {}
        self.fail = False

    def upload(self, filename, content, content_type):
        if self.fail:
            raise UploadError("storage unavailable")
        file_id = f"{len(self.files) + 1:024x}"
        self.files[file_id] = (content, filename, content_type)
        return public_url(file_id)

    def open(self, file_id):
        if file_id not in self.files:
            return None
        content, filename, content_type = self.files[file_id]
        return iter([content]), filename, content_type


class FakeGenerator:
    def __init__(self):
        self.calls = []
        self.fail = False

    def generate(self, job_title):
        self.calls.append(job_title)
        if self.fail:
            raise QuestionGenerationError("Failed to generate questions. Please try again.")
        return [
            InterviewQuestion(id=1, question=f"Why {job_title}?", answer="Because."),
            InterviewQuestion(id=2, question="Tell me about a hard bug.", answer="A race condition."),
        ]


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with get_db_session() as db:
        for table in ("applications", "jobs", "companies", "users"):
            db.execute(text(f"DELETE FROM {table}"))


@pytest.fixture
def storage():
    fake = FakeStorage()
    app.dependency_overrides[get_object_storage] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_object_storage, None)


@pytest.fixture
def generator():
    fake = FakeGenerator()
    app.dependency_overrides[get_question_generator] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_question_generator, None)


@pytest.fixture
def client(storage):
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def new_client(storage):
    """Factory for extra, independently signed-in clients."""
    def make():
        return TestClient(app, follow_redirects=False)
    return make


def signup_student(client, name="Ada Student", email=None):
    email = email or f"student{next(_emails)}@example.com"
    response = client.post(
        "/signup",
        data={
            "name": name,
            "email": email,
            "password": PASSWORD,
            "phone": "555-0100",
            "linkedin": "https://linkedin.com/in/ada",
            "role": "student",
        },
        files={"resume": ("cv.pdf", b"%PDF-1.4 resume", "application/pdf")},
    )
    assert response.status_code == 303, response.text
    return email


def signup_recruiter(client, name="Rita Recruiter", email=None):
    email = email or f"recruiter{next(_emails)}@example.com"
    response = client.post(
        "/signup",
        data={
            "name": name,
            "email": email,
            "password": PASSWORD,
            "phone": "555-0200",
            "linkedin": "https://linkedin.com/in/rita",
            "role": "recruiter",
        },
    )
    assert response.status_code == 303, response.text
    return email


def create_company(client, name="Acme", location="Berlin"):
    response = client.post(
        "/recruiter/companies",
        json={"name": name, "description": "We build things", "location": location},
    )
    assert response.status_code == 201, response.text
    return response.json()


def post_job(client, company_id=None, title="Backend Developer", salary=75000):
    body = {
        "title": title,
        "description": "Build APIs",
        "requirements": "Python",
        "salary": salary,
        "location": "Remote",
    }
    if company_id:
        body["company_id"] = company_id
    response = client.post("/recruiter/post", json=body)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def student(client):
    signup_student(client)
    return client


@pytest.fixture
def recruiter(new_client):
    c = new_client()
    signup_recruiter(c)
    return c
