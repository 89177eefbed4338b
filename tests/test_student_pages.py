from conftest import create_company, post_job


def test_job_board_merges_company_and_applied_flag(student, recruiter):
    company = create_company(recruiter, name="Acme")
    job = post_job(recruiter, title="Backend Developer", salary=75000)

    page = student.get("/student/jobs").json()
    assert page["total"] == 1
    card = page["jobs"][0]
    assert card["job_id"] == job["job_id"]
    assert card["company_id"] == company["company_id"]
    assert card["company_name"] == "Acme"
    assert card["salary_label"] == "$75,000 / yr"
    assert card["has_applied"] is False
    assert card["can_apply"] is True
    assert [item["name"] for item in page["layout"]["nav"]] == [
        "Jobs", "Your Applications", "Interview Questions", "Account"
    ]


def test_job_board_newest_first_and_search(student, recruiter):
    create_company(recruiter, name="Globex", location="Paris")
    post_job(recruiter, title="Data Analyst", salary=None)
    post_job(recruiter, title="Frontend Engineer")

    page = student.get("/student/jobs").json()
    assert [card["title"] for card in page["jobs"]] == ["Frontend Engineer", "Data Analyst"]
    assert page["jobs"][1]["salary_label"] == "Salary TBD"

    assert student.get("/student/jobs", params={"q": "ANALYST"}).json()["total"] == 1
    assert student.get("/student/jobs", params={"q": "globex"}).json()["total"] == 2
    assert student.get("/student/jobs", params={"q": "remote"}).json()["total"] == 2
    assert student.get("/student/jobs", params={"q": "nothing-matches"}).json()["jobs"] == []


def test_empty_board(student):
    page = student.get("/student/jobs").json()
    assert page["jobs"] == []
    assert page["notifications"] == []


def test_apply_then_reapply(student, recruiter):
    create_company(recruiter)
    job = post_job(recruiter)

    response = student.post(
        f"/student/jobs/{job['job_id']}/apply",
        json={"cover_letter": "I love APIs", "client_ref": "pending-1"},
    )
    assert response.status_code == 201
    submitted = response.json()
    assert submitted["client_ref"] == "pending-1"
    assert submitted["sync_state"] == "confirmed"
    assert submitted["application"]["status"] == "pending"
    assert submitted["application"]["job_id"] == job["job_id"]
    assert submitted["application"]["cover_letter"] == "I love APIs"

    again = student.post(f"/student/jobs/{job['job_id']}/apply", json={})
    assert again.status_code == 409
    assert again.json()["detail"] == "You have already applied to this job"

    card = student.get("/student/jobs").json()["jobs"][0]
    assert card["has_applied"] is True
    assert card["can_apply"] is False

    detail = student.get(f"/student/jobs/{job['job_id']}").json()
    assert detail["has_applied"] is True
    assert detail["company_name"] == "Acme"


def test_apply_to_unknown_job(student):
    response = student.post("/student/jobs/does-not-exist/apply", json={})
    assert response.status_code == 404


def test_job_details_not_found(student):
    response = student.get("/student/jobs/does-not-exist")
    assert response.status_code == 404
    assert response.json()["detail"] == "Job not found"


def test_my_applications_lists_job_and_company(student, recruiter):
    create_company(recruiter, name="Initech")
    job = post_job(recruiter, title="QA Engineer")
    student.post(f"/student/jobs/{job['job_id']}/apply", json={})

    page = student.get("/student/applications").json()
    assert len(page["applications"]) == 1
    view = page["applications"][0]
    assert view["job_title"] == "QA Engineer"
    assert view["company_name"] == "Initech"
    assert view["job_location"] == "Remote"
    assert view["status"] == "pending"
    assert view["status_style"] == "warning"


def test_applications_are_private(student, recruiter, new_client):
    from conftest import signup_student

    create_company(recruiter)
    job = post_job(recruiter)
    student.post(f"/student/jobs/{job['job_id']}/apply", json={})

    other = new_client()
    signup_student(other, name="Bob")
    assert other.get("/student/applications").json()["applications"] == []
    assert other.get("/student/jobs").json()["jobs"][0]["has_applied"] is False


def test_board_fetch_failure_returns_empty_page_with_notice(student, monkeypatch):
    from talenttrek.core.errors import DataFetchError
    from talenttrek.services.record_service import get_record_service

    def broken():
        raise DataFetchError("Failed to load job data.")

    monkeypatch.setattr(get_record_service().jobs, "list_all", broken)
    page = student.get("/student/jobs").json()
    assert page["jobs"] == []
    assert page["notifications"] == [{"level": "error", "message": "Failed to load job data."}]


def test_pending_copy_is_reconciled_by_client_ref(student, recruiter):
    from talenttrek.schemas.schemas import SyncState

    create_company(recruiter)
    job = post_job(recruiter)
    local = {"client_ref": "tmp-42", "job_id": job["job_id"], "sync_state": SyncState.pending_sync.value}

    submitted = student.post(
        f"/student/jobs/{job['job_id']}/apply", json={"client_ref": local["client_ref"]}
    ).json()

    assert submitted["client_ref"] == local["client_ref"]
    assert submitted["sync_state"] == SyncState.confirmed.value != local["sync_state"]
    assert submitted["application"]["application_id"] != local["client_ref"]
    assert submitted["application"]["job_id"] == local["job_id"]
