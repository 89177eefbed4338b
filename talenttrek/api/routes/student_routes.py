"""
Student Routes (role: student)

GET  /student/jobs                 - Job board with free-text search
GET  /student/jobs/{job_id}        - Job details
POST /student/jobs/{job_id}/apply  - Apply with optional cover letter
GET  /student/applications         - My applications
GET  /student/generate             - Interview question page
POST /student/generate             - Generate interview questions for a job title
GET  /student/account              - Profile
PUT  /student/account/profile      - Save profile changes
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile
from starlette.concurrency import run_in_threadpool

from talenttrek.core.errors import DataFetchError
from talenttrek.core.guards import require_role
from talenttrek.core.session import Session, SessionContext, get_session_context
from talenttrek.schemas.schemas import (
    AccountPage, ApplicationCreate, ApplicationResponse, ApplicationSubmitted, JobBoardPage,
    JobDetailPage, JobResponse, MyApplicationsPage, Notification, NotificationLevel,
    ProfileUpdateResult, QuestionRequest, QuestionSet, Role, SyncState
)
from talenttrek.services.aggregation import build_job_cards, build_student_applications, filter_job_cards
from talenttrek.services.identity_service import IdentityService, get_identity_service
from talenttrek.services.profile_service import save_profile
from talenttrek.services.question_service import QuestionGenerator, get_question_generator
from talenttrek.services.record_service import RecordService, get_record_service
from talenttrek.services.storage_service import ObjectStorage, get_object_storage
from talenttrek.ui.layout import layout_for

router = APIRouter(prefix="/student", tags=["Students"])
logger = logging.getLogger(__name__)

student_only = require_role(Role.student)


def _error(message: str) -> Notification:
    return Notification(level=NotificationLevel.error, message=message)


@router.get("/jobs", response_model=JobBoardPage)
async def job_board(
    request: Request,
    q: str = Query("", description="Search title, description, location or company"),
    session: Session = Depends(student_only),
    records: RecordService = Depends(get_record_service)
):
    """
    All jobs, newest first, each with its company name and whether
    the student has already applied.

    Companies, jobs and the student's applications are fetched
    concurrently and merged in memory.
    """
    layout = layout_for(Role.student, request.url.path)
    try:
        companies, jobs, applications = await asyncio.gather(
            run_in_threadpool(records.companies.list_all),
            run_in_threadpool(records.jobs.list_all),
            run_in_threadpool(records.applications.list_for_user, session.user_id)
        )
    except DataFetchError as e:
        logger.error("Error fetching job board data: %s", e.message)
        return JobBoardPage(layout=layout, search=q, notifications=[_error("Failed to load job data.")])

    cards = filter_job_cards(build_job_cards(jobs, companies, applications), q)
    return JobBoardPage(layout=layout, search=q, jobs=cards, total=len(cards))


@router.get("/jobs/{job_id}", response_model=JobDetailPage)
async def job_details(
    job_id: str,
    request: Request,
    session: Session = Depends(student_only),
    records: RecordService = Depends(get_record_service)
):
    job, applications = await asyncio.gather(
        run_in_threadpool(records.jobs.get, job_id),
        run_in_threadpool(records.applications.list_for_user, session.user_id)
    )
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    company = records.companies.get(job["company_id"])
    has_applied = any(app["job_id"] == job_id for app in applications)
    return JobDetailPage(
        layout=layout_for(Role.student, request.url.path),
        job=JobResponse(**job),
        company_name=company["name"] if company else "Unknown Company",
        has_applied=has_applied,
        can_apply=not has_applied
    )


@router.post("/jobs/{job_id}/apply", response_model=ApplicationSubmitted, status_code=201)
async def apply_to_job(
    job_id: str,
    application: ApplicationCreate,
    session: Session = Depends(student_only),
    records: RecordService = Depends(get_record_service)
):
    """
    Apply to a job. Cannot apply twice to the same job.

    The stored record comes back with the server-assigned id together
    with the caller's `client_ref`, so a client holding a pending copy
    can swap it for the confirmed one.
    """
    if not records.jobs.get(job_id):
        raise HTTPException(status_code=404, detail="Job not found")

    mine = records.applications.list_for_user(session.user_id)
    if any(app["job_id"] == job_id for app in mine):
        raise HTTPException(status_code=409, detail="You have already applied to this job")

    row = records.applications.create(job_id, session.user_id, application.cover_letter)
    logger.info("Application %s submitted for job %s", row["application_id"], job_id)

    return ApplicationSubmitted(
        application=ApplicationResponse(**row),
        client_ref=application.client_ref,
        sync_state=SyncState.confirmed
    )


@router.get("/applications", response_model=MyApplicationsPage)
async def my_applications(
    request: Request,
    session: Session = Depends(student_only),
    records: RecordService = Depends(get_record_service)
):
    """Student's applications, newest first, with job and company details."""
    layout = layout_for(Role.student, request.url.path)
    try:
        applications, jobs, companies = await asyncio.gather(
            run_in_threadpool(records.applications.list_for_user, session.user_id),
            run_in_threadpool(records.jobs.list_all),
            run_in_threadpool(records.companies.list_all)
        )
    except DataFetchError as e:
        logger.error("Error fetching applications: %s", e.message)
        return MyApplicationsPage(layout=layout, notifications=[_error("Failed to load your applications.")])

    return MyApplicationsPage(
        layout=layout,
        applications=build_student_applications(applications, jobs, companies)
    )


@router.get("/generate")
async def question_page(request: Request, session: Session = Depends(student_only)):
    return {"page": "generate", "layout": layout_for(Role.student, request.url.path)}


@router.post("/generate", response_model=QuestionSet)
async def generate_questions(
    body: QuestionRequest,
    session: Session = Depends(student_only),
    generator: QuestionGenerator = Depends(get_question_generator)
):
    """Generate interview questions with model answers for a job title."""
    job_title = body.job_title.strip()
    if not job_title:
        raise HTTPException(status_code=400, detail="Please enter a job title")

    questions = await run_in_threadpool(generator.generate, job_title)
    return QuestionSet(job_title=job_title, questions=questions)


@router.get("/account", response_model=AccountPage)
async def account(request: Request, session: Session = Depends(student_only)):
    return AccountPage(
        layout=layout_for(Role.student, request.url.path),
        profile=session.user.to_response()
    )


@router.put("/account/profile", response_model=ProfileUpdateResult)
async def update_profile(
    name: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    linkedin: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    session: Session = Depends(student_only),
    context: SessionContext = Depends(get_session_context),
    identity_service: IdentityService = Depends(get_identity_service),
    storage: ObjectStorage = Depends(get_object_storage)
):
    """Update name/phone/linkedin and optionally upload a new profile photo."""
    return await save_profile(
        session, context, identity_service, storage,
        name=name, phone=phone, linkedin=linkedin, photo=photo
    )
