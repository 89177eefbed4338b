"""
Recruiter Routes (role: recruiter)

GET    /recruiter/dashboard                         - Counts, recent jobs, recent applicants
GET    /recruiter/jobs/{job_id}                     - Job details
DELETE /recruiter/jobs/{job_id}                     - Delete job posting
GET    /recruiter/post                              - Post-job form (company selector)
POST   /recruiter/post                              - Create job posting
GET    /recruiter/applications                      - Applications on my jobs (filters)
GET    /recruiter/applications/{id}                 - Application details
PUT    /recruiter/applications/{id}/status          - Update application status
DELETE /recruiter/applications/{id}?confirm=true    - Delete application
"""

import asyncio
import logging
from datetime import date
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from starlette.concurrency import run_in_threadpool

from talenttrek.core.config import get_settings
from talenttrek.core.errors import DataFetchError
from talenttrek.core.guards import require_role
from talenttrek.core.session import Session
from talenttrek.schemas.schemas import (
    ApplicationDetail, ApplicationsPage, ApplicationStatusUpdate, CompanyOption, CompanyResponse,
    DashboardPage, JobCreate, JobResponse, MessageResponse, Notification, NotificationLevel,
    PostJobPage, RecruiterJobDetail, Role
)
from talenttrek.services.aggregation import (
    STATUS_OPTIONS, build_application_details, filter_application_details
)
from talenttrek.services.identity_service import IdentityResolver, IdentityService, get_identity_service
from talenttrek.services.record_service import RecordService, get_record_service
from talenttrek.ui.layout import layout_for

settings = get_settings()
router = APIRouter(prefix="/recruiter", tags=["Recruiters"])
logger = logging.getLogger(__name__)

recruiter_only = require_role(Role.recruiter)

CREATE_COMPANY_PROMPT = "You need to create a company profile first."


def _notice(level: NotificationLevel, message: str) -> Notification:
    return Notification(level=level, message=message)


def _owned_job(records: RecordService, session: Session, job_id: str) -> Tuple[dict, dict]:
    """Job plus its company, 404 unless the company belongs to the caller."""
    job = records.jobs.get(job_id)
    company = records.companies.get(job["company_id"]) if job else None
    if not job or not company or company["user_id"] != session.user_id:
        raise HTTPException(status_code=404, detail="Job not found")
    return job, company


def _owned_application(records: RecordService, session: Session, application_id: str) -> Tuple[dict, dict, dict]:
    application = records.applications.get(application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    job = records.jobs.get(application["job_id"])
    company = records.companies.get(job["company_id"]) if job else None
    if not company or company["user_id"] != session.user_id:
        raise HTTPException(status_code=404, detail="Application not found")
    return application, job, company


# ============================================================
# DASHBOARD
# ============================================================

@router.get("/dashboard", response_model=DashboardPage)
async def dashboard(
    request: Request,
    session: Session = Depends(recruiter_only),
    records: RecordService = Depends(get_record_service),
    identity_service: IdentityService = Depends(get_identity_service)
):
    """
    Companies -> owned jobs -> recent applications -> applicant identities.

    Applicants are resolved with one batched identity lookup.
    """
    layout = layout_for(Role.recruiter, request.url.path)
    try:
        companies = records.companies.list_for_user(session.user_id)
        if not companies:
            return DashboardPage(
                layout=layout,
                notifications=[_notice(NotificationLevel.warning, "No companies found for this recruiter.")]
            )

        company_ids = [c["company_id"] for c in companies]
        owned_jobs = records.jobs.list_for_companies(company_ids)
        job_ids = [j["job_id"] for j in owned_jobs]

        applications_count, recent_applications = await asyncio.gather(
            run_in_threadpool(records.applications.count_for_jobs, job_ids),
            run_in_threadpool(
                records.applications.list_for_jobs, job_ids, settings.dashboard_recent_applications
            )
        )
        details = build_application_details(
            recent_applications, owned_jobs, companies, IdentityResolver(identity_service)
        )
    except DataFetchError as e:
        logger.error("Error fetching dashboard data: %s", e.message)
        return DashboardPage(
            layout=layout,
            notifications=[_notice(NotificationLevel.error, "Failed to load dashboard data. Please try again.")]
        )

    return DashboardPage(
        layout=layout,
        jobs_count=len(owned_jobs),
        applications_count=applications_count,
        companies=[CompanyResponse(**c) for c in companies],
        recent_jobs=[JobResponse(**j) for j in owned_jobs[:settings.dashboard_recent_jobs]],
        recent_applications=details
    )


@router.get("/jobs/{job_id}", response_model=RecruiterJobDetail)
async def job_details(
    job_id: str,
    request: Request,
    session: Session = Depends(recruiter_only),
    records: RecordService = Depends(get_record_service)
):
    job, company = _owned_job(records, session, job_id)
    return RecruiterJobDetail(
        layout=layout_for(Role.recruiter, request.url.path),
        job=JobResponse(**job),
        company_name=company["name"]
    )


@router.delete("/jobs/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: str,
    session: Session = Depends(recruiter_only),
    records: RecordService = Depends(get_record_service)
):
    """Delete a job posting. Cascades to its applications."""
    _owned_job(records, session, job_id)
    records.jobs.delete(job_id)
    return MessageResponse(message="Job post deleted successfully.")


# ============================================================
# POST JOB
# ============================================================

def _company_options(companies: List[dict]) -> List[CompanyOption]:
    return [CompanyOption(company_id=c["company_id"], name=c["name"]) for c in companies]


@router.get("/post", response_model=PostJobPage)
async def post_job_page(
    request: Request,
    session: Session = Depends(recruiter_only),
    records: RecordService = Depends(get_record_service)
):
    """Company selector limited to the recruiter's own companies."""
    layout = layout_for(Role.recruiter, request.url.path)
    try:
        companies = records.companies.list_for_user(session.user_id)
    except DataFetchError as e:
        logger.error("Error fetching companies: %s", e.message)
        return PostJobPage(
            layout=layout,
            notifications=[_notice(NotificationLevel.error, "Failed to load company data. Please try again.")]
        )

    if not companies:
        return PostJobPage(layout=layout, prompt=CREATE_COMPANY_PROMPT, can_submit=False)

    return PostJobPage(
        layout=layout,
        companies=_company_options(companies),
        selected_company_id=companies[0]["company_id"] if len(companies) == 1 else None,
        can_submit=True
    )


@router.post("/post", response_model=JobResponse, status_code=201)
async def post_job(
    job: JobCreate,
    session: Session = Depends(recruiter_only),
    records: RecordService = Depends(get_record_service)
):
    """Create a job under one of the recruiter's companies."""
    companies = records.companies.list_for_user(session.user_id)
    if not companies:
        raise HTTPException(status_code=400, detail=CREATE_COMPANY_PROMPT)

    company_id = job.company_id
    if not company_id and len(companies) == 1:
        company_id = companies[0]["company_id"]
    if not company_id:
        raise HTTPException(status_code=400, detail="Please select a company")
    if company_id not in {c["company_id"] for c in companies}:
        raise HTTPException(status_code=403, detail="You can only post jobs for your own companies")

    row = records.jobs.create(
        company_id=company_id,
        title=job.title,
        description=job.description,
        requirements=job.requirements,
        salary=job.salary,
        location=job.location
    )
    logger.info("Job %s posted under company %s", row["job_id"], company_id)
    return JobResponse(**row)


# ============================================================
# APPLICATIONS
# ============================================================

@router.get("/applications", response_model=ApplicationsPage)
async def applications(
    request: Request,
    status: str = Query("all", description="all, pending, interview, accepted or rejected"),
    applied_on: Optional[date] = Query(None, alias="date"),
    q: str = Query("", description="Search applicant, job, status or company"),
    session: Session = Depends(recruiter_only),
    records: RecordService = Depends(get_record_service),
    identity_service: IdentityService = Depends(get_identity_service)
):
    """All applications received on the recruiter's jobs, newest first."""
    layout = layout_for(Role.recruiter, request.url.path)
    page = ApplicationsPage(
        layout=layout,
        status_options=STATUS_OPTIONS,
        filter_status=status.lower(),
        filter_date=applied_on.isoformat() if applied_on else None,
        search=q
    )
    try:
        companies = records.companies.list_for_user(session.user_id)
        jobs = records.jobs.list_for_companies([c["company_id"] for c in companies])
        rows = records.applications.list_for_jobs([j["job_id"] for j in jobs])
        details = build_application_details(rows, jobs, companies, IdentityResolver(identity_service))
    except DataFetchError as e:
        logger.error("Error fetching applications: %s", e.message)
        page.notifications = [
            _notice(NotificationLevel.error, "Failed to load job applications. Please try again.")
        ]
        return page

    page.applications = filter_application_details(details, status, applied_on, q)
    return page


def _detail(identity_service: IdentityService, application: dict, job: dict, company: dict) -> ApplicationDetail:
    return build_application_details(
        [application], [job], [company], IdentityResolver(identity_service)
    )[0]


@router.get("/applications/{application_id}", response_model=ApplicationDetail)
async def application_details(
    application_id: str,
    session: Session = Depends(recruiter_only),
    records: RecordService = Depends(get_record_service),
    identity_service: IdentityService = Depends(get_identity_service)
):
    application, job, company = _owned_application(records, session, application_id)
    return _detail(identity_service, application, job, company)


@router.put("/applications/{application_id}/status", response_model=ApplicationDetail)
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    session: Session = Depends(recruiter_only),
    records: RecordService = Depends(get_record_service),
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Move an application to pending, interview, accepted or rejected."""
    application, job, company = _owned_application(records, session, application_id)
    records.applications.update_status(application_id, update.status.value)
    logger.info("Application %s status -> %s", application_id, update.status.value)

    application["status"] = update.status.value
    return _detail(identity_service, application, job, company)


@router.delete("/applications/{application_id}", response_model=MessageResponse)
async def delete_application(
    application_id: str,
    confirm: bool = Query(False),
    session: Session = Depends(recruiter_only),
    records: RecordService = Depends(get_record_service)
):
    """Delete an application. Requires confirm=true."""
    _owned_application(records, session, application_id)
    if not confirm:
        raise HTTPException(status_code=409, detail="Please confirm deletion of this application")

    records.applications.delete(application_id)
    return MessageResponse(message="Application deleted successfully")
