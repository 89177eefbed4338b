"""
Aggregation - in-memory stitching of independently fetched rows.

The store never joins: jobs reference companies by id, applications
reference jobs and users by id. These helpers merge the fetched lists
into the view models the pages return, and apply the client-side
filters. Pure functions, no I/O except through the identity resolver.
"""

from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from talenttrek.schemas.schemas import (
    ApplicationDetail, ApplicationStatus, CompanyResponse, JobCard,
    StudentApplicationView, UserMetadata
)
from talenttrek.services.identity_service import IdentityResolver, PROFILE_FIELDS

STATUS_STYLES = {
    "accepted": "success",
    "rejected": "danger",
    "pending": "warning",
    "interview": "info",
}

STATUS_OPTIONS = ["all"] + [s.value for s in ApplicationStatus]


def status_style(status: Optional[str]) -> str:
    """Display style for a status; unknown values fall back to neutral."""
    return STATUS_STYLES.get((status or "").strip().lower(), "neutral")


def salary_label(salary: Optional[float]) -> str:
    if not salary:
        return "Salary TBD"
    return f"${salary:,.0f} / yr"


def index_by(rows: Iterable[dict], key: str) -> Dict[str, dict]:
    return {row[key]: row for row in rows}


def _contains(value: Optional[str], needle: str) -> bool:
    return bool(value) and needle in value.lower()


# ============================================================
# STUDENT JOB BOARD
# ============================================================

def build_job_cards(jobs: List[dict], companies: List[dict], my_applications: List[dict]) -> List[JobCard]:
    """Attach company name and applied flag to each job, order preserved."""
    company_by_id = index_by(companies, "company_id")
    applied_job_ids = {app["job_id"] for app in my_applications}

    cards = []
    for job in jobs:
        company = company_by_id.get(job["company_id"])
        has_applied = job["job_id"] in applied_job_ids
        cards.append(JobCard(
            **job,
            company_name=company["name"] if company else "Unknown Company",
            has_applied=has_applied,
            can_apply=not has_applied,
            salary_label=salary_label(job.get("salary"))
        ))
    return cards


def filter_job_cards(cards: List[JobCard], search: str) -> List[JobCard]:
    """Case-insensitive substring match on title, description, location, company."""
    needle = (search or "").strip().lower()
    if not needle:
        return cards
    return [
        card for card in cards
        if _contains(card.title, needle)
        or _contains(card.description, needle)
        or _contains(card.location, needle)
        or _contains(card.company_name, needle)
    ]


def build_student_applications(applications: List[dict], jobs: List[dict],
                               companies: List[dict]) -> List[StudentApplicationView]:
    job_by_id = index_by(jobs, "job_id")
    company_by_id = index_by(companies, "company_id")

    views = []
    for app in applications:
        job = job_by_id.get(app["job_id"])
        company = company_by_id.get(job["company_id"]) if job else None
        views.append(StudentApplicationView(
            **app,
            job_title=job["title"] if job else "Unknown Job",
            job_location=job["location"] if job else None,
            company_name=company["name"] if company else "Unknown Company",
            status_style=status_style(app["status"])
        ))
    return views


# ============================================================
# RECRUITER APPLICATIONS
# ============================================================

def build_application_details(applications: List[dict], jobs: List[dict], companies: List[dict],
                              resolver: IdentityResolver) -> List[ApplicationDetail]:
    """
    Merge applications with job title, company and applicant identity.
    Applicant identities are resolved in one batch up front.
    """
    job_by_id = index_by(jobs, "job_id")
    company_by_id = index_by(companies, "company_id")
    resolver.resolve(app["user_id"] for app in applications)

    details = []
    for app in applications:
        job = job_by_id.get(app["job_id"])
        company = company_by_id.get(job["company_id"]) if job else None
        details.append(ApplicationDetail(
            **app,
            job_title=job["title"] if job else "Unknown Job",
            company=CompanyResponse(**company) if company else None,
            user=resolver.applicant(app["user_id"]),
            status_style=status_style(app["status"])
        ))
    return details


def _applied_on(value, day: date) -> bool:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return value.date() == day


def filter_application_details(details: List[ApplicationDetail], status: str = "all",
                               day: Optional[date] = None, search: str = "") -> List[ApplicationDetail]:
    wanted_status = (status or "all").strip().lower()
    needle = (search or "").strip().lower()

    result = []
    for detail in details:
        if wanted_status != "all" and detail.status.lower() != wanted_status:
            continue
        if day is not None and not _applied_on(detail.applied_at, day):
            continue
        if needle and not (
            _contains(detail.user.name if detail.user else None, needle)
            or _contains(detail.user.email if detail.user else None, needle)
            or _contains(detail.job_title, needle)
            or _contains(detail.status, needle)
            or _contains(detail.company.name if detail.company else None, needle)
        ):
            continue
        result.append(detail)
    return result


# ============================================================
# PROFILE
# ============================================================

def compute_profile_changes(current: UserMetadata, submitted: dict) -> dict:
    """
    Minimal diff of submitted profile fields against the stored snapshot.
    Fields not submitted (None) are left alone.
    """
    changes = {}
    for field in PROFILE_FIELDS:
        value = submitted.get(field)
        if value is None:
            continue
        if value != (getattr(current, field, None) or ""):
            changes[field] = value
    return changes
