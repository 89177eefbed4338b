"""
Pydantic Schemas - Request/Response Validation

All API request, response and page payload schemas in one file for simplicity.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class Role(str, Enum):
    student = "student"
    recruiter = "recruiter"

    @classmethod
    def parse(cls, value) -> Optional["Role"]:
        """Validate an untyped role value. Unknown values give None."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class ApplicationStatus(str, Enum):
    pending = "pending"
    interview = "interview"
    accepted = "accepted"
    rejected = "rejected"


class NotificationLevel(str, Enum):
    success = "success"
    info = "info"
    warning = "warning"
    error = "error"


class SyncState(str, Enum):
    """
    Reconciliation state of a client write.

    A client shows its unconfirmed copy as pending-sync, keyed by the
    client_ref it sends. The server only answers confirmed, carrying the
    same client_ref and the server-assigned id that replaces the local copy.
    """
    pending_sync = "pending-sync"
    confirmed = "confirmed"


# ============================================================
# SHARED
# ============================================================

class Notification(BaseModel):
    level: NotificationLevel
    message: str


class NavItem(BaseModel):
    name: str
    href: str
    active: bool = False


class Breadcrumb(BaseModel):
    label: str
    href: str
    is_last: bool = False


class LayoutShell(BaseModel):
    role: Role
    nav: List[NavItem] = []
    breadcrumbs: List[Breadcrumb] = []


class MessageResponse(BaseModel):
    message: str
    success: bool = True


# ============================================================
# AUTH / IDENTITY SCHEMAS
# ============================================================

class UserMetadata(BaseModel):
    """Profile bag stored with the identity. Unknown keys are kept."""
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = ""
    phone: Optional[str] = ""
    linkedin: Optional[str] = ""
    profilephoto: Optional[str] = ""
    resume: Optional[str] = None
    role: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    email: str
    name: str = ""
    phone: str = ""
    linkedin: str = ""
    profilephoto: str = ""
    resume: Optional[str] = None
    role: Optional[Role] = None


class SignUpRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: str = Field(..., min_length=1)
    linkedin: str = Field(..., min_length=1)
    role: Role


class SessionResponse(BaseModel):
    authenticated: bool
    user: Optional[UserResponse] = None
    landing_route: Optional[str] = None


class AuthPage(BaseModel):
    page: str
    error: Optional[str] = None
    next: Optional[str] = None


# ============================================================
# COMPANY SCHEMAS
# ============================================================

class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    location: str = Field(..., min_length=1, max_length=200)


class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = Field(None, min_length=1, max_length=200)


class CompanyResponse(BaseModel):
    company_id: str
    name: str
    description: Optional[str] = None
    location: str
    user_id: str
    created_at: datetime


class CompanyOption(BaseModel):
    company_id: str
    name: str


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(BaseModel):
    company_id: Optional[str] = None
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    requirements: str = Field(..., min_length=1)
    salary: Optional[float] = Field(None, ge=0)
    location: str = Field(..., min_length=1, max_length=200)


class JobResponse(BaseModel):
    job_id: str
    company_id: str
    title: str
    description: str
    requirements: str
    salary: Optional[float] = None
    location: str
    created_at: datetime


class JobCard(JobResponse):
    company_name: str
    has_applied: bool = False
    can_apply: bool = True
    salary_label: str


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    cover_letter: Optional[str] = None
    client_ref: Optional[str] = Field(None, max_length=64)


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus


class ApplicationResponse(BaseModel):
    application_id: str
    job_id: str
    user_id: str
    status: str
    applied_at: datetime
    cover_letter: Optional[str] = None


class ApplicationSubmitted(BaseModel):
    application: ApplicationResponse
    client_ref: Optional[str] = None
    sync_state: SyncState = SyncState.confirmed


class Applicant(BaseModel):
    id: str
    email: str = "N/A"
    name: str = "Unknown User"
    role: str = "user"
    phone: str = "N/A"
    linkedin: str = "#"
    profilephoto: str = ""


class ApplicationDetail(ApplicationResponse):
    job_title: str = "Unknown Job"
    company: Optional[CompanyResponse] = None
    user: Optional[Applicant] = None
    status_style: str = "neutral"


class StudentApplicationView(ApplicationResponse):
    job_title: str = "Unknown Job"
    job_location: Optional[str] = None
    company_name: str = "Unknown Company"
    status_style: str = "neutral"


# ============================================================
# PAGE PAYLOADS
# ============================================================

class JobBoardPage(BaseModel):
    layout: LayoutShell
    search: str = ""
    jobs: List[JobCard] = []
    total: int = 0
    notifications: List[Notification] = []


class JobDetailPage(BaseModel):
    layout: LayoutShell
    job: JobResponse
    company_name: str
    has_applied: bool
    can_apply: bool


class MyApplicationsPage(BaseModel):
    layout: LayoutShell
    applications: List[StudentApplicationView] = []
    notifications: List[Notification] = []


class DashboardPage(BaseModel):
    layout: LayoutShell
    jobs_count: int = 0
    applications_count: int = 0
    companies: List[CompanyResponse] = []
    recent_jobs: List[JobResponse] = []
    recent_applications: List[ApplicationDetail] = []
    notifications: List[Notification] = []


class RecruiterJobDetail(BaseModel):
    layout: LayoutShell
    job: JobResponse
    company_name: str


class PostJobPage(BaseModel):
    layout: LayoutShell
    companies: List[CompanyOption] = []
    selected_company_id: Optional[str] = None
    can_submit: bool = False
    prompt: Optional[str] = None
    notifications: List[Notification] = []


class ApplicationsPage(BaseModel):
    layout: LayoutShell
    applications: List[ApplicationDetail] = []
    status_options: List[str] = []
    filter_status: str = "all"
    filter_date: Optional[str] = None
    search: str = ""
    notifications: List[Notification] = []


class AccountPage(BaseModel):
    layout: LayoutShell
    profile: UserResponse
    companies: List[CompanyResponse] = []
    notifications: List[Notification] = []


class ProfileUpdateResult(BaseModel):
    profile: UserResponse
    updated_fields: List[str] = []
    notification: Notification


# ============================================================
# INTERVIEW QUESTIONS
# ============================================================

class QuestionRequest(BaseModel):
    job_title: str = ""


class InterviewQuestion(BaseModel):
    id: int
    question: str
    answer: str


class QuestionSet(BaseModel):
    job_title: str
    questions: List[InterviewQuestion] = []


# ============================================================
# LANDING PAGE
# ============================================================

class CallToAction(BaseModel):
    label: str
    href: str


class Feature(BaseModel):
    title: str
    description: str


class Testimonial(BaseModel):
    name: str
    role: str
    quote: str
    audience: str


class HomePage(BaseModel):
    headline: str
    tagline: str
    calls_to_action: List[CallToAction] = []
    student_features: List[Feature] = []
    recruiter_features: List[Feature] = []
    testimonials: List[Testimonial] = []
