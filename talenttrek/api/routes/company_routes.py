"""
Company & Recruiter Account Routes (role: recruiter)

GET    /recruiter/account                          - Profile and owned companies
PUT    /recruiter/account/profile                  - Save profile changes
POST   /recruiter/companies                        - Create company
PUT    /recruiter/companies/{company_id}           - Update company
DELETE /recruiter/companies/{company_id}?confirm=true - Delete company
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile

from talenttrek.core.errors import DataFetchError
from talenttrek.core.guards import require_role
from talenttrek.core.session import Session, SessionContext, get_session_context
from talenttrek.schemas.schemas import (
    AccountPage, CompanyCreate, CompanyResponse, CompanyUpdate, MessageResponse,
    Notification, NotificationLevel, ProfileUpdateResult, Role
)
from talenttrek.services.identity_service import IdentityService, get_identity_service
from talenttrek.services.profile_service import save_profile
from talenttrek.services.record_service import RecordService, get_record_service
from talenttrek.services.storage_service import ObjectStorage, get_object_storage
from talenttrek.ui.layout import layout_for

router = APIRouter(prefix="/recruiter", tags=["Companies"])
logger = logging.getLogger(__name__)

recruiter_only = require_role(Role.recruiter)


@router.get("/account", response_model=AccountPage)
async def account(
    request: Request,
    session: Session = Depends(recruiter_only),
    records: RecordService = Depends(get_record_service)
):
    """Recruiter profile plus the companies they own."""
    page = AccountPage(
        layout=layout_for(Role.recruiter, request.url.path),
        profile=session.user.to_response()
    )
    try:
        page.companies = [CompanyResponse(**c) for c in records.companies.list_for_user(session.user_id)]
    except DataFetchError as e:
        logger.error("Error fetching companies: %s", e.message)
        page.notifications = [Notification(
            level=NotificationLevel.error,
            message="Failed to load account data. Please try again."
        )]
    return page


@router.put("/account/profile", response_model=ProfileUpdateResult)
async def update_profile(
    name: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    linkedin: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    session: Session = Depends(recruiter_only),
    context: SessionContext = Depends(get_session_context),
    identity_service: IdentityService = Depends(get_identity_service),
    storage: ObjectStorage = Depends(get_object_storage)
):
    """Update name/phone/linkedin and optionally upload a new profile photo."""
    return await save_profile(
        session, context, identity_service, storage,
        name=name, phone=phone, linkedin=linkedin, photo=photo
    )


@router.post("/companies", response_model=CompanyResponse, status_code=201)
async def create_company(
    data: CompanyCreate,
    session: Session = Depends(recruiter_only),
    records: RecordService = Depends(get_record_service)
):
    """Create a company profile owned by the caller."""
    row = records.companies.create(
        user_id=session.user_id,
        name=data.name.strip(),
        description=data.description,
        location=data.location.strip()
    )
    logger.info("Company %s created by %s", row["company_id"], session.user_id)
    return CompanyResponse(**row)


@router.put("/companies/{company_id}", response_model=CompanyResponse)
async def update_company(
    company_id: str,
    data: CompanyUpdate,
    session: Session = Depends(recruiter_only),
    records: RecordService = Depends(get_record_service)
):
    """Update company profile. Only provided fields are updated."""
    row = records.companies.update(company_id, session.user_id, data.model_dump(exclude_none=True))
    if row is None:
        raise HTTPException(status_code=404, detail="Company not found")
    return CompanyResponse(**row)


@router.delete("/companies/{company_id}", response_model=MessageResponse)
async def delete_company(
    company_id: str,
    confirm: bool = Query(False),
    session: Session = Depends(recruiter_only),
    records: RecordService = Depends(get_record_service)
):
    """Delete a company and, with it, its jobs. Requires confirm=true."""
    company = records.companies.get(company_id)
    if not company or company["user_id"] != session.user_id:
        raise HTTPException(status_code=404, detail="Company not found")
    if not confirm:
        raise HTTPException(status_code=409, detail="Are you sure you want to delete this company? Repeat with confirm=true.")

    records.companies.delete(company_id, session.user_id)
    return MessageResponse(message="Company deleted successfully")
