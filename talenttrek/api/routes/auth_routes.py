"""
Authentication Routes

GET  /signin  - Sign-in page (signed-in users are sent to their landing page)
POST /signin  - Credential exchange, sets the session cookie
GET  /signup  - Sign-up page
POST /signup  - Create account (resume upload first for students)
POST /signout - Clear the session cookie
GET  /session - Current session, if any
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError

from talenttrek.core.auth import clear_session_cookie, create_access_token, set_session_cookie
from talenttrek.core.errors import AuthError, UploadError
from talenttrek.core.guards import redirect_authenticated
from talenttrek.core.session import SessionContext, get_session_context, landing_route_for
from talenttrek.schemas.schemas import AuthPage, Role, SessionResponse, SignUpRequest
from talenttrek.services.identity_service import Identity, IdentityService, get_identity_service
from talenttrek.services.storage_service import ObjectStorage, get_object_storage
from talenttrek.utils.file_upload import has_file, read_resume

router = APIRouter(tags=["Authentication"])
logger = logging.getLogger(__name__)


def _inline_error(page: str, message: str, code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    return JSONResponse(status_code=code, content=AuthPage(page=page, error=message).model_dump())


def _signed_in_redirect(identity: Identity) -> RedirectResponse:
    token = create_access_token(data={"sub": identity.id, "role": identity.role.value if identity.role else None})
    response = RedirectResponse(landing_route_for(identity.role), status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, token)
    return response


@router.get("/signin", response_model=AuthPage)
async def signin_page(next_path: Optional[str] = Query(None, alias="next"), _=Depends(redirect_authenticated)):
    """Sign-in form. `next` is the page the user was bounced from."""
    return AuthPage(page="signin", next=next_path)


@router.post("/signin")
async def signin(
    email: str = Form(...),
    password: str = Form(...),
    _=Depends(redirect_authenticated),
    identity_service: IdentityService = Depends(get_identity_service)
):
    """
    Exchange credentials for a session.

    On failure the error is returned inline and nothing else happens.
    """
    try:
        identity = identity_service.sign_in(email, password)
    except AuthError as e:
        return _inline_error("signin", e.message)

    logger.info("Signed in %s", identity.email)
    return _signed_in_redirect(identity)


@router.get("/signup", response_model=AuthPage)
async def signup_page(_=Depends(redirect_authenticated)):
    return AuthPage(page="signup")


@router.post("/signup")
async def signup(
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    phone: str = Form(...),
    linkedin: str = Form(...),
    role: str = Form("student"),
    resume: Optional[UploadFile] = File(None),
    _=Depends(redirect_authenticated),
    identity_service: IdentityService = Depends(get_identity_service),
    storage: ObjectStorage = Depends(get_object_storage)
):
    """
    Create an account.

    Process:
    1. Validate fields; role must be student or recruiter
    2. Students must attach a resume; it is uploaded before anything else
    3. Create the account with the profile metadata
    4. Only then sign in and redirect to the role's landing page
    """
    try:
        form = SignUpRequest(
            name=name, email=email, password=password,
            phone=phone, linkedin=linkedin, role=Role.parse(role) or role
        )
    except ValidationError as e:
        first = e.errors()[0]
        field = first["loc"][0] if first["loc"] else "form"
        return _inline_error("signup", f"Invalid {field}: {first['msg']}", status.HTTP_422_UNPROCESSABLE_ENTITY)

    resume_url = None
    if form.role is Role.student:
        if not has_file(resume):
            return _inline_error("signup", "Please upload your resume")
        try:
            content, filename, content_type = await read_resume(resume)
            resume_url = storage.upload(filename, content, content_type)
        except UploadError as e:
            return _inline_error("signup", f"Failed to upload resume: {e.message}")

    try:
        identity = identity_service.sign_up(
            form.email,
            form.password,
            {
                "name": form.name,
                "phone": form.phone,
                "linkedin": form.linkedin,
                "resume": resume_url,
                "role": form.role.value,
            }
        )
    except AuthError as e:
        return _inline_error("signup", e.message)

    return _signed_in_redirect(identity)


@router.post("/signout")
async def signout():
    response = RedirectResponse("/signin", status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookie(response)
    return response


@router.get("/session", response_model=SessionResponse)
async def current_session(context: SessionContext = Depends(get_session_context)):
    """Who is signed in, and where they land."""
    session = context.resolve()
    if session is None:
        return SessionResponse(authenticated=False)
    return SessionResponse(
        authenticated=True,
        user=session.user.to_response(),
        landing_route=landing_route_for(session.role)
    )
