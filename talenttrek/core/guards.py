"""
Route guards.

require_role(role) protects the student and recruiter pages;
redirect_authenticated keeps signed-in users away from /signin and /signup.
Both raise GuardRedirect, which main.py renders as a 303.
"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import Depends, Request

from talenttrek.core.errors import GuardRedirect
from talenttrek.core.session import Session, SessionContext, get_session_context, landing_route_for
from talenttrek.schemas.schemas import Role

logger = logging.getLogger(__name__)


def signin_location(request: Request) -> str:
    """/signin with the attempted path kept in `next`."""
    attempted = request.url.path
    if request.url.query:
        attempted = f"{attempted}?{request.url.query}"
    return f"/signin?next={quote(attempted, safe='/')}"


def require_role(role: Role):
    """
    Dependency factory for protected pages.

    Usage:
        @router.get("/jobs")
        async def jobs(session: Session = Depends(require_role(Role.student))):
            ...
    """
    async def guard(
        request: Request,
        context: SessionContext = Depends(get_session_context)
    ) -> Session:
        session = context.resolve()
        if session is None:
            raise GuardRedirect(signin_location(request))
        if session.role is not role:
            current = session.role.value if session.role else None
            logger.info(
                "Access denied: user role (%s) doesn't match required role (%s)",
                current, role.value
            )
            raise GuardRedirect("/")
        return session

    return guard


async def redirect_authenticated(
    context: SessionContext = Depends(get_session_context)
) -> Optional[Session]:
    """Dependency for the sign-in/sign-up pages."""
    session = context.resolve()
    if session is not None:
        raise GuardRedirect(landing_route_for(session.role))
    return None
