"""
Session context - the one place the current session is read.

One SessionContext per request (FastAPI caches dependencies per request),
shared by the guards and the page controllers. Resolution is lazy and
cached; invalidate() drops the cache and tells subscribers, so a page that
changes profile metadata sees fresh data on the next read.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials

from talenttrek.core.auth import bearer_scheme, cookie_scheme, decode_token
from talenttrek.schemas.schemas import Role
from talenttrek.services.identity_service import Identity, IdentityService, get_identity_service

logger = logging.getLogger(__name__)

STUDENT_LANDING = "/student/jobs"
RECRUITER_LANDING = "/recruiter/dashboard"


def landing_route_for(role: Optional[Role]) -> str:
    """Students land on the job board, everyone else on the recruiter dashboard."""
    return STUDENT_LANDING if role is Role.student else RECRUITER_LANDING


@dataclass
class Session:
    user: Identity
    access_token: str

    @property
    def user_id(self) -> str:
        return self.user.id

    @property
    def role(self) -> Optional[Role]:
        return self.user.role


class SessionContext:
    _UNRESOLVED = object()

    def __init__(self, token: Optional[str], identity_service: IdentityService):
        self.token = token
        self.identity_service = identity_service
        self._session = self._UNRESOLVED
        self._subscribers: List[Callable[[Optional[Session]], None]] = []

    def subscribe(self, callback: Callable[[Optional[Session]], None]) -> Callable[[], None]:
        """Register a listener for refreshed sessions. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def resolve(self) -> Optional[Session]:
        if self._session is self._UNRESOLVED:
            self._session = self._load()
        return self._session

    def invalidate(self) -> Optional[Session]:
        """Drop the cached session, re-resolve it and notify subscribers."""
        self._session = self._UNRESOLVED
        session = self.resolve()
        for callback in list(self._subscribers):
            callback(session)
        return session

    def _load(self) -> Optional[Session]:
        # Any failure here means "not signed in"
        if not self.token:
            return None
        try:
            payload = decode_token(self.token)
            if not payload or not payload.get("sub"):
                return None
            user = self.identity_service.get_user(payload["sub"])
        except Exception as e:
            logger.debug("Session resolution failed: %s", e)
            return None
        if user is None:
            return None
        return Session(user=user, access_token=self.token)


def get_session_context(
    cookie_token: Optional[str] = Depends(cookie_scheme),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity_service: IdentityService = Depends(get_identity_service)
) -> SessionContext:
    """FastAPI dependency - the request's session context. The session cookie wins over a Bearer header."""
    token = cookie_token or (credentials.credentials if credentials else None)
    return SessionContext(token, identity_service)
