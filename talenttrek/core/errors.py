"""
Error taxonomy.

Services raise these; main.py turns them into JSON responses carrying a
dismissible notification. Routes still raise HTTPException for plain
validation and ownership failures.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse


class TalentTrekError(Exception):
    """Base error. `message` is safe to show to the user."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(TalentTrekError):
    """Credential exchange or account creation rejected by the identity service."""
    status_code = status.HTTP_400_BAD_REQUEST


class DataFetchError(TalentTrekError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class MutationError(TalentTrekError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class UploadError(TalentTrekError):
    status_code = status.HTTP_400_BAD_REQUEST


class QuestionGenerationError(TalentTrekError):
    status_code = status.HTTP_502_BAD_GATEWAY


class GuardRedirect(Exception):
    """Raised by route guards; rendered as a 303 to `location`."""

    def __init__(self, location: str):
        super().__init__(location)
        self.location = location


async def talenttrek_error_handler(request: Request, exc: TalentTrekError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "notification": {"level": "error", "message": exc.message},
        },
    )


async def guard_redirect_handler(request: Request, exc: GuardRedirect) -> RedirectResponse:
    return RedirectResponse(exc.location, status_code=status.HTTP_303_SEE_OTHER)
