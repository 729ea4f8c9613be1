"""Map the exception taxonomy onto HTTP responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from teamtrack.core.auth.jwt import TokenError
from teamtrack.core.exceptions import (
    AccountLockedError,
    ApplicationError,
    AuthError,
    DomainError,
    NotFoundError,
    PermissionDeniedError,
    TeamtrackError,
)

logger = structlog.get_logger()

# Most specific first: AccountLockedError is also an AuthError.
STATUS_BY_ERROR: list[tuple[type[TeamtrackError], int]] = [
    (AccountLockedError, 429),
    (AuthError, 401),
    (TokenError, 401),
    (PermissionDeniedError, 403),
    (NotFoundError, 404),
    (DomainError, 409),
    (ApplicationError, 500),
]


def status_for(error: TeamtrackError) -> int:
    """HTTP status code for a taxonomy error. Unlisted errors map to 500."""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return 500


async def teamtrack_error_handler(request: Request, exc: TeamtrackError) -> JSONResponse:
    """Render a TeamtrackError as a JSON error body."""
    status_code = status_for(exc)
    # Internal failures never leak their cause to the client.
    message = "Internal server error" if status_code == 500 else str(exc)

    if status_code == 500:
        logger.error("request_failed", path=request.url.path, error=str(exc))
    else:
        logger.info("request_rejected", path=request.url.path, status_code=status_code)

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": type(exc).__name__, "message": message}},
        headers=headers,
    )


def install_exception_handlers(app: FastAPI) -> None:
    """Register the taxonomy handler on an application."""
    app.add_exception_handler(TeamtrackError, teamtrack_error_handler)
