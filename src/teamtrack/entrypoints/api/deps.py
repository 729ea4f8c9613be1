"""Request authentication dependencies.

Access tokens arrive as a bearer header or an ``access_token`` cookie.
Refresh tokens only travel in the ``refresh_token`` cookie. Both are
verified against their own purpose, so a refresh token presented as a
bearer credential is rejected like any other invalid token.
"""

from dataclasses import dataclass
from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from teamtrack.core.auth.jwt import TokenError, TokenService
from teamtrack.core.auth.types import TokenPurpose

logger = structlog.get_logger()

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"

# Use Bearer token authentication, falling back to cookies
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class Principal:
    """The authenticated caller of a request."""

    user_id: str
    purpose: TokenPurpose


def get_token_service(request: Request) -> TokenService:
    """Return the TokenService wired onto the application state.

    Raises:
        RuntimeError: If the application was started without one.
    """
    service = getattr(request.app.state, "token_service", None)
    if service is None:
        raise RuntimeError("app.state.token_service is not configured")
    return service


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _authenticate(tokens: TokenService, token: str | None, purpose: TokenPurpose) -> Principal:
    if not token:
        raise _unauthorized("Missing authentication token")

    try:
        claims = tokens.verify(token, purpose)
    except TokenError as e:
        logger.warning("token_validation_failed", purpose=purpose.value, error=str(e))
        raise _unauthorized(str(e)) from None

    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject:
        logger.warning("token_missing_subject", purpose=purpose.value)
        raise _unauthorized("Invalid token")

    return Principal(user_id=subject, purpose=purpose)


async def get_principal(
    request: Request,
    tokens: Annotated[TokenService, Depends(get_token_service)],
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),  # noqa: B008
) -> Principal:
    """Verify the access token and return the caller.

    The bearer header wins over the ``access_token`` cookie when both
    are present.

    Raises:
        HTTPException: 401 if the token is missing or invalid.
    """
    token = credentials.credentials if credentials else request.cookies.get(ACCESS_COOKIE)
    principal = _authenticate(tokens, token, TokenPurpose.ACCESS)

    # Store in request state for downstream use
    request.state.principal = principal
    logger.debug("access_token_verified", user_id=principal.user_id)
    return principal


async def get_refresh_principal(
    request: Request,
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> Principal:
    """Verify the refresh token cookie and return its subject.

    Raises:
        HTTPException: 401 if the cookie is missing or invalid.
    """
    return _authenticate(tokens, request.cookies.get(REFRESH_COOKIE), TokenPurpose.REFRESH)


CurrentPrincipal = Annotated[Principal, Depends(get_principal)]
RefreshPrincipal = Annotated[Principal, Depends(get_refresh_principal)]
