"""JWT token creation and validation.

Tokens are purpose-typed: access, refresh, email verification and
password reset tokens are each signed with their own secret, and the
purpose is also embedded as a claim. A token therefore fails to verify
under any purpose other than the one it was issued for, even when the
signature is structurally valid.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

import jwt
import structlog

from teamtrack.core.auth.config import TokenConfig
from teamtrack.core.auth.types import TokenPurpose
from teamtrack.core.exceptions import TeamtrackError
from teamtrack.core.interfaces import Clock, system_clock

logger = structlog.get_logger()

PURPOSE_CLAIM = "purpose"
EXPIRY_CLAIM = "exp"
ISSUED_AT_CLAIM = "iat"
RESERVED_CLAIMS = frozenset({PURPOSE_CLAIM, EXPIRY_CLAIM, ISSUED_AT_CLAIM})


class TokenError(TeamtrackError):
    """Raised when token validation fails."""

    pass


class InvalidTokenError(TokenError):
    """Bad signature, malformed payload, or purpose mismatch."""

    pass


class ExpiredTokenError(TokenError):
    """Signature is valid but the expiry has passed."""

    pass


class TokenService:
    """Issues and verifies purpose-typed signed tokens.

    Usage:
        service = TokenService(TokenConfig.from_env())
        token = service.issue(TokenPurpose.ACCESS, {"sub": user_id})
        claims = service.verify(token, TokenPurpose.ACCESS)
    """

    def __init__(self, config: TokenConfig, clock: Clock = system_clock) -> None:
        """Initialize the token service.

        Args:
            config: Per-purpose secrets and default lifetimes.
            clock: Time source used for issue and expiry checks.
        """
        self._config = config
        self._clock = clock

    def default_ttl(self, purpose: TokenPurpose) -> timedelta:
        """Get the default lifetime for a purpose."""
        return self._config.settings_for(purpose).ttl

    def issue(
        self,
        purpose: TokenPurpose,
        claims: dict[str, Any],
        ttl: timedelta | None = None,
    ) -> str:
        """Create a signed token for a purpose.

        Args:
            purpose: What the token may be used for.
            claims: Custom claims, typically {"sub": user_id}.
            ttl: Lifetime override. Defaults to the purpose's configured TTL.

        Returns:
            Encoded JWT string.

        Raises:
            ValueError: If claims use a reserved name or ttl is negative.
        """
        purpose = TokenPurpose(purpose)
        reserved = RESERVED_CLAIMS.intersection(claims)
        if reserved:
            raise ValueError(f"Reserved claims cannot be set by callers: {sorted(reserved)}")

        settings = self._config.settings_for(purpose)
        lifetime = settings.ttl if ttl is None else ttl
        if lifetime < timedelta(0):
            raise ValueError("Token lifetime cannot be negative")

        now = self._clock()
        payload = {
            **claims,
            PURPOSE_CLAIM: purpose.value,
            ISSUED_AT_CLAIM: now.timestamp(),
            EXPIRY_CLAIM: (now + lifetime).timestamp(),
        }

        logger.debug("token_issued", purpose=purpose.value, ttl_seconds=lifetime.total_seconds())
        return jwt.encode(payload, settings.secret, algorithm=self._config.algorithm)

    def verify(self, token: str, purpose: TokenPurpose) -> dict[str, Any]:
        """Decode and validate a token for a purpose.

        Args:
            token: Encoded JWT string.
            purpose: The purpose the caller requires.

        Returns:
            The full claim set, including purpose and exp.

        Raises:
            InvalidTokenError: Bad signature, malformed payload or purpose mismatch.
            ExpiredTokenError: Valid signature but the expiry has passed.
        """
        purpose = TokenPurpose(purpose)
        settings = self._config.settings_for(purpose)

        try:
            claims: dict[str, Any] = jwt.decode(
                token,
                settings.secret,
                algorithms=[self._config.algorithm],
                # Expiry is checked against the injected clock below
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": [EXPIRY_CLAIM, PURPOSE_CLAIM],
                },
            )
        except jwt.InvalidTokenError as e:
            logger.warning("token_invalid", purpose=purpose.value, reason=str(e))
            raise InvalidTokenError(f"Invalid token: {e}") from None

        if claims[PURPOSE_CLAIM] != purpose.value:
            logger.warning(
                "token_purpose_mismatch",
                expected=purpose.value,
                actual=claims[PURPOSE_CLAIM],
            )
            raise InvalidTokenError(
                f"Expected {purpose.value} token, got {claims[PURPOSE_CLAIM]}"
            )

        expiry = claims[EXPIRY_CLAIM]
        if isinstance(expiry, bool) or not isinstance(expiry, int | float):
            raise InvalidTokenError("Invalid token: expiry is not a timestamp")

        if self._clock().timestamp() >= expiry:
            logger.warning("token_expired", purpose=purpose.value)
            raise ExpiredTokenError("Token has expired")

        return claims
