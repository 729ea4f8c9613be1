"""Credential service facade.

Use cases hash passwords and handle tokens only through this class,
which keeps them independent of bcrypt and PyJWT.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from teamtrack.core.auth.jwt import TokenService
from teamtrack.core.auth.password import PasswordHasher
from teamtrack.core.auth.types import TokenPurpose


class CredentialService:
    """Password hashing plus token issue/verify behind one interface."""

    def __init__(self, hasher: PasswordHasher, tokens: TokenService) -> None:
        """Initialize the facade.

        Args:
            hasher: Injected password hashing capability.
            tokens: Token service holding the per-purpose secrets.
        """
        self._hasher = hasher
        self._tokens = tokens

    def hash_password(self, password: str) -> str:
        """Hash a plain text password."""
        return self._hasher.hash(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Check a plain text password against a stored hash."""
        return self._hasher.verify(password, password_hash)

    def generate_token(
        self,
        claims: dict[str, Any],
        purpose: TokenPurpose,
        ttl: timedelta | None = None,
    ) -> str:
        """Issue a token for a purpose (see TokenService.issue)."""
        return self._tokens.issue(purpose, claims, ttl)

    def verify_token(self, token: str, purpose: TokenPurpose) -> dict[str, Any]:
        """Verify a token for a purpose (see TokenService.verify)."""
        return self._tokens.verify(token, purpose)

    def default_ttl(self, purpose: TokenPurpose) -> timedelta:
        """Default lifetime of tokens for a purpose."""
        return self._tokens.default_ttl(purpose)
