"""Auth service for login, registration, and token management."""

from typing import Any

import structlog

from teamtrack.core.auth.credentials import CredentialService
from teamtrack.core.auth.jwt import ExpiredTokenError, InvalidTokenError
from teamtrack.core.auth.lockout import LockoutGuard, login_key, reset_key
from teamtrack.core.auth.mailer import AccountMailer
from teamtrack.core.auth.password import MAX_PASSWORD_BYTES, is_password_too_long
from teamtrack.core.auth.repository import UserRepository
from teamtrack.core.auth.types import TokenPair, TokenPurpose, User
from teamtrack.core.decorators import use_case
from teamtrack.core.exceptions import (
    AccountLockedError,
    ApplicationError,
    AuthError,
    DomainError,
    NotFoundError,
)

logger = structlog.get_logger()


class AuthService:
    """Service for authentication operations."""

    def __init__(
        self,
        repo: UserRepository,
        credentials: CredentialService,
        lockout: LockoutGuard,
        mailer: AccountMailer,
    ) -> None:
        """Initialize the auth service.

        Args:
            repo: User repository for database operations.
            credentials: Password hashing and token facade.
            lockout: Shared brute-force lockout guard.
            mailer: Delivers verification and reset emails.
        """
        self._repo = repo
        self._credentials = credentials
        self._lockout = lockout
        self._mailer = mailer

    @use_case("register user")
    async def register(self, email: str, password: str, name: str) -> User:
        """Register a new, unverified user and send the verification email.

        Args:
            email: User's email address.
            password: Plain text password.
            name: User's display name.

        Returns:
            The created user.

        Raises:
            DomainError: If the password or name is blank, or the password is too long.
            AuthError: If the email is already registered.
        """
        email = email.strip().lower()
        _check_new_password(password)
        if not name or not name.strip():
            raise DomainError("Name is required")

        existing = await self._repo.get_user_by_email(email)
        if existing:
            raise AuthError("User with this email already exists")

        user = await self._repo.create_user(
            email=email,
            name=name.strip(),
            password_hash=self._credentials.hash_password(password),
        )
        logger.info("user_registered", user_id=user.id)

        await self._send_verification(user)
        return user

    @use_case("log in")
    async def login(self, email: str, password: str) -> TokenPair:
        """Authenticate a user and return a token pair.

        Failures are counted against ``login:<email>``; once the key is
        locked every attempt is refused until the window passes.

        Raises:
            AccountLockedError: If the email is locked out.
            AuthError: If authentication fails or the email is unverified.
        """
        key = login_key(email)
        if self._lockout.is_locked(key):
            logger.warning("login_locked_out", email=email)
            raise AccountLockedError(key)

        user = await self._repo.get_user_by_email(email.strip().lower())
        if not user or not self._credentials.verify_password(password, user.password_hash):
            self._lockout.register_failure(key)
            logger.warning("login_failed", email=email)
            raise AuthError("Invalid email or password")

        if not user.is_verified:
            raise AuthError("Email is not verified")

        self._lockout.clear(key)
        logger.info("login_succeeded", user_id=user.id)
        return self._issue_pair(user.id)

    @use_case("refresh tokens")
    async def refresh(self, refresh_token: str) -> TokenPair:
        """Rotate a refresh token into a new token pair.

        Raises:
            AuthError: If no token is given or the payload has no subject.
            InvalidTokenError: If the token is not a valid refresh token.
            ExpiredTokenError: If the refresh token has expired.
        """
        if not refresh_token:
            raise AuthError("Refresh token is required")

        claims = self._credentials.verify_token(refresh_token, TokenPurpose.REFRESH)
        user_id = claims.get("sub")
        if not user_id:
            raise AuthError("Invalid refresh token")

        logger.debug("tokens_refreshed", user_id=user_id)
        return self._issue_pair(user_id)

    @use_case("verify email")
    async def verify_email(self, token: str) -> User:
        """Mark the user behind a verification token as verified.

        Raises:
            DomainError: If no token is given.
            InvalidTokenError: If the token is invalid or has no subject.
            ExpiredTokenError: If the token has expired.
            NotFoundError: If the user no longer exists.
        """
        if not token:
            raise DomainError("Verification token is required")

        claims = self._credentials.verify_token(token, TokenPurpose.VERIFY)
        user_id = claims.get("sub")
        if not user_id:
            raise InvalidTokenError("Token has no subject")

        user = await self._repo.get_user_by_id(user_id)
        if not user:
            logger.warning("verify_email_user_not_found", user_id=user_id)
            raise NotFoundError("User not found")

        if user.is_verified:
            logger.info("user_already_verified", user_id=user.id)
            return user

        verified = await self._repo.mark_verified(user.id)
        if not verified:
            raise NotFoundError("User not found")

        logger.info("user_verified", user_id=verified.id)
        return verified

    @use_case("resend verification")
    async def resend_verification(self, email: str) -> None:
        """Send a fresh verification email.

        Silently succeeds for unknown or already verified addresses.
        """
        user = await self._repo.get_user_by_email(email.strip().lower())
        if not user:
            logger.info("verification_resend_unknown_email", email=email)
            return

        if user.is_verified:
            logger.info("verification_resend_already_verified", user_id=user.id)
            return

        await self._send_verification(user)

    @use_case("request password reset")
    async def forgot_password(self, email: str) -> None:
        """Email a password reset link.

        For security, this always succeeds for unknown addresses (doesn't
        reveal if the email exists).

        Raises:
            ApplicationError: If the reset email cannot be sent.
        """
        user = await self._repo.get_user_by_email(email.strip().lower())
        if not user:
            logger.info("password_reset_requested_unknown_email", email=email)
            return

        token = self._credentials.generate_token({"sub": user.id}, TokenPurpose.RESET)
        try:
            await self._mailer.send_password_reset_email(user, token)
        except Exception as e:
            logger.error("password_reset_email_failed", user_id=user.id, error=str(e))
            raise ApplicationError("Failed to send password reset email", cause=e) from e

        logger.info("password_reset_email_sent", user_id=user.id)

    @use_case("reset password")
    async def reset_password(
        self,
        token: str,
        new_password: str,
        client_ip: str | None = None,
    ) -> User:
        """Reset a password using a reset token.

        Failures are counted against ``reset:<token>``, or against
        ``reset-ip:<ip>`` when no token is presented.

        Args:
            token: The reset token from the email link.
            new_password: The new password to set.
            client_ip: Caller address, used as lockout key without a token.

        Returns:
            The updated user.

        Raises:
            AccountLockedError: If the key is locked out.
            DomainError: If the token or password is missing, or the password is too long.
            InvalidTokenError: If the token is invalid or has no subject.
            ExpiredTokenError: If the token has expired.
            NotFoundError: If the user no longer exists.
        """
        key = reset_key(token, client_ip)
        if self._lockout.is_locked(key):
            logger.warning("password_reset_locked_out")
            raise AccountLockedError(key)

        if not token:
            self._lockout.register_failure(key)
            raise DomainError("Reset token is required")
        _check_new_password(new_password)

        try:
            claims = self._credentials.verify_token(token, TokenPurpose.RESET)
            user_id = claims.get("sub")
            if not user_id:
                raise InvalidTokenError("Token has no subject")
        except (InvalidTokenError, ExpiredTokenError):
            self._lockout.register_failure(key)
            logger.warning("password_reset_invalid_token")
            raise

        user = await self._repo.get_user_by_id(user_id)
        if not user:
            logger.warning("password_reset_user_not_found", user_id=user_id)
            raise NotFoundError("User not found")

        updated = await self._repo.update_password(
            user.id, self._credentials.hash_password(new_password)
        )
        if not updated:
            raise NotFoundError("User not found")

        self._lockout.clear(key)
        logger.info("password_reset_successful", user_id=updated.id)
        return updated

    @use_case("change password")
    async def change_password(
        self,
        user_id: str,
        current_password: str,
        new_password: str,
    ) -> User:
        """Change a password after re-checking the current one.

        Raises:
            NotFoundError: If the user does not exist.
            AuthError: If the current password is wrong.
            DomainError: If the new password is blank or too long.
        """
        user = await self._repo.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        if not self._credentials.verify_password(current_password, user.password_hash):
            logger.warning("change_password_wrong_current", user_id=user_id)
            raise AuthError("Current password is incorrect")

        _check_new_password(new_password)

        updated = await self._repo.update_password(
            user.id, self._credentials.hash_password(new_password)
        )
        if not updated:
            raise NotFoundError("User not found")

        logger.info("password_changed", user_id=user_id)
        return updated

    async def _send_verification(self, user: User) -> None:
        """Issue a verify token and mail it."""
        token = self._credentials.generate_token({"sub": user.id}, TokenPurpose.VERIFY)
        try:
            await self._mailer.send_verification_email(user, token)
        except Exception as e:
            logger.error("verification_email_failed", user_id=user.id, error=str(e))
            raise ApplicationError("Failed to send verification email", cause=e) from e

        logger.info("verification_email_sent", user_id=user.id)

    def _issue_pair(self, user_id: str) -> TokenPair:
        """Create an access + refresh token pair for a user."""
        claims: dict[str, Any] = {"sub": user_id}
        return TokenPair(
            access_token=self._credentials.generate_token(claims, TokenPurpose.ACCESS),
            refresh_token=self._credentials.generate_token(claims, TokenPurpose.REFRESH),
            expires_in=int(self._credentials.default_ttl(TokenPurpose.ACCESS).total_seconds()),
        )


def _check_new_password(password: str) -> None:
    """Reject passwords that cannot be stored."""
    if not password:
        raise DomainError("Password is required")
    if is_password_too_long(password):
        raise DomainError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
