"""Auth repository protocol for database operations."""

from typing import Protocol, runtime_checkable

from teamtrack.core.auth.types import User


@runtime_checkable
class UserRepository(Protocol):
    """Protocol for user persistence.

    Implementations provide actual database access.
    """

    async def get_user_by_id(self, user_id: str) -> User | None:
        """Get user by ID."""
        ...

    async def get_user_by_email(self, email: str) -> User | None:
        """Get user by email address."""
        ...

    async def create_user(self, email: str, name: str, password_hash: str) -> User:
        """Create a new, unverified user."""
        ...

    async def update_password(self, user_id: str, password_hash: str) -> User | None:
        """Replace a user's password hash."""
        ...

    async def mark_verified(self, user_id: str) -> User | None:
        """Mark a user's email as verified."""
        ...
