"""Password hashing utilities using bcrypt."""

from typing import Protocol, runtime_checkable

import bcrypt

# bcrypt only reads the first 72 bytes; bcrypt 5 rejects longer input.
MAX_PASSWORD_BYTES = 72


@runtime_checkable
class PasswordHasher(Protocol):
    """Hashing capability injected into the credential service."""

    def hash(self, plain: str) -> str:
        """Hash a plain text password."""
        ...

    def verify(self, plain: str, hashed: str) -> bool:
        """Check a plain text password against a stored hash."""
        ...


def is_password_too_long(password: str) -> bool:
    """Whether a password exceeds what bcrypt can hash."""
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash string
    """
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash.

    Args:
        plain_password: Plain text password to check
        hashed_password: Bcrypt hash to check against

    Returns:
        True if password matches hash
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash
        return False


class BcryptPasswordHasher:
    """PasswordHasher backed by bcrypt."""

    def hash(self, plain: str) -> str:
        """Hash a plain text password."""
        return hash_password(plain)

    def verify(self, plain: str, hashed: str) -> bool:
        """Check a plain text password against a bcrypt hash."""
        return verify_password(plain, hashed)
