"""Auth domain types and utilities."""

from teamtrack.core.auth.config import (
    AuthConfig,
    LockoutConfig,
    TokenConfig,
    TokenPurposeSettings,
)
from teamtrack.core.auth.credentials import CredentialService
from teamtrack.core.auth.jwt import (
    ExpiredTokenError,
    InvalidTokenError,
    TokenError,
    TokenService,
)
from teamtrack.core.auth.lockout import LockoutEntry, LockoutGuard, login_key, reset_key
from teamtrack.core.auth.mailer import AccountMailer
from teamtrack.core.auth.password import (
    BcryptPasswordHasher,
    PasswordHasher,
    hash_password,
    verify_password,
)
from teamtrack.core.auth.repository import UserRepository
from teamtrack.core.auth.service import AuthService
from teamtrack.core.auth.types import TokenPair, TokenPurpose, User

__all__ = [
    "User",
    "TokenPair",
    "TokenPurpose",
    "AuthConfig",
    "TokenConfig",
    "TokenPurposeSettings",
    "LockoutConfig",
    "TokenService",
    "TokenError",
    "InvalidTokenError",
    "ExpiredTokenError",
    "LockoutGuard",
    "LockoutEntry",
    "login_key",
    "reset_key",
    "PasswordHasher",
    "BcryptPasswordHasher",
    "hash_password",
    "verify_password",
    "CredentialService",
    "UserRepository",
    "AccountMailer",
    "AuthService",
]
