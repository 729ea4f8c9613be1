"""Auth domain types."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, EmailStr


class TokenPurpose(str, Enum):
    """What a token may be used for.

    Each purpose is bound to its own signing secret, so a token issued
    for one purpose never verifies as another.
    """

    ACCESS = "access"
    REFRESH = "refresh"
    VERIFY = "verify"
    RESET = "reset"


class User(BaseModel):
    """User domain model."""

    id: str
    email: EmailStr
    name: str
    password_hash: str
    is_verified: bool = False
    created_at: datetime


class TokenPair(BaseModel):
    """Access and refresh token pair returned by login and refresh."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds until the access token expires
