"""Auth configuration.

Secrets, lifetimes and lockout limits are plain values handed to the
token service and lockout guard. ``from_env`` reads them from the
process environment; tests construct them directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta

from teamtrack.core.auth.types import TokenPurpose

DEFAULT_ALGORITHM = "HS256"

# Default lifetimes per purpose
DEFAULT_TTLS: dict[TokenPurpose, timedelta] = {
    TokenPurpose.ACCESS: timedelta(minutes=15),
    TokenPurpose.REFRESH: timedelta(days=7),
    TokenPurpose.VERIFY: timedelta(hours=1),
    TokenPurpose.RESET: timedelta(hours=1),
}


@dataclass(frozen=True)
class TokenPurposeSettings:
    """Key material and default lifetime for one token purpose.

    Attributes:
        secret: HMAC signing secret used only for this purpose.
        ttl: Lifetime applied when the caller does not override it.
    """

    secret: str
    ttl: timedelta

    def __repr__(self) -> str:
        return f"TokenPurposeSettings(secret='***', ttl={self.ttl!r})"


@dataclass(frozen=True)
class TokenConfig:
    """Per-purpose token settings.

    Every purpose in TokenPurpose must be configured, and no two
    purposes may share a secret.

    Attributes:
        purposes: Lookup table from purpose to its settings.
        algorithm: JWT signing algorithm.
    """

    purposes: dict[TokenPurpose, TokenPurposeSettings]
    algorithm: str = DEFAULT_ALGORITHM

    def __post_init__(self) -> None:
        missing = [p.value for p in TokenPurpose if p not in self.purposes]
        if missing:
            raise ValueError(f"Missing token settings for purposes: {missing}")

        secrets = [settings.secret for settings in self.purposes.values()]
        if any(not s for s in secrets):
            raise ValueError("Token secrets must not be empty")
        if len(set(secrets)) != len(secrets):
            raise ValueError("Each token purpose needs its own secret")

    def settings_for(self, purpose: TokenPurpose) -> TokenPurposeSettings:
        """Get the settings bound to a purpose."""
        return self.purposes[purpose]

    @classmethod
    def from_secrets(
        cls,
        access: str,
        refresh: str,
        verify: str,
        reset: str,
        algorithm: str = DEFAULT_ALGORITHM,
    ) -> TokenConfig:
        """Build a config with the default lifetimes."""
        secrets = {
            TokenPurpose.ACCESS: access,
            TokenPurpose.REFRESH: refresh,
            TokenPurpose.VERIFY: verify,
            TokenPurpose.RESET: reset,
        }
        return cls(
            purposes={
                purpose: TokenPurposeSettings(secret=secret, ttl=DEFAULT_TTLS[purpose])
                for purpose, secret in secrets.items()
            },
            algorithm=algorithm,
        )

    @classmethod
    def from_env(cls) -> TokenConfig:
        """Load token settings from the environment.

        Reads JWT_<PURPOSE>_SECRET and JWT_<PURPOSE>_TTL_SECONDS for each
        purpose, plus JWT_ALGORITHM.

        Raises:
            ValueError: If a secret is missing or shared between purposes.
        """
        purposes = {}
        for purpose in TokenPurpose:
            prefix = f"JWT_{purpose.value.upper()}"
            ttl_seconds = os.environ.get(f"{prefix}_TTL_SECONDS")
            ttl = (
                timedelta(seconds=int(ttl_seconds))
                if ttl_seconds
                else DEFAULT_TTLS[purpose]
            )
            purposes[purpose] = TokenPurposeSettings(
                secret=os.environ.get(f"{prefix}_SECRET", ""),
                ttl=ttl,
            )
        return cls(
            purposes=purposes,
            algorithm=os.environ.get("JWT_ALGORITHM", DEFAULT_ALGORITHM),
        )


@dataclass(frozen=True)
class LockoutConfig:
    """Brute-force lockout limits.

    Attributes:
        max_attempts: Failures that trigger a lockout.
        window: How long a triggered lockout lasts.
    """

    max_attempts: int = 5
    window: timedelta = timedelta(minutes=15)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.window <= timedelta(0):
            raise ValueError("window must be positive")

    @classmethod
    def from_env(cls) -> LockoutConfig:
        """Load lockout limits from LOCKOUT_MAX_ATTEMPTS / LOCKOUT_WINDOW_SECONDS."""
        return cls(
            max_attempts=int(os.environ.get("LOCKOUT_MAX_ATTEMPTS", "5")),
            window=timedelta(seconds=int(os.environ.get("LOCKOUT_WINDOW_SECONDS", "900"))),
        )


@dataclass(frozen=True)
class AuthConfig:
    """Everything the auth core needs at startup."""

    tokens: TokenConfig
    lockout: LockoutConfig = field(default_factory=LockoutConfig)

    @classmethod
    def from_env(cls) -> AuthConfig:
        """Load the full auth configuration from the environment."""
        return cls(tokens=TokenConfig.from_env(), lockout=LockoutConfig.from_env())
