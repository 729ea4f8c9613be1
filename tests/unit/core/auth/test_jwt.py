"""Tests for the purpose-typed token service."""

from datetime import timedelta
from itertools import permutations

import jwt as pyjwt
import pytest

from teamtrack.core.auth.config import TokenConfig
from teamtrack.core.auth.jwt import (
    ExpiredTokenError,
    InvalidTokenError,
    TokenError,
    TokenService,
)
from teamtrack.core.auth.types import TokenPurpose
from tests.fixtures.domain_objects import FrozenClock


class TestIssue:
    """Test token creation."""

    def test_creates_valid_jwt(self, token_service: TokenService) -> None:
        """Should create a three-part JWT string."""
        token = token_service.issue(TokenPurpose.ACCESS, {"sub": "user-123"})

        assert isinstance(token, str)
        assert len(token.split(".")) == 3

    def test_token_carries_claims_purpose_and_expiry(
        self, token_service: TokenService, frozen_clock: FrozenClock
    ) -> None:
        """Custom claims survive; purpose and exp are added."""
        token = token_service.issue(TokenPurpose.VERIFY, {"sub": "user-123", "scope": "email"})

        claims = token_service.verify(token, TokenPurpose.VERIFY)

        assert claims["sub"] == "user-123"
        assert claims["scope"] == "email"
        assert claims["purpose"] == "verify"
        assert claims["exp"] == (frozen_clock() + timedelta(hours=1)).timestamp()

    def test_default_ttls_per_purpose(self, token_service: TokenService) -> None:
        """Each purpose has its own default lifetime."""
        assert token_service.default_ttl(TokenPurpose.ACCESS) == timedelta(minutes=15)
        assert token_service.default_ttl(TokenPurpose.REFRESH) == timedelta(days=7)
        assert token_service.default_ttl(TokenPurpose.VERIFY) == timedelta(hours=1)
        assert token_service.default_ttl(TokenPurpose.RESET) == timedelta(hours=1)

    def test_refresh_expires_after_access(self, token_service: TokenService) -> None:
        """Refresh token should outlive the access token."""
        access = token_service.issue(TokenPurpose.ACCESS, {"sub": "u"})
        refresh = token_service.issue(TokenPurpose.REFRESH, {"sub": "u"})

        access_exp = token_service.verify(access, TokenPurpose.ACCESS)["exp"]
        refresh_exp = token_service.verify(refresh, TokenPurpose.REFRESH)["exp"]

        assert refresh_exp > access_exp

    def test_ttl_override(self, token_service: TokenService, frozen_clock: FrozenClock) -> None:
        """An explicit ttl replaces the purpose default."""
        token = token_service.issue(TokenPurpose.ACCESS, {"sub": "u"}, ttl=timedelta(seconds=30))

        claims = token_service.verify(token, TokenPurpose.ACCESS)

        assert claims["exp"] == (frozen_clock() + timedelta(seconds=30)).timestamp()

    @pytest.mark.parametrize("claim", ["purpose", "exp", "iat"])
    def test_reserved_claims_rejected(self, token_service: TokenService, claim: str) -> None:
        """Callers cannot overwrite purpose or expiry."""
        with pytest.raises(ValueError, match="Reserved claims"):
            token_service.issue(TokenPurpose.ACCESS, {"sub": "u", claim: "x"})

    def test_negative_ttl_rejected(self, token_service: TokenService) -> None:
        """A negative lifetime is a programming error."""
        with pytest.raises(ValueError):
            token_service.issue(TokenPurpose.ACCESS, {"sub": "u"}, ttl=timedelta(seconds=-1))


class TestVerify:
    """Test token verification."""

    @pytest.mark.parametrize(
        ("issued", "expected"),
        list(permutations(list(TokenPurpose), 2)),
    )
    def test_cross_purpose_rejected(
        self,
        token_service: TokenService,
        issued: TokenPurpose,
        expected: TokenPurpose,
    ) -> None:
        """A token never verifies under a different purpose."""
        token = token_service.issue(issued, {"sub": "user-123"})

        with pytest.raises(InvalidTokenError):
            token_service.verify(token, expected)

    def test_purpose_claim_checked_even_with_right_secret(self, token_config: TokenConfig) -> None:
        """A token signed with the access secret but claiming refresh is rejected."""
        service = TokenService(token_config)
        secret = token_config.settings_for(TokenPurpose.ACCESS).secret
        forged = pyjwt.encode(
            {"sub": "u", "purpose": "refresh", "exp": 32503680000},
            secret,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            service.verify(forged, TokenPurpose.ACCESS)

    def test_ttl_zero_is_expired_immediately(self, token_service: TokenService) -> None:
        """Expiry is inclusive: now >= exp means expired."""
        token = token_service.issue(TokenPurpose.RESET, {"sub": "u"}, ttl=timedelta(0))

        with pytest.raises(ExpiredTokenError):
            token_service.verify(token, TokenPurpose.RESET)

    def test_valid_until_just_before_expiry(
        self, token_service: TokenService, frozen_clock: FrozenClock
    ) -> None:
        """Token verifies one millisecond before exp and fails at exp."""
        token = token_service.issue(TokenPurpose.ACCESS, {"sub": "u"}, ttl=timedelta(seconds=10))

        frozen_clock.advance(timedelta(seconds=9, milliseconds=999))
        assert token_service.verify(token, TokenPurpose.ACCESS)["sub"] == "u"

        frozen_clock.advance(timedelta(milliseconds=1))
        with pytest.raises(ExpiredTokenError):
            token_service.verify(token, TokenPurpose.ACCESS)

    def test_expired_after_default_ttl(
        self, token_service: TokenService, frozen_clock: FrozenClock
    ) -> None:
        """Access tokens expire after 15 minutes."""
        token = token_service.issue(TokenPurpose.ACCESS, {"sub": "u"})

        frozen_clock.advance(timedelta(minutes=15))

        with pytest.raises(ExpiredTokenError):
            token_service.verify(token, TokenPurpose.ACCESS)

    def test_tampered_signature(self, token_service: TokenService) -> None:
        """Changing the signature invalidates the token."""
        token = token_service.issue(TokenPurpose.ACCESS, {"sub": "u"})
        header, payload, signature = token.split(".")
        flipped = ("B" if signature[0] == "A" else "A") + signature[1:]

        with pytest.raises(InvalidTokenError):
            token_service.verify(f"{header}.{payload}.{flipped}", TokenPurpose.ACCESS)

    def test_wrong_secret(self, token_service: TokenService) -> None:
        """Tokens signed with an unknown secret are invalid."""
        forged = pyjwt.encode(
            {"sub": "u", "purpose": "access", "exp": 32503680000},
            "not-a-configured-secret",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            token_service.verify(forged, TokenPurpose.ACCESS)

    @pytest.mark.parametrize("token", ["", "invalid.token.here", "not-a-jwt"])
    def test_malformed_token(self, token_service: TokenService, token: str) -> None:
        """Malformed input is an InvalidTokenError."""
        with pytest.raises(InvalidTokenError):
            token_service.verify(token, TokenPurpose.ACCESS)

    def test_missing_expiry_rejected(self, token_config: TokenConfig) -> None:
        """Tokens without exp are never accepted."""
        service = TokenService(token_config)
        secret = token_config.settings_for(TokenPurpose.ACCESS).secret
        token = pyjwt.encode({"sub": "u", "purpose": "access"}, secret, algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            service.verify(token, TokenPurpose.ACCESS)

    def test_errors_share_base_class(self) -> None:
        """Both token failures are TokenErrors."""
        assert issubclass(InvalidTokenError, TokenError)
        assert issubclass(ExpiredTokenError, TokenError)
