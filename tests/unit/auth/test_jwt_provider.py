"""Unit tests for JWTAuthProvider."""

from datetime import datetime, timedelta

import pytest
from jose import jwt as jose_jwt

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

SECRET = "test-secret"


def _make_token(payload: dict, secret: str = SECRET) -> str:
    """Create an HS256-signed JWT with a given payload."""
    return jose_jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def provider() -> JWTAuthProvider:
    return JWTAuthProvider(secret_key=SECRET, algorithm="HS256", expire_minutes=30)


class TestCreateAndValidate:
    async def test_round_trip(self, provider: JWTAuthProvider):
        user = TokenUser(id="profile-1", email="a@b.co", display_name="Al")

        result = await provider.validate_token(provider.create_token(user))

        assert result == user

    def test_token_claims(self, provider: JWTAuthProvider):
        token = provider.create_token(TokenUser(id="profile-1", email="a@b.co"))
        claims = jose_jwt.get_unverified_claims(token)

        assert claims["sub"] == "profile-1"
        assert claims["exp"] - claims["iat"] == 30 * 60


class TestValidateToken:
    async def test_wrong_secret(self, provider: JWTAuthProvider):
        token = _make_token({"sub": "p1", "email": "a@b.co"}, secret="other")
        assert await provider.validate_token(token) is None

    async def test_expired(self, provider: JWTAuthProvider):
        token = _make_token(
            {"sub": "p1", "email": "a@b.co", "exp": datetime.utcnow() - timedelta(minutes=1)}
        )
        assert await provider.validate_token(token) is None

    @pytest.mark.parametrize("payload", [{"email": "a@b.co"}, {"sub": "p1"}])
    async def test_missing_claims(self, provider: JWTAuthProvider, payload: dict):
        assert await provider.validate_token(_make_token(payload)) is None

    async def test_garbage(self, provider: JWTAuthProvider):
        assert await provider.validate_token("not-a-jwt") is None
