"""JWT authentication provider implementation.

Tokens are signed with a shared secret (HS256 by default) and carry:

    {
        "sub": "profile-id",
        "email": "user@example.com",
        "name": "Display Name",
        "iat": 1234567000,
        "exp": 1234567890
    }
"""

from datetime import datetime, timedelta
from typing import Any, Optional

import structlog
from jose import JWTError, jwt

from core.config import Settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()


class JWTAuthProvider:
    """JWT-based authentication provider."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "JWTAuthProvider":
        return cls(
            secret_key=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.jwt_expire_minutes,
        )

    @property
    def expire_minutes(self) -> int:
        return self._expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT token and extract the profile it was issued for.

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as e:
            logger.debug("token_rejected", error=str(e))
            return None

        user_id = payload.get("sub")
        email = payload.get("email")
        if not user_id or not email:
            return None

        return TokenUser(id=str(user_id), email=email, display_name=payload.get("name"))

    def create_token(self, user: TokenUser) -> str:
        """
        Create a signed JWT for a profile.

        Args:
            user: The profile to create a token for

        Returns:
            The generated JWT string
        """
        now = datetime.utcnow()
        payload: dict[str, Any] = {
            "sub": user.id,
            "email": user.email,
            "name": user.display_name,
            "iat": now,
            "exp": now + timedelta(minutes=self._expire_minutes),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
