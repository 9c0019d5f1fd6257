"""JWT authentication provider implementation.

Tokens are HS256-signed with the shared secret from settings.

Payload structure:
    {
        "sub": "student-uuid",
        "email": "student@example.com",
        "name": "Ada Lovelace",
        "iat": 1234567000,
        "exp": 1234567890
    }
"""

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

import structlog
from jose import JWTError, jwt

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()


class JWTAuthProvider:
    """JWT-based authentication provider."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    @property
    def expire_minutes(self) -> int:
        return self._expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT and extract the student identity.

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid, expired or missing claims
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
            )
        except JWTError as e:
            logger.debug("token_rejected", reason=str(e))
            return None

        student_id = payload.get("sub")
        email = payload.get("email")

        if not student_id or not email:
            return None

        try:
            parsed_id = UUID(student_id)
        except ValueError:
            return None

        return TokenUser(
            id=parsed_id,
            email=email,
            display_name=payload.get("name"),
        )

    def create_token(self, user: TokenUser) -> str:
        """
        Create a signed JWT for a student.

        Args:
            user: The student to create a token for

        Returns:
            The generated JWT string
        """
        now = datetime.utcnow()
        payload: dict = {
            "sub": str(user.id),
            "email": user.email,
            "name": user.display_name,
            "iat": now,
            "exp": now + timedelta(minutes=self._expire_minutes),
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
