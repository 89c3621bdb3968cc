"""Stateless session tokens and the cookie that carries them."""

import logging
from datetime import UTC, datetime, timedelta

from fastapi import Response
from jose import JWTError, jwt

from src.config import Settings

logger = logging.getLogger(__name__)


class SessionIssuer:
    """Signs and verifies the JWT that identifies a logged-in user.

    Nothing is stored server-side: a token is valid as long as its signature
    matches the configured secret and its ``exp`` claim is in the future.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.lifetime = timedelta(days=settings.session_expiration_days)

    def issue(self, user_id: int) -> str:
        """Create a signed session token for a user."""
        expire = datetime.now(UTC) + self.lifetime
        to_encode = {
            "id": str(user_id),
            "exp": expire,
        }
        return jwt.encode(to_encode, self.settings.jwt_secret, algorithm=self.settings.jwt_algorithm)

    def verify(self, token: str) -> int | None:
        """Return the user id embedded in a valid token, else None.

        Bad signatures, tampered or malformed payloads and expired tokens all
        degrade to None; this never raises.
        """
        if not token:
            return None
        try:
            payload = jwt.decode(
                token, self.settings.jwt_secret, algorithms=[self.settings.jwt_algorithm]
            )
        except JWTError as e:
            logger.debug(f"Rejected session token: {e}")
            return None

        user_id = payload.get("id")
        try:
            return int(user_id)
        except (TypeError, ValueError):
            return None

    @property
    def max_age_seconds(self) -> int:
        return int(self.lifetime.total_seconds())

    def set_cookie(self, response: Response, token: str) -> None:
        """Attach the session cookie to a response."""
        response.set_cookie(
            key=self.settings.cookie_name,
            value=token,
            max_age=self.max_age_seconds,
            path="/",
            httponly=True,
            secure=self.settings.cookie_secure,
            samesite=self.settings.cookie_samesite,
        )

    def clear_cookie(self, response: Response) -> None:
        """Expire the session cookie immediately."""
        response.delete_cookie(
            key=self.settings.cookie_name,
            path="/",
            httponly=True,
            secure=self.settings.cookie_secure,
            samesite=self.settings.cookie_samesite,
        )
