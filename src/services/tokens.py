"""Token store: issuing and redeeming one-time secrets."""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from src.models.enums import TokenPurpose
from src.models.token import Token
from src.models.user import User
from src.services.security import generate_secret, hash_secret

logger = logging.getLogger(__name__)


class TokenService:
    """Service for one-time verification and password-reset tokens.

    Only hashes are persisted. Each user has at most one live token per
    purpose; issuing a new one removes the old. Expiry is enforced when a
    token is looked up.
    """

    def __init__(self, db: Session):
        self.db = db

    def issue(self, user: User, purpose: TokenPurpose, lifetime: timedelta) -> str:
        """Store a fresh token for the user and return its clear-text value."""
        self.revoke(user.id, purpose)

        secret = generate_secret(user.id)
        now = datetime.now(UTC)
        token = Token(
            user_id=user.id,
            purpose=purpose,
            token_hash=hash_secret(secret),
            created_at=now,
            expires_at=now + lifetime,
        )
        self.db.add(token)
        self.db.commit()
        logger.info(f"Issued {purpose} token for user {user.id}")
        return secret

    def revoke(self, user_id: int, purpose: TokenPurpose) -> int:
        """Delete any token the user holds for this purpose."""
        deleted = (
            self.db.query(Token)
            .filter(Token.user_id == user_id, Token.purpose == purpose)
            .delete(synchronize_session=False)
        )
        if deleted:
            self.db.flush()
        return deleted

    def find_live(self, secret: str, purpose: TokenPurpose) -> Token | None:
        """Look up an unexpired token by its clear-text value."""
        if not secret:
            return None
        return (
            self.db.query(Token)
            .filter(
                Token.token_hash == hash_secret(secret),
                Token.purpose == purpose,
                Token.expires_at > datetime.now(UTC),
            )
            .first()
        )

    def consume(self, token: Token) -> None:
        """Delete a token after it has been used."""
        purpose, user_id = token.purpose, token.user_id
        self.db.delete(token)
        self.db.commit()
        logger.info(f"Consumed {purpose} token for user {user_id}")
