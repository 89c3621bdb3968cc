"""One-time token model for email verification and password reset."""

from sqlalchemy import Column, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import TokenPurpose
from src.models.mixins import ExpiryMixin


class Token(Base, ExpiryMixin):
    """Hashed one-time secret owned by a user.

    Only the SHA-256 digest is stored; the clear-text value lives in the
    emailed link. There is at most one row per user and purpose.
    """

    __tablename__ = "tokens"
    __table_args__ = (UniqueConstraint("user_id", "purpose", name="uq_tokens_user_purpose"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    purpose = Column(
        Enum(TokenPurpose, name="token_purpose", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    token_hash = Column(String(64), unique=True, nullable=False, index=True)

    user = relationship("User", back_populates="tokens")
