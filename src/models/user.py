"""User model."""

from sqlalchemy import Boolean, Column, Enum, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import Role
from src.models.mixins import TimestampMixin
from src.services.security import get_password_hash, verify_password


class User(Base, TimestampMixin):
    """Registered account.

    The clear-text password is never stored: assigning ``user.password``
    hashes it before it reaches the row.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(Role, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.USER,
    )
    is_verified = Column(Boolean, nullable=False, default=False)
    photo = Column(String(1024), nullable=True)
    bio = Column(Text, nullable=True)

    tokens = relationship(
        "Token",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def password(self) -> str:
        """Write-only; reading returns the stored hash."""
        return self.password_hash

    @password.setter
    def password(self, plain_password: str) -> None:
        self.password_hash = get_password_hash(plain_password)

    def check_password(self, plain_password: str) -> bool:
        """Verify a clear-text password against the stored hash."""
        return verify_password(plain_password, self.password_hash)

    def __repr__(self) -> str:
        return f"<User {self.email}>"
