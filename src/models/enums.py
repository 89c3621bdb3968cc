"""Enums for model fields."""

from enum import StrEnum


class Role(StrEnum):
    """Account roles, in increasing order of privilege."""

    USER = "user"
    CREATOR = "creator"
    ADMIN = "admin"

    def can_create(self) -> bool:
        """Check if this role may use creator features."""
        return self in (Role.CREATOR, Role.ADMIN)

    def is_admin(self) -> bool:
        """Check if this role may manage other accounts."""
        return self == Role.ADMIN


class TokenPurpose(StrEnum):
    """What a one-time token was issued for."""

    VERIFICATION = "verification"
    PASSWORD_RESET = "password_reset"
