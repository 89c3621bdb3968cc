"""SQLAlchemy models."""

from src.models.token import Token
from src.models.user import User

__all__ = [
    "User",
    "Token",
]
