"""Password hashing and one-time secret helpers."""

import hashlib
import secrets

from passlib.context import CryptContext

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def generate_secret(user_id: int) -> str:
    """Create a clear-text one-time secret bound to a user.

    128 hex characters of randomness with the user id appended.
    """
    return secrets.token_hex(64) + str(user_id)


def hash_secret(secret: str) -> str:
    """One-way hash stored in place of a one-time secret."""
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()
