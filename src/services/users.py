"""Credential store operations."""

import logging

from sqlalchemy.orm import Session

from src.models.enums import Role
from src.models.user import User

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int) -> User | None:
    """Get a user by id."""
    return db.get(User, user_id)


def normalize_email(email: str) -> str:
    """Canonical form used for storing and matching email addresses."""
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email, ignoring case."""
    return db.query(User).filter(User.email == normalize_email(email)).first()


def list_users(db: Session) -> list[User]:
    """Get every user, oldest first."""
    return db.query(User).order_by(User.id).all()


def create_user(
    db: Session, name: str, email: str, password: str, role: Role = Role.USER
) -> User:
    """Create a new user with a hashed password."""
    user = User(name=name, email=normalize_email(email), role=role)
    user.password = password
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created user {user.id} ({role})")
    return user


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Return the user when the password matches, else None."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not user.check_password(password):
        return None
    return user


def update_profile(
    db: Session,
    user: User,
    name: str | None = None,
    bio: str | None = None,
    photo: str | None = None,
) -> User:
    """Overwrite the profile fields that were given; empty values keep the stored ones."""
    user.name = name or user.name
    user.bio = bio or user.bio
    user.photo = photo or user.photo
    db.commit()
    db.refresh(user)
    return user


def set_password(db: Session, user: User, password: str) -> User:
    """Replace a user's password."""
    user.password = password
    db.commit()
    return user


def mark_verified(db: Session, user: User) -> User:
    """Set the verification flag."""
    user.is_verified = True
    db.commit()
    return user


def delete_user(db: Session, user_id: int) -> bool:
    """Delete a user and their tokens. Returns False if the id is unknown."""
    user = get_user(db, user_id)
    if user is None:
        return False
    db.delete(user)
    db.commit()
    logger.info(f"Deleted user {user_id}")
    return True
