"""FastAPI dependencies for authentication, authorization and services."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from src.config import get_settings
from src.database import get_db
from src.models.enums import Role
from src.models.user import User
from src.services.email import EmailService
from src.services.session import SessionIssuer
from src.services.tokens import TokenService
from src.services.users import get_user


def get_session_issuer() -> SessionIssuer:
    """Get session issuer built from the application settings."""
    return SessionIssuer(get_settings())


def get_email_service() -> EmailService:
    """Get email service built from the application settings."""
    return EmailService(get_settings())


def get_token_service(
    db: Annotated[Session, Depends(get_db)],
) -> TokenService:
    """Get token service bound to the request's database session."""
    return TokenService(db)


def get_session_token(
    request: Request,
    issuer: Annotated[SessionIssuer, Depends(get_session_issuer)],
) -> str | None:
    """Read the raw session token from the request cookie."""
    return request.cookies.get(issuer.settings.cookie_name)


def get_current_user(
    token: Annotated[str | None, Depends(get_session_token)],
    issuer: Annotated[SessionIssuer, Depends(get_session_issuer)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Resolve the logged-in user from the session cookie."""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, please login!",
        )

    user_id = issuer.verify(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, token failed!",
        )

    user = get_user(db, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found!",
        )

    return user


@dataclass(frozen=True)
class AccessCheck:
    """A predicate on the authenticated user plus the message sent when it fails."""

    allows: Callable[[User], bool]
    message: str


ADMIN_ONLY = AccessCheck(lambda user: Role(user.role).is_admin(), "Only admins allowed!")
CREATOR_OR_ADMIN = AccessCheck(lambda user: Role(user.role).can_create(), "Only creator allowed!")
VERIFIED_ONLY = AccessCheck(lambda user: bool(user.is_verified), "Please verify your email address!")


def require(*checks: AccessCheck) -> Callable[..., User]:
    """Build a dependency that authenticates, then applies checks in order.

    The first failing check short-circuits with 403.
    """

    def dependency(current_user: Annotated[User, Depends(get_current_user)]) -> User:
        for check in checks:
            if not check.allows(current_user):
                raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=check.message)
        return current_user

    return dependency


require_admin = require(ADMIN_ONLY)
require_creator = require(CREATOR_OR_ADMIN)
require_verified = require(VERIFIED_ONLY)
