"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from src.api.dependencies import get_session_issuer, get_session_token
from src.config import get_settings
from src.database import get_db
from src.models.user import User
from src.schemas.auth import MessageResponse, UserLogin, UserRegister
from src.schemas.user import AuthResponse, UserResponse
from src.services.session import SessionIssuer
from src.services.users import create_user, get_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["auth"])


def _auth_response(user: User, token: str) -> AuthResponse:
    profile = UserResponse.model_validate(user)
    return AuthResponse(**profile.model_dump(), token=token)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    issuer: Annotated[SessionIssuer, Depends(get_session_issuer)],
):
    """Register a new user and log them in."""
    if not user_data.name or not user_data.email or not user_data.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="All fields are required",
        )

    min_length = get_settings().min_password_length
    if len(user_data.password) < min_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {min_length} characters long",
        )

    if get_user_by_email(db, user_data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists",
        )

    user = create_user(db, user_data.name, user_data.email, user_data.password)

    token = issuer.issue(user.id)
    issuer.set_cookie(response, token)

    return _auth_response(user, token)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    issuer: Annotated[SessionIssuer, Depends(get_session_issuer)],
):
    """Login with email and password."""
    if not credentials.email or not credentials.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="All fields are required",
        )

    user = get_user_by_email(db, credentials.email)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found, please sign up",
        )

    if not user.check_password(credentials.password):
        logger.info(f"Failed login for user {user.id}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid credentials",
        )

    token = issuer.issue(user.id)
    issuer.set_cookie(response, token)
    logger.info(f"User {user.id} logged in")

    return _auth_response(user, token)


@router.get("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    issuer: Annotated[SessionIssuer, Depends(get_session_issuer)],
):
    """Clear the session cookie. Works whether or not the caller is logged in."""
    issuer.clear_cookie(response)
    return MessageResponse(message="User logged out")


@router.get("/login-status")
async def login_status(
    token: Annotated[str | None, Depends(get_session_token)],
    issuer: Annotated[SessionIssuer, Depends(get_session_issuer)],
):
    """Report whether the session cookie holds a valid token.

    Only the signature and expiry are checked; the user record is not loaded.
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, please login",
        )

    if issuer.verify(token) is None:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content=False)

    return True
