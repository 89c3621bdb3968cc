"""Current-user endpoints: profile, email verification and passwords."""

import logging
from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from src.api.dependencies import get_current_user, get_email_service, get_token_service
from src.config import get_settings
from src.database import get_db
from src.errors import EmailDeliveryError
from src.models.enums import TokenPurpose
from src.models.user import User
from src.schemas.auth import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    MessageResponse,
    ResetPasswordRequest,
)
from src.schemas.user import UserResponse, UserUpdate
from src.services.email import EmailService
from src.services.tokens import TokenService
from src.services.users import (
    get_user,
    get_user_by_email,
    mark_verified,
    set_password,
    update_profile,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["users"])


def _check_password_length(password: str) -> None:
    min_length = get_settings().min_password_length
    if len(password) < min_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {min_length} characters long",
        )


async def _send_link(
    email_service: EmailService,
    user: User,
    subject: str,
    template: str,
    url: str,
) -> None:
    try:
        await run_in_threadpool(email_service.send, subject, user.email, template, user.name, url)
    except EmailDeliveryError as e:
        logger.error(f"Error sending {template} email to user {user.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Email could not be sent",
        ) from e


@router.get("/user", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user profile."""
    return current_user


@router.patch("/user", response_model=UserResponse)
async def update_me(
    update_data: UserUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update name, bio or photo of the current user."""
    return update_profile(
        db,
        current_user,
        name=update_data.name,
        bio=update_data.bio,
        photo=update_data.photo,
    )


@router.post("/verify-email", response_model=MessageResponse)
async def verify_email(
    current_user: Annotated[User, Depends(get_current_user)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    email_service: Annotated[EmailService, Depends(get_email_service)],
):
    """Email the current user a link that verifies their address."""
    if current_user.is_verified:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User is already verified",
        )

    settings = get_settings()
    secret = tokens.issue(
        current_user,
        TokenPurpose.VERIFICATION,
        timedelta(hours=settings.verification_token_hours),
    )

    await _send_link(
        email_service,
        current_user,
        subject=f"Email Verification - {settings.app_name}",
        template="email_verification",
        url=f"{settings.client_url}/verify-email/{secret}",
    )
    return MessageResponse(message="Email sent")


@router.post("/verify-user/{verification_token}", response_model=MessageResponse)
async def verify_user(
    verification_token: str,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
):
    """Complete email verification using the value from the emailed link."""
    token = tokens.find_live(verification_token, TokenPurpose.VERIFICATION)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired verification token",
        )

    user = get_user(db, token.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    if user.is_verified:
        tokens.consume(token)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User is already verified",
        )

    mark_verified(db, user)
    tokens.consume(token)
    logger.info(f"User {user.id} verified their email")
    return MessageResponse(message="User verified")


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    request_data: ForgotPasswordRequest,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    email_service: Annotated[EmailService, Depends(get_email_service)],
):
    """Email a password reset link to a known address."""
    if not request_data.email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is required")

    user = get_user_by_email(db, request_data.email)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    settings = get_settings()
    secret = tokens.issue(
        user,
        TokenPurpose.PASSWORD_RESET,
        timedelta(minutes=settings.reset_token_minutes),
    )

    await _send_link(
        email_service,
        user,
        subject=f"Password Reset - {settings.app_name}",
        template="forgot_password",
        url=f"{settings.client_url}/reset-password/{secret}",
    )
    return MessageResponse(message="Email sent")


@router.post("/reset-password/{reset_token}", response_model=MessageResponse)
async def reset_password(
    reset_token: str,
    request_data: ResetPasswordRequest,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
):
    """Set a new password using the value from a reset link."""
    if not request_data.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Password is required")
    _check_password_length(request_data.password)

    token = tokens.find_live(reset_token, TokenPurpose.PASSWORD_RESET)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired reset token",
        )

    user = get_user(db, token.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    set_password(db, user, request_data.password)
    tokens.consume(token)
    logger.info(f"User {user.id} reset their password")
    return MessageResponse(message="Password reset successfully")


@router.patch("/change-password", response_model=MessageResponse)
async def change_password(
    request_data: ChangePasswordRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Change the current user's password after checking the old one."""
    if not request_data.current_password or not request_data.new_password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="All fields are required",
        )

    if not current_user.check_password(request_data.current_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid password")

    _check_password_length(request_data.new_password)

    set_password(db, current_user, request_data.new_password)
    return MessageResponse(message="Password saved successfully")
