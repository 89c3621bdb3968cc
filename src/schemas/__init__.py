"""Pydantic schemas for API request/response validation."""

from src.schemas.auth import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    MessageResponse,
    ResetPasswordRequest,
    UserLogin,
    UserRegister,
)
from src.schemas.user import AuthResponse, UserResponse, UserUpdate

__all__ = [
    "UserRegister",
    "UserLogin",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "ChangePasswordRequest",
    "MessageResponse",
    "UserResponse",
    "AuthResponse",
    "UserUpdate",
]
