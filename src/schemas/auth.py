"""Authentication schemas.

Fields are optional at the schema level so that missing values produce the
same ``All fields are required`` message the handlers use, rather than a
generic validation error.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class UserRegister(BaseModel):
    """User registration request."""

    name: str | None = Field(None, max_length=255)
    email: EmailStr | None = Field(None, max_length=255)
    password: str | None = Field(None, max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class UserLogin(BaseModel):
    """User login request."""

    email: str | None = Field(None, max_length=255)
    password: str | None = Field(None, max_length=128)


class ForgotPasswordRequest(BaseModel):
    """Request a password reset link."""

    email: str | None = Field(None, max_length=255)


class ResetPasswordRequest(BaseModel):
    """Choose a new password using a reset link."""

    password: str | None = Field(None, max_length=128)


class ChangePasswordRequest(BaseModel):
    """Change the password of the logged-in user."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_password: str | None = Field(None, max_length=128)
    new_password: str | None = Field(None, max_length=128)


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
