"""User schemas."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.models.enums import Role


class UserResponse(BaseModel):
    """Public profile of a user. The password hash is never included."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int = Field(serialization_alias="_id")
    name: str
    email: str
    role: Role
    photo: str | None = None
    bio: str | None = None
    is_verified: bool


class AuthResponse(UserResponse):
    """Public profile plus the session token, returned by register and login."""

    token: str


class UserUpdate(BaseModel):
    """Profile fields a user may change. Empty values keep the stored ones."""

    name: str | None = Field(None, max_length=255)
    bio: str | None = Field(None, max_length=2000)
    photo: str | None = Field(None, max_length=1024)
