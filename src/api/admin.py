"""Admin user management endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.api.dependencies import require_admin
from src.database import get_db
from src.models.user import User
from src.schemas.auth import MessageResponse
from src.schemas.user import UserResponse
from src.services.users import delete_user, list_users

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.get("/users", response_model=list[UserResponse])
async def get_all_users(
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """List every registered user."""
    return list_users(db)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def remove_user(
    user_id: int,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a user and their pending tokens."""
    if not delete_user(db, user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    logger.info(f"Admin {admin.id} deleted user {user_id}")
    return MessageResponse(message="User deleted successfully")
