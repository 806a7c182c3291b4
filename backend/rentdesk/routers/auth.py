"""Auth router - current user and local registration."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import get_db
from rentdesk.core.security import AuthenticatedUser, get_current_user
from rentdesk.models.enums import UserRole
from rentdesk.models.user import User
from rentdesk.schemas.auth import CurrentUserResponse, RegisterRequest, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(current_user: AuthenticatedUser = Depends(get_current_user)):
    """Get current authenticated user info."""
    return CurrentUserResponse(
        uid=current_user.uid,
        email=current_user.email,
        email_verified=current_user.email_verified,
        db_user_id=str(current_user.db_user_id) if current_user.db_user_id else None,
        role=current_user.role,
    )


@router.post("/me", response_model=UserResponse)
async def register_me(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Create or update the caller's user row from their Firebase identity.

    The role is fixed at creation; admins are promoted out of band.
    """
    if not current_user.email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Firebase account has no email address",
        )
    if data.role == UserRole.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot self-assign admin role")

    result = await db.execute(select(User).where(User.firebase_uid == current_user.uid))
    user = result.scalar_one_or_none()

    if user is None:
        user = User(
            firebase_uid=current_user.uid,
            email=current_user.email,
            full_name=data.full_name,
            phone=data.phone,
            role=data.role,
        )
        db.add(user)
        logger.info("[AUTH] Registered %s as %s", current_user.email, data.role.value)
    else:
        if data.full_name is not None:
            user.full_name = data.full_name
        if data.phone is not None:
            user.phone = data.phone

    await db.commit()
    return UserResponse.model_validate(user)
