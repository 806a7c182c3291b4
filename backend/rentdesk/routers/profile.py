"""Renter profile router."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import get_db
from rentdesk.core.exceptions import NotFoundError
from rentdesk.core.security import AuthenticatedUser, require_registered
from rentdesk.schemas.profile import RenterProfileResponse, RenterProfileUpdate
from rentdesk.services.profiles import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=RenterProfileResponse)
async def get_profile(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered),
):
    profile = await ProfileService(db).get(current_user.db_user_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return RenterProfileResponse.model_validate(profile)


@router.put("", response_model=RenterProfileResponse)
async def save_profile(
    data: RenterProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered),
):
    """Create or replace the caller's renter profile."""
    profile = await ProfileService(db).save(current_user.db_user_id, current_user.email, data)
    await db.commit()
    return RenterProfileResponse.model_validate(profile)
