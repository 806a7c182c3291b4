"""Renter profile storage."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.models.user import RenterProfile
from rentdesk.schemas.profile import RenterProfileUpdate

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: UUID) -> Optional[RenterProfile]:
        result = await self.db.execute(select(RenterProfile).where(RenterProfile.user_id == user_id))
        return result.scalar_one_or_none()

    async def save(self, user_id: UUID, email: str, data: RenterProfileUpdate) -> RenterProfile:
        """Create or replace the profile.

        Nested values are dumped in JSON mode so calendar dates are stored as
        ``YYYY-MM-DD`` strings and read back as the same dates.
        """
        values = data.model_dump(mode="json", exclude={"date_of_birth"})
        profile = await self.get(user_id)
        if profile is None:
            profile = RenterProfile(user_id=user_id, email=email.lower(), full_name=data.full_name)
            self.db.add(profile)

        profile.email = email.lower()
        profile.date_of_birth = data.date_of_birth
        for field, value in values.items():
            setattr(profile, field, value)
        await self.db.flush()
        logger.info("[PROFILE] Saved renter profile for user %s", user_id)
        return profile
