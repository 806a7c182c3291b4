"""Property directory."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.exceptions import NotFoundError, PermissionDeniedError
from rentdesk.models.property import Property
from rentdesk.schemas.property import PropertyCreate, PropertyUpdate

logger = logging.getLogger(__name__)


class PropertyService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_property(self, landlord_id: UUID, data: PropertyCreate) -> Property:
        prop = Property(landlord_id=landlord_id, **data.model_dump())
        self.db.add(prop)
        await self.db.flush()
        logger.info("[PROPERTY] Created property %s for landlord %s", prop.id, landlord_id)
        return prop

    async def list_landlord_properties(self, landlord_id: UUID) -> list[Property]:
        result = await self.db.execute(
            select(Property)
            .where(Property.landlord_id == landlord_id)
            .order_by(Property.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_property(self, property_id: UUID) -> Property:
        prop = await self.db.get(Property, property_id)
        if not prop:
            raise NotFoundError("Property not found")
        return prop

    async def get_owned_property(self, landlord_id: UUID, property_id: UUID) -> Property:
        """Property lookup for landlord-only views and writes."""
        prop = await self.get_property(property_id)
        if prop.landlord_id != landlord_id:
            raise PermissionDeniedError("Access denied")
        return prop

    async def update_property(self, landlord_id: UUID, property_id: UUID, data: PropertyUpdate) -> Property:
        prop = await self.get_owned_property(landlord_id, property_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(prop, field, value)
        await self.db.flush()
        return prop
