"""Renter status board: one row per (property, renter email)."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.exceptions import InvalidTransitionError, NotFoundError, PermissionDeniedError
from rentdesk.models.enums import RenterStage
from rentdesk.models.renter_status import RenterStatus
from rentdesk.services.audit import AuditService
from rentdesk.services.transitions import WORKFLOW_OWNED_STAGES, require_transition

logger = logging.getLogger(__name__)

LINK_FIELDS = ("invitation_id", "application_id", "lease_document_id", "lease_id")


class RenterStatusService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def get_by_property(self, property_id: UUID) -> list[RenterStatus]:
        result = await self.db.execute(
            select(RenterStatus)
            .where(RenterStatus.property_id == property_id)
            .order_by(RenterStatus.updated_at.desc())
        )
        return list(result.scalars().all())

    async def get_by_landlord(self, landlord_id: UUID) -> list[RenterStatus]:
        result = await self.db.execute(
            select(RenterStatus)
            .where(RenterStatus.landlord_id == landlord_id)
            .order_by(RenterStatus.updated_at.desc())
        )
        return list(result.scalars().all())

    async def get_by_email(self, renter_email: str, property_id: Optional[UUID] = None) -> list[RenterStatus]:
        query = select(RenterStatus).where(RenterStatus.renter_email == renter_email.lower())
        if property_id:
            query = query.where(RenterStatus.property_id == property_id)
        result = await self.db.execute(query.order_by(RenterStatus.updated_at.desc()))
        return list(result.scalars().all())

    async def get_for_pair(
        self,
        property_id: UUID,
        renter_email: str,
        for_update: bool = False,
    ) -> Optional[RenterStatus]:
        """The pair's row, optionally locked (SELECT ... FOR UPDATE) for a gated decision."""
        query = select(RenterStatus).where(
            RenterStatus.property_id == property_id,
            RenterStatus.renter_email == renter_email.lower(),
        )
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def ensure(
        self,
        property_id: UUID,
        landlord_id: UUID,
        renter_email: str,
        stage: RenterStage,
        renter_name: Optional[str] = None,
        notes: Optional[str] = None,
        **links: Optional[UUID],
    ) -> tuple[RenterStatus, bool]:
        """Return the pair's row, creating it at ``stage`` when absent.

        Returns:
            Tuple of (row, created). Link ids passed as keyword arguments are
            filled in on an existing row.
        """
        email = renter_email.lower()
        row = await self.get_for_pair(property_id, email)
        if row:
            for field, value in links.items():
                if field in LINK_FIELDS and value is not None:
                    setattr(row, field, value)
            return row, False

        row = RenterStatus(
            property_id=property_id,
            landlord_id=landlord_id,
            renter_email=email,
            renter_name=renter_name or email.split("@")[0],
            status=stage,
            notes=notes,
            **{k: v for k, v in links.items() if k in LINK_FIELDS},
        )
        self.db.add(row)
        await self.db.flush()
        logger.info("[STATUS] Created %s row for %s on property %s", stage.value, email, property_id)
        await self.audit.log_stage_changed(row.id, None, None, stage.value)
        return row, True

    async def advance(
        self,
        row: RenterStatus,
        stage: RenterStage,
        notes: Optional[str] = None,
        user_id: Optional[UUID] = None,
    ) -> RenterStatus:
        """Move a row along the transition table."""
        previous = row.status
        require_transition("renter_status", previous, stage)
        row.status = stage
        if notes:
            row.notes = notes
        await self.db.flush()
        logger.info("[STATUS] %s on %s: %s -> %s", row.renter_email, row.property_id, previous.value, stage.value)
        await self.audit.log_stage_changed(row.id, user_id, previous.value, stage.value)
        return row

    async def get_owned(self, landlord_id: UUID, status_id: UUID) -> RenterStatus:
        row = await self.db.get(RenterStatus, status_id)
        if not row:
            raise NotFoundError("Renter status not found")
        if row.landlord_id != landlord_id:
            raise PermissionDeniedError()
        return row

    async def move_to_stage(
        self,
        landlord_id: UUID,
        status_id: UUID,
        stage: RenterStage,
        notes: Optional[str] = None,
    ) -> RenterStatus:
        """Manual board move by the landlord; workflow-owned stages are refused."""
        row = await self.get_owned(landlord_id, status_id)
        if stage in WORKFLOW_OWNED_STAGES:
            raise InvalidTransitionError(f"Stage '{stage.value}' is set by {WORKFLOW_OWNED_STAGES[stage]}")
        return await self.advance(row, stage, notes=notes, user_id=landlord_id)

    async def delete(self, landlord_id: UUID, status_id: UUID) -> None:
        row = await self.get_owned(landlord_id, status_id)
        await self.db.delete(row)
        await self.db.flush()
        logger.info("[STATUS] Deleted row %s", status_id)
