"""Tenancy records (leases) and the start-lease step."""

import logging
from datetime import date, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.config import get_settings
from rentdesk.core.database import utcnow
from rentdesk.core.exceptions import NotFoundError, PermissionDeniedError
from rentdesk.models.enums import AuditAction, LeaseDocumentStatus, LeaseStatus, PropertyStatus, RenterStage
from rentdesk.models.lease import Lease, LeaseDocument
from rentdesk.models.property import Property
from rentdesk.services.audit import AuditService
from rentdesk.services.properties import PropertyService
from rentdesk.services.renter_status import RenterStatusService
from rentdesk.services.transitions import require_transition

logger = logging.getLogger(__name__)

settings = get_settings()

OPEN_LEASE_STATUSES = (LeaseStatus.DRAFT, LeaseStatus.PENDING, LeaseStatus.ACTIVE)


class LeaseService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)
        self.properties = PropertyService(db)
        self.statuses = RenterStatusService(db)

    async def find_open_lease(self, property_id: UUID, renter_email: str) -> Optional[Lease]:
        result = await self.db.execute(
            select(Lease)
            .where(
                Lease.property_id == property_id,
                Lease.renter_email == renter_email.lower(),
                Lease.status.in_(OPEN_LEASE_STATUSES),
            )
            .order_by(Lease.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def activate_for_payment(
        self,
        prop: Property,
        renter_email: str,
        monthly_rent_cents: int,
        security_deposit_cents: int,
    ) -> Lease:
        """Find or create the pair's lease and make it active with both signatures."""
        email = renter_email.lower()
        lease = await self.find_open_lease(prop.id, email)
        now = utcnow()

        if lease is None:
            accepted_doc = await self.db.execute(
                select(LeaseDocument.id)
                .where(
                    LeaseDocument.property_id == prop.id,
                    LeaseDocument.renter_email == email,
                    LeaseDocument.status == LeaseDocumentStatus.ACCEPTED,
                )
                .order_by(LeaseDocument.landlord_reviewed_at.desc())
                .limit(1)
            )
            start = now.date()
            lease = Lease(
                property_id=prop.id,
                landlord_id=prop.landlord_id,
                renter_email=email,
                lease_document_id=accepted_doc.scalar_one_or_none(),
                start_date=start,
                end_date=start + timedelta(days=settings.default_lease_term_days),
                monthly_rent_cents=monthly_rent_cents,
                security_deposit_cents=security_deposit_cents,
                status=LeaseStatus.DRAFT,
            )
            self.db.add(lease)
            await self.db.flush()
            logger.info("[LEASE] Created lease %s for %s on property %s", lease.id, email, prop.id)

        if lease.status != LeaseStatus.ACTIVE:
            require_transition("lease", lease.status, LeaseStatus.ACTIVE)
            lease.status = LeaseStatus.ACTIVE
            lease.landlord_signed = True
            lease.landlord_signed_at = lease.landlord_signed_at or now
            lease.renter_signed = True
            lease.renter_signed_at = lease.renter_signed_at or now
            lease.completed_at = now
            await self.db.flush()

        return lease

    async def start_lease(
        self,
        landlord_id: UUID,
        property_id: UUID,
        renter_email: str,
        start_date: date,
        end_date: date,
    ) -> Lease:
        """Renter status payment -> leased; record the tenancy dates."""
        prop = await self.properties.get_owned_property(landlord_id, property_id)
        email = renter_email.lower()

        row = await self.statuses.get_for_pair(prop.id, email)
        if row is None:
            raise NotFoundError("Renter status not found")
        lease = await self.find_open_lease(prop.id, email)
        if lease is None or lease.status != LeaseStatus.ACTIVE:
            raise NotFoundError("No active lease for this renter")

        await self.statuses.advance(row, RenterStage.LEASED, "Lease started after payment received", landlord_id)
        row.lease_id = lease.id

        lease.start_date = start_date
        lease.end_date = end_date
        prop.status = PropertyStatus.OCCUPIED

        await self.audit.log(
            action=AuditAction.LEASE_STARTED,
            resource_type="lease",
            resource_id=lease.id,
            user_id=landlord_id,
            details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )
        await self.db.flush()
        logger.info("[LEASE] Lease %s started for %s", lease.id, email)
        return lease

    async def get_for_user(self, lease_id: UUID, landlord_id: Optional[UUID], renter_email: Optional[str]) -> Lease:
        lease = await self.db.get(Lease, lease_id)
        if not lease:
            raise NotFoundError("Lease not found")
        if lease.landlord_id != landlord_id and lease.renter_email != (renter_email or "").lower():
            raise PermissionDeniedError()
        return lease

    async def list_for_landlord(self, landlord_id: UUID, property_id: Optional[UUID] = None) -> list[Lease]:
        query = select(Lease).where(Lease.landlord_id == landlord_id)
        if property_id:
            query = query.where(Lease.property_id == property_id)
        result = await self.db.execute(query.order_by(Lease.created_at.desc()))
        return list(result.scalars().all())

    async def list_for_renter(self, renter_email: str) -> list[Lease]:
        result = await self.db.execute(
            select(Lease)
            .where(Lease.renter_email == renter_email.lower())
            .order_by(Lease.created_at.desc())
        )
        return list(result.scalars().all())
