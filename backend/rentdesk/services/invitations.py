"""Invitation workflow: landlord invites a renter email to apply."""

import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.config import get_settings
from rentdesk.core.database import utcnow
from rentdesk.core.exceptions import InvitationExpiredError, NotFoundError, PermissionDeniedError
from rentdesk.models.enums import AuditAction, InvitationStatus, NoticeType, RenterStage
from rentdesk.models.invitation import Invitation
from rentdesk.services.audit import AuditService
from rentdesk.services.notices import NoticeService, NotificationService
from rentdesk.services.properties import PropertyService
from rentdesk.services.renter_status import RenterStatusService
from rentdesk.services.transitions import require_transition

logger = logging.getLogger(__name__)

settings = get_settings()


class InvitationService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)
        self.notices = NoticeService(db)
        self.notifications = NotificationService(db)
        self.properties = PropertyService(db)
        self.statuses = RenterStatusService(db)

    async def create(
        self,
        landlord_id: UUID,
        property_id: UUID,
        renter_email: str,
        message: Optional[str] = None,
    ) -> Invitation:
        prop = await self.properties.get_owned_property(landlord_id, property_id)
        email = renter_email.lower()
        now = utcnow()

        invitation = Invitation(
            property_id=prop.id,
            landlord_id=landlord_id,
            renter_email=email,
            message=message,
            status=InvitationStatus.PENDING,
            invited_at=now,
            expires_at=now + timedelta(days=settings.invitation_ttl_days),
        )
        self.db.add(invitation)
        await self.db.flush()

        await self.notices.create_notice(
            type=NoticeType.INVITATION_SENT,
            subject="Invitation to Apply",
            message=(
                f"You have been invited to apply for the property at {prop.address_line}."
                + (f"\n\n{message}" if message else "")
            ),
            landlord_id=landlord_id,
            property_id=prop.id,
            renter_email=email,
            invitation_id=invitation.id,
        )
        await self.notifications.notify_invitation_sent(landlord_id, invitation.id, prop.id, email)
        await self.audit.log_invitation_sent(invitation.id, landlord_id, email)

        logger.info("[INVITE] Invitation %s sent to %s for property %s", invitation.id, email, prop.id)
        return invitation

    async def get(self, invitation_id: UUID) -> Invitation:
        invitation = await self.db.get(Invitation, invitation_id)
        if not invitation:
            raise NotFoundError("Invitation not found")
        return invitation

    async def get_for_renter(self, renter_email: str, invitation_id: UUID) -> Invitation:
        invitation = await self.get(invitation_id)
        if invitation.renter_email != renter_email.lower():
            raise PermissionDeniedError()
        return invitation

    async def respond(
        self,
        invitation_id: UUID,
        renter_email: str,
        status: InvitationStatus,
        renter_user_id: Optional[UUID] = None,
    ) -> Invitation:
        invitation = await self.get_for_renter(renter_email, invitation_id)
        now = utcnow()

        if (
            invitation.status == InvitationStatus.PENDING
            and invitation.expires_at is not None
            and invitation.expires_at < now
        ):
            invitation.status = InvitationStatus.EXPIRED
            await self.db.flush()
            logger.info("[INVITE] Invitation %s expired before response", invitation.id)
            raise InvitationExpiredError()

        require_transition("invitation", invitation.status, status)
        invitation.status = status
        invitation.responded_at = now
        await self.db.flush()

        if status == InvitationStatus.ACCEPTED:
            await self.statuses.ensure(
                property_id=invitation.property_id,
                landlord_id=invitation.landlord_id,
                renter_email=invitation.renter_email,
                stage=RenterStage.INVITE,
                notes=f"Invitation accepted - {invitation.renter_email}",
                invitation_id=invitation.id,
            )

        await self.notifications.notify_invitation_responded(
            invitation.landlord_id,
            invitation.id,
            invitation.property_id,
            invitation.renter_email,
            status,
        )
        await self.audit.log(
            action=AuditAction.INVITATION_RESPONDED,
            resource_type="invitation",
            resource_id=invitation.id,
            user_id=renter_user_id,
            details={"status": status.value},
        )
        logger.info("[INVITE] Invitation %s %s by %s", invitation.id, status.value, invitation.renter_email)
        return invitation

    async def list_for_landlord(self, landlord_id: UUID) -> list[Invitation]:
        result = await self.db.execute(
            select(Invitation)
            .where(Invitation.landlord_id == landlord_id)
            .order_by(Invitation.invited_at.desc())
        )
        return list(result.scalars().all())

    async def list_for_property(self, landlord_id: UUID, property_id: UUID) -> list[Invitation]:
        await self.properties.get_owned_property(landlord_id, property_id)
        result = await self.db.execute(
            select(Invitation)
            .where(Invitation.property_id == property_id)
            .order_by(Invitation.invited_at.desc())
        )
        return list(result.scalars().all())

    async def list_for_renter(self, renter_email: str) -> list[Invitation]:
        result = await self.db.execute(
            select(Invitation)
            .where(Invitation.renter_email == renter_email.lower())
            .order_by(Invitation.invited_at.desc())
        )
        return list(result.scalars().all())
