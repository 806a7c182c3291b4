"""Notices (landlord <-> renter messages) and the landlord notification feed."""

import logging
from datetime import timedelta
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.config import get_settings
from rentdesk.core.database import utcnow
from rentdesk.core.exceptions import NotFoundError
from rentdesk.models.enums import (
    LANDLORD_ONLY_NOTICE_TYPES,
    LEASE_NOTICE_TYPES,
    ApplicationStatus,
    InvitationStatus,
    NoticeStatus,
    NoticeType,
    NotificationType,
)
from rentdesk.models.notice import Notice, Notification

logger = logging.getLogger(__name__)

settings = get_settings()


class NoticeService:
    """Create, list and mark notices."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_notice(
        self,
        type: NoticeType,
        subject: str,
        message: str,
        landlord_id: UUID,
        property_id: Optional[UUID] = None,
        renter_email: Optional[str] = None,
        renter_user_id: Optional[UUID] = None,
        lease_document_id: Optional[UUID] = None,
        invoice_id: Optional[UUID] = None,
        invitation_id: Optional[UUID] = None,
    ) -> Notice:
        notice = Notice(
            type=type,
            subject=subject,
            message=message,
            landlord_id=landlord_id,
            property_id=property_id,
            renter_email=renter_email.lower() if renter_email else None,
            renter_user_id=renter_user_id,
            lease_document_id=lease_document_id,
            invoice_id=invoice_id,
            invitation_id=invitation_id,
            status=NoticeStatus.ACTIVE,
            sent_at=utcnow(),
            read_at=None,
        )
        self.db.add(notice)
        await self.db.flush()
        logger.info("[NOTICE] Created %s notice %s for %s", type.value, notice.id, notice.renter_email)
        return notice

    async def get(self, notice_id: UUID) -> Notice:
        notice = await self.db.get(Notice, notice_id)
        if not notice or notice.status == NoticeStatus.DELETED:
            raise NotFoundError("Notice not found")
        return notice

    async def get_landlord_notices(self, landlord_id: UUID) -> list[Notice]:
        """General feed: everything except lease-status notices."""
        result = await self.db.execute(
            select(Notice)
            .where(
                Notice.landlord_id == landlord_id,
                Notice.status != NoticeStatus.DELETED,
                Notice.type.not_in(list(LEASE_NOTICE_TYPES)),
            )
            .order_by(Notice.sent_at.desc())
        )
        return list(result.scalars().all())

    async def get_landlord_lease_notices(self, landlord_id: UUID) -> list[Notice]:
        result = await self.db.execute(
            select(Notice)
            .where(
                Notice.landlord_id == landlord_id,
                Notice.status != NoticeStatus.DELETED,
                Notice.type.in_(list(LEASE_NOTICE_TYPES)),
            )
            .order_by(Notice.sent_at.desc())
        )
        return list(result.scalars().all())

    async def get_renter_notices(self, renter_email: str) -> list[Notice]:
        result = await self.db.execute(
            select(Notice)
            .where(
                Notice.renter_email == renter_email.lower(),
                Notice.status != NoticeStatus.DELETED,
                Notice.type.not_in(list(LANDLORD_ONLY_NOTICE_TYPES)),
            )
            .order_by(Notice.sent_at.desc())
        )
        return list(result.scalars().all())

    async def get_property_notices(self, property_id: UUID) -> list[Notice]:
        result = await self.db.execute(
            select(Notice)
            .where(Notice.property_id == property_id, Notice.status != NoticeStatus.DELETED)
            .order_by(Notice.sent_at.desc())
        )
        return list(result.scalars().all())

    async def mark_as_read(self, notice_id: UUID) -> Notice:
        """Set read_at the first time only."""
        notice = await self.get(notice_id)
        if notice.read_at is None:
            notice.read_at = utcnow()
            await self.db.flush()
        return notice

    async def mark_lease_notices_read(self, renter_email: str, lease_document_id: UUID) -> int:
        """Mark the renter's unread lease_received notices for a document as read."""
        result = await self.db.execute(
            update(Notice)
            .where(
                Notice.renter_email == renter_email.lower(),
                Notice.lease_document_id == lease_document_id,
                Notice.type == NoticeType.LEASE_RECEIVED,
                Notice.read_at.is_(None),
            )
            .values(read_at=utcnow())
        )
        return result.rowcount or 0

    async def delete_notice(self, notice_id: UUID) -> Notice:
        notice = await self.get(notice_id)
        notice.status = NoticeStatus.DELETED
        await self.db.flush()
        logger.info("[NOTICE] Deleted notice %s", notice_id)
        return notice

    async def unread_count_for_renter(self, renter_email: str) -> int:
        result = await self.db.execute(
            select(func.count(Notice.id)).where(
                Notice.renter_email == renter_email.lower(),
                Notice.status != NoticeStatus.DELETED,
                Notice.type.not_in(list(LANDLORD_ONLY_NOTICE_TYPES)),
                Notice.read_at.is_(None),
            )
        )
        return result.scalar_one()

    async def unread_count_for_landlord(self, landlord_id: UUID) -> int:
        """Unread notices addressed to the landlord."""
        result = await self.db.execute(
            select(func.count(Notice.id)).where(
                Notice.landlord_id == landlord_id,
                Notice.status != NoticeStatus.DELETED,
                Notice.type.in_(list(LANDLORD_ONLY_NOTICE_TYPES)),
                Notice.read_at.is_(None),
            )
        )
        return result.scalar_one()


class NotificationService:
    """Landlord activity feed."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        landlord_id: UUID,
        type: NotificationType,
        title: str,
        message: str,
        data: Optional[dict[str, Any]] = None,
    ) -> Notification:
        notification = Notification(
            landlord_id=landlord_id,
            type=type,
            title=title,
            message=message,
            data=data or {},
            read_at=None,
            created_at=utcnow(),
        )
        self.db.add(notification)
        await self.db.flush()
        return notification

    async def list_for_landlord(self, landlord_id: UUID) -> list[Notification]:
        since = utcnow() - timedelta(days=settings.notification_window_days)
        result = await self.db.execute(
            select(Notification)
            .where(Notification.landlord_id == landlord_id, Notification.created_at > since)
            .order_by(Notification.created_at.desc())
        )
        return list(result.scalars().all())

    async def unread_count(self, landlord_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count(Notification.id)).where(
                Notification.landlord_id == landlord_id,
                Notification.read_at.is_(None),
            )
        )
        return result.scalar_one()

    async def mark_as_read(self, landlord_id: UUID, notification_id: UUID) -> Notification:
        notification = await self.db.get(Notification, notification_id)
        if not notification or notification.landlord_id != landlord_id:
            raise NotFoundError("Notification not found")
        if notification.read_at is None:
            notification.read_at = utcnow()
            await self.db.flush()
        return notification

    async def mark_all_as_read(self, landlord_id: UUID) -> int:
        result = await self.db.execute(
            update(Notification)
            .where(Notification.landlord_id == landlord_id, Notification.read_at.is_(None))
            .values(read_at=utcnow())
        )
        return result.rowcount or 0

    async def notify_application_submitted(
        self,
        landlord_id: UUID,
        application_id: UUID,
        property_id: UUID,
        renter_email: str,
        full_name: str,
    ) -> Notification:
        return await self.create(
            landlord_id=landlord_id,
            type=NotificationType.APPLICATION_SUBMITTED,
            title="New Application Submitted",
            message="A new rental application has been submitted for your property.",
            data={
                "application_id": str(application_id),
                "property_id": str(property_id),
                "renter_email": renter_email,
                "full_name": full_name,
            },
        )

    async def notify_application_status_change(
        self,
        landlord_id: UUID,
        application_id: UUID,
        status: ApplicationStatus,
        renter_email: str,
    ) -> Notification:
        messages = {
            ApplicationStatus.APPROVED: "The rental application has been approved.",
            ApplicationStatus.REJECTED: "The rental application has been rejected.",
            ApplicationStatus.PENDING: "The rental application is now under review.",
        }
        type_ = (
            NotificationType.APPLICATION_APPROVED
            if status == ApplicationStatus.APPROVED
            else NotificationType.APPLICATION_REJECTED
        )
        return await self.create(
            landlord_id=landlord_id,
            type=type_,
            title=f"Application {status.value.capitalize()}",
            message=messages.get(status, f"Application status changed to {status.value}"),
            data={
                "application_id": str(application_id),
                "status": status.value,
                "renter_email": renter_email,
            },
        )

    async def notify_invitation_sent(
        self,
        landlord_id: UUID,
        invitation_id: UUID,
        property_id: UUID,
        renter_email: str,
    ) -> Notification:
        return await self.create(
            landlord_id=landlord_id,
            type=NotificationType.INVITATION_SENT,
            title="Invitation Sent",
            message=f"An invitation to apply has been sent to {renter_email}.",
            data={
                "invitation_id": str(invitation_id),
                "property_id": str(property_id),
                "renter_email": renter_email,
            },
        )

    async def notify_invitation_responded(
        self,
        landlord_id: UUID,
        invitation_id: UUID,
        property_id: UUID,
        renter_email: str,
        status: InvitationStatus,
    ) -> Notification:
        accepted = status == InvitationStatus.ACCEPTED
        return await self.create(
            landlord_id=landlord_id,
            type=NotificationType.INVITATION_ACCEPTED if accepted else NotificationType.INVITATION_DECLINED,
            title="Invitation Accepted" if accepted else "Invitation Declined",
            message=f"{renter_email} has {status.value} your invitation.",
            data={
                "invitation_id": str(invitation_id),
                "property_id": str(property_id),
                "renter_email": renter_email,
            },
        )

    async def notify_tenant_moved_in(
        self,
        landlord_id: UUID,
        property_id: UUID,
        renter_email: str,
        property_address: str,
    ) -> Notification:
        return await self.create(
            landlord_id=landlord_id,
            type=NotificationType.TENANT_MOVED_IN,
            title="New Tenant Moved In",
            message=(
                f"A new tenant has moved into your property at {property_address}. "
                "The lease is now active and rent payments have been received."
            ),
            data={
                "property_id": str(property_id),
                "renter_email": renter_email,
                "property_address": property_address,
            },
        )
