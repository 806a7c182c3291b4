"""Renter -> landlord messages with attachments."""

import logging
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.exceptions import DomainValidationError, NotFoundError, PermissionDeniedError
from rentdesk.models.enums import MessageStatus
from rentdesk.models.message import LandlordMessage
from rentdesk.services.properties import PropertyService
from rentdesk.services.storage import StorageService

logger = logging.getLogger(__name__)

ATTACHMENT_PREFIX = "messages"


class MessageService:
    def __init__(self, db: AsyncSession, storage: Optional[StorageService] = None):
        self.db = db
        self.storage = storage
        self.properties = PropertyService(db)

    async def create_attachment_upload(
        self,
        renter_user_id: UUID,
        file_name: str,
        mime_type: str,
        file_size_bytes: int,
    ) -> tuple[str, str, datetime]:
        """Presigned upload under ``messages/<renter id>/``."""
        return await self.storage.create_presigned_upload(
            prefix=ATTACHMENT_PREFIX,
            owner_id=renter_user_id,
            file_name=file_name,
            mime_type=mime_type,
            file_size_bytes=file_size_bytes,
        )

    async def _attachment(self, renter_user_id: UUID, file: dict[str, Any]) -> dict[str, Any]:
        object_path = file["object_path"]
        if not self.storage.is_owned_path(ATTACHMENT_PREFIX, renter_user_id, object_path):
            raise DomainValidationError(f"Attachment {file['name']} was not uploaded by this renter")
        if not await self.storage.verify_upload(object_path):
            raise DomainValidationError(f"Attachment {file['name']} upload not found")
        return {
            "name": file["name"],
            "size": file["size"],
            "type": file["type"],
            "object_path": object_path,
            "url": self.storage.object_url(object_path),
        }

    async def create(
        self,
        renter_email: str,
        renter_user_id: UUID,
        property_id: UUID,
        message: str,
        files: list[dict[str, Any]],
        lease_id: Optional[UUID] = None,
    ) -> LandlordMessage:
        prop = await self.properties.get_property(property_id)
        attachments = [await self._attachment(renter_user_id, f) for f in files]
        entry = LandlordMessage(
            renter_email=renter_email.lower(),
            renter_user_id=renter_user_id,
            landlord_id=prop.landlord_id,
            property_id=prop.id,
            lease_id=lease_id,
            message=message,
            files=attachments,
            status=MessageStatus.UNREAD,
        )
        self.db.add(entry)
        await self.db.flush()
        logger.info("[MESSAGE] %s wrote to landlord %s (%d files)", entry.renter_email, prop.landlord_id, len(files))
        return entry

    async def list_for_landlord(self, landlord_id: UUID) -> list[LandlordMessage]:
        result = await self.db.execute(
            select(LandlordMessage)
            .where(
                LandlordMessage.landlord_id == landlord_id,
                LandlordMessage.status != MessageStatus.DELETED,
            )
            .order_by(LandlordMessage.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_for_renter(self, renter_email: str) -> list[LandlordMessage]:
        result = await self.db.execute(
            select(LandlordMessage)
            .where(
                LandlordMessage.renter_email == renter_email.lower(),
                LandlordMessage.status != MessageStatus.DELETED,
            )
            .order_by(LandlordMessage.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_owned(self, landlord_id: UUID, message_id: UUID) -> LandlordMessage:
        entry = await self.db.get(LandlordMessage, message_id)
        if not entry or entry.status == MessageStatus.DELETED:
            raise NotFoundError("Message not found")
        if entry.landlord_id != landlord_id:
            raise PermissionDeniedError()
        return entry

    async def mark_read(self, landlord_id: UUID, message_id: UUID) -> LandlordMessage:
        entry = await self.get_owned(landlord_id, message_id)
        entry.status = MessageStatus.READ
        await self.db.flush()
        return entry

    async def delete(self, landlord_id: UUID, message_id: UUID) -> LandlordMessage:
        """Soft delete. Attachments go once the deletion is committed (``remove_attachments``)."""
        entry = await self.get_owned(landlord_id, message_id)
        entry.status = MessageStatus.DELETED
        await self.db.flush()
        logger.info("[MESSAGE] Deleted message %s", message_id)
        return entry

    async def remove_attachments(self, entry: LandlordMessage) -> int:
        """Delete a removed message's files from storage.

        Only paths inside the sender's attachment folder are touched. A failed
        removal is logged and the rest still go.
        """
        removed = 0
        for file in entry.files or []:
            object_path = file.get("object_path")
            if not object_path or not self.storage.is_owned_path(ATTACHMENT_PREFIX, entry.renter_user_id, object_path):
                logger.warning("[MESSAGE] Skipping attachment %s of message %s", file.get("url"), entry.id)
                continue
            try:
                if await self.storage.delete_object(object_path):
                    removed += 1
            except Exception as e:
                logger.warning("[MESSAGE] Failed to delete attachment %s: %s", object_path, e)
        return removed
