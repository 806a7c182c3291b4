"""Renter -> landlord messages router."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import get_db
from rentdesk.core.security import AuthenticatedUser, require_landlord, require_renter
from rentdesk.schemas.message import (
    AttachmentUploadUrlRequest,
    AttachmentUploadUrlResponse,
    MessageCreate,
    MessageResponse,
)
from rentdesk.services.messages import MessageService
from rentdesk.services.storage import StorageService, get_storage_service

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("/attachments/upload-url", response_model=AttachmentUploadUrlResponse)
async def create_attachment_upload_url(
    data: AttachmentUploadUrlRequest,
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    """Presigned URL for one message attachment; pass its object_path when sending."""
    upload_url, object_path, expires_at = await MessageService(db, storage).create_attachment_upload(
        current_user.db_user_id,
        data.file_name,
        data.mime_type,
        data.file_size_bytes,
    )
    return AttachmentUploadUrlResponse(upload_url=upload_url, object_path=object_path, expires_at=expires_at)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    data: MessageCreate,
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    entry = await MessageService(db, storage).create(
        current_user.email,
        current_user.db_user_id,
        data.property_id,
        data.message,
        [f.model_dump() for f in data.files],
        lease_id=data.lease_id,
    )
    await db.commit()
    return MessageResponse.model_validate(entry)


@router.get("", response_model=list[MessageResponse])
async def list_messages(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    entries = await MessageService(db).list_for_landlord(current_user.db_user_id)
    return [MessageResponse.model_validate(m) for m in entries]


@router.get("/mine", response_model=list[MessageResponse])
async def list_my_messages(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    entries = await MessageService(db).list_for_renter(current_user.email)
    return [MessageResponse.model_validate(m) for m in entries]


@router.post("/{message_id}/read", response_model=MessageResponse)
async def mark_message_read(
    message_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    entry = await MessageService(db).mark_read(current_user.db_user_id, message_id)
    await db.commit()
    return MessageResponse.model_validate(entry)


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: UUID,
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Soft-delete a message, then remove its attachments from storage."""
    service = MessageService(db, storage)
    entry = await service.delete(current_user.db_user_id, message_id)
    await db.commit()
    await service.remove_attachments(entry)
