"""Landlord message schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from rentdesk.models.enums import MessageStatus
from rentdesk.schemas.base import BaseSchema, IDMixin, TimestampMixin


class AttachmentUploadUrlRequest(BaseSchema):
    file_name: str = Field(..., min_length=1, max_length=255)
    mime_type: str
    file_size_bytes: int = Field(..., gt=0)


class AttachmentUploadUrlResponse(BaseSchema):
    upload_url: str
    object_path: str
    expires_at: datetime


class MessageAttachment(BaseSchema):
    """A file the renter uploaded through ``POST /messages/attachments/upload-url``."""

    name: str = Field(..., min_length=1, max_length=255)
    size: int = Field(..., ge=0)
    type: str
    object_path: str = Field(..., min_length=1)


class MessageFile(BaseSchema):
    name: str
    size: int
    type: str
    url: str


class MessageCreate(BaseSchema):
    property_id: UUID
    lease_id: Optional[UUID] = None
    message: str = Field(..., min_length=1, max_length=5000)
    files: list[MessageAttachment] = []


class MessageResponse(BaseSchema, IDMixin, TimestampMixin):
    renter_email: str
    renter_user_id: Optional[UUID] = None
    landlord_id: UUID
    property_id: UUID
    lease_id: Optional[UUID] = None
    message: str
    files: list[MessageFile] = []
    status: MessageStatus
