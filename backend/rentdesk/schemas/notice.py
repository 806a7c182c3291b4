"""Notice and notification schemas."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from rentdesk.models.enums import WORKFLOW_NOTICE_TYPES, NoticeStatus, NoticeType, NotificationType
from rentdesk.schemas.base import BaseSchema, IDMixin


class NoticeCreate(BaseSchema):
    """Notice a landlord sends directly to a renter."""

    type: NoticeType
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    property_id: UUID
    renter_email: EmailStr

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: NoticeType) -> NoticeType:
        if v in WORKFLOW_NOTICE_TYPES:
            raise ValueError(f"Notice type '{v.value}' is created by the system")
        return v


class NoticeResponse(BaseSchema, IDMixin):
    type: NoticeType
    subject: str
    message: str
    landlord_id: UUID
    property_id: Optional[UUID] = None
    renter_email: Optional[str] = None
    renter_user_id: Optional[UUID] = None
    lease_document_id: Optional[UUID] = None
    invoice_id: Optional[UUID] = None
    invitation_id: Optional[UUID] = None
    status: NoticeStatus
    sent_at: datetime
    read_at: Optional[datetime] = None


class NotificationResponse(BaseSchema, IDMixin):
    landlord_id: UUID
    type: NotificationType
    title: str
    message: str
    data: dict[str, Any] = {}
    read_at: Optional[datetime] = None
    created_at: datetime
