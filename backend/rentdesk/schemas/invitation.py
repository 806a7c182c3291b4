"""Invitation and application schemas."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from rentdesk.models.enums import ApplicationStatus, InvitationStatus
from rentdesk.schemas.base import BaseSchema, IDMixin, TimestampMixin


class InvitationCreate(BaseSchema):
    property_id: UUID
    renter_email: EmailStr
    message: Optional[str] = Field(None, max_length=2000)


class InvitationRespond(BaseSchema):
    """Renter's answer to an invitation."""

    status: InvitationStatus

    @field_validator("status")
    @classmethod
    def validate_answer(cls, v: InvitationStatus) -> InvitationStatus:
        if v not in (InvitationStatus.ACCEPTED, InvitationStatus.DECLINED):
            raise ValueError("status must be 'accepted' or 'declined'")
        return v


class InvitationResponse(BaseSchema, IDMixin, TimestampMixin):
    property_id: UUID
    landlord_id: UUID
    renter_email: str
    message: Optional[str] = None
    status: InvitationStatus
    invited_at: datetime
    expires_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None


class ApplicationDocument(BaseSchema):
    name: str
    size: Optional[int] = None
    type: Optional[str] = None
    url: str


class ApplicationCreate(BaseSchema):
    property_id: UUID
    invitation_id: Optional[UUID] = None
    full_name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    employment_company: Optional[str] = Field(None, max_length=255)
    employment_job_title: Optional[str] = Field(None, max_length=255)
    employment_monthly_income_cents: Optional[int] = Field(None, ge=0)
    documents: list[ApplicationDocument] = []


class ApplicationStatusUpdate(BaseSchema):
    """Landlord review of an application."""

    status: ApplicationStatus

    @field_validator("status")
    @classmethod
    def validate_review(cls, v: ApplicationStatus) -> ApplicationStatus:
        if v == ApplicationStatus.SUBMITTED:
            raise ValueError("status must be 'pending', 'approved' or 'rejected'")
        return v


class ApplicationResponse(BaseSchema, IDMixin, TimestampMixin):
    invitation_id: Optional[UUID] = None
    property_id: UUID
    landlord_id: UUID
    renter_email: str
    full_name: str
    phone: Optional[str] = None
    employment_company: Optional[str] = None
    employment_job_title: Optional[str] = None
    employment_monthly_income_cents: Optional[int] = None
    documents: list[dict[str, Any]] = []
    status: ApplicationStatus
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None
