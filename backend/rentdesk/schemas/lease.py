"""Lease, lease document and template schemas."""

from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import EmailStr, Field, model_validator

from rentdesk.models.enums import LeaseDecision, LeaseDocumentStatus, LeaseStatus
from rentdesk.schemas.base import BaseSchema, IDMixin


class TemplateResponse(BaseSchema, IDMixin):
    name: str
    template_type: str
    region: Optional[str] = None
    url: str
    thumbnail_url: Optional[str] = None
    uploaded_at: datetime


class TemplateCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    template_type: str = Field(..., min_length=1, max_length=100)
    region: Optional[str] = Field(None, max_length=100)
    url: str
    thumbnail_url: Optional[str] = None


class LeaseDocumentSend(BaseSchema):
    """Send a lease template (optionally pre-filled) to a renter."""

    property_id: UUID
    renter_email: EmailStr
    template_id: Optional[UUID] = None
    template_url: Optional[str] = None
    template_name: Optional[str] = None
    field_values: dict[str, Any] = {}

    @model_validator(mode="after")
    def validate_template_source(self):
        if not self.template_id and not self.template_url:
            raise ValueError("template_id or template_url is required")
        return self


class LeaseUploadUrlRequest(BaseSchema):
    file_name: str = Field(..., min_length=1, max_length=255)
    mime_type: str = "application/pdf"
    file_size_bytes: int = Field(..., gt=0)


class LeaseUploadUrlResponse(BaseSchema):
    upload_url: str
    object_path: str
    expires_at: datetime


class LeaseDocumentSubmit(BaseSchema):
    """Renter hands back the signed copy uploaded through the presigned URL."""

    object_path: str = Field(..., min_length=1)


class LeaseDecisionRequest(BaseSchema):
    action: LeaseDecision


class LeaseDocumentResponse(BaseSchema, IDMixin):
    property_id: UUID
    landlord_id: UUID
    renter_email: str
    template_id: Optional[UUID] = None
    template_name: Optional[str] = None
    original_template_url: str
    filled_pdf_url: Optional[str] = None
    field_values: dict[str, Any] = {}
    status: LeaseDocumentStatus
    landlord_action: Optional[LeaseDecision] = None
    renter_completed_at: Optional[datetime] = None
    landlord_reviewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    actions_available: bool = False


class LeaseStart(BaseSchema):
    """Landlord starts the tenancy once the move-in invoice is paid."""

    property_id: UUID
    renter_email: EmailStr
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def validate_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class LeaseResponse(BaseSchema, IDMixin):
    property_id: UUID
    landlord_id: UUID
    renter_email: str
    lease_document_id: Optional[UUID] = None
    start_date: date
    end_date: date
    monthly_rent_cents: int
    security_deposit_cents: int
    status: LeaseStatus
    landlord_signed: bool
    landlord_signed_at: Optional[datetime] = None
    renter_signed: bool
    renter_signed_at: Optional[datetime] = None
    co_signer_required: bool
    co_signer_signed: bool
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class PropertyDocument(BaseSchema):
    """Entry in a property's document list."""

    name: str
    url: str
    source: str
    renter_email: Optional[str] = None
    created_at: datetime
