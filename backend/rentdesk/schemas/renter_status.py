"""Renter status board schemas."""

from typing import Optional
from uuid import UUID

from pydantic import Field

from rentdesk.models.enums import RenterStage
from rentdesk.schemas.base import BaseSchema, IDMixin, TimestampMixin


class RenterStatusUpdate(BaseSchema):
    status: RenterStage
    notes: Optional[str] = Field(None, max_length=2000)


class RenterStatusResponse(BaseSchema, IDMixin, TimestampMixin):
    property_id: UUID
    landlord_id: UUID
    renter_email: str
    renter_name: Optional[str] = None
    status: RenterStage
    invitation_id: Optional[UUID] = None
    application_id: Optional[UUID] = None
    lease_document_id: Optional[UUID] = None
    lease_id: Optional[UUID] = None
    notes: Optional[str] = None
