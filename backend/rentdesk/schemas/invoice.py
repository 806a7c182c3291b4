"""Invoice and payment schemas."""

from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import EmailStr, Field

from rentdesk.models.enums import InvoiceStatus, PaymentStatus, PaymentType
from rentdesk.schemas.base import BaseSchema, IDMixin, TimestampMixin


class InvoiceCreate(BaseSchema):
    property_id: UUID
    renter_email: EmailStr
    include_pet_fee: bool = False
    notes: Optional[str] = None
    due_date: Optional[date] = None
    notice_id: Optional[UUID] = None


class InvoiceResponse(BaseSchema, IDMixin, TimestampMixin):
    landlord_id: UUID
    property_id: UUID
    renter_email: str
    renter_user_id: Optional[UUID] = None
    amount_cents: int
    monthly_rent_cents: int
    security_deposit_cents: int
    application_fee_cents: int
    pet_fee_cents: int
    include_pet_fee: bool
    status: InvoiceStatus
    property_details: dict[str, Any] = {}
    notes: Optional[str] = None
    due_date: Optional[date] = None
    notice_id: Optional[UUID] = None
    transaction_id: Optional[str] = None
    paid_at: Optional[datetime] = None


class PaymentConfirm(BaseSchema):
    """Gateway-confirmed payment for an invoice."""

    transaction_id: str = Field(..., min_length=1, max_length=255)
    payment_method: str = Field("card", max_length=50)


class RentPaymentResponse(BaseSchema, IDMixin, TimestampMixin):
    invoice_id: Optional[UUID] = None
    lease_id: Optional[UUID] = None
    property_id: UUID
    landlord_id: UUID
    renter_email: str
    amount_cents: int
    payment_type: PaymentType
    due_date: Optional[date] = None
    paid_date: Optional[datetime] = None
    status: PaymentStatus
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None


class PaymentResult(BaseSchema):
    invoice: InvoiceResponse
    payments: list[RentPaymentResponse]
    lease_id: Optional[UUID] = None
