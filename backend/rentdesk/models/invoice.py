"""Invoice and RentPayment models."""

import uuid
from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import BigInteger, Boolean, CheckConstraint, Date, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from rentdesk.core.database import Base, JSONType, db_enum, utcnow
from rentdesk.models.enums import InvoiceStatus, PaymentStatus, PaymentType


class Invoice(Base):
    """Move-in invoice issued by a landlord to a renter."""

    __tablename__ = "invoices"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    landlord_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    renter_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    renter_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Money (ALL INTEGER CENTS - BIGINT)
    amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    monthly_rent_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    security_deposit_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    application_fee_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    pet_fee_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    include_pet_fee: Mapped[bool] = mapped_column(Boolean, default=False)

    status: Mapped[InvoiceStatus] = mapped_column(
        db_enum(InvoiceStatus),
        default=InvoiceStatus.SENT,
        nullable=False,
        index=True,
    )
    property_details: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    notice_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    transaction_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("amount_cents >= 0", name="ck_invoice_amount_non_negative"),
    )


class RentPayment(Base):
    """One settled component of an invoice."""

    __tablename__ = "rent_payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    invoice_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("invoices.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    lease_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("leases.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    landlord_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    renter_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    amount_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    payment_type: Mapped[PaymentType] = mapped_column(db_enum(PaymentType), nullable=False)
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    paid_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    status: Mapped[PaymentStatus] = mapped_column(
        db_enum(PaymentStatus),
        default=PaymentStatus.PENDING,
        nullable=False,
        index=True,
    )
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    transaction_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
