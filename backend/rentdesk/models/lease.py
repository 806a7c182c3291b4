"""Lease, LeaseDocument and PdfTemplate models."""

import uuid
from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import BigInteger, Boolean, CheckConstraint, Date, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from rentdesk.core.database import Base, JSONType, db_enum, utcnow
from rentdesk.models.enums import LeaseDecision, LeaseDocumentStatus, LeaseStatus


class PdfTemplate(Base):
    """A fillable lease template stored in object storage."""

    __tablename__ = "pdf_templates"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    template_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    region: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    url: Mapped[str] = mapped_column(String(1024), nullable=False)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class LeaseDocument(Base):
    """A lease PDF sent to a renter to fill and sign."""

    __tablename__ = "lease_documents"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
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

    template_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("pdf_templates.id", ondelete="SET NULL"),
        nullable=True,
    )
    template_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    original_template_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    filled_pdf_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    field_values: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)

    status: Mapped[LeaseDocumentStatus] = mapped_column(
        db_enum(LeaseDocumentStatus),
        default=LeaseDocumentStatus.DRAFT,
        nullable=False,
        index=True,
    )
    landlord_action: Mapped[Optional[LeaseDecision]] = mapped_column(db_enum(LeaseDecision), nullable=True)
    renter_completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    landlord_reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class Lease(Base):
    """A tenancy between a landlord and a renter for a property."""

    __tablename__ = "leases"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
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
    lease_document_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("lease_documents.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Dates
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Money (ALL INTEGER CENTS - BIGINT)
    monthly_rent_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    security_deposit_cents: Mapped[int] = mapped_column(BigInteger, default=0)

    status: Mapped[LeaseStatus] = mapped_column(
        db_enum(LeaseStatus),
        default=LeaseStatus.DRAFT,
        nullable=False,
        index=True,
    )

    # Signatures
    landlord_signed: Mapped[bool] = mapped_column(Boolean, default=False)
    landlord_signed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    renter_signed: Mapped[bool] = mapped_column(Boolean, default=False)
    renter_signed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    co_signer_required: Mapped[bool] = mapped_column(Boolean, default=False)
    co_signer_signed: Mapped[bool] = mapped_column(Boolean, default=False)
    co_signer_signed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_lease_dates_ordered"),
        Index("ix_leases_property_renter_status", "property_id", "renter_email", "status"),
    )
