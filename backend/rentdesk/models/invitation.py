"""Invitation and Application models."""

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import BigInteger, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from rentdesk.core.database import Base, JSONType, db_enum, utcnow
from rentdesk.models.enums import ApplicationStatus, InvitationStatus


class Invitation(Base):
    """A landlord's invitation for a renter email to apply for a property."""

    __tablename__ = "invitations"

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
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[InvitationStatus] = mapped_column(
        db_enum(InvitationStatus),
        default=InvitationStatus.PENDING,
        nullable=False,
        index=True,
    )
    invited_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    responded_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class Application(Base):
    """A renter's application for a property."""

    __tablename__ = "applications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    invitation_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("invitations.id", ondelete="SET NULL"),
        nullable=True,
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

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    employment_company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    employment_job_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    employment_monthly_income_cents: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    # [{name, size, type, url}]
    documents: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, default=list)

    status: Mapped[ApplicationStatus] = mapped_column(
        db_enum(ApplicationStatus),
        default=ApplicationStatus.SUBMITTED,
        nullable=False,
        index=True,
    )
    submitted_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
