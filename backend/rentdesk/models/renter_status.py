"""RenterStatus model: one row per (property, renter email)."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from rentdesk.core.database import Base, db_enum, utcnow
from rentdesk.models.enums import RenterStage


class RenterStatus(Base):
    """Where a renter stands in a property's move-in pipeline."""

    __tablename__ = "renter_statuses"

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
    renter_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    status: Mapped[RenterStage] = mapped_column(
        db_enum(RenterStage),
        default=RenterStage.INVITE,
        nullable=False,
        index=True,
    )

    invitation_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    application_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    lease_document_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    lease_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("property_id", "renter_email", name="uq_renter_status_property_email"),
    )
