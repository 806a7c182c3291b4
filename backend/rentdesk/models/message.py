"""LandlordMessage model."""

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from rentdesk.core.database import Base, JSONType, db_enum, utcnow
from rentdesk.models.enums import MessageStatus


class LandlordMessage(Base):
    """Message (with optional attachments) a renter sends to their landlord."""

    __tablename__ = "landlord_messages"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    renter_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    renter_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
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
    )
    lease_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("leases.id", ondelete="SET NULL"),
        nullable=True,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    # [{name, size, type, url}]
    files: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, default=list)
    status: Mapped[MessageStatus] = mapped_column(
        db_enum(MessageStatus),
        default=MessageStatus.UNREAD,
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
