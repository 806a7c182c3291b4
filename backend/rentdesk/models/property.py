"""Property model."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, CheckConstraint, DateTime, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from rentdesk.core.database import Base, JSONType, db_enum, utcnow
from rentdesk.models.enums import PropertyStatus, PropertyType


class Property(Base):
    """A rentable property owned by a landlord."""

    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    landlord_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Address
    street: Mapped[str] = mapped_column(String(255), nullable=False)
    unit: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(50), nullable=False)
    country: Mapped[str] = mapped_column(String(50), default="USA")
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False)

    property_type: Mapped[PropertyType] = mapped_column(
        db_enum(PropertyType),
        default=PropertyType.APARTMENT,
        nullable=False,
    )
    bedrooms: Mapped[int] = mapped_column(Integer, default=1)
    bathrooms: Mapped[float] = mapped_column(Float, default=1)
    square_feet: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    amenities: Mapped[list[str]] = mapped_column(JSONType, default=list)
    images: Mapped[list[str]] = mapped_column(JSONType, default=list)

    # Pricing (ALL INTEGER CENTS)
    monthly_rent_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    security_deposit_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    application_fee_cents: Mapped[int] = mapped_column(BigInteger, default=0)

    # Pet policy
    pet_allowed: Mapped[bool] = mapped_column(Boolean, default=False)
    pet_fee_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    pet_restrictions: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[PropertyStatus] = mapped_column(
        db_enum(PropertyStatus),
        default=PropertyStatus.AVAILABLE,
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("monthly_rent_cents >= 0", name="ck_property_rent_non_negative"),
    )

    @property
    def address_line(self) -> str:
        """One-line address used in notice text."""
        unit = f", Unit {self.unit}" if self.unit else ""
        return f"{self.street}{unit}, {self.city}, {self.state}"

    def snapshot(self) -> dict:
        """Denormalized copy stored on invoices so later edits don't change them."""
        return {
            "id": str(self.id),
            "address": {
                "street": self.street,
                "unit": self.unit,
                "city": self.city,
                "state": self.state,
                "country": self.country,
                "postal_code": self.postal_code,
            },
            "property_type": self.property_type.value,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "monthly_rent_cents": self.monthly_rent_cents,
            "security_deposit_cents": self.security_deposit_cents,
            "application_fee_cents": self.application_fee_cents,
            "pet_fee_cents": self.pet_fee_cents,
        }
