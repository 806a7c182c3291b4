"""Property schemas."""

from typing import Optional
from uuid import UUID

from pydantic import Field

from rentdesk.models.enums import PropertyStatus, PropertyType
from rentdesk.schemas.base import BaseSchema, IDMixin, TimestampMixin


class PropertyCreate(BaseSchema):
    """Create a new property."""

    street: str = Field(..., min_length=2, max_length=255)
    unit: Optional[str] = Field(None, max_length=50)
    city: str = Field(..., min_length=2, max_length=100)
    state: str = Field(..., min_length=2, max_length=50)
    country: str = "USA"
    postal_code: str = Field(..., min_length=3, max_length=20)

    property_type: PropertyType = PropertyType.APARTMENT
    bedrooms: int = Field(1, ge=0)
    bathrooms: float = Field(1, ge=0)
    square_feet: Optional[int] = Field(None, gt=0)
    description: Optional[str] = None
    amenities: list[str] = []
    images: list[str] = []

    monthly_rent_cents: int = Field(..., ge=0)
    security_deposit_cents: int = Field(0, ge=0)
    application_fee_cents: int = Field(0, ge=0)

    pet_allowed: bool = False
    pet_fee_cents: int = Field(0, ge=0)
    pet_restrictions: Optional[str] = None


class PropertyUpdate(BaseSchema):
    """Update property. Unset fields are left untouched."""

    street: Optional[str] = Field(None, min_length=2, max_length=255)
    unit: Optional[str] = Field(None, max_length=50)
    city: Optional[str] = Field(None, min_length=2, max_length=100)
    state: Optional[str] = Field(None, min_length=2, max_length=50)
    country: Optional[str] = None
    postal_code: Optional[str] = Field(None, min_length=3, max_length=20)
    property_type: Optional[PropertyType] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    square_feet: Optional[int] = Field(None, gt=0)
    description: Optional[str] = None
    amenities: Optional[list[str]] = None
    images: Optional[list[str]] = None
    monthly_rent_cents: Optional[int] = Field(None, ge=0)
    security_deposit_cents: Optional[int] = Field(None, ge=0)
    application_fee_cents: Optional[int] = Field(None, ge=0)
    pet_allowed: Optional[bool] = None
    pet_fee_cents: Optional[int] = Field(None, ge=0)
    pet_restrictions: Optional[str] = None
    status: Optional[PropertyStatus] = None


class PropertyResponse(BaseSchema, IDMixin, TimestampMixin):
    """Property response."""

    landlord_id: UUID
    street: str
    unit: Optional[str] = None
    city: str
    state: str
    country: str
    postal_code: str
    property_type: PropertyType
    bedrooms: int
    bathrooms: float
    square_feet: Optional[int] = None
    description: Optional[str] = None
    amenities: list[str] = []
    images: list[str] = []
    monthly_rent_cents: int
    security_deposit_cents: int
    application_fee_cents: int
    pet_allowed: bool
    pet_fee_cents: int
    pet_restrictions: Optional[str] = None
    status: PropertyStatus


class PropertyListResponse(BaseSchema):
    properties: list[PropertyResponse]
    total: int
