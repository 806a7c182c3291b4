"""Renter profile schemas.

Dates are plain calendar dates; pydantic serialises them as ``YYYY-MM-DD``.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, model_validator

from rentdesk.schemas.base import BaseSchema, IDMixin, TimestampMixin


class AddressSchema(BaseSchema):
    street: str
    unit: Optional[str] = None
    city: str
    state: str
    postal_code: str
    country: str = "USA"


class EmploymentSchema(BaseSchema):
    company: Optional[str] = None
    job_title: Optional[str] = None
    monthly_income_cents: Optional[int] = Field(None, ge=0)
    start_date: Optional[date] = None


class RentHistoryEntry(BaseSchema):
    """A previous tenancy."""

    address: str
    landlord_name: Optional[str] = None
    landlord_phone: Optional[str] = None
    monthly_rent_cents: Optional[int] = Field(None, ge=0)
    start_date: date
    end_date: Optional[date] = None
    reason_for_leaving: Optional[str] = None

    @model_validator(mode="after")
    def validate_dates(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ReferenceSchema(BaseSchema):
    name: str
    relationship: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None


class EmergencyContactSchema(BaseSchema):
    name: str
    relationship: Optional[str] = None
    phone: str


class RenterProfileUpdate(BaseSchema):
    """Full renter profile as saved from the profile form."""

    full_name: str = Field(..., min_length=1, max_length=255)
    date_of_birth: Optional[date] = None
    phone: Optional[str] = Field(None, max_length=50)
    current_address: Optional[AddressSchema] = None
    employment: Optional[EmploymentSchema] = None
    rent_history: list[RentHistoryEntry] = []
    references: list[ReferenceSchema] = []
    emergency_contact: Optional[EmergencyContactSchema] = None


class RenterProfileResponse(BaseSchema, IDMixin, TimestampMixin):
    user_id: UUID
    email: str
    full_name: str
    date_of_birth: Optional[date] = None
    phone: Optional[str] = None
    current_address: Optional[AddressSchema] = None
    employment: Optional[EmploymentSchema] = None
    rent_history: list[RentHistoryEntry] = []
    references: list[ReferenceSchema] = []
    emergency_contact: Optional[EmergencyContactSchema] = None
