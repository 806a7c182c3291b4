"""Auth and user schemas."""

from typing import Any, Optional
from uuid import UUID

from pydantic import Field

from rentdesk.models.enums import UserRole
from rentdesk.schemas.base import BaseSchema, IDMixin, TimestampMixin


class RegisterRequest(BaseSchema):
    """Create or update the caller's local user row."""

    role: UserRole = UserRole.RENTER
    full_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)


class CurrentUserResponse(BaseSchema):
    """Current authenticated user info."""

    uid: str
    email: str | None = None
    email_verified: bool = False
    db_user_id: str | None = None
    role: str | None = None


class UserResponse(BaseSchema, IDMixin, TimestampMixin):
    """Local user row."""

    firebase_uid: str
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole
    current_property_id: Optional[UUID] = None
    current_property_details: Optional[dict[str, Any]] = None
