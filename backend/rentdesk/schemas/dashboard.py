"""Dashboard schemas."""

from typing import Optional
from uuid import UUID

from rentdesk.schemas.base import BaseSchema


class DashboardStats(BaseSchema):
    """Landlord overview counters. Money in cents."""

    total_properties: int = 0
    occupied_properties: int = 0
    available_properties: int = 0
    active_leases: int = 0
    monthly_revenue_cents: int = 0
    overdue_invoices: int = 0
    pending_lease_signatures: int = 0
    pending_applications: int = 0
    active_invitations: int = 0
    unread_notices: int = 0


class IncomeEntry(BaseSchema):
    """Paid totals for one (property, renter) pair."""

    property_id: UUID
    property_address: Optional[str] = None
    renter_email: str
    total_paid_cents: int
    payment_count: int
