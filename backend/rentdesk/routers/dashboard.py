"""Dashboard router - aggregate stats and incomes for the landlord overview."""

from fastapi import APIRouter, Depends
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import get_db
from rentdesk.core.security import AuthenticatedUser, require_landlord
from rentdesk.models.enums import (
    ApplicationStatus,
    InvitationStatus,
    InvoiceStatus,
    LeaseDocumentStatus,
    LeaseStatus,
    PaymentStatus,
    PropertyStatus,
)
from rentdesk.models.invitation import Application, Invitation
from rentdesk.models.invoice import Invoice, RentPayment
from rentdesk.models.lease import Lease, LeaseDocument
from rentdesk.models.property import Property
from rentdesk.schemas.dashboard import DashboardStats, IncomeEntry
from rentdesk.services.notices import NoticeService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Get aggregate statistics for the caller's properties.

    Returns:
    - Property counts (total, occupied, available)
    - Active leases and the monthly rent they bring in
    - Overdue invoices, leases awaiting signature, open applications and invitations
    - Unread notices addressed to the landlord
    """
    landlord_id = current_user.db_user_id

    prop_stats = (
        await db.execute(
            select(
                func.count(Property.id).label("total"),
                func.sum(case((Property.status == PropertyStatus.OCCUPIED, 1), else_=0)).label("occupied"),
                func.sum(case((Property.status == PropertyStatus.AVAILABLE, 1), else_=0)).label("available"),
            ).where(Property.landlord_id == landlord_id)
        )
    ).one()

    lease_stats = (
        await db.execute(
            select(
                func.count(Lease.id).label("active"),
                func.coalesce(func.sum(Lease.monthly_rent_cents), 0).label("revenue"),
            ).where(Lease.landlord_id == landlord_id, Lease.status == LeaseStatus.ACTIVE)
        )
    ).one()

    overdue_invoices = await db.scalar(
        select(func.count(Invoice.id)).where(
            Invoice.landlord_id == landlord_id,
            Invoice.status == InvoiceStatus.OVERDUE,
        )
    )
    pending_signatures = await db.scalar(
        select(func.count(LeaseDocument.id)).where(
            LeaseDocument.landlord_id == landlord_id,
            LeaseDocument.status.in_([LeaseDocumentStatus.SENT, LeaseDocumentStatus.RENTER_COMPLETED]),
        )
    )
    pending_applications = await db.scalar(
        select(func.count(Application.id)).where(
            Application.landlord_id == landlord_id,
            Application.status.in_([ApplicationStatus.SUBMITTED, ApplicationStatus.PENDING]),
        )
    )
    active_invitations = await db.scalar(
        select(func.count(Invitation.id)).where(
            Invitation.landlord_id == landlord_id,
            Invitation.status == InvitationStatus.PENDING,
        )
    )

    return DashboardStats(
        total_properties=prop_stats.total or 0,
        occupied_properties=prop_stats.occupied or 0,
        available_properties=prop_stats.available or 0,
        active_leases=lease_stats.active or 0,
        monthly_revenue_cents=lease_stats.revenue or 0,
        overdue_invoices=overdue_invoices or 0,
        pending_lease_signatures=pending_signatures or 0,
        pending_applications=pending_applications or 0,
        active_invitations=active_invitations or 0,
        unread_notices=await NoticeService(db).unread_count_for_landlord(landlord_id),
    )


@router.get("/incomes", response_model=list[IncomeEntry])
async def get_incomes(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Paid totals grouped by property and renter."""
    result = await db.execute(
        select(
            RentPayment.property_id,
            RentPayment.renter_email,
            func.sum(RentPayment.amount_cents).label("total"),
            func.count(RentPayment.id).label("payment_count"),
        )
        .where(
            RentPayment.landlord_id == current_user.db_user_id,
            RentPayment.status == PaymentStatus.PAID,
        )
        .group_by(RentPayment.property_id, RentPayment.renter_email)
    )
    rows = result.all()

    addresses = {}
    if rows:
        props = await db.execute(select(Property).where(Property.id.in_([row.property_id for row in rows])))
        addresses = {p.id: p.address_line for p in props.scalars()}

    entries = [
        IncomeEntry(
            property_id=row.property_id,
            property_address=addresses.get(row.property_id),
            renter_email=row.renter_email,
            total_paid_cents=row.total or 0,
            payment_count=row.payment_count,
        )
        for row in rows
    ]
    entries.sort(key=lambda e: e.total_paid_cents, reverse=True)
    return entries
