"""Leases router."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import get_db
from rentdesk.core.security import AuthenticatedUser, require_landlord, require_registered, require_renter
from rentdesk.schemas.invoice import RentPaymentResponse
from rentdesk.schemas.lease import LeaseResponse, LeaseStart
from rentdesk.services.invoices import PaymentService
from rentdesk.services.leases import LeaseService

router = APIRouter(prefix="/leases", tags=["leases"])


@router.get("", response_model=list[LeaseResponse])
async def list_leases(
    property_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    leases = await LeaseService(db).list_for_landlord(current_user.db_user_id, property_id)
    return [LeaseResponse.model_validate(lease) for lease in leases]


@router.get("/mine", response_model=list[LeaseResponse])
async def list_my_leases(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    leases = await LeaseService(db).list_for_renter(current_user.email)
    return [LeaseResponse.model_validate(lease) for lease in leases]


@router.post("/start", response_model=LeaseResponse)
async def start_lease(
    data: LeaseStart,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Start the tenancy after the move-in invoice has been paid."""
    lease = await LeaseService(db).start_lease(
        current_user.db_user_id,
        data.property_id,
        data.renter_email,
        data.start_date,
        data.end_date,
    )
    await db.commit()
    return LeaseResponse.model_validate(lease)


@router.get("/{lease_id}", response_model=LeaseResponse)
async def get_lease(
    lease_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered),
):
    lease = await LeaseService(db).get_for_user(lease_id, current_user.db_user_id, current_user.email)
    return LeaseResponse.model_validate(lease)


@router.get("/{lease_id}/payments", response_model=list[RentPaymentResponse])
async def list_lease_payments(
    lease_id: UUID,
    only: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered),
):
    """Payments recorded against a lease; ``only=overdue|pending`` narrows the list."""
    await LeaseService(db).get_for_user(lease_id, current_user.db_user_id, current_user.email)
    payments = PaymentService(db)
    if only == "overdue":
        rows = await payments.overdue_for_lease(lease_id)
    elif only == "pending":
        rows = await payments.pending_for_lease(lease_id)
    else:
        rows = await payments.by_lease(lease_id)
    return [RentPaymentResponse.model_validate(p) for p in rows]
