"""Rent payments router (read side)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import get_db
from rentdesk.core.security import AuthenticatedUser, require_landlord, require_renter
from rentdesk.schemas.invoice import RentPaymentResponse
from rentdesk.services.invoices import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("", response_model=list[RentPaymentResponse])
async def list_payments(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    payments = await PaymentService(db).by_landlord(current_user.db_user_id)
    return [RentPaymentResponse.model_validate(p) for p in payments]


@router.get("/mine", response_model=list[RentPaymentResponse])
async def list_my_payments(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    payments = await PaymentService(db).by_renter(current_user.email)
    return [RentPaymentResponse.model_validate(p) for p in payments]
