"""Invoices router, including the payment confirmation endpoint."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import get_db
from rentdesk.core.security import AuthenticatedUser, require_admin, require_landlord, require_registered, require_renter
from rentdesk.schemas.base import CountResponse
from rentdesk.schemas.invoice import (
    InvoiceCreate,
    InvoiceResponse,
    PaymentConfirm,
    PaymentResult,
    RentPaymentResponse,
)
from rentdesk.services.invoices import InvoiceService

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    data: InvoiceCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Issue a move-in invoice computed from the property's fees."""
    invoice = await InvoiceService(db).create_invoice(current_user.db_user_id, data)
    await db.commit()
    return InvoiceResponse.model_validate(invoice)


@router.get("", response_model=list[InvoiceResponse])
async def list_invoices(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    invoices = await InvoiceService(db).list_for_landlord(current_user.db_user_id)
    return [InvoiceResponse.model_validate(i) for i in invoices]


@router.get("/mine", response_model=list[InvoiceResponse])
async def list_my_invoices(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    invoices = await InvoiceService(db).list_for_renter(current_user.email)
    return [InvoiceResponse.model_validate(i) for i in invoices]


@router.post("/mark-overdue", response_model=CountResponse)
async def mark_overdue(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Sweep invoices past their due date (scheduler hook, admin only)."""
    count = await InvoiceService(db).mark_overdue()
    await db.commit()
    return CountResponse(count=count)


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered),
):
    invoice = await InvoiceService(db).get_for_user(invoice_id, current_user.db_user_id, current_user.email)
    return InvoiceResponse.model_validate(invoice)


@router.post("/{invoice_id}/pay", response_model=PaymentResult)
async def pay_invoice(
    invoice_id: UUID,
    data: PaymentConfirm,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    """Record a gateway-confirmed payment.

    Marks the invoice paid, writes one payment per fee component, activates
    the lease and occupies the property in a single transaction. Replaying the
    same transaction id returns the original result.
    """
    invoice, payments, lease = await InvoiceService(db).process_successful_payment(
        current_user.email,
        invoice_id,
        data.transaction_id,
        data.payment_method,
        renter_user_id=current_user.db_user_id,
    )
    await db.commit()
    return PaymentResult(
        invoice=InvoiceResponse.model_validate(invoice),
        payments=[RentPaymentResponse.model_validate(p) for p in payments],
        lease_id=lease.id if lease else None,
    )
