"""Invoices and the payment fan-out."""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import utcnow
from rentdesk.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from rentdesk.models.enums import (
    AuditAction,
    InvoiceStatus,
    NoticeType,
    PaymentStatus,
    PaymentType,
    PropertyStatus,
    RenterStage,
)
from rentdesk.models.invoice import Invoice, RentPayment
from rentdesk.models.lease import Lease
from rentdesk.models.property import Property
from rentdesk.models.user import User
from rentdesk.schemas.invoice import InvoiceCreate
from rentdesk.services.audit import AuditService
from rentdesk.services.leases import LeaseService
from rentdesk.services.notices import NoticeService, NotificationService
from rentdesk.services.properties import PropertyService
from rentdesk.services.renter_status import RenterStatusService
from rentdesk.services.transitions import require_transition

logger = logging.getLogger(__name__)


def format_cents(cents: int) -> str:
    """200000 -> "$2,000"; 12345 -> "$123.45"."""
    if cents % 100 == 0:
        return f"${cents // 100:,}"
    return f"${cents / 100:,.2f}"


def calculate_invoice_amount(prop: Property, include_pet_fee: bool) -> int:
    """Move-in total in cents: rent + deposit + application fee (+ pet fee)."""
    total = prop.monthly_rent_cents + prop.security_deposit_cents + prop.application_fee_cents
    if include_pet_fee:
        total += prop.pet_fee_cents
    return total


def _breakdown(invoice: Invoice) -> list[tuple[PaymentType, int]]:
    components = [
        (PaymentType.MONTHLY_RENT, invoice.monthly_rent_cents),
        (PaymentType.SECURITY_DEPOSIT, invoice.security_deposit_cents),
        (PaymentType.APPLICATION_FEE, invoice.application_fee_cents),
        (PaymentType.PET_FEE, invoice.pet_fee_cents if invoice.include_pet_fee else 0),
    ]
    return [(kind, cents) for kind, cents in components if cents]


class InvoiceService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)
        self.notices = NoticeService(db)
        self.notifications = NotificationService(db)
        self.properties = PropertyService(db)
        self.leases = LeaseService(db)
        self.statuses = RenterStatusService(db)

    async def _find_user(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def create_invoice(self, landlord_id: UUID, data: InvoiceCreate) -> Invoice:
        prop = await self.properties.get_owned_property(landlord_id, data.property_id)
        email = data.renter_email.lower()
        renter = await self._find_user(email)

        pet_fee_cents = prop.pet_fee_cents if data.include_pet_fee else 0
        invoice = Invoice(
            landlord_id=landlord_id,
            property_id=prop.id,
            renter_email=email,
            renter_user_id=renter.id if renter else None,
            amount_cents=calculate_invoice_amount(prop, data.include_pet_fee),
            monthly_rent_cents=prop.monthly_rent_cents,
            security_deposit_cents=prop.security_deposit_cents,
            application_fee_cents=prop.application_fee_cents,
            pet_fee_cents=pet_fee_cents,
            include_pet_fee=data.include_pet_fee,
            status=InvoiceStatus.SENT,
            property_details=prop.snapshot(),
            notes=data.notes,
            due_date=data.due_date,
            notice_id=data.notice_id,
        )
        self.db.add(invoice)
        await self.db.flush()

        await self.notices.create_notice(
            type=NoticeType.INVOICE_SENT,
            subject="New Invoice Received",
            message=(
                f"You have received a new invoice for {format_cents(invoice.amount_cents)} "
                f"for the property at {prop.street}. Please review and pay by the due date."
            ),
            landlord_id=landlord_id,
            property_id=prop.id,
            renter_email=email,
            renter_user_id=invoice.renter_user_id,
            invoice_id=invoice.id,
        )
        await self.audit.log(
            action=AuditAction.INVOICE_CREATED,
            resource_type="invoice",
            resource_id=invoice.id,
            user_id=landlord_id,
            details={"amount_cents": invoice.amount_cents, "renter_email": email},
        )
        logger.info("[INVOICE] Invoice %s for %s sent to %s", invoice.id, format_cents(invoice.amount_cents), email)
        return invoice

    async def get(self, invoice_id: UUID, for_update: bool = False) -> Invoice:
        query = select(Invoice).where(Invoice.id == invoice_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        invoice = result.scalar_one_or_none()
        if not invoice:
            raise NotFoundError("Invoice not found")
        return invoice

    async def get_for_user(self, invoice_id: UUID, landlord_id: Optional[UUID], renter_email: Optional[str]) -> Invoice:
        invoice = await self.get(invoice_id)
        if invoice.landlord_id != landlord_id and invoice.renter_email != (renter_email or "").lower():
            raise PermissionDeniedError()
        return invoice

    async def payments_for_invoice(self, invoice_id: UUID) -> list[RentPayment]:
        result = await self.db.execute(
            select(RentPayment).where(RentPayment.invoice_id == invoice_id).order_by(RentPayment.created_at)
        )
        return list(result.scalars().all())

    async def process_successful_payment(
        self,
        renter_email: str,
        invoice_id: UUID,
        transaction_id: str,
        payment_method: str = "card",
        renter_user_id: Optional[UUID] = None,
    ) -> tuple[Invoice, list[RentPayment], Optional[Lease]]:
        """Apply a gateway-confirmed payment.

        Every write happens in the caller's transaction: nothing is committed
        here, so a failure at any step leaves no partial payment behind.
        """
        invoice = await self.get(invoice_id, for_update=True)
        email = renter_email.lower()
        if invoice.renter_email != email:
            raise PermissionDeniedError()

        if invoice.status == InvoiceStatus.PAID:
            if invoice.transaction_id == transaction_id:
                logger.info("[PAYMENT] Invoice %s already paid by %s, replaying result", invoice.id, transaction_id)
                payments = await self.payments_for_invoice(invoice.id)
                lease = await self.leases.find_open_lease(invoice.property_id, email)
                return invoice, payments, lease
            raise ConflictError("Invoice has already been paid")

        require_transition("invoice", invoice.status, InvoiceStatus.PAID)
        prop = await self.properties.get_property(invoice.property_id)
        now = utcnow()

        # 1. Invoice
        invoice.status = InvoiceStatus.PAID
        invoice.paid_at = now
        invoice.transaction_id = transaction_id

        # 2. Lease (find or create, then active)
        lease = await self.leases.activate_for_payment(
            prop,
            email,
            monthly_rent_cents=invoice.monthly_rent_cents,
            security_deposit_cents=invoice.security_deposit_cents,
        )

        # 3. One payment record per non-zero component
        payments = []
        for payment_type, amount_cents in _breakdown(invoice):
            payment = RentPayment(
                invoice_id=invoice.id,
                lease_id=lease.id,
                property_id=prop.id,
                landlord_id=invoice.landlord_id,
                renter_email=email,
                amount_cents=amount_cents,
                payment_type=payment_type,
                due_date=invoice.due_date,
                paid_date=now,
                status=PaymentStatus.PAID,
                payment_method=payment_method,
                transaction_id=transaction_id,
            )
            self.db.add(payment)
            payments.append(payment)

        # 4. Property and renter pointers
        prop.status = PropertyStatus.OCCUPIED
        renter = await self._find_user(email)
        if renter:
            renter.current_property_id = prop.id
            renter.current_property_details = invoice.property_details
        await self.db.flush()

        # 5. Notices and landlord feed
        amount = format_cents(invoice.amount_cents)
        await self.notices.create_notice(
            type=NoticeType.PAYMENT_RECEIVED,
            subject="Payment Received - Invoice Paid",
            message=(
                f"Payment of {amount} has been received from {email} for the property at {prop.street}. "
                "The lease agreement has been confirmed and the property is now occupied."
            ),
            landlord_id=invoice.landlord_id,
            property_id=prop.id,
            renter_email=email,
            renter_user_id=renter_user_id,
            invoice_id=invoice.id,
        )
        await self.notices.create_notice(
            type=NoticeType.PAYMENT_SUCCESSFUL,
            subject="Payment Successful - Invoice Paid",
            message=(
                f"Your payment of {amount} has been successfully processed for the property at {prop.street}. "
                "Your lease agreement has been confirmed and you can now move into the property."
            ),
            landlord_id=invoice.landlord_id,
            property_id=prop.id,
            renter_email=email,
            renter_user_id=renter_user_id,
            invoice_id=invoice.id,
        )
        await self.notifications.notify_tenant_moved_in(invoice.landlord_id, prop.id, email, prop.address_line)

        # 6. Status board
        row = await self.statuses.get_for_pair(prop.id, email)
        if row is not None:
            row.lease_id = lease.id
            if row.status == RenterStage.ACCEPTED:
                await self.statuses.advance(row, RenterStage.PAYMENT, "Payment received", renter_user_id)

        await self.audit.log_payment_completed(invoice.id, renter_user_id, transaction_id, invoice.amount_cents)
        await self.db.flush()
        logger.info(
            "[PAYMENT] Invoice %s paid (%s, %d payment records, lease %s)",
            invoice.id,
            amount,
            len(payments),
            lease.id,
        )
        return invoice, payments, lease

    async def mark_overdue(self, today: Optional[date] = None) -> int:
        """Move sent/pending invoices past their due date to overdue."""
        today = today or utcnow().date()
        result = await self.db.execute(
            select(Invoice).where(
                Invoice.status.in_([InvoiceStatus.SENT, InvoiceStatus.PENDING]),
                Invoice.due_date.is_not(None),
                Invoice.due_date < today,
            )
        )
        invoices = list(result.scalars().all())
        for invoice in invoices:
            require_transition("invoice", invoice.status, InvoiceStatus.OVERDUE)
            invoice.status = InvoiceStatus.OVERDUE
        await self.db.flush()
        if invoices:
            logger.info("[INVOICE] Marked %d invoices overdue", len(invoices))
        return len(invoices)

    async def list_for_renter(self, renter_email: str) -> list[Invoice]:
        result = await self.db.execute(
            select(Invoice)
            .where(Invoice.renter_email == renter_email.lower())
            .order_by(Invoice.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_for_landlord(self, landlord_id: UUID) -> list[Invoice]:
        result = await self.db.execute(
            select(Invoice).where(Invoice.landlord_id == landlord_id).order_by(Invoice.created_at.desc())
        )
        return list(result.scalars().all())


class PaymentService:
    """Read side of rent payments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _list(self, *criteria) -> list[RentPayment]:
        result = await self.db.execute(
            select(RentPayment).where(*criteria).order_by(RentPayment.created_at.desc())
        )
        return list(result.scalars().all())

    async def by_lease(self, lease_id: UUID) -> list[RentPayment]:
        return await self._list(RentPayment.lease_id == lease_id)

    async def by_landlord(self, landlord_id: UUID) -> list[RentPayment]:
        return await self._list(RentPayment.landlord_id == landlord_id)

    async def by_renter(self, renter_email: str) -> list[RentPayment]:
        return await self._list(RentPayment.renter_email == renter_email.lower())

    async def overdue_for_lease(self, lease_id: UUID) -> list[RentPayment]:
        return await self._list(RentPayment.lease_id == lease_id, RentPayment.status == PaymentStatus.OVERDUE)

    async def pending_for_lease(self, lease_id: UUID) -> list[RentPayment]:
        return await self._list(RentPayment.lease_id == lease_id, RentPayment.status == PaymentStatus.PENDING)
