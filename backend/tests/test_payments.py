from datetime import date, timedelta

import pytest
from sqlalchemy import func, select

from rentdesk.core.database import utcnow
from rentdesk.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from rentdesk.models.enums import (
    InvoiceStatus,
    LeaseDecision,
    LeaseStatus,
    NoticeType,
    NotificationType,
    PaymentStatus,
    PaymentType,
    PropertyStatus,
    RenterStage,
)
from rentdesk.models.invoice import Invoice, RentPayment
from rentdesk.models.lease import Lease
from rentdesk.models.notice import Notice, Notification
from rentdesk.models.property import Property
from rentdesk.models.user import User
from rentdesk.schemas.invoice import InvoiceCreate
from rentdesk.schemas.lease import LeaseDocumentSend
from rentdesk.services.invoices import InvoiceService, PaymentService, calculate_invoice_amount
from rentdesk.services.lease_documents import LeaseDocumentService
from rentdesk.services.leases import LeaseService
from rentdesk.services.notices import NotificationService
from rentdesk.services.renter_status import RenterStatusService

RENTER = "renter@example.com"
TEMPLATE_URL = "https://storage.googleapis.com/rentdesk-test/templates/std.pdf"


async def _accepted_lease(db, storage, storage_provider, filler, landlord, prop):
    service = LeaseDocumentService(db, storage, filler)
    document = await service.send(
        landlord.id,
        LeaseDocumentSend(property_id=prop.id, renter_email=RENTER, template_url=TEMPLATE_URL),
    )
    _, object_path, _ = await service.create_upload_url(RENTER, document.id, "signed.pdf", "application/pdf", 2048)
    storage_provider.objects[object_path] = b"%PDF-signed"
    await service.renter_submit(RENTER, document.id, object_path)
    await service.landlord_decision(landlord.id, document.id, LeaseDecision.ACCEPT)
    await db.commit()
    return document


async def _invoice(db, landlord, prop, **extra):
    invoice = await InvoiceService(db).create_invoice(
        landlord.id,
        InvoiceCreate(property_id=prop.id, renter_email=RENTER, **extra),
    )
    await db.commit()
    return invoice


async def test_invoice_amount_from_property_fees(db, landlord, renter, prop):
    assert calculate_invoice_amount(prop, include_pet_fee=False) == 250000
    assert calculate_invoice_amount(prop, include_pet_fee=True) == 257500

    invoice = await _invoice(db, landlord, prop)

    assert invoice.amount_cents == 250000
    assert invoice.status == InvoiceStatus.SENT
    assert invoice.renter_user_id == renter.id
    assert invoice.property_details["address"]["street"] == "12 Oak Street"

    notices = (await db.execute(select(Notice).where(Notice.type == NoticeType.INVOICE_SENT))).scalars().all()
    assert len(notices) == 1
    assert notices[0].invoice_id == invoice.id
    assert notices[0].message == (
        "You have received a new invoice for $2,500 for the property at 12 Oak Street. "
        "Please review and pay by the due date."
    )


async def test_payment_fans_out_in_one_transaction(db, storage, storage_provider, filler, landlord, renter, prop):
    document = await _accepted_lease(db, storage, storage_provider, filler, landlord, prop)
    invoice = await _invoice(db, landlord, prop, due_date=date.today() + timedelta(days=7))

    paid, payments, lease = await InvoiceService(db).process_successful_payment(
        RENTER, invoice.id, "txn_123", renter_user_id=renter.id
    )
    await db.commit()

    assert paid.status == InvoiceStatus.PAID
    assert paid.transaction_id == "txn_123"
    assert paid.paid_at is not None

    assert sorted((p.payment_type, p.amount_cents) for p in payments) == [
        (PaymentType.MONTHLY_RENT, 200000),
        (PaymentType.SECURITY_DEPOSIT, 50000),
    ]
    assert all(p.status == PaymentStatus.PAID and p.lease_id == lease.id for p in payments)

    assert lease.status == LeaseStatus.ACTIVE
    assert lease.landlord_signed and lease.renter_signed
    assert lease.lease_document_id == document.id
    assert lease.monthly_rent_cents == 200000

    stored_prop = await db.get(Property, prop.id)
    assert stored_prop.status == PropertyStatus.OCCUPIED
    stored_renter = await db.get(User, renter.id)
    assert stored_renter.current_property_id == prop.id
    assert stored_renter.current_property_details["id"] == str(prop.id)

    row = await RenterStatusService(db).get_for_pair(prop.id, RENTER)
    assert row.status == RenterStage.PAYMENT
    assert row.lease_id == lease.id

    types = set((await db.execute(select(Notice.type))).scalars().all())
    assert {NoticeType.PAYMENT_RECEIVED, NoticeType.PAYMENT_SUCCESSFUL} <= types
    feed = (await db.execute(select(Notification.type))).scalars().all()
    assert NotificationType.TENANT_MOVED_IN in feed


async def test_pet_fee_adds_a_payment(db, landlord, renter, prop):
    invoice = await _invoice(db, landlord, prop, include_pet_fee=True)
    _, payments, _ = await InvoiceService(db).process_successful_payment(RENTER, invoice.id, "txn_pet")
    await db.commit()

    assert invoice.amount_cents == 257500
    assert {p.payment_type: p.amount_cents for p in payments}[PaymentType.PET_FEE] == 7500
    assert len(payments) == 3


async def test_replayed_transaction_is_idempotent(db, landlord, renter, prop):
    invoice = await _invoice(db, landlord, prop)
    service = InvoiceService(db)
    _, first, lease = await service.process_successful_payment(RENTER, invoice.id, "txn_1")
    await db.commit()

    again, second, replay_lease = await service.process_successful_payment(RENTER, invoice.id, "txn_1")

    assert again.status == InvoiceStatus.PAID
    assert {p.id for p in second} == {p.id for p in first}
    assert replay_lease.id == lease.id
    count = (await db.execute(select(func.count(RentPayment.id)))).scalar_one()
    assert count == 2


async def test_second_transaction_on_paid_invoice_conflicts(db, landlord, renter, prop):
    invoice = await _invoice(db, landlord, prop)
    service = InvoiceService(db)
    await service.process_successful_payment(RENTER, invoice.id, "txn_1")
    await db.commit()

    with pytest.raises(ConflictError, match="already been paid"):
        await service.process_successful_payment(RENTER, invoice.id, "txn_2")


async def test_only_the_billed_renter_can_pay(db, landlord, prop):
    invoice = await _invoice(db, landlord, prop)
    with pytest.raises(PermissionDeniedError):
        await InvoiceService(db).process_successful_payment("someone@example.com", invoice.id, "txn_1")


async def test_failure_mid_payment_leaves_nothing_behind(db, session_factory, monkeypatch, landlord, renter, prop):
    invoice = await _invoice(db, landlord, prop)
    invoice_id, prop_id = invoice.id, prop.id
    notices_before = (await db.execute(select(func.count(Notice.id)))).scalar_one()

    async def broken(*args, **kwargs):
        raise RuntimeError("feed unavailable")

    monkeypatch.setattr(NotificationService, "notify_tenant_moved_in", broken)

    with pytest.raises(RuntimeError):
        await InvoiceService(db).process_successful_payment(RENTER, invoice_id, "txn_1")
    await db.rollback()

    async with session_factory() as fresh:
        stored = await fresh.get(Invoice, invoice_id)
        assert stored.status == InvoiceStatus.SENT
        assert stored.transaction_id is None
        assert (await fresh.execute(select(func.count(RentPayment.id)))).scalar_one() == 0
        stored_prop = await fresh.get(Property, prop_id)
        assert stored_prop.status == PropertyStatus.AVAILABLE
        assert (await fresh.execute(select(func.count(Lease.id)))).scalar_one() == 0
        assert (await fresh.execute(select(func.count(Notice.id)))).scalar_one() == notices_before


async def test_start_lease_after_payment(db, storage, storage_provider, filler, landlord, renter, prop):
    await _accepted_lease(db, storage, storage_provider, filler, landlord, prop)
    invoice = await _invoice(db, landlord, prop)
    await InvoiceService(db).process_successful_payment(RENTER, invoice.id, "txn_1")
    await db.commit()

    lease = await LeaseService(db).start_lease(landlord.id, prop.id, RENTER, date(2026, 11, 1), date(2027, 10, 31))
    await db.commit()

    assert lease.start_date == date(2026, 11, 1)
    assert lease.end_date == date(2027, 10, 31)
    row = await RenterStatusService(db).get_for_pair(prop.id, RENTER)
    assert row.status == RenterStage.LEASED
    assert row.notes == "Lease started after payment received"


async def test_start_lease_without_status_row(db, landlord, prop):
    with pytest.raises(NotFoundError):
        await LeaseService(db).start_lease(landlord.id, prop.id, RENTER, date(2026, 11, 1), date(2027, 10, 31))


async def test_mark_overdue(db, landlord, renter, prop):
    late = await _invoice(db, landlord, prop, due_date=date(2026, 1, 1))
    on_time = await _invoice(db, landlord, prop, due_date=date(2026, 12, 1))

    count = await InvoiceService(db).mark_overdue(today=date(2026, 6, 1))
    await db.commit()

    assert count == 1
    assert late.status == InvoiceStatus.OVERDUE
    assert on_time.status == InvoiceStatus.SENT


async def test_payment_queries(db, landlord, renter, prop):
    invoice = await _invoice(db, landlord, prop)
    _, _, lease = await InvoiceService(db).process_successful_payment(RENTER, invoice.id, "txn_1")
    await db.commit()

    payments = PaymentService(db)
    assert len(await payments.by_lease(lease.id)) == 2
    assert len(await payments.by_landlord(landlord.id)) == 2
    assert len(await payments.by_renter(RENTER)) == 2
    assert await payments.overdue_for_lease(lease.id) == []
    assert await payments.pending_for_lease(lease.id) == []
    assert lease.end_date - lease.start_date == timedelta(days=365)
    assert lease.start_date == utcnow().date()
