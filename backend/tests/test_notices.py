from datetime import timedelta

import pytest

from rentdesk.core.database import utcnow
from rentdesk.core.exceptions import NotFoundError
from rentdesk.models.enums import NoticeType, NotificationType
from rentdesk.services.notices import NoticeService, NotificationService

RENTER = "renter@example.com"


async def _notice(service, landlord, prop, type_, renter_email=RENTER):
    return await service.create_notice(
        type=type_,
        subject=type_.value.replace("_", " ").title(),
        message="Body",
        landlord_id=landlord.id,
        property_id=prop.id,
        renter_email=renter_email,
    )


async def test_mark_as_read_sets_timestamp_once(db, landlord, prop):
    service = NoticeService(db)
    notice = await _notice(service, landlord, prop, NoticeType.INSPECTION)
    assert notice.read_at is None

    first = (await service.mark_as_read(notice.id)).read_at
    assert first is not None
    second = (await service.mark_as_read(notice.id)).read_at
    assert second == first


async def test_feeds_split_by_audience(db, landlord, prop):
    service = NoticeService(db)
    await _notice(service, landlord, prop, NoticeType.LATE_RENT)
    await _notice(service, landlord, prop, NoticeType.LEASE_RECEIVED)
    await _notice(service, landlord, prop, NoticeType.LEASE_COMPLETED)
    await _notice(service, landlord, prop, NoticeType.PAYMENT_RECEIVED)
    await _notice(service, landlord, prop, NoticeType.PAYMENT_SUCCESSFUL)

    renter_types = {n.type for n in await service.get_renter_notices("RENTER@example.com")}
    assert renter_types == {NoticeType.LATE_RENT, NoticeType.LEASE_RECEIVED, NoticeType.PAYMENT_SUCCESSFUL}

    general = {n.type for n in await service.get_landlord_notices(landlord.id)}
    assert NoticeType.LEASE_RECEIVED not in general
    assert NoticeType.LEASE_COMPLETED not in general
    assert NoticeType.PAYMENT_RECEIVED in general

    lease_inbox = {n.type for n in await service.get_landlord_lease_notices(landlord.id)}
    assert lease_inbox == {NoticeType.LEASE_RECEIVED, NoticeType.LEASE_COMPLETED}

    assert await service.unread_count_for_renter(RENTER) == 3
    assert await service.unread_count_for_landlord(landlord.id) == 2
    assert len(await service.get_property_notices(prop.id)) == 5


async def test_deleted_notice_disappears(db, landlord, prop):
    service = NoticeService(db)
    notice = await _notice(service, landlord, prop, NoticeType.NOISE_COMPLAINT)

    await service.delete_notice(notice.id)

    assert await service.get_renter_notices(RENTER) == []
    assert await service.unread_count_for_renter(RENTER) == 0
    with pytest.raises(NotFoundError):
        await service.get(notice.id)


async def test_lease_notices_marked_read_for_document_only(db, landlord, prop):
    service = NoticeService(db)
    document_id = prop.id  # any id; the link column is unconstrained
    linked = await service.create_notice(
        type=NoticeType.LEASE_RECEIVED,
        subject="Lease Agreement Received",
        message="Body",
        landlord_id=landlord.id,
        renter_email=RENTER,
        lease_document_id=document_id,
    )
    other = await _notice(service, landlord, prop, NoticeType.LEASE_RECEIVED)

    assert await service.mark_lease_notices_read(RENTER, document_id) == 1
    await db.refresh(linked)
    await db.refresh(other)
    assert linked.read_at is not None
    assert other.read_at is None


async def test_notification_window_and_read_all(db, landlord):
    feed = NotificationService(db)
    recent = await feed.create(landlord.id, NotificationType.INVITATION_SENT, "Invitation Sent", "Sent")
    old = await feed.create(landlord.id, NotificationType.INVITATION_SENT, "Invitation Sent", "Sent")
    old.created_at = utcnow() - timedelta(days=45)
    await db.flush()

    assert [n.id for n in await feed.list_for_landlord(landlord.id)] == [recent.id]
    assert await feed.unread_count(landlord.id) == 2

    await feed.mark_as_read(landlord.id, recent.id)
    assert await feed.unread_count(landlord.id) == 1

    assert await feed.mark_all_as_read(landlord.id) == 1
    assert await feed.unread_count(landlord.id) == 0


async def test_notification_of_other_landlord_is_hidden(db, landlord, other_landlord):
    feed = NotificationService(db)
    notification = await feed.create(landlord.id, NotificationType.TENANT_MOVED_IN, "Moved In", "Body")
    with pytest.raises(NotFoundError):
        await feed.mark_as_read(other_landlord.id, notification.id)
