from datetime import timedelta

import pytest
from sqlalchemy import select

from rentdesk.core.database import utcnow
from rentdesk.core.exceptions import InvalidTransitionError, InvitationExpiredError, PermissionDeniedError
from rentdesk.models.enums import (
    ApplicationStatus,
    InvitationStatus,
    NoticeType,
    NotificationType,
    RenterStage,
)
from rentdesk.models.invitation import Invitation
from rentdesk.models.notice import Notice, Notification
from rentdesk.models.renter_status import RenterStatus
from rentdesk.schemas.invitation import ApplicationCreate
from rentdesk.services.applications import ApplicationService
from rentdesk.services.invitations import InvitationService
from rentdesk.services.renter_status import RenterStatusService


async def _invite(db, landlord, prop, email="Renter@Example.com"):
    invitation = await InvitationService(db).create(landlord.id, prop.id, email, message="Come see it")
    await db.commit()
    return invitation


async def test_invitation_creates_notice_and_feed_entry(db, landlord, prop):
    invitation = await _invite(db, landlord, prop)

    assert invitation.renter_email == "renter@example.com"
    assert invitation.status == InvitationStatus.PENDING
    assert invitation.expires_at > utcnow()

    notices = (await db.execute(select(Notice))).scalars().all()
    assert [n.type for n in notices] == [NoticeType.INVITATION_SENT]
    assert notices[0].invitation_id == invitation.id
    assert notices[0].read_at is None
    assert "12 Oak Street" in notices[0].message

    feed = (await db.execute(select(Notification))).scalars().all()
    assert [n.type for n in feed] == [NotificationType.INVITATION_SENT]


async def test_invite_requires_ownership(db, other_landlord, prop):
    with pytest.raises(PermissionDeniedError):
        await InvitationService(db).create(other_landlord.id, prop.id, "renter@example.com")


async def test_declined_invitation_leaves_no_status_row(db, landlord, prop):
    invitation = await _invite(db, landlord, prop)

    await InvitationService(db).respond(invitation.id, "renter@example.com", InvitationStatus.DECLINED)
    await db.commit()

    assert invitation.status == InvitationStatus.DECLINED
    assert invitation.responded_at is not None
    assert await RenterStatusService(db).get_for_pair(prop.id, "renter@example.com") is None


async def test_accepted_invitation_starts_pipeline(db, landlord, prop):
    invitation = await _invite(db, landlord, prop)

    await InvitationService(db).respond(invitation.id, "renter@example.com", InvitationStatus.ACCEPTED)
    await db.commit()

    row = await RenterStatusService(db).get_for_pair(prop.id, "renter@example.com")
    assert row.status == RenterStage.INVITE
    assert row.invitation_id == invitation.id
    assert row.notes == "Invitation accepted - renter@example.com"
    assert row.renter_name == "renter"


async def test_second_answer_is_refused(db, landlord, prop):
    invitation = await _invite(db, landlord, prop)
    service = InvitationService(db)
    await service.respond(invitation.id, "renter@example.com", InvitationStatus.ACCEPTED)
    await db.commit()

    with pytest.raises(InvalidTransitionError):
        await service.respond(invitation.id, "renter@example.com", InvitationStatus.DECLINED)


async def test_only_the_invited_email_can_answer(db, landlord, prop):
    invitation = await _invite(db, landlord, prop)
    with pytest.raises(PermissionDeniedError):
        await InvitationService(db).respond(invitation.id, "someone@example.com", InvitationStatus.ACCEPTED)


async def test_expired_invitation_is_flagged_expired(db, session_factory, landlord, prop):
    invitation = await _invite(db, landlord, prop)
    invitation_id = invitation.id
    invitation.expires_at = utcnow() - timedelta(days=1)
    await db.commit()

    with pytest.raises(InvitationExpiredError):
        await InvitationService(db).respond(invitation_id, "renter@example.com", InvitationStatus.ACCEPTED)
    # The service only flushes; the caller decides to keep the flag
    await db.commit()

    async with session_factory() as fresh:
        stored = await fresh.get(Invitation, invitation_id)
        assert stored.status == InvitationStatus.EXPIRED
        assert stored.responded_at is None
        rows = (await fresh.execute(select(RenterStatus))).scalars().all()
        assert rows == []


async def test_application_after_accepted_invitation_advances_row(db, landlord, prop):
    invitation = await _invite(db, landlord, prop)
    await InvitationService(db).respond(invitation.id, "renter@example.com", InvitationStatus.ACCEPTED)
    await db.commit()

    application = await ApplicationService(db).create(
        "renter@example.com",
        ApplicationCreate(
            property_id=prop.id,
            invitation_id=invitation.id,
            full_name="Rita Renter",
            employment_monthly_income_cents=650000,
        ),
    )
    await db.commit()

    assert application.status == ApplicationStatus.SUBMITTED
    assert application.landlord_id == landlord.id
    row = await RenterStatusService(db).get_for_pair(prop.id, "renter@example.com")
    assert row.status == RenterStage.APPLICATION
    assert row.application_id == application.id

    feed_types = (await db.execute(select(Notification.type))).scalars().all()
    assert NotificationType.APPLICATION_SUBMITTED in feed_types


async def test_approval_without_status_row_creates_one(db, landlord, prop):
    service = ApplicationService(db)
    application = await service.create(
        "walkin@example.com",
        ApplicationCreate(property_id=prop.id, full_name="Walk In"),
    )
    await db.commit()
    # The applicant's row was created at application; drop it to mimic a manual board cleanup
    row = await RenterStatusService(db).get_for_pair(prop.id, "walkin@example.com")
    await RenterStatusService(db).delete(landlord.id, row.id)
    await db.commit()

    await service.update_status(landlord.id, application.id, ApplicationStatus.APPROVED)
    await db.commit()

    row = await RenterStatusService(db).get_for_pair(prop.id, "walkin@example.com")
    assert row.status == RenterStage.APPLICATION
    assert row.notes == "Application approved"
    assert row.renter_name == "Walk In"


async def test_rejection_keeps_stage_and_notes_it(db, landlord, prop):
    service = ApplicationService(db)
    application = await service.create(
        "renter@example.com",
        ApplicationCreate(property_id=prop.id, full_name="Rita Renter"),
    )
    await db.commit()

    await service.update_status(landlord.id, application.id, ApplicationStatus.REJECTED)
    await db.commit()

    row = await RenterStatusService(db).get_for_pair(prop.id, "renter@example.com")
    assert row.status == RenterStage.APPLICATION
    assert row.notes == "Application rejected"

    with pytest.raises(InvalidTransitionError):
        await service.update_status(landlord.id, application.id, ApplicationStatus.APPROVED)


async def test_application_search(db, landlord, prop):
    service = ApplicationService(db)
    await service.create("ann@example.com", ApplicationCreate(property_id=prop.id, full_name="Ann Archer"))
    await service.create("bob@example.com", ApplicationCreate(property_id=prop.id, full_name="Bob Baker"))
    await db.commit()

    by_name = await service.list_for_landlord(landlord.id, search="archer")
    assert [a.renter_email for a in by_name] == ["ann@example.com"]

    by_city = await service.list_for_landlord(landlord.id, search="springfield")
    assert len(by_city) == 2

    submitted = await service.list_for_landlord(landlord.id, status=ApplicationStatus.APPROVED)
    assert submitted == []
