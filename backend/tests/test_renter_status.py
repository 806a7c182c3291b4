import pytest
from sqlalchemy import select

from rentdesk.core.exceptions import InvalidTransitionError, PermissionDeniedError
from rentdesk.models.audit import AuditLog
from rentdesk.models.enums import AuditAction, RenterStage
from rentdesk.services.renter_status import RenterStatusService

RENTER = "Renter@Example.com"


async def test_ensure_is_one_row_per_pair(db, landlord, prop):
    service = RenterStatusService(db)
    row, created = await service.ensure(prop.id, landlord.id, RENTER, RenterStage.INVITE)
    again, created_again = await service.ensure(
        prop.id, landlord.id, "renter@example.com", RenterStage.APPLICATION, application_id=prop.id
    )

    assert created and not created_again
    assert again.id == row.id
    # Existing rows keep their stage; only links are filled in
    assert again.status == RenterStage.INVITE
    assert again.application_id == prop.id
    assert len(await service.get_by_property(prop.id)) == 1


async def test_landlord_moves_renter_forward_only(db, landlord, prop):
    service = RenterStatusService(db)
    row, _ = await service.ensure(prop.id, landlord.id, RENTER, RenterStage.APPLICATION)

    moved = await service.move_to_stage(landlord.id, row.id, RenterStage.LEASE, notes="Sent offline")
    assert moved.status == RenterStage.LEASE
    assert moved.notes == "Sent offline"

    with pytest.raises(InvalidTransitionError):
        await service.move_to_stage(landlord.id, row.id, RenterStage.INVITE)

    changes = (
        await db.execute(select(AuditLog).where(AuditLog.action == AuditAction.STAGE_CHANGED))
    ).scalars().all()
    assert [(c.details["from"], c.details["to"]) for c in changes] == [(None, "application"), ("application", "lease")]


async def test_board_is_private_to_its_landlord(db, landlord, other_landlord, prop):
    service = RenterStatusService(db)
    row, _ = await service.ensure(prop.id, landlord.id, RENTER, RenterStage.INVITE)

    with pytest.raises(PermissionDeniedError):
        await service.move_to_stage(other_landlord.id, row.id, RenterStage.APPLICATION)
    with pytest.raises(PermissionDeniedError):
        await service.delete(other_landlord.id, row.id)

    await service.delete(landlord.id, row.id)
    assert await service.get_by_landlord(landlord.id) == []
    assert await service.get_by_email("renter@example.com") == []


@pytest.mark.parametrize(
    "start, target",
    [
        (RenterStage.LEASE, RenterStage.ACCEPTED),
        (RenterStage.LEASE, RenterStage.LEASE_REJECTED),
        (RenterStage.ACCEPTED, RenterStage.PAYMENT),
        (RenterStage.PAYMENT, RenterStage.LEASED),
    ],
)
async def test_board_cannot_take_workflow_owned_moves(db, landlord, prop, start, target):
    service = RenterStatusService(db)
    row, _ = await service.ensure(prop.id, landlord.id, RENTER, start)

    with pytest.raises(InvalidTransitionError, match=f"Stage '{target.value}' is set by"):
        await service.move_to_stage(landlord.id, row.id, target)

    assert (await service.get_for_pair(prop.id, RENTER)).status == start
