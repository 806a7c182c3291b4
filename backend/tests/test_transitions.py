import pytest

from rentdesk.core.exceptions import InvalidTransitionError
from rentdesk.models.enums import (
    InvitationStatus,
    InvoiceStatus,
    LeaseDocumentStatus,
    LeaseStatus,
    RenterStage,
)
from rentdesk.services.invoices import format_cents
from rentdesk.services.transitions import can_transition, require_transition


def test_invitation_answers_only_from_pending():
    assert can_transition("invitation", InvitationStatus.PENDING, InvitationStatus.ACCEPTED)
    assert can_transition("invitation", InvitationStatus.PENDING, InvitationStatus.EXPIRED)
    assert not can_transition("invitation", InvitationStatus.ACCEPTED, InvitationStatus.DECLINED)
    assert not can_transition("invitation", InvitationStatus.EXPIRED, InvitationStatus.ACCEPTED)


def test_renter_stage_never_moves_backward():
    with pytest.raises(InvalidTransitionError) as exc:
        require_transition("renter_status", RenterStage.LEASE, RenterStage.APPLICATION)
    assert exc.value.detail == "Cannot move renter status from 'lease' to 'application'"

    assert not can_transition("renter_status", RenterStage.LEASED, RenterStage.PAYMENT)
    assert not can_transition("renter_status", RenterStage.ACCEPTED, RenterStage.LEASE)


def test_rejected_lease_can_be_resent():
    assert can_transition("renter_status", RenterStage.LEASE_REJECTED, RenterStage.LEASE)
    assert can_transition("renter_status", RenterStage.INVITE, RenterStage.LEASE)


def test_lease_document_requires_renter_before_decision():
    assert not can_transition("lease_document", LeaseDocumentStatus.SENT, LeaseDocumentStatus.ACCEPTED)
    assert can_transition(
        "lease_document", LeaseDocumentStatus.RENTER_COMPLETED, LeaseDocumentStatus.REJECTED
    )
    # Terminal
    assert not can_transition("lease_document", LeaseDocumentStatus.ACCEPTED, LeaseDocumentStatus.REJECTED)


def test_paid_invoice_is_terminal():
    assert can_transition("invoice", InvoiceStatus.OVERDUE, InvoiceStatus.PAID)
    assert not can_transition("invoice", InvoiceStatus.PAID, InvoiceStatus.CANCELLED)
    assert not can_transition("lease", LeaseStatus.COMPLETED, LeaseStatus.ACTIVE)


@pytest.mark.parametrize(
    "cents, expected",
    [(200000, "$2,000"), (250000, "$2,500"), (12345, "$123.45"), (0, "$0")],
)
def test_format_cents(cents, expected):
    assert format_cents(cents) == expected
