"""Allowed status transitions for each workflow entity.

Every status write in the services goes through ``require_transition`` so an
entity can only move along the edges listed here.
"""

from enum import Enum

from rentdesk.core.exceptions import InvalidTransitionError
from rentdesk.models.enums import (
    ApplicationStatus,
    InvitationStatus,
    InvoiceStatus,
    LeaseDocumentStatus,
    LeaseStatus,
    RenterStage,
)

INVITATION_TRANSITIONS = {
    InvitationStatus.PENDING: {
        InvitationStatus.ACCEPTED,
        InvitationStatus.DECLINED,
        InvitationStatus.EXPIRED,
    },
}

APPLICATION_TRANSITIONS = {
    ApplicationStatus.SUBMITTED: {
        ApplicationStatus.PENDING,
        ApplicationStatus.APPROVED,
        ApplicationStatus.REJECTED,
    },
    ApplicationStatus.PENDING: {ApplicationStatus.APPROVED, ApplicationStatus.REJECTED},
}

LEASE_DOCUMENT_TRANSITIONS = {
    LeaseDocumentStatus.DRAFT: {LeaseDocumentStatus.SENT},
    LeaseDocumentStatus.SENT: {LeaseDocumentStatus.RENTER_COMPLETED},
    LeaseDocumentStatus.RENTER_COMPLETED: {LeaseDocumentStatus.ACCEPTED, LeaseDocumentStatus.REJECTED},
}

LEASE_TRANSITIONS = {
    LeaseStatus.DRAFT: {LeaseStatus.PENDING, LeaseStatus.ACTIVE},
    LeaseStatus.PENDING: {LeaseStatus.ACTIVE},
    LeaseStatus.ACTIVE: {LeaseStatus.COMPLETED, LeaseStatus.TERMINATED},
}

INVOICE_TRANSITIONS = {
    InvoiceStatus.SENT: {
        InvoiceStatus.PAID,
        InvoiceStatus.CANCELLED,
        InvoiceStatus.OVERDUE,
        InvoiceStatus.PARTIAL,
    },
    InvoiceStatus.PENDING: {
        InvoiceStatus.PAID,
        InvoiceStatus.CANCELLED,
        InvoiceStatus.OVERDUE,
        InvoiceStatus.PARTIAL,
    },
    InvoiceStatus.OVERDUE: {InvoiceStatus.PAID, InvoiceStatus.CANCELLED, InvoiceStatus.PARTIAL},
    InvoiceStatus.PARTIAL: {InvoiceStatus.PAID},
}

RENTER_STAGE_TRANSITIONS = {
    RenterStage.INVITE: {RenterStage.APPLICATION, RenterStage.LEASE},
    RenterStage.APPLICATION: {RenterStage.LEASE},
    RenterStage.LEASE: {RenterStage.ACCEPTED, RenterStage.LEASE_REJECTED},
    RenterStage.LEASE_REJECTED: {RenterStage.LEASE},
    RenterStage.ACCEPTED: {RenterStage.PAYMENT},
    RenterStage.PAYMENT: {RenterStage.LEASED},
}

# Stages only their workflow may enter; the board endpoint cannot set them
WORKFLOW_OWNED_STAGES = {
    RenterStage.ACCEPTED: "the lease decision",
    RenterStage.LEASE_REJECTED: "the lease decision",
    RenterStage.PAYMENT: "invoice payment",
    RenterStage.LEASED: "starting the lease",
}

TRANSITIONS = {
    "invitation": INVITATION_TRANSITIONS,
    "application": APPLICATION_TRANSITIONS,
    "lease_document": LEASE_DOCUMENT_TRANSITIONS,
    "lease": LEASE_TRANSITIONS,
    "invoice": INVOICE_TRANSITIONS,
    "renter_status": RENTER_STAGE_TRANSITIONS,
}


def can_transition(kind: str, current: Enum, target: Enum) -> bool:
    table = TRANSITIONS[kind]
    return target in table.get(current, set())


def require_transition(kind: str, current: Enum, target: Enum) -> None:
    """Raise InvalidTransitionError unless ``current -> target`` is allowed for ``kind``."""
    if not can_transition(kind, current, target):
        raise InvalidTransitionError(
            f"Cannot move {kind.replace('_', ' ')} from '{current.value}' to '{target.value}'"
        )
