"""Enumeration types for the RentDesk domain model."""

from enum import Enum


class UserRole(str, Enum):
    """Account role."""
    LANDLORD = "landlord"
    RENTER = "renter"
    ADMIN = "admin"


class PropertyType(str, Enum):
    """Type of property."""
    APARTMENT = "apartment"
    HOUSE = "house"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    OTHER = "other"


class PropertyStatus(str, Enum):
    """Availability of a property."""
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"


class InvitationStatus(str, Enum):
    """Status of a landlord -> renter invitation."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


class ApplicationStatus(str, Enum):
    """Status of a rental application."""
    SUBMITTED = "submitted"
    PENDING = "pending"      # under review
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaseDocumentStatus(str, Enum):
    """Status of a lease document sent for filling/signing."""
    DRAFT = "draft"
    SENT = "sent"
    RENTER_COMPLETED = "renter_completed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class LeaseStatus(str, Enum):
    """Status of a tenancy."""
    DRAFT = "draft"
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    TERMINATED = "terminated"


class NoticeType(str, Enum):
    """Type of notice exchanged between landlord and renter."""
    LATE_RENT = "late_rent"
    NOISE_COMPLAINT = "noise_complaint"
    INSPECTION = "inspection"
    LEASE_VIOLATION = "lease_violation"
    EVICTION = "eviction"
    RENT_INCREASE = "rent_increase"
    MAINTENANCE = "maintenance"
    PARKING_VIOLATION = "parking_violation"
    PET_VIOLATION = "pet_violation"
    UTILITY_SHUTDOWN = "utility_shutdown"
    CLEANLINESS = "cleanliness"
    CUSTOM = "custom"
    # Workflow-generated
    INVITATION_SENT = "invitation_sent"
    LEASE_RECEIVED = "lease_received"
    LEASE_COMPLETED = "lease_completed"
    INVOICE_SENT = "invoice_sent"
    PAYMENT_RECEIVED = "payment_received"
    PAYMENT_SUCCESSFUL = "payment_successful"


# Lease-status notices are listed on the landlord's lease inbox, not the general feed
LEASE_NOTICE_TYPES = frozenset({NoticeType.LEASE_RECEIVED, NoticeType.LEASE_COMPLETED})

# Notices addressed to the landlord, hidden from the renter's feed
LANDLORD_ONLY_NOTICE_TYPES = frozenset({NoticeType.LEASE_COMPLETED, NoticeType.PAYMENT_RECEIVED})

# Types only the workflows may create
WORKFLOW_NOTICE_TYPES = frozenset({
    NoticeType.INVITATION_SENT,
    NoticeType.LEASE_RECEIVED,
    NoticeType.LEASE_COMPLETED,
    NoticeType.INVOICE_SENT,
    NoticeType.PAYMENT_RECEIVED,
    NoticeType.PAYMENT_SUCCESSFUL,
})

URGENT_NOTICE_TYPES = frozenset({
    NoticeType.EVICTION,
    NoticeType.LATE_RENT,
    NoticeType.LEASE_VIOLATION,
    NoticeType.UTILITY_SHUTDOWN,
})


class NoticeStatus(str, Enum):
    """Soft-delete marker for notices."""
    ACTIVE = "active"
    DELETED = "deleted"


class NotificationType(str, Enum):
    """Landlord notification feed entries."""
    APPLICATION_SUBMITTED = "application_submitted"
    APPLICATION_APPROVED = "application_approved"
    APPLICATION_REJECTED = "application_rejected"
    INVITATION_SENT = "invitation_sent"
    INVITATION_ACCEPTED = "invitation_accepted"
    INVITATION_DECLINED = "invitation_declined"
    TENANT_MOVED_IN = "tenant_moved_in"


class InvoiceStatus(str, Enum):
    """Status of an invoice."""
    SENT = "sent"
    PENDING = "pending"
    OVERDUE = "overdue"
    PARTIAL = "partial"
    PAID = "paid"
    CANCELLED = "cancelled"


class PaymentType(str, Enum):
    """Invoice breakdown component a payment settles."""
    MONTHLY_RENT = "monthly_rent"
    SECURITY_DEPOSIT = "security_deposit"
    APPLICATION_FEE = "application_fee"
    PET_FEE = "pet_fee"


class PaymentStatus(str, Enum):
    """Status of a rent payment."""
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    PARTIAL = "partial"


class RenterStage(str, Enum):
    """Progress of one renter through one property's pipeline."""
    INVITE = "invite"
    APPLICATION = "application"
    LEASE = "lease"
    LEASE_REJECTED = "lease_rejected"
    ACCEPTED = "accepted"
    PAYMENT = "payment"
    LEASED = "leased"


class MessageStatus(str, Enum):
    """Status of a renter -> landlord message."""
    UNREAD = "unread"
    READ = "read"
    DELETED = "deleted"


class LeaseDecision(str, Enum):
    """Landlord review outcome for a completed lease document."""
    ACCEPT = "accept"
    REJECT = "reject"


class AuditAction(str, Enum):
    """Actions tracked in audit log."""
    INVITATION_SENT = "invitation_sent"
    INVITATION_RESPONDED = "invitation_responded"
    APPLICATION_SUBMITTED = "application_submitted"
    APPLICATION_DECIDED = "application_decided"
    LEASE_SENT = "lease_sent"
    LEASE_SUBMITTED = "lease_submitted"
    LEASE_DECIDED = "lease_decided"
    INVOICE_CREATED = "invoice_created"
    PAYMENT_COMPLETED = "payment_completed"
    LEASE_STARTED = "lease_started"
    STAGE_CHANGED = "stage_changed"
