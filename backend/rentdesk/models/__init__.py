"""SQLAlchemy models for RentDesk."""

from rentdesk.models.user import User, RenterProfile
from rentdesk.models.property import Property
from rentdesk.models.invitation import Invitation, Application
from rentdesk.models.lease import Lease, LeaseDocument, PdfTemplate
from rentdesk.models.notice import Notice, Notification
from rentdesk.models.invoice import Invoice, RentPayment
from rentdesk.models.renter_status import RenterStatus
from rentdesk.models.message import LandlordMessage
from rentdesk.models.audit import AuditLog

__all__ = [
    "User",
    "RenterProfile",
    "Property",
    "Invitation",
    "Application",
    "Lease",
    "LeaseDocument",
    "PdfTemplate",
    "Notice",
    "Notification",
    "Invoice",
    "RentPayment",
    "RenterStatus",
    "LandlordMessage",
    "AuditLog",
]
