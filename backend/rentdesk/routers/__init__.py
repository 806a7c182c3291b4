"""API routers for RentDesk."""

from rentdesk.routers.auth import router as auth_router
from rentdesk.routers.profile import router as profile_router
from rentdesk.routers.properties import router as properties_router
from rentdesk.routers.invitations import router as invitations_router
from rentdesk.routers.applications import router as applications_router
from rentdesk.routers.templates import router as templates_router
from rentdesk.routers.lease_documents import router as lease_documents_router
from rentdesk.routers.leases import router as leases_router
from rentdesk.routers.notices import router as notices_router
from rentdesk.routers.notifications import router as notifications_router
from rentdesk.routers.invoices import router as invoices_router
from rentdesk.routers.payments import router as payments_router
from rentdesk.routers.renter_status import router as renter_status_router
from rentdesk.routers.messages import router as messages_router
from rentdesk.routers.dashboard import router as dashboard_router

__all__ = [
    "auth_router",
    "profile_router",
    "properties_router",
    "invitations_router",
    "applications_router",
    "templates_router",
    "lease_documents_router",
    "leases_router",
    "notices_router",
    "notifications_router",
    "invoices_router",
    "payments_router",
    "renter_status_router",
    "messages_router",
    "dashboard_router",
]
