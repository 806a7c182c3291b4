"""Services for RentDesk."""

from rentdesk.services.storage import StorageService, get_storage_service
from rentdesk.services.audit import AuditService
from rentdesk.services.document_fill import DocumentFillService, PypdfFillService, get_fill_service

__all__ = [
    "StorageService",
    "get_storage_service",
    "AuditService",
    "DocumentFillService",
    "PypdfFillService",
    "get_fill_service",
]
