"""Lease document workflow: send, renter completes, landlord decides."""

import logging
import uuid
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import utcnow
from rentdesk.core.exceptions import (
    DomainValidationError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
)
from rentdesk.models.enums import AuditAction, LeaseDecision, LeaseDocumentStatus, NoticeType, RenterStage
from rentdesk.models.lease import LeaseDocument, PdfTemplate
from rentdesk.schemas.lease import LeaseDocumentSend
from rentdesk.services.audit import AuditService
from rentdesk.services.document_fill import DocumentFillService
from rentdesk.services.notices import NoticeService
from rentdesk.services.properties import PropertyService
from rentdesk.services.renter_status import RenterStatusService
from rentdesk.services.storage import StorageService
from rentdesk.services.transitions import require_transition

logger = logging.getLogger(__name__)

SIGNED_PREFIX = "leases/signed"


class LeaseDocumentService:
    def __init__(self, db: AsyncSession, storage: StorageService, filler: DocumentFillService):
        self.db = db
        self.storage = storage
        self.filler = filler
        self.audit = AuditService(db)
        self.notices = NoticeService(db)
        self.properties = PropertyService(db)
        self.statuses = RenterStatusService(db)

    async def send(self, landlord_id: UUID, data: LeaseDocumentSend) -> LeaseDocument:
        prop = await self.properties.get_owned_property(landlord_id, data.property_id)
        email = data.renter_email.lower()

        template_url = data.template_url
        template_name = data.template_name
        if data.template_id:
            template = await self.db.get(PdfTemplate, data.template_id)
            if not template:
                raise NotFoundError("Template not found")
            template_url = template.url
            template_name = template_name or template.name

        document = LeaseDocument(
            property_id=prop.id,
            landlord_id=landlord_id,
            renter_email=email,
            template_id=data.template_id,
            template_name=template_name,
            original_template_url=template_url,
            field_values=data.field_values,
            status=LeaseDocumentStatus.DRAFT,
        )
        self.db.add(document)
        await self.db.flush()

        if data.field_values:
            document.filled_pdf_url = await self._fill_and_store(prop.id, template_url, data.field_values)
        else:
            document.filled_pdf_url = template_url

        require_transition("lease_document", document.status, LeaseDocumentStatus.SENT)
        document.status = LeaseDocumentStatus.SENT
        await self.db.flush()

        await self.notices.create_notice(
            type=NoticeType.LEASE_RECEIVED,
            subject="Lease Agreement Received",
            message=(
                f"A lease agreement for the property at {prop.address_line} is ready. "
                "Please review, complete and sign it."
            ),
            landlord_id=landlord_id,
            property_id=prop.id,
            renter_email=email,
            lease_document_id=document.id,
        )

        row = await self.statuses.get_for_pair(prop.id, email)
        if row is None:
            await self.statuses.ensure(
                property_id=prop.id,
                landlord_id=landlord_id,
                renter_email=email,
                stage=RenterStage.LEASE,
                notes="Lease sent",
                lease_document_id=document.id,
            )
        else:
            if row.status != RenterStage.LEASE:
                await self.statuses.advance(row, RenterStage.LEASE, "Lease sent", landlord_id)
            row.lease_document_id = document.id

        await self.audit.log(
            action=AuditAction.LEASE_SENT,
            resource_type="lease_document",
            resource_id=document.id,
            user_id=landlord_id,
            details={"renter_email": email, "filled": bool(data.field_values)},
        )
        await self.db.flush()
        logger.info("[LEASE] Lease document %s sent to %s", document.id, email)
        return document

    async def _fill_and_store(self, property_id: UUID, template_url: str, values: dict) -> str:
        template_bytes = await self.storage.fetch_bytes(template_url)
        filled = self.filler.fill(template_bytes, values)
        object_path = f"leases/{property_id}/{uuid.uuid4()}.pdf"
        return await self.storage.upload_bytes(object_path, filled, "application/pdf")

    async def get(self, document_id: UUID) -> LeaseDocument:
        document = await self.db.get(LeaseDocument, document_id)
        if not document:
            raise NotFoundError("Lease document not found")
        return document

    async def get_for_landlord(self, landlord_id: UUID, document_id: UUID) -> LeaseDocument:
        document = await self.get(document_id)
        if document.landlord_id != landlord_id:
            raise PermissionDeniedError()
        return document

    async def get_for_renter(self, renter_email: str, document_id: UUID) -> LeaseDocument:
        document = await self.get(document_id)
        if document.renter_email != renter_email.lower():
            raise PermissionDeniedError()
        return document

    async def create_upload_url(
        self,
        renter_email: str,
        document_id: UUID,
        file_name: str,
        mime_type: str,
        file_size_bytes: int,
    ) -> tuple[str, str, datetime]:
        """Presigned upload for the renter's signed copy."""
        document = await self.get_for_renter(renter_email, document_id)
        if document.status != LeaseDocumentStatus.SENT:
            raise InvalidTransitionError("Lease document is not awaiting the renter")
        if mime_type != "application/pdf":
            raise DomainValidationError("Signed lease must be a PDF")
        return await self.storage.create_presigned_upload(
            prefix=SIGNED_PREFIX,
            owner_id=document.id,
            file_name=file_name,
            mime_type=mime_type,
            file_size_bytes=file_size_bytes,
        )

    async def renter_submit(
        self,
        renter_email: str,
        document_id: UUID,
        object_path: str,
        renter_user_id: Optional[UUID] = None,
    ) -> LeaseDocument:
        document = await self.get_for_renter(renter_email, document_id)
        require_transition("lease_document", document.status, LeaseDocumentStatus.RENTER_COMPLETED)

        if not self.storage.is_owned_path(SIGNED_PREFIX, document.id, object_path):
            raise DomainValidationError("Upload does not belong to this lease document")
        if not await self.storage.verify_upload(object_path):
            raise DomainValidationError("Signed lease upload not found")

        document.filled_pdf_url = self.storage.object_url(object_path)
        document.status = LeaseDocumentStatus.RENTER_COMPLETED
        document.renter_completed_at = utcnow()
        await self.db.flush()

        await self.notices.mark_lease_notices_read(document.renter_email, document.id)

        prop = await self.properties.get_property(document.property_id)
        await self.notices.create_notice(
            type=NoticeType.LEASE_COMPLETED,
            subject="Lease Agreement Completed",
            message=(
                f"{document.renter_email} has completed and signed the lease agreement "
                f"for the property at {prop.address_line}."
            ),
            landlord_id=document.landlord_id,
            property_id=document.property_id,
            renter_email=document.renter_email,
            renter_user_id=renter_user_id,
            lease_document_id=document.id,
        )
        await self.audit.log(
            action=AuditAction.LEASE_SUBMITTED,
            resource_type="lease_document",
            resource_id=document.id,
            user_id=renter_user_id,
            details={"object_path": object_path},
        )
        logger.info("[LEASE] Lease document %s completed by %s", document.id, document.renter_email)
        return document

    async def landlord_decision(
        self,
        landlord_id: UUID,
        document_id: UUID,
        decision: LeaseDecision,
    ) -> LeaseDocument:
        """Accept or reject a completed lease.

        Gated on the pair's status row being at ``lease``; the row is locked for
        the rest of the transaction so concurrent decisions serialise.
        """
        document = await self.get_for_landlord(landlord_id, document_id)

        row = await self.statuses.get_for_pair(document.property_id, document.renter_email, for_update=True)
        if row is None or row.status != RenterStage.LEASE:
            raise InvalidTransitionError("Lease actions are only available while the renter is at the lease stage")

        target = (
            LeaseDocumentStatus.ACCEPTED if decision == LeaseDecision.ACCEPT else LeaseDocumentStatus.REJECTED
        )
        require_transition("lease_document", document.status, target)

        if decision == LeaseDecision.ACCEPT:
            await self.statuses.advance(row, RenterStage.ACCEPTED, "Lease accepted by landlord", landlord_id)
        else:
            await self.statuses.advance(row, RenterStage.LEASE_REJECTED, "Lease rejected by landlord", landlord_id)

        document.status = target
        document.landlord_action = decision
        document.landlord_reviewed_at = utcnow()
        await self.audit.log(
            action=AuditAction.LEASE_DECIDED,
            resource_type="lease_document",
            resource_id=document.id,
            user_id=landlord_id,
            details={"decision": decision.value},
        )
        await self.db.flush()
        logger.info("[LEASE] Lease document %s %s by landlord", document.id, target.value)
        return document

    async def actions_available(self, document: LeaseDocument) -> bool:
        row = await self.statuses.get_for_pair(document.property_id, document.renter_email)
        return row is not None and row.status == RenterStage.LEASE

    async def list_for_property(self, landlord_id: UUID, property_id: UUID) -> list[LeaseDocument]:
        await self.properties.get_owned_property(landlord_id, property_id)
        result = await self.db.execute(
            select(LeaseDocument)
            .where(LeaseDocument.property_id == property_id)
            .order_by(LeaseDocument.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_for_renter(self, renter_email: str) -> list[LeaseDocument]:
        result = await self.db.execute(
            select(LeaseDocument)
            .where(LeaseDocument.renter_email == renter_email.lower())
            .order_by(LeaseDocument.created_at.desc())
        )
        return list(result.scalars().all())
