"""Property document listing and lease templates."""

from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.models.invitation import Application
from rentdesk.models.lease import LeaseDocument, PdfTemplate
from rentdesk.schemas.lease import PropertyDocument, TemplateCreate


class DocumentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_property_documents(self, property_id: UUID) -> list[PropertyDocument]:
        """Filled lease documents plus files attached to applications, newest first."""
        documents: list[PropertyDocument] = []

        leases = await self.db.execute(
            select(LeaseDocument).where(
                LeaseDocument.property_id == property_id,
                LeaseDocument.filled_pdf_url.is_not(None),
            )
        )
        for lease_doc in leases.scalars():
            documents.append(
                PropertyDocument(
                    name=lease_doc.template_name or "Lease Agreement",
                    url=lease_doc.filled_pdf_url,
                    source="lease",
                    renter_email=lease_doc.renter_email,
                    created_at=lease_doc.created_at,
                )
            )

        applications = await self.db.execute(select(Application).where(Application.property_id == property_id))
        for application in applications.scalars():
            for attached in application.documents or []:
                if not attached.get("url"):
                    continue
                documents.append(
                    PropertyDocument(
                        name=attached.get("name") or "Application document",
                        url=attached["url"],
                        source="application",
                        renter_email=application.renter_email,
                        created_at=application.submitted_at,
                    )
                )

        documents.sort(key=lambda d: d.created_at, reverse=True)
        return documents

    async def get_latest_lease_document(self, property_id: UUID) -> Optional[LeaseDocument]:
        result = await self.db.execute(
            select(LeaseDocument)
            .where(LeaseDocument.property_id == property_id)
            .order_by(LeaseDocument.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()


class TemplateService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_templates(
        self,
        template_type: Optional[str] = None,
        region: Optional[str] = None,
    ) -> list[PdfTemplate]:
        """All templates, optionally filtered by type and region (case-insensitive)."""
        query = select(PdfTemplate)
        if template_type:
            query = query.where(func.lower(PdfTemplate.template_type) == template_type.lower())
        if region:
            query = query.where(func.lower(PdfTemplate.region) == region.lower())
        result = await self.db.execute(query.order_by(PdfTemplate.uploaded_at.desc()))
        return list(result.scalars().all())

    async def create_template(self, data: TemplateCreate) -> PdfTemplate:
        template = PdfTemplate(**data.model_dump())
        self.db.add(template)
        await self.db.flush()
        return template
