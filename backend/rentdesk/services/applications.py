"""Application workflow: renter applies, landlord reviews."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import utcnow
from rentdesk.core.exceptions import DomainValidationError, NotFoundError, PermissionDeniedError
from rentdesk.models.enums import ApplicationStatus, AuditAction, RenterStage
from rentdesk.models.invitation import Application, Invitation
from rentdesk.models.property import Property
from rentdesk.schemas.invitation import ApplicationCreate
from rentdesk.services.audit import AuditService
from rentdesk.services.notices import NotificationService
from rentdesk.services.properties import PropertyService
from rentdesk.services.renter_status import RenterStatusService
from rentdesk.services.transitions import require_transition

logger = logging.getLogger(__name__)


class ApplicationService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)
        self.notifications = NotificationService(db)
        self.properties = PropertyService(db)
        self.statuses = RenterStatusService(db)

    async def create(
        self,
        renter_email: str,
        data: ApplicationCreate,
        renter_user_id: Optional[UUID] = None,
    ) -> Application:
        prop = await self.properties.get_property(data.property_id)
        email = renter_email.lower()

        if data.invitation_id:
            invitation = await self.db.get(Invitation, data.invitation_id)
            if not invitation or invitation.property_id != prop.id:
                raise DomainValidationError("Invitation does not belong to this property")
            if invitation.renter_email != email:
                raise PermissionDeniedError()

        application = Application(
            invitation_id=data.invitation_id,
            property_id=prop.id,
            landlord_id=prop.landlord_id,
            renter_email=email,
            full_name=data.full_name,
            phone=data.phone,
            employment_company=data.employment_company,
            employment_job_title=data.employment_job_title,
            employment_monthly_income_cents=data.employment_monthly_income_cents,
            documents=[doc.model_dump() for doc in data.documents],
            status=ApplicationStatus.SUBMITTED,
            submitted_at=utcnow(),
        )
        self.db.add(application)
        await self.db.flush()

        row, created = await self.statuses.ensure(
            property_id=prop.id,
            landlord_id=prop.landlord_id,
            renter_email=email,
            stage=RenterStage.APPLICATION,
            renter_name=data.full_name,
            notes="Application submitted",
            application_id=application.id,
            invitation_id=data.invitation_id,
        )
        if not created and row.status == RenterStage.INVITE:
            await self.statuses.advance(row, RenterStage.APPLICATION, notes="Application submitted")

        await self.notifications.notify_application_submitted(
            prop.landlord_id, application.id, prop.id, email, data.full_name
        )
        await self.audit.log(
            action=AuditAction.APPLICATION_SUBMITTED,
            resource_type="application",
            resource_id=application.id,
            user_id=renter_user_id,
            details={"property_id": str(prop.id)},
        )
        logger.info("[APPLICATION] %s applied for property %s (%s)", email, prop.id, application.id)
        return application

    async def get_owned(self, landlord_id: UUID, application_id: UUID) -> Application:
        application = await self.db.get(Application, application_id)
        if not application:
            raise NotFoundError("Application not found")
        if application.landlord_id != landlord_id:
            raise PermissionDeniedError()
        return application

    async def update_status(
        self,
        landlord_id: UUID,
        application_id: UUID,
        status: ApplicationStatus,
    ) -> Application:
        application = await self.get_owned(landlord_id, application_id)
        require_transition("application", application.status, status)

        application.status = status
        application.reviewed_at = utcnow()
        await self.db.flush()

        row = await self.statuses.get_for_pair(application.property_id, application.renter_email)
        if status == ApplicationStatus.APPROVED:
            if row is None:
                await self.statuses.ensure(
                    property_id=application.property_id,
                    landlord_id=landlord_id,
                    renter_email=application.renter_email,
                    stage=RenterStage.APPLICATION,
                    renter_name=application.full_name,
                    notes="Application approved",
                    application_id=application.id,
                )
            elif row.status == RenterStage.INVITE:
                await self.statuses.advance(row, RenterStage.APPLICATION, "Application approved", landlord_id)
            else:
                row.notes = "Application approved"
        elif status == ApplicationStatus.REJECTED and row is not None:
            row.notes = "Application rejected"

        await self.notifications.notify_application_status_change(
            landlord_id, application.id, status, application.renter_email
        )
        await self.audit.log(
            action=AuditAction.APPLICATION_DECIDED,
            resource_type="application",
            resource_id=application.id,
            user_id=landlord_id,
            details={"status": status.value},
        )
        await self.db.flush()
        logger.info("[APPLICATION] Application %s -> %s", application.id, status.value)
        return application

    async def list_for_landlord(
        self,
        landlord_id: UUID,
        search: Optional[str] = None,
        status: Optional[ApplicationStatus] = None,
    ) -> list[Application]:
        """Landlord's applications, filtered by status and a case-insensitive search."""
        query = (
            select(Application)
            .join(Property, Application.property_id == Property.id)
            .where(Application.landlord_id == landlord_id)
        )
        if status:
            query = query.where(Application.status == status)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(
                or_(
                    Application.full_name.ilike(pattern),
                    Application.renter_email.ilike(pattern),
                    Property.street.ilike(pattern),
                    Property.city.ilike(pattern),
                )
            )
        result = await self.db.execute(query.order_by(Application.submitted_at.desc()))
        return list(result.scalars().all())

    async def list_for_property(self, landlord_id: UUID, property_id: UUID) -> list[Application]:
        await self.properties.get_owned_property(landlord_id, property_id)
        result = await self.db.execute(
            select(Application)
            .where(Application.property_id == property_id)
            .order_by(Application.submitted_at.desc())
        )
        return list(result.scalars().all())

    async def list_for_renter(self, renter_email: str) -> list[Application]:
        result = await self.db.execute(
            select(Application)
            .where(Application.renter_email == renter_email.lower())
            .order_by(Application.submitted_at.desc())
        )
        return list(result.scalars().all())
