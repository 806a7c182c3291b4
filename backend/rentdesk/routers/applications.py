"""Applications router."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import get_db
from rentdesk.core.security import AuthenticatedUser, require_landlord, require_renter
from rentdesk.models.enums import ApplicationStatus
from rentdesk.schemas.invitation import ApplicationCreate, ApplicationResponse, ApplicationStatusUpdate
from rentdesk.services.applications import ApplicationService

router = APIRouter(prefix="/applications", tags=["applications"])


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def submit_application(
    data: ApplicationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    application = await ApplicationService(db).create(
        current_user.email,
        data,
        renter_user_id=current_user.db_user_id,
    )
    await db.commit()
    return ApplicationResponse.model_validate(application)


@router.get("", response_model=list[ApplicationResponse])
async def list_applications(
    search: Optional[str] = Query(None, max_length=200),
    status: Optional[ApplicationStatus] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Landlord's applications; ``search`` matches name, email, street or city."""
    applications = await ApplicationService(db).list_for_landlord(current_user.db_user_id, search, status)
    return [ApplicationResponse.model_validate(a) for a in applications]


@router.get("/mine", response_model=list[ApplicationResponse])
async def list_my_applications(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    applications = await ApplicationService(db).list_for_renter(current_user.email)
    return [ApplicationResponse.model_validate(a) for a in applications]


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    application = await ApplicationService(db).get_owned(current_user.db_user_id, application_id)
    return ApplicationResponse.model_validate(application)


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: UUID,
    data: ApplicationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    application = await ApplicationService(db).update_status(
        current_user.db_user_id,
        application_id,
        data.status,
    )
    await db.commit()
    return ApplicationResponse.model_validate(application)
