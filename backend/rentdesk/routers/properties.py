"""Properties router."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import get_db
from rentdesk.core.exceptions import NotFoundError
from rentdesk.core.security import AuthenticatedUser, require_landlord, require_registered
from rentdesk.schemas.invitation import ApplicationResponse, InvitationResponse
from rentdesk.schemas.lease import LeaseDocumentResponse, PropertyDocument
from rentdesk.schemas.notice import NoticeResponse
from rentdesk.schemas.property import PropertyCreate, PropertyListResponse, PropertyResponse, PropertyUpdate
from rentdesk.schemas.renter_status import RenterStatusResponse
from rentdesk.services.applications import ApplicationService
from rentdesk.services.documents import DocumentService
from rentdesk.services.invitations import InvitationService
from rentdesk.services.notices import NoticeService
from rentdesk.services.properties import PropertyService
from rentdesk.services.renter_status import RenterStatusService

router = APIRouter(prefix="/properties", tags=["properties"])


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    data: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Create a new property owned by the caller."""
    prop = await PropertyService(db).create_property(current_user.db_user_id, data)
    await db.commit()
    return PropertyResponse.model_validate(prop)


@router.get("", response_model=PropertyListResponse)
async def list_properties(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """List the caller's properties, newest first."""
    props = await PropertyService(db).list_landlord_properties(current_user.db_user_id)
    return PropertyListResponse(
        properties=[PropertyResponse.model_validate(p) for p in props],
        total=len(props),
    )


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered),
):
    """Public property details (renters view the property they were invited to)."""
    prop = await PropertyService(db).get_property(property_id)
    return PropertyResponse.model_validate(prop)


@router.patch("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: UUID,
    data: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    prop = await PropertyService(db).update_property(current_user.db_user_id, property_id, data)
    await db.commit()
    return PropertyResponse.model_validate(prop)


@router.get("/{property_id}/invitations", response_model=list[InvitationResponse])
async def list_property_invitations(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    invitations = await InvitationService(db).list_for_property(current_user.db_user_id, property_id)
    return [InvitationResponse.model_validate(i) for i in invitations]


@router.get("/{property_id}/applications", response_model=list[ApplicationResponse])
async def list_property_applications(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    applications = await ApplicationService(db).list_for_property(current_user.db_user_id, property_id)
    return [ApplicationResponse.model_validate(a) for a in applications]


@router.get("/{property_id}/notices", response_model=list[NoticeResponse])
async def list_property_notices(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    await PropertyService(db).get_owned_property(current_user.db_user_id, property_id)
    notices = await NoticeService(db).get_property_notices(property_id)
    return [NoticeResponse.model_validate(n) for n in notices]


@router.get("/{property_id}/renter-status", response_model=list[RenterStatusResponse])
async def list_property_renter_status(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    await PropertyService(db).get_owned_property(current_user.db_user_id, property_id)
    rows = await RenterStatusService(db).get_by_property(property_id)
    return [RenterStatusResponse.model_validate(r) for r in rows]


@router.get("/{property_id}/documents", response_model=list[PropertyDocument])
async def list_property_documents(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Filled leases and application attachments for a property."""
    await PropertyService(db).get_owned_property(current_user.db_user_id, property_id)
    return await DocumentService(db).get_property_documents(property_id)


@router.get("/{property_id}/documents/latest-lease", response_model=LeaseDocumentResponse)
async def get_latest_lease_document(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    await PropertyService(db).get_owned_property(current_user.db_user_id, property_id)
    document = await DocumentService(db).get_latest_lease_document(property_id)
    if document is None:
        raise NotFoundError("No lease document for this property")
    return LeaseDocumentResponse.model_validate(document)
