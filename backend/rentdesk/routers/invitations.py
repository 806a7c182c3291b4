"""Invitations router."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import get_db
from rentdesk.core.exceptions import InvitationExpiredError, PermissionDeniedError
from rentdesk.core.security import AuthenticatedUser, require_landlord, require_registered, require_renter
from rentdesk.schemas.invitation import InvitationCreate, InvitationRespond, InvitationResponse
from rentdesk.services.invitations import InvitationService

router = APIRouter(prefix="/invitations", tags=["invitations"])


@router.post("", response_model=InvitationResponse, status_code=status.HTTP_201_CREATED)
async def create_invitation(
    data: InvitationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Invite a renter email to apply for one of the caller's properties."""
    invitation = await InvitationService(db).create(
        current_user.db_user_id,
        data.property_id,
        data.renter_email,
        data.message,
    )
    await db.commit()
    return InvitationResponse.model_validate(invitation)


@router.get("", response_model=list[InvitationResponse])
async def list_invitations(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    invitations = await InvitationService(db).list_for_landlord(current_user.db_user_id)
    return [InvitationResponse.model_validate(i) for i in invitations]


@router.get("/mine", response_model=list[InvitationResponse])
async def list_my_invitations(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    """Invitations addressed to the caller's email."""
    invitations = await InvitationService(db).list_for_renter(current_user.email)
    return [InvitationResponse.model_validate(i) for i in invitations]


@router.get("/{invitation_id}", response_model=InvitationResponse)
async def get_invitation(
    invitation_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered),
):
    invitation = await InvitationService(db).get(invitation_id)
    if invitation.landlord_id != current_user.db_user_id and invitation.renter_email != current_user.email:
        raise PermissionDeniedError()
    return InvitationResponse.model_validate(invitation)


@router.post("/{invitation_id}/respond", response_model=InvitationResponse)
async def respond_to_invitation(
    invitation_id: UUID,
    data: InvitationRespond,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    """Accept or decline an invitation."""
    try:
        invitation = await InvitationService(db).respond(
            invitation_id,
            current_user.email,
            data.status,
            renter_user_id=current_user.db_user_id,
        )
    except InvitationExpiredError:
        # Keep the expired flag even though the response is refused
        await db.commit()
        raise
    await db.commit()
    return InvitationResponse.model_validate(invitation)
