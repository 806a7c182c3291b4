"""Renter status board router."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import get_db
from rentdesk.core.security import AuthenticatedUser, require_landlord, require_renter
from rentdesk.schemas.renter_status import RenterStatusResponse, RenterStatusUpdate
from rentdesk.services.renter_status import RenterStatusService

router = APIRouter(prefix="/renter-status", tags=["renter-status"])


@router.get("", response_model=list[RenterStatusResponse])
async def list_board(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    rows = await RenterStatusService(db).get_by_landlord(current_user.db_user_id)
    return [RenterStatusResponse.model_validate(r) for r in rows]


@router.get("/mine", response_model=list[RenterStatusResponse])
async def list_my_status(
    property_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    rows = await RenterStatusService(db).get_by_email(current_user.email, property_id)
    return [RenterStatusResponse.model_validate(r) for r in rows]


@router.patch("/{status_id}", response_model=RenterStatusResponse)
async def move_renter(
    status_id: UUID,
    data: RenterStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Move a renter to another stage along the allowed transitions."""
    row = await RenterStatusService(db).move_to_stage(
        current_user.db_user_id,
        status_id,
        data.status,
        data.notes,
    )
    await db.commit()
    return RenterStatusResponse.model_validate(row)


@router.delete("/{status_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_renter(
    status_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    await RenterStatusService(db).delete(current_user.db_user_id, status_id)
    await db.commit()
