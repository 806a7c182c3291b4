"""Landlord notification feed router."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import get_db
from rentdesk.core.security import AuthenticatedUser, require_landlord
from rentdesk.schemas.base import CountResponse
from rentdesk.schemas.notice import NotificationResponse
from rentdesk.services.notices import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Notifications from the recent window, newest first."""
    notifications = await NotificationService(db).list_for_landlord(current_user.db_user_id)
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.get("/unread-count", response_model=CountResponse)
async def unread_count(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    return CountResponse(count=await NotificationService(db).unread_count(current_user.db_user_id))


@router.post("/read-all", response_model=CountResponse)
async def mark_all_read(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    count = await NotificationService(db).mark_all_as_read(current_user.db_user_id)
    await db.commit()
    return CountResponse(count=count)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    notification = await NotificationService(db).mark_as_read(current_user.db_user_id, notification_id)
    await db.commit()
    return NotificationResponse.model_validate(notification)
