"""Notices router."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import get_db
from rentdesk.core.exceptions import PermissionDeniedError
from rentdesk.core.security import AuthenticatedUser, require_landlord, require_registered, require_renter
from rentdesk.models.enums import LANDLORD_ONLY_NOTICE_TYPES
from rentdesk.models.notice import Notice
from rentdesk.schemas.base import CountResponse
from rentdesk.schemas.notice import NoticeCreate, NoticeResponse
from rentdesk.services.notices import NoticeService
from rentdesk.services.properties import PropertyService

router = APIRouter(prefix="/notices", tags=["notices"])


def _is_sender(notice: Notice, user: AuthenticatedUser) -> bool:
    return user.is_landlord and notice.landlord_id == user.db_user_id


def _is_addressee(notice: Notice, user: AuthenticatedUser) -> bool:
    """Landlord-only types are addressed to the landlord, every other type to the renter."""
    if notice.type in LANDLORD_ONLY_NOTICE_TYPES:
        return _is_sender(notice, user)
    return bool(notice.renter_email) and notice.renter_email == user.email


def _ensure_can_read(notice: Notice, user: AuthenticatedUser) -> None:
    if not _is_addressee(notice, user):
        raise PermissionDeniedError()


def _ensure_can_delete(notice: Notice, user: AuthenticatedUser) -> None:
    # The sending landlord may withdraw a notice it sent
    if not (_is_addressee(notice, user) or _is_sender(notice, user)):
        raise PermissionDeniedError()


@router.post("", response_model=NoticeResponse, status_code=status.HTTP_201_CREATED)
async def send_notice(
    data: NoticeCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Send a typed notice (late rent, inspection, ...) to a renter."""
    prop = await PropertyService(db).get_owned_property(current_user.db_user_id, data.property_id)
    notice = await NoticeService(db).create_notice(
        type=data.type,
        subject=data.subject,
        message=data.message,
        landlord_id=current_user.db_user_id,
        property_id=prop.id,
        renter_email=data.renter_email,
    )
    await db.commit()
    return NoticeResponse.model_validate(notice)


@router.get("", response_model=list[NoticeResponse])
async def list_landlord_notices(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    notices = await NoticeService(db).get_landlord_notices(current_user.db_user_id)
    return [NoticeResponse.model_validate(n) for n in notices]


@router.get("/lease", response_model=list[NoticeResponse])
async def list_landlord_lease_notices(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Lease-status notices (received / completed)."""
    notices = await NoticeService(db).get_landlord_lease_notices(current_user.db_user_id)
    return [NoticeResponse.model_validate(n) for n in notices]


@router.get("/mine", response_model=list[NoticeResponse])
async def list_my_notices(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    notices = await NoticeService(db).get_renter_notices(current_user.email)
    return [NoticeResponse.model_validate(n) for n in notices]


@router.get("/unread-count", response_model=CountResponse)
async def unread_count(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered),
):
    service = NoticeService(db)
    if current_user.is_landlord:
        count = await service.unread_count_for_landlord(current_user.db_user_id)
    else:
        count = await service.unread_count_for_renter(current_user.email)
    return CountResponse(count=count)


@router.post("/{notice_id}/read", response_model=NoticeResponse)
async def mark_notice_read(
    notice_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered),
):
    service = NoticeService(db)
    _ensure_can_read(await service.get(notice_id), current_user)
    notice = await service.mark_as_read(notice_id)
    await db.commit()
    return NoticeResponse.model_validate(notice)


@router.delete("/{notice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notice(
    notice_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_registered),
):
    service = NoticeService(db)
    _ensure_can_delete(await service.get(notice_id), current_user)
    await service.delete_notice(notice_id)
    await db.commit()
