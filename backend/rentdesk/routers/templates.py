"""Lease template catalogue router."""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import get_db
from rentdesk.core.security import AuthenticatedUser, require_admin, require_landlord
from rentdesk.schemas.lease import TemplateCreate, TemplateResponse
from rentdesk.services.documents import TemplateService

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=list[TemplateResponse])
async def list_templates(
    template_type: Optional[str] = None,
    region: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """All templates, optionally filtered by type and/or region."""
    templates = await TemplateService(db).list_templates(template_type, region)
    return [TemplateResponse.model_validate(t) for t in templates]


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    data: TemplateCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Register an uploaded template (admin only)."""
    template = await TemplateService(db).create_template(data)
    await db.commit()
    return TemplateResponse.model_validate(template)
