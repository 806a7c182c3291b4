"""Lease documents router: send, renter upload/submit, landlord decision."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import get_db
from rentdesk.core.exceptions import PermissionDeniedError
from rentdesk.core.security import AuthenticatedUser, require_landlord, require_registered, require_renter
from rentdesk.models.lease import LeaseDocument
from rentdesk.schemas.lease import (
    LeaseDecisionRequest,
    LeaseDocumentResponse,
    LeaseDocumentSend,
    LeaseDocumentSubmit,
    LeaseUploadUrlRequest,
    LeaseUploadUrlResponse,
)
from rentdesk.services.document_fill import DocumentFillService, get_fill_service
from rentdesk.services.lease_documents import LeaseDocumentService
from rentdesk.services.storage import StorageService, get_storage_service

router = APIRouter(prefix="/lease-documents", tags=["lease-documents"])


def get_lease_document_service(
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    filler: DocumentFillService = Depends(get_fill_service),
) -> LeaseDocumentService:
    return LeaseDocumentService(db, storage, filler)


async def _respond(service: LeaseDocumentService, document: LeaseDocument) -> LeaseDocumentResponse:
    response = LeaseDocumentResponse.model_validate(document)
    response.actions_available = await service.actions_available(document)
    return response


@router.post("", response_model=LeaseDocumentResponse, status_code=status.HTTP_201_CREATED)
async def send_lease_document(
    data: LeaseDocumentSend,
    db: AsyncSession = Depends(get_db),
    service: LeaseDocumentService = Depends(get_lease_document_service),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Send a lease to a renter, filling the template when field values are given."""
    document = await service.send(current_user.db_user_id, data)
    await db.commit()
    return await _respond(service, document)


@router.get("", response_model=list[LeaseDocumentResponse])
async def list_property_lease_documents(
    property_id: UUID,
    service: LeaseDocumentService = Depends(get_lease_document_service),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    documents = await service.list_for_property(current_user.db_user_id, property_id)
    return [await _respond(service, d) for d in documents]


@router.get("/mine", response_model=list[LeaseDocumentResponse])
async def list_my_lease_documents(
    service: LeaseDocumentService = Depends(get_lease_document_service),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    documents = await service.list_for_renter(current_user.email)
    return [LeaseDocumentResponse.model_validate(d) for d in documents]


@router.get("/{document_id}", response_model=LeaseDocumentResponse)
async def get_lease_document(
    document_id: UUID,
    service: LeaseDocumentService = Depends(get_lease_document_service),
    current_user: AuthenticatedUser = Depends(require_registered),
):
    document = await service.get(document_id)
    if document.landlord_id == current_user.db_user_id:
        return await _respond(service, document)
    if document.renter_email == current_user.email:
        return LeaseDocumentResponse.model_validate(document)
    raise PermissionDeniedError()


@router.post("/{document_id}/upload-url", response_model=LeaseUploadUrlResponse)
async def create_signed_upload_url(
    document_id: UUID,
    data: LeaseUploadUrlRequest,
    service: LeaseDocumentService = Depends(get_lease_document_service),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    """Presigned URL for uploading the signed lease PDF."""
    upload_url, object_path, expires_at = await service.create_upload_url(
        current_user.email,
        document_id,
        data.file_name,
        data.mime_type,
        data.file_size_bytes,
    )
    return LeaseUploadUrlResponse(upload_url=upload_url, object_path=object_path, expires_at=expires_at)


@router.post("/{document_id}/submit", response_model=LeaseDocumentResponse)
async def submit_lease_document(
    document_id: UUID,
    data: LeaseDocumentSubmit,
    db: AsyncSession = Depends(get_db),
    service: LeaseDocumentService = Depends(get_lease_document_service),
    current_user: AuthenticatedUser = Depends(require_renter),
):
    """Renter hands back the completed lease."""
    document = await service.renter_submit(
        current_user.email,
        document_id,
        data.object_path,
        renter_user_id=current_user.db_user_id,
    )
    await db.commit()
    return LeaseDocumentResponse.model_validate(document)


@router.post("/{document_id}/decision", response_model=LeaseDocumentResponse)
async def decide_lease_document(
    document_id: UUID,
    data: LeaseDecisionRequest,
    db: AsyncSession = Depends(get_db),
    service: LeaseDocumentService = Depends(get_lease_document_service),
    current_user: AuthenticatedUser = Depends(require_landlord),
):
    """Accept or reject a completed lease."""
    document = await service.landlord_decision(current_user.db_user_id, document_id, data.action)
    await db.commit()
    return await _respond(service, document)
