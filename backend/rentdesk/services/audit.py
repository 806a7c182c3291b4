"""Audit logging service."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.models.audit import AuditLog
from rentdesk.models.enums import AuditAction


class AuditService:
    """Service for creating audit log entries.

    Entries are added to the caller's session and flushed, so they commit or
    roll back together with the workflow that produced them.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def log(
        self,
        action: AuditAction,
        resource_type: str,
        resource_id: UUID,
        user_id: Optional[UUID] = None,
        details: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> AuditLog:
        """Create an audit log entry."""
        entry = AuditLog(
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            user_id=user_id,
            details=details or {},
            ip_address=ip_address,
        )
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def log_invitation_sent(self, invitation_id: UUID, user_id: UUID, renter_email: str) -> AuditLog:
        return await self.log(
            action=AuditAction.INVITATION_SENT,
            resource_type="invitation",
            resource_id=invitation_id,
            user_id=user_id,
            details={"renter_email": renter_email},
        )

    async def log_stage_changed(
        self,
        renter_status_id: UUID,
        user_id: Optional[UUID],
        from_stage: Optional[str],
        to_stage: str,
    ) -> AuditLog:
        """Log a move on the renter status board."""
        return await self.log(
            action=AuditAction.STAGE_CHANGED,
            resource_type="renter_status",
            resource_id=renter_status_id,
            user_id=user_id,
            details={"from": from_stage, "to": to_stage},
        )

    async def log_payment_completed(
        self,
        invoice_id: UUID,
        user_id: Optional[UUID],
        transaction_id: str,
        amount_cents: int,
    ) -> AuditLog:
        return await self.log(
            action=AuditAction.PAYMENT_COMPLETED,
            resource_type="invoice",
            resource_id=invoice_id,
            user_id=user_id,
            details={"transaction_id": transaction_id, "amount_cents": amount_cents},
        )
