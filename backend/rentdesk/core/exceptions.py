"""Domain exceptions raised by services and mapped to HTTP responses in main."""

from typing import Optional

from fastapi import status


class RentDeskError(Exception):
    """Base class for workflow errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request could not be processed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFoundError(RentDeskError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class PermissionDeniedError(RentDeskError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"


class InvalidTransitionError(RentDeskError):
    """A status change that the entity's state machine does not allow."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Invalid status transition"


class ConflictError(RentDeskError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflicting request"


class DomainValidationError(RentDeskError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class InvitationExpiredError(InvalidTransitionError):
    """Raised after the invitation was flagged expired; the caller still commits that flag."""

    default_detail = "Invitation has expired"
