"""Firebase ID-token verification and role dependencies."""

from typing import Any, Callable, Optional
from uuid import UUID

import firebase_admin
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth, credentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.config import get_settings
from rentdesk.core.database import get_db

settings = get_settings()

security = HTTPBearer()


def _ensure_firebase_app() -> None:
    if firebase_admin._apps:
        return
    options = {"projectId": settings.firebase_project_id}
    if settings.google_application_credentials:
        firebase_admin.initialize_app(credentials.Certificate(settings.google_application_credentials), options)
    else:
        firebase_admin.initialize_app(options=options)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


class AuthenticatedUser:
    """The caller behind a verified token, plus its local user row once registered."""

    def __init__(
        self,
        uid: str,
        email: Optional[str] = None,
        email_verified: bool = False,
        claims: Optional[dict[str, Any]] = None,
    ):
        self.uid = uid
        # Renters are matched by email everywhere, always lowercase
        self.email = email.lower() if email else None
        self.email_verified = email_verified
        self.claims = claims or {}
        self.db_user_id: Optional[UUID] = None
        self.role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_landlord(self) -> bool:
        return self.role in ("landlord", "admin")


async def verify_firebase_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthenticatedUser:
    """Verify a Firebase ID token. Tokens are only ever verified here, never minted."""
    _ensure_firebase_app()

    try:
        decoded = auth.verify_id_token(credentials.credentials)
    except auth.ExpiredIdTokenError:
        raise _unauthorized("Token has expired")
    except auth.InvalidIdTokenError:
        raise _unauthorized("Invalid authentication token")
    except (ValueError, auth.CertificateFetchError) as e:
        raise _unauthorized(f"Token verification failed: {e}")

    return AuthenticatedUser(
        uid=decoded["uid"],
        email=decoded.get("email"),
        email_verified=decoded.get("email_verified", False),
        claims=decoded,
    )


async def get_current_user(
    auth_user: AuthenticatedUser = Depends(verify_firebase_token),
    db: AsyncSession = Depends(get_db),
) -> AuthenticatedUser:
    """Attach the local user id and role; unregistered callers keep ``db_user_id=None``."""
    from rentdesk.models.user import User

    user = (await db.execute(select(User).where(User.firebase_uid == auth_user.uid))).scalar_one_or_none()
    if user:
        auth_user.db_user_id = user.id
        auth_user.role = user.role.value
        auth_user.email = user.email

    return auth_user


def require_registered(
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """Require a local user row (created through POST /auth/me)."""
    if not current_user.db_user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Registration required")
    return current_user


def _role_guard(allowed: Callable[[AuthenticatedUser], bool], detail: str):
    def guard(current_user: AuthenticatedUser = Depends(require_registered)) -> AuthenticatedUser:
        if not allowed(current_user):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
        return current_user

    return guard


# Admins pass the landlord guard; renters are never admins
require_landlord = _role_guard(lambda user: user.is_landlord, "Landlord privileges required")
require_renter = _role_guard(lambda user: user.role == "renter", "Renter account required")
require_admin = _role_guard(lambda user: user.is_admin, "Admin privileges required")
