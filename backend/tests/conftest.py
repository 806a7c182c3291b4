"""Shared fixtures: in-memory SQLite database, fake storage, fake auth."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("FIREBASE_PROJECT_ID", "rentdesk-test")
os.environ.setdefault("STORAGE_PROVIDER", "gcs")
os.environ.setdefault("GCS_BUCKET_NAME", "rentdesk-test")
os.environ.setdefault("GCS_PROJECT_ID", "rentdesk-test")
os.environ.setdefault("ALLOWED_ORIGINS", "http://localhost:3000")

from datetime import timedelta
from typing import Any, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import rentdesk.models  # noqa: F401  (registers every table on Base.metadata)
from rentdesk.core.database import Base, get_db, utcnow
from rentdesk.core.security import AuthenticatedUser, get_current_user
from rentdesk.main import app
from rentdesk.models.enums import UserRole
from rentdesk.models.user import User
from rentdesk.schemas.property import PropertyCreate
from rentdesk.services.document_fill import DocumentFillService, get_fill_service
from rentdesk.services.properties import PropertyService
from rentdesk.services.storage import StorageProviderInterface, StorageService, get_storage_service

BUCKET = "rentdesk-test"


class FakeStorageProvider(StorageProviderInterface):
    """In-memory bucket."""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []

    async def presign_put(self, object_path, mime_type, ttl_seconds):
        return f"https://upload.test/{object_path}", utcnow() + timedelta(seconds=ttl_seconds)

    async def exists(self, object_path):
        return object_path in self.objects

    async def delete(self, object_path):
        self.deleted.append(object_path)
        return self.objects.pop(object_path, None) is not None

    async def put(self, object_path, data, content_type):
        self.objects[object_path] = data

    async def get(self, object_path):
        return self.objects[object_path]

    def public_url(self, object_path):
        return f"https://storage.googleapis.com/{BUCKET}/{object_path}"

    def path_from_url(self, url):
        prefix = f"https://storage.googleapis.com/{BUCKET}/"
        return url[len(prefix):] if url.startswith(prefix) else None


class FakeFillService(DocumentFillService):
    """Records fill calls and returns a marker document."""

    def __init__(self):
        self.calls: list[tuple[bytes, dict[str, Any]]] = []

    def fill(self, template, values):
        self.calls.append((template, dict(values)))
        return b"%PDF-filled"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage_provider():
    return FakeStorageProvider()


@pytest.fixture
def storage(storage_provider):
    return StorageService(storage_provider)


@pytest.fixture
def filler():
    return FakeFillService()


async def _make_user(db, email: str, role: UserRole, name: str) -> User:
    user = User(firebase_uid=f"uid-{email}", email=email, full_name=name, role=role)
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def landlord(db):
    return await _make_user(db, "landlord@example.com", UserRole.LANDLORD, "Lana Lord")


@pytest.fixture
async def other_landlord(db):
    return await _make_user(db, "other@example.com", UserRole.LANDLORD, "Otto Other")


@pytest.fixture
async def renter(db):
    return await _make_user(db, "renter@example.com", UserRole.RENTER, "Rita Renter")


@pytest.fixture
async def prop(db, landlord):
    """$2,000 rent + $500 deposit; the $75 pet fee is only billed on request."""
    prop = await PropertyService(db).create_property(
        landlord.id,
        PropertyCreate(
            street="12 Oak Street",
            city="Springfield",
            state="IL",
            postal_code="62701",
            monthly_rent_cents=200000,
            security_deposit_cents=50000,
            pet_fee_cents=7500,
        ),
    )
    await db.commit()
    return prop


def as_user(user: Optional[User]) -> AuthenticatedUser:
    """The AuthenticatedUser get_current_user would build for ``user``."""
    if user is None:
        return AuthenticatedUser(uid="uid-unregistered", email="new@example.com")
    auth_user = AuthenticatedUser(uid=user.firebase_uid, email=user.email, email_verified=True)
    auth_user.db_user_id = user.id
    auth_user.role = user.role.value
    return auth_user


@pytest.fixture
async def client(session_factory, storage, filler):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage
    app.dependency_overrides[get_fill_service] = lambda: filler

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def login():
    """Switch the caller the API sees: ``login(landlord)``."""

    def _login(user: Optional[User]) -> None:
        app.dependency_overrides[get_current_user] = lambda: as_user(user)

    return _login
