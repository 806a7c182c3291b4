"""Object storage for lease PDFs, signed copies and message attachments.

Records keep a stable object URL (``public_url``); the providers translate
those URLs back to object paths for reads and deletes. GCS and S3 SDK calls
block, so they run in a worker thread.
"""

import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Optional
from urllib.parse import unquote, urlparse
from uuid import UUID

import httpx

from rentdesk.core.config import StorageProvider, get_settings
from rentdesk.core.database import utcnow
from rentdesk.core.exceptions import DomainValidationError

logger = logging.getLogger(__name__)

settings = get_settings()


class StorageProviderInterface(ABC):
    """One bucket on one cloud."""

    @abstractmethod
    async def presign_put(self, object_path: str, mime_type: str, ttl_seconds: int) -> tuple[str, datetime]:
        """Signed PUT URL for a browser upload, with its expiry."""

    @abstractmethod
    async def exists(self, object_path: str) -> bool:
        ...

    @abstractmethod
    async def delete(self, object_path: str) -> bool:
        """True when an object was removed."""

    @abstractmethod
    async def put(self, object_path: str, data: bytes, content_type: str) -> None:
        ...

    @abstractmethod
    async def get(self, object_path: str) -> bytes:
        ...

    @abstractmethod
    def public_url(self, object_path: str) -> str:
        ...

    @abstractmethod
    def path_from_url(self, url: str) -> Optional[str]:
        """Inverse of public_url; None when the URL is not in this bucket."""


class GCSStorageProvider(StorageProviderInterface):
    def __init__(self, bucket_name: str, project_id: Optional[str] = None):
        self.bucket_name = bucket_name
        self.project_id = project_id
        self._bucket = None

    def _blob(self, object_path: str):
        if self._bucket is None:
            from google.cloud import storage

            self._bucket = storage.Client(project=self.project_id).bucket(self.bucket_name)
        return self._bucket.blob(object_path)

    async def presign_put(self, object_path: str, mime_type: str, ttl_seconds: int) -> tuple[str, datetime]:
        ttl = timedelta(seconds=ttl_seconds)
        url = await asyncio.to_thread(
            self._blob(object_path).generate_signed_url,
            version="v4",
            expiration=ttl,
            method="PUT",
            content_type=mime_type,
        )
        return url, utcnow() + ttl

    async def exists(self, object_path: str) -> bool:
        return await asyncio.to_thread(self._blob(object_path).exists)

    async def delete(self, object_path: str) -> bool:
        from google.api_core.exceptions import NotFound

        try:
            await asyncio.to_thread(self._blob(object_path).delete)
        except NotFound:
            return False
        return True

    async def put(self, object_path: str, data: bytes, content_type: str) -> None:
        await asyncio.to_thread(self._blob(object_path).upload_from_string, data, content_type=content_type)

    async def get(self, object_path: str) -> bytes:
        return await asyncio.to_thread(self._blob(object_path).download_as_bytes)

    def public_url(self, object_path: str) -> str:
        return f"https://storage.googleapis.com/{self.bucket_name}/{object_path}"

    def path_from_url(self, url: str) -> Optional[str]:
        parsed = urlparse(url)
        if parsed.netloc == "storage.googleapis.com":
            prefix = f"/{self.bucket_name}/"
            return unquote(parsed.path[len(prefix):]) if parsed.path.startswith(prefix) else None
        if parsed.netloc == "firebasestorage.googleapis.com" and "/o/" in parsed.path:
            # Firebase download links: /v0/b/<bucket>/o/<url-encoded path>
            return unquote(parsed.path.split("/o/", 1)[1])
        return None


class S3StorageProvider(StorageProviderInterface):
    def __init__(
        self,
        bucket_name: str,
        region: str,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
    ):
        self.bucket_name = bucket_name
        self.region = region
        self._credentials = {"aws_access_key_id": access_key_id, "aws_secret_access_key": secret_access_key}
        self._client = None

    @property
    def client(self):
        if self._client is None:
            import boto3

            self._client = boto3.client("s3", region_name=self.region, **self._credentials)
        return self._client

    async def presign_put(self, object_path: str, mime_type: str, ttl_seconds: int) -> tuple[str, datetime]:
        url = await asyncio.to_thread(
            self.client.generate_presigned_url,
            "put_object",
            Params={"Bucket": self.bucket_name, "Key": object_path, "ContentType": mime_type},
            ExpiresIn=ttl_seconds,
        )
        return url, utcnow() + timedelta(seconds=ttl_seconds)

    async def exists(self, object_path: str) -> bool:
        from botocore.exceptions import ClientError

        try:
            await asyncio.to_thread(self.client.head_object, Bucket=self.bucket_name, Key=object_path)
        except ClientError:
            return False
        return True

    async def delete(self, object_path: str) -> bool:
        # S3 deletes succeed for missing keys, so check first to report accurately
        if not await self.exists(object_path):
            return False
        await asyncio.to_thread(self.client.delete_object, Bucket=self.bucket_name, Key=object_path)
        return True

    async def put(self, object_path: str, data: bytes, content_type: str) -> None:
        await asyncio.to_thread(
            self.client.put_object, Bucket=self.bucket_name, Key=object_path, Body=data, ContentType=content_type
        )

    async def get(self, object_path: str) -> bytes:
        response = await asyncio.to_thread(self.client.get_object, Bucket=self.bucket_name, Key=object_path)
        return await asyncio.to_thread(response["Body"].read)

    def public_url(self, object_path: str) -> str:
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{object_path}"

    def path_from_url(self, url: str) -> Optional[str]:
        parsed = urlparse(url)
        if parsed.netloc.startswith(f"{self.bucket_name}.s3."):
            return unquote(parsed.path.lstrip("/"))
        return None


class StorageService:
    """Upload validation and URL-based access on top of a provider."""

    ALLOWED_MIME_TYPES = {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "image/jpeg",
        "image/png",
        "image/webp",
        "image/heic",
        "text/plain",
    }

    def __init__(self, provider: StorageProviderInterface):
        self.provider = provider

    @staticmethod
    def new_object_path(prefix: str, owner_id: UUID, file_name: str) -> str:
        """``<prefix>/<owner>/<uuid>.<ext>``; the client's file name is never used as a key."""
        ext = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""
        if not ext.isalnum():
            ext = "bin"
        return f"{prefix}/{owner_id}/{uuid.uuid4()}.{ext}"

    @staticmethod
    def is_owned_path(prefix: str, owner_id: UUID, object_path: str) -> bool:
        """True for a path shaped like ``new_object_path(prefix, owner_id, ...)``."""
        head = f"{prefix}/{owner_id}/"
        if not object_path.startswith(head):
            return False
        name = object_path[len(head):]
        return bool(name) and "/" not in name and name not in (".", "..")

    async def create_presigned_upload(
        self,
        prefix: str,
        owner_id: UUID,
        file_name: str,
        mime_type: str,
        file_size_bytes: int,
    ) -> tuple[str, str, datetime]:
        """Validate an upload request and sign it.

        Returns:
            Tuple of (upload_url, object_path, expires_at)
        """
        if mime_type not in self.ALLOWED_MIME_TYPES:
            raise DomainValidationError(f"Unsupported mime type: {mime_type}")
        if file_size_bytes > settings.max_upload_bytes:
            raise DomainValidationError(f"File size exceeds maximum of {settings.max_upload_size_mb}MB")

        object_path = self.new_object_path(prefix, owner_id, file_name)
        url, expires_at = await self.provider.presign_put(object_path, mime_type, settings.presign_ttl_seconds)
        logger.info("[STORAGE] Presigned upload issued for %s", object_path)
        return url, object_path, expires_at

    async def verify_upload(self, object_path: str) -> bool:
        return await self.provider.exists(object_path)

    def object_url(self, object_path: str) -> str:
        return self.provider.public_url(object_path)

    def path_from_url(self, url: str) -> Optional[str]:
        return self.provider.path_from_url(url)

    async def upload_bytes(self, object_path: str, data: bytes, content_type: str = "application/pdf") -> str:
        """Store server-generated bytes and return the object's URL."""
        await self.provider.put(object_path, data, content_type)
        logger.info("[STORAGE] Uploaded %d bytes to %s", len(data), object_path)
        return self.object_url(object_path)

    async def fetch_bytes(self, url: str) -> bytes:
        """Read a file by URL, from the bucket when it lives there, else over HTTP."""
        object_path = self.path_from_url(url)
        if object_path:
            return await self.provider.get(object_path)

        async with httpx.AsyncClient(timeout=30.0, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.content

    async def delete_object(self, object_path: str) -> bool:
        removed = await self.provider.delete(object_path)
        logger.info("[STORAGE] Delete %s: %s", object_path, "removed" if removed else "not found")
        return removed


def get_storage_service() -> StorageService:
    """Storage service for the configured provider."""
    if settings.storage_provider == StorageProvider.GCS:
        provider = GCSStorageProvider(bucket_name=settings.bucket_name, project_id=settings.gcs_project_id)
    else:
        provider = S3StorageProvider(
            bucket_name=settings.bucket_name,
            region=settings.aws_region,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
        )
    return StorageService(provider)
