from io import BytesIO
from uuid import uuid4

import pytest
from pypdf import PdfReader, PdfWriter

from rentdesk.core.exceptions import DomainValidationError
from rentdesk.services.document_fill import PypdfFillService
from rentdesk.services.storage import GCSStorageProvider, S3StorageProvider


def _blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    output = BytesIO()
    writer.write(output)
    return output.getvalue()


def test_fill_without_form_fields_returns_copy():
    filled = PypdfFillService().fill(_blank_pdf(), {"tenant_name": "Rita Renter"})

    assert filled.startswith(b"%PDF")
    assert len(PdfReader(BytesIO(filled)).pages) == 1


def test_fill_rejects_unreadable_template():
    with pytest.raises(DomainValidationError):
        PypdfFillService().fill(b"", {"tenant_name": "Rita Renter"})


def test_gcs_url_mapping():
    provider = GCSStorageProvider(bucket_name="rentdesk-files")
    url = provider.public_url("leases/signed/abc/file name.pdf")

    assert url == "https://storage.googleapis.com/rentdesk-files/leases/signed/abc/file name.pdf"
    assert provider.path_from_url(url) == "leases/signed/abc/file name.pdf"
    assert provider.path_from_url(
        "https://firebasestorage.googleapis.com/v0/b/rentdesk-files/o/messages%2Fleak.jpg"
    ) == "messages/leak.jpg"
    assert provider.path_from_url("https://storage.googleapis.com/other-bucket/x.pdf") is None
    assert provider.path_from_url("https://example.com/x.pdf") is None


def test_s3_url_mapping():
    provider = S3StorageProvider(bucket_name="rentdesk-files", region="us-west-2")
    url = provider.public_url("templates/standard.pdf")

    assert url == "https://rentdesk-files.s3.us-west-2.amazonaws.com/templates/standard.pdf"
    assert provider.path_from_url(url) == "templates/standard.pdf"
    assert provider.path_from_url("https://other.s3.us-west-2.amazonaws.com/x.pdf") is None


async def test_presigned_upload_validation(storage):
    owner = uuid4()

    url, object_path, expires_at = await storage.create_presigned_upload(
        "messages", owner, "photo.JPG", "image/jpeg", 1024
    )
    assert object_path.startswith(f"messages/{owner}/")
    assert object_path.endswith(".jpg")
    assert url.endswith(object_path)

    with pytest.raises(DomainValidationError, match="Unsupported mime type"):
        await storage.create_presigned_upload("messages", owner, "run.exe", "application/x-msdownload", 10)
    with pytest.raises(DomainValidationError, match="exceeds maximum"):
        await storage.create_presigned_upload("messages", owner, "big.pdf", "application/pdf", 26 * 1024 * 1024)


async def test_fetch_and_delete(storage, storage_provider):
    storage_provider.objects["templates/t.pdf"] = b"%PDF-t"
    url = storage.object_url("templates/t.pdf")

    assert await storage.fetch_bytes(url) == b"%PDF-t"
    assert await storage.delete_object("templates/t.pdf") is True
    assert await storage.delete_object("templates/t.pdf") is False


def test_owned_paths(storage):
    owner = uuid4()
    path = storage.new_object_path("messages", owner, "../../evil.sh/x")

    assert path.endswith(".bin")
    assert storage.is_owned_path("messages", owner, path)
    assert storage.is_owned_path("leases/signed", owner, f"leases/signed/{owner}/a.pdf")
    assert not storage.is_owned_path("messages", uuid4(), path)
    assert not storage.is_owned_path("messages", owner, f"messages/{owner}/../../leases/x.pdf")
    assert not storage.is_owned_path("messages", owner, f"messages/{owner}/")
    assert not storage.is_owned_path("messages", owner, "leases/signed/x.pdf")
