"""End-to-end checks through the HTTP layer."""

from datetime import timedelta
from uuid import UUID

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.database import utcnow
from rentdesk.models.enums import MessageStatus, NoticeType
from rentdesk.models.invitation import Invitation
from rentdesk.models.message import LandlordMessage
from rentdesk.services.notices import NoticeService

RENTER = "renter@example.com"
BUCKET_URL = "https://storage.googleapis.com/rentdesk-test"
PROPERTY = {
    "street": "48 Elm Avenue",
    "unit": "3B",
    "city": "Portland",
    "state": "OR",
    "postal_code": "97201",
    "monthly_rent_cents": 180000,
    "security_deposit_cents": 90000,
    "application_fee_cents": 4000,
}


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_register_new_user(client, login):
    login(None)
    response = await client.post("/v1/auth/me", json={"role": "landlord", "full_name": "New Person"})
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "new@example.com"
    assert body["role"] == "landlord"

    refused = await client.post("/v1/auth/me", json={"role": "admin"})
    assert refused.status_code == 403


async def test_unregistered_caller_is_refused(client, login):
    login(None)
    response = await client.get("/v1/properties")
    assert response.status_code == 403
    assert response.json() == {"detail": "Registration required"}


async def test_property_crud_and_ownership(client, login, landlord, other_landlord, renter):
    login(landlord)
    created = await client.post("/v1/properties", json=PROPERTY)
    assert created.status_code == 201
    prop = created.json()
    assert prop["status"] == "available"
    assert prop["landlord_id"] == str(landlord.id)

    listing = await client.get("/v1/properties")
    assert listing.json()["total"] == 1

    updated = await client.patch(f"/v1/properties/{prop['id']}", json={"monthly_rent_cents": 185000})
    assert updated.status_code == 200
    assert updated.json()["monthly_rent_cents"] == 185000
    assert updated.json()["street"] == "48 Elm Avenue"

    login(other_landlord)
    denied = await client.patch(f"/v1/properties/{prop['id']}", json={"monthly_rent_cents": 1})
    assert denied.status_code == 403
    assert denied.json() == {"detail": "Access denied"}

    login(renter)
    assert (await client.get(f"/v1/properties/{prop['id']}")).status_code == 200
    assert (await client.post("/v1/properties", json=PROPERTY)).status_code == 403


async def test_missing_property_is_404(client, login, landlord):
    login(landlord)
    response = await client.get("/v1/properties/00000000-0000-0000-0000-000000000000")
    assert response.status_code == 404
    assert response.json() == {"detail": "Property not found"}


async def test_profile_dates_round_trip(client, login, renter):
    login(renter)
    assert (await client.get("/v1/profile")).status_code == 404

    payload = {
        "full_name": "Rita Renter",
        "date_of_birth": "1994-03-15",
        "current_address": {"street": "1 Pine Rd", "city": "Salem", "state": "OR", "postal_code": "97301"},
        "employment": {"company": "Acme", "monthly_income_cents": 620000, "start_date": "2021-06-01"},
        "rent_history": [
            {"address": "9 Birch Ln, Salem", "start_date": "2019-01-01", "end_date": "2021-05-31"},
        ],
        "references": [{"name": "Sam Ref", "email": "sam@example.com"}],
    }
    saved = await client.put("/v1/profile", json=payload)
    assert saved.status_code == 200

    fetched = (await client.get("/v1/profile")).json()
    assert fetched["date_of_birth"] == "1994-03-15"
    assert fetched["employment"]["start_date"] == "2021-06-01"
    assert fetched["rent_history"][0]["start_date"] == "2019-01-01"
    assert fetched["rent_history"][0]["end_date"] == "2021-05-31"
    assert fetched["email"] == RENTER


async def test_profile_rejects_backward_rent_history(client, login, renter):
    login(renter)
    response = await client.put(
        "/v1/profile",
        json={
            "full_name": "Rita Renter",
            "rent_history": [{"address": "9 Birch Ln", "start_date": "2021-01-01", "end_date": "2020-01-01"}],
        },
    )
    assert response.status_code == 422


async def test_move_in_pipeline(client, login, storage_provider, landlord, renter):
    login(landlord)
    prop = (await client.post("/v1/properties", json=PROPERTY)).json()

    invitation = (
        await client.post("/v1/invitations", json={"property_id": prop["id"], "renter_email": RENTER})
    ).json()

    login(renter)
    accepted = await client.post(f"/v1/invitations/{invitation['id']}/respond", json={"status": "accepted"})
    assert accepted.json()["status"] == "accepted"

    notices = (await client.get("/v1/notices/mine")).json()
    assert [n["type"] for n in notices] == ["invitation_sent"]

    login(landlord)
    sent = await client.post(
        "/v1/lease-documents",
        json={
            "property_id": prop["id"],
            "renter_email": RENTER,
            "template_url": f"{BUCKET_URL}/templates/standard.pdf",
        },
    )
    assert sent.status_code == 201
    document = sent.json()
    assert document["status"] == "sent"
    assert document["actions_available"] is True

    login(renter)
    upload = (
        await client.post(
            f"/v1/lease-documents/{document['id']}/upload-url",
            json={"file_name": "signed.pdf", "file_size_bytes": 4096},
        )
    ).json()
    storage_provider.objects[upload["object_path"]] = b"%PDF-signed"
    submitted = await client.post(
        f"/v1/lease-documents/{document['id']}/submit",
        json={"object_path": upload["object_path"]},
    )
    assert submitted.json()["status"] == "renter_completed"

    login(landlord)
    decided = await client.post(f"/v1/lease-documents/{document['id']}/decision", json={"action": "accept"})
    assert decided.json()["status"] == "accepted"
    assert decided.json()["actions_available"] is False

    invoice = (
        await client.post("/v1/invoices", json={"property_id": prop["id"], "renter_email": RENTER})
    ).json()
    assert invoice["amount_cents"] == 274000

    login(renter)
    paid = await client.post(f"/v1/invoices/{invoice['id']}/pay", json={"transaction_id": "txn_abc"})
    assert paid.status_code == 200
    result = paid.json()
    assert result["invoice"]["status"] == "paid"
    assert sorted(p["amount_cents"] for p in result["payments"]) == [4000, 90000, 180000]
    assert result["lease_id"] is not None

    replay = await client.post(f"/v1/invoices/{invoice['id']}/pay", json={"transaction_id": "txn_abc"})
    assert replay.status_code == 200
    conflict = await client.post(f"/v1/invoices/{invoice['id']}/pay", json={"transaction_id": "txn_other"})
    assert conflict.status_code == 409

    board = (await client.get("/v1/renter-status/mine", params={"property_id": prop["id"]})).json()
    assert board[0]["status"] == "payment"

    login(landlord)
    started = await client.post(
        "/v1/leases/start",
        json={
            "property_id": prop["id"],
            "renter_email": RENTER,
            "start_date": "2026-11-01",
            "end_date": "2027-10-31",
        },
    )
    assert started.status_code == 200
    assert started.json()["status"] == "active"

    stats = (await client.get("/v1/dashboard/stats")).json()
    assert stats["occupied_properties"] == 1
    assert stats["active_leases"] == 1
    assert stats["monthly_revenue_cents"] == 180000

    incomes = (await client.get("/v1/dashboard/incomes")).json()
    assert incomes[0]["total_paid_cents"] == 274000
    assert incomes[0]["payment_count"] == 3
    assert incomes[0]["property_address"] == "48 Elm Avenue, Unit 3B, Portland, OR"

    documents = (await client.get(f"/v1/properties/{prop['id']}/documents")).json()
    assert documents[0]["source"] == "lease"
    assert documents[0]["url"] == f"{BUCKET_URL}/{upload['object_path']}"


async def test_lease_decision_before_completion_conflicts(client, login, landlord):
    login(landlord)
    prop = (await client.post("/v1/properties", json=PROPERTY)).json()
    document = (
        await client.post(
            "/v1/lease-documents",
            json={"property_id": prop["id"], "renter_email": RENTER, "template_url": f"{BUCKET_URL}/t.pdf"},
        )
    ).json()

    response = await client.post(f"/v1/lease-documents/{document['id']}/decision", json={"action": "accept"})
    assert response.status_code == 409
    assert response.json() == {"detail": "Cannot move lease document from 'sent' to 'accepted'"}


async def _upload_attachment(client, storage_provider, file_name="leak.jpg", mime_type="image/jpeg"):
    upload = await client.post(
        "/v1/messages/attachments/upload-url",
        json={"file_name": file_name, "mime_type": mime_type, "file_size_bytes": 4},
    )
    assert upload.status_code == 200
    object_path = upload.json()["object_path"]
    storage_provider.objects[object_path] = b"data"
    return object_path


async def test_message_delete_removes_attachments(client, login, session_factory, storage_provider, landlord, renter):
    login(landlord)
    prop = (await client.post("/v1/properties", json=PROPERTY)).json()

    login(renter)
    object_path = await _upload_attachment(client, storage_provider)
    assert object_path.startswith(f"messages/{renter.id}/")
    created = await client.post(
        "/v1/messages",
        json={
            "property_id": prop["id"],
            "message": "The kitchen tap is leaking.",
            "files": [{"name": "leak.jpg", "size": 4, "type": "image/jpeg", "object_path": object_path}],
        },
    )
    assert created.status_code == 201
    assert created.json()["files"][0]["url"] == f"{BUCKET_URL}/{object_path}"
    message_id = created.json()["id"]

    login(landlord)
    assert len((await client.get("/v1/messages")).json()) == 1
    deleted = await client.delete(f"/v1/messages/{message_id}")
    assert deleted.status_code == 204

    assert storage_provider.deleted == [object_path]
    assert object_path not in storage_provider.objects
    assert (await client.get("/v1/messages")).json() == []

    async with session_factory() as session:
        stored = (await session.execute(select(LandlordMessage))).scalar_one()
        assert stored.status == MessageStatus.DELETED


async def test_message_attachments_must_be_the_renters_uploads(
    client, login, storage_provider, landlord, renter, other_landlord
):
    login(landlord)
    prop = (await client.post("/v1/properties", json=PROPERTY)).json()
    signed_lease = "leases/signed/other-doc/signed.pdf"
    storage_provider.objects[signed_lease] = b"%PDF-signed"
    # A file another user uploaded through the attachment flow
    foreign = f"messages/{other_landlord.id}/photo.jpg"
    storage_provider.objects[foreign] = b"jpeg"

    login(renter)
    never_uploaded = f"messages/{renter.id}/missing.jpg"
    escape = f"messages/{renter.id}/../../{signed_lease}"
    for path, detail in [
        (signed_lease, "was not uploaded by this renter"),
        (foreign, "was not uploaded by this renter"),
        (escape, "was not uploaded by this renter"),
        (never_uploaded, "upload not found"),
    ]:
        response = await client.post(
            "/v1/messages",
            json={
                "property_id": prop["id"],
                "message": "See attached.",
                "files": [{"name": "file", "size": 1, "type": "application/pdf", "object_path": path}],
            },
        )
        assert response.status_code == 400
        assert detail in response.json()["detail"]

    assert (await client.get("/v1/messages/mine")).json() == []
    assert storage_provider.objects[signed_lease] == b"%PDF-signed"
    assert storage_provider.deleted == []


async def test_notice_access(client, login, landlord, other_landlord, renter):
    login(landlord)
    prop = (await client.post("/v1/properties", json=PROPERTY)).json()
    created = await client.post(
        "/v1/notices",
        json={
            "type": "inspection",
            "subject": "Annual inspection",
            "message": "We will inspect the unit on Monday.",
            "property_id": prop["id"],
            "renter_email": RENTER,
        },
    )
    assert created.status_code == 201
    notice_id = created.json()["id"]

    login(other_landlord)
    assert (await client.post(f"/v1/notices/{notice_id}/read")).status_code == 403

    login(renter)
    assert (await client.get("/v1/notices/unread-count")).json() == {"count": 1}
    read = await client.post(f"/v1/notices/{notice_id}/read")
    assert read.json()["read_at"] is not None
    assert (await client.get("/v1/notices/unread-count")).json() == {"count": 0}


async def test_admin_only_endpoints_refuse_landlords(client, login, landlord):
    login(landlord)
    sweep = await client.post("/v1/invoices/mark-overdue")
    assert sweep.status_code == 403
    assert sweep.json() == {"detail": "Admin privileges required"}

    template = await client.post(
        "/v1/templates",
        json={"name": "Standard", "template_type": "residential", "url": f"{BUCKET_URL}/templates/standard.pdf"},
    )
    assert template.status_code == 403


async def test_notices_are_handled_by_their_audience(client, login, db, landlord, renter, prop):
    service = NoticeService(db)
    receipt = await service.create_notice(
        type=NoticeType.PAYMENT_RECEIVED,
        subject="Payment Received",
        message="Rent paid.",
        landlord_id=landlord.id,
        property_id=prop.id,
        renter_email=RENTER,
    )
    reminder = await service.create_notice(
        type=NoticeType.LATE_RENT,
        subject="Rent Overdue",
        message="Rent is late.",
        landlord_id=landlord.id,
        property_id=prop.id,
        renter_email=RENTER,
    )
    receipt_id, reminder_id = receipt.id, reminder.id
    await db.commit()

    login(renter)
    assert (await client.post(f"/v1/notices/{receipt_id}/read")).status_code == 403
    assert (await client.delete(f"/v1/notices/{receipt_id}")).status_code == 403

    login(landlord)
    assert (await client.get("/v1/notices/unread-count")).json() == {"count": 1}
    feed = (await client.get("/v1/notices")).json()
    assert {n["id"] for n in feed} == {str(receipt_id), str(reminder_id)}
    assert (await client.post(f"/v1/notices/{reminder_id}/read")).status_code == 403
    assert (await client.post(f"/v1/notices/{receipt_id}/read")).status_code == 200

    login(renter)
    assert (await client.get("/v1/notices/unread-count")).json() == {"count": 1}

    # The sender may still withdraw a notice it sent
    login(landlord)
    assert (await client.delete(f"/v1/notices/{reminder_id}")).status_code == 204
    login(renter)
    assert (await client.get("/v1/notices/mine")).json() == []


async def test_expired_invitation_response_is_refused_but_recorded(client, login, db, landlord, renter, prop):
    login(landlord)
    invitation = (
        await client.post("/v1/invitations", json={"property_id": str(prop.id), "renter_email": RENTER})
    ).json()
    stored = await db.get(Invitation, UUID(invitation["id"]))
    stored.expires_at = utcnow() - timedelta(days=1)
    await db.commit()

    login(renter)
    response = await client.post(f"/v1/invitations/{invitation['id']}/respond", json={"status": "accepted"})
    assert response.status_code == 409
    assert response.json() == {"detail": "Invitation has expired"}

    assert (await client.get(f"/v1/invitations/{invitation['id']}")).json()["status"] == "expired"


async def test_attachments_stay_when_message_delete_fails(client, login, monkeypatch, storage_provider, landlord, renter):
    login(landlord)
    prop = (await client.post("/v1/properties", json=PROPERTY)).json()
    login(renter)
    object_path = await _upload_attachment(client, storage_provider)
    message = (
        await client.post(
            "/v1/messages",
            json={
                "property_id": prop["id"],
                "message": "Photo of the damage.",
                "files": [{"name": "leak.jpg", "size": 4, "type": "image/jpeg", "object_path": object_path}],
            },
        )
    ).json()

    async def failing_commit(self):
        raise RuntimeError("database unavailable")

    login(landlord)
    monkeypatch.setattr(AsyncSession, "commit", failing_commit)
    with pytest.raises(RuntimeError):
        await client.delete(f"/v1/messages/{message['id']}")
    monkeypatch.undo()

    assert storage_provider.deleted == []
    assert object_path in storage_provider.objects
    assert len((await client.get("/v1/messages")).json()) == 1
