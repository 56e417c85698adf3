import os
from datetime import timedelta
from pathlib import Path

import pytest

from app.api.campaigns.models import Campaigns
from app.api.crowdfunding import service
from app.config import settings
from app.core.auth.jwt import create_access_token

PDF = ("proof.pdf", b"%PDF-1.4 test document", "application/pdf")
PNG = ("photo.png", b"\x89PNG\r\n\x1a\n", "image/png")

FORM = {
    "title": "School roof",
    "description": "Fix the roof before the monsoon",
    "target_amount": "5000",
    "category": "education",
}


@pytest.fixture
def upload_dir(monkeypatch, tmp_path):
    directory = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(directory))
    return directory


def apply(client, headers, files=(PDF,), data=FORM):
    return client.post(
        "/api/crowdfunding/apply",
        data=data,
        files=[("documents", file) for file in files],
        headers=headers,
    )


def stored_files(upload_dir: Path):
    directory = upload_dir / "crowdfunding"
    return sorted(os.listdir(directory)) if directory.exists() else []


def get_campaign(run_db, campaign_id):
    return run_db(lambda session: session.get(Campaigns, campaign_id))


def test_apply_creates_pending_application(client, user_headers, upload_dir, mailer):
    response = apply(client, user_headers, files=(PDF, PNG))
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["type"] == "crowdfunding"
    assert body["email_verified"] is False
    assert len(body["documents"]) == 2
    for path in body["documents"]:
        assert path.startswith("/uploads/crowdfunding/")
        assert (upload_dir / "crowdfunding" / path.rsplit("/", 1)[-1]).exists()
    assert body["documents"][0].endswith("-proof.pdf")

    messages = mailer.transport.messages_to("jane@example.com")
    assert len(messages) == 1
    assert "/api/crowdfunding/verify-email?token=" in messages[0].get_body(("html",)).get_content()


def test_apply_requires_authentication(client, upload_dir):
    assert apply(client, {}).status_code == 401


def test_apply_without_documents(client, user_headers, upload_dir, admin_headers):
    response = apply(client, user_headers, files=())
    assert response.status_code == 400
    assert client.get("/api/crowdfunding/all", headers=admin_headers).json() == []


@pytest.mark.parametrize(
    "files",
    [
        [PDF] * 6,
        [("big.pdf", b"0" * (6 * 1024 * 1024), "application/pdf")],
        [("notes.txt", b"hello", "text/plain")],
        [PDF, ("fake.pdf", b"hello", "text/plain")],
        [("mismatch.png", b"%PDF", "application/pdf")],
    ],
    ids=["too-many", "too-large", "text-file", "one-bad-of-two", "extension-mismatch"],
)
def test_apply_upload_policy(client, user_headers, admin_headers, upload_dir, files):
    response = apply(client, user_headers, files=files)
    assert response.status_code == 400
    assert response.json()["error_code"] == "UPLOAD_POLICY"
    assert client.get("/api/crowdfunding/all", headers=admin_headers).json() == []
    assert stored_files(upload_dir) == []


def test_apply_keeps_record_when_mail_fails(client, user_headers, upload_dir, use_failing_mailer):
    response = apply(client, user_headers)
    assert response.status_code == 201


def test_verify_email(client, make_user, upload_dir, run_db):
    user, headers = make_user()
    campaign_id = apply(client, headers).json()["id"]
    token = service.create_verification_token(get_campaign(run_db, campaign_id))

    response = client.get(f"/api/crowdfunding/verify-email?token={token}")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert f"{settings.FRONTEND_URL}/crowdfunding/apply" in response.text
    assert get_campaign(run_db, campaign_id).email_verified is True

    again = client.get(f"/api/crowdfunding/verify-email?token={token}")
    assert again.status_code == 200
    assert get_campaign(run_db, campaign_id).email_verified is True


def test_verify_email_missing_or_bad_token(client):
    assert client.get("/api/crowdfunding/verify-email").status_code == 400
    assert client.get("/api/crowdfunding/verify-email?token=garbage").status_code == 400


def test_verify_email_rejects_other_token_types(client, make_user, upload_dir):
    user, headers = make_user()
    campaign_id = apply(client, headers).json()["id"]
    token = create_access_token(
        {"token_type": "access_token", "campaign_id": campaign_id, "user_id": user.id},
        expires_delta=timedelta(hours=1),
    )
    assert client.get(f"/api/crowdfunding/verify-email?token={token}").status_code == 400


def test_verify_email_expired(client, make_user, upload_dir):
    user, headers = make_user()
    campaign_id = apply(client, headers).json()["id"]
    token = create_access_token(
        {"token_type": "cf_email_verify", "campaign_id": campaign_id, "user_id": user.id},
        expires_delta=timedelta(seconds=-5),
    )
    response = client.get(f"/api/crowdfunding/verify-email?token={token}")
    assert response.status_code == 400
    assert "expired" in response.text


def test_verify_email_wrong_owner(client, make_user, upload_dir):
    user, headers = make_user()
    other, _ = make_user(email="other@example.com", name="Other")
    campaign_id = apply(client, headers).json()["id"]
    token = create_access_token(
        {"token_type": "cf_email_verify", "campaign_id": campaign_id, "user_id": other.id},
        expires_delta=timedelta(hours=1),
    )
    assert client.get(f"/api/crowdfunding/verify-email?token={token}").status_code == 404


def test_resend_verification(client, make_user, upload_dir, mailer, run_db):
    user, headers = make_user()
    _, other_headers = make_user(email="other@example.com", name="Other")
    campaign_id = apply(client, headers).json()["id"]

    not_owner = client.post(
        f"/api/crowdfunding/{campaign_id}/resend-verification", headers=other_headers
    )
    assert not_owner.status_code == 404

    response = client.post(
        f"/api/crowdfunding/{campaign_id}/resend-verification", headers=headers
    )
    assert response.status_code == 200
    assert len(mailer.transport.messages_to("jane@example.com")) == 2

    token = service.create_verification_token(get_campaign(run_db, campaign_id))
    client.get(f"/api/crowdfunding/verify-email?token={token}")
    verified = client.post(
        f"/api/crowdfunding/{campaign_id}/resend-verification", headers=headers
    )
    assert verified.status_code == 400


def test_visibility_follows_approval(client, user_headers, admin_headers, upload_dir):
    campaign_id = apply(client, user_headers).json()["id"]

    assert client.get("/api/crowdfunding").json() == []
    assert client.get(f"/api/crowdfunding/{campaign_id}").status_code == 404
    assert client.get("/api/campaigns").json() == []
    assert client.get(f"/api/campaigns/{campaign_id}").status_code == 404

    mine = client.get("/api/crowdfunding/my", headers=user_headers).json()
    assert [item["id"] for item in mine] == [campaign_id]
    everything = client.get("/api/crowdfunding/all", headers=admin_headers).json()
    assert [item["id"] for item in everything] == [campaign_id]

    approved = client.put(f"/api/crowdfunding/{campaign_id}/approve", headers=admin_headers)
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"

    assert [item["id"] for item in client.get("/api/crowdfunding").json()] == [campaign_id]
    assert client.get(f"/api/crowdfunding/{campaign_id}").status_code == 200
    listed = client.get("/api/campaigns").json()
    assert listed[0]["organizer"]["name"] == "Jane"


def test_admin_routes_need_admin(client, user_headers, upload_dir):
    campaign_id = apply(client, user_headers).json()["id"]
    assert client.get("/api/crowdfunding/all", headers=user_headers).status_code == 403
    assert (
        client.put(f"/api/crowdfunding/{campaign_id}/approve", headers=user_headers).status_code
        == 403
    )


def test_reject_then_approve_is_refused(client, user_headers, admin_headers, upload_dir):
    campaign_id = apply(client, user_headers).json()["id"]

    rejected = client.put(
        f"/api/crowdfunding/{campaign_id}/reject",
        json={"reason": "Documents unreadable"},
        headers=admin_headers,
    )
    assert rejected.json()["status"] == "rejected"
    assert rejected.json()["rejection_reason"] == "Documents unreadable"

    again = client.put(f"/api/crowdfunding/{campaign_id}/reject", headers=admin_headers)
    assert again.status_code == 200
    assert again.json()["rejection_reason"] == "Documents unreadable"

    approve = client.put(f"/api/crowdfunding/{campaign_id}/approve", headers=admin_headers)
    assert approve.status_code == 400
    assert client.get("/api/crowdfunding").json() == []


def test_reject_default_reason(client, user_headers, admin_headers, upload_dir):
    campaign_id = apply(client, user_headers).json()["id"]
    response = client.put(f"/api/crowdfunding/{campaign_id}/reject", headers=admin_headers)
    assert response.json()["rejection_reason"] == "Rejected"


def test_approve_is_idempotent_and_final(client, user_headers, admin_headers, upload_dir):
    campaign_id = apply(client, user_headers).json()["id"]
    client.put(f"/api/crowdfunding/{campaign_id}/approve", headers=admin_headers)
    again = client.put(f"/api/crowdfunding/{campaign_id}/approve", headers=admin_headers)
    assert again.status_code == 200
    assert again.json()["status"] == "approved"

    reject = client.put(f"/api/crowdfunding/{campaign_id}/reject", headers=admin_headers)
    assert reject.status_code == 400


def test_approval_can_require_verified_email(
    client, user_headers, admin_headers, upload_dir, monkeypatch, run_db
):
    monkeypatch.setattr(settings, "REQUIRE_EMAIL_VERIFIED_FOR_APPROVAL", True)
    campaign_id = apply(client, user_headers).json()["id"]

    refused = client.put(f"/api/crowdfunding/{campaign_id}/approve", headers=admin_headers)
    assert refused.status_code == 400

    token = service.create_verification_token(get_campaign(run_db, campaign_id))
    client.get(f"/api/crowdfunding/verify-email?token={token}")
    approved = client.put(f"/api/crowdfunding/{campaign_id}/approve", headers=admin_headers)
    assert approved.status_code == 200


def test_approve_unknown_application(client, admin_headers):
    response = client.put("/api/crowdfunding/999/approve", headers=admin_headers)
    assert response.status_code == 404


def test_admin_crud(client, admin_headers):
    created = client.post(
        "/api/crowdfunding",
        json={"title": "Clinic", "description": "New clinic", "target_amount": 900},
        headers=admin_headers,
    )
    assert created.status_code == 201
    campaign_id = created.json()["id"]
    assert created.json()["type"] == "crowdfunding"
    assert created.json()["status"] == "approved"

    updated = client.put(
        f"/api/crowdfunding/{campaign_id}",
        json={"title": "Village clinic", "type": "campaign", "status": "rejected"},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["title"] == "Village clinic"
    assert updated.json()["type"] == "crowdfunding"
    assert updated.json()["status"] == "approved"

    deleted = client.delete(f"/api/crowdfunding/{campaign_id}", headers=admin_headers)
    assert deleted.status_code == 200
    assert client.get(f"/api/crowdfunding/{campaign_id}").status_code == 404


def test_delete_removes_documents(client, user_headers, admin_headers, upload_dir):
    campaign_id = apply(client, user_headers).json()["id"]
    assert len(stored_files(upload_dir)) == 1
    client.delete(f"/api/crowdfunding/{campaign_id}", headers=admin_headers)
    assert stored_files(upload_dir) == []


def test_admin_update_refuses_null_start_date(client, admin_headers):
    campaign_id = client.post(
        "/api/crowdfunding",
        json={"title": "Clinic", "description": "New clinic", "target_amount": 900},
        headers=admin_headers,
    ).json()["id"]

    response = client.put(
        f"/api/crowdfunding/{campaign_id}", json={"start_date": None}, headers=admin_headers
    )
    assert response.status_code == 400
    assert "start_date" in response.json()["errors"]
    assert client.get(f"/api/crowdfunding/{campaign_id}").json()["start_date"]


def test_apply_rate_limit(client, user_headers, upload_dir, rate_limited):
    for _ in range(20):
        assert apply(client, user_headers).status_code == 201

    response = apply(client, user_headers)
    assert response.status_code == 429
    assert response.json()["error_code"] == "RATE_LIMITED"
