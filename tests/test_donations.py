from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import update
from sqlalchemy.exc import OperationalError

from app.api.campaigns.models import Campaigns
from app.api.donations import service
from app.api.donations.models import Donations


def donation(**overrides):
    body = {
        "amount": 50,
        "type": "once",
        "name": "Jane",
        "email": "jane@example.com",
        "phone": "+15550100",
        "payment_method": "card",
    }
    body.update(overrides)
    return body


@pytest.fixture
def campaign_id(client, admin_headers):
    response = client.post(
        "/api/campaigns",
        json={"title": "Food drive", "description": "Meals", "target_amount": 1000},
        headers=admin_headers,
    )
    return response.json()["id"]


def current_amount(client, campaign_id):
    return client.get(f"/api/campaigns/{campaign_id}").json()["current_amount"]


def test_donation_raises_campaign_total(client, user_headers, campaign_id):
    response = client.post(
        "/api/donations", json=donation(campaign_id=campaign_id), headers=user_headers
    )
    assert response.status_code == 201
    body = response.json()
    assert body["amount"] == 50
    assert body["status"] == "completed"
    assert body["transaction_id"] == f"TXN-{body['id']:08d}"
    assert body["campaign"]["title"] == "Food drive"
    assert current_amount(client, campaign_id) == 50

    client.post("/api/donations", json=donation(amount=25.5, campaign_id=campaign_id), headers=user_headers)
    assert current_amount(client, campaign_id) == 75.5


def test_donation_without_campaign(client, user_headers):
    response = client.post("/api/donations", json=donation(), headers=user_headers)
    assert response.status_code == 201
    assert response.json()["campaign_id"] is None


def test_donation_unknown_campaign(client, user_headers):
    response = client.post("/api/donations", json=donation(campaign_id=404), headers=user_headers)
    assert response.status_code == 400
    assert "campaign_id" in response.json()["errors"]
    assert client.get("/api/donations/my", headers=user_headers).json() == []


@pytest.mark.parametrize("amount", [0, -10])
def test_donation_amount_must_be_positive(client, user_headers, amount):
    response = client.post("/api/donations", json=donation(amount=amount), headers=user_headers)
    assert response.status_code == 400


def test_donation_requires_authentication(client):
    assert client.post("/api/donations", json=donation()).status_code == 401


def test_receipt_is_mailed(client, user_headers, mailer):
    client.post("/api/donations", json=donation(), headers=user_headers)
    messages = mailer.transport.messages_to("jane@example.com")
    assert len(messages) == 1
    assert "TXN-" in messages[0].get_body(("html",)).get_content()


def test_receipt_failure_keeps_donation(client, user_headers, use_failing_mailer):
    response = client.post("/api/donations", json=donation(), headers=user_headers)
    assert response.status_code == 201
    assert len(client.get("/api/donations/my", headers=user_headers).json()) == 1


def test_total_update_failure_keeps_donation(client, user_headers, campaign_id, monkeypatch):
    async def broken_increment(session, campaign_id, amount):
        raise OperationalError("UPDATE campaigns", {}, Exception("database is locked"))

    monkeypatch.setattr(service, "increment_current_amount", broken_increment)
    response = client.post(
        "/api/donations", json=donation(campaign_id=campaign_id), headers=user_headers
    )
    assert response.status_code == 201
    assert current_amount(client, campaign_id) == 0
    assert len(client.get("/api/donations/my", headers=user_headers).json()) == 1


def test_my_donations_newest_first_and_filtered(client, make_user, run_db):
    user, headers = make_user()
    _, other_headers = make_user(email="other@example.com", name="Other")
    for amount in (10, 20, 30):
        client.post("/api/donations", json=donation(amount=amount), headers=headers)
    client.post("/api/donations", json=donation(amount=99), headers=other_headers)

    now = datetime.now(timezone.utc)

    async def backdate(session):
        await session.execute(
            update(Donations)
            .where(Donations.amount == 10)
            .values(date=now - timedelta(days=30))
        )
        await session.commit()

    run_db(backdate)

    mine = client.get("/api/donations/my", headers=headers).json()
    assert [item["amount"] for item in mine] == [30, 20, 10]

    recent = client.get(
        "/api/donations/my",
        params={"start_date": (now - timedelta(days=1)).isoformat()},
        headers=headers,
    ).json()
    assert [item["amount"] for item in recent] == [30, 20]

    old = client.get(
        "/api/donations/my",
        params={"end_date": (now - timedelta(days=1)).isoformat()},
        headers=headers,
    ).json()
    assert [item["amount"] for item in old] == [10]


def test_admin_lists_all_donations(client, user_headers, admin_headers):
    client.post("/api/donations", json=donation(), headers=user_headers)
    client.post("/api/donations", json=donation(amount=5), headers=admin_headers)
    assert len(client.get("/api/donations", headers=admin_headers).json()) == 2
    assert client.get("/api/donations", headers=user_headers).status_code == 403


@pytest.mark.anyio
async def test_record_donation_reports_side_effects(session_factory):
    from app.api.users import service as user_service

    async with session_factory() as session:
        donor = await user_service.create_user(
            session, name="Jane", email="jane@example.com", password="secret123"
        )
        campaign = Campaigns(title="Wells", description="Water", target_amount=100)
        session.add(campaign)
        await session.commit()

        result = await service.record_donation(
            session, donor, **donation(amount=40, campaign_id=campaign.id)
        )
        await session.refresh(campaign)

    assert result.value.user_id == donor.id
    assert [outcome.name for outcome in result.side_effects] == ["campaign_total"]
    assert result.failed_side_effects == []
    assert campaign.current_amount == 40
