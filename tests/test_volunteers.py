VOLUNTEER = {
    "name": "Jane",
    "email": "jane@example.com",
    "phone": "+15550100",
    "availability": "weekends",
    "skills": ["cooking", "driving"],
    "message": "Happy to help",
}


def test_signup_as_volunteer(client, user_headers):
    response = client.post("/api/volunteers", json=VOLUNTEER, headers=user_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "active"
    assert body["skills"] == ["cooking", "driving"]
    assert body["availability"] == "weekends"


def test_defaults(client, user_headers):
    response = client.post(
        "/api/volunteers",
        json={"name": "Jane", "email": "jane@example.com", "phone": "1"},
        headers=user_headers,
    )
    body = response.json()
    assert body["availability"] == "any"
    assert body["skills"] == []
    assert body["message"] == ""


def test_volunteer_for_campaign(client, user_headers, admin_headers):
    campaign_id = client.post(
        "/api/campaigns",
        json={"title": "Cleanup", "description": "Beach", "target_amount": 10},
        headers=admin_headers,
    ).json()["id"]
    response = client.post(
        "/api/volunteers", json={**VOLUNTEER, "campaign_id": campaign_id}, headers=user_headers
    )
    assert response.json()["campaign"]["title"] == "Cleanup"

    unknown = client.post(
        "/api/volunteers", json={**VOLUNTEER, "campaign_id": 999}, headers=user_headers
    )
    assert unknown.status_code == 400


def test_requires_authentication(client):
    assert client.post("/api/volunteers", json=VOLUNTEER).status_code == 401


def test_own_and_admin_lists(client, make_user, admin_headers):
    _, jane = make_user()
    _, other = make_user(email="other@example.com", name="Other")
    client.post("/api/volunteers", json=VOLUNTEER, headers=jane)
    client.post("/api/volunteers", json={**VOLUNTEER, "name": "Other"}, headers=other)

    mine = client.get("/api/volunteers/my", headers=jane).json()
    assert [item["name"] for item in mine] == ["Jane"]
    assert len(client.get("/api/volunteers", headers=admin_headers).json()) == 2
    assert client.get("/api/volunteers", headers=jane).status_code == 403


def test_status_update_owner_or_admin(client, make_user, admin_headers):
    _, jane = make_user()
    _, other = make_user(email="other@example.com", name="Other")
    volunteer_id = client.post("/api/volunteers", json=VOLUNTEER, headers=jane).json()["id"]

    forbidden = client.put(
        f"/api/volunteers/{volunteer_id}/status", json={"status": "archived"}, headers=other
    )
    assert forbidden.status_code == 403

    archived = client.put(
        f"/api/volunteers/{volunteer_id}/status", json={"status": "archived"}, headers=jane
    )
    assert archived.json()["status"] == "archived"

    restored = client.put(
        f"/api/volunteers/{volunteer_id}/status", json={"status": "active"}, headers=admin_headers
    )
    assert restored.json()["status"] == "active"

    invalid = client.put(
        f"/api/volunteers/{volunteer_id}/status", json={"status": "paused"}, headers=jane
    )
    assert invalid.status_code == 400


def test_delete_owner_or_admin(client, make_user, admin_headers):
    _, jane = make_user()
    _, other = make_user(email="other@example.com", name="Other")
    first = client.post("/api/volunteers", json=VOLUNTEER, headers=jane).json()["id"]
    second = client.post("/api/volunteers", json=VOLUNTEER, headers=jane).json()["id"]

    assert client.delete(f"/api/volunteers/{first}", headers=other).status_code == 403
    assert client.delete(f"/api/volunteers/{first}", headers=jane).status_code == 200
    assert client.delete(f"/api/volunteers/{second}", headers=admin_headers).status_code == 200
    assert client.get("/api/volunteers/my", headers=jane).json() == []
    assert client.delete(f"/api/volunteers/{first}", headers=jane).status_code == 404
