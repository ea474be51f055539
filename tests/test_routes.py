from datetime import datetime, timedelta

from placement_portal.services.mongo_service import AnnouncementStore

EXPERIENCE = {
    "company": "Google",
    "role": "SDE",
    "branch": "CSE",
    "year": 2024,
    "package": "12 LPA",
    "rounds": [{"roundNumber": 1, "roundName": "Online Assessment", "questions": ["Two sum"]}],
}


def test_anonymous_submission_then_approval(client, make_user, auth_header):
    created = client.post("/api/experiences", json=EXPERIENCE)
    assert created.status_code == 201
    body = created.json()
    assert body["success"] is True
    exp = body["data"]
    assert exp["moderationStatus"] == "pending"
    assert exp["author"] is None
    assert exp["authorName"] == "Anonymous"

    assert client.get("/api/experiences").json()["count"] == 0
    assert client.get(f"/api/experiences/{exp['_id']}").status_code == 404

    staff = auth_header(make_user(role="coordinator"))
    approved = client.put(f"/api/admin/experiences/{exp['_id']}/approve", headers=staff)
    assert approved.status_code == 200
    assert approved.json()["data"]["moderationStatus"] == "approved"

    listed = client.get("/api/experiences", params={"company": "goo"}).json()
    assert [e["_id"] for e in listed["data"]] == [exp["_id"]]


def test_admin_routes_require_token(client):
    response = client.get("/api/admin/experiences/pending")
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Not authorized, no token"}


def test_invalid_token_rejected(client):
    response = client.get("/api/notifications", headers={"Authorization": "Bearer nonsense"})
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_admin_routes_require_staff(client, make_user, auth_header):
    response = client.get("/api/admin/experiences/pending", headers=auth_header(make_user()))
    assert response.status_code == 403
    assert response.json()["success"] is False


def test_reset_moderation_is_admin_only(client, make_user, make_experience, auth_header):
    make_experience(moderationStatus="approved")
    make_experience(moderationStatus="rejected")

    coordinator = auth_header(make_user(role="coordinator"))
    assert client.post("/api/admin/experiences/reset-moderation", headers=coordinator).status_code == 403

    admin = auth_header(make_user(role="admin"))
    response = client.post("/api/admin/experiences/reset-moderation", headers=admin)
    assert response.status_code == 200
    assert response.json()["modifiedCount"] == 2
    assert response.json()["message"] == "Reset 2 experiences to pending status"


def test_validation_errors_use_envelope(client):
    response = client.post("/api/experiences", json={**EXPERIENCE, "rounds": []})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "rounds" in body["error"]


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found"}


def test_company_routes(client, make_user, make_experience, auth_header):
    staff = auth_header(make_user(role="teacher"))
    exp = make_experience(company="google inc")

    created = client.post("/api/admin/companies", json={"standardName": "Google", "variations": ["google inc"]},
                          headers=staff)
    assert created.status_code == 201
    duplicate = client.post("/api/admin/companies", json={"standardName": "Google"}, headers=staff)
    assert duplicate.status_code == 409
    assert duplicate.json()["success"] is False

    missing = client.post("/api/admin/companies/standardize", json={"standardName": "Google"}, headers=staff)
    assert missing.status_code == 400

    standardized = client.post(
        "/api/admin/companies/standardize",
        json={"experienceId": str(exp["_id"]), "standardName": "Google"},
        headers=staff,
    )
    assert standardized.json()["data"]["company"] == "Google"
    assert client.get("/api/admin/companies/all", headers=staff).json()["data"] == [{"name": "Google", "count": 1}]


def test_notification_routes(client, make_user, make_experience, auth_header):
    author, reader = make_user(), make_user()
    exp = make_experience(author=author["_id"], moderationStatus="approved")

    commented = client.post(f"/api/experiences/{exp['_id']}/comments", json={"content": "Helpful!"},
                            headers=auth_header(reader))
    assert commented.status_code == 201

    headers = auth_header(author)
    assert client.get("/api/notifications/unread-count", headers=headers).json()["count"] == 1
    inbox = client.get("/api/notifications", headers=headers).json()["data"]
    assert inbox[0]["comment"]["content"] == "Helpful!"

    other = client.patch(f"/api/notifications/{inbox[0]['_id']}/read", headers=auth_header(reader))
    assert other.status_code == 404

    assert client.post("/api/notifications/read-all", headers=headers).json()["modifiedCount"] == 1
    assert client.post("/api/notifications/read-all", headers=headers).json()["modifiedCount"] == 0


def test_announcement_visibility(client, make_user, auth_header):
    admin = auth_header(make_user(role="admin"))
    created = client.post("/api/admin/announcements", json={"title": "Drive", "content": "Google on Monday"},
                          headers=admin)
    assert created.status_code == 201
    announcement_id = created.json()["data"]["_id"]

    AnnouncementStore().insert({
        "title": "Old", "content": "Expired", "isActive": True, "views": 0,
        "publishedAt": datetime.utcnow(), "expiresAt": datetime.utcnow() - timedelta(days=1),
    })

    public = client.get("/api/announcements").json()
    assert [a["title"] for a in public["data"]] == ["Drive"]
    assert client.get(f"/api/announcements/{announcement_id}").json()["data"]["views"] == 1

    client.put(f"/api/admin/announcements/{announcement_id}", json={"isActive": False}, headers=admin)
    assert client.get("/api/announcements").json()["count"] == 0
    assert client.get("/api/admin/announcements", headers=admin).json()["count"] == 2


def test_insights_route(client, make_experience):
    make_experience(package="10 LPA")
    response = client.get("/api/insights")
    assert response.status_code == 200
    assert response.json()["data"]["overview"]["avgPackage"] == "10.00"


def test_register_and_login(client):
    registered = client.post("/api/auth/register", json={
        "name": "Asha", "email": "Asha@College.edu", "password": "secret123", "username": "asha",
    })
    assert registered.status_code == 201
    assert registered.json()["user"]["role"] == "student"

    duplicate = client.post("/api/auth/register", json={
        "name": "Asha", "email": "asha@college.edu", "password": "secret123",
    })
    assert duplicate.status_code == 400

    bad = client.post("/api/auth/login", json={"email": "asha@college.edu", "password": "wrong-pass"})
    assert bad.status_code == 401

    token = client.post("/api/auth/login", json={"email": "asha@college.edu", "password": "secret123"}).json()["token"]
    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["user"]["email"] == "asha@college.edu"


def test_staff_role_cannot_self_register(client):
    response = client.post("/api/auth/register", json={
        "name": "Eve", "email": "eve@college.edu", "password": "secret123", "role": "admin",
    })
    assert response.status_code == 400
