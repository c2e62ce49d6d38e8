from app.middleware.auth_middleware import decode_token
from app.models.user import User
from tests.conftest import auth_headers


def test_login_success(client, seed_users):
    resp = client.post("/api/auth/login", json={"login": "admin"})
    assert resp.status_code == 200
    data = resp.json()
    assert "access_token" in data
    assert data["user"]["role"] == "admin"


def test_login_unknown_login(client, seed_users):
    resp = client.post("/api/auth/login", json={"login": "nonexistent"})
    assert resp.status_code == 401


def test_login_inactive_user(client, db, seed_users):
    seed_users["julien"].is_active = False
    db.commit()
    resp = client.post("/api/auth/login", json={"login": "julien"})
    assert resp.status_code == 401


def test_me_authenticated(client, seed_users):
    headers = auth_headers(client, "marcel")
    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["login"] == "marcel"
    assert resp.json()["name"] == "Marcel"


def test_me_unauthenticated(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code in (401, 403)  # HTTPBearer raises 401 or 403 depending on version


def test_me_with_invalid_token(client, seed_users):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_logout(client, seed_users):
    headers = auth_headers(client, "admin")
    resp = client.post("/api/auth/logout", headers=headers)
    assert resp.status_code == 200


def test_token_carries_login(client, seed_users):
    token = client.post("/api/auth/login", json={"login": "marcel"}).json()["access_token"]
    payload = decode_token(token)
    assert payload["login"] == "marcel"
    assert payload["sub"] == str(seed_users["marcel"].user_id)


def test_inactive_user_cannot_be_assigned(client, db, seed_issue):
    julien = db.query(User).filter(User.login == "julien").first()
    julien.is_active = False
    db.commit()
    headers = auth_headers(client, "marcel")
    resp = client.post("/api/issues/assign", json={"issue": "ISSUE-1", "assignee": "julien"}, headers=headers)
    assert resp.status_code == 404
