import datetime as dt
import jwt
import pytest
from hokies.utils import create_access_token, create_refresh_token, decode_token, TokenError


def test_login_with_admin_password(client):
    resp = client.post("/api/v1/auth/login", json={"password": "test-admin-password"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "success"
    assert body["expires_in"] == 3600

    resp = client.get("/api/v1/admin/drops", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert resp.status_code == 200


def test_login_wrong_password(client):
    resp = client.post("/api/v1/auth/login", json={"password": "hunter2"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid password"


def test_login_requires_password(client):
    resp = client.post("/api/v1/auth/login", json={})
    assert resp.status_code == 422


def test_admin_routes_require_token(client):
    resp = client.get("/api/v1/admin/inventory")
    assert resp.status_code == 401
    resp = client.get("/api/v1/admin/inventory", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_admin_routes_require_admin_role(client):
    toks = client.post("/__auth/login_stub", json={"subject": "helper", "role": "viewer"}).get_json()["data"]
    resp = client.get("/api/v1/admin/inventory", headers={"Authorization": f"Bearer {toks['access']}"})
    assert resp.status_code == 403


def test_refresh_token_cannot_call_admin(client):
    toks = client.post("/__auth/login_stub", json={}).get_json()["data"]
    resp = client.get("/api/v1/admin/inventory", headers={"Authorization": f"Bearer {toks['refresh']}"})
    assert resp.status_code == 401


def test_refresh_returns_new_access(client):
    toks = client.post("/__auth/login_stub", json={}).get_json()["data"]
    resp = client.post("/api/v1/auth/refresh", json={"refresh_token": toks["refresh"]})
    assert resp.status_code == 200
    new_access = resp.get_json()["access_token"]
    resp = client.get("/__auth/whoami", headers={"Authorization": f"Bearer {new_access}"})
    assert resp.get_json()["data"] == {"subject": "test", "role": "admin"}


def test_refresh_rejects_access_token(client):
    toks = client.post("/__auth/login_stub", json={}).get_json()["data"]
    resp = client.post("/api/v1/auth/refresh", json={"refresh_token": toks["access"]})
    assert resp.status_code == 401


def test_expired_access_token_blocked(app, client):
    past = dt.datetime.now(dt.timezone.utc) - dt.timedelta(seconds=1)
    expired = jwt.encode(
        {"sub": "admin", "role": "admin", "type": "access", "exp": past},
        app.config["JWT_SECRET"],
        algorithm="HS256",
    )
    resp = client.get("/api/v1/admin/drops", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "token expired"


def test_token_round_trip(app):
    payload = decode_token(create_access_token("admin", "admin"))
    assert payload["sub"] == "admin" and payload["type"] == "access"
    with pytest.raises(TokenError):
        decode_token(create_refresh_token("admin", "admin"), expected_type="access")
