"""Auth Routes — registration, login, /me and the token gate.

Tests cover:
    - Register: role-specific validation, duplicate email, admin not self-registrable
    - Login: success, wrong password and unknown email share one error
    - /me: bearer header, cookie fallback, expired/invalid tokens, deleted user
"""

from datetime import datetime, timedelta, timezone

import jwt

from app.config import get_settings
from tests.services.fake_stores import DEFAULT_PASSWORD


def _student(**overrides):
    body = {
        "userType": "student",
        "name": "  Erin Green ",
        "email": "Erin@Example.com",
        "password": "secret123",
        "department": "Physics",
        "year": "2",
    }
    body.update(overrides)
    return body


async def test_register_returns_token_and_profile(client):
    resp = await client.post("/api/auth/register", json=_student())
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"
    assert body["token"]
    data = body["data"]
    assert data["name"] == "Erin Green"
    assert data["email"] == "erin@example.com"
    assert data["userType"] == "student"
    assert data["preferences"]["profileVisibility"] == "public"
    assert "hashedPassword" not in data
    assert "password" not in data

    me = await client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"},
    )
    assert me.status_code == 200
    assert me.json()["data"]["id"] == data["id"]


async def test_register_duplicate_email_conflicts(client):
    await client.post("/api/auth/register", json=_student())
    resp = await client.post(
        "/api/auth/register", json=_student(email="erin@example.com"),
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "EMAIL_TAKEN"


async def test_register_student_without_department_fails(client):
    resp = await client.post("/api/auth/register", json=_student(department=None))
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_register_professional_requires_profession(client):
    body = _student(userType="professional", department=None, year=None)
    assert (await client.post("/api/auth/register", json=body)).status_code == 400
    body["profession"] = "Architect"
    assert (await client.post("/api/auth/register", json=body)).status_code == 201


async def test_register_as_admin_is_refused(client):
    resp = await client.post("/api/auth/register", json=_student(userType="admin"))
    assert resp.status_code == 400


async def test_login_success(client, alice):
    resp = await client.post(
        "/api/auth/login",
        json={"email": "ALICE.SMITH@example.com", "password": DEFAULT_PASSWORD},
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "Login successful"
    assert resp.json()["data"]["id"] == str(alice.id)


async def test_login_failures_are_indistinguishable(client, alice):
    wrong_password = await client.post(
        "/api/auth/login",
        json={"email": alice.user.email, "password": "nope-nope"},
    )
    unknown_email = await client.post(
        "/api/auth/login",
        json={"email": "nobody@example.com", "password": DEFAULT_PASSWORD},
    )
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json()["message"] == unknown_email.json()["message"]


async def test_me_accepts_cookie_token(client, alice):
    client.cookies.set("token", alice.token)
    try:
        resp = await client.get("/api/auth/me")
    finally:
        client.cookies.clear()
    assert resp.status_code == 200
    assert resp.json()["data"]["email"] == alice.user.email


async def test_expired_token_is_rejected(client, alice):
    settings = get_settings()
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    token = jwt.encode(
        {"sub": str(alice.id), "role": "student", "iat": past,
         "exp": past + timedelta(hours=1)},
        settings.jwt_secret, algorithm=settings.jwt_algorithm,
    )
    resp = await client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "TOKEN_EXPIRED"


async def test_token_signed_with_other_secret_is_rejected(client, alice):
    token = jwt.encode(
        {"sub": str(alice.id)}, "some-other-secret-entirely-0123456789", algorithm="HS256",
    )
    resp = await client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "INVALID_TOKEN"


async def test_token_for_deleted_user_is_rejected(client, alice, test_db):
    await test_db.delete(alice.user)
    await test_db.commit()
    resp = await client.get("/api/auth/me", headers=alice.headers)
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "USER_NOT_FOUND"
