"""Auth Routes — registration, login, lockout and bearer authentication.

Invariants:
    - Register returns 201 with a token; duplicate email → 400
    - Wrong credentials → 401 with one generic message
    - Five failed logins lock the account, even for the right password
    - Protected routes answer 401 for missing, malformed and expired tokens
"""

from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from ventytime.config import get_settings
from ventytime.core.domain_types import UserRole
from ventytime.infrastructure.security import encode_token
from ventytime.models.user import User

REGISTER_BODY = {
    "email": "Ana@Example.com",
    "password": "Password1!",
    "confirm_password": "Password1!",
    "first_name": "Ana",
    "last_name": "Silva",
}


async def test_register_returns_token(client):
    res = await client.post("/api/auth/register", json=REGISTER_BODY)
    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["token"]
    assert body["email"] == "ana@example.com"
    assert body["role"] == "User"


async def test_register_as_organizer(client):
    res = await client.post(
        "/api/auth/register", json={**REGISTER_BODY, "role": "Organizer"},
    )
    assert res.json()["role"] == "Organizer"


async def test_register_as_admin_rejected(client):
    res = await client.post("/api/auth/register", json={**REGISTER_BODY, "role": "Admin"})
    assert res.status_code == 400


async def test_register_duplicate_email_case_insensitive(client):
    await client.post("/api/auth/register", json=REGISTER_BODY)
    res = await client.post(
        "/api/auth/register", json={**REGISTER_BODY, "email": "ana@EXAMPLE.com"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "EMAIL_TAKEN"


async def test_register_password_mismatch(client):
    res = await client.post(
        "/api/auth/register", json={**REGISTER_BODY, "confirm_password": "Other1!!"},
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Passwords do not match"


async def test_register_invalid_email_is_400(client):
    res = await client.post("/api/auth/register", json={**REGISTER_BODY, "email": "nope"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_login_success_then_me(client, attendee):
    res = await client.post(
        "/api/auth/login", json={"email": attendee.email, "password": "Password1!"},
    )
    assert res.status_code == 200
    token = res.json()["token"]

    me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == attendee.email
    assert "password_hash" not in me.json()


async def test_login_wrong_password_is_401(client, attendee):
    res = await client.post(
        "/api/auth/login", json={"email": attendee.email, "password": "nope"},
    )
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid email or password"


async def test_login_unknown_email_same_message(client):
    res = await client.post(
        "/api/auth/login", json={"email": "ghost@example.com", "password": "x"},
    )
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid email or password"


async def test_lockout_after_five_failures(client, attendee, test_db):
    for _ in range(5):
        await client.post(
            "/api/auth/login", json={"email": attendee.email, "password": "wrong"},
        )

    res = await client.post(
        "/api/auth/login", json={"email": attendee.email, "password": "Password1!"},
    )
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "ACCOUNT_LOCKED"

    test_db.expire_all()
    user = (await test_db.execute(select(User).where(User.id == attendee.id))).scalar_one()
    assert user.lockout_end is not None


async def test_successful_login_resets_failures(client, attendee, test_db):
    await client.post("/api/auth/login", json={"email": attendee.email, "password": "bad"})
    await client.post(
        "/api/auth/login", json={"email": attendee.email, "password": "Password1!"},
    )
    test_db.expire_all()
    user = (await test_db.execute(select(User).where(User.id == attendee.id))).scalar_one()
    assert user.access_failed_count == 0
    assert user.last_login_at is not None


async def test_inactive_user_cannot_login(client, make_user):
    user = await make_user(UserRole.USER, is_active=False)
    res = await client.post(
        "/api/auth/login", json={"email": user.email, "password": "Password1!"},
    )
    assert res.status_code == 401


async def test_me_requires_token(client):
    res = await client.get("/api/auth/me")
    assert res.status_code == 401


async def test_malformed_token_is_401(client):
    res = await client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "TOKEN_INVALID"


async def test_expired_token_is_401(client, attendee):
    settings = get_settings()
    issued = datetime.now(timezone.utc) - timedelta(hours=10)
    token = encode_token(
        {"sub": str(attendee.id)},
        secret=settings.jwt_secret,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        expires_in=timedelta(hours=1),
        now=issued,
    )
    res = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "TOKEN_EXPIRED"


async def test_deactivated_user_token_rejected(client, attendee, auth_headers, test_db):
    headers = auth_headers(attendee)
    attendee.is_active = False
    await test_db.commit()
    res = await client.get("/api/auth/me", headers=headers)
    assert res.status_code == 401


async def test_logout(client, attendee, auth_headers):
    res = await client.post("/api/auth/logout", headers=auth_headers(attendee))
    assert res.status_code == 200
