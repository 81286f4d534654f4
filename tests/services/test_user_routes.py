"""User Routes — self-service profile and settings, admin account management.

Invariants:
    - Only Admin lists users and changes status/role or deletes accounts
    - Admins cannot deactivate, demote or delete themselves
    - Users who organize events cannot be deleted
"""

import io

from PIL import Image
from sqlalchemy import select

from ventytime.core.domain_types import UserRole
from ventytime.infrastructure.security import verify_password
from ventytime.models.registration import Registration
from ventytime.models.user import User


async def test_update_profile(client, attendee, auth_headers):
    res = await client.put(
        "/api/users/me",
        json={"first_name": "  Rita ", "bio": "Loves jazz"},
        headers=auth_headers(attendee),
    )
    assert res.status_code == 200
    assert res.json()["first_name"] == "Rita"
    assert res.json()["bio"] == "Loves jazz"


async def test_change_password(client, attendee, auth_headers, test_db):
    res = await client.post(
        "/api/users/me/change-password",
        json={
            "current_password": "Password1!",
            "new_password": "NewPassword2!",
            "confirm_password": "NewPassword2!",
        },
        headers=auth_headers(attendee),
    )
    assert res.status_code == 200

    test_db.expire_all()
    user = (await test_db.execute(select(User).where(User.id == attendee.id))).scalar_one()
    assert verify_password("NewPassword2!", user.password_hash)


async def test_change_password_wrong_current(client, attendee, auth_headers):
    res = await client.post(
        "/api/users/me/change-password",
        json={
            "current_password": "wrong",
            "new_password": "NewPassword2!",
            "confirm_password": "NewPassword2!",
        },
        headers=auth_headers(attendee),
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Current password is incorrect"


async def test_notification_settings_round_trip(client, attendee, auth_headers):
    headers = auth_headers(attendee)
    current = await client.get("/api/users/me/notification-settings", headers=headers)
    assert current.json()["push_notifications"] is True

    body = {**current.json(), "push_notifications": False}
    updated = await client.put("/api/users/me/notification-settings", json=body, headers=headers)
    assert updated.json()["push_notifications"] is False


async def test_avatar_upload(client, attendee, auth_headers):
    buffer = io.BytesIO()
    Image.new("RGB", (640, 480), "navy").save(buffer, "PNG")
    res = await client.post(
        "/api/users/me/avatar",
        files={"file": ("me.png", buffer.getvalue(), "image/png")},
        headers=auth_headers(attendee),
    )
    assert res.status_code == 200
    assert res.json()["avatar_url"].startswith("/uploads/")

    me = await client.get("/api/users/me", headers=auth_headers(attendee))
    assert me.json()["avatar_url"] == res.json()["avatar_url"]


async def test_avatar_over_size_limit_rejected(
    client, attendee, auth_headers, small_upload_limit,
):
    before = (await client.get("/api/users/me", headers=auth_headers(attendee))).json()
    res = await client.post(
        "/api/users/me/avatar",
        files={"file": ("me.png", b"\x89PNG" + b"0" * 4096, "image/png")},
        headers=auth_headers(attendee),
    )
    assert res.status_code == 400
    assert res.json()["message"].startswith("File size must be less than")

    me = await client.get("/api/users/me", headers=auth_headers(attendee))
    assert me.json()["avatar_url"] == before["avatar_url"]


# ─── Administration ──────────────────────────────────────────────

async def test_admin_lists_users(client, admin, attendee, auth_headers):
    res = await client.get("/api/users", headers=auth_headers(admin))
    assert {u["email"] for u in res.json()} == {admin.email, attendee.email}


async def test_user_cannot_list_users(client, attendee, auth_headers):
    assert (await client.get("/api/users", headers=auth_headers(attendee))).status_code == 403


async def test_get_user_and_roles(client, admin, organizer, auth_headers):
    res = await client.get(f"/api/users/{organizer.id}", headers=auth_headers(admin))
    assert res.json()["role"] == "Organizer"
    roles = await client.get(f"/api/users/{organizer.id}/roles", headers=auth_headers(admin))
    assert roles.json() == ["Organizer"]


async def test_admin_deactivates_user(client, admin, attendee, auth_headers):
    res = await client.put(
        f"/api/users/{attendee.id}/status", json={"is_active": False},
        headers=auth_headers(admin),
    )
    assert res.json()["is_active"] is False


async def test_admin_cannot_deactivate_self(client, admin, auth_headers):
    res = await client.put(
        f"/api/users/{admin.id}/status", json={"is_active": False},
        headers=auth_headers(admin),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "SELF_MODIFICATION"


async def test_admin_promotes_user(client, admin, attendee, auth_headers):
    res = await client.put(
        f"/api/users/{attendee.id}/role", json={"role": "Organizer"},
        headers=auth_headers(admin),
    )
    assert res.json()["role"] == "Organizer"


async def test_organizer_cannot_change_roles(client, organizer, attendee, auth_headers):
    res = await client.put(
        f"/api/users/{attendee.id}/role", json={"role": "Admin"},
        headers=auth_headers(organizer),
    )
    assert res.status_code == 403


async def test_delete_user_removes_registrations(
    client, admin, organizer, attendee, auth_headers, make_event, test_db,
):
    event = await make_event(organizer)
    test_db.add(Registration(event_id=event.id, user_id=attendee.id))
    await test_db.commit()

    res = await client.delete(f"/api/users/{attendee.id}", headers=auth_headers(admin))
    assert res.status_code == 204
    assert (await test_db.execute(select(Registration))).first() is None


async def test_delete_organizer_with_events_rejected(
    client, admin, organizer, auth_headers, make_event,
):
    await make_event(organizer)
    res = await client.delete(f"/api/users/{organizer.id}", headers=auth_headers(admin))
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "USER_HAS_EVENTS"


async def test_unknown_user_is_404(client, admin, auth_headers):
    res = await client.get(
        "/api/users/00000000-0000-0000-0000-000000000000", headers=auth_headers(admin),
    )
    assert res.status_code == 404


async def test_role_must_be_known(client, admin, make_user, auth_headers):
    target = await make_user(UserRole.USER)
    res = await client.put(
        f"/api/users/{target.id}/role", json={"role": "Emperor"}, headers=auth_headers(admin),
    )
    assert res.status_code == 400
