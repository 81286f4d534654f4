"""Notification Routes — per-user listing, read state, dismissal and clearing.

Invariants:
    - Users only ever see and touch their own notifications (others → 404)
    - Dismissed notifications leave the listing and the unread count
"""

import pytest

from ventytime.models.notification import Notification


@pytest.fixture
def add_notification(test_db):

    async def _add(user, title="Hello", **fields) -> Notification:
        notification = Notification(user_id=user.id, title=title, message="Body", **fields)
        test_db.add(notification)
        await test_db.commit()
        return notification

    return _add


async def test_list_newest_first(client, attendee, auth_headers, add_notification):
    await add_notification(attendee, "First")
    await add_notification(attendee, "Second")
    res = await client.get("/api/notifications", headers=auth_headers(attendee))
    assert [n["title"] for n in res.json()] == ["Second", "First"]


async def test_unread_count_and_mark_read(client, attendee, auth_headers, add_notification):
    first = await add_notification(attendee)
    await add_notification(attendee)
    headers = auth_headers(attendee)

    assert (await client.get("/api/notifications/unread-count", headers=headers)).json() == {
        "count": 2,
    }
    res = await client.put(f"/api/notifications/{first.id}/read", headers=headers)
    assert res.json()["is_read"] is True
    assert (await client.get("/api/notifications/unread-count", headers=headers)).json() == {
        "count": 1,
    }


async def test_mark_all_read(client, attendee, auth_headers, add_notification):
    await add_notification(attendee)
    await add_notification(attendee)
    await add_notification(attendee, is_read=True)
    res = await client.put("/api/notifications/read-all", headers=auth_headers(attendee))
    assert res.json() == {"affected": 2}


async def test_dismiss_hides_notification(client, attendee, auth_headers, add_notification):
    note = await add_notification(attendee)
    headers = auth_headers(attendee)
    await client.put(f"/api/notifications/{note.id}/dismiss", headers=headers)
    assert (await client.get("/api/notifications", headers=headers)).json() == []
    assert (await client.get("/api/notifications/unread-count", headers=headers)).json() == {
        "count": 0,
    }


async def test_other_users_notification_is_404(
    client, attendee, make_user, auth_headers, add_notification,
):
    note = await add_notification(attendee)
    stranger = await make_user()
    headers = auth_headers(stranger)
    assert (await client.put(
        f"/api/notifications/{note.id}/read", headers=headers,
    )).status_code == 404
    assert (await client.delete(
        f"/api/notifications/{note.id}", headers=headers,
    )).status_code == 404


async def test_delete_and_clear(client, attendee, auth_headers, add_notification):
    note = await add_notification(attendee)
    await add_notification(attendee)
    await add_notification(attendee)
    headers = auth_headers(attendee)

    assert (await client.delete(f"/api/notifications/{note.id}", headers=headers)).status_code == 204
    assert (await client.post("/api/notifications/clear", headers=headers)).json() == {
        "affected": 2,
    }
    assert (await client.get("/api/notifications", headers=headers)).json() == []


async def test_notifications_require_auth(client):
    assert (await client.get("/api/notifications")).status_code == 401
