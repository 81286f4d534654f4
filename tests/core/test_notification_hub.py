"""Notification Hub — connection registry, groups and client message handling.

Tests cover:
    - send_to_user reaches every connection of that user
    - Groups: join, leave, disconnect cleanup
    - A failing socket is dropped without affecting the others
    - handle_hub_message: ping, join/leave, organizer-only event updates, errors
"""

from uuid import uuid4

from ventytime.api.routes.notification_hub import handle_hub_message
from ventytime.infrastructure.notification_hub import NotificationHub, event_group


class FakeSocket:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def send_json(self, data, mode="text"):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)


async def test_send_to_user_reaches_all_connections():
    hub = NotificationHub()
    user_id = uuid4()
    a, b = FakeSocket(), FakeSocket()
    hub.connect(user_id, "User", a)
    hub.connect(user_id, "User", b)

    delivered = await hub.send_to_user(user_id, {"type": "notification"})

    assert delivered == 2
    assert a.sent == b.sent == [{"type": "notification"}]


async def test_send_to_unknown_user_is_noop():
    assert await NotificationHub().send_to_user(uuid4(), {"type": "x"}) == 0


async def test_group_membership_and_disconnect():
    hub = NotificationHub()
    socket = FakeSocket()
    connection = hub.connect(uuid4(), "User", socket)
    hub.join_group(connection.connection_id, event_group(5))
    assert hub.group_members("event_5") == {connection.connection_id}

    hub.disconnect(connection.connection_id)

    assert hub.group_members("event_5") == set()
    assert hub.connection_count == 0
    assert not hub.is_connected(connection.user_id)


async def test_leave_group_stops_delivery():
    hub = NotificationHub()
    socket = FakeSocket()
    connection = hub.connect(uuid4(), "User", socket)
    hub.join_group(connection.connection_id, "event_1")
    hub.leave_group(connection.connection_id, "event_1")
    assert await hub.send_to_group("event_1", {"type": "event_update"}) == 0


async def test_failing_connection_dropped():
    hub = NotificationHub()
    user_id = uuid4()
    good, bad = FakeSocket(), FakeSocket(fail=True)
    hub.connect(user_id, "User", good)
    hub.connect(user_id, "User", bad)

    delivered = await hub.send_to_user(user_id, {"type": "notification"})

    assert delivered == 1
    assert hub.connection_count == 1


# ─── handle_hub_message ──────────────────────────────────────────

async def test_ping_pong():
    hub = NotificationHub()
    socket = FakeSocket()
    connection = hub.connect(uuid4(), "User", socket)
    await handle_hub_message(hub, connection, {"type": "ping"})
    assert socket.sent == [{"type": "pong"}]


async def test_join_event_then_receive_updates():
    hub = NotificationHub()
    listener = FakeSocket()
    organizer_socket = FakeSocket()
    listener_conn = hub.connect(uuid4(), "User", listener)
    organizer_conn = hub.connect(uuid4(), "Organizer", organizer_socket)

    await handle_hub_message(hub, listener_conn, {"type": "join_event", "event_id": 3})
    await handle_hub_message(
        hub, organizer_conn,
        {"type": "send_event_update", "event_id": "3", "message": "Room changed"},
    )

    assert listener.sent == [{
        "type": "event_update",
        "data": {"event_id": 3, "change": "message", "message": "Room changed"},
    }]


async def test_plain_user_cannot_send_event_update():
    hub = NotificationHub()
    socket = FakeSocket()
    connection = hub.connect(uuid4(), "User", socket)
    hub.join_group(connection.connection_id, "event_3")

    await handle_hub_message(
        hub, connection, {"type": "send_event_update", "event_id": 3, "message": "x"},
    )

    assert socket.sent == [
        {"type": "error", "message": "Only organizers can send event updates"},
    ]


async def test_missing_event_id_reported():
    hub = NotificationHub()
    socket = FakeSocket()
    connection = hub.connect(uuid4(), "User", socket)
    await handle_hub_message(hub, connection, {"type": "join_event"})
    assert socket.sent[0]["type"] == "error"


async def test_unknown_message_type_reported():
    hub = NotificationHub()
    socket = FakeSocket()
    connection = hub.connect(uuid4(), "User", socket)
    await handle_hub_message(hub, connection, {"type": "dance"})
    assert socket.sent == [{"type": "error", "message": "Unknown message type: dance"}]
