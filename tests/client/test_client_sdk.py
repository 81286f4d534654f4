"""Client SDK — end-to-end flows through the typed services.

Tests cover:
    - Register/login store the token; logout clears it
    - Event creation, listing and registration through the SDK
    - Failures come back as ApiResponse(is_successful=False) with the server message
    - A 401 clears the stored token
"""

from datetime import timedelta

from ventytime.client import (
    AuthService, CommentService, EventService, FileTokenStore, NotificationService,
    RegistrationService, UserService, VentyTimeClient,
)
from ventytime.core.domain_types import UserRole, utcnow
from ventytime.schemas.auth import RegisterRequest
from ventytime.schemas.event import EventCreate


def _register_request(email, role=UserRole.USER):
    return RegisterRequest(
        email=email,
        password="Password1!",
        confirm_password="Password1!",
        first_name="Sam",
        last_name="Client",
        role=role,
    )


def _event(**overrides):
    start = utcnow() + timedelta(days=3)
    fields = dict(
        title="SDK Launch",
        description="Shipping the client",
        location="Berlin",
        category="Technology",
        start_date=start,
        end_date=start + timedelta(hours=2),
        max_attendees=1,
    )
    fields.update(overrides)
    return EventCreate(**fields)


async def test_register_stores_identity(sdk):
    auth = AuthService(sdk)
    res = await auth.register(_register_request("sam@example.com"))

    assert res.is_successful
    assert auth.is_authenticated()
    assert auth.get_username() == "sam@example.com"
    assert auth.get_user_id() == str(res.data.user_id)

    me = await auth.me()
    assert me.data.email == "sam@example.com"


async def test_login_failure_returns_message(sdk):
    res = await AuthService(sdk).login("nobody@example.com", "whatever")
    assert not res.is_successful
    assert res.message == "Invalid email or password"
    assert res.data is None


async def test_logout_clears_token(sdk):
    auth = AuthService(sdk)
    await auth.register(_register_request("bye@example.com"))
    await auth.logout()
    assert not auth.is_authenticated()
    assert not (await auth.me()).is_successful


async def test_organizer_flow(sdk):
    auth = AuthService(sdk)
    events = EventService(sdk)
    await auth.register(_register_request("org@example.com", UserRole.ORGANIZER))

    created = await events.create(_event())
    assert created.is_successful
    event_id = created.data.id

    page = await events.get_events()
    assert page.data.total_count == 1
    assert (await events.categories()).data == ["Technology"]
    assert (await events.get(event_id)).data.title == "SDK Launch"


async def test_registration_flow_and_capacity(sdk):
    auth = AuthService(sdk)
    events = EventService(sdk)
    registrations = RegistrationService(sdk)

    await auth.register(_register_request("org2@example.com", UserRole.ORGANIZER))
    event_id = (await events.create(_event())).data.id

    await auth.register(_register_request("fan1@example.com"))
    first = await registrations.register(event_id)
    assert first.is_successful
    assert await registrations.is_registered(event_id)
    assert (await events.is_full(event_id)).data.is_full

    await auth.register(_register_request("fan2@example.com"))
    second = await registrations.register(event_id)
    assert not second.is_successful
    assert second.message == "Event is full"


async def test_unregister_cancels_own_registration(sdk):
    auth = AuthService(sdk)
    events = EventService(sdk)
    registrations = RegistrationService(sdk)

    await auth.register(_register_request("org3@example.com", UserRole.ORGANIZER))
    event_id = (await events.create(_event(max_attendees=10))).data.id
    await auth.register(_register_request("fan3@example.com"))
    await registrations.register(event_id)

    cancelled = await registrations.unregister(event_id)
    assert cancelled.data.status == "Cancelled"
    assert not await registrations.is_registered(event_id)


async def test_plain_user_cannot_create_event(sdk):
    await AuthService(sdk).register(_register_request("user@example.com"))
    res = await EventService(sdk).create(_event())
    assert not res.is_successful
    assert "not allowed to create events" in res.message


async def test_comments_and_notifications(sdk):
    auth = AuthService(sdk)
    await auth.register(_register_request("org4@example.com", UserRole.ORGANIZER))
    event_id = (await EventService(sdk).create(_event())).data.id

    await auth.register(_register_request("talker@example.com"))
    added = await CommentService(sdk).add(event_id, "Can't wait")
    assert added.is_successful
    assert [c.content for c in (await CommentService(sdk).for_event(event_id)).data] == [
        "Can't wait",
    ]

    await auth.login("org4@example.com", "Password1!")
    notifications = NotificationService(sdk)
    assert (await notifications.unread_count()).data.count == 1
    assert (await notifications.mark_all_read()).data.affected == 1


async def test_admin_user_management(sdk, admin_account):
    auth = AuthService(sdk)
    await auth.register(_register_request("member@example.com"))
    member_id = auth.get_user_id()

    await auth.login("admin@example.com", "Admin123!")
    users = UserService(sdk)
    assert len((await users.list_users()).data) == 2
    promoted = await users.set_role(member_id, UserRole.ORGANIZER)
    assert promoted.data.role == UserRole.ORGANIZER


async def test_unauthorized_response_clears_token(sdk):
    sdk.token_store.save("stale-token", {"user_id": "x"})
    res = await AuthService(sdk).me()
    assert not res.is_successful
    assert sdk.token_store.get_token() is None


async def test_file_token_store_persists(tmp_path):
    store = FileTokenStore(tmp_path / "auth" / "token.json")
    store.save("abc", {"username": "sam"})
    assert FileTokenStore(tmp_path / "auth" / "token.json").get_token() == "abc"
    assert store.get_identity() == {"username": "sam"}
    store.clear()
    assert store.get_token() is None


async def test_unreachable_server_is_a_failed_response():
    async with VentyTimeClient("http://127.0.0.1:9", timeout=0.5) as client:
        res = await EventService(client).categories()
    assert not res.is_successful
    assert res.message.startswith("Could not reach the server")
