"""Notification Hub Route — WebSocket endpoint for live notifications and event groups.

Invariants:
    - The JWT travels as ?access_token=; a missing or invalid token closes with 1008
    - Client messages: join_event, leave_event, send_event_update, ping
    - Server messages: notification, event_update, pong, error
    - send_event_update is limited to Organizer/Admin connections
    - The connection is removed from the hub on any disconnect

Design Decisions:
    - Auth uses db_manager.session() directly: the socket outlives any request-scoped session
    - Message handling is a plain coroutine so it can be driven without a socket server
"""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

import ventytime.infrastructure.database as db_module
from ventytime.api.deps import load_active_user
from ventytime.config import get_settings
from ventytime.core.domain_types import EVENT_MANAGER_ROLES
from ventytime.core.errors import AuthenticationError
from ventytime.infrastructure.notification_hub import (
    HubConnection, NotificationHub, event_group, hub,
)
from ventytime.services.token_service import TokenService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["notification-hub"])


def _error(message: str) -> dict:
    return {"type": "error", "message": message}


def _event_id(message: dict) -> int | None:
    try:
        return int(message["event_id"])
    except (KeyError, TypeError, ValueError):
        return None


async def handle_hub_message(
    target: NotificationHub, connection: HubConnection, message: dict,
) -> None:
    """Apply one client message to the hub, replying on the same connection."""
    kind = message.get("type") if isinstance(message, dict) else None
    reply = connection.connection_id

    if kind == "ping":
        await target.send_to_connection(reply, {"type": "pong"})
        return

    if kind in ("join_event", "leave_event", "send_event_update"):
        event_id = _event_id(message)
        if event_id is None:
            await target.send_to_connection(reply, _error("event_id is required"))
            return
        group = event_group(event_id)
        if kind == "join_event":
            target.join_group(reply, group)
        elif kind == "leave_event":
            target.leave_group(reply, group)
        elif connection.role not in {r.value for r in EVENT_MANAGER_ROLES}:
            await target.send_to_connection(
                reply, _error("Only organizers can send event updates"),
            )
        else:
            await target.send_to_group(group, {
                "type": "event_update",
                "data": {
                    "event_id": event_id,
                    "change": "message",
                    "message": str(message.get("message", "")),
                },
            })
        return

    await target.send_to_connection(reply, _error(f"Unknown message type: {kind}"))


@router.websocket("/notificationHub")
async def notification_hub(websocket: WebSocket, access_token: str | None = None):
    if not access_token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    try:
        user_id = TokenService(get_settings()).user_id_from_token(access_token)
        async with db_module.db_manager.session() as db:
            user = await load_active_user(db, user_id)
            role = user.role
    except AuthenticationError as e:
        logger.info(f"Hub connection rejected: {e.code}", extra={"error_code": e.code})
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    connection = hub.connect(user_id, role, websocket)
    try:
        while True:
            message = await websocket.receive_json()
            await handle_hub_message(hub, connection, message)
    except WebSocketDisconnect:
        pass
    except ValueError:
        # Non-JSON frame
        await websocket.close(code=status.WS_1003_UNSUPPORTED_DATA)
    finally:
        hub.disconnect(connection.connection_id)
