"""Notification Hub — registry of live WebSocket connections per user and per event group.

Invariants:
    - A user may hold several connections (tabs/devices); all of them receive user pushes
    - Group names are "event_{id}"; a connection may join any number of groups
    - disconnect() removes the connection from its user and from every group
    - A send failure drops that connection and never aborts delivery to the others
    - Every message is a JSON object with a "type" field

Design Decisions:
    - Module-level hub singleton: single-process uvicorn, connections live in memory
    - Connections keyed by an opaque id so tests can register fakes with send_json()
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Protocol
from uuid import UUID

logger = logging.getLogger(__name__)


class JsonSender(Protocol):
    async def send_json(self, data: Any, mode: str = "text") -> None: ...


def event_group(event_id: int) -> str:
    return f"event_{event_id}"


@dataclass
class HubConnection:
    connection_id: str
    user_id: UUID
    role: str
    socket: JsonSender
    groups: set[str] = field(default_factory=set)


class NotificationHub:
    """Tracks connections and fans messages out to users and groups."""

    def __init__(self):
        self._connections: dict[str, HubConnection] = {}
        self._by_user: dict[UUID, set[str]] = {}
        self._groups: dict[str, set[str]] = {}

    def connect(self, user_id: UUID, role: str, socket: JsonSender) -> HubConnection:
        connection = HubConnection(
            connection_id=uuid.uuid4().hex, user_id=user_id, role=role, socket=socket,
        )
        self._connections[connection.connection_id] = connection
        self._by_user.setdefault(user_id, set()).add(connection.connection_id)
        logger.info(
            f"Hub connection {connection.connection_id} opened",
            extra={"user_id": user_id},
        )
        return connection

    def disconnect(self, connection_id: str) -> None:
        connection = self._connections.pop(connection_id, None)
        if connection is None:
            return
        user_connections = self._by_user.get(connection.user_id)
        if user_connections is not None:
            user_connections.discard(connection_id)
            if not user_connections:
                del self._by_user[connection.user_id]
        for group in connection.groups:
            self._discard_from_group(group, connection_id)
        logger.info(
            f"Hub connection {connection_id} closed",
            extra={"user_id": connection.user_id},
        )

    def join_group(self, connection_id: str, group: str) -> None:
        connection = self._connections.get(connection_id)
        if connection is None:
            return
        connection.groups.add(group)
        self._groups.setdefault(group, set()).add(connection_id)

    def leave_group(self, connection_id: str, group: str) -> None:
        connection = self._connections.get(connection_id)
        if connection is not None:
            connection.groups.discard(group)
        self._discard_from_group(group, connection_id)

    def _discard_from_group(self, group: str, connection_id: str) -> None:
        members = self._groups.get(group)
        if members is None:
            return
        members.discard(connection_id)
        if not members:
            del self._groups[group]

    def is_connected(self, user_id: UUID) -> bool:
        return bool(self._by_user.get(user_id))

    def group_members(self, group: str) -> set[str]:
        return set(self._groups.get(group, ()))

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def _deliver(self, connection_ids: set[str], message: dict) -> int:
        delivered = 0
        for connection_id in list(connection_ids):
            connection = self._connections.get(connection_id)
            if connection is None:
                continue
            try:
                await connection.socket.send_json(message)
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping hub connection {connection_id}: {e}")
                self.disconnect(connection_id)
        return delivered

    async def send_to_user(self, user_id: UUID, message: dict) -> int:
        """Push to every connection of a user. Returns deliveries made."""
        return await self._deliver(set(self._by_user.get(user_id, ())), message)

    async def send_to_group(self, group: str, message: dict) -> int:
        return await self._deliver(self.group_members(group), message)

    async def send_to_connection(self, connection_id: str, message: dict) -> int:
        return await self._deliver({connection_id}, message)


hub = NotificationHub()
