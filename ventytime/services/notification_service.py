"""Notification Service — persistence of user notifications plus hub push.

Invariants:
    - Every read/write is scoped by user_id; another user's notification is a 404
    - Listings exclude dismissed notifications and are newest first
    - Push happens only after commit, and only when the target has push_notifications on
    - A failed push never fails the write (the notification is already stored)

Design Decisions:
    - notify_users() batches inserts in one commit, then pushes per user
    - Hub injected (defaults to the process singleton) so tests can observe pushes
"""

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ventytime.core.domain_types import NotificationType
from ventytime.core.errors import ResourceNotFoundError
from ventytime.infrastructure.notification_hub import NotificationHub, hub as default_hub
from ventytime.models.notification import Notification
from ventytime.models.user import User
from ventytime.schemas.notification import NotificationDto

logger = logging.getLogger(__name__)


def notification_message(notification: Notification) -> dict:
    """Hub payload for a stored notification."""
    return {
        "type": "notification",
        "data": NotificationDto.model_validate(notification).model_dump(mode="json"),
    }


class NotificationService:
    """Create, query and manage notifications for one database session."""

    def __init__(self, db: AsyncSession, hub: NotificationHub | None = None):
        self.db = db
        self.hub = hub or default_hub

    # ─── Creation ────────────────────────────────────────────────

    async def notify_users(
        self,
        user_ids: Iterable[UUID],
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        event_id: int | None = None,
        link: str | None = None,
    ) -> list[Notification]:
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return []
        notifications = [
            Notification(
                user_id=user_id,
                event_id=event_id,
                title=title,
                message=message,
                type=NotificationType(type).value,
                link=link,
            )
            for user_id in ids
        ]
        self.db.add_all(notifications)
        await self.db.commit()

        push_enabled = await self._push_enabled_users(ids)
        for notification in notifications:
            if notification.user_id in push_enabled:
                await self._push(notification)
        logger.info(
            f"Created {len(notifications)} notification(s): {title}",
            extra={"event_id": event_id},
        )
        return notifications

    async def notify_user(
        self,
        user_id: UUID,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        event_id: int | None = None,
        link: str | None = None,
    ) -> Notification:
        created = await self.notify_users(
            [user_id], title, message, type, event_id=event_id, link=link,
        )
        return created[0]

    async def _push_enabled_users(self, user_ids: list[UUID]) -> set[UUID]:
        result = await self.db.execute(
            select(User.id)
            .where(User.id.in_(user_ids))
            .where(User.push_notifications.is_(True))
        )
        return set(result.scalars().all())

    async def _push(self, notification: Notification) -> None:
        try:
            await self.hub.send_to_user(
                notification.user_id, notification_message(notification),
            )
        except Exception as e:
            logger.warning(
                f"Push failed for notification {notification.id}: {e}",
                extra={"user_id": notification.user_id},
            )

    # ─── Queries ─────────────────────────────────────────────────

    async def list_for_user(self, user_id: UUID) -> list[Notification]:
        result = await self.db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.is_dismissed.is_(False))
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        )
        return list(result.scalars().all())

    async def unread_count(self, user_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count(Notification.id))
            .where(Notification.user_id == user_id)
            .where(Notification.is_read.is_(False))
            .where(Notification.is_dismissed.is_(False))
        )
        return result.scalar_one()

    async def _get_owned(self, user_id: UUID, notification_id: int) -> Notification:
        result = await self.db.execute(
            select(Notification)
            .where(Notification.id == notification_id)
            .where(Notification.user_id == user_id)
        )
        notification = result.scalar_one_or_none()
        if notification is None:
            raise ResourceNotFoundError("Notification", notification_id)
        return notification

    # ─── State changes ───────────────────────────────────────────

    async def mark_read(self, user_id: UUID, notification_id: int) -> Notification:
        notification = await self._get_owned(user_id, notification_id)
        notification.is_read = True
        await self.db.commit()
        return notification

    async def mark_all_read(self, user_id: UUID) -> int:
        result = await self.db.execute(
            update(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.is_read.is_(False))
            .values(is_read=True)
        )
        await self.db.commit()
        return result.rowcount

    async def dismiss(self, user_id: UUID, notification_id: int) -> Notification:
        notification = await self._get_owned(user_id, notification_id)
        notification.is_dismissed = True
        await self.db.commit()
        return notification

    async def delete(self, user_id: UUID, notification_id: int) -> None:
        notification = await self._get_owned(user_id, notification_id)
        await self.db.delete(notification)
        await self.db.commit()

    async def clear(self, user_id: UUID) -> int:
        result = await self.db.execute(
            delete(Notification).where(Notification.user_id == user_id)
        )
        await self.db.commit()
        logger.info(
            f"Cleared {result.rowcount} notification(s)", extra={"user_id": user_id},
        )
        return result.rowcount
