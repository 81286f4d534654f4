"""Comment Service — posting and moderating comments on events.

Invariants:
    - Content is trimmed, then must be 1..1000 characters (400)
    - Comments can only be added, edited or deleted while the event is active and not cancelled
    - Only the author or an Admin edits or deletes a comment (403)
    - Deletion is soft; soft-deleted comments behave as missing (404)
    - The organizer hears about new comments when new_comment_notifications is on
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ventytime.core.domain_types import NotificationType, utcnow
from ventytime.core.enforce_access import check_comment_author
from ventytime.core.enforce_content import (
    check_comment_content, check_event_accepts_comments, normalize_comment_content,
)
from ventytime.core.errors import ResourceNotFoundError
from ventytime.infrastructure.notification_hub import NotificationHub
from ventytime.models.comment import EventComment
from ventytime.models.event import Event
from ventytime.models.user import User
from ventytime.schemas.comment import CommentDto
from ventytime.services.dto_mappers import comment_to_dto
from ventytime.services.event_service import event_link
from ventytime.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class CommentService:

    def __init__(self, db: AsyncSession, hub: NotificationHub | None = None):
        self.db = db
        self.notifications = NotificationService(db, hub)

    async def _get_event(self, event_id: int) -> Event:
        result = await self.db.execute(select(Event).where(Event.id == event_id))
        event = result.scalar_one_or_none()
        if event is None:
            raise ResourceNotFoundError("Event", event_id)
        return event

    async def _get_comment(self, comment_id: int) -> EventComment:
        result = await self.db.execute(
            select(EventComment)
            .where(EventComment.id == comment_id)
            .where(EventComment.is_deleted.is_(False))
        )
        comment = result.scalar_one_or_none()
        if comment is None:
            raise ResourceNotFoundError("Comment", comment_id)
        return comment

    # ─── Queries ─────────────────────────────────────────────────

    async def list_for_event(self, event_id: int) -> list[CommentDto]:
        await self._get_event(event_id)
        result = await self.db.execute(
            select(EventComment)
            .where(EventComment.event_id == event_id)
            .where(EventComment.is_deleted.is_(False))
            .order_by(EventComment.created_at.desc(), EventComment.id.desc())
        )
        return [comment_to_dto(c) for c in result.scalars().all()]

    async def list_for_user(self, user_id: UUID) -> list[CommentDto]:
        result = await self.db.execute(
            select(EventComment)
            .where(EventComment.user_id == user_id)
            .where(EventComment.is_deleted.is_(False))
            .order_by(EventComment.created_at.desc(), EventComment.id.desc())
        )
        return [comment_to_dto(c) for c in result.scalars().all()]

    async def get(self, comment_id: int) -> CommentDto:
        return comment_to_dto(await self._get_comment(comment_id))

    # ─── Writes ──────────────────────────────────────────────────

    async def create(self, actor: User, event_id: int, content: str) -> CommentDto:
        content = normalize_comment_content(content)
        error = check_comment_content(content)
        if error:
            raise error
        event = await self._get_event(event_id)
        error = check_event_accepts_comments(event, "comment on")
        if error:
            raise error

        comment = EventComment(
            event_id=event.id, user_id=actor.id, content=content, created_at=utcnow(),
        )
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment, attribute_names=["user"])
        logger.info(
            "Comment added", extra={"event_id": event.id, "user_id": actor.id},
        )

        organizer = event.organizer
        if (
            organizer is not None
            and organizer.id != actor.id
            and organizer.new_comment_notifications
        ):
            await self.notifications.notify_user(
                organizer.id,
                "New Comment",
                f"{actor.full_name or actor.user_name} commented on '{event.title}'.",
                NotificationType.INFO,
                event_id=event.id,
                link=event_link(event.id),
            )
        return comment_to_dto(comment)

    async def update(self, actor: User, comment_id: int, content: str) -> CommentDto:
        content = normalize_comment_content(content)
        error = check_comment_content(content)
        if error:
            raise error
        comment = await self._get_comment(comment_id)
        event = await self._get_event(comment.event_id)
        error = (
            check_event_accepts_comments(event, "update comments on")
            or check_comment_author(actor, comment, "update")
        )
        if error:
            raise error

        comment.content = content
        comment.is_edited = True
        comment.updated_at = utcnow()
        await self.db.commit()
        logger.info(
            f"Comment {comment.id} edited",
            extra={"event_id": event.id, "user_id": actor.id},
        )
        return comment_to_dto(comment)

    async def delete(self, actor: User, comment_id: int) -> None:
        comment = await self._get_comment(comment_id)
        event = await self._get_event(comment.event_id)
        error = (
            check_event_accepts_comments(event, "delete comments on")
            or check_comment_author(actor, comment, "delete")
        )
        if error:
            raise error

        comment.is_deleted = True
        comment.updated_at = utcnow()
        await self.db.commit()
        logger.info(
            f"Comment {comment.id} deleted",
            extra={"event_id": event.id, "user_id": actor.id},
        )
