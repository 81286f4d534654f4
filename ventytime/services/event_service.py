"""Event Service — event lifecycle, queries and organizer-to-participant messaging.

Invariants:
    - Only Organizer/Admin create events; only the event's organizer or an Admin
      updates, cancels, deletes or manages participants
    - Events with Confirmed registrations cannot be deleted (400)
    - Participants = registrations whose status is not Cancelled
    - Search only returns active events; upcoming only active, non-cancelled, future events
    - Any write clears every cached event query (prefix "events:")

Design Decisions:
    - Read-through TTL cache for get/search/upcoming/categories; DTOs are cached, not rows,
      and their clock-dependent flags are recomputed on every hit
    - Dependant rows (registrations, comments) deleted explicitly before the event
    - Participant notifications go through NotificationService after the event commit,
      then the event group receives an "event_update" hub message
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, delete, desc, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ventytime.core.domain_types import (
    EVENT_MANAGER_ROLES, NotificationType, RegistrationStatus, utcnow,
)
from ventytime.core.enforce_access import check_event_manager, check_role
from ventytime.core.enforce_content import check_no_null_fields, validate_event_fields
from ventytime.core.enforce_registration import is_event_full
from ventytime.core.errors import BusinessRuleError, ResourceNotFoundError
from ventytime.infrastructure.cache import EventCache, get_event_cache
from ventytime.infrastructure.notification_hub import NotificationHub, event_group
from ventytime.models.comment import EventComment
from ventytime.models.event import Event
from ventytime.models.notification import Notification
from ventytime.models.registration import Registration
from ventytime.models.user import User
from ventytime.schemas.event import (
    MAX_PAGE_SIZE, EventCreate, EventDto, EventsPage, EventUpdate, IsFullResponse,
    NotifyParticipantsRequest,
)
from ventytime.schemas.registration import RegistrationDto
from ventytime.services.dto_mappers import (
    event_to_dto, registration_to_dto, with_current_flags,
)
from ventytime.services.notification_service import NotificationService
from ventytime.services.participation import (
    active_participant_count, active_participant_counts, active_registrations,
    confirmed_count, find_registration,
)

logger = logging.getLogger(__name__)

CACHE_PREFIX = "events:"


def event_link(event_id: int) -> str:
    return f"/events/{event_id}"


class EventService:

    def __init__(
        self,
        db: AsyncSession,
        cache: EventCache | None = None,
        hub: NotificationHub | None = None,
    ):
        self.db = db
        self.cache = cache if cache is not None else get_event_cache()
        self.notifications = NotificationService(db, hub)

    # ─── Loading helpers ─────────────────────────────────────────

    async def get_event_or_404(self, event_id: int) -> Event:
        result = await self.db.execute(select(Event).where(Event.id == event_id))
        event = result.scalar_one_or_none()
        if event is None:
            raise ResourceNotFoundError("Event", event_id)
        return event

    async def _to_dtos(self, events: list[Event]) -> list[EventDto]:
        counts = await active_participant_counts(self.db, [e.id for e in events])
        now = utcnow()
        return [event_to_dto(e, counts[e.id], now) for e in events]

    async def _to_dto(self, event: Event) -> EventDto:
        count = await active_participant_count(self.db, event.id)
        return event_to_dto(event, count)

    async def _page(self, query: Select, page: int, page_size: int) -> EventsPage:
        page = max(page, 1)
        page_size = min(max(page_size, 1), MAX_PAGE_SIZE)
        total = await self.db.execute(
            select(func.count()).select_from(query.order_by(None).subquery())
        )
        rows = await self.db.execute(
            query.offset((page - 1) * page_size).limit(page_size)
        )
        return EventsPage(
            items=await self._to_dtos(list(rows.scalars().all())),
            total_count=total.scalar_one(),
            page=page,
            page_size=page_size,
        )

    def _invalidate(self) -> None:
        self.cache.invalidate_prefix(CACHE_PREFIX)

    # ─── Queries ─────────────────────────────────────────────────

    async def list_events(
        self,
        page: int = 1,
        page_size: int = 10,
        category: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> EventsPage:
        query = select(Event)
        if category:
            query = query.where(func.lower(Event.category) == category.lower())
        if start_date:
            query = query.where(Event.start_date >= start_date)
        if end_date:
            query = query.where(Event.end_date <= end_date)
        query = query.order_by(desc(Event.start_date), desc(Event.id))
        return await self._page(query, page, page_size)

    async def get_event(self, event_id: int) -> EventDto:
        key = f"{CACHE_PREFIX}id:{event_id}"
        cached = self.cache.get(key)
        if cached is not None:
            return with_current_flags(cached)
        dto = await self._to_dto(await self.get_event_or_404(event_id))
        self.cache.set(key, dto)
        return dto

    async def search(self, q: str | None, page: int = 1, page_size: int = 10) -> EventsPage:
        term = (q or "").strip()
        if not term:
            return await self.list_events(page, page_size)
        key = f"{CACHE_PREFIX}search:{term.lower()}:{page}:{page_size}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached.model_copy(
                update={"items": [with_current_flags(e) for e in cached.items]},
            )

        pattern = f"%{term}%"
        query = (
            select(Event)
            .where(Event.is_active.is_(True))
            .where(or_(
                Event.title.ilike(pattern),
                Event.description.ilike(pattern),
                Event.location.ilike(pattern),
                Event.category.ilike(pattern),
            ))
            .order_by(Event.start_date, Event.id)
        )
        result = await self._page(query, page, page_size)
        self.cache.set(key, result)
        return result

    async def upcoming(self, count: int = 10) -> list[EventDto]:
        key = f"{CACHE_PREFIX}upcoming:{count}"
        cached = self.cache.get(key)
        if cached is not None:
            return [with_current_flags(e) for e in cached]
        result = await self.db.execute(
            select(Event)
            .where(Event.is_active.is_(True))
            .where(Event.is_cancelled.is_(False))
            .where(Event.start_date > utcnow())
            .order_by(Event.start_date, Event.id)
            .limit(count)
        )
        dtos = await self._to_dtos(list(result.scalars().all()))
        self.cache.set(key, dtos)
        return dtos

    async def popular(self, count: int = 10) -> list[EventDto]:
        """Open events ranked by live registrations."""
        participants = func.count(Registration.id)
        result = await self.db.execute(
            select(Event)
            .outerjoin(
                Registration,
                (Registration.event_id == Event.id)
                & (Registration.status != RegistrationStatus.CANCELLED.value),
            )
            .where(Event.is_active.is_(True))
            .where(Event.is_cancelled.is_(False))
            .where(Event.end_date >= utcnow())
            .group_by(Event.id)
            .order_by(desc(participants), Event.start_date)
            .limit(count)
        )
        return await self._to_dtos(list(result.scalars().all()))

    async def by_organizer(self, organizer_id: UUID) -> list[EventDto]:
        result = await self.db.execute(
            select(Event)
            .where(Event.organizer_id == organizer_id)
            .order_by(desc(Event.start_date), desc(Event.id))
        )
        return await self._to_dtos(list(result.scalars().all()))

    async def categories(self) -> list[str]:
        key = f"{CACHE_PREFIX}categories"
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        result = await self.db.execute(
            select(Event.category).distinct().order_by(Event.category)
        )
        categories = [c for c in result.scalars().all() if c]
        self.cache.set(key, categories)
        return categories

    async def is_full(self, event_id: int) -> IsFullResponse:
        event = await self.get_event_or_404(event_id)
        current = await active_participant_count(self.db, event.id)
        return IsFullResponse(
            event_id=event.id,
            is_full=is_event_full(event, current),
            current_participants=current,
            max_attendees=event.max_attendees,
        )

    # ─── Writes ──────────────────────────────────────────────────

    async def create(self, actor: User, data: EventCreate) -> EventDto:
        fields = data.model_dump()
        error = (
            check_role(actor, EVENT_MANAGER_ROLES, "create events")
            or validate_event_fields(fields, utcnow(), require_future_start=True)
        )
        if error:
            raise error

        for name in ("title", "description", "location", "category"):
            fields[name] = fields[name].strip()
        fields["event_type"] = data.event_type.value
        fields["accessibility"] = data.accessibility.value
        event = Event(
            **fields,
            organizer_id=actor.id,
            is_active=True,
            is_cancelled=False,
            created_at=utcnow(),
        )
        self.db.add(event)
        await self.db.commit()
        await self.db.refresh(event, attribute_names=["organizer"])
        self._invalidate()

        logger.info(
            f"Event created: {event.title}",
            extra={"event_id": event.id, "user_id": actor.id},
        )
        return event_to_dto(event, 0)

    async def update(self, actor: User, event_id: int, data: EventUpdate) -> EventDto:
        event = await self.get_event_or_404(event_id)
        error = check_event_manager(actor, event, "update")
        if error:
            raise error

        changes = data.model_dump(exclude_unset=True)
        error = check_no_null_fields(changes, _NULLABLE_EVENT_FIELDS)
        if error:
            raise error
        for name in ("title", "description", "location", "category"):
            if changes.get(name) is not None:
                changes[name] = changes[name].strip()
        for name in ("event_type", "accessibility"):
            if changes.get(name) is not None:
                changes[name] = changes[name].value

        merged = {
            column: getattr(event, column)
            for column in (
                "title", "description", "location", "category", "start_date",
                "end_date", "is_online", "online_url", "has_early_bird_price",
                "early_bird_price", "price",
            )
        }
        merged.update(changes)
        error = validate_event_fields(merged, utcnow(), require_future_start=False)
        if error:
            raise error

        for name, value in changes.items():
            setattr(event, name, value)
        event.updated_at = utcnow()
        await self.db.commit()
        self._invalidate()
        logger.info("Event updated", extra={"event_id": event.id, "user_id": actor.id})

        await self._notify_participants(
            event,
            "Event Updated",
            f"The event '{event.title}' has been updated.",
            NotificationType.EVENT_UPDATE,
        )
        await self._broadcast(event.id, "updated", f"The event '{event.title}' has been updated.")
        return await self._to_dto(event)

    async def cancel(self, actor: User, event_id: int) -> EventDto:
        event = await self.get_event_or_404(event_id)
        error = check_event_manager(actor, event, "cancel")
        if error:
            raise error
        if event.is_cancelled:
            raise BusinessRuleError("Event is already cancelled", "EVENT_CANCELLED")

        event.is_cancelled = True
        event.updated_at = utcnow()
        await self.db.commit()
        self._invalidate()
        logger.info("Event cancelled", extra={"event_id": event.id, "user_id": actor.id})

        message = f"The event '{event.title}' has been cancelled."
        await self._notify_participants(
            event, "Event Cancelled", message, NotificationType.WARNING,
        )
        await self._broadcast(event.id, "cancelled", message)
        return await self._to_dto(event)

    async def delete(self, actor: User, event_id: int) -> None:
        event = await self.get_event_or_404(event_id)
        error = check_event_manager(actor, event, "delete")
        if error:
            raise error
        if await confirmed_count(self.db, event.id) > 0:
            raise BusinessRuleError(
                "Cannot delete event with confirmed registrations",
                "EVENT_HAS_CONFIRMED_REGISTRATIONS",
            )

        await self.db.execute(delete(Registration).where(Registration.event_id == event.id))
        await self.db.execute(delete(EventComment).where(EventComment.event_id == event.id))
        await self.db.execute(
            update(Notification)
            .where(Notification.event_id == event.id)
            .values(event_id=None)
        )
        await self.db.delete(event)
        await self.db.commit()
        self._invalidate()
        logger.info("Event deleted", extra={"event_id": event_id, "user_id": actor.id})

    # ─── Participants ────────────────────────────────────────────

    async def _managed_event(self, actor: User, event_id: int, action: str) -> Event:
        event = await self.get_event_or_404(event_id)
        error = check_event_manager(actor, event, action)
        if error:
            raise error
        return event

    async def participants(self, actor: User, event_id: int) -> list[RegistrationDto]:
        event = await self._managed_event(actor, event_id, "view participants of")
        return [registration_to_dto(r) for r in await active_registrations(self.db, event.id)]

    async def _active_registration(self, event_id: int, user_id: UUID) -> Registration:
        registration = await find_registration(self.db, event_id, user_id)
        if registration is None or registration.status == RegistrationStatus.CANCELLED:
            raise ResourceNotFoundError("Registration", f"{event_id}/{user_id}")
        return registration

    async def remove_participant(
        self, actor: User, event_id: int, user_id: UUID,
    ) -> None:
        event = await self._managed_event(actor, event_id, "remove participants from")
        registration = await self._active_registration(event.id, user_id)
        registration.status = RegistrationStatus.CANCELLED.value
        registration.updated_at = utcnow()
        await self.db.commit()
        self._invalidate()
        logger.info(
            "Participant removed", extra={"event_id": event.id, "user_id": user_id},
        )
        await self.notifications.notify_user(
            user_id,
            "Removed from Event",
            f"You have been removed from the event '{event.title}'.",
            NotificationType.WARNING,
            event_id=event.id,
            link=event_link(event.id),
        )

    async def notify_participant(
        self, actor: User, event_id: int, user_id: UUID, request: NotifyParticipantsRequest,
    ) -> int:
        event = await self._managed_event(actor, event_id, "message participants of")
        await self._active_registration(event.id, user_id)
        await self.notifications.notify_user(
            user_id, request.title, request.message, request.type,
            event_id=event.id, link=request.link or event_link(event.id),
        )
        return 1

    async def notify_all_participants(
        self, actor: User, event_id: int, request: NotifyParticipantsRequest,
    ) -> int:
        event = await self._managed_event(actor, event_id, "message participants of")
        created = await self._notify_participants(
            event, request.title, request.message, request.type, link=request.link,
        )
        return len(created)

    async def _notify_participants(
        self,
        event: Event,
        title: str,
        message: str,
        type: NotificationType,
        link: str | None = None,
    ) -> list[Notification]:
        registrations = await active_registrations(self.db, event.id)
        return await self.notifications.notify_users(
            [r.user_id for r in registrations],
            title,
            message,
            type,
            event_id=event.id,
            link=link or event_link(event.id),
        )

    async def _broadcast(self, event_id: int, change: str, message: str) -> None:
        await self.notifications.hub.send_to_group(
            event_group(event_id),
            {
                "type": "event_update",
                "data": {"event_id": event_id, "change": change, "message": message},
            },
        )


_NULLABLE_EVENT_FIELDS = frozenset({
    "venue_details", "online_url", "image_url", "minimum_age", "early_bird_price",
    "early_bird_deadline", "refund_policy", "requirements", "schedule",
    "waitlist_capacity",
})
