"""Registration Service — signing users up for events and moving registrations through states.

Invariants:
    - Create checks run in order: event exists (404), open (400), not ended (400),
      not already registered (400), capacity (400)
    - A Cancelled registration is reactivated to Pending instead of inserting a new row
    - The unique (event_id, user_id) index turns a concurrent duplicate into the same 400
    - Only the registrant cancels; only the event's organizer or an Admin confirms or
      changes status
    - Confirm never pushes the confirmed count past max_attendees

Design Decisions:
    - Participant count and insert share one transaction (one session, one commit)
    - Every write clears the event cache: EventDto carries current_participants
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ventytime.core.domain_types import NotificationType, RegistrationStatus, utcnow
from ventytime.core.enforce_access import (
    check_event_manager, check_registrant, check_registration_viewer,
)
from ventytime.core.enforce_registration import (
    check_can_cancel, check_can_confirm, check_capacity, validate_new_registration,
)
from ventytime.core.errors import BusinessRuleError, ResourceNotFoundError
from ventytime.infrastructure.cache import EventCache, get_event_cache
from ventytime.infrastructure.notification_hub import NotificationHub
from ventytime.models.event import Event
from ventytime.models.registration import Registration
from ventytime.models.user import User
from ventytime.schemas.registration import RegistrationDto
from ventytime.services.dto_mappers import registration_to_dto
from ventytime.services.event_service import CACHE_PREFIX, event_link
from ventytime.services.notification_service import NotificationService
from ventytime.services.participation import (
    active_participant_count, confirmed_count, find_registration,
)

logger = logging.getLogger(__name__)


class RegistrationService:

    def __init__(
        self,
        db: AsyncSession,
        cache: EventCache | None = None,
        hub: NotificationHub | None = None,
    ):
        self.db = db
        self.cache = cache if cache is not None else get_event_cache()
        self.notifications = NotificationService(db, hub)

    async def _get_event(self, event_id: int) -> Event:
        result = await self.db.execute(select(Event).where(Event.id == event_id))
        event = result.scalar_one_or_none()
        if event is None:
            raise ResourceNotFoundError("Event", event_id)
        return event

    async def _get_registration(self, registration_id: int) -> Registration:
        result = await self.db.execute(
            select(Registration).where(Registration.id == registration_id)
        )
        registration = result.scalar_one_or_none()
        if registration is None:
            raise ResourceNotFoundError("Registration", registration_id)
        return registration

    def _invalidate(self) -> None:
        self.cache.invalidate_prefix(CACHE_PREFIX)

    # ─── Create ──────────────────────────────────────────────────

    async def register(self, actor: User, event_id: int) -> RegistrationDto:
        event = await self._get_event(event_id)
        existing = await find_registration(self.db, event.id, actor.id)
        current = await active_participant_count(self.db, event.id)
        now = utcnow()

        error = validate_new_registration(event, current, existing, now)
        if error:
            logger.info(
                f"Registration rejected: {error.code}",
                extra={"event_id": event.id, "user_id": actor.id, "error_code": error.code},
            )
            raise error

        if existing is not None:
            registration = existing
            registration.status = RegistrationStatus.PENDING.value
            registration.registered_at = now
            registration.updated_at = now
        else:
            registration = Registration(
                event_id=event.id,
                user_id=actor.id,
                status=RegistrationStatus.PENDING.value,
                registered_at=now,
            )
            self.db.add(registration)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise BusinessRuleError(
                "You are already registered for this event", "ALREADY_REGISTERED",
            )
        await self.db.refresh(registration, attribute_names=["event", "user"])
        self._invalidate()
        logger.info(
            "Registered for event", extra={"event_id": event.id, "user_id": actor.id},
        )
        return registration_to_dto(registration)

    # ─── Queries ─────────────────────────────────────────────────

    async def get(self, actor: User, registration_id: int) -> RegistrationDto:
        registration = await self._get_registration(registration_id)
        error = check_registration_viewer(actor, registration, registration.event)
        if error:
            raise error
        return registration_to_dto(registration)

    async def get_for_event(self, actor: User, event_id: int) -> RegistrationDto:
        """The caller's own registration for an event."""
        registration = await find_registration(self.db, event_id, actor.id)
        if registration is None:
            raise ResourceNotFoundError("Registration", f"{event_id}/{actor.id}")
        return registration_to_dto(registration)

    async def list_for_event(self, actor: User, event_id: int) -> list[RegistrationDto]:
        event = await self._get_event(event_id)
        error = check_event_manager(actor, event, "view registrations of")
        if error:
            raise error
        result = await self.db.execute(
            select(Registration)
            .where(Registration.event_id == event.id)
            .order_by(Registration.registered_at, Registration.id)
        )
        return [registration_to_dto(r) for r in result.scalars().all()]

    async def list_for_user(self, user_id: UUID) -> list[RegistrationDto]:
        result = await self.db.execute(
            select(Registration)
            .where(Registration.user_id == user_id)
            .order_by(Registration.registered_at.desc(), Registration.id.desc())
        )
        return [registration_to_dto(r) for r in result.scalars().all()]

    # ─── State changes ───────────────────────────────────────────

    async def cancel(self, actor: User, registration_id: int) -> RegistrationDto:
        registration = await self._get_registration(registration_id)
        error = (
            check_registrant(actor, registration, "cancel")
            or check_can_cancel(registration)
        )
        if error:
            raise error
        registration.status = RegistrationStatus.CANCELLED.value
        registration.updated_at = utcnow()
        await self.db.commit()
        self._invalidate()
        logger.info(
            "Registration cancelled",
            extra={"event_id": registration.event_id, "user_id": actor.id},
        )
        return registration_to_dto(registration)

    async def confirm(self, actor: User, registration_id: int) -> RegistrationDto:
        registration = await self._get_registration(registration_id)
        event = registration.event
        error = check_event_manager(actor, event, "confirm registrations of")
        if error:
            raise error
        error = check_can_confirm(
            registration, event, await confirmed_count(self.db, event.id),
        )
        if error:
            raise error

        registration.status = RegistrationStatus.CONFIRMED.value
        registration.updated_at = utcnow()
        await self.db.commit()
        self._invalidate()
        logger.info(
            "Registration confirmed",
            extra={"event_id": event.id, "user_id": registration.user_id},
        )
        await self.notifications.notify_user(
            registration.user_id,
            "Registration Confirmed",
            f"Your registration for '{event.title}' has been confirmed.",
            NotificationType.SUCCESS,
            event_id=event.id,
            link=event_link(event.id),
        )
        return registration_to_dto(registration)

    async def update_status(
        self, actor: User, registration_id: int, status: RegistrationStatus,
    ) -> RegistrationDto:
        status = RegistrationStatus(status)
        if status == RegistrationStatus.CONFIRMED:
            return await self.confirm(actor, registration_id)

        registration = await self._get_registration(registration_id)
        event = registration.event
        error = check_event_manager(actor, event, "change registrations of")
        if error:
            raise error

        if status == RegistrationStatus.CANCELLED:
            error = check_can_cancel(registration)
        elif registration.status == RegistrationStatus.CANCELLED:
            # Back to Pending takes a seat again
            error = check_capacity(
                event, await active_participant_count(self.db, event.id),
            )
        if error:
            raise error

        registration.status = status.value
        registration.updated_at = utcnow()
        await self.db.commit()
        self._invalidate()
        logger.info(
            f"Registration status set to {status.value}",
            extra={"event_id": event.id, "user_id": registration.user_id},
        )
        if status == RegistrationStatus.CANCELLED:
            await self.notifications.notify_user(
                registration.user_id,
                "Registration Cancelled",
                f"Your registration for '{event.title}' has been cancelled by the organizer.",
                NotificationType.WARNING,
                event_id=event.id,
                link=event_link(event.id),
            )
        return registration_to_dto(registration)
