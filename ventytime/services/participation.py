"""Participation Queries — registration counts and participant lookups shared by services.

Invariants:
    - "Active" means status != Cancelled (Pending and Confirmed both hold a seat)
    - Counts for events without registrations are 0, never missing
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ventytime.core.domain_types import RegistrationStatus
from ventytime.models.registration import Registration


async def active_participant_count(db: AsyncSession, event_id: int) -> int:
    result = await db.execute(
        select(func.count(Registration.id))
        .where(Registration.event_id == event_id)
        .where(Registration.status != RegistrationStatus.CANCELLED.value)
    )
    return result.scalar_one()


async def active_participant_counts(
    db: AsyncSession, event_ids: Iterable[int],
) -> dict[int, int]:
    ids = list(event_ids)
    if not ids:
        return {}
    result = await db.execute(
        select(Registration.event_id, func.count(Registration.id))
        .where(Registration.event_id.in_(ids))
        .where(Registration.status != RegistrationStatus.CANCELLED.value)
        .group_by(Registration.event_id)
    )
    counts = {event_id: 0 for event_id in ids}
    counts.update({event_id: count for event_id, count in result.all()})
    return counts


async def confirmed_count(db: AsyncSession, event_id: int) -> int:
    result = await db.execute(
        select(func.count(Registration.id))
        .where(Registration.event_id == event_id)
        .where(Registration.status == RegistrationStatus.CONFIRMED.value)
    )
    return result.scalar_one()


async def active_registrations(
    db: AsyncSession, event_id: int,
) -> list[Registration]:
    result = await db.execute(
        select(Registration)
        .where(Registration.event_id == event_id)
        .where(Registration.status != RegistrationStatus.CANCELLED.value)
        .order_by(Registration.registered_at)
    )
    return list(result.scalars().all())


async def find_registration(
    db: AsyncSession, event_id: int, user_id: UUID,
) -> Registration | None:
    result = await db.execute(
        select(Registration)
        .where(Registration.event_id == event_id)
        .where(Registration.user_id == user_id)
    )
    return result.scalar_one_or_none()
