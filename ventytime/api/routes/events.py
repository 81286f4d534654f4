"""Event Routes — public event queries and organizer management endpoints.

Invariants:
    - Read endpoints are anonymous; writes and participant endpoints need a bearer token
    - Fixed paths (search, upcoming, popular, categories, organizer) are declared
      before /{event_id} so they are never parsed as ids
    - upcoming/popular count is 1..50, page_size is 1..100 (400 otherwise)
"""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ventytime.api.deps import get_current_user
from ventytime.infrastructure.database import get_db
from ventytime.models.user import User
from ventytime.schemas.event import (
    MAX_PAGE_SIZE, EventCreate, EventDto, EventsPage, EventUpdate, IsFullResponse,
    NotifyParticipantsRequest, NotifyResult,
)
from ventytime.schemas.registration import RegistrationDto
from ventytime.services.event_service import EventService
from ventytime.services.registration_service import RegistrationService

router = APIRouter(prefix="/api/events", tags=["events"])


# ─── Queries ─────────────────────────────────────────────────────

@router.get("", response_model=EventsPage)
async def list_events(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    category: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    db: AsyncSession = Depends(get_db),
):
    return await EventService(db).list_events(
        page, page_size, category=category, start_date=start_date, end_date=end_date,
    )


@router.get("/search", response_model=EventsPage)
async def search_events(
    q: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
):
    return await EventService(db).search(q, page, page_size)


@router.get("/upcoming", response_model=list[EventDto])
async def upcoming_events(
    count: int = Query(10, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
):
    return await EventService(db).upcoming(count)


@router.get("/popular", response_model=list[EventDto])
async def popular_events(
    count: int = Query(10, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
):
    return await EventService(db).popular(count)


@router.get("/categories", response_model=list[str])
async def event_categories(db: AsyncSession = Depends(get_db)):
    return await EventService(db).categories()


@router.get("/organizer/{organizer_id}", response_model=list[EventDto])
async def events_by_organizer(organizer_id: UUID, db: AsyncSession = Depends(get_db)):
    return await EventService(db).by_organizer(organizer_id)


@router.get("/{event_id}", response_model=EventDto)
async def get_event(event_id: int, db: AsyncSession = Depends(get_db)):
    return await EventService(db).get_event(event_id)


@router.get("/{event_id}/is-full", response_model=IsFullResponse)
async def is_event_full(event_id: int, db: AsyncSession = Depends(get_db)):
    return await EventService(db).is_full(event_id)


# ─── Writes ──────────────────────────────────────────────────────

@router.post("", response_model=EventDto, status_code=status.HTTP_201_CREATED)
async def create_event(
    body: EventCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await EventService(db).create(user, body)


@router.put("/{event_id}", response_model=EventDto)
async def update_event(
    event_id: int,
    body: EventUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await EventService(db).update(user, event_id, body)


@router.post("/{event_id}/cancel", response_model=EventDto)
async def cancel_event(
    event_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await EventService(db).cancel(user, event_id)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await EventService(db).delete(user, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{event_id}/register",
    response_model=RegistrationDto,
    status_code=status.HTTP_201_CREATED,
)
async def register_for_event(
    event_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await RegistrationService(db).register(user, event_id)


# ─── Participants ────────────────────────────────────────────────

@router.get("/{event_id}/participants", response_model=list[RegistrationDto])
async def event_participants(
    event_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await EventService(db).participants(user, event_id)


@router.delete(
    "/{event_id}/participants/{user_id}", status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_participant(
    event_id: int,
    user_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await EventService(db).remove_participant(user, event_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{event_id}/participants/notify", response_model=NotifyResult)
async def notify_all_participants(
    event_id: int,
    body: NotifyParticipantsRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notified = await EventService(db).notify_all_participants(user, event_id, body)
    return NotifyResult(notified=notified)


@router.post("/{event_id}/participants/{user_id}/notify", response_model=NotifyResult)
async def notify_participant(
    event_id: int,
    user_id: UUID,
    body: NotifyParticipantsRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notified = await EventService(db).notify_participant(user, event_id, user_id, body)
    return NotifyResult(notified=notified)
