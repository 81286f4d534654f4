"""Registration Routes — create, read and move registrations through their states.

Invariants:
    - Every endpoint requires a bearer token
    - /user and /event/{id} are declared before /{registration_id}
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ventytime.api.deps import get_current_user
from ventytime.infrastructure.database import get_db
from ventytime.models.user import User
from ventytime.schemas.event import IsFullResponse
from ventytime.schemas.registration import RegistrationDto, UpdateRegistrationStatusRequest
from ventytime.services.event_service import EventService
from ventytime.services.registration_service import RegistrationService

router = APIRouter(prefix="/api/registrations", tags=["registrations"])


@router.post(
    "/event/{event_id}",
    response_model=RegistrationDto,
    status_code=status.HTTP_201_CREATED,
)
async def create_registration(
    event_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await RegistrationService(db).register(user, event_id)


@router.get("/user", response_model=list[RegistrationDto])
async def my_registrations(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await RegistrationService(db).list_for_user(user.id)


@router.get("/event/{event_id}", response_model=list[RegistrationDto])
async def registrations_for_event(
    event_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await RegistrationService(db).list_for_event(user, event_id)


@router.get("/event/{event_id}/user", response_model=RegistrationDto)
async def my_registration_for_event(
    event_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await RegistrationService(db).get_for_event(user, event_id)


@router.get("/event/{event_id}/is-full", response_model=IsFullResponse)
async def is_event_full(
    event_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await EventService(db).is_full(event_id)


@router.get("/{registration_id}", response_model=RegistrationDto)
async def get_registration(
    registration_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await RegistrationService(db).get(user, registration_id)


@router.post("/{registration_id}/cancel", response_model=RegistrationDto)
async def cancel_registration(
    registration_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await RegistrationService(db).cancel(user, registration_id)


@router.post("/{registration_id}/confirm", response_model=RegistrationDto)
async def confirm_registration(
    registration_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await RegistrationService(db).confirm(user, registration_id)


@router.put("/{registration_id}/status", response_model=RegistrationDto)
async def update_registration_status(
    registration_id: int,
    body: UpdateRegistrationStatusRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await RegistrationService(db).update_status(user, registration_id, body.status)
