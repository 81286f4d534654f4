"""Notification Routes — the caller's own notification inbox.

Invariants:
    - Every endpoint requires a bearer token and only touches the caller's notifications
    - Fixed paths (unread-count, read-all, clear) are declared before /{notification_id}
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ventytime.api.deps import get_current_user
from ventytime.infrastructure.database import get_db
from ventytime.models.user import User
from ventytime.schemas.notification import AffectedCount, NotificationDto, UnreadCount
from ventytime.services.notification_service import NotificationService

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationDto])
async def list_notifications(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await NotificationService(db).list_for_user(user.id)


@router.get("/unread-count", response_model=UnreadCount)
async def unread_count(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return UnreadCount(count=await NotificationService(db).unread_count(user.id))


@router.put("/read-all", response_model=AffectedCount)
async def mark_all_read(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return AffectedCount(affected=await NotificationService(db).mark_all_read(user.id))


@router.post("/clear", response_model=AffectedCount)
async def clear_notifications(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return AffectedCount(affected=await NotificationService(db).clear(user.id))


@router.put("/{notification_id}/read", response_model=NotificationDto)
async def mark_read(
    notification_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await NotificationService(db).mark_read(user.id, notification_id)


@router.put("/{notification_id}/dismiss", response_model=NotificationDto)
async def dismiss(
    notification_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await NotificationService(db).dismiss(user.id, notification_id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await NotificationService(db).delete(user.id, notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
