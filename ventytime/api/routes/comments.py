"""Comment Routes — event comment threads.

Invariants:
    - Listing comments of an event is anonymous; everything else needs a bearer token
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ventytime.api.deps import get_current_user
from ventytime.infrastructure.database import get_db
from ventytime.models.user import User
from ventytime.schemas.comment import CommentCreate, CommentDto, CommentUpdate
from ventytime.services.comment_service import CommentService

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.get("/event/{event_id}", response_model=list[CommentDto])
async def comments_for_event(event_id: int, db: AsyncSession = Depends(get_db)):
    return await CommentService(db).list_for_event(event_id)


@router.get("/user/{user_id}", response_model=list[CommentDto])
async def comments_by_user(
    user_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await CommentService(db).list_for_user(user_id)


@router.get("/{comment_id}", response_model=CommentDto)
async def get_comment(
    comment_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await CommentService(db).get(comment_id)


@router.post(
    "/event/{event_id}", response_model=CommentDto, status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    event_id: int,
    body: CommentCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await CommentService(db).create(user, event_id, body.content)


@router.put("/{comment_id}", response_model=CommentDto)
async def update_comment(
    comment_id: int,
    body: CommentUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await CommentService(db).update(user, comment_id, body.content)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await CommentService(db).delete(user, comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
