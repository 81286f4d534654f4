"""Comment Schemas — comment payloads and the author-enriched read model.

Invariants:
    - Length/emptiness is enforced after trimming in core/enforce_content.py,
      so whitespace-only content yields the domain 400 rather than a schema error
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class CommentCreate(BaseModel):
    content: str


class CommentUpdate(BaseModel):
    content: str


class CommentDto(BaseModel):
    id: int
    event_id: int
    user_id: UUID
    user_name: str
    user_avatar_url: str | None = None
    content: str
    created_at: datetime
    updated_at: datetime | None = None
    is_edited: bool
