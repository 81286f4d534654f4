"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is referenced by every other entity; Event scopes registrations and comments

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from ventytime.models.user import User  # noqa: F401
from ventytime.models.event import Event  # noqa: F401
from ventytime.models.registration import Registration  # noqa: F401
from ventytime.models.comment import EventComment  # noqa: F401
from ventytime.models.notification import Notification  # noqa: F401
