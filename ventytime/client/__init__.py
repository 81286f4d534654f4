"""VentyTime Python Client — async SDK over the REST API.

Usage:
    async with VentyTimeClient("http://localhost:8000") as client:
        auth = AuthService(client)
        await auth.login("user@example.com", "secret")
        page = await EventService(client).get_events()

Invariants:
    - All service methods return ApiResponse[T] and never raise on HTTP errors
"""

from ventytime.client.auth_handler import BearerAuth  # noqa: F401
from ventytime.client.http import VentyTimeClient  # noqa: F401
from ventytime.client.services import (  # noqa: F401
    AuthService, CommentService, EventService, NotificationService,
    RegistrationService, UserService,
)
from ventytime.client.token_store import (  # noqa: F401
    FileTokenStore, MemoryTokenStore, TokenStore,
)
