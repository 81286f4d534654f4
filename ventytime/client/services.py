"""Client Services — typed wrappers over the VentyTime REST API.

Invariants:
    - Every method returns ApiResponse[T]; failures carry the server's message
    - AuthService.login/register store the token; logout always clears it
    - Paths mirror ventytime.api.routes exactly

Design Decisions:
    - Services are thin: no caching and no retries (the server owns the rules)
    - Request bodies are the same pydantic schemas the server validates
"""

from datetime import datetime
from pathlib import Path
from uuid import UUID

from ventytime.client.http import VentyTimeClient
from ventytime.core.domain_types import RegistrationStatus, UserRole
from ventytime.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from ventytime.schemas.comment import CommentCreate, CommentDto, CommentUpdate
from ventytime.schemas.common import ApiResponse, MessageResponse
from ventytime.schemas.event import (
    EventCreate, EventDto, EventsPage, EventUpdate, IsFullResponse,
    NotifyParticipantsRequest, NotifyResult,
)
from ventytime.schemas.notification import AffectedCount, NotificationDto, UnreadCount
from ventytime.schemas.registration import RegistrationDto
from ventytime.schemas.upload import UploadResult
from ventytime.schemas.user import (
    AvatarResponse, ChangePasswordRequest, NotificationSettings, UpdateProfileRequest,
    UserDto,
)


def _json(model) -> dict:
    return model.model_dump(mode="json", exclude_unset=True)


def _file_part(path: str | Path, content: bytes | None) -> dict:
    path = Path(path)
    return {"file": (path.name, content if content is not None else path.read_bytes())}


class AuthService:

    def __init__(self, client: VentyTimeClient):
        self.client = client

    def _remember(self, response: ApiResponse) -> ApiResponse:
        if response.is_successful and response.data is not None:
            auth: AuthResponse = response.data
            self.client.token_store.save(auth.token, {
                "user_id": str(auth.user_id),
                "username": auth.username,
                "email": auth.email,
                "role": auth.role.value,
            })
        return response

    async def register(self, request: RegisterRequest) -> ApiResponse[AuthResponse]:
        response = await self.client.post(
            "/api/auth/register", AuthResponse, json=request.model_dump(mode="json"),
        )
        return self._remember(response)

    async def login(self, email: str, password: str) -> ApiResponse[AuthResponse]:
        request = LoginRequest(email=email, password=password)
        response = await self.client.post(
            "/api/auth/login", AuthResponse, json=request.model_dump(mode="json"),
        )
        return self._remember(response)

    async def logout(self) -> ApiResponse[MessageResponse]:
        response = ApiResponse.ok()
        if self.client.token_store.get_token():
            response = await self.client.post("/api/auth/logout", MessageResponse)
        self.client.token_store.clear()
        return response

    async def me(self) -> ApiResponse[UserDto]:
        return await self.client.get("/api/auth/me", UserDto)

    def is_authenticated(self) -> bool:
        return self.client.token_store.get_token() is not None

    def get_token(self) -> str | None:
        return self.client.token_store.get_token()

    def get_user_id(self) -> str | None:
        return self.client.token_store.get_identity().get("user_id")

    def get_username(self) -> str | None:
        return self.client.token_store.get_identity().get("username")


class EventService:

    def __init__(self, client: VentyTimeClient):
        self.client = client

    async def get_events(
        self,
        page: int = 1,
        page_size: int = 10,
        category: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> ApiResponse[EventsPage]:
        params: dict = {"page": page, "page_size": page_size}
        if category:
            params["category"] = category
        if start_date:
            params["start_date"] = start_date.isoformat()
        if end_date:
            params["end_date"] = end_date.isoformat()
        return await self.client.get("/api/events", EventsPage, params=params)

    async def get(self, event_id: int) -> ApiResponse[EventDto]:
        return await self.client.get(f"/api/events/{event_id}", EventDto)

    async def search(
        self, query: str, page: int = 1, page_size: int = 10,
    ) -> ApiResponse[EventsPage]:
        return await self.client.get(
            "/api/events/search", EventsPage,
            params={"q": query, "page": page, "page_size": page_size},
        )

    async def upcoming(self, count: int = 10) -> ApiResponse[list[EventDto]]:
        return await self.client.get(
            "/api/events/upcoming", list[EventDto], params={"count": count},
        )

    async def popular(self, count: int = 10) -> ApiResponse[list[EventDto]]:
        return await self.client.get(
            "/api/events/popular", list[EventDto], params={"count": count},
        )

    async def categories(self) -> ApiResponse[list[str]]:
        return await self.client.get("/api/events/categories", list[str])

    async def by_organizer(self, organizer_id: UUID | str) -> ApiResponse[list[EventDto]]:
        return await self.client.get(
            f"/api/events/organizer/{organizer_id}", list[EventDto],
        )

    async def is_full(self, event_id: int) -> ApiResponse[IsFullResponse]:
        return await self.client.get(f"/api/events/{event_id}/is-full", IsFullResponse)

    async def create(self, event: EventCreate) -> ApiResponse[EventDto]:
        return await self.client.post(
            "/api/events", EventDto, json=event.model_dump(mode="json"),
        )

    async def update(self, event_id: int, changes: EventUpdate) -> ApiResponse[EventDto]:
        return await self.client.put(
            f"/api/events/{event_id}", EventDto, json=_json(changes),
        )

    async def cancel(self, event_id: int) -> ApiResponse[EventDto]:
        return await self.client.post(f"/api/events/{event_id}/cancel", EventDto)

    async def delete(self, event_id: int) -> ApiResponse[None]:
        return await self.client.delete(f"/api/events/{event_id}")

    async def upload_image(
        self, path: str | Path, content: bytes | None = None,
    ) -> ApiResponse[UploadResult]:
        return await self.client.post(
            "/api/upload", UploadResult, files=_file_part(path, content),
        )

    async def participants(self, event_id: int) -> ApiResponse[list[RegistrationDto]]:
        return await self.client.get(
            f"/api/events/{event_id}/participants", list[RegistrationDto],
        )

    async def remove_participant(
        self, event_id: int, user_id: UUID | str,
    ) -> ApiResponse[None]:
        return await self.client.delete(f"/api/events/{event_id}/participants/{user_id}")

    async def notify_participant(
        self, event_id: int, user_id: UUID | str, request: NotifyParticipantsRequest,
    ) -> ApiResponse[NotifyResult]:
        return await self.client.post(
            f"/api/events/{event_id}/participants/{user_id}/notify",
            NotifyResult, json=request.model_dump(mode="json"),
        )

    async def notify_all_participants(
        self, event_id: int, request: NotifyParticipantsRequest,
    ) -> ApiResponse[NotifyResult]:
        return await self.client.post(
            f"/api/events/{event_id}/participants/notify",
            NotifyResult, json=request.model_dump(mode="json"),
        )


class RegistrationService:

    def __init__(self, client: VentyTimeClient):
        self.client = client

    async def register(self, event_id: int) -> ApiResponse[RegistrationDto]:
        return await self.client.post(
            f"/api/registrations/event/{event_id}", RegistrationDto,
        )

    async def mine(self) -> ApiResponse[list[RegistrationDto]]:
        return await self.client.get("/api/registrations/user", list[RegistrationDto])

    async def for_event(self, event_id: int) -> ApiResponse[RegistrationDto]:
        """The signed-in user's registration for an event."""
        return await self.client.get(
            f"/api/registrations/event/{event_id}/user", RegistrationDto,
        )

    async def is_registered(self, event_id: int) -> bool:
        response = await self.for_event(event_id)
        return bool(
            response.is_successful
            and response.data.status != RegistrationStatus.CANCELLED
        )

    async def event_registrations(self, event_id: int) -> ApiResponse[list[RegistrationDto]]:
        return await self.client.get(
            f"/api/registrations/event/{event_id}", list[RegistrationDto],
        )

    async def get(self, registration_id: int) -> ApiResponse[RegistrationDto]:
        return await self.client.get(
            f"/api/registrations/{registration_id}", RegistrationDto,
        )

    async def cancel(self, registration_id: int) -> ApiResponse[RegistrationDto]:
        return await self.client.post(
            f"/api/registrations/{registration_id}/cancel", RegistrationDto,
        )

    async def unregister(self, event_id: int) -> ApiResponse[RegistrationDto]:
        """Cancel the signed-in user's registration for an event."""
        current = await self.for_event(event_id)
        if not current.is_successful:
            return current
        return await self.cancel(current.data.id)

    async def confirm(self, registration_id: int) -> ApiResponse[RegistrationDto]:
        return await self.client.post(
            f"/api/registrations/{registration_id}/confirm", RegistrationDto,
        )

    async def update_status(
        self, registration_id: int, status: RegistrationStatus,
    ) -> ApiResponse[RegistrationDto]:
        return await self.client.put(
            f"/api/registrations/{registration_id}/status", RegistrationDto,
            json={"status": RegistrationStatus(status).value},
        )


class UserService:

    def __init__(self, client: VentyTimeClient):
        self.client = client

    async def list_users(self) -> ApiResponse[list[UserDto]]:
        return await self.client.get("/api/users", list[UserDto])

    async def get(self, user_id: UUID | str) -> ApiResponse[UserDto]:
        return await self.client.get(f"/api/users/{user_id}", UserDto)

    async def roles(self, user_id: UUID | str) -> ApiResponse[list[str]]:
        return await self.client.get(f"/api/users/{user_id}/roles", list[str])

    async def profile(self) -> ApiResponse[UserDto]:
        return await self.client.get("/api/users/me", UserDto)

    async def update_profile(self, request: UpdateProfileRequest) -> ApiResponse[UserDto]:
        return await self.client.put("/api/users/me", UserDto, json=_json(request))

    async def change_password(
        self, current_password: str, new_password: str, confirm_password: str | None = None,
    ) -> ApiResponse[MessageResponse]:
        request = ChangePasswordRequest(
            current_password=current_password,
            new_password=new_password,
            confirm_password=new_password if confirm_password is None else confirm_password,
        )
        return await self.client.post(
            "/api/users/me/change-password", MessageResponse,
            json=request.model_dump(mode="json"),
        )

    async def notification_settings(self) -> ApiResponse[NotificationSettings]:
        return await self.client.get(
            "/api/users/me/notification-settings", NotificationSettings,
        )

    async def update_notification_settings(
        self, settings: NotificationSettings,
    ) -> ApiResponse[NotificationSettings]:
        return await self.client.put(
            "/api/users/me/notification-settings", NotificationSettings,
            json=settings.model_dump(mode="json"),
        )

    async def upload_avatar(
        self, path: str | Path, content: bytes | None = None,
    ) -> ApiResponse[AvatarResponse]:
        return await self.client.post(
            "/api/users/me/avatar", AvatarResponse, files=_file_part(path, content),
        )

    async def set_status(self, user_id: UUID | str, is_active: bool) -> ApiResponse[UserDto]:
        return await self.client.put(
            f"/api/users/{user_id}/status", UserDto, json={"is_active": is_active},
        )

    async def set_role(self, user_id: UUID | str, role: UserRole) -> ApiResponse[UserDto]:
        return await self.client.put(
            f"/api/users/{user_id}/role", UserDto, json={"role": UserRole(role).value},
        )

    async def delete(self, user_id: UUID | str) -> ApiResponse[None]:
        return await self.client.delete(f"/api/users/{user_id}")


class NotificationService:

    def __init__(self, client: VentyTimeClient):
        self.client = client

    async def list_notifications(self) -> ApiResponse[list[NotificationDto]]:
        return await self.client.get("/api/notifications", list[NotificationDto])

    async def unread_count(self) -> ApiResponse[UnreadCount]:
        return await self.client.get("/api/notifications/unread-count", UnreadCount)

    async def mark_read(self, notification_id: int) -> ApiResponse[NotificationDto]:
        return await self.client.put(
            f"/api/notifications/{notification_id}/read", NotificationDto,
        )

    async def mark_all_read(self) -> ApiResponse[AffectedCount]:
        return await self.client.put("/api/notifications/read-all", AffectedCount)

    async def dismiss(self, notification_id: int) -> ApiResponse[NotificationDto]:
        return await self.client.put(
            f"/api/notifications/{notification_id}/dismiss", NotificationDto,
        )

    async def delete(self, notification_id: int) -> ApiResponse[None]:
        return await self.client.delete(f"/api/notifications/{notification_id}")

    async def clear(self) -> ApiResponse[AffectedCount]:
        return await self.client.post("/api/notifications/clear", AffectedCount)


class CommentService:

    def __init__(self, client: VentyTimeClient):
        self.client = client

    async def for_event(self, event_id: int) -> ApiResponse[list[CommentDto]]:
        return await self.client.get(f"/api/comments/event/{event_id}", list[CommentDto])

    async def by_user(self, user_id: UUID | str) -> ApiResponse[list[CommentDto]]:
        return await self.client.get(f"/api/comments/user/{user_id}", list[CommentDto])

    async def get(self, comment_id: int) -> ApiResponse[CommentDto]:
        return await self.client.get(f"/api/comments/{comment_id}", CommentDto)

    async def add(self, event_id: int, content: str) -> ApiResponse[CommentDto]:
        return await self.client.post(
            f"/api/comments/event/{event_id}", CommentDto,
            json=CommentCreate(content=content).model_dump(),
        )

    async def update(self, comment_id: int, content: str) -> ApiResponse[CommentDto]:
        return await self.client.put(
            f"/api/comments/{comment_id}", CommentDto,
            json=CommentUpdate(content=content).model_dump(),
        )

    async def delete(self, comment_id: int) -> ApiResponse[None]:
        return await self.client.delete(f"/api/comments/{comment_id}")
