"""VentyTime HTTP Client — async transport shared by all client services.

Invariants:
    - Every call returns ApiResponse; HTTP and transport failures never raise
    - Error messages come from the API's {"message": ...} envelope when present
    - 204 responses are successful with data None

Design Decisions:
    - One httpx.AsyncClient per VentyTimeClient; close with aclose() or `async with`
    - Response bodies parsed with pydantic TypeAdapter into the caller's schema
"""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ventytime.client.auth_handler import BearerAuth
from ventytime.client.token_store import MemoryTokenStore, TokenStore
from ventytime.schemas.common import ApiResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 30.0


def error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        if isinstance(body.get("message"), str):
            return body["message"]
        if isinstance(body.get("detail"), str):
            return body["detail"]
    return f"Request failed with status {response.status_code}"


class VentyTimeClient:
    """Async API client holding the token store and the HTTP connection pool."""

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.token_store = token_store or MemoryTokenStore()
        self.http = httpx.AsyncClient(
            base_url=base_url,
            auth=BearerAuth(self.token_store),
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "VentyTimeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    async def request(
        self,
        method: str,
        path: str,
        response_type: Any = None,
        **kwargs,
    ) -> ApiResponse:
        """Send a request and wrap the outcome. `response_type` parses the body."""
        try:
            response = await self.http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            return ApiResponse.fail(f"Could not reach the server: {e}")

        if response.is_error:
            message = error_message(response)
            logger.warning(f"{method} {path} → {response.status_code}: {message}")
            return ApiResponse.fail(message)

        if response.status_code == 204 or response_type is None:
            return ApiResponse.ok()
        try:
            data = TypeAdapter(response_type).validate_json(response.content)
        except PydanticValidationError as e:
            logger.error(f"{method} {path} returned an unexpected body: {e}")
            return ApiResponse.fail("Unexpected response from server")
        return ApiResponse.ok(data)

    async def get(self, path: str, response_type: Any = None, **kwargs) -> ApiResponse:
        return await self.request("GET", path, response_type, **kwargs)

    async def post(self, path: str, response_type: Any = None, **kwargs) -> ApiResponse:
        return await self.request("POST", path, response_type, **kwargs)

    async def put(self, path: str, response_type: Any = None, **kwargs) -> ApiResponse:
        return await self.request("PUT", path, response_type, **kwargs)

    async def delete(self, path: str, response_type: Any = None, **kwargs) -> ApiResponse:
        return await self.request("DELETE", path, response_type, **kwargs)
