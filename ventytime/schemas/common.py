"""Common Schemas — envelopes shared by the API and the Python client.

Invariants:
    - ApiResponse.is_successful is False whenever data is absent because of an error
    - message is always a string (empty when there is nothing to say)
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Result wrapper returned by every client service call."""
    is_successful: bool
    message: str = ""
    data: T | None = None

    @classmethod
    def ok(cls, data: T | None = None, message: str = "") -> "ApiResponse[T]":
        return cls(is_successful=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str) -> "ApiResponse[T]":
        return cls(is_successful=False, message=message, data=None)


class MessageResponse(BaseModel):
    message: str
