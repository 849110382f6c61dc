"""
Storage operation result schemas.

Every result carries ``raw``: the provider's unmodified response, passed
through for advanced callers. Its shape is defined by the bucket API.
"""
from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Response(BaseModel):
    raw: Any = None


class DeleteResponse(Response):
    was_deleted: bool | None = None
    """True/False when the provider reports it, None when unknown."""


class ExistsResponse(Response):
    exists: bool


class ContentResponse(Response, Generic[T]):
    content: T


class SignedUrlResponse(Response):
    signed_url: str


class StatResponse(Response):
    size: int
    """Object size in bytes."""

    modified: datetime
    """Last modification time (UTC)."""


class FileListResponse(Response):
    path: str
