"""
Abstract base class for storage drivers.

This module defines the generic file-storage interface that bucket adapters
implement. Every location is relative to the adapter's configured root.
"""
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, BinaryIO

from supadrive.schemas.storage import (
    ContentResponse,
    DeleteResponse,
    ExistsResponse,
    FileListResponse,
    Response,
    SignedUrlResponse,
    StatResponse,
)

Content = bytes | str | BinaryIO | AsyncIterator[bytes]


class Storage(ABC):
    """
    Abstract base class for storage drivers.

    Implementations translate provider failures into ``StorageError``
    subclasses so callers never handle provider-specific exceptions.
    """

    @abstractmethod
    async def copy(self, src: str, dest: str) -> Response:
        """
        Copy a file to a location, leaving the source in place.

        Args:
            src: Source location
            dest: Destination location

        Returns:
            Response with the provider payload

        Raises:
            StorageError: If the copy fails
        """
        pass

    @abstractmethod
    async def delete(self, location: str) -> DeleteResponse:
        """
        Delete an existing file.

        Args:
            location: File location

        Returns:
            DeleteResponse; ``was_deleted`` is None when the provider does not say

        Raises:
            StorageError: If the delete fails
        """
        pass

    @abstractmethod
    async def exists(self, location: str) -> ExistsResponse:
        """
        Determine if a file exists.

        Args:
            location: File location

        Returns:
            ExistsResponse; a not-found condition is a result, not an error

        Raises:
            StorageError: For any failure other than not-found
        """
        pass

    @abstractmethod
    async def get(self, location: str, encoding: str = "utf-8") -> ContentResponse[str]:
        """
        Return the file contents decoded as text.

        Raises:
            StorageError: If the download fails
        """
        pass

    @abstractmethod
    async def get_buffer(self, location: str) -> ContentResponse[bytes]:
        """
        Return the file contents as bytes.

        Raises:
            StorageError: If the download fails
        """
        pass

    @abstractmethod
    async def get_signed_url(self, location: str, options: dict[str, Any] | None = None) -> SignedUrlResponse:
        """
        Return a time-limited signed URL for an existing file.

        Raises:
            StorageError: If signing fails
        """
        pass

    @abstractmethod
    async def get_stat(self, location: str) -> StatResponse:
        """
        Return the file's size and modification time.

        Raises:
            StorageError: If the file cannot be inspected
        """
        pass

    @abstractmethod
    def get_stream(self, location: str, range: tuple[int, int] | None = None) -> AsyncIterator[bytes]:
        """
        Return a byte stream for the file.

        The stream is returned immediately; failures are raised while
        reading from it.
        """
        pass

    @abstractmethod
    async def get_url(self, location: str) -> str:
        """Return the public URL for a file."""
        pass

    @abstractmethod
    async def move(self, src: str, dest: str) -> Response:
        """
        Move a file from one location to another.

        Raises:
            StorageError: If either phase of the move fails
        """
        pass

    @abstractmethod
    async def put(self, location: str, content: Content, content_type: str | None = None) -> Response:
        """
        Create a new file, creating missing directories on the fly.

        Args:
            location: File location
            content: Bytes, text, a binary file object or an async byte iterator
            content_type: Optional MIME type of the content

        Raises:
            StorageError: If the upload fails
        """
        pass

    @abstractmethod
    def flat_list(self, prefix: str = "") -> AsyncIterator[FileListResponse]:
        """
        Iterate over all files under a prefix.

        Raises:
            StorageError: If listing fails, ending the iteration
        """
        pass
