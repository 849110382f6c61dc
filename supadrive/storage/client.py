"""
Bucket API boundary.

The adapter talks to the provider through a driver handle exposing
``from_(bucket)``, which returns an object with the bucket capability set
below. ``storage3.AsyncStorageClient`` satisfies it, as does
``LocalBucketClient`` and any test double.
"""
from typing import Any, Protocol

from storage3 import AsyncStorageClient

from supadrive.config import StorageConfig


class BucketApi(Protocol):
    """Async operations available on a single bucket."""

    async def move(self, from_path: str, to_path: str) -> Any:
        ...

    async def remove(self, paths: list[str]) -> Any:
        ...

    async def download(self, path: str) -> Any:
        ...

    async def create_signed_url(self, path: str, expires_in: int) -> Any:
        ...

    async def get_public_url(self, path: str) -> str:
        ...

    async def upload(self, path: str, file: Any, file_options: dict[str, str] | None = None) -> Any:
        ...

    async def list(self, path: str | None = None) -> Any:
        ...


class StorageDriver(Protocol):
    """Provider handle owned by a storage adapter for its whole lifetime."""

    def from_(self, id: str) -> BucketApi:
        ...


def create_driver(config: StorageConfig) -> StorageDriver:
    """
    Build the Supabase storage client for a configuration.

    No network call is made here; the client connects lazily on first use.
    """
    return AsyncStorageClient(
        f"{config.url.rstrip('/')}/storage/v1",
        {
            "apiKey": config.secret,
            "Authorization": f"Bearer {config.secret}",
        },
    )
