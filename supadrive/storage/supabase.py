"""
Supabase bucket storage implementation.

This module adapts a Supabase storage bucket to the generic ``Storage``
interface: locations are resolved under the configured root prefix, bucket
API calls are issued through an injected driver, and provider errors are
translated into the portable ``StorageError`` taxonomy.
"""
import inspect
from datetime import datetime
from functools import partial
from typing import Any, AsyncIterator

from supadrive.config import StorageConfig, settings
from supadrive.logging_config import setup_logging
from supadrive.schemas.storage import (
    ContentResponse,
    DeleteResponse,
    ExistsResponse,
    FileListResponse,
    Response,
    SignedUrlResponse,
    StatResponse,
)
from supadrive.storage.base import Content, Storage
from supadrive.storage.client import BucketApi, StorageDriver, create_driver
from supadrive.storage.exceptions import StorageError, is_not_found, translate_error
from supadrive.storage.stream import BridgedStream, open_stream
from supadrive.utils.datetime import parse_timestamp, utc_now
from supadrive.utils.paths import full_path

logger = setup_logging()


def _field(source: Any, *names: str) -> Any:
    """Return the first present field among ``names`` from a dict or object."""
    for name in names:
        if isinstance(source, dict):
            value = source.get(name)
        else:
            value = getattr(source, name, None)
        if value is not None:
            return value
    return None


async def _materialize(payload: Any) -> bytes:
    """Collect a download payload into bytes."""
    if payload is None:
        return b""
    if hasattr(payload, "__aiter__"):
        return b"".join([chunk async for chunk in payload])
    return bytes(payload)


async def _read_content(content: Content) -> bytes:
    """Turn any accepted upload content into bytes."""
    if isinstance(content, str):
        return content.encode("utf-8")
    if isinstance(content, (bytes, bytearray, memoryview)):
        return bytes(content)
    if hasattr(content, "__aiter__"):
        return b"".join([chunk async for chunk in content])

    # Sync or async (aiofiles) file object
    data = content.read()
    if inspect.isawaitable(data):
        data = await data
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


class SupabaseStorage(Storage):
    """
    Storage driver backed by a single Supabase bucket.

    Every public operation takes a location relative to ``config.root`` and
    resolves it to a bucket key, so the root prefix confines the adapter like
    a chroot. The driver handle is created once (or injected) and owned for
    the adapter's lifetime.

    Example:
        storage = SupabaseStorage(StorageConfig(url=..., secret=..., bucket="media", root="assets"))
        await storage.put("x.png", data)        # key "assets/x.png"
        await storage.move("x.png", "y.png")    # keys "assets/x.png" -> "assets/y.png"
    """

    def __init__(
        self,
        config: StorageConfig,
        driver: StorageDriver | None = None,
        signed_url_expiry: int | None = None,
        chunk_size: int | None = None,
    ):
        """
        Initialize the bucket adapter.

        Args:
            config: Connection settings for the bucket
            driver: Provider handle; built from ``config`` when omitted
            signed_url_expiry: Signed URL lifetime in seconds (default from config)
            chunk_size: Chunk size for streamed reads (default from config)
        """
        self.config = config
        self._driver = driver if driver is not None else create_driver(config)
        self.signed_url_expiry = signed_url_expiry or settings.SIGNED_URL_EXPIRY_SECONDS
        self.chunk_size = chunk_size or settings.STREAM_CHUNK_SIZE

    @property
    def bucket(self) -> str:
        return self.config.bucket

    @property
    def root(self) -> str:
        return self.config.root

    def driver(self) -> StorageDriver:
        """Return the underlying provider handle."""
        return self._driver

    def _full_path(self, location: str) -> str:
        return full_path(self.config.root, location)

    def _bucket(self) -> BucketApi:
        return self._driver.from_(self.config.bucket)

    def _translate(self, error: Exception, key: str) -> StorageError:
        translated = translate_error(error, key, self.config.bucket)
        logger.error(
            f"Storage operation failed: bucket={self.config.bucket}, "
            f"key={key}, error={type(translated).__name__}: {str(error)}"
        )
        return translated

    async def _copy_key(self, src: str, dest: str) -> Response:
        bucket = self._bucket()
        try:
            if hasattr(bucket, "copy"):
                data = await bucket.copy(src, dest)
            else:
                # No server-side copy: duplicate through the client
                payload = await _materialize(await bucket.download(src))
                data = await bucket.upload(dest, payload)
        except StorageError:
            raise
        except Exception as e:
            raise self._translate(e, src) from e
        return Response(raw=data)

    async def _delete_key(self, key: str) -> DeleteResponse:
        try:
            data = await self._bucket().remove([key])
        except StorageError:
            raise
        except Exception as e:
            raise self._translate(e, key) from e
        return DeleteResponse(raw=data, was_deleted=None)

    async def copy(self, src: str, dest: str) -> Response:
        """Copy a file to a location."""
        return await self._copy_key(self._full_path(src), self._full_path(dest))

    async def delete(self, location: str) -> DeleteResponse:
        """Delete existing file."""
        return await self._delete_key(self._full_path(location))

    async def exists(self, location: str) -> ExistsResponse:
        """
        Determine if a file exists by attempting to download it.

        A not-found response from the provider yields ``exists=False`` with
        the provider error as ``raw``.
        """
        key = self._full_path(location)
        try:
            data = await self._bucket().download(key)
        except StorageError:
            raise
        except Exception as e:
            if is_not_found(e):
                return ExistsResponse(exists=False, raw=e)
            raise self._translate(e, key) from e
        return ExistsResponse(exists=True, raw=data)

    async def get(self, location: str, encoding: str = "utf-8") -> ContentResponse[str]:
        """Return the file contents as text."""
        result = await self.get_buffer(location)
        return ContentResponse[str](content=result.content.decode(encoding), raw=result.raw)

    async def get_buffer(self, location: str) -> ContentResponse[bytes]:
        """Return the file contents as bytes."""
        key = self._full_path(location)
        try:
            data = await self._bucket().download(key)
            content = await _materialize(data)
        except StorageError:
            raise
        except Exception as e:
            raise self._translate(e, key) from e
        return ContentResponse[bytes](content=content, raw=data)

    async def get_signed_url(self, location: str, options: dict[str, Any] | None = None) -> SignedUrlResponse:
        """
        Return a signed URL for an existing file.

        ``options`` is accepted for interface compatibility and not used;
        the URL always expires after ``signed_url_expiry`` seconds.
        """
        key = self._full_path(location)
        try:
            data = await self._bucket().create_signed_url(key, self.signed_url_expiry)
        except StorageError:
            raise
        except Exception as e:
            raise self._translate(e, key) from e
        signed_url = _field(data, "signedURL", "signedUrl", "signed_url") or ""
        return SignedUrlResponse(signed_url=signed_url, raw=data)

    async def get_stat(self, location: str) -> StatResponse:
        """
        Return file's size and modification date.

        Uses the bucket's metadata call when the driver offers one. Otherwise
        the object is downloaded to measure it and ``modified`` is the
        current time, since a download carries no timestamp.
        """
        key = self._full_path(location)
        bucket = self._bucket()
        try:
            if hasattr(bucket, "info"):
                info = await bucket.info(key)
                metadata = _field(info, "metadata") or {}
                size = _field(info, "size")
                if size is None:
                    size = _field(metadata, "size", "contentLength")
                if size is not None:
                    modified: datetime | None = parse_timestamp(
                        _field(info, "last_modified", "updated_at")
                        or _field(metadata, "lastModified")
                    )
                    return StatResponse(size=int(size), modified=modified or utc_now(), raw=info)

            data = await bucket.download(key)
            content = await _materialize(data)
        except StorageError:
            raise
        except Exception as e:
            raise self._translate(e, key) from e
        return StatResponse(size=len(content), modified=utc_now(), raw=data)

    def get_stream(self, location: str, range: tuple[int, int] | None = None) -> BridgedStream:
        """
        Return the stream for the given file.

        Returns before the download starts; download failures are raised
        from the stream. ``range`` is accepted and not used.

        Callers must finish reading, call ``aclose()`` or use the stream as
        ``async with``; an abandoned stream keeps its download task waiting
        on the full queue until the event loop shuts down.
        """
        key = self._full_path(location)
        return open_stream(
            partial(self._bucket().download, key),
            key,
            self.config.bucket,
            chunk_size=self.chunk_size,
        )

    async def get_url(self, location: str) -> str:
        """
        Return the public URL for a given file.

        Provider errors are raised unmodified.
        """
        url = self._bucket().get_public_url(self._full_path(location))
        if inspect.isawaitable(url):
            url = await url
        return url or ""

    async def move(self, src: str, dest: str) -> Response:
        """
        Move file from one location to another.

        Runs ``copy`` then ``delete`` on the resolved keys, one after the
        other. There is no rollback: if the delete fails after a successful
        copy, the object exists at both keys and the delete error is raised.
        """
        src_key = self._full_path(src)
        dest_key = self._full_path(dest)

        logger.info(f"Moving object in bucket {self.config.bucket}: {src_key} -> {dest_key}")
        await self._copy_key(src_key, dest_key)
        try:
            await self._delete_key(src_key)
        except StorageError:
            logger.warning(
                f"Move left a duplicate: copied {src_key} to {dest_key} "
                f"but could not delete the source"
            )
            raise
        return Response(raw=None)

    async def put(self, location: str, content: Content, content_type: str | None = None) -> Response:
        """
        Creates a new file.

        Directory-like prefixes are implied by the key, so missing
        "directories" need no separate creation.
        """
        key = self._full_path(location)
        body = await _read_content(content)
        file_options = {"content-type": content_type} if content_type else None
        try:
            data = await self._bucket().upload(key, body, file_options=file_options)
        except StorageError:
            raise
        except Exception as e:
            raise self._translate(e, key) from e
        return Response(raw=data)

    async def _list_page(self, prefix: str, continuation_token: str | None) -> tuple[list[Any], str | None]:
        """
        Fetch one page of listing results.

        Returns the entries and the token for the next page. The bucket API
        response has no continuation token, so this always ends the listing.
        """
        data = await self._bucket().list(prefix)
        return list(data or []), None

    async def flat_list(self, prefix: str = "") -> AsyncIterator[FileListResponse]:
        """Iterate over all files in the bucket under ``prefix``."""
        key_prefix = self._full_path(prefix)
        continuation_token: str | None = None

        while True:
            try:
                entries, continuation_token = await self._list_page(key_prefix, continuation_token)
            except StorageError:
                raise
            except Exception as e:
                raise self._translate(e, key_prefix) from e

            for entry in entries:
                yield FileListResponse(raw=entry, path=str(_field(entry, "name") or ""))

            if not continuation_token:
                break
