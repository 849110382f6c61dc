"""
Streaming bridge for whole-object downloads.

The bucket API only offers "download the object, then read it", while
callers of ``get_stream`` expect a stream object right away. ``open_stream``
hands back a ``BridgedStream`` synchronously and fills it from a background
task in two stages: acquire the download, then pump its bytes through a
single-slot queue. Failures travel through the stream itself and are raised
from the consumer's next read.
"""
import asyncio
import contextlib
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from supadrive.logging_config import setup_logging
from supadrive.storage.exceptions import StorageError, UnknownStorageError, translate_error

logger = setup_logging()

_EOF = object()


class _Failure:
    def __init__(self, error: BaseException):
        self.error = error


class BridgedStream:
    """
    Async byte stream fed by a background download.

    Iterate with ``async for``, drain with ``read()``, and stop early with
    ``aclose()`` (or ``async with``), which cancels the pending download.
    """

    def __init__(self, maxsize: int = 1):
        # A single slot is enough for flow control: the pump waits on the reader
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._task: asyncio.Task | None = None
        self._closed = False

    def __aiter__(self) -> "BridgedStream":
        return self

    async def __anext__(self) -> bytes:
        if self._closed:
            raise StopAsyncIteration

        item = await self._queue.get()
        if item is _EOF:
            self._closed = True
            raise StopAsyncIteration
        if isinstance(item, _Failure):
            self._closed = True
            raise item.error
        return item

    async def __aenter__(self) -> "BridgedStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def closed(self) -> bool:
        return self._closed

    async def read(self) -> bytes:
        """Read all remaining bytes, raising the stream's error if one arrives."""
        return b"".join([chunk async for chunk in self])

    async def aclose(self) -> None:
        """Stop consuming and cancel the background download if still running."""
        self._closed = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task

    async def _feed(self, chunk: bytes) -> None:
        await self._queue.put(chunk)

    async def _finish(self) -> None:
        await self._queue.put(_EOF)

    async def _fail(self, error: BaseException) -> None:
        await self._queue.put(_Failure(error))


async def _iter_bytes(payload: bytes | bytearray | memoryview, chunk_size: int) -> AsyncIterator[bytes]:
    view = memoryview(payload)
    for offset in range(0, len(view), chunk_size):
        yield bytes(view[offset:offset + chunk_size])


def _byte_source(payload: Any, chunk_size: int) -> AsyncIterator[bytes] | None:
    """Return an async chunk iterator over a download payload, or None if it has none."""
    if hasattr(payload, "__aiter__"):
        return payload
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return _iter_bytes(payload, chunk_size)
    return None


async def _pump(
    stream: BridgedStream,
    acquire: Callable[[], Awaitable[Any]],
    path: str,
    bucket: str,
    chunk_size: int,
) -> None:
    try:
        try:
            payload = await acquire()
        except StorageError:
            raise
        except Exception as e:
            raise translate_error(e, path, bucket) from e

        source = _byte_source(payload, chunk_size)
        if source is None:
            raise UnknownStorageError(None, "StreamUnavailable", path)

        async for chunk in source:
            await stream._feed(chunk)

    except Exception as e:
        logger.warning(f"Stream for {bucket}/{path} failed: {str(e)}")
        await stream._fail(e)
    else:
        await stream._finish()


def open_stream(
    acquire: Callable[[], Awaitable[Any]],
    path: str,
    bucket: str,
    chunk_size: int = 64 * 1024,
) -> BridgedStream:
    """
    Return a stream immediately and start filling it in the background.

    Must be called from a running event loop.

    Args:
        acquire: Zero-argument coroutine function performing the download
        path: Bucket key being streamed (for error reporting)
        bucket: Bucket name (for error reporting)
        chunk_size: Size of chunks cut from a bytes payload

    Returns:
        BridgedStream that yields the object's bytes or raises its error
    """
    stream = BridgedStream()
    stream._task = asyncio.get_running_loop().create_task(
        _pump(stream, acquire, path, bucket, chunk_size)
    )
    return stream
