"""
Conftest for storage tests - in-memory bucket API doubles.
"""
import pytest
from storage3.exceptions import StorageApiError

from supadrive.config import StorageConfig
from supadrive.storage.supabase import SupabaseStorage

BUCKET = "media"


def api_error(code: str, status: int) -> StorageApiError:
    return StorageApiError(f"{code} error", code, status)


class InMemoryBucket:
    """
    Bucket API double keeping objects in a dict.

    Set ``failures[method] = exc`` to make a method raise. Every call is
    recorded in ``calls`` as ``(method, *args)``.
    """

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple] = []

    def _record(self, method: str, *args) -> None:
        self.calls.append((method, *args))
        if method in self.failures:
            raise self.failures[method]

    def _require(self, key: str) -> bytes:
        if key not in self.objects:
            raise api_error("NoSuchKey", 404)
        return self.objects[key]

    async def move(self, from_path, to_path):
        self._record("move", from_path, to_path)
        self.objects[to_path] = self._require(from_path)
        del self.objects[from_path]
        return {"message": "Successfully moved"}

    async def remove(self, paths):
        self._record("remove", paths)
        removed = [{"name": key} for key in paths if self.objects.pop(key, None) is not None]
        return removed

    async def download(self, path):
        self._record("download", path)
        return self._require(path)

    async def create_signed_url(self, path, expires_in):
        self._record("create_signed_url", path, expires_in)
        self._require(path)
        url = f"https://example.supabase.co/storage/v1/object/sign/{BUCKET}/{path}?token=abc"
        return {"signedURL": url}

    async def get_public_url(self, path):
        self._record("get_public_url", path)
        return f"https://example.supabase.co/storage/v1/object/public/{BUCKET}/{path}"

    async def upload(self, path, file, file_options=None):
        self._record("upload", path, file, file_options)
        self.objects[path] = file
        return {"path": path, "fullPath": f"{BUCKET}/{path}"}

    async def list(self, path=None):
        self._record("list", path)
        prefix = f"{path}/" if path else ""
        return [
            {"name": key[len(prefix):], "metadata": {"size": len(data)}}
            for key, data in sorted(self.objects.items())
            if key.startswith(prefix)
        ]


class CopyingBucket(InMemoryBucket):
    """Bucket double that also offers server-side copy and metadata calls."""

    async def copy(self, from_path, to_path):
        self._record("copy", from_path, to_path)
        self.objects[to_path] = self._require(from_path)
        return {"Key": f"{BUCKET}/{to_path}"}

    async def info(self, path):
        self._record("info", path)
        data = self._require(path)
        return {"name": path, "size": len(data), "last_modified": "2026-01-02T03:04:05Z"}


class MissingBucket:
    """Every operation fails as if the bucket had been deleted."""

    def __getattr__(self, name):
        async def fail(*args, **kwargs):
            raise api_error("NoSuchBucket", 404)

        return fail


class InMemoryDriver:
    """Driver double: ``from_`` hands out the configured bucket only."""

    def __init__(self, bucket: InMemoryBucket):
        self.bucket = bucket

    def from_(self, id):
        if id == BUCKET:
            return self.bucket
        return MissingBucket()


@pytest.fixture
def bucket():
    return InMemoryBucket()


@pytest.fixture
def copying_bucket():
    return CopyingBucket()


def make_storage(bucket, root: str = "", bucket_name: str = BUCKET) -> SupabaseStorage:
    config = StorageConfig(
        url="https://example.supabase.co",
        secret="service-role-key",
        bucket=bucket_name,
        root=root,
    )
    return SupabaseStorage(config, driver=InMemoryDriver(bucket))


@pytest.fixture
def storage_factory():
    return make_storage


@pytest.fixture
def storage(bucket):
    return make_storage(bucket)


@pytest.fixture
def rooted_storage(bucket):
    return make_storage(bucket, root="assets")


@pytest.fixture
def make_api_error():
    return api_error
