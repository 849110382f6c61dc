"""
Local filesystem bucket driver.

This module provides a filesystem implementation of the bucket API consumed
by ``SupabaseStorage``, for development and offline use. Each bucket is a
directory under ``base_path``; object keys map to relative file paths.
Failures are raised as ``BucketApiError`` with the same symbolic codes the
Supabase storage API returns.
"""
import mimetypes
import os
import secrets
import shutil
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiofiles

from supadrive.config import settings
from supadrive.storage.exceptions import BucketApiError


def _mtime_iso(stat_result: os.stat_result) -> str:
    return datetime.fromtimestamp(stat_result.st_mtime, timezone.utc).isoformat()


class LocalBucketClient:
    """
    Filesystem-backed stand-in for the Supabase storage client.

    Structure: <base_path>/<bucket>/<key>
    Example: supadrive/storage/data/media/assets/x.png
    """

    def __init__(self, base_path: str | None = None, base_url: str | None = None):
        """
        Initialize local bucket client.

        Args:
            base_path: Directory holding one sub-directory per bucket (default from config)
            base_url: URL prefix for generated URLs; ``file://`` URIs when omitted
        """
        self.base_path = Path(base_path or settings.STORAGE_BASE_PATH)
        self.base_url = base_url.rstrip("/") if base_url else None

    def from_(self, id: str) -> "LocalBucket":
        return LocalBucket(self, id)

    def create_bucket(self, id: str) -> None:
        """Create the bucket directory if it does not exist."""
        (self.base_path / id).mkdir(parents=True, exist_ok=True)


class LocalBucket:
    """Bucket operations on a single bucket directory."""

    def __init__(self, client: LocalBucketClient, bucket: str):
        self.client = client
        self.bucket = bucket
        self.bucket_path = client.base_path / bucket

    def _check_bucket(self) -> None:
        if not self.bucket_path.is_dir():
            raise BucketApiError("NoSuchBucket", f"Bucket not found: {self.bucket}", 404)

    def _object_path(self, key: str) -> Path:
        """
        Map a key to its file path inside the bucket directory.

        Raises:
            BucketApiError: If the bucket is missing or the key escapes it
        """
        self._check_bucket()
        path = (self.bucket_path / key.lstrip("/")).resolve()
        if not path.is_relative_to(self.bucket_path.resolve()):
            raise BucketApiError("InvalidKey", f"Invalid key: {key}", 400)
        return path

    def _existing_object(self, key: str) -> Path:
        path = self._object_path(key)
        if not path.is_file():
            raise BucketApiError("NoSuchKey", f"Object not found: {key}", 404)
        return path

    def _url(self, kind: str, key: str) -> str:
        if self.client.base_url:
            return f"{self.client.base_url}/object/{kind}/{self.bucket}/{key}"
        return self._object_path(key).as_uri()

    async def upload(self, path: str, file: Any, file_options: dict[str, str] | None = None) -> dict[str, Any]:
        """
        Write an object, creating parent directories on the fly.

        Like the Supabase API, an existing object is only replaced when
        ``file_options`` has ``x-upsert: "true"``.
        """
        target = self._object_path(path)
        upsert = (file_options or {}).get("x-upsert", "false") == "true"
        if target.exists() and not upsert:
            raise BucketApiError("Duplicate", f"The resource already exists: {path}", 409)

        data = file.encode("utf-8") if isinstance(file, str) else bytes(file)
        target.parent.mkdir(parents=True, exist_ok=True)

        try:
            async with aiofiles.open(target, "wb") as f:
                await f.write(data)
        except Exception:
            # Clean up partial file on error
            if target.exists():
                target.unlink()
            raise

        return {"path": path, "fullPath": f"{self.bucket}/{path}"}

    async def download(self, path: str) -> bytes:
        source = self._existing_object(path)
        async with aiofiles.open(source, "rb") as f:
            return await f.read()

    async def move(self, from_path: str, to_path: str) -> dict[str, str]:
        source = self._existing_object(from_path)
        target = self._object_path(to_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        source.rename(target)
        return {"message": "Successfully moved"}

    async def copy(self, from_path: str, to_path: str) -> dict[str, str]:
        source = self._existing_object(from_path)
        target = self._object_path(to_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)
        return {"Key": f"{self.bucket}/{to_path}"}

    async def remove(self, paths: list[str]) -> list[dict[str, Any]]:
        """
        Delete objects; keys that do not exist are skipped.

        Returns:
            Entries for the objects actually removed
        """
        removed = []
        for key in paths:
            target = self._object_path(key)
            if not target.is_file():
                continue
            target.unlink()
            removed.append({"name": key, "bucket_id": self.bucket})
        return removed

    async def create_signed_url(self, path: str, expires_in: int) -> dict[str, str]:
        self._existing_object(path)
        token = secrets.token_urlsafe(24)
        expires = int(time.time()) + expires_in
        url = f"{self._url('sign', path)}?token={token}&expires={expires}"
        return {"signedURL": url, "signedUrl": url}

    async def get_public_url(self, path: str) -> str:
        return self._url("public", path)

    async def info(self, path: str) -> dict[str, Any]:
        source = self._existing_object(path)
        stat_result = source.stat()
        return {
            "name": path,
            "bucket_id": self.bucket,
            "size": stat_result.st_size,
            "content_type": mimetypes.guess_type(source.name)[0],
            "last_modified": _mtime_iso(stat_result),
        }

    async def list(self, path: str | None = None) -> list[dict[str, Any]]:
        """
        List the entries directly under a prefix.

        Files carry ``metadata`` with size and modification time; folders
        have ``id`` and ``metadata`` set to None, as in the Supabase API.
        """
        directory = self._object_path(path or "")
        if not directory.is_dir():
            return []

        entries = []
        for child in sorted(directory.iterdir()):
            if child.is_dir():
                entries.append({"name": child.name, "id": None, "metadata": None})
                continue

            stat_result = child.stat()
            entries.append({
                "name": child.name,
                "id": f"{self.bucket}/{child.relative_to(self.bucket_path).as_posix()}",
                "updated_at": _mtime_iso(stat_result),
                "metadata": {
                    "size": stat_result.st_size,
                    "mimetype": mimetypes.guess_type(child.name)[0],
                    "lastModified": _mtime_iso(stat_result),
                },
            })
        return entries
