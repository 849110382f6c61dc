"""
Storage abstraction layer for bucket-backed file operations.

This package adapts a Supabase storage bucket to a generic async storage
interface, with a local filesystem driver for offline use.
"""

from supadrive.storage.base import Storage
from supadrive.storage.exceptions import (
    BucketApiError,
    BucketNotFoundError,
    ObjectNotFoundError,
    PermissionDeniedError,
    StorageError,
    UnknownStorageError,
)
from supadrive.storage.local import LocalBucketClient
from supadrive.storage.stream import BridgedStream
from supadrive.storage.supabase import SupabaseStorage

__all__ = [
    "Storage",
    "SupabaseStorage",
    "LocalBucketClient",
    "BridgedStream",
    "StorageError",
    "BucketNotFoundError",
    "ObjectNotFoundError",
    "PermissionDeniedError",
    "UnknownStorageError",
    "BucketApiError",
]
