"""
Storage dependency factory.

This module builds the storage adapter described by the environment, so
callers depend on the ``Storage`` interface rather than a concrete driver.
"""
from supadrive.config import Settings, StorageConfig, settings
from supadrive.storage.base import Storage
from supadrive.storage.local import LocalBucketClient
from supadrive.storage.supabase import SupabaseStorage


def get_storage(source: Settings | None = None) -> Storage:
    """
    Return storage adapter based on configuration.

    ``STORAGE_BACKEND=supabase`` talks to the Supabase storage API;
    ``STORAGE_BACKEND=local`` serves the same bucket from the filesystem.

    Args:
        source: Settings to read (default: process settings)

    Returns:
        Storage instance

    Raises:
        ValueError: If STORAGE_BACKEND is not supported
    """
    source = source or settings
    config = StorageConfig.from_settings(source)

    if source.STORAGE_BACKEND == "supabase":
        driver = None
    elif source.STORAGE_BACKEND == "local":
        driver = LocalBucketClient(base_path=source.STORAGE_BASE_PATH)
        driver.create_bucket(config.bucket)
    else:
        raise ValueError(f"Unknown storage backend: {source.STORAGE_BACKEND}")

    return SupabaseStorage(
        config,
        driver=driver,
        signed_url_expiry=source.SIGNED_URL_EXPIRY_SECONDS,
        chunk_size=source.STREAM_CHUNK_SIZE,
    )
