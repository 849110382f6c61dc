"""
Storage-specific exceptions.

Provider errors from the bucket API are translated into this small portable
taxonomy at the boundary of every provider call. Each exception keeps the
provider error as ``cause`` together with the location involved.
"""
from typing import Any


class StorageError(Exception):
    """Base exception for storage operations."""

    def __init__(self, message: str, cause: BaseException | None = None, path: str | None = None):
        self.cause = cause
        self.path = path
        super().__init__(message)


class BucketNotFoundError(StorageError):
    """Raised when the configured bucket does not exist."""

    def __init__(self, cause: BaseException | None, bucket: str, path: str | None = None):
        self.bucket = bucket
        super().__init__(f"Bucket not found: {bucket}", cause=cause, path=path)


class ObjectNotFoundError(StorageError):
    """Raised when requested object is not found in the bucket."""

    def __init__(self, cause: BaseException | None, path: str):
        super().__init__(f"Object not found: {path}", cause=cause, path=path)


class PermissionDeniedError(StorageError):
    """Raised when access to the bucket or object has been revoked."""

    def __init__(self, cause: BaseException | None, path: str):
        super().__init__(f"Permission denied: {path}", cause=cause, path=path)


class UnknownStorageError(StorageError):
    """Raised for any provider error without a portable counterpart."""

    def __init__(self, cause: BaseException | None, name: str, path: str):
        self.name = name
        super().__init__(f"Storage error {name} on {path}", cause=cause, path=path)


class BucketApiError(Exception):
    """
    Error raised by bucket API implementations shipped with this package.

    ``name`` carries the symbolic signal used for classification, mirroring
    the codes returned by the Supabase storage API.
    """

    def __init__(self, name: str, message: str, status_code: int | None = None):
        self.name = name
        self.status_code = status_code
        super().__init__(message)


def _payload(error: BaseException) -> dict[str, Any]:
    # Older storage3 releases raise StorageException with the decoded JSON body
    if error.args and isinstance(error.args[0], dict):
        return error.args[0]
    return {}


def error_signal(error: BaseException) -> str:
    """
    Return the symbolic name identifying a provider error.

    Checked in order: the ``code`` attribute (storage3's ``StorageApiError``),
    a ``name`` attribute unless it only repeats the class name, the ``code``
    and ``error`` keys of a dict payload, then the exception class name.
    """
    code = getattr(error, "code", None)
    if isinstance(code, str) and code:
        return code

    name = getattr(error, "name", None)
    if isinstance(name, str) and name and name != type(error).__name__:
        return name

    payload = _payload(error)
    for key in ("code", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value

    return type(error).__name__


def error_status(error: BaseException) -> int | None:
    """Return the HTTP status reported by a provider error, if any."""
    status = None
    for attr in ("status_code", "statusCode", "status"):
        status = getattr(error, attr, None)
        if status is not None:
            break
    if status is None:
        status = _payload(error).get("statusCode")
    try:
        return int(status) if status is not None else None
    except (TypeError, ValueError):
        return None


def is_not_found(error: BaseException) -> bool:
    """True when the provider reported a missing object (a NoSuchKey or 404 response)."""
    signal = error_signal(error)
    if signal == "NoSuchKey":
        return True
    return error_status(error) == 404 and signal != "NoSuchBucket"


def translate_error(error: BaseException, path: str, bucket: str) -> StorageError:
    """
    Map a provider error to the portable storage taxonomy.

    Args:
        error: Exception raised by the bucket API
        path: Location the failing call operated on
        bucket: Configured bucket name

    Returns:
        StorageError subclass wrapping ``error``
    """
    if isinstance(error, StorageError):
        return error

    signal = error_signal(error)
    if signal == "NoSuchBucket":
        translated: StorageError = BucketNotFoundError(error, bucket, path)
    elif signal == "NoSuchKey":
        translated = ObjectNotFoundError(error, path)
    elif signal == "AllAccessDisabled":
        translated = PermissionDeniedError(error, path)
    else:
        translated = UnknownStorageError(error, signal, path)

    translated.__cause__ = error
    return translated
