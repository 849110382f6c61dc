from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings

from supadrive.utils.paths import normalize_root


class Settings(BaseSettings):
    # Supabase project settings
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_SECRET: str = ""

    # Storage settings
    STORAGE_BACKEND: str = "supabase"  # supabase | local
    STORAGE_BUCKET: str = "uploads"
    STORAGE_ROOT: str = ""
    STORAGE_ACL: str | None = None
    STORAGE_BASE_PATH: str = "supadrive/storage/data"  # local backend only

    # Operation settings
    SIGNED_URL_EXPIRY_SECONDS: int = 900
    STREAM_CHUNK_SIZE: int = 64 * 1024  # 64KB

    # Read from environment, then .env; unknown variables are ignored
    model_config = {"env_file": ".env", "extra": "ignore"}


class StorageConfig(BaseModel):
    """Connection settings for a single bucket adapter."""

    url: str
    """Base URL of the Supabase project."""

    secret: str
    """Service key sent as both apiKey and bearer token."""

    bucket: str
    """Name of the bucket every operation targets."""

    root: str = ""
    """Key prefix all relative locations are resolved under."""

    acl: str | None = None
    """Default access control, kept for callers; the bucket API has no per-object ACL."""

    model_config = {"frozen": True}

    @field_validator("root")
    @classmethod
    def _normalize_root(cls, value: str) -> str:
        return normalize_root(value)

    @classmethod
    def from_settings(cls, source: Settings) -> "StorageConfig":
        return cls(
            url=source.SUPABASE_URL,
            secret=source.SUPABASE_SECRET,
            bucket=source.STORAGE_BUCKET,
            root=source.STORAGE_ROOT,
            acl=source.STORAGE_ACL,
        )


settings = Settings()
