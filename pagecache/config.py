"""Library settings using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration loaded from environment variables (``PAGECACHE_*``)."""

    model_config = SettingsConfigDict(
        env_prefix="PAGECACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = False

    # Cache store settings
    cache_enabled: bool = True
    cache_namespace: str = "pages"
    cache_max_entries: int = 10_000
    # None keeps entries until evicted; non-positive values disable storage.
    cache_default_ttl_seconds: int | None = None

    # Paginated sequence defaults
    infinite_initial_size: int = 1
    infinite_revalidate_all: bool = False
    infinite_persist_size: bool = False


settings = Settings()
