from enum import Enum
from functools import lru_cache

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaGeneration(str, Enum):
    """Which API schema generation a deployment speaks.

    The two generations never coexist in one API, so a store is built for
    exactly one of them.
    """

    METADATAS = "metadatas"  # unified `metadatas` collection (API v3.0)
    LEGACY = "legacy"        # inline `translations` / `urls` objects


class AuthItemSettings(BaseModel):
    """Options that affect how AuthItems are parsed."""

    # Start fetching each IdProvider's discovery document while parsing
    background_fetch_oid_config: bool = True


class Settings(BaseSettings):
    """Client settings loaded from environment variables (``MDS_`` prefix)."""

    api_base_url: str | None = None  # e.g. "https://api.mydatashare.com"
    api_version: str = "v3.0"
    schema_generation: SchemaGeneration = SchemaGeneration.METADATAS

    auth_item: AuthItemSettings = AuthItemSettings()

    # Key-value persistence
    storage_prefix: str = "mds-core-"

    # Outbound HTTP
    http_timeout: float = 30.0

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"            # Root / library-wide
    log_level_http: str = "WARNING"    # httpx, httpcore
    log_level_store: str = "INFO"      # Store, parsers and resolvers
    log_level_auth: str = "INFO"       # Discovery, tokens, session storage

    model_config = SettingsConfigDict(
        env_prefix="MDS_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_legacy(self) -> bool:
        return self.schema_generation == SchemaGeneration.LEGACY

    def endpoint(self, resource: str) -> str:
        """Full URL of a public API resource, e.g. ``auth_items``."""
        base = (self.api_base_url or "").rstrip("/")
        return f"{base}/public/{self.api_version}/{resource}"


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads the environment once."""
    return Settings()
