"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache
from typing import Literal, Optional


class Settings(BaseSettings):
    """Centralised settings — no hardcoded values anywhere else."""

    # Hosted backend
    database_url: str = Field(..., env="DATABASE_URL")

    # Data access
    # fallback: local store wins whenever it holds records (demo shim)
    # demo: local store only, live: hosted backend only
    data_mode: Literal["fallback", "demo", "live"] = Field("fallback", env="DATA_MODE")
    local_store_backend: Literal["memory", "file"] = Field("file", env="LOCAL_STORE_BACKEND")
    local_store_path: str = Field("./data/local_store", env="LOCAL_STORE_PATH")

    # Public URLs
    app_public_url: str = Field("http://localhost:3000", env="APP_PUBLIC_URL")

    # Sessions
    session_secret: str = Field("dev-secret-change-me", env="SESSION_SECRET")
    session_ttl_hours: int = Field(8, env="SESSION_TTL_HOURS")
    session_cookie_name: str = Field("mm_session", env="SESSION_COOKIE_NAME")

    # Third-party places lookup
    google_places_api_key: Optional[str] = Field(None, env="GOOGLE_PLACES_API_KEY")

    # Object storage
    storage_backend: Literal["local", "azure"] = Field("local", env="STORAGE_BACKEND")
    media_root: str = Field("./data/media", env="MEDIA_ROOT")
    media_url: str = Field("http://localhost:8000/media", env="MEDIA_URL")
    azure_connection_string: Optional[str] = Field(None, env="AZURE_CONNECTION_STRING")
    logo_container: str = Field("restaurant-logos", env="LOGO_CONTAINER")
    qr_container: str = Field("qr-codes", env="QR_CONTAINER")
    logo_max_bytes: int = Field(5 * 1024 * 1024, env="LOGO_MAX_BYTES")

    # Registration
    registration_timeout_seconds: float = Field(15.0, env="REGISTRATION_TIMEOUT_SECONDS")

    # Security
    allowed_origins: str = Field(
        "http://localhost:3000",
        env="ALLOWED_ORIGINS",
    )

    # App
    app_env: str = Field("development", env="APP_ENV")
    log_level: str = Field("INFO", env="LOG_LEVEL")

    # Derived
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list."""
        return [o.strip() for o in self.allowed_origins.split(",")]

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()


settings = get_settings()
