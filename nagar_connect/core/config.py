from __future__ import annotations

from functools import lru_cache
from typing import ClassVar, List, Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Process-wide configuration, read once from the environment / .env.

    Adapters receive this object at construction and check their own keys,
    so a missing credential fails at startup instead of mid-request.
    """

    app_name: str = Field("Nagar-Connect", alias="APP_NAME")
    env: str = Field("dev", alias="ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    mongo_uri: Optional[str] = Field(None, alias="MONGO_URI")
    mongo_db: str = Field("nagar_connect", alias="MONGO_DB")

    jwt_secret: Optional[str] = Field(None, alias="JWT_SECRET")
    jwt_ttl_seconds: int = Field(7 * 24 * 3600, alias="JWT_TTL_SECONDS")

    cors_origins: str = Field(
        "http://localhost:3000,http://127.0.0.1:3000",
        alias="CORS_ORIGINS",
    )

    mapbox_access_token: Optional[str] = Field(None, alias="MAPBOX_ACCESS_TOKEN")
    mapbox_base_url: str = Field(
        "https://api.mapbox.com/geocoding/v5/mapbox.places",
        alias="MAPBOX_BASE_URL",
    )

    gemini_api_key: Optional[str] = Field(None, alias="GEMINI_API_KEY")
    gemini_model: str = Field("gemini-2.0-flash", alias="GEMINI_MODEL")

    cloudinary_cloud_name: Optional[str] = Field(None, alias="CLOUDINARY_CLOUD_NAME")
    cloudinary_upload_preset: str = Field("nagar_connect", alias="CLOUDINARY_UPLOAD_PRESET")
    cloudinary_api_key: Optional[str] = Field(None, alias="CLOUDINARY_API_KEY")
    cloudinary_api_secret: Optional[str] = Field(None, alias="CLOUDINARY_API_SECRET")

    http_timeout_seconds: float = Field(10.0, alias="HTTP_TIMEOUT_SECONDS")
    classification_threshold: float = Field(0.7, alias="CLASSIFICATION_THRESHOLD")
    max_attachments: int = Field(5, alias="MAX_ATTACHMENTS")
    max_upload_bytes: int = Field(10 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    REQUIRED: ClassVar[Tuple[Tuple[str, str], ...]] = (
        ("mongo_uri", "MONGO_URI"),
        ("jwt_secret", "JWT_SECRET"),
        ("mapbox_access_token", "MAPBOX_ACCESS_TOKEN"),
        ("cloudinary_cloud_name", "CLOUDINARY_CLOUD_NAME"),
    )

    def missing_required(self) -> List[str]:
        return [env for attr, env in self.REQUIRED if not getattr(self, attr)]

    @property
    def cors_origins_list(self) -> List[str]:
        return [x.strip().rstrip("/") for x in self.cors_origins.split(",") if x.strip()]

    @property
    def ai_enabled(self) -> bool:
        return bool(self.gemini_api_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
