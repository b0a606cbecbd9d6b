"""Pydantic settings models for application configuration."""

import os
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Deployment-time constants that override stored provider credentials
MUX_TOKEN_ID_OVERRIDE = "VIDEO_UPLOADS_MUX_TOKEN_ID"
MUX_TOKEN_SECRET_OVERRIDE = "VIDEO_UPLOADS_MUX_TOKEN_SECRET"


class AppSettings(BaseModel):
    """Application-level settings."""

    name: str = "video-comment-uploads"
    version: str = "0.1.0"
    environment: Literal["dev", "staging", "prod"] = "dev"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class ServerSettings(BaseModel):
    """HTTP server settings."""

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    workers: int = Field(default=1, ge=1, le=32)
    reload: bool = False
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    api_prefix: str = "/v1"
    docs_enabled: bool = True
    public_url: str = "http://localhost:8000"


class FeatureSettings(BaseModel):
    """Host-owned switches for the video attachment feature."""

    enabled: bool = True
    allow_guests: bool = True
    max_size_mb: int = Field(default=50, ge=1, le=2048)
    allowed_extensions: list[str] = Field(
        default_factory=lambda: [
            "mp4",
            "mov",
            "webm",
            "mkv",
            "avi",
            "m4v",
            "ogv",
            "ts",
            "mts",
        ]
    )

    @property
    def max_size_bytes(self) -> int:
        """Maximum upload size in bytes."""
        return self.max_size_mb * 1024 * 1024


class ProviderCredentials(BaseModel):
    """Resolved credential pair for the media provider."""

    token_id: str = ""
    token_secret: str = Field(default="", repr=False)

    @property
    def is_configured(self) -> bool:
        """Whether both halves of the credential pair are present."""
        return bool(self.token_id) and bool(self.token_secret)


class ProviderSettings(BaseModel):
    """Media provider settings."""

    name: Literal["mux"] = "mux"
    base_url: str = "https://api.mux.com/video/v1"
    mux_token_id: str = ""
    mux_token_secret: str = Field(default="", repr=False)
    timeout_seconds: float = 15.0
    cors_origin: str | None = None
    upload_timeout_seconds: int = Field(default=3600, ge=60)

    def resolve_credentials(self) -> ProviderCredentials:
        """Resolve the credential pair, honouring deployment-time overrides.

        The override constants take precedence over stored values so secrets
        can be kept out of configuration files.

        Returns:
            The effective credential pair.
        """
        token_id = os.getenv(MUX_TOKEN_ID_OVERRIDE)
        token_secret = os.getenv(MUX_TOKEN_SECRET_OVERRIDE)
        return ProviderCredentials(
            token_id=token_id if token_id is not None else self.mux_token_id,
            token_secret=(
                token_secret if token_secret is not None else self.mux_token_secret
            ),
        )


class PollingSettings(BaseModel):
    """Client-side status polling settings."""

    interval_seconds: float = Field(default=3.0, gt=0)
    max_attempts: int = Field(default=60, ge=1)


class SecuritySettings(BaseModel):
    """Upload token settings."""

    token_secret: str = Field(default="change-me", repr=False)
    token_algorithm: str = "HS256"
    token_ttl_seconds: int = Field(default=12 * 3600, ge=60)
    user_header: str = "X-User-Id"
    admin_header: str = "X-Admin-Token"
    admin_token: str = Field(default="", repr=False)


class DocumentCollectionSettings(BaseModel):
    """Document DB collection names."""

    bindings: str = "content_video_bindings"


class DocumentDBSettings(BaseModel):
    """Document database settings (MongoDB)."""

    provider: Literal["mongodb"] = "mongodb"
    host: str = "localhost"
    port: int = 27017
    username: str = ""
    password: str = Field(default="", repr=False)
    database: str = "video_uploads"
    auth_source: str = "admin"
    collections: DocumentCollectionSettings = Field(
        default_factory=DocumentCollectionSettings
    )


class TelemetrySettings(BaseModel):
    """Telemetry and observability settings."""

    enabled: bool = True
    log_format: Literal["json", "text"] = "json"
    log_level: str = "INFO"


class RateLimitSettings(BaseModel):
    """Fixed-window rate limiting for upload slot requests."""

    enabled: bool = True
    requests: int = Field(default=10, ge=1)
    window_seconds: int = Field(default=60, ge=1)


class Settings(BaseSettings):
    """Root settings container with environment loading."""

    app: AppSettings = Field(default_factory=AppSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    feature: FeatureSettings = Field(default_factory=FeatureSettings)
    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    polling: PollingSettings = Field(default_factory=PollingSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    document_db: DocumentDBSettings = Field(default_factory=DocumentDBSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)
    rate_limiting: RateLimitSettings = Field(default_factory=RateLimitSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VIDEO_UPLOADS__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    def provider_credentials(self) -> ProviderCredentials:
        """Single accessor through which all credential lookups go."""
        return self.provider.resolve_credentials()

    def has_provider_credentials(self) -> bool:
        """Whether the provider can be called at all."""
        return self.provider_credentials().is_configured
