"""Settings management module."""

from src.commons.settings.loader import SettingsLoader, get_settings, reset_settings
from src.commons.settings.models import (
    AppSettings,
    DocumentCollectionSettings,
    DocumentDBSettings,
    FeatureSettings,
    PollingSettings,
    ProviderCredentials,
    ProviderSettings,
    RateLimitSettings,
    SecuritySettings,
    ServerSettings,
    Settings,
    TelemetrySettings,
)

__all__ = [
    # Loader
    "SettingsLoader",
    "get_settings",
    "reset_settings",
    # Main settings
    "Settings",
    "AppSettings",
    "ServerSettings",
    # Feature & provider
    "FeatureSettings",
    "ProviderSettings",
    "ProviderCredentials",
    "PollingSettings",
    "SecuritySettings",
    # Storage
    "DocumentDBSettings",
    "DocumentCollectionSettings",
    # Telemetry & Rate Limiting
    "TelemetrySettings",
    "RateLimitSettings",
]
