"""Settings loader with hierarchical configuration support."""

import json
import os
from pathlib import Path
from typing import Any

from src.commons.settings.models import Settings


class SettingsLoader:
    """Loads and merges configuration from multiple sources.

    Configuration precedence (highest to lowest):
    1. Environment variables (VIDEO_UPLOADS__SECTION__KEY)
    2. Environment-specific config (appsettings.{env}.json)
    3. Base config (appsettings.json)
    4. Model defaults

    Provider credentials have one more layer on top: the deployment-time
    override constants resolved by ``ProviderSettings.resolve_credentials``.
    """

    ENV_PREFIX = "VIDEO_UPLOADS__"
    CONFIG_DIR_VAR = "VIDEO_UPLOADS__CONFIG_DIR"

    def __init__(
        self,
        config_dir: Path | None = None,
        environment: str | None = None,
    ) -> None:
        """Initialize the settings loader.

        Args:
            config_dir: Directory containing configuration files.
                       Defaults to VIDEO_UPLOADS__CONFIG_DIR or 'config'.
            environment: Environment name (dev, staging, prod).
                        Defaults to VIDEO_UPLOADS__APP__ENVIRONMENT or 'dev'.
        """
        self.config_dir = config_dir or Path(os.getenv(self.CONFIG_DIR_VAR, "config"))
        self.environment = environment or os.getenv(
            "VIDEO_UPLOADS__APP__ENVIRONMENT", "dev"
        )

    def load(self) -> Settings:
        """Load settings with proper precedence.

        Returns:
            Fully resolved Settings instance.
        """
        config = self._load_json("appsettings.json")
        config = self._deep_merge(
            config, self._load_json(f"appsettings.{self.environment}.json")
        )
        config = self._deep_merge(config, self._load_env_vars())
        return Settings(**config)

    def _load_env_vars(self) -> dict[str, Any]:
        """Collect prefixed environment variables into a nested dict.

        VIDEO_UPLOADS__FEATURE__MAX_SIZE_MB=100 becomes
        {"feature": {"max_size_mb": 100}}.
        """
        result: dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX) or key == self.CONFIG_DIR_VAR:
                continue

            key_path = key[len(self.ENV_PREFIX) :].lower().split("__")

            current = result
            for part in key_path[:-1]:
                current = current.setdefault(part, {})

            current[key_path[-1]] = self._coerce_value(value)

        return result

    @staticmethod
    def _coerce_value(value: str) -> Any:
        """Coerce an environment string to bool, int, float or JSON."""
        lowered = value.lower()
        if lowered in ("true", "false"):
            return lowered == "true"

        for cast in (int, float):
            try:
                return cast(value)
            except ValueError:
                continue

        # Lists such as ALLOWED_EXTENSIONS or CORS_ORIGINS
        if value.startswith(("[", "{")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _load_json(self, filename: str) -> dict[str, Any]:
        """Load a JSON config file, or an empty dict if it doesn't exist."""
        path = self.config_dir / filename
        if path.exists():
            with path.open(encoding="utf-8") as f:
                return dict(json.load(f))
        return {}

    def _deep_merge(
        self,
        base: dict[str, Any],
        override: dict[str, Any],
    ) -> dict[str, Any]:
        """Recursively merge override into a copy of base."""
        result = base.copy()
        for key, value in override.items():
            if isinstance(result.get(key), dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


# Global settings instance
_settings: Settings | None = None


def get_settings(
    config_dir: Path | None = None,
    environment: str | None = None,
    *,
    reload: bool = False,
) -> Settings:
    """Get or create the global settings instance.

    Args:
        config_dir: Optional config directory override.
        environment: Optional environment override.
        reload: Force reload settings from files.

    Returns:
        Settings instance.
    """
    global _settings  # noqa: PLW0603
    if _settings is None or reload:
        loader = SettingsLoader(config_dir=config_dir, environment=environment)
        _settings = loader.load()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance. Useful for testing."""
    global _settings  # noqa: PLW0603
    _settings = None
