"""Infrastructure factory for creating service instances from configuration."""

from typing import Any, cast

from src.commons.infrastructure.documentdb import DocumentDBBase, MongoDBDocumentDB
from src.commons.security import UploadTokenService
from src.commons.settings.models import Settings
from src.commons.telemetry import get_logger
from src.domain.exceptions import NoCredentialsError
from src.infrastructure.bindings import BindingRepositoryBase, DocumentBindingRepository
from src.infrastructure.providers import (
    MuxStatusMapper,
    MuxVideoProvider,
    VideoProviderBase,
)

logger = get_logger(__name__)


class InfrastructureFactory:
    """Factory for creating infrastructure service instances.

    Creates concrete implementations based on configuration settings.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize factory with settings.

        Args:
            settings: Application settings.
        """
        self._settings = settings
        self._instances: dict[str, Any] = {}

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_document_db(self) -> DocumentDBBase:
        """Get document database instance.

        Returns:
            Configured document database provider.
        """
        if "document_db" not in self._instances:
            doc_settings = self._settings.document_db
            if doc_settings.username and doc_settings.password:
                connection_string = (
                    f"mongodb://{doc_settings.username}:{doc_settings.password}"
                    f"@{doc_settings.host}:{doc_settings.port}"
                    f"/?authSource={doc_settings.auth_source}"
                )
            else:
                connection_string = f"mongodb://{doc_settings.host}:{doc_settings.port}"
            self._instances["document_db"] = MongoDBDocumentDB(
                connection_string=connection_string,
                database_name=doc_settings.database,
            )
        return cast("DocumentDBBase", self._instances["document_db"])

    def get_binding_repository(self) -> BindingRepositoryBase:
        """Get the content/video binding repository."""
        if "bindings" not in self._instances:
            self._instances["bindings"] = DocumentBindingRepository(
                document_db=self.get_document_db(),
                collection=self._settings.document_db.collections.bindings,
            )
        return cast("BindingRepositoryBase", self._instances["bindings"])

    def get_video_provider(self) -> VideoProviderBase:
        """Get the media provider client.

        Credentials are resolved once here and handed to the provider
        explicitly.

        Returns:
            Configured provider.

        Raises:
            NoCredentialsError: If no credential pair is configured.
            ValueError: If provider is not supported.
        """
        if "video_provider" not in self._instances:
            provider_settings = self._settings.provider
            credentials = self._settings.provider_credentials()
            if not credentials.is_configured:
                raise NoCredentialsError(provider_settings.name)

            if provider_settings.name == "mux":
                self._instances["video_provider"] = MuxVideoProvider(
                    credentials=credentials,
                    base_url=provider_settings.base_url,
                    timeout=provider_settings.timeout_seconds,
                    status_mapper=MuxStatusMapper(),
                )
            else:
                raise ValueError(
                    f"Unsupported video provider: {provider_settings.name}"
                )

        return cast("VideoProviderBase", self._instances["video_provider"])

    def get_token_service(self) -> UploadTokenService:
        """Get the upload/submit token issuer."""
        if "token_service" not in self._instances:
            security = self._settings.security
            self._instances["token_service"] = UploadTokenService(
                secret=security.token_secret,
                algorithm=security.token_algorithm,
                ttl_seconds=security.token_ttl_seconds,
            )
        return cast("UploadTokenService", self._instances["token_service"])

    async def close_all(self) -> None:
        """Close all service connections."""
        for name, instance in self._instances.items():
            if hasattr(instance, "close"):
                try:
                    close_result = instance.close()
                    if hasattr(close_result, "__await__"):
                        await close_result
                except Exception as e:
                    logger.warning(
                        f"Failed to close {name}",
                        extra={"error": str(e)},
                    )

        self._instances.clear()


class _FactoryHolder:
    """Holder for the factory singleton to avoid global statements."""

    instance: InfrastructureFactory | None = None


def get_factory(settings: Settings | None = None) -> InfrastructureFactory:
    """Get or create the infrastructure factory singleton.

    Args:
        settings: Settings to use. Required on first call.

    Returns:
        Infrastructure factory instance.

    Raises:
        ValueError: If settings not provided on first call.
    """
    if _FactoryHolder.instance is None:
        if settings is None:
            raise ValueError("Settings required to initialize factory")
        _FactoryHolder.instance = InfrastructureFactory(settings)

    return _FactoryHolder.instance


def reset_factory() -> None:
    """Reset the factory singleton (for testing)."""
    _FactoryHolder.instance = None
