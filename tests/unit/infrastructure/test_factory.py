"""Unit tests for infrastructure factory."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.commons.security import UploadTokenService
from src.commons.settings.models import (
    MUX_TOKEN_ID_OVERRIDE,
    MUX_TOKEN_SECRET_OVERRIDE,
    ProviderCredentials,
)
from src.domain.exceptions import NoCredentialsError
from src.infrastructure.bindings import DocumentBindingRepository
from src.infrastructure.factory import (
    InfrastructureFactory,
    get_factory,
    reset_factory,
)
from src.infrastructure.providers import MuxVideoProvider


@pytest.fixture(autouse=True)
def reset_factory_before_each():
    """Reset factory singleton before each test."""
    reset_factory()
    yield
    reset_factory()


@pytest.fixture
def mock_settings():
    """Create mock settings."""
    settings = MagicMock()

    # Document DB settings
    settings.document_db.host = "localhost"
    settings.document_db.port = 27017
    settings.document_db.username = ""
    settings.document_db.password = ""
    settings.document_db.database = "test_db"
    settings.document_db.auth_source = "admin"
    settings.document_db.collections.bindings = "bindings"

    # Provider settings
    settings.provider.name = "mux"
    settings.provider.base_url = "https://api.mux.test/video/v1"
    settings.provider.timeout_seconds = 5.0
    settings.provider_credentials.return_value = ProviderCredentials(
        token_id="id", token_secret="secret"
    )

    # Security settings
    settings.security.token_secret = "test-secret"
    settings.security.token_algorithm = "HS256"
    settings.security.token_ttl_seconds = 600

    return settings


class TestInfrastructureFactory:
    """Tests for InfrastructureFactory."""

    def test_factory_init(self, mock_settings):
        """Test factory initialization."""
        factory = InfrastructureFactory(mock_settings)
        assert factory.settings is mock_settings
        assert factory._instances == {}

    @patch("src.infrastructure.factory.MongoDBDocumentDB")
    def test_get_document_db_without_auth(self, mock_mongo_class, mock_settings):
        """Test getting document database without authentication."""
        mock_instance = MagicMock()
        mock_mongo_class.return_value = mock_instance

        factory = InfrastructureFactory(mock_settings)
        doc_db = factory.get_document_db()

        assert doc_db is mock_instance
        mock_mongo_class.assert_called_once_with(
            connection_string="mongodb://localhost:27017",
            database_name="test_db",
        )

    @patch("src.infrastructure.factory.MongoDBDocumentDB")
    def test_get_document_db_with_auth(self, mock_mongo_class, mock_settings):
        """Test getting document database with authentication."""
        mock_settings.document_db.username = "user"
        mock_settings.document_db.password = "pass"

        factory = InfrastructureFactory(mock_settings)
        factory.get_document_db()

        call_args = mock_mongo_class.call_args
        assert "user:pass" in call_args.kwargs["connection_string"]
        assert "authSource=admin" in call_args.kwargs["connection_string"]

    @patch("src.infrastructure.factory.MongoDBDocumentDB")
    def test_get_binding_repository(self, mock_mongo_class, mock_settings):
        factory = InfrastructureFactory(mock_settings)

        repository = factory.get_binding_repository()

        assert isinstance(repository, DocumentBindingRepository)
        assert factory.get_binding_repository() is repository
        mock_mongo_class.assert_called_once()

    def test_get_video_provider(self, mock_settings):
        factory = InfrastructureFactory(mock_settings)

        provider = factory.get_video_provider()

        assert isinstance(provider, MuxVideoProvider)
        assert provider.name == "mux"
        assert factory.get_video_provider() is provider

    @patch("src.infrastructure.factory.MuxVideoProvider")
    def test_get_video_provider_passes_credentials(
        self, mock_mux_class, mock_settings
    ):
        factory = InfrastructureFactory(mock_settings)
        factory.get_video_provider()

        kwargs = mock_mux_class.call_args.kwargs
        assert kwargs["credentials"].token_id == "id"
        assert kwargs["credentials"].token_secret == "secret"
        assert kwargs["base_url"] == "https://api.mux.test/video/v1"
        assert kwargs["timeout"] == 5.0

    def test_get_video_provider_without_credentials(self, mock_settings):
        mock_settings.provider_credentials.return_value = ProviderCredentials()
        factory = InfrastructureFactory(mock_settings)

        with pytest.raises(NoCredentialsError):
            factory.get_video_provider()

    def test_get_video_provider_unsupported(self, mock_settings):
        mock_settings.provider.name = "unsupported"
        factory = InfrastructureFactory(mock_settings)

        with pytest.raises(ValueError, match="Unsupported video provider"):
            factory.get_video_provider()

    def test_credentials_override_reaches_provider(self, monkeypatch):
        from src.commons.settings.models import Settings

        monkeypatch.setenv(MUX_TOKEN_ID_OVERRIDE, "env-id")
        monkeypatch.setenv(MUX_TOKEN_SECRET_OVERRIDE, "env-secret")

        with patch("src.infrastructure.factory.MuxVideoProvider") as mock_mux_class:
            InfrastructureFactory(Settings()).get_video_provider()

        credentials = mock_mux_class.call_args.kwargs["credentials"]
        assert credentials.token_id == "env-id"
        assert credentials.token_secret == "env-secret"

    def test_get_token_service(self, mock_settings):
        factory = InfrastructureFactory(mock_settings)

        service = factory.get_token_service()

        assert isinstance(service, UploadTokenService)
        assert service.ttl_seconds == 600
        assert factory.get_token_service() is service

    async def test_close_all(self, mock_settings):
        """Test closing all services."""
        factory = InfrastructureFactory(mock_settings)

        sync_service = MagicMock()
        sync_service.close = MagicMock()
        async_service = MagicMock()
        async_service.close = AsyncMock()
        factory._instances["sync"] = sync_service
        factory._instances["async"] = async_service

        await factory.close_all()

        sync_service.close.assert_called_once()
        async_service.close.assert_awaited_once()
        assert factory._instances == {}

    async def test_close_all_continues_after_failure(self, mock_settings):
        factory = InfrastructureFactory(mock_settings)

        failing = MagicMock()
        failing.close = AsyncMock(side_effect=RuntimeError("boom"))
        other = MagicMock()
        other.close = AsyncMock()
        factory._instances["failing"] = failing
        factory._instances["other"] = other

        await factory.close_all()

        other.close.assert_awaited_once()
        assert factory._instances == {}


class TestFactorySingleton:
    """Tests for factory singleton functions."""

    def test_get_factory_requires_settings_first_call(self):
        """Test that settings are required on first call."""
        with pytest.raises(ValueError, match="Settings required"):
            get_factory()

    def test_get_factory_returns_same_instance(self, mock_settings):
        """Test that same instance is returned."""
        factory1 = get_factory(mock_settings)
        factory2 = get_factory()

        assert factory1 is factory2

    def test_reset_factory(self, mock_settings):
        """Test factory reset."""
        factory1 = get_factory(mock_settings)
        reset_factory()

        with pytest.raises(ValueError):
            get_factory()

        factory2 = get_factory(mock_settings)
        assert factory1 is not factory2
