"""Unit tests for DirectUploadService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.application.dtos.uploads import CreateUploadRequest
from src.application.services.direct_upload import DirectUploadService
from src.commons.settings.models import (
    MUX_TOKEN_ID_OVERRIDE,
    MUX_TOKEN_SECRET_OVERRIDE,
    FeatureSettings,
    ProviderSettings,
    ServerSettings,
    Settings,
)
from src.domain.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    MissingParameterError,
    NoCredentialsError,
    ProviderUnavailableError,
)
from src.domain.models.binding import ContentVideoBinding
from src.domain.models.upload import (
    ProviderUploadHandle,
    UploadStatus,
    UploadStatusResult,
)

MB = 1024 * 1024

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def no_credential_overrides(monkeypatch):
    monkeypatch.delenv(MUX_TOKEN_ID_OVERRIDE, raising=False)
    monkeypatch.delenv(MUX_TOKEN_SECRET_OVERRIDE, raising=False)


@pytest.fixture
def settings():
    return Settings(
        feature=FeatureSettings(max_size_mb=50),
        provider=ProviderSettings(mux_token_id="id", mux_token_secret="secret"),
        server=ServerSettings(public_url="https://forum.test"),
    )


@pytest.fixture
def mock_provider():
    provider = MagicMock()
    provider.create_direct_upload = AsyncMock(
        return_value=ProviderUploadHandle(
            upload_id="up1",
            upload_url="https://storage.test/up1",
            expires_at="3600",
        )
    )
    provider.get_upload_status = AsyncMock(
        return_value=UploadStatusResult(status=UploadStatus.ASSET_CREATED, asset_id="as1")
    )
    provider.delete_asset = AsyncMock(return_value=None)
    return provider


@pytest.fixture
def bindings():
    """Binding repository with nothing bound."""
    repository = MagicMock()
    repository.find_by_asset_id = AsyncMock(return_value=None)
    return repository


@pytest.fixture
def service(settings, mock_provider, bindings):
    return DirectUploadService(settings, lambda: mock_provider, bindings)


# =============================================================================
# Validation
# =============================================================================


class TestValidate:
    """Tests for server-side file checks."""

    def test_accepts_allowed_file(self, service):
        service.validate("holiday.MP4", 10 * MB)

    def test_zero_size_not_checked(self, service):
        service.validate("holiday.mp4", 0)

    def test_exactly_at_limit(self, service):
        service.validate("holiday.mp4", 50 * MB)

    def test_one_byte_over(self, service):
        with pytest.raises(FileTooLargeError) as exc_info:
            service.validate("holiday.mp4", 50 * MB + 1)
        assert exc_info.value.max_size_mb == 50

    @pytest.mark.parametrize("name", ["notes.txt", "photo.jpeg", "archive.tar.gz"])
    def test_rejects_extension(self, service, name):
        with pytest.raises(InvalidFileTypeError):
            service.validate(name, 1024)

    @pytest.mark.parametrize("name", ["", "clip", "C:\\videos\\clip.webm"])
    def test_accepts_without_checkable_extension(self, service, name):
        service.validate(name, 1024)


# =============================================================================
# Create
# =============================================================================


class TestCreate:
    """Tests for issuing upload slots."""

    async def test_create_success(self, service, mock_provider):
        response = await service.create(
            CreateUploadRequest(file_name="clip.mp4", file_size=10 * MB)
        )

        assert response.upload_id == "up1"
        assert response.upload_url == "https://storage.test/up1"
        assert response.expires_at == "3600"

        options = mock_provider.create_direct_upload.call_args[0][0]
        assert options.cors_origin == "https://forum.test"
        assert options.timeout_seconds == 3600
        assert options.public_playback is True

    async def test_explicit_cors_origin(self, settings, mock_provider, bindings):
        settings.provider.cors_origin = "https://cdn.forum.test"
        service = DirectUploadService(settings, lambda: mock_provider, bindings)

        await service.create(CreateUploadRequest(file_name="clip.mp4", file_size=1))

        options = mock_provider.create_direct_upload.call_args[0][0]
        assert options.cors_origin == "https://cdn.forum.test"

    async def test_no_credentials_checked_before_size(self, mock_provider, bindings):
        service = DirectUploadService(Settings(), lambda: mock_provider, bindings)

        with pytest.raises(NoCredentialsError):
            await service.create(
                CreateUploadRequest(file_name="clip.txt", file_size=10_000 * MB)
            )
        mock_provider.create_direct_upload.assert_not_awaited()

    async def test_too_large_never_calls_provider(self, service, mock_provider):
        with pytest.raises(FileTooLargeError):
            await service.create(
                CreateUploadRequest(file_name="clip.mp4", file_size=51 * MB)
            )
        mock_provider.create_direct_upload.assert_not_awaited()

    async def test_provider_error_propagates(self, service, mock_provider):
        mock_provider.create_direct_upload.side_effect = ProviderUnavailableError(
            "mux", "Bad credentials", status_code=401
        )

        with pytest.raises(ProviderUnavailableError):
            await service.create(CreateUploadRequest(file_name="clip.mp4", file_size=1))


# =============================================================================
# Discard
# =============================================================================


class TestDiscard:
    """Tests for removing abandoned uploads."""

    async def test_discard_by_asset(self, service, mock_provider):
        response = await service.discard(asset_id="as9")

        assert response.deleted is True
        assert response.asset_id == "as9"
        mock_provider.delete_asset.assert_awaited_once_with("as9")
        mock_provider.get_upload_status.assert_not_awaited()

    async def test_discard_by_upload_resolves_asset(self, service, mock_provider):
        response = await service.discard(upload_id="up1")

        mock_provider.get_upload_status.assert_awaited_once_with("up1")
        mock_provider.delete_asset.assert_awaited_once_with("as1")
        assert response.deleted is True

    async def test_discard_upload_without_asset(self, service, mock_provider):
        mock_provider.get_upload_status.return_value = UploadStatusResult(
            status=UploadStatus.WAITING
        )

        response = await service.discard(upload_id="up1")

        assert response.deleted is False
        mock_provider.delete_asset.assert_not_awaited()

    @pytest.mark.parametrize(("asset_id", "upload_id"), [(None, None), ("  ", "")])
    async def test_discard_requires_an_id(self, service, asset_id, upload_id):
        with pytest.raises(MissingParameterError):
            await service.discard(asset_id=asset_id, upload_id=upload_id)

    async def test_discard_without_credentials(self, mock_provider, bindings):
        service = DirectUploadService(Settings(), lambda: mock_provider, bindings)

        with pytest.raises(NoCredentialsError):
            await service.discard(asset_id="as1")

    async def test_bound_asset_is_not_deleted(self, service, mock_provider, bindings):
        bindings.find_by_asset_id.return_value = ContentVideoBinding(
            content_id=12, provider="mux", playback_id="pb1", asset_id="as9"
        )

        response = await service.discard(asset_id="as9")

        assert response.deleted is False
        assert response.asset_id == "as9"
        bindings.find_by_asset_id.assert_awaited_once_with("as9")
        mock_provider.delete_asset.assert_not_awaited()

    async def test_bound_asset_resolved_from_upload_is_not_deleted(
        self, service, mock_provider, bindings
    ):
        bindings.find_by_asset_id.return_value = ContentVideoBinding(
            content_id=12, provider="mux", playback_id="pb1", asset_id="as1"
        )

        response = await service.discard(upload_id="up1")

        assert response.deleted is False
        bindings.find_by_asset_id.assert_awaited_once_with("as1")
        mock_provider.delete_asset.assert_not_awaited()
