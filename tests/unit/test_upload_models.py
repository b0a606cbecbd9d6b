"""Unit tests for upload and asset domain models."""

import pytest

from src.domain.models.upload import (
    DirectUploadOptions,
    PlaybackIdentifier,
    ProviderAsset,
    ProviderUploadHandle,
    UploadStatus,
    UploadStatusResult,
)


class TestUploadStatus:
    """Tests for UploadStatus enum."""

    def test_values(self):
        assert UploadStatus.WAITING.value == "waiting"
        assert UploadStatus.ASSET_CREATED.value == "asset_created"
        assert UploadStatus.READY.value == "ready"
        assert UploadStatus.ERRORED.value == "errored"

    def test_from_string(self):
        assert UploadStatus("ready") is UploadStatus.READY


class TestProviderAsset:
    """Tests for ProviderAsset model."""

    def test_public_playback_id(self):
        asset = ProviderAsset(
            asset_id="as1",
            status="ready",
            playback_ids=[
                PlaybackIdentifier(id="signed1", policy="signed"),
                PlaybackIdentifier(id="pub1", policy="public"),
            ],
        )
        assert asset.public_playback_id == "pub1"

    def test_no_public_playback_id(self):
        asset = ProviderAsset(
            asset_id="as1",
            playback_ids=[PlaybackIdentifier(id="signed1", policy="signed")],
        )
        assert asset.public_playback_id is None

    def test_empty_playback_ids(self):
        assert ProviderAsset(asset_id="as1").public_playback_id is None


class TestUploadStatusResult:
    """Tests for UploadStatusResult model."""

    def test_ready(self):
        result = UploadStatusResult(
            status=UploadStatus.READY, asset_id="as1", playback_id="pb1"
        )
        assert result.is_ready is True
        assert result.is_terminal is True

    def test_ready_without_playback_is_not_ready(self):
        result = UploadStatusResult(status=UploadStatus.READY, asset_id="as1")
        assert result.is_ready is False

    def test_errored_is_terminal(self):
        assert UploadStatusResult(status=UploadStatus.ERRORED).is_terminal is True

    @pytest.mark.parametrize(
        "status", [UploadStatus.WAITING, UploadStatus.ASSET_CREATED]
    )
    def test_in_progress_is_not_terminal(self, status):
        assert UploadStatusResult(status=status).is_terminal is False


class TestProviderUploadHandle:
    """Tests for ProviderUploadHandle model."""

    def test_minimal(self):
        handle = ProviderUploadHandle(upload_id="up1", upload_url="https://x/y")
        assert handle.expires_at is None


class TestDirectUploadOptions:
    """Tests for DirectUploadOptions model."""

    def test_defaults(self):
        options = DirectUploadOptions()
        assert options.cors_origin == "*"
        assert options.timeout_seconds == 3600
        assert options.public_playback is True

    def test_timeout_bounds(self):
        with pytest.raises(ValueError):
            DirectUploadOptions(timeout_seconds=10)
        with pytest.raises(ValueError):
            DirectUploadOptions(timeout_seconds=8 * 24 * 3600)
