"""Tests for the Immich upload transport using httpx.MockTransport."""

import httpx
import pytest

from mediasync.config.settings import settings
from mediasync.services.content_identity import compute_identity
from mediasync.services.uploader import ImmichUploader
from mediasync.utils.errors import TransportConfigError


def _uploader(handler) -> ImmichUploader:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ImmichUploader(base_url="https://photos.example/api/", api_key="secret", device_id="test-device", client=client)


class TestImmichUploader:
    """Test cases for the Immich upload transport."""

    def test_successful_upload(self, write_file):
        """Test a successful multipart upload."""
        path = write_file("a.jpg", b"jpeg bytes")
        identity = compute_identity(path)
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["api_key"] = request.headers.get("x-api-key")
            seen["body"] = request.read()
            return httpx.Response(201, json={"id": "asset-1", "status": "created"})

        with _uploader(handler) as uploader:
            result = uploader.upload(path, identity)

        assert result.success is True
        assert result.status_code == 201
        assert result.error_message is None
        assert seen["url"] == "https://photos.example/api/assets"
        assert seen["api_key"] == "secret"
        assert f"{identity.hash}-{identity.size}".encode() in seen["body"]
        assert b'name="deviceId"' in seen["body"]
        assert b"test-device" in seen["body"]
        assert b'name="assetData"; filename="a.jpg"' in seen["body"]
        assert b"jpeg bytes" in seen["body"]
        assert b'name="isFavorite"' in seen["body"]

    def test_duplicate_response_counts_as_success(self, write_file):
        """Test that a duplicate response counts as success."""
        path = write_file("a.jpg", b"jpeg bytes")

        with _uploader(lambda request: httpx.Response(200, json={"status": "duplicate"})) as uploader:
            result = uploader.upload(path, compute_identity(path))

        assert result.success is True
        assert result.status_code == 200

    def test_http_error_status(self, write_file):
        """Test that an HTTP error keeps its status code."""
        path = write_file("a.jpg", b"jpeg bytes")

        with _uploader(lambda request: httpx.Response(500)) as uploader:
            result = uploader.upload(path, compute_identity(path))

        assert result.success is False
        assert result.status_code == 500
        assert result.error_message == "Request failed with status code 500"

    def test_network_error_has_no_status_code(self, write_file):
        """Test that a network error has no status code."""
        path = write_file("a.jpg", b"jpeg bytes")

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with _uploader(handler) as uploader:
            result = uploader.upload(path, compute_identity(path))

        assert result.success is False
        assert result.status_code is None
        assert "connection refused" in result.error_message

    def test_vanished_file_is_a_failure(self, write_file):
        """Test that a vanished file is a failure, not an exception."""
        path = write_file("a.jpg", b"jpeg bytes")
        identity = compute_identity(path)
        path.unlink()

        with _uploader(lambda request: httpx.Response(201)) as uploader:
            result = uploader.upload(path, identity)

        assert result.success is False
        assert result.status_code is None

    def test_missing_configuration(self, monkeypatch):
        """Test that missing configuration raises TransportConfigError."""
        monkeypatch.setattr(settings, "IMMICH_BASE_URL", "")
        monkeypatch.setattr(settings, "IMMICH_API_KEY", "")

        with pytest.raises(TransportConfigError):
            ImmichUploader()

        with pytest.raises(TransportConfigError):
            ImmichUploader(base_url="https://photos.example/api", api_key="  ")
