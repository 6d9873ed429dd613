"""Upload transport for the Immich asset API."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol

import httpx

from mediasync.config.logger import app_logger
from mediasync.config.settings import settings
from mediasync.services.content_identity import ContentIdentity
from mediasync.utils.errors import TransportConfigError


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a single upload request."""

    success: bool
    status_code: Optional[int] = None
    error_message: Optional[str] = None


class UploadTransport(Protocol):
    def upload(self, path: Path, identity: ContentIdentity) -> UploadResult:
        ...


def _iso(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat().replace("+00:00", "Z")


def _created_at(stat) -> float:
    birthtime = getattr(stat, "st_birthtime", 0) or 0
    return birthtime if birthtime > 0 else stat.st_mtime


class ImmichUploader:
    """Posts media files to `{IMMICH_BASE_URL}/assets`.

    Per-item failures are returned as an UploadResult, never raised.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        device_id: str = settings.IMMICH_DEVICE_ID,
        timeout: float = settings.UPLOAD_TIMEOUT_SECONDS,
        client: Optional[httpx.Client] = None,
    ):
        base_url = settings.IMMICH_BASE_URL if base_url is None else base_url
        api_key = settings.IMMICH_API_KEY if api_key is None else api_key
        if not base_url or not base_url.strip() or not api_key or not api_key.strip():
            raise TransportConfigError(
                "IMMICH_BASE_URL and IMMICH_API_KEY must be configured. "
                "Set them in the environment or in .env"
            )

        self.assets_url = f"{base_url.strip().rstrip('/')}/assets"
        self.device_id = device_id
        self._client = client or httpx.Client(timeout=timeout)
        self._client.headers["x-api-key"] = api_key.strip()

    def __enter__(self) -> "ImmichUploader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def upload(self, path: Path, identity: ContentIdentity) -> UploadResult:
        path = Path(path)
        try:
            stat = path.stat()
            data = {
                "deviceAssetId": identity.device_asset_id,
                "deviceId": self.device_id,
                "fileCreatedAt": _iso(_created_at(stat)),
                "fileModifiedAt": _iso(stat.st_mtime),
                "isFavorite": "false",
            }
            with path.open("rb") as f:
                response = self._client.post(
                    self.assets_url,
                    data=data,
                    files={"assetData": (path.name, f)},
                )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            return UploadResult(
                success=False,
                status_code=e.response.status_code,
                error_message=f"Request failed with status code {e.response.status_code}",
            )
        except (httpx.HTTPError, OSError) as e:
            app_logger.debug(f"Upload transport error for {path}: {type(e).__name__}: {e}")
            return UploadResult(success=False, error_message=str(e) or type(e).__name__)

        return UploadResult(success=True, status_code=response.status_code)
