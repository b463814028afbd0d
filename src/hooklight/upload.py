from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import requests

logger = logging.getLogger(__name__)


SUPPORTED_VIDEO_EXTENSIONS = (".mp4", ".webm", ".ogg", ".avi", ".mov")
SUPPORTED_AUDIO_EXTENSIONS = (".mp3", ".wav", ".ogg", ".m4a")


class UploadError(RuntimeError):
    pass


def is_video_file(path: Path) -> bool:
    return Path(path).suffix.lower() in SUPPORTED_VIDEO_EXTENSIONS


def is_audio_file(path: Path) -> bool:
    return Path(path).suffix.lower() in SUPPORTED_AUDIO_EXTENSIONS


def is_supported_media(path: Path) -> bool:
    return is_video_file(path) or is_audio_file(path)


class Uploader(Protocol):
    def upload(self, path: Path) -> str:
        """Upload a media file and return a URL the transcription service can fetch."""
        ...


@dataclass(frozen=True)
class UploadConfig:
    endpoint: Optional[str] = None
    timeout_s: float = 120.0

    @classmethod
    def from_profile(cls, upload_cfg: Dict[str, Any]) -> "UploadConfig":
        return cls(
            endpoint=upload_cfg.get("endpoint"),
            timeout_s=float(upload_cfg.get("timeout_s", 120.0)),
        )


class HttpUploader:
    """Multipart upload to a storage endpoint answering `{"file_url": ...}`."""

    def __init__(self, config: UploadConfig, *, session: requests.Session | None = None):
        if not config.endpoint:
            raise UploadError("Upload endpoint is not configured")
        self.config = config
        self._session = session or requests.Session()

    def upload(self, path: Path) -> str:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Media file not found: {path}")

        logger.info(f"Uploading {path.name} ({path.stat().st_size} bytes)")
        try:
            with path.open("rb") as fh:
                resp = self._session.post(
                    str(self.config.endpoint),
                    files={"file": (path.name, fh)},
                    timeout=self.config.timeout_s,
                )
        except requests.RequestException as e:
            raise UploadError(f"upload_failed: {e}") from e

        if resp.status_code not in (200, 201):
            raise UploadError(f"upload_failed: {resp.status_code} {resp.text[:200]}")
        try:
            payload = resp.json()
        except ValueError as e:
            raise UploadError("upload_failed: response is not JSON") from e

        url = (payload.get("file_url") or payload.get("url")) if isinstance(payload, dict) else None
        if not url:
            raise UploadError("upload_failed: response has no file_url")
        return str(url)
