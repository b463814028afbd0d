"""Transcription over an HTTP service.

The service receives `{"file_url": ..., "language": ...}` and answers with
`{"text": ..., "segments": [...], "language": ...}` or `{"error": ...}`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

import requests

from .base import TranscriberConfig, TranscriberError, TranscriptResult

logger = logging.getLogger(__name__)


class HttpTranscriber:
    """Transcriber backed by a remote transcription endpoint."""

    def __init__(self, config: TranscriberConfig, *, session: requests.Session | None = None):
        if not config.endpoint:
            raise TranscriberError("Transcription endpoint is not configured")
        self.config = config
        self._session = session or requests.Session()

    def transcribe(self, media_url: str) -> TranscriptResult:
        body: Dict[str, Any] = {"file_url": media_url}
        if self.config.language:
            body["language"] = self.config.language

        logger.info(f"Requesting transcription of {media_url} (lang={self.config.language or 'auto'})")
        try:
            resp = self._session.post(
                str(self.config.endpoint),
                json=body,
                timeout=self.config.timeout_s,
            )
        except requests.RequestException as e:
            raise TranscriberError(f"Transcription service unavailable: {e}") from e

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict) and payload.get("error"):
            raise TranscriberError(f"transcription_failed: {payload['error']}")
        if resp.status_code != 200:
            raise TranscriberError(f"transcription_failed: {resp.status_code} {resp.text[:200]}")
        if not isinstance(payload, dict) or not isinstance(payload.get("segments"), list):
            raise TranscriberError("Transcription response has no segment list")

        result = TranscriptResult.from_dict(payload)
        logger.info(
            f"Transcription returned {len(result.segments)} segments "
            f"({result.duration_seconds:.1f}s, lang={result.language})"
        )
        return result
