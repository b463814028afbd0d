"""Transcription service abstraction.

Usage:
    from hooklight.transcription import HttpTranscriber, TranscriberConfig

    config = TranscriberConfig(endpoint="https://example.test/transcribe", language="he")
    transcript = HttpTranscriber(config).transcribe(file_url)
"""

from .base import (
    TranscriberConfig,
    TranscriptSegment,
    TranscriptResult,
    Transcriber,
    TranscriberError,
)
from .http_backend import HttpTranscriber

__all__ = [
    "TranscriberConfig",
    "TranscriptSegment",
    "TranscriptResult",
    "Transcriber",
    "TranscriberError",
    "HttpTranscriber",
]
