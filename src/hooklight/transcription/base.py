"""Base types and protocol for transcription services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


class TranscriberError(RuntimeError):
    """Base error for transcription failures."""
    pass


# Segment keys consumed by the core; everything else lands in `metadata`.
_SEGMENT_KEYS = ("start", "end", "text")


@dataclass
class TranscriptSegment:
    """A timestamped span of transcribed speech.

    `metadata` keeps whatever else the service returned (id, tokens,
    avg_logprob, no_speech_prob, ...). The analysis code never reads it.
    """
    start: float
    end: float
    text: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = dict(self.metadata)
        d.update({"start": self.start, "end": self.end, "text": self.text})
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TranscriptSegment":
        return cls(
            start=float(d.get("start", 0.0)),
            end=float(d.get("end", 0.0)),
            text=str(d.get("text", "")),
            metadata={k: v for k, v in d.items() if k not in _SEGMENT_KEYS},
        )


@dataclass
class TranscriptResult:
    """Result of a transcription operation."""
    segments: List[TranscriptSegment]
    text: str = ""
    language: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.text and self.segments:
            self.text = " ".join(s.text.strip() for s in self.segments if s.text.strip())

    @property
    def duration_seconds(self) -> float:
        return max((s.end for s in self.segments), default=0.0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "segments": [s.to_dict() for s in self.segments],
            "language": self.language,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TranscriptResult":
        return cls(
            segments=[TranscriptSegment.from_dict(s) for s in d.get("segments") or []],
            text=str(d.get("text") or ""),
            language=d.get("language"),
        )


@dataclass(frozen=True)
class TranscriberConfig:
    """Configuration for the transcription service.

    Attributes:
        endpoint: Service URL; None disables transcription.
        language: Spoken language code passed to the service.
        timeout_s: HTTP timeout in seconds.
    """
    endpoint: Optional[str] = None
    language: Optional[str] = "he"
    timeout_s: float = 600.0

    @classmethod
    def from_profile(cls, transcription_cfg: Dict[str, Any]) -> "TranscriberConfig":
        return cls(
            endpoint=transcription_cfg.get("endpoint"),
            language=transcription_cfg.get("language", "he"),
            timeout_s=float(transcription_cfg.get("timeout_s", 600.0)),
        )


@runtime_checkable
class Transcriber(Protocol):
    """Protocol for transcription services."""

    def transcribe(self, media_url: str) -> TranscriptResult:
        """Transcribe the media behind `media_url`.

        Raises:
            TranscriberError: If the service fails or returns an error payload.
        """
        ...
