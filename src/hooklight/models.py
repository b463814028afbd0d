"""Core value types shared by the analysis modules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

import numpy as np


class InputError(ValueError):
    """Raised for invalid caller input (bad window size, sample rate, media type...)."""
    pass


@dataclass(frozen=True)
class AudioSignal:
    """Decoded mono audio.

    `samples` holds float amplitudes (typically in [-1, 1]).
    """
    samples: np.ndarray
    sample_rate: int

    def __post_init__(self) -> None:
        if int(self.sample_rate) <= 0:
            raise InputError(f"sample_rate must be > 0, got {self.sample_rate!r}")
        samples = np.array(self.samples, dtype=np.float64, copy=True).reshape(-1)
        samples.setflags(write=False)
        object.__setattr__(self, "samples", samples)
        object.__setattr__(self, "sample_rate", int(self.sample_rate))

    @property
    def duration_seconds(self) -> float:
        return len(self.samples) / float(self.sample_rate)

    def __len__(self) -> int:
        return len(self.samples)


@dataclass(frozen=True)
class TimeRange:
    """A closed time interval in seconds."""
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start

    def contains(self, t: float) -> bool:
        return self.start <= t <= self.end

    def overlaps(self, other: "TimeRange") -> bool:
        # Inclusive: ranges that only touch at an endpoint overlap.
        return self.start <= other.end and other.start <= self.end

    def to_dict(self) -> Dict[str, float]:
        return {"start": self.start, "end": self.end}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TimeRange":
        return cls(start=float(d["start"]), end=float(d["end"]))


@dataclass
class Candidate:
    """A ranked highlight candidate."""
    start: float
    end: float
    audio_energy: float
    text_score: float
    combined_score: float
    reason: str
    category: str

    @property
    def duration(self) -> float:
        return self.end - self.start

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start,
            "end": self.end,
            "audio_energy": self.audio_energy,
            "text_score": self.text_score,
            "combined_score": self.combined_score,
            "reason": self.reason,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Candidate":
        return cls(
            start=float(d["start"]),
            end=float(d["end"]),
            audio_energy=float(d.get("audio_energy", 0.0)),
            text_score=float(d.get("text_score", 0.0)),
            combined_score=float(d.get("combined_score", 0.0)),
            reason=str(d.get("reason", "")),
            category=str(d.get("category", "")),
        )
