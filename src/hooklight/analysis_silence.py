"""Silence detection over decoded samples.

Detects quiet stretches for use as natural cut points when splitting a
recording into fixed-length clips.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

import numpy as np

from .models import InputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SilenceConfig:
    """Configuration for silence detection."""
    threshold: float = 0.01  # Absolute amplitude below which a sample is silent
    min_duration: float = 0.5  # Minimum silence duration in seconds

    @classmethod
    def from_profile(cls, silence_cfg: Dict[str, Any]) -> "SilenceConfig":
        return cls(
            threshold=float(silence_cfg.get("threshold", 0.01)),
            min_duration=float(silence_cfg.get("min_duration_seconds", 0.5)),
        )


@dataclass
class SilenceInterval:
    """A detected silence interval."""
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start

    def to_dict(self) -> Dict[str, float]:
        return {"start": self.start, "end": self.end}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SilenceInterval":
        return cls(start=float(d["start"]), end=float(d["end"]))


def detect_silence(
    samples: np.ndarray,
    sample_rate: int,
    cfg: SilenceConfig = SilenceConfig(),
) -> List[SilenceInterval]:
    """Find runs of samples with |x| < threshold lasting at least min_duration."""
    if int(sample_rate) <= 0:
        raise InputError(f"sample_rate must be > 0, got {sample_rate!r}")

    x = np.asarray(samples, dtype=np.float64).reshape(-1)
    if len(x) == 0:
        return []

    quiet = (np.abs(x) < cfg.threshold).astype(np.int8)
    # Run boundaries: +1 where a quiet run starts, -1 one past where it ends.
    edges = np.diff(np.concatenate(([0], quiet, [0])))
    run_starts = np.flatnonzero(edges == 1)
    run_ends = np.flatnonzero(edges == -1)

    min_samples = int(cfg.min_duration * sample_rate)
    intervals: List[SilenceInterval] = []
    for s, e in zip(run_starts, run_ends):
        if e - s >= min_samples:
            intervals.append(SilenceInterval(start=s / float(sample_rate), end=e / float(sample_rate)))
    return intervals


def find_cut_points(
    samples: np.ndarray,
    target_duration: float,
    sample_rate: int,
    *,
    snap_window_s: float = 2.0,
    min_silence_s: float = 0.2,
    threshold: float = 0.01,
) -> List[float]:
    """Suggest cut times roughly `target_duration` apart, snapped to silences.

    Each step looks for the first silence whose start or end lies within
    `snap_window_s` of the target. A snapped cut lands on the silence start
    and the walk resumes from the silence end.
    """
    if target_duration <= 0:
        raise InputError(f"target_duration must be > 0, got {target_duration!r}")

    x = np.asarray(samples, dtype=np.float64).reshape(-1)
    duration_s = len(x) / float(sample_rate)
    silences = detect_silence(x, sample_rate, SilenceConfig(threshold=threshold, min_duration=min_silence_s))

    cut_points: List[float] = []
    current = 0.0
    while current < duration_s:
        target = current + target_duration
        nearest = next(
            (
                s for s in silences
                if abs(s.start - target) < snap_window_s or abs(s.end - target) < snap_window_s
            ),
            None,
        )
        if nearest is not None and nearest.end > current:
            cut_points.append(nearest.start)
            current = nearest.end
        else:
            cut_points.append(target)
            current = target

    logger.debug(f"Suggested {len(cut_points)} cut points from {len(silences)} silences")
    return cut_points
