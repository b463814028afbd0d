from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .analysis_text import FUZZY_MATCH_THRESHOLD, SentenceClassifier, TextPeak, score_text
from .audio_features import EnergyConfig, signal_energy_profile
from .models import Candidate, TimeRange
from .peaks import DEFAULT_MIN_DISTANCE, pick_peaks, scan_threshold_peaks, top_energy_indices
from .transcription.base import TranscriptResult

logger = logging.getLogger(__name__)

AUDIO_PEAK_REASON = "High audio energy"
AUDIO_PEAK_CATEGORY = "Audio Peak"


@dataclass(frozen=True)
class HighlightConfig:
    count: int = 5
    threshold: float = 0.7
    clip_seconds: float = 30.0
    min_distance_seconds: float = DEFAULT_MIN_DISTANCE
    enhanced: bool = True
    fuzzy_threshold: float = FUZZY_MATCH_THRESHOLD

    @classmethod
    def from_profile(cls, highlights_cfg: Dict[str, Any], text_cfg: Optional[Dict[str, Any]] = None) -> "HighlightConfig":
        text_cfg = text_cfg or {}
        return cls(
            count=int(highlights_cfg.get("count", 5)),
            threshold=float(highlights_cfg.get("threshold", 0.7)),
            clip_seconds=float(highlights_cfg.get("clip_seconds", 30.0)),
            min_distance_seconds=float(highlights_cfg.get("min_distance_seconds", DEFAULT_MIN_DISTANCE)),
            enhanced=bool(highlights_cfg.get("enhanced", True)),
            fuzzy_threshold=float(text_cfg.get("fuzzy_threshold", FUZZY_MATCH_THRESHOLD)),
        )


@dataclass(frozen=True)
class AudioPeak:
    start: float
    energy: float


def _ranges_overlap(a_start: float, a_end: float, b_start: float, b_end: float) -> bool:
    # Touching endpoints count as overlap.
    return a_start <= b_end and b_start <= a_end


def _mean_energy_in_range(
    normalized_energy: np.ndarray,
    start_s: float,
    end_s: float,
    hop_seconds: float,
) -> float:
    first = max(0, int(math.floor(start_s / hop_seconds)))
    last = min(len(normalized_energy) - 1, int(math.floor(end_s / hop_seconds)))
    if last < first:
        return 0.0
    return float(np.mean(normalized_energy[first : last + 1]))


def fuse(
    audio_peaks: Sequence[AudioPeak],
    text_peaks: Sequence[TextPeak],
    normalized_energy: np.ndarray,
    *,
    clip_seconds: float,
    duration_s: float,
    num_segments: int,
    hop_seconds: float = 1.0,
) -> List[Candidate]:
    """Merge audio and text peaks into one ranked candidate list.

    - Each audio peak becomes a `clip_seconds` window (clamped to the duration).
      The first overlapping text peak multiplies its energy and lends its
      reason/category.
    - Text peaks that overlap no audio window stand alone, with audio energy
      back-filled from the mean normalized energy inside their range.
    - Sorted by combined score (descending, stable) and truncated.
    """
    energy = np.asarray(normalized_energy, dtype=np.float64).reshape(-1)
    candidates: List[Candidate] = []

    for peak in audio_peaks:
        start = float(peak.start)
        end = min(start + clip_seconds, duration_s)
        match = next(
            (tp for tp in text_peaks if _ranges_overlap(start, end, tp.start, tp.end)),
            None,
        )
        if match is not None:
            candidates.append(Candidate(
                start=start,
                end=end,
                audio_energy=float(peak.energy),
                text_score=match.score,
                combined_score=float(peak.energy) * match.score,
                reason=match.reason,
                category=match.category,
            ))
        else:
            candidates.append(Candidate(
                start=start,
                end=end,
                audio_energy=float(peak.energy),
                text_score=0.0,
                combined_score=float(peak.energy),
                reason=AUDIO_PEAK_REASON,
                category=AUDIO_PEAK_CATEGORY,
            ))

    audio_windows = [(c.start, c.end) for c in candidates]
    for tp in text_peaks:
        if any(_ranges_overlap(tp.start, tp.end, s, e) for s, e in audio_windows):
            continue
        avg_energy = _mean_energy_in_range(energy, tp.start, tp.end, hop_seconds)
        candidates.append(Candidate(
            start=tp.start,
            end=tp.end,
            audio_energy=avg_energy,
            text_score=tp.score,
            combined_score=avg_energy * tp.score,
            reason=tp.reason,
            category=tp.category,
        ))

    ranked = sorted(candidates, key=lambda c: c.combined_score, reverse=True)
    return ranked[: max(0, int(num_segments))]


def candidates_to_times(candidates: Sequence[Candidate]) -> List[float]:
    """Start times, for callers that only understand plain time points."""
    return [c.start for c in candidates]


def audio_only_candidates(
    peak_indices: Sequence[int],
    normalized_energy: np.ndarray,
    *,
    clip_seconds: float,
    duration_s: float,
    hop_seconds: float = 1.0,
) -> List[Candidate]:
    """Wrap plain peak indices as candidates with synthetic reasons, ranked."""
    peaks = [
        AudioPeak(start=i * hop_seconds, energy=float(normalized_energy[i]))
        for i in peak_indices
    ]
    return fuse(
        peaks,
        [],
        normalized_energy,
        clip_seconds=clip_seconds,
        duration_s=duration_s,
        num_segments=len(peaks),
        hop_seconds=hop_seconds,
    )


def find_highlights(
    samples: np.ndarray,
    sample_rate: int,
    count: int,
    threshold: float,
    exclude_range: Optional[TimeRange] = None,
    *,
    min_distance: float = DEFAULT_MIN_DISTANCE,
) -> List[int]:
    """Audio-only highlight times (seconds), ascending.

    Uses mean-absolute energy over one-second windows.
    """
    normalized = signal_energy_profile(samples, sample_rate, EnergyConfig(window_seconds=1.0, metric="mean_abs"))
    return pick_peaks(normalized, count, threshold, exclude_range, min_distance=min_distance)


def find_enhanced_highlights(
    samples: np.ndarray,
    sample_rate: int,
    transcript: Optional[TranscriptResult],
    count: int,
    threshold: float,
    exclude_range: Optional[TimeRange] = None,
    *,
    classifier: Optional[SentenceClassifier] = None,
    clip_seconds: float = 30.0,
    min_distance: float = DEFAULT_MIN_DISTANCE,
    fuzzy_threshold: float = FUZZY_MATCH_THRESHOLD,
) -> List[Candidate]:
    """Highlights ranked by audio energy fused with transcript importance.

    Without a transcript (or classifier), or when text analysis fails, the
    result is the audio peak list with synthetic reasons.
    """
    hop_s = 1.0
    normalized = signal_energy_profile(samples, sample_rate, EnergyConfig(window_seconds=hop_s, metric="mean_abs"))
    duration_s = len(np.asarray(samples).reshape(-1)) / float(sample_rate)

    peak_idxs = scan_threshold_peaks(normalized, threshold, exclude_range, min_distance=min_distance)
    if len(peak_idxs) < count:
        peak_idxs = top_energy_indices(normalized, count, exclude_range)
    audio_peaks = [AudioPeak(start=i * hop_s, energy=float(normalized[i])) for i in peak_idxs]

    text_peaks: List[TextPeak] = []
    if transcript is not None and transcript.segments and classifier is not None:
        try:
            text_peaks = score_text(transcript, classifier, fuzzy_threshold=fuzzy_threshold)
        except Exception as e:
            logger.warning(f"Text analysis failed, falling back to audio-only: {e}")
            text_peaks = []

    candidates = fuse(
        audio_peaks,
        text_peaks,
        normalized,
        clip_seconds=clip_seconds,
        duration_s=duration_s,
        num_segments=count,
        hop_seconds=hop_s,
    )
    logger.info(
        f"Fused {len(audio_peaks)} audio peaks and {len(text_peaks)} text peaks "
        f"into {len(candidates)} candidates"
    )
    return candidates
