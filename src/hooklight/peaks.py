from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from .models import TimeRange

logger = logging.getLogger(__name__)

DEFAULT_MIN_DISTANCE = 30


def _excluded(idx: int, exclude_range: Optional[TimeRange]) -> bool:
    return exclude_range is not None and exclude_range.start <= idx <= exclude_range.end


def scan_threshold_peaks(
    scores: np.ndarray,
    threshold: float,
    exclude_range: Optional[TimeRange] = None,
    *,
    min_distance: float = DEFAULT_MIN_DISTANCE,
) -> List[int]:
    """Greedy left-to-right scan for indices above `threshold`.

    An index is accepted only if it lies more than `min_distance` past the
    previously accepted one. Indices inside `exclude_range` (inclusive) are
    skipped.
    """
    chosen: List[int] = []
    for idx in range(len(scores)):
        if _excluded(idx, exclude_range):
            continue
        if not scores[idx] > threshold:
            continue
        if chosen and idx - chosen[-1] <= min_distance:
            continue
        chosen.append(idx)
    return chosen


def top_energy_indices(
    scores: np.ndarray,
    top_k: int,
    exclude_range: Optional[TimeRange] = None,
) -> List[int]:
    """Indices of the `top_k` highest scores outside `exclude_range`, ascending.

    Ties keep the earlier index first.
    """
    if top_k <= 0:
        return []
    candidates = np.array(
        [i for i in range(len(scores)) if not _excluded(i, exclude_range)],
        dtype=np.int64,
    )
    if len(candidates) == 0:
        return []
    order = np.argsort(-scores[candidates], kind="stable")
    top = candidates[order[:top_k]]
    return sorted(int(i) for i in top)


def pick_peaks(
    scores: np.ndarray,
    num_segments: int,
    threshold: float,
    exclude_range: Optional[TimeRange] = None,
    *,
    min_distance: float = DEFAULT_MIN_DISTANCE,
) -> List[int]:
    """Pick up to `num_segments` peak indices from a normalized energy profile.

    Args:
        scores: Normalized energy (one entry per window).
        num_segments: Number of peaks wanted.
        threshold: Entries must be strictly above this to qualify.
        exclude_range: Inclusive index range that is never picked.
        min_distance: Minimum spacing (exclusive) between accepted peaks.

    Returns:
        Ascending list of indices. If the threshold scan finds fewer than
        `num_segments` peaks, the top-energy indices are returned instead.
    """
    if num_segments <= 0:
        return []
    scores = np.asarray(scores, dtype=np.float64).reshape(-1)

    peaks = scan_threshold_peaks(scores, threshold, exclude_range, min_distance=min_distance)
    if len(peaks) < num_segments:
        logger.debug(
            f"Only {len(peaks)} peaks above threshold {threshold:.2f}; "
            f"falling back to top {num_segments} energy windows"
        )
        return top_energy_indices(scores, num_segments, exclude_range)

    return sorted(peaks[:num_segments])
