from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import numpy as np

from .models import InputError

logger = logging.getLogger(__name__)

EnergyMetric = Literal["mean_abs", "rms", "mean_square"]

ENERGY_METRICS = ("mean_abs", "rms", "mean_square")


@dataclass(frozen=True)
class EnergyConfig:
    window_seconds: float = 1.0
    metric: EnergyMetric = "mean_abs"

    def window_samples(self, sample_rate: int) -> int:
        n = int(sample_rate * self.window_seconds)
        if n <= 0:
            raise InputError("window_seconds too small; resulted in non-positive window size")
        return n


def _as_1d_f64(x: np.ndarray) -> np.ndarray:
    return np.asarray(x, dtype=np.float64).reshape(-1)


def compute_energy_profile(
    samples: np.ndarray,
    window_samples: int,
    metric: EnergyMetric = "mean_abs",
) -> np.ndarray:
    """
    Energy per consecutive, non-overlapping window of `window_samples`.

    - "mean_abs": mean(|x|)
    - "rms": sqrt(mean(x^2))
    - "mean_square": mean(x^2)

    The last window may be shorter than the others. An empty signal yields an
    empty profile.
    """
    window_samples = int(window_samples)
    if window_samples <= 0:
        raise InputError(f"window_samples must be > 0, got {window_samples}")
    if metric not in ENERGY_METRICS:
        raise InputError(f"Unknown energy metric {metric!r}; expected one of {ENERGY_METRICS}")

    x = _as_1d_f64(samples)
    n = len(x)
    if n == 0:
        return np.zeros(0, dtype=np.float64)

    if metric == "mean_abs":
        values = np.abs(x)
    else:
        values = x * x

    starts = np.arange(0, n, window_samples)
    sums = np.add.reduceat(values, starts)
    counts = np.minimum(starts + window_samples, n) - starts
    energy = sums / counts

    if metric == "rms":
        energy = np.sqrt(energy)
    return energy


def normalize_profile(profile: np.ndarray) -> np.ndarray:
    """Divide by the profile maximum.

    An empty or all-zero profile is returned unchanged (as a copy).
    """
    x = np.array(profile, dtype=np.float64, copy=True).reshape(-1)
    if len(x) == 0:
        logger.warning("Energy profile is empty; nothing to normalize")
        return x
    peak = float(np.max(x))
    if peak <= 0.0:
        logger.warning("Energy profile maximum is zero; leaving profile unnormalized")
        return x
    return x / peak


def signal_energy_profile(
    samples: np.ndarray,
    sample_rate: int,
    cfg: EnergyConfig = EnergyConfig(),
    *,
    normalize: bool = True,
) -> np.ndarray:
    """Energy profile at `cfg.window_seconds` resolution, optionally normalized."""
    profile = compute_energy_profile(samples, cfg.window_samples(sample_rate), cfg.metric)
    if normalize:
        return normalize_profile(profile)
    return profile
