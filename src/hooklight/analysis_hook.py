"""Opening hook search.

Slides a fixed-duration window across the signal at quarter-second steps and
keeps the span with the highest mean squared amplitude.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

import numpy as np

from .models import AudioSignal, InputError, TimeRange

logger = logging.getLogger(__name__)

# Window energies this close to the maximum count as a tie (earliest wins).
_TIE_RTOL = 1e-9


@dataclass(frozen=True)
class HookConfig:
    duration_seconds: float = 15.0
    step_seconds: float = 0.25

    @classmethod
    def from_profile(cls, hook_cfg: Dict[str, Any]) -> "HookConfig":
        return cls(
            duration_seconds=float(hook_cfg.get("duration_seconds", 15.0)),
            step_seconds=float(hook_cfg.get("step_seconds", 0.25)),
        )


def find_hook(
    samples: np.ndarray,
    sample_rate: int,
    hook_duration_s: float,
    *,
    step_s: float = 0.25,
) -> TimeRange:
    """Find the contiguous `hook_duration_s` span with the most energy.

    Energy is mean(x^2) over the window. The earliest window wins ties, and an
    all-silent signal yields a hook starting at 0.
    """
    if int(sample_rate) <= 0:
        raise InputError(f"sample_rate must be > 0, got {sample_rate!r}")
    if hook_duration_s <= 0:
        raise InputError(f"hook_duration_s must be > 0, got {hook_duration_s!r}")

    x = np.asarray(samples, dtype=np.float64).reshape(-1)
    n = len(x)
    duration_s = n / float(sample_rate)

    window = int(hook_duration_s * sample_rate)
    step = max(1, int(sample_rate * step_s))

    best_start = 0.0
    if window <= 0 or n < window:
        logger.warning(
            f"Signal ({duration_s:.2f}s) is shorter than the hook window "
            f"({hook_duration_s:.2f}s); hook starts at 0"
        )
    else:
        # Summed per window so identical windows score identically.
        starts = np.arange(0, n - window + 1, step)
        energies = np.array(
            [float(np.dot(x[i : i + window], x[i : i + window])) for i in starts],
            dtype=np.float64,
        ) / float(window)

        peak = float(energies.max())
        best = int(np.flatnonzero(energies >= peak * (1.0 - _TIE_RTOL))[0])
        if peak > 0.0:
            best_start = int(starts[best]) / float(sample_rate)
        else:
            logger.warning("Signal has no energy; hook defaults to the start")

    return TimeRange(start=best_start, end=min(best_start + hook_duration_s, duration_s))


def locate_hook(signal: AudioSignal, cfg: HookConfig = HookConfig()) -> TimeRange:
    """`find_hook` for a decoded `AudioSignal`."""
    return find_hook(
        signal.samples,
        signal.sample_rate,
        cfg.duration_seconds,
        step_s=cfg.step_seconds,
    )
