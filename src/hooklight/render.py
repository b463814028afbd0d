"""Clip rendering collaborator.

Real cropping/encoding is not implemented: `PassthroughRenderer` hands back
the source file. `crop_rect` computes the centered crop box a real renderer
would apply.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Literal, Protocol, Sequence

from .models import InputError, TimeRange
from .utils import format_time

logger = logging.getLogger(__name__)

AspectRatio = Literal["16:9", "9:16"]

_ASPECT_RATIOS: Dict[str, float] = {
    "16:9": 16.0 / 9.0,
    "9:16": 9.0 / 16.0,
}


@dataclass(frozen=True)
class CropRect:
    width: float
    height: float
    x: float
    y: float


def crop_rect(width: int, height: int, aspect_ratio: AspectRatio) -> CropRect:
    """Largest centered crop of a `width`x`height` frame with the given ratio."""
    if width <= 0 or height <= 0:
        raise InputError("width/height must be > 0")
    try:
        target = _ASPECT_RATIOS[aspect_ratio]
    except KeyError:
        raise InputError(f"Unsupported aspect ratio {aspect_ratio!r}") from None

    if width / height > target:
        crop_h = float(height)
        crop_w = crop_h * target
    else:
        crop_w = float(width)
        crop_h = crop_w / target

    return CropRect(width=crop_w, height=crop_h, x=(width - crop_w) / 2, y=(height - crop_h) / 2)


class Renderer(Protocol):
    def render(self, source: Path, ranges: Sequence[TimeRange], aspect_ratio: AspectRatio) -> Path:
        ...


class PassthroughRenderer:
    """Returns the source media unchanged."""

    def render(self, source: Path, ranges: Sequence[TimeRange], aspect_ratio: AspectRatio) -> Path:
        if aspect_ratio not in _ASPECT_RATIOS:
            raise InputError(f"Unsupported aspect ratio {aspect_ratio!r}")
        spans = ", ".join(f"{format_time(r.start)}-{format_time(r.end)}" for r in ranges)
        logger.info(f"Render requested ({aspect_ratio}): {spans or 'no clips'}; returning source unchanged")
        return Path(source)
