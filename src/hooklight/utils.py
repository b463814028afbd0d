"""Shared utility functions for hooklight.

- subprocess_flags(): Windows-specific flags to hide console windows
- format_time() / parse_time(): "m:ss" clock strings
- format_file_size(): human-readable byte counts
"""

from __future__ import annotations

import sys
from typing import Any, Dict


def subprocess_flags() -> Dict[str, Any]:
    """Return subprocess flags to hide console window on Windows."""
    if sys.platform == "win32":
        # CREATE_NO_WINDOW = 0x08000000
        return {"creationflags": 0x08000000}
    return {}


def format_time(seconds: float) -> str:
    """Format seconds as "m:ss" (minutes are not wrapped into hours)."""
    seconds = max(0.0, float(seconds))
    mins = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{mins}:{secs:02d}"


def parse_time(text: str) -> float:
    """Parse "m:ss" (or plain seconds) back into seconds."""
    text = text.strip()
    if ":" not in text:
        return float(text)
    mins, secs = text.split(":", 1)
    return int(mins) * 60 + float(secs)


def format_file_size(num_bytes: int) -> str:
    sizes = ["Bytes", "KB", "MB", "GB"]
    if num_bytes <= 0:
        return "0 Bytes"
    size = float(num_bytes)
    i = 0
    while size >= 1024 and i < len(sizes) - 1:
        size /= 1024
        i += 1
    return f"{round(size, 2):g} {sizes[i]}"
