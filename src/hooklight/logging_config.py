"""Centralized logging configuration for hooklight.

Usage:
    from hooklight.logging_config import setup_logging
    setup_logging()  # Call once at startup

    # Then in any module:
    import logging
    log = logging.getLogger(__name__)
"""

from __future__ import annotations

import logging
import os
import re
import sys
from pathlib import Path
from typing import Dict, Optional


_CONFIGURED = False
_ROOT = "hooklight"


def _has_root(name: str) -> bool:
    return name == _ROOT or name.startswith(_ROOT + ".")


def _parse_module_levels(value: str) -> Dict[str, int]:
    """Parse per-module logger levels from an env-var style string.

    Format:
        HL_LOG_MODULE_LEVELS="hooklight.peaks=DEBUG,pipeline=INFO"

    Names outside the "hooklight." tree are auto-prefixed; separators are
    comma/semicolon, assignment "=" or ":". Invalid entries are ignored.
    """
    out: Dict[str, int] = {}
    if not value:
        return out
    for part in re.split(r"[;,]+", value):
        part = part.strip()
        if "=" in part:
            name, level_str = part.split("=", 1)
        elif ":" in part:
            name, level_str = part.split(":", 1)
        else:
            continue
        name = name.strip()
        level_str = level_str.strip().upper()
        if not name or not level_str:
            continue
        if not _has_root(name):
            name = f"{_ROOT}.{name}"
        level = getattr(logging, level_str, None)
        if isinstance(level, int):
            out[name] = level
    return out


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
) -> None:
    """Configure the `hooklight` logger tree (idempotent)."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    if format_string is None:
        format_string = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    formatter = logging.Formatter(format_string, datefmt="%Y-%m-%d %H:%M:%S")

    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)
    logger.handlers.clear()

    # Handlers stay permissive so per-module overrides can enable DEBUG.
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    for name, lvl in _parse_module_levels(os.getenv("HL_LOG_MODULE_LEVELS", "")).items():
        logging.getLogger(name).setLevel(lvl)

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger, prefixing `hooklight.` when missing."""
    if not _has_root(name):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)
