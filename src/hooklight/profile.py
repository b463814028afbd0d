from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


def default_profile() -> Dict[str, Any]:
    return {
        "analysis": {
            "hook": {
                "duration_seconds": 15.0,
                "step_seconds": 0.25,
            },
            "highlights": {
                "count": 5,
                "threshold": 0.7,
                "clip_seconds": 30.0,
                "min_distance_seconds": 30,
                "enhanced": True,
            },
            "text": {
                "fuzzy_threshold": 0.7,
            },
            "silence": {
                "threshold": 0.01,
                "min_duration_seconds": 0.5,
            },
        },
        "audio": {
            "sample_rate": 44100,
        },
        "services": {
            "upload": {
                "endpoint": None,
                "timeout_s": 120,
            },
            "transcription": {
                "endpoint": None,
                "language": "he",
                "timeout_s": 600,
            },
        },
        "ai": {
            "classifier": {
                "enabled": True,
                "endpoint": "http://127.0.0.1:11435",
                "timeout_s": 60,
                "max_tokens": 2048,
                "temperature": 0.2,
            },
        },
        "render": {
            "aspect_ratio": "9:16",
        },
    }


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _deep_merge(out[key], value)
        else:
            out[key] = value
    return out


def load_profile(profile_path: Optional[Path]) -> Dict[str, Any]:
    """Load a YAML profile layered over `default_profile()`."""
    if profile_path is None:
        return default_profile()

    profile_path = Path(profile_path)
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text(encoding="utf-8"))
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Profile YAML must be a mapping")
    return _deep_merge(default_profile(), data)
