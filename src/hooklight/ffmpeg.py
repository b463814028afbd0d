from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import numpy as np

from .models import AudioSignal
from .utils import subprocess_flags as _subprocess_flags

logger = logging.getLogger(__name__)


def _require_cmd(cmd: str) -> str:
    path = shutil.which(cmd)
    if not path:
        raise RuntimeError(
            f"Required executable '{cmd}' not found in PATH. "
            "Install ffmpeg and ensure it is available on PATH."
        )
    return path


class AudioDecoder(Protocol):
    def decode(self, data: bytes) -> AudioSignal:
        """Decode encoded media bytes into a mono signal."""
        ...

    def decode_file(self, path: Path) -> AudioSignal:
        """Decode a media file into a mono signal."""
        ...


@dataclass(frozen=True)
class FfmpegDecoder:
    """Decode any ffmpeg-readable media to mono float32 PCM.

    ffmpeg always reads from a real file so containers that keep their index
    at the end (MP4/MOV with a trailing moov atom) can be seeked. Raw bytes
    are spilled to a temporary file first.
    """
    sample_rate: int = 44100

    def decode_file(self, path: Path) -> AudioSignal:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Media file not found: {path}")
        _require_cmd("ffmpeg")

        cmd = [
            "ffmpeg",
            "-v",
            "error",
            "-i",
            str(path),
            "-vn",
            "-ac",
            "1",
            "-ar",
            str(self.sample_rate),
            "-f",
            "f32le",
            "pipe:1",
        ]
        proc = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            **_subprocess_flags(),
        )
        if proc.returncode != 0:
            msg = proc.stderr.decode("utf-8", errors="replace").strip()
            raise RuntimeError(f"ffmpeg failed (exit={proc.returncode}). {msg}")

        raw = proc.stdout
        # Guard against odd byte counts.
        raw = raw[: len(raw) - (len(raw) % 4)]
        samples = np.frombuffer(raw, dtype="<f4")
        logger.info(
            f"Decoded {len(samples) / float(self.sample_rate):.1f}s of audio "
            f"from {path.name} at {self.sample_rate} Hz"
        )
        return AudioSignal(samples=samples, sample_rate=self.sample_rate)

    def decode(self, data: bytes, *, suffix: str = "") -> AudioSignal:
        if not data:
            raise ValueError("Cannot decode empty media")
        with tempfile.TemporaryDirectory(prefix="hl_decode_") as td:
            tmp = Path(td) / f"media{suffix}"
            tmp.write_bytes(data)
            return self.decode_file(tmp)
