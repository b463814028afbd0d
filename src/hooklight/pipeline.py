"""Per-upload processing pipeline.

Stages run strictly in order:

    UPLOADING -> AUDIO_DECODING -> TRANSCRIBING -> HOOK_LOCATING -> HIGHLIGHTING -> READY

Upload and decode failures are fatal. A transcription failure downgrades the
run to audio-only highlighting, and so does a failure of enhanced
highlighting itself.
"""
from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .analysis_highlights import (
    HighlightConfig,
    audio_only_candidates,
    find_enhanced_highlights,
    find_highlights,
)
from .analysis_hook import HookConfig, locate_hook
from .analysis_text import SentenceClassifier
from .audio_features import EnergyConfig, signal_energy_profile
from .ffmpeg import AudioDecoder
from .models import AudioSignal, Candidate, InputError, TimeRange
from .transcription.base import Transcriber, TranscriptResult
from .upload import Uploader, is_supported_media

logger = logging.getLogger(__name__)


class PipelineStage(str, enum.Enum):
    UPLOADING = "uploading"
    AUDIO_DECODING = "audio_decoding"
    TRANSCRIBING = "transcribing"
    HOOK_LOCATING = "hook_locating"
    HIGHLIGHTING = "highlighting"
    READY = "ready"
    FAILED = "failed"


class PipelineError(RuntimeError):
    """A fatal pipeline failure; `stage` is where it happened."""

    def __init__(self, stage: PipelineStage, message: str):
        super().__init__(f"{stage.value}: {message}")
        self.stage = stage


class PipelineCancelled(RuntimeError):
    pass


StageCallback = Callable[[PipelineStage, str], None]


@dataclass
class PipelineResult:
    hook: TimeRange
    highlights: List[Candidate]
    mode: str  # "enhanced" or "audio"
    duration_seconds: float
    transcript: Optional[TranscriptResult] = None
    media_url: Optional[str] = None

    def highlight_times(self) -> List[float]:
        return sorted(c.start for c in self.highlights)

    def clip_ranges(self) -> List[TimeRange]:
        """Ranges for the final cut: the hook, then highlights in playback order."""
        ordered = sorted(self.highlights, key=lambda c: c.start)
        return [self.hook] + [TimeRange(c.start, c.end) for c in ordered]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hook": self.hook.to_dict(),
            "highlights": [c.to_dict() for c in self.highlights],
            "mode": self.mode,
            "duration_seconds": self.duration_seconds,
            "media_url": self.media_url,
            "transcript": self.transcript.to_dict() if self.transcript else None,
        }


@dataclass
class Pipeline:
    """Wires the analysis core to its collaborators.

    `uploader`, `transcriber` and `classifier` are optional; without them the
    run is audio-only.
    """
    decoder: AudioDecoder
    uploader: Optional[Uploader] = None
    transcriber: Optional[Transcriber] = None
    classifier: Optional[SentenceClassifier] = None
    hook_cfg: HookConfig = field(default_factory=HookConfig)
    highlight_cfg: HighlightConfig = field(default_factory=HighlightConfig)

    def run(
        self,
        media_path: Path,
        *,
        on_stage: Optional[StageCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> PipelineResult:
        media_path = Path(media_path)
        if not is_supported_media(media_path):
            raise InputError(f"Unsupported media type: {media_path.suffix or media_path.name}")

        stage = PipelineStage.UPLOADING

        def _enter(new_stage: PipelineStage, msg: str = "") -> None:
            nonlocal stage
            if cancel_event is not None and cancel_event.is_set():
                raise PipelineCancelled(f"Cancelled before {new_stage.value}")
            stage = new_stage
            logger.info(f"[{new_stage.value}] {msg}".rstrip())
            if on_stage:
                on_stage(new_stage, msg)

        try:
            return self._run(media_path, _enter)
        except (PipelineError, PipelineCancelled):
            if on_stage:
                on_stage(PipelineStage.FAILED, "")
            raise
        except Exception as e:
            logger.error(f"Pipeline failed during {stage.value}: {e}")
            if on_stage:
                on_stage(PipelineStage.FAILED, str(e))
            raise PipelineError(stage, str(e)) from e

    def _run(self, media_path: Path, enter: Callable[[PipelineStage, str], None]) -> PipelineResult:
        media_url: Optional[str] = None
        if self.uploader is not None and self.transcriber is not None:
            enter(PipelineStage.UPLOADING, f"Uploading {media_path.name}")
            media_url = self.uploader.upload(media_path)

        enter(PipelineStage.AUDIO_DECODING, "Decoding audio")
        signal = self.decoder.decode_file(media_path)
        if len(signal) == 0:
            raise InputError("Decoded audio is empty")

        transcript: Optional[TranscriptResult] = None
        if media_url is not None and self.transcriber is not None:
            enter(PipelineStage.TRANSCRIBING, "Transcribing")
            try:
                transcript = self.transcriber.transcribe(media_url)
            except Exception as e:
                logger.warning(f"Transcription failed, continuing audio-only: {e}")
                transcript = None

        enter(PipelineStage.HOOK_LOCATING, "Locating hook")
        hook = locate_hook(signal, self.hook_cfg)

        enter(PipelineStage.HIGHLIGHTING, "Finding highlights")
        highlights, mode = self._highlights(signal, transcript, hook)

        enter(PipelineStage.READY, f"{len(highlights)} highlights ({mode})")
        return PipelineResult(
            hook=hook,
            highlights=highlights,
            mode=mode,
            duration_seconds=signal.duration_seconds,
            transcript=transcript,
            media_url=media_url,
        )

    def _highlights(
        self,
        signal: AudioSignal,
        transcript: Optional[TranscriptResult],
        hook: TimeRange,
    ) -> tuple[List[Candidate], str]:
        cfg = self.highlight_cfg
        use_text = (
            cfg.enhanced
            and transcript is not None
            and bool(transcript.segments)
            and self.classifier is not None
        )
        if use_text:
            try:
                candidates = find_enhanced_highlights(
                    signal.samples,
                    signal.sample_rate,
                    transcript,
                    cfg.count,
                    cfg.threshold,
                    hook,
                    classifier=self.classifier,
                    clip_seconds=cfg.clip_seconds,
                    min_distance=cfg.min_distance_seconds,
                    fuzzy_threshold=cfg.fuzzy_threshold,
                )
                return candidates, "enhanced"
            except Exception as e:
                logger.warning(f"Enhanced highlighting failed, using audio-only: {e}")

        times = find_highlights(
            signal.samples,
            signal.sample_rate,
            cfg.count,
            cfg.threshold,
            hook,
            min_distance=cfg.min_distance_seconds,
        )
        normalized = signal_energy_profile(signal.samples, signal.sample_rate, EnergyConfig())
        candidates = audio_only_candidates(
            times,
            normalized,
            clip_seconds=cfg.clip_seconds,
            duration_s=signal.duration_seconds,
        )
        return candidates, "audio"
