from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .ai.classifier import ClassifierConfig, LLMSentenceClassifier
from .analysis_highlights import HighlightConfig, audio_only_candidates, find_highlights
from .analysis_hook import HookConfig, locate_hook
from .analysis_silence import SilenceConfig, detect_silence, find_cut_points
from .audio_features import EnergyConfig, signal_energy_profile
from .ffmpeg import FfmpegDecoder
from .logging_config import get_logger, setup_logging
from .models import Candidate, InputError
from .pipeline import Pipeline, PipelineError, PipelineStage
from .profile import load_profile
from .render import PassthroughRenderer, crop_rect
from .transcription import HttpTranscriber, TranscriberConfig
from .upload import HttpUploader, UploadConfig, is_supported_media
from .utils import format_file_size, format_time

log = get_logger("cli")


def _print_candidates(candidates: List[Candidate]) -> None:
    print(f"{'Rank':>4}  {'Start':>7}  {'End':>7}  {'Score':>6}  {'Audio':>6}  {'Text':>5}  {'Type':<12}  Reason")
    for rank, c in enumerate(candidates, start=1):
        print(
            f"{rank:>4}  {format_time(c.start):>7}  {format_time(c.end):>7}  {c.combined_score:>6.2f}  "
            f"{c.audio_energy:>6.2f}  {c.text_score:>5.2f}  {c.category:<12}  {c.reason}"
        )


def _decoder(profile: Dict[str, Any]) -> FfmpegDecoder:
    return FfmpegDecoder(sample_rate=int(profile.get("audio", {}).get("sample_rate", 44100)))


def _check_media(path: Path) -> None:
    if not path.exists():
        raise FileNotFoundError(f"Media file not found: {path}")
    if not is_supported_media(path):
        raise InputError(f"Unsupported media type: {path.suffix or path.name}")
    print(f"Media: {path.name} ({format_file_size(path.stat().st_size)})")


def _write_json(out_path: Optional[Path], payload: Dict[str, Any]) -> None:
    if out_path is None:
        return
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"Wrote: {out_path}")


def cmd_hook(args: argparse.Namespace) -> None:
    profile = load_profile(args.profile)
    _check_media(args.media)
    signal = _decoder(profile).decode_file(args.media)
    hook_cfg = HookConfig.from_profile(profile["analysis"]["hook"])
    hook = locate_hook(signal, hook_cfg)
    print(f"Hook: {format_time(hook.start)} - {format_time(hook.end)} ({hook.start:.2f}s - {hook.end:.2f}s)")


def cmd_suggest(args: argparse.Namespace) -> None:
    profile = load_profile(args.profile)
    analysis_cfg = profile["analysis"]
    _check_media(args.media)

    signal = _decoder(profile).decode_file(args.media)
    hook = locate_hook(signal, HookConfig.from_profile(analysis_cfg["hook"]))
    cfg = HighlightConfig.from_profile(analysis_cfg["highlights"], analysis_cfg.get("text"))
    count = args.count if args.count is not None else cfg.count
    threshold = args.threshold if args.threshold is not None else cfg.threshold

    times = find_highlights(
        signal.samples,
        signal.sample_rate,
        count,
        threshold,
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

    print(f"Hook: {format_time(hook.start)} - {format_time(hook.end)}")
    print()
    _print_candidates(candidates)
    _write_json(args.out, {
        "hook": hook.to_dict(),
        "highlights": [c.to_dict() for c in candidates],
        "times": times,
    })


def build_pipeline(profile: Dict[str, Any], *, use_services: bool = True) -> Pipeline:
    analysis_cfg = profile["analysis"]
    services = profile.get("services", {})

    uploader = None
    transcriber = None
    classifier = None
    if use_services:
        upload_cfg = UploadConfig.from_profile(services.get("upload", {}))
        transcriber_cfg = TranscriberConfig.from_profile(services.get("transcription", {}))
        if upload_cfg.endpoint and transcriber_cfg.endpoint:
            uploader = HttpUploader(upload_cfg)
            transcriber = HttpTranscriber(transcriber_cfg)
        else:
            log.info("Upload/transcription endpoints not configured; running audio-only")

        classifier_cfg = ClassifierConfig.from_profile(profile.get("ai", {}).get("classifier", {}))
        if classifier_cfg.enabled:
            classifier = LLMSentenceClassifier.from_config(classifier_cfg)

    return Pipeline(
        decoder=_decoder(profile),
        uploader=uploader,
        transcriber=transcriber,
        classifier=classifier,
        hook_cfg=HookConfig.from_profile(analysis_cfg["hook"]),
        highlight_cfg=HighlightConfig.from_profile(analysis_cfg["highlights"], analysis_cfg.get("text")),
    )


def cmd_run(args: argparse.Namespace) -> None:
    profile = load_profile(args.profile)
    _check_media(args.media)
    pipeline = build_pipeline(profile, use_services=not args.audio_only)

    def on_stage(stage: PipelineStage, msg: str) -> None:
        print(f"[{stage.value}] {msg}".rstrip(), flush=True)

    result = pipeline.run(args.media, on_stage=on_stage)

    print()
    print(f"Hook: {format_time(result.hook.start)} - {format_time(result.hook.end)}  (mode: {result.mode})")
    print()
    _print_candidates(result.highlights)
    _write_json(args.out, result.to_dict())

    aspect = args.aspect or profile.get("render", {}).get("aspect_ratio", "9:16")
    rendered = PassthroughRenderer().render(args.media, result.clip_ranges(), aspect)
    print(f"Rendered ({aspect}): {rendered}")


def cmd_cuts(args: argparse.Namespace) -> None:
    profile = load_profile(args.profile)
    _check_media(args.media)
    signal = _decoder(profile).decode_file(args.media)
    silence_cfg = SilenceConfig.from_profile(profile["analysis"].get("silence", {}))
    if args.verbose:
        for s in detect_silence(signal.samples, signal.sample_rate, silence_cfg):
            log.debug(f"Silence {s.start:.2f}s - {s.end:.2f}s ({s.duration:.2f}s)")
    cuts = find_cut_points(signal.samples, args.target, signal.sample_rate, threshold=silence_cfg.threshold)
    for t in cuts:
        print(f"{format_time(t):>7}  ({t:.2f}s)")


def cmd_crop(args: argparse.Namespace) -> None:
    rect = crop_rect(args.width, args.height, args.aspect)
    print(f"crop={rect.width:.0f}:{rect.height:.0f}:{rect.x:.0f}:{rect.y:.0f}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="hooklight", description="Find the hook and highlights in spoken audio.")
    p.add_argument("--profile", type=Path, default=None, help="YAML profile")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("hook", help="Locate the opening hook")
    sp.add_argument("media", type=Path)
    sp.set_defaults(func=cmd_hook)

    sp = sub.add_parser("suggest", help="Hook plus audio-only highlights")
    sp.add_argument("media", type=Path)
    sp.add_argument("--count", type=int, default=None)
    sp.add_argument("--threshold", type=float, default=None)
    sp.add_argument("--out", type=Path, default=None)
    sp.set_defaults(func=cmd_suggest)

    sp = sub.add_parser("run", help="Full pipeline (upload, transcribe, classify, fuse)")
    sp.add_argument("media", type=Path)
    sp.add_argument("--audio-only", action="store_true", help="Skip upload/transcription/classification")
    sp.add_argument("--aspect", choices=["16:9", "9:16"], default=None, help="Output aspect (default: profile)")
    sp.add_argument("--out", type=Path, default=None)
    sp.set_defaults(func=cmd_run)

    sp = sub.add_parser("cuts", help="Suggest cut points near silences")
    sp.add_argument("media", type=Path)
    sp.add_argument("--target", type=float, required=True, help="Target clip length (seconds)")
    sp.set_defaults(func=cmd_cuts)

    sp = sub.add_parser("crop", help="Centered crop box for an aspect ratio")
    sp.add_argument("--width", type=int, required=True)
    sp.add_argument("--height", type=int, required=True)
    sp.add_argument("--aspect", choices=["16:9", "9:16"], default="9:16")
    sp.set_defaults(func=cmd_crop)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        args.func(args)
    except (InputError, FileNotFoundError, PipelineError) as e:
        log.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
