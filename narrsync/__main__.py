"""
Narrative Synchronization Tool

Entry point for the narrsync command-line interface. It segments a word-level
transcript, applies contextual image bindings, simulates playback against the
synchronization engine, and prints or exports the resulting timeline.

Usage:
    narrsync --transcript words.json [--images images.json] [--seed 7]
             [--save-timeline] [--subtitle-output out.srt]
"""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
import time
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from narrsync.config import DEFAULT_PAUSE_THRESHOLD_MS, AppConfig, reload_settings
from narrsync.images import ContextualImageTimeline
from narrsync.segmentation import SegmentationPolicy
from narrsync.session import PlaybackSession, simulate_playback
from narrsync.transcript import load_words
from narrsync.utils.logger import configure_logging, get_logger
from narrsync.utils.subtitles import FORMATTERS, segments_to_cues
from narrsync.utils.timeline_utils import (
    build_timeline,
    print_timeline,
    save_timeline_to_csv,
)

logger: logging.Logger = get_logger("narrsync")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="narrsync",
        description="Timed narrative synchronization simulator",
    )
    parser.add_argument(
        "--transcript",
        type=str,
        help="Path to a word-level transcript JSON file (times in milliseconds)",
    )
    parser.add_argument(
        "--images",
        type=str,
        help=(
            "Path to a JSON object mapping segment index to "
            '{"suggested": url, "override": url}'
        ),
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible expression choices",
    )
    pause_group = parser.add_mutually_exclusive_group()
    pause_group.add_argument(
        "--pause-threshold-ms",
        type=float,
        nargs="?",
        const=DEFAULT_PAUSE_THRESHOLD_MS,
        help=(
            "Close sentences on pauses longer than this many milliseconds "
            f"(default when given without a value: {DEFAULT_PAUSE_THRESHOLD_MS:g})"
        ),
    )
    pause_group.add_argument(
        "--no-pause-boundary",
        action="store_true",
        help="Only punctuation and the last word close sentences",
    )
    parser.add_argument(
        "--tick",
        type=float,
        help="Simulated playback tick interval in seconds",
    )
    parser.add_argument(
        "--save-timeline",
        action="store_true",
        help="Save the timeline to a CSV file",
    )
    parser.add_argument(
        "--subtitle-format",
        choices=tuple(FORMATTERS.keys()),
        help=(
            "Export segments as subtitles in the chosen format. "
            "If omitted, the format is inferred from --subtitle-output when possible."
        ),
    )
    parser.add_argument(
        "--subtitle-output",
        type=str,
        help="File path for the exported subtitle file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level for this invocation (overrides LOG_LEVEL)",
    )
    return parser


def _resolve_policy(args: argparse.Namespace, settings: AppConfig) -> SegmentationPolicy:
    if args.no_pause_boundary:
        return SegmentationPolicy(pause_threshold_ms=None)
    if args.pause_threshold_ms is not None:
        return SegmentationPolicy(pause_threshold_ms=args.pause_threshold_ms)
    return SegmentationPolicy(pause_threshold_ms=settings.segmentation.pause_threshold_ms)


def apply_image_bindings(timeline: ContextualImageTimeline, payload: Any) -> int:
    """Applies ``{index: {"suggested": url, "override": url}}`` bindings."""
    if not isinstance(payload, dict):
        logger.warning("Image bindings must be a JSON object; ignoring.")
        return 0
    applied = 0
    for key, binding in payload.items():
        try:
            index = int(key)
        except (TypeError, ValueError):
            logger.warning("Skipping image binding with non-integer key %r.", key)
            continue
        if index < 0 or not isinstance(binding, dict):
            logger.warning("Skipping invalid image binding for key %r.", key)
            continue
        suggested = binding.get("suggested")
        override = binding.get("override")
        if not all(url is None or isinstance(url, str) for url in (suggested, override)):
            logger.warning("Skipping image binding for key %r with non-string URL.", key)
            continue
        timeline.set_suggested(index, suggested)
        timeline.set_override(index, override)
        applied += 1
    return applied


def _infer_subtitle_format(output_path: str) -> str | None:
    suffix = Path(output_path).suffix.lower().lstrip(".")
    return suffix if suffix in FORMATTERS else None


def main() -> None:
    """
    Main function to handle the command line interface logic.
    """
    args = _build_parser().parse_args()
    load_dotenv()
    configure_logging(args.log_level)
    settings = reload_settings()

    if not args.transcript:
        logger.error("No transcript file provided.")
        sys.exit(1)

    subtitle_format: str | None = args.subtitle_format
    if subtitle_format or args.subtitle_output:
        if not args.subtitle_output:
            logger.error("--subtitle-output is required to export subtitles.")
            sys.exit(1)
        subtitle_format = subtitle_format or _infer_subtitle_format(args.subtitle_output)
        if not subtitle_format:
            logger.error(
                "Unable to infer subtitle format from %s. Provide --subtitle-format.",
                args.subtitle_output,
            )
            sys.exit(1)

    start_time = time.time()
    try:
        words = load_words(args.transcript)
    except (OSError, json.JSONDecodeError) as err:
        logger.error("Failed to read transcript %s: %s", args.transcript, err)
        sys.exit(1)

    seed = args.seed if args.seed is not None else settings.synthesis.random_seed
    session = PlaybackSession(
        random.Random(seed),
        on_emphasize=lambda: logger.debug("Emphasis pulse"),
        policy=_resolve_policy(args, settings),
    )
    segments = session.load_transcript(words)
    if not segments:
        logger.warning("Transcript produced no segments.")

    if args.images:
        try:
            with open(args.images, encoding="utf-8") as handle:
                bindings = json.load(handle)
        except (OSError, json.JSONDecodeError) as err:
            logger.error("Failed to read image bindings %s: %s", args.images, err)
            sys.exit(1)
        applied = apply_image_bindings(session.images, bindings)
        logger.info("Applied %s image bindings.", applied)

    tick_interval = args.tick if args.tick is not None else settings.playback.tick_interval_seconds
    try:
        frames = simulate_playback(session, tick_interval_seconds=tick_interval)
    except ValueError as err:
        logger.error("Invalid simulation settings: %s", err)
        sys.exit(1)

    timeline = build_timeline(frames, segments)
    print_timeline(timeline)

    if subtitle_format:
        cues = segments_to_cues(segments, frames)
        if not cues:
            logger.warning("No segments to export as subtitles.")
        else:
            try:
                FORMATTERS[subtitle_format].generate_file(cues, args.subtitle_output)
            except OSError as err:
                logger.error("Failed to export subtitles: %s", err, exc_info=True)
                sys.exit(1)
            logger.info("Subtitle file exported to %s", args.subtitle_output)

    if args.save_timeline:
        csv_file_name = save_timeline_to_csv(timeline, args.transcript)
        logger.info("Timeline saved to %s", csv_file_name)

    logger.info("Simulation completed in %.2f seconds", time.time() - start_time)


if __name__ == "__main__":
    main()
