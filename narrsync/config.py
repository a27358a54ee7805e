"""Typed runtime settings for narrative synchronization."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from narrsync.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

DEFAULT_PAUSE_THRESHOLD_MS = 700.0
DEFAULT_TICK_INTERVAL_SECONDS = 0.25
DEFAULT_TIMELINE_FOLDER = Path("./narrsync/timelines")

_DISABLED_VALUES: frozenset[str] = frozenset({"", "off", "none", "false", "0"})


@dataclass(frozen=True)
class SegmentationSettings:
    """Sentence-boundary policy for transcript segmentation.

    Attributes:
        pause_threshold_ms: Silence between two words that closes a segment.
            ``None`` disables the pause rule.
    """

    pause_threshold_ms: float | None = None


@dataclass(frozen=True)
class SynthesisSettings:
    """Expression synthesizer controls."""

    random_seed: int | None = None


@dataclass(frozen=True)
class PlaybackSettings:
    """Offline playback simulation controls."""

    tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS


@dataclass(frozen=True)
class TimelineSettings:
    """Timeline export location."""

    folder: Path = DEFAULT_TIMELINE_FOLDER


@dataclass(frozen=True)
class AppConfig:
    """Aggregated application settings."""

    segmentation: SegmentationSettings = field(default_factory=SegmentationSettings)
    synthesis: SynthesisSettings = field(default_factory=SynthesisSettings)
    playback: PlaybackSettings = field(default_factory=PlaybackSettings)
    timeline: TimelineSettings = field(default_factory=TimelineSettings)


def _read_pause_threshold() -> float | None:
    raw_value = os.getenv("NARRSYNC_PAUSE_THRESHOLD_MS", "").strip()
    if raw_value.lower() in _DISABLED_VALUES:
        return None
    try:
        threshold = float(raw_value)
    except ValueError:
        logger.warning(
            "Ignoring invalid NARRSYNC_PAUSE_THRESHOLD_MS=%r; pause boundaries disabled.",
            raw_value,
        )
        return None
    if threshold <= 0.0:
        logger.warning(
            "Ignoring non-positive NARRSYNC_PAUSE_THRESHOLD_MS=%r; pause boundaries disabled.",
            raw_value,
        )
        return None
    return threshold


def _read_random_seed() -> int | None:
    raw_value = os.getenv("NARRSYNC_RANDOM_SEED", "").strip()
    if not raw_value:
        return None
    try:
        return int(raw_value)
    except ValueError:
        logger.warning("Ignoring invalid NARRSYNC_RANDOM_SEED=%r.", raw_value)
        return None


def _read_tick_interval() -> float:
    raw_value = os.getenv("NARRSYNC_TICK_INTERVAL", "").strip()
    if not raw_value:
        return DEFAULT_TICK_INTERVAL_SECONDS
    try:
        interval = float(raw_value)
    except ValueError:
        interval = 0.0
    if interval <= 0.0:
        logger.warning(
            "Ignoring invalid NARRSYNC_TICK_INTERVAL=%r; using %s seconds.",
            raw_value,
            DEFAULT_TICK_INTERVAL_SECONDS,
        )
        return DEFAULT_TICK_INTERVAL_SECONDS
    return interval


def _build_settings() -> AppConfig:
    timeline_folder = os.getenv("NARRSYNC_TIMELINE_DIR", "").strip()
    return AppConfig(
        segmentation=SegmentationSettings(pause_threshold_ms=_read_pause_threshold()),
        synthesis=SynthesisSettings(random_seed=_read_random_seed()),
        playback=PlaybackSettings(tick_interval_seconds=_read_tick_interval()),
        timeline=TimelineSettings(
            folder=Path(timeline_folder) if timeline_folder else DEFAULT_TIMELINE_FOLDER
        ),
    )


_SETTINGS: AppConfig | None = None


def reload_settings() -> AppConfig:
    """Rebuilds settings from the current environment and caches them."""
    global _SETTINGS
    _SETTINGS = _build_settings()
    return _SETTINGS


def get_settings() -> AppConfig:
    """Returns cached settings, loading them on first access."""
    if _SETTINGS is None:
        return reload_settings()
    return _SETTINGS
