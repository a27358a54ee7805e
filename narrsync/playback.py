"""Playback-time resolution to the active segment and word."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import NamedTuple

from narrsync.domain import Segment
from narrsync.utils import get_logger

logger: logging.Logger = get_logger(__name__)

NO_ACTIVE_SEGMENT = -1


class PlaybackPosition(NamedTuple):
    """Resolved playback position for one clock sample."""

    segment_index: int
    word_start_ms: float | None

    @property
    def has_segment(self) -> bool:
        return self.segment_index != NO_ACTIVE_SEGMENT


INACTIVE_POSITION = PlaybackPosition(NO_ACTIVE_SEGMENT, None)


def find_segment_index(current_time_seconds: float, segments: Sequence[Segment]) -> int:
    """Returns the index of the segment containing the time, or ``-1``.

    Time at or past the last segment's end clamps to the last segment. Time
    before the first segment or inside a gap between segments is ``-1``.
    """
    if not segments or not math.isfinite(current_time_seconds):
        return NO_ACTIVE_SEGMENT
    for index, segment in enumerate(segments):
        if segment.start_time <= current_time_seconds < segment.end_time:
            return index
    if current_time_seconds >= segments[-1].end_time:
        return len(segments) - 1
    return NO_ACTIVE_SEGMENT


def find_word_start_ms(current_time_seconds: float, segment: Segment) -> float | None:
    """Returns the start time of the word spoken at this instant, if any."""
    current_ms = current_time_seconds * 1000
    for word in segment.words:
        if word.start_ms <= current_ms < word.end_ms:
            return word.start_ms
    return None


def resolve_playback(
    current_time_seconds: float,
    segments: Sequence[Segment],
    previous_active_index: int = NO_ACTIVE_SEGMENT,
) -> PlaybackPosition:
    """Maps a playback clock sample to the active segment and word.

    The result depends only on the time and the segment list; every call
    rescans both, so backward and forward seeks resolve like any other tick.

    Args:
        current_time_seconds: Media clock time in seconds.
        segments: Segments in time order.
        previous_active_index: Index resolved on the previous tick. Used only
            to report segment changes.

    Returns:
        The active segment index (or ``-1``) and the active word's start in ms
        (or ``None`` during silence).
    """
    segment_index = find_segment_index(current_time_seconds, segments)
    if segment_index != previous_active_index:
        logger.debug(
            "Active segment changed from %s to %s at %.3fs",
            previous_active_index,
            segment_index,
            current_time_seconds,
        )
    if segment_index == NO_ACTIVE_SEGMENT:
        return INACTIVE_POSITION
    return PlaybackPosition(
        segment_index=segment_index,
        word_start_ms=find_word_start_ms(current_time_seconds, segments[segment_index]),
    )
