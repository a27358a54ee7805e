"""Per-tick synchronization of segment, expression, and overlay image."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import NamedTuple

from narrsync.domain import TALKING, Expression, Segment, Word
from narrsync.expressions import RandomSource
from narrsync.images import ContextualImageTimeline
from narrsync.playback import NO_ACTIVE_SEGMENT, resolve_playback
from narrsync.segmentation import SegmentationPolicy, build_segments
from narrsync.synthesizer import EMPHASIS_PULSE, EmphasisCallback, ExpressionSynthesizer
from narrsync.utils import get_logger

logger: logging.Logger = get_logger(__name__)


class Frame(NamedTuple):
    """Everything the host renders for one tick."""

    time_seconds: float
    segment_index: int
    word_start_ms: float | None
    expression: Expression
    overlay_url: str | None
    emphasized: bool = False


class PlaybackSession:
    """Owns the segments, image bindings, and synthesizer of one transcript.

    Each tick resolves the playback position first and then feeds the freshly
    resolved segment and word to the synthesizer.
    """

    def __init__(
        self,
        rng: RandomSource,
        *,
        on_emphasize: EmphasisCallback | None = None,
        policy: SegmentationPolicy | None = None,
    ) -> None:
        self._policy = policy
        self._segments: tuple[Segment, ...] = ()
        self._active_index = NO_ACTIVE_SEGMENT
        self.images = ContextualImageTimeline()
        self.synthesizer = ExpressionSynthesizer(rng, on_emphasize=on_emphasize)

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self._segments

    @property
    def active_index(self) -> int:
        return self._active_index

    @property
    def duration_seconds(self) -> float:
        return self._segments[-1].end_time if self._segments else 0.0

    def load_transcript(self, words: Sequence[Word]) -> tuple[Segment, ...]:
        """Segments a new transcript and starts a fresh session for it."""
        return self.load_segments(build_segments(words, policy=self._policy))

    def load_segments(self, segments: Sequence[Segment]) -> tuple[Segment, ...]:
        """Replaces the segment list, clearing image bindings and synthesizer memory."""
        self._segments = tuple(segments)
        self._active_index = NO_ACTIVE_SEGMENT
        self.images.clear()
        self.synthesizer.reset()
        logger.info("Loaded %s segments.", len(self._segments))
        return self._segments

    def tick(self, current_time_seconds: float, is_active: bool) -> Frame:
        """Processes one playback clock sample."""
        if not is_active:
            return self._inactive_frame(current_time_seconds)

        position = resolve_playback(current_time_seconds, self._segments, self._active_index)
        self._active_index = position.segment_index
        segment_text = (
            self._segments[position.segment_index].text if position.has_segment else None
        )
        result = self.synthesizer.update(
            is_active=True,
            segment_text=segment_text,
            word_start_ms=position.word_start_ms,
        )
        return Frame(
            time_seconds=current_time_seconds,
            segment_index=position.segment_index,
            word_start_ms=position.word_start_ms,
            expression=result.expression,
            overlay_url=self.images.display_url_for(position.segment_index),
            emphasized=EMPHASIS_PULSE in result.effects,
        )

    def stop(self) -> Expression:
        """Stops playback; repeated calls leave the stopped state unchanged."""
        self._active_index = NO_ACTIVE_SEGMENT
        return self.synthesizer.stop()

    def _inactive_frame(self, current_time_seconds: float) -> Frame:
        self.stop()
        return Frame(
            time_seconds=current_time_seconds,
            segment_index=NO_ACTIVE_SEGMENT,
            word_start_ms=None,
            expression=TALKING,
            overlay_url=None,
        )


def simulate_playback(
    session: PlaybackSession,
    *,
    tick_interval_seconds: float,
    end_time_seconds: float | None = None,
) -> list[Frame]:
    """Drives a session with evenly spaced ticks from zero to the end.

    Args:
        session: Session with a loaded transcript.
        tick_interval_seconds: Spacing between clock samples.
        end_time_seconds: Last sample time. Defaults to the transcript end.

    Returns:
        Frames for every tick followed by the final stopped frame.
    """
    if not math.isfinite(tick_interval_seconds) or tick_interval_seconds <= 0.0:
        raise ValueError("tick_interval_seconds must be a positive number.")
    end_time = session.duration_seconds if end_time_seconds is None else end_time_seconds

    frames: list[Frame] = []
    tick_count = int(math.floor(end_time / tick_interval_seconds)) + 1 if end_time > 0 else 1
    for tick_number in range(tick_count):
        frames.append(session.tick(tick_number * tick_interval_seconds, is_active=True))
    frames.append(session.tick(end_time, is_active=False))
    logger.info("Simulated %s ticks over %.2f seconds.", tick_count, end_time)
    return frames
