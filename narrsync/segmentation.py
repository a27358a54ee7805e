"""Sentence segmentation of word-level transcripts."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from narrsync.config import DEFAULT_PAUSE_THRESHOLD_MS
from narrsync.domain import Segment, Word
from narrsync.utils import get_logger

logger: logging.Logger = get_logger(__name__)

TERMINAL_PUNCTUATION: tuple[str, ...] = (".", "!", "?")


@dataclass(frozen=True)
class SegmentationPolicy:
    """Controls which conditions close a sentence segment.

    Attributes:
        pause_threshold_ms: A gap between one word's end and the next word's
            start longer than this closes the segment. ``None`` disables the
            pause rule so only punctuation and the final word end segments.
    """

    pause_threshold_ms: float | None = None

    @classmethod
    def with_pause_boundaries(
        cls, pause_threshold_ms: float = DEFAULT_PAUSE_THRESHOLD_MS
    ) -> SegmentationPolicy:
        return cls(pause_threshold_ms=pause_threshold_ms)


def _validate_policy(policy: SegmentationPolicy) -> None:
    if policy.pause_threshold_ms is not None and policy.pause_threshold_ms < 0.0:
        raise ValueError("pause_threshold_ms cannot be negative.")


def _ends_sentence(text: str) -> bool:
    return text.endswith(TERMINAL_PUNCTUATION)


def _is_long_pause(word: Word, next_word: Word | None, threshold_ms: float | None) -> bool:
    if threshold_ms is None or next_word is None:
        return False
    return next_word.start_ms - word.end_ms > threshold_ms


def build_segments(
    words: Sequence[Word],
    *,
    policy: SegmentationPolicy | None = None,
) -> list[Segment]:
    """Groups ordered words into sentence segments.

    A segment closes on a word ending with terminal punctuation, on the last
    word, or, when the policy enables it, before a long pause.

    Args:
        words: Words in non-decreasing start order.
        policy: Boundary policy. Defaults to punctuation-only boundaries.

    Returns:
        Segments in time order with start/end times in seconds.
    """
    resolved_policy = policy if policy is not None else SegmentationPolicy()
    _validate_policy(resolved_policy)
    segments: list[Segment] = []
    if not words:
        return segments

    buffer: list[Word] = []
    for index, word in enumerate(words):
        buffer.append(word)
        next_word = words[index + 1] if index + 1 < len(words) else None

        if not (
            _ends_sentence(word.text)
            or next_word is None
            or _is_long_pause(word, next_word, resolved_policy.pause_threshold_ms)
        ):
            continue

        segments.append(
            Segment(
                text=" ".join(item.text for item in buffer).strip(),
                start_time=buffer[0].start_ms / 1000,
                end_time=word.end_ms / 1000,
                words=tuple(buffer),
            )
        )
        buffer = []

    logger.debug("Built %s segments from %s words.", len(segments), len(words))
    return segments
