"""Behavior tests for playback-time resolution."""

import random

from narrsync.domain import Word
from narrsync.playback import NO_ACTIVE_SEGMENT, PlaybackPosition, resolve_playback
from narrsync.segmentation import build_segments


def _segments():
    return build_segments(
        [
            Word("Wait", 0, 300),
            Word("what?", 300, 700),
            Word("Really", 1500, 1900),
            Word("yes.", 2000, 2300),
        ]
    )


def test_resolve_playback_returns_minus_one_inside_gap() -> None:
    """Time between two segments resolves to no active segment."""
    assert resolve_playback(0.75, _segments(), -1) == PlaybackPosition(-1, None)


def test_resolve_playback_before_first_segment_is_inactive() -> None:
    """Time before the first segment resolves to no active segment."""
    segments = build_segments([Word("Late", 500, 900)])

    assert resolve_playback(0.2, segments) == PlaybackPosition(NO_ACTIVE_SEGMENT, None)


def test_resolve_playback_finds_segment_and_word() -> None:
    """The active word is looked up inside the active segment only."""
    segments = _segments()

    assert resolve_playback(0.1, segments) == PlaybackPosition(0, 0)
    assert resolve_playback(0.35, segments) == PlaybackPosition(0, 300)
    assert resolve_playback(1.6, segments) == PlaybackPosition(1, 1500)


def test_resolve_playback_word_gap_inside_segment_has_no_word() -> None:
    """Silence between words keeps the segment but leaves the word undefined."""
    position = resolve_playback(1.95, _segments())

    assert position.segment_index == 1
    assert position.word_start_ms is None


def test_resolve_playback_segment_end_is_exclusive() -> None:
    """A segment's end time belongs to the following gap."""
    assert resolve_playback(0.7, _segments()).segment_index == NO_ACTIVE_SEGMENT


def test_resolve_playback_clamps_to_last_segment_after_end() -> None:
    """Trailing silence keeps the last segment active."""
    segments = _segments()

    assert resolve_playback(2.3, segments) == PlaybackPosition(1, None)
    assert resolve_playback(99.0, segments) == PlaybackPosition(1, None)


def test_resolve_playback_handles_backward_seek() -> None:
    """Resolution ignores the previous index, so seeking back re-resolves."""
    segments = _segments()

    forward = resolve_playback(1.6, segments, 0)
    backward = resolve_playback(0.1, segments, forward.segment_index)

    assert backward == PlaybackPosition(0, 0)


def test_resolve_playback_is_total_and_idempotent() -> None:
    """Any time sample yields an in-range index or -1, identically on repeat."""
    segments = _segments()
    rng = random.Random(11)
    samples = [rng.uniform(-5.0, 5.0) for _ in range(200)] + [
        float("nan"),
        float("inf"),
        float("-inf"),
    ]

    for sample in samples:
        position = resolve_playback(sample, segments, 0)
        assert position == resolve_playback(sample, segments, 0)
        assert position.segment_index == NO_ACTIVE_SEGMENT or (
            0 <= position.segment_index < len(segments)
        )


def test_resolve_playback_empty_segments_is_inactive() -> None:
    """An empty transcript never has an active segment."""
    assert resolve_playback(1.0, []) == PlaybackPosition(NO_ACTIVE_SEGMENT, None)
