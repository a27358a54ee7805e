"""Domain data structures for transcript words, segments, expressions, and images."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, NamedTuple

type Expression = Literal[
    "Talking",
    "Angry",
    "Sad",
    "FoldingHands",
    "LittleShocked",
    "Frustrated",
    "MoreShocked",
    "MoreSad",
]
type ImageFetchState = Literal["no_suggestion", "loading", "fetched", "failed"]

TALKING: Expression = "Talking"
ANGRY: Expression = "Angry"
SAD: Expression = "Sad"
FOLDING_HANDS: Expression = "FoldingHands"
LITTLE_SHOCKED: Expression = "LittleShocked"
FRUSTRATED: Expression = "Frustrated"
MORE_SHOCKED: Expression = "MoreShocked"
MORE_SAD: Expression = "MoreSad"

ALL_EXPRESSIONS: tuple[Expression, ...] = (
    TALKING,
    ANGRY,
    SAD,
    FOLDING_HANDS,
    LITTLE_SHOCKED,
    FRUSTRATED,
    MORE_SHOCKED,
    MORE_SAD,
)

# Expressions eligible for emphasis pulses.
STRONG_EXPRESSIONS: frozenset[Expression] = frozenset(
    {ANGRY, FRUSTRATED, MORE_SHOCKED, MORE_SAD, LITTLE_SHOCKED}
)

EXPRESSION_LABELS: dict[Expression, str] = {
    TALKING: "Talking",
    ANGRY: "Angry",
    SAD: "Sad",
    FOLDING_HANDS: "Folding Hands",
    LITTLE_SHOCKED: "Little Shocked",
    FRUSTRATED: "Frustrated",
    MORE_SHOCKED: "More Shocked",
    MORE_SAD: "More Sad",
}


class Word(NamedTuple):
    """A transcript word with start/end timing in milliseconds."""

    text: str
    start_ms: float
    end_ms: float
    confidence: float | None = None


@dataclass
class Segment:
    """A sentence-like span of transcript time.

    Only ``visual_query`` and ``image_fetch_state`` change after the segment is
    built; they carry visual-pipeline status for display and never influence
    synchronization.
    """

    text: str
    start_time: float
    end_time: float
    words: tuple[Word, ...]
    visual_query: str | None = None
    image_fetch_state: ImageFetchState = "no_suggestion"


@dataclass(frozen=True)
class ImageBinding:
    """Contextual image selection for one segment index."""

    suggested_url: str | None = None
    user_override_url: str | None = None
    display_url: str | None = None

    @classmethod
    def create(
        cls, suggested_url: str | None, user_override_url: str | None
    ) -> ImageBinding:
        """Builds a binding whose display URL prefers a non-empty override."""
        suggested = suggested_url or None
        override = user_override_url.strip() if user_override_url else ""
        return cls(
            suggested_url=suggested,
            user_override_url=override or None,
            display_url=override or suggested,
        )


class TimelineEntry(NamedTuple):
    """A rendered timeline row: when the displayed state changed and to what."""

    timestamp_seconds: float
    segment_index: int
    expression: Expression
    speech: str
    overlay_url: str | None
