"""Behavior tests for visual suggestion and image search orchestration."""

from narrsync.domain import Segment, Word
from narrsync.images import ContextualImageTimeline
from narrsync.segmentation import build_segments
from narrsync.visuals import populate_contextual_images, search_with_fallback


def _segments():
    return build_segments(
        [
            Word("Walking", 0, 300),
            Word("downtown.", 300, 700),
            Word("Nothing", 800, 1100),
            Word("here.", 1100, 1400),
            Word("Typing", 1500, 1800),
            Word("fast.", 1800, 2100),
        ]
    )


def test_search_with_fallback_retries_last_word() -> None:
    """A multi-word query with no hits retries with its last word."""
    searched: list[str] = []

    def _search(term: str) -> str | None:
        searched.append(term)
        return "street.jpg" if term == "street" else None

    assert search_with_fallback("crowded street", _search) == "street.jpg"
    assert searched == ["crowded street", "street"]


def test_search_with_fallback_single_word_is_not_retried() -> None:
    """Single-word queries are searched once."""
    searched: list[str] = []

    def _search(term: str) -> str | None:
        searched.append(term)
        return None

    assert search_with_fallback("mountain", _search) is None
    assert searched == ["mountain"]


def test_populate_contextual_images_sets_queries_states_and_bindings() -> None:
    """Each segment records its query and fetch outcome."""
    segments = _segments()
    timeline = ContextualImageTimeline()
    suggestions = {
        "Walking downtown.": "city street",
        "Nothing here.": None,
        "Typing fast.": "keyboard",
    }
    images = {"city street": "city.jpg"}
    progress: list[tuple[int, int]] = []

    fetched = populate_contextual_images(
        segments,
        timeline,
        suggest=suggestions.get,
        search=images.get,
        on_progress=lambda index, total, _message: progress.append((index, total)),
    )

    assert fetched == 1
    assert [s.visual_query for s in segments] == ["city street", None, "keyboard"]
    assert [s.image_fetch_state for s in segments] == ["fetched", "no_suggestion", "failed"]
    assert timeline.display_url_for(0) == "city.jpg"
    assert timeline.display_url_for(1) is None
    assert timeline.display_url_for(2) is None
    assert (0, 3) in progress and (2, 3) in progress


def test_populate_contextual_images_keeps_user_overrides() -> None:
    """Existing overrides stay displayed after new suggestions arrive."""
    segments = _segments()
    timeline = ContextualImageTimeline()
    timeline.set_override(1, "mine.jpg")

    populate_contextual_images(
        segments,
        timeline,
        suggest=lambda _sentence: None,
        search=lambda _term: None,
    )

    assert timeline.display_url_for(1) == "mine.jpg"


def test_collaborator_failures_degrade_to_empty_values(caplog) -> None:
    """Raising collaborators behave like empty answers and are logged."""
    segments = _segments()
    timeline = ContextualImageTimeline()

    def _broken_suggest(sentence: str) -> str | None:
        if sentence.startswith("Walking"):
            raise ConnectionError("suggestion service down")
        return "keyboard"

    def _broken_search(term: str) -> str | None:
        raise TimeoutError("search timed out")

    fetched = populate_contextual_images(
        segments, timeline, suggest=_broken_suggest, search=_broken_search
    )

    assert fetched == 0
    assert segments[0].image_fetch_state == "no_suggestion"
    assert segments[1].image_fetch_state == "failed"
    assert "Visual suggestion failed" in caplog.text
    assert "Image search failed" in caplog.text


def test_blank_sentences_are_not_sent_for_suggestion() -> None:
    """Segments without text never reach the suggestion collaborator."""
    segments = _segments()
    segments[0] = Segment("   ", 0.0, 0.7, segments[0].words)
    asked: list[str] = []

    populate_contextual_images(
        segments,
        ContextualImageTimeline(),
        suggest=lambda sentence: asked.append(sentence) or None,
        search=lambda _term: None,
    )

    assert asked == ["Nothing here.", "Typing fast."]
