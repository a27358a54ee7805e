"""Visual suggestion and image search orchestration for segments.

The suggestion and search services are external collaborators passed in as
callables. Their failures surface here as "no suggestion" or "no image" and
never interrupt processing of the remaining segments.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from narrsync.domain import ImageFetchState, Segment
from narrsync.images import ContextualImageTimeline
from narrsync.utils import get_logger

logger: logging.Logger = get_logger(__name__)

type VisualSuggester = Callable[[str], str | None]
type ImageSearcher = Callable[[str], str | None]
type ProgressCallback = Callable[[int, int, str], None]


def _suggest_query(suggest: VisualSuggester, sentence: str) -> str | None:
    if not sentence.strip():
        return None
    try:
        suggestion = suggest(sentence)
    except Exception as err:
        logger.warning("Visual suggestion failed for %r: %s", sentence, err, exc_info=True)
        return None
    if not isinstance(suggestion, str) or not suggestion.strip():
        return None
    return suggestion.strip()


def _search_image(search: ImageSearcher, term: str) -> str | None:
    try:
        url = search(term)
    except Exception as err:
        logger.warning("Image search failed for term %r: %s", term, err, exc_info=True)
        return None
    return url or None


def search_with_fallback(query: str, search: ImageSearcher) -> str | None:
    """Searches the full query, then its last word when that finds nothing."""
    if not query or not query.strip():
        return None
    image_url = _search_image(search, query)
    if image_url:
        return image_url

    terms = query.strip().split()
    if len(terms) > 1:
        logger.info("Full query %r found no image. Trying last word %r.", query, terms[-1])
        return _search_image(search, terms[-1])
    return None


def populate_contextual_images(
    segments: Sequence[Segment],
    timeline: ContextualImageTimeline,
    *,
    suggest: VisualSuggester,
    search: ImageSearcher,
    on_progress: ProgressCallback | None = None,
) -> int:
    """Fills suggested images for each segment in order.

    Sets ``visual_query`` and ``image_fetch_state`` on every segment and
    stores found URLs through ``timeline.set_suggested`` so existing user
    overrides keep priority.

    Returns:
        Number of segments that received an image.
    """
    total = len(segments)
    fetched = 0

    def _report(index: int, message: str) -> None:
        logger.debug("Sentence %s/%s: %s", index + 1, total, message)
        if on_progress is not None:
            on_progress(index, total, message)

    logger.info("Processing %s sentences for visuals.", total)
    for index, segment in enumerate(segments):
        _report(index, "Getting suggestion...")
        query = _suggest_query(suggest, segment.text)
        segment.visual_query = query

        state: ImageFetchState
        if query is None:
            timeline.set_suggested(index, None)
            state = "no_suggestion"
            _report(index, "No visual suggestion.")
        else:
            segment.image_fetch_state = "loading"
            _report(index, f'Suggestion "{query}". Fetching image...')
            image_url = search_with_fallback(query, search)
            timeline.set_suggested(index, image_url)
            state = "fetched" if image_url else "failed"
            if image_url:
                fetched += 1
        segment.image_fetch_state = state

    logger.info("Visual processing complete: %s/%s segments have images.", fetched, total)
    return fetched
