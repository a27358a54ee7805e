"""Per-segment contextual image bindings with user overrides."""

from __future__ import annotations

import logging

from narrsync.domain import ImageBinding
from narrsync.utils import get_logger

logger: logging.Logger = get_logger(__name__)


def _validate_index(index: int) -> None:
    if index < 0:
        raise ValueError(f"Segment index must be non-negative, got {index}.")


class ContextualImageTimeline:
    """Keyed store of image bindings indexed by segment position.

    Every write recomputes ``display_url`` as the override when non-empty,
    otherwise the suggested URL.
    """

    def __init__(self) -> None:
        self._bindings: dict[int, ImageBinding] = {}

    def __len__(self) -> int:
        return len(self._bindings)

    def __contains__(self, index: object) -> bool:
        return index in self._bindings

    def get(self, index: int) -> ImageBinding | None:
        return self._bindings.get(index)

    def items(self) -> list[tuple[int, ImageBinding]]:
        return sorted(self._bindings.items())

    def set_suggested(self, index: int, url: str | None) -> ImageBinding:
        """Stores the image found for a segment, keeping any user override."""
        _validate_index(index)
        existing = self._bindings.get(index)
        binding = ImageBinding.create(
            suggested_url=url,
            user_override_url=existing.user_override_url if existing else None,
        )
        self._bindings[index] = binding
        logger.debug("Segment %s suggested image set to %s", index, binding.suggested_url)
        return binding

    def set_override(self, index: int, url: str | None) -> ImageBinding:
        """Stores a user image URL; an empty value reverts to the suggestion."""
        _validate_index(index)
        existing = self._bindings.get(index)
        binding = ImageBinding.create(
            suggested_url=existing.suggested_url if existing else None,
            user_override_url=url,
        )
        self._bindings[index] = binding
        logger.debug("Segment %s override set to %s", index, binding.user_override_url)
        return binding

    def display_url_for(self, segment_index: int) -> str | None:
        """Returns the overlay image for the active segment, if any."""
        if segment_index < 0:
            return None
        binding = self._bindings.get(segment_index)
        return binding.display_url if binding else None

    def clear(self) -> None:
        self._bindings.clear()
