"""Transcript payload parsing into timestamped words.

The transcription collaborator reports words with millisecond timings, either
as ``{"words": [...]}`` or as a bare list. Malformed entries are dropped
instead of failing the whole transcript.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from narrsync.domain import Word
from narrsync.utils import get_logger

logger: logging.Logger = get_logger(__name__)


def _read_time(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _read_confidence(value: Any) -> float | None:
    if value is None:
        return None
    return _read_time(value)


def _build_word(entry: Any) -> Word | None:
    """Builds a validated word or returns ``None`` when the entry is unusable."""
    if not isinstance(entry, Mapping):
        return None
    text = entry.get("text")
    if not isinstance(text, str) or not text.strip():
        return None
    start_ms = _read_time(entry.get("start"))
    end_ms = _read_time(entry.get("end"))
    if start_ms is None or end_ms is None or end_ms <= start_ms:
        return None
    return Word(
        text=text.strip(),
        start_ms=start_ms,
        end_ms=end_ms,
        confidence=_read_confidence(entry.get("confidence")),
    )


def parse_words(payload: Any) -> list[Word]:
    """Extracts ordered words from a transcription payload.

    Args:
        payload: Decoded JSON, either a mapping with a ``words`` list or a list.

    Returns:
        Valid words in delivery order. Unknown payload shapes yield ``[]``.
    """
    if isinstance(payload, Mapping):
        entries = payload.get("words")
    else:
        entries = payload
    if not isinstance(entries, list):
        logger.debug("Transcript payload has no word list; nothing to parse.")
        return []

    words: list[Word] = []
    for position, entry in enumerate(entries):
        word = _build_word(entry)
        if word is None:
            logger.debug("Skipping malformed word entry at position %s: %r", position, entry)
            continue
        words.append(word)

    dropped = len(entries) - len(words)
    if dropped:
        logger.info("Dropped %s malformed word entries out of %s.", dropped, len(entries))
    return words


def load_words(path: str | Path) -> list[Word]:
    """Reads a transcription JSON file and parses its words.

    Raises:
        OSError: The file cannot be read.
        json.JSONDecodeError: The file is not valid JSON.
    """
    with open(path, encoding="utf-8") as handle:
        payload = json.load(handle)
    words = parse_words(payload)
    logger.info("Loaded %s words from %s", len(words), path)
    return words
