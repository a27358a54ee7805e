"""Behavior tests for transcript payload parsing."""

import json
from pathlib import Path

import pytest

from narrsync.domain import Word
from narrsync.transcript import load_words, parse_words


def test_parse_words_reads_word_payload() -> None:
    """Word entries become Words with millisecond timings."""
    payload = {
        "status": "completed",
        "words": [
            {"text": "Hello", "start": 0, "end": 400, "confidence": 0.98},
            {"text": "world.", "start": 400, "end": 900},
        ],
    }

    assert parse_words(payload) == [
        Word("Hello", 0.0, 400.0, 0.98),
        Word("world.", 400.0, 900.0, None),
    ]


def test_parse_words_accepts_bare_list() -> None:
    """A bare list of word entries is accepted."""
    assert parse_words([{"text": "Hi", "start": "10", "end": "20"}]) == [
        Word("Hi", 10.0, 20.0)
    ]


def test_parse_words_drops_malformed_entries() -> None:
    """Entries without text or with unusable timings are skipped."""
    payload = {
        "words": [
            {"text": "ok", "start": 0, "end": 100},
            {"text": "", "start": 100, "end": 200},
            {"text": "inverted", "start": 300, "end": 200},
            {"text": "nan", "start": float("nan"), "end": 500},
            {"text": "flag", "start": True, "end": 600},
            {"start": 600, "end": 700},
            "not a mapping",
        ]
    }

    assert parse_words(payload) == [Word("ok", 0.0, 100.0)]


@pytest.mark.parametrize("payload", [None, {}, {"words": None}, "text", 42])
def test_parse_words_unknown_shapes_yield_empty_list(payload) -> None:
    """Unrecognized payloads are empty transcripts, not errors."""
    assert parse_words(payload) == []


def test_load_words_reads_json_file(tmp_path: Path) -> None:
    """Transcript files are decoded as UTF-8 JSON."""
    path = tmp_path / "words.json"
    path.write_text(
        json.dumps({"words": [{"text": "Olá.", "start": 0, "end": 300}]}),
        encoding="utf-8",
    )

    assert load_words(path) == [Word("Olá.", 0.0, 300.0)]


def test_load_words_propagates_missing_file(tmp_path: Path) -> None:
    """Unreadable files raise for the caller to report."""
    with pytest.raises(FileNotFoundError):
        load_words(tmp_path / "missing.json")
