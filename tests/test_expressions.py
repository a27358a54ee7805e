"""Behavior tests for the lexical expression picker."""

import random

import pytest

from narrsync.domain import ALL_EXPRESSIONS
from narrsync.expressions import pick_next_expression


def test_question_prefers_questioning_pool(scripted_rng) -> None:
    """Questions pick from the questioning pool, minus the previous expression."""
    rng = scripted_rng(draws=[0.1])

    assert pick_next_expression("Wait what?", "Talking", rng) == "LittleShocked"


def test_exclamation_prefers_strong_exclamatory_pool(scripted_rng) -> None:
    """Exclamations pick among strong exclamatory expressions."""
    rng = scripted_rng(draws=[0.5], choices=[1])

    assert pick_next_expression("Stop it right now!", "Talking", rng) == "Angry"


def test_exclamation_pool_excludes_previous_expression(scripted_rng) -> None:
    """The previous expression never appears in a sub-pool."""
    rng = scripted_rng(draws=[0.5], choices=[0])

    assert pick_next_expression("Stop it right now!", "MoreShocked", rng) == "Angry"


@pytest.mark.parametrize(
    ("draw", "expected"),
    [(0.2, "LittleShocked"), (0.45, "Talking")],
)
def test_short_phrase_prefers_little_shocked_then_talking(
    scripted_rng, draw: float, expected: str
) -> None:
    """Two-word phrases lean to LittleShocked on low draws, else Talking."""
    rng = scripted_rng(draws=[draw])

    assert pick_next_expression("Oh no.", "Angry", rng) == expected


def test_short_phrase_without_talking_picks_any_candidate(scripted_rng) -> None:
    """When Talking was previous, the short-phrase rule falls back to the pool."""
    rng = scripted_rng(draws=[0.45], choices=[2])

    assert pick_next_expression("Oh no.", "Talking", rng) == "FoldingHands"


def test_plain_sentence_prefers_complaining_pool(scripted_rng) -> None:
    """Mid draws on longer plain sentences pick a complaining expression."""
    rng = scripted_rng(draws=[0.4])

    assert (
        pick_next_expression("This is really annoying today", "Talking", rng)
        == "Frustrated"
    )


def test_high_draw_returns_to_talking(scripted_rng) -> None:
    """High draws settle back on Talking when it is eligible."""
    rng = scripted_rng(draws=[0.9])

    assert pick_next_expression("We walked home after that", "Sad", rng) == "Talking"


def test_emotional_draw_picks_non_talking(scripted_rng) -> None:
    """Draws in the emotional band choose among non-Talking candidates."""
    rng = scripted_rng(draws=[0.55], choices=[0])

    assert pick_next_expression("We walked home after that", "Sad", rng) == "Angry"


def test_unmatched_question_falls_through_to_candidate_pool(scripted_rng) -> None:
    """A question with a high draw falls through every rule to the full pool."""
    rng = scripted_rng(draws=[0.75], choices=[0])

    assert pick_next_expression("Why?", "Talking", rng) == "Angry"


def test_picker_never_repeats_previous_expression() -> None:
    """Across many texts and draws the result is valid and always changes."""
    rng = random.Random(1234)
    texts = ["Wait what?", "No!", "Oh no.", "", "It was a long day at work", "ugh"]

    for _ in range(200):
        for previous in ALL_EXPRESSIONS:
            for text in texts:
                chosen = pick_next_expression(text, previous, rng)
                assert chosen in ALL_EXPRESSIONS
                assert chosen != previous
