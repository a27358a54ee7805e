"""Lexical expression selection for the active segment.

The picker is a best-effort heuristic over segment text, not language
understanding: an ordered list of rules keyed on punctuation, sentence length,
and the previous expression. Every path ends in a member of
``ALL_EXPRESSIONS``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from narrsync.domain import (
    ALL_EXPRESSIONS,
    ANGRY,
    FRUSTRATED,
    LITTLE_SHOCKED,
    MORE_SHOCKED,
    STRONG_EXPRESSIONS,
    TALKING,
    Expression,
)

QUESTIONING_EXPRESSIONS: tuple[Expression, ...] = (LITTLE_SHOCKED, TALKING)
EXCLAMATORY_EXPRESSIONS: tuple[Expression, ...] = (MORE_SHOCKED, ANGRY, LITTLE_SHOCKED)
COMPLAINING_EXPRESSIONS: tuple[Expression, ...] = (FRUSTRATED, ANGRY)

QUESTION_PROBABILITY = 0.7
EXCLAMATION_PROBABILITY = 0.7
SHORT_PHRASE_PROBABILITY = 0.6
SHORT_PHRASE_SHOCK_PROBABILITY = 0.3
SHORT_PHRASE_MAX_WORDS = 2
COMPLAINING_PROBABILITY = 0.5
CONTINUED_EMOTION_PROBABILITY = 0.5
EMOTIONAL_PROBABILITY = 0.6


class RandomSource(Protocol):
    """Injected randomness; ``random.Random`` satisfies this contract."""

    def random(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...

    def choice[T](self, seq: Sequence[T]) -> T: ...


def _restrict(pool: Sequence[Expression], candidates: Sequence[Expression]) -> list[Expression]:
    return [expression for expression in pool if expression in candidates]


def pick_next_expression(
    segment_text: str,
    previous_expression: Expression,
    rng: RandomSource,
) -> Expression:
    """Chooses the next expression for a segment.

    Args:
        segment_text: Text of the active segment.
        previous_expression: Expression currently displayed.
        rng: Random source. One ``random()`` draw selects the rule; pool
            picks use ``choice``.

    Returns:
        An expression different from ``previous_expression`` whenever more
        than one expression exists.
    """
    candidates = [e for e in ALL_EXPRESSIONS if e != previous_expression]
    if not candidates:
        candidates = list(ALL_EXPRESSIONS)

    phrase = segment_text.lower()
    word_count = len(phrase.split())

    questioning = _restrict(QUESTIONING_EXPRESSIONS, candidates)
    exclamatory = [
        e
        for e in _restrict(EXCLAMATORY_EXPRESSIONS, candidates)
        if e in STRONG_EXPRESSIONS
    ]
    complaining = _restrict(COMPLAINING_EXPRESSIONS, candidates)

    chosen: Expression | None
    draw = rng.random()
    if "?" in phrase and questioning and draw < QUESTION_PROBABILITY:
        chosen = rng.choice(questioning)
    elif "!" in phrase and exclamatory and draw < EXCLAMATION_PROBABILITY:
        chosen = rng.choice(exclamatory)
    elif word_count <= SHORT_PHRASE_MAX_WORDS and draw < SHORT_PHRASE_PROBABILITY:
        if LITTLE_SHOCKED in candidates and draw < SHORT_PHRASE_SHOCK_PROBABILITY:
            chosen = LITTLE_SHOCKED
        elif TALKING in candidates:
            chosen = TALKING
        else:
            chosen = rng.choice(candidates)
    elif complaining and draw < COMPLAINING_PROBABILITY:
        chosen = rng.choice(complaining)
    elif previous_expression != TALKING and draw < CONTINUED_EMOTION_PROBABILITY:
        emotional_non_complaining = [
            e for e in candidates if e != TALKING and e not in complaining
        ]
        chosen = rng.choice(emotional_non_complaining or candidates)
    else:
        emotional = [e for e in candidates if e != TALKING]
        if emotional and draw < EMOTIONAL_PROBABILITY:
            chosen = rng.choice(emotional)
        elif TALKING in candidates:
            chosen = TALKING
        else:
            chosen = rng.choice(candidates)

    if chosen is None or (chosen == previous_expression and len(candidates) > 1):
        fallback = [e for e in ALL_EXPRESSIONS if e != previous_expression]
        chosen = rng.choice(fallback) if fallback else TALKING
    return chosen if chosen is not None else TALKING
