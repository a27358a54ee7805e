"""Expression synthesizer state machine.

Each playback tick is folded into an explicit, immutable
``SynthesizerState`` by :func:`step`, which returns the next state plus a
tuple of effects. :class:`ExpressionSynthesizer` owns one state for a playback
session and performs the effects (the emphasis callback).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Literal, NamedTuple

from narrsync.domain import STRONG_EXPRESSIONS, TALKING, Expression
from narrsync.expressions import RandomSource, pick_next_expression
from narrsync.utils import get_logger

logger: logging.Logger = get_logger(__name__)

type SynthesizerPhase = Literal["stopped", "playing"]
type SynthesizerEffect = Literal["emphasis_pulse"]
type EmphasisCallback = Callable[[], None]

EMPHASIS_PULSE: SynthesizerEffect = "emphasis_pulse"

MIN_WORDS_FOR_CHANGE = 2
MAX_WORDS_FOR_CHANGE = 5
MIN_EMPHASIS_PER_SESSION = 2


@dataclass(frozen=True)
class EmphasisBand:
    """Emphasis probabilities for one trigger kind."""

    probability: float
    boosted_probability: float

    def threshold(self, emphasis_count: int) -> float:
        """Returns the boosted probability until the session minimum is reached."""
        if emphasis_count < MIN_EMPHASIS_PER_SESSION:
            return self.boosted_probability
        return self.probability


SEGMENT_CHANGE_BAND = EmphasisBand(probability=0.35, boosted_probability=0.50)
WORD_CADENCE_BAND = EmphasisBand(probability=0.30, boosted_probability=0.55)


@dataclass(frozen=True)
class SynthesizerState:
    """Session-scoped synthesizer memory.

    ``previous_expression`` is also the expression currently displayed.
    """

    phase: SynthesizerPhase = "stopped"
    previous_expression: Expression = TALKING
    words_seen_since_change: int = 0
    words_needed_for_change: int = MIN_WORDS_FOR_CHANGE
    last_word_start_ms: float | None = None
    last_segment_text: str | None = None
    emphasis_count: int = 0

    @property
    def is_playing(self) -> bool:
        return self.phase == "playing"


class TickInput(NamedTuple):
    """Per-tick inputs, read after playback resolution for the same tick."""

    is_active: bool
    segment_text: str | None
    word_start_ms: float | None


class StepResult(NamedTuple):
    """Next state and the effects the host should perform."""

    state: SynthesizerState
    effects: tuple[SynthesizerEffect, ...]

    @property
    def expression(self) -> Expression:
        return self.state.previous_expression


def _draw_words_needed(rng: RandomSource) -> int:
    return rng.randint(MIN_WORDS_FOR_CHANGE, MAX_WORDS_FOR_CHANGE)


def start_session(rng: RandomSource) -> SynthesizerState:
    """Returns the freshly reset state used when playback starts."""
    return SynthesizerState(
        phase="playing",
        previous_expression=TALKING,
        words_seen_since_change=0,
        words_needed_for_change=_draw_words_needed(rng),
        last_word_start_ms=None,
        last_segment_text=None,
        emphasis_count=0,
    )


def stop_session(state: SynthesizerState) -> SynthesizerState:
    """Returns the stopped state; stopping twice yields the same state."""
    if not state.is_playing:
        return state
    return replace(
        state,
        phase="stopped",
        previous_expression=TALKING,
        words_seen_since_change=0,
        last_word_start_ms=None,
        last_segment_text=None,
    )


def _commit(
    state: SynthesizerState,
    expression: Expression,
    band: EmphasisBand,
    rng: RandomSource,
) -> tuple[SynthesizerState, tuple[SynthesizerEffect, ...]]:
    """Commits an expression and rolls for an emphasis pulse on strong ones."""
    committed = replace(state, previous_expression=expression)
    logger.debug("Expression %s -> %s", state.previous_expression, expression)
    if expression not in STRONG_EXPRESSIONS:
        return committed, ()
    if rng.random() < band.threshold(committed.emphasis_count):
        return replace(committed, emphasis_count=committed.emphasis_count + 1), (
            EMPHASIS_PULSE,
        )
    return committed, ()


def step(state: SynthesizerState, tick: TickInput, rng: RandomSource) -> StepResult:
    """Advances the synthesizer by one playback tick.

    The new-segment trigger is evaluated before the new-word trigger, so a
    segment change resets word cadence before the tick's word is counted.

    Args:
        state: State after the previous tick.
        tick: Activity flag, active segment text, and active word start.
        rng: Random source for cadence draws, picks, and emphasis rolls.

    Returns:
        The next state and any effects to perform.
    """
    if not tick.is_active:
        return StepResult(stop_session(state), ())

    if not state.is_playing:
        state = start_session(rng)

    effects: list[SynthesizerEffect] = []

    if tick.segment_text and tick.segment_text != state.last_segment_text:
        state = replace(
            state,
            last_segment_text=tick.segment_text,
            words_seen_since_change=0,
            words_needed_for_change=_draw_words_needed(rng),
            last_word_start_ms=None,
        )
        expression = pick_next_expression(
            tick.segment_text, state.previous_expression, rng
        )
        state, commit_effects = _commit(state, expression, SEGMENT_CHANGE_BAND, rng)
        effects.extend(commit_effects)

    if tick.word_start_ms is not None and tick.word_start_ms != state.last_word_start_ms:
        state = replace(
            state,
            last_word_start_ms=tick.word_start_ms,
            words_seen_since_change=state.words_seen_since_change + 1,
        )
        if state.words_seen_since_change >= state.words_needed_for_change:
            if tick.segment_text:
                expression = pick_next_expression(
                    tick.segment_text, state.previous_expression, rng
                )
                state, commit_effects = _commit(
                    state, expression, WORD_CADENCE_BAND, rng
                )
                effects.extend(commit_effects)
            else:
                state = replace(state, previous_expression=TALKING)
            state = replace(
                state,
                words_seen_since_change=0,
                words_needed_for_change=_draw_words_needed(rng),
            )

    return StepResult(state, tuple(effects))


class ExpressionSynthesizer:
    """Stateful host adapter around :func:`step` for one playback session.

    The emphasis callback is fire-and-forget: it is invoked once per pulse,
    never retried, and a failing callback does not affect synthesizer state.
    """

    def __init__(
        self,
        rng: RandomSource,
        on_emphasize: EmphasisCallback | None = None,
    ) -> None:
        self._rng = rng
        self._on_emphasize = on_emphasize
        self._state = SynthesizerState()

    @property
    def state(self) -> SynthesizerState:
        return self._state

    @property
    def expression(self) -> Expression:
        return self._state.previous_expression

    def reset(self) -> None:
        """Discards session memory, e.g. when a new transcript is loaded."""
        self._state = SynthesizerState()

    def update(
        self,
        *,
        is_active: bool,
        segment_text: str | None,
        word_start_ms: float | None,
    ) -> StepResult:
        result = step(
            self._state,
            TickInput(
                is_active=is_active,
                segment_text=segment_text,
                word_start_ms=word_start_ms,
            ),
            self._rng,
        )
        self._state = result.state
        for effect in result.effects:
            if effect == EMPHASIS_PULSE:
                self._emphasize()
        return result

    def stop(self) -> Expression:
        self._state = stop_session(self._state)
        return self.expression

    def _emphasize(self) -> None:
        if self._on_emphasize is None:
            return
        try:
            self._on_emphasize()
        except Exception as err:
            logger.warning("Emphasis callback failed: %s", err, exc_info=True)
