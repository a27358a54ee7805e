from .domain import (
    ALL_EXPRESSIONS,
    STRONG_EXPRESSIONS,
    Expression,
    ImageBinding,
    Segment,
    Word,
)
from .expressions import pick_next_expression
from .images import ContextualImageTimeline
from .playback import PlaybackPosition, resolve_playback
from .segmentation import SegmentationPolicy, build_segments
from .session import Frame, PlaybackSession, simulate_playback
from .synthesizer import ExpressionSynthesizer, SynthesizerState, TickInput, step
from .transcript import load_words, parse_words
from .visuals import populate_contextual_images, search_with_fallback
