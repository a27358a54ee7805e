"""Subtitle export of segments labelled with their synthesized expression."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import NamedTuple

from narrsync.domain import EXPRESSION_LABELS, TALKING, Expression, Segment
from narrsync.session import Frame
from narrsync.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)


class SubtitleCue(NamedTuple):
    """One subtitle line spanning a segment."""

    start_seconds: float
    end_seconds: float
    text: str
    expression: Expression


def _split_time(seconds: float, fraction_digits: int) -> tuple[int, int, int, int]:
    scale = 10**fraction_digits
    total_units = max(int(round(seconds * scale)), 0)
    total_seconds, fraction = divmod(total_units, scale)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return hours, minutes, secs, fraction


class SubtitleFormatter(ABC):
    """Abstract base class for subtitle formatters."""

    header: str = ""

    @abstractmethod
    def format_time(self, seconds: float) -> str:
        """Convert time in seconds to formatted time string."""

    @abstractmethod
    def generate_entry(self, index: int, cue: SubtitleCue) -> str:
        """Generate a single subtitle entry."""

    def generate_file(self, cues: Sequence[SubtitleCue], output_file: str) -> None:
        """Generate a subtitle file from a list of cues."""
        logger.info("Generating %s file: %s", type(self).__name__, output_file)
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(self.header)
            for index, cue in enumerate(cues, 1):
                f.write(self.generate_entry(index, cue) + "\n")
        logger.info("Subtitle file generated successfully: %s", output_file)


class ASSFormatter(SubtitleFormatter):
    """Formatter for ASS subtitles."""

    header = """[Script Info]
Title: Narrative Expressions
ScriptType: v4.00+
Collisions: Normal
PlayDepth: 0

[V4+ Styles]
Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding
Style: Default,Arial,20,&H00FFFFFF,&H000000FF,&H00000000,&H64000000,-1,0,0,0,100,100,0,0.00,1,1.00,0.00,2,10,10,10,1

[Events]
Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
"""

    def format_time(self, seconds: float) -> str:
        hours, minutes, secs, centis = _split_time(seconds, 2)
        return f"{hours:01d}:{minutes:02d}:{secs:02d}.{centis:02d}"

    def generate_entry(self, index: int, cue: SubtitleCue) -> str:
        start_time = self.format_time(cue.start_seconds)
        end_time = self.format_time(cue.end_seconds)
        logger.debug("ASS entry %s: %s-%s %s", index, start_time, end_time, cue.text)
        return (
            f"Dialogue: 0,{start_time},{end_time},Default,{cue.expression},0,0,0,,"
            f"{cue.text}"
        )


class SRTFormatter(SubtitleFormatter):
    """Formatter for SRT subtitles."""

    def format_time(self, seconds: float) -> str:
        hours, minutes, secs, millis = _split_time(seconds, 3)
        return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"

    def generate_entry(self, index: int, cue: SubtitleCue) -> str:
        start_time = self.format_time(cue.start_seconds)
        end_time = self.format_time(cue.end_seconds)
        label = EXPRESSION_LABELS.get(cue.expression, cue.expression)
        logger.debug("SRT entry %s: %s-%s %s", index, start_time, end_time, cue.text)
        return f"{index}\n{start_time} --> {end_time}\n{cue.text} ({label})\n"


class VTTFormatter(SubtitleFormatter):
    """Formatter for WebVTT subtitles."""

    header = "WEBVTT\n\n"

    def format_time(self, seconds: float) -> str:
        hours, minutes, secs, millis = _split_time(seconds, 3)
        return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"

    def generate_entry(self, index: int, cue: SubtitleCue) -> str:
        start_time = self.format_time(cue.start_seconds)
        end_time = self.format_time(cue.end_seconds)
        logger.debug("VTT entry %s: %s-%s %s", index, start_time, end_time, cue.text)
        return f"{start_time} --> {end_time}\n<v {cue.expression}>{cue.text}\n"


FORMATTERS: dict[str, SubtitleFormatter] = {
    "ass": ASSFormatter(),
    "srt": SRTFormatter(),
    "vtt": VTTFormatter(),
}


def segments_to_cues(
    segments: Sequence[Segment], frames: Sequence[Frame]
) -> list[SubtitleCue]:
    """Labels each segment with the expression shown when it became active.

    Segments never reached by a frame are labelled Talking.
    """
    opening_expression: dict[int, Expression] = {}
    for frame in frames:
        if frame.segment_index >= 0 and frame.segment_index not in opening_expression:
            opening_expression[frame.segment_index] = frame.expression

    cues: list[SubtitleCue] = []
    for index, segment in enumerate(segments):
        text = segment.text.strip()
        if not text:
            continue
        cues.append(
            SubtitleCue(
                start_seconds=segment.start_time,
                end_seconds=segment.end_time,
                text=text,
                expression=opening_expression.get(index, TALKING),
            )
        )
    logger.debug("Prepared %s subtitle cues from %s segments.", len(cues), len(segments))
    return cues
