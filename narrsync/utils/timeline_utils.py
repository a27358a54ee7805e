"""
Timeline Utility Functions for narrative synchronization

This module condenses simulated playback frames into a timeline of display
changes, prints it, and saves it to CSV.

Functions:
    - build_timeline: Builds timeline rows from playback frames.
    - print_timeline: Prints the colored timeline vertically.
    - save_timeline_to_csv: Saves the timeline to a CSV file.
    - display_elapsed_time: Displays elapsed time in a formatted string.
    - color_txt: Colorizes a string.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Sequence
from pathlib import Path

from colored import attr, bg, fg
from halo import Halo

from narrsync.config import get_settings
from narrsync.domain import EXPRESSION_LABELS, Segment, TimelineEntry
from narrsync.session import Frame
from narrsync.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)


def build_timeline(
    frames: Sequence[Frame], segments: Sequence[Segment]
) -> list[TimelineEntry]:
    """
    Builds a timeline from playback frames.

    A row is emitted whenever the active segment, the expression, or the
    overlay image changes. Speech is filled only on the row where a segment
    becomes active.

    Arguments:
        frames (Sequence[Frame]): Frames in tick order.
        segments (Sequence[Segment]): Segments the frames were resolved against.

    Returns:
        list[TimelineEntry]: Display changes in time order.
    """
    logger.info("Building timeline from %s frames.", len(frames))
    timeline: list[TimelineEntry] = []
    previous: tuple[int, str, str | None] | None = None

    for frame in frames:
        current = (frame.segment_index, frame.expression, frame.overlay_url)
        if current == previous:
            continue
        segment_started = previous is None or previous[0] != frame.segment_index
        speech = ""
        if segment_started and 0 <= frame.segment_index < len(segments):
            speech = segments[frame.segment_index].text
        timeline.append(
            TimelineEntry(
                timestamp_seconds=frame.time_seconds,
                segment_index=frame.segment_index,
                expression=frame.expression,
                speech=speech,
                overlay_url=frame.overlay_url,
            )
        )
        previous = current

    logger.info("Timeline built with %s entries.", len(timeline))
    return timeline


def save_timeline_to_csv(
    timeline: Sequence[TimelineEntry], file_name: str, folder: Path | None = None
) -> str:
    """
    Saves the timeline to a CSV file.

    Arguments:
        timeline (Sequence[TimelineEntry]): The timeline data to be saved.
        file_name (str): Source file name; its stem names the CSV file.
        folder (Path, optional): Output folder. Defaults to the configured
            timeline folder.

    Returns:
        str: The path to the saved CSV file.
    """
    logger.info("Starting to save timeline to CSV.")
    output_folder = folder if folder is not None else get_settings().timeline.folder
    output_folder.mkdir(parents=True, exist_ok=True)
    output_path = output_folder / f"{Path(file_name).stem}.csv"

    with Halo(
        text=f"Saving timeline to {output_path}",
        spinner="dots",
        text_color="green",
    ):
        with open(output_path, mode="w", newline="", encoding="utf-8") as file:
            writer = csv.writer(file)
            writer.writerow(["Time (s)", "Segment", "Expression", "Speech", "Image"])

            for entry in timeline:
                row = [
                    round(float(entry.timestamp_seconds), 2),
                    entry.segment_index,
                    entry.expression,
                    entry.speech,
                    entry.overlay_url or "",
                ]
                writer.writerow(row)
                logger.debug("Written row: %s", row)

    logger.info("Timeline successfully saved to %s", output_path)
    return str(output_path)


def display_elapsed_time(elapsed_time: float, _format: str = "long") -> str:
    """
    Returns the elapsed time in seconds in long or short format.

    Arguments:
        elapsed_time (float): Elapsed time in seconds.
        _format (str, optional): Format of the elapsed time
            ('long' or 'short'), by default 'long'.

    Returns:
        str: Formatted elapsed time.
    """
    minutes, seconds = divmod(int(elapsed_time), 60)
    if _format == "long":
        return (
            f"{minutes} min {seconds} seconds"
            if minutes
            else f"{elapsed_time:.2f} seconds"
        )
    return f"{minutes}m{seconds}s" if minutes else f"{elapsed_time:.2f}s"


def color_txt(string: str, fg_color: str, bg_color: str, padding: int = 0) -> str:
    """
    Colorizes a string.

    Arguments:
        string (str): String to be colorized.
        fg_color (str): Foreground color.
        bg_color (str): Background color.
        padding (int, optional): Minimum width to pad the string to.

    Returns:
        str: Colorized string.
    """
    if padding:
        string = string.ljust(padding)

    return f"{fg(fg_color)}{bg(bg_color)}{string}{attr('reset')}"


def print_timeline(timeline: Sequence[TimelineEntry]) -> None:
    """
    Prints the timeline vertically.

    Arguments:
        timeline (Sequence[TimelineEntry]): Timeline rows.
    """
    logger.info("Printing timeline with %s entries.", len(timeline))
    if not timeline:
        return

    time_width = max(
        len(display_elapsed_time(entry.timestamp_seconds, _format="short"))
        for entry in timeline
    )
    time_width = max(time_width, len("Time"))
    expression_width = max(
        len(EXPRESSION_LABELS.get(entry.expression, entry.expression)) for entry in timeline
    )
    expression_width = max(expression_width, len("Expression"))
    speech_width = max(len(entry.speech) for entry in timeline)

    print(color_txt("Time", "black", "green", time_width), end=" ")
    print(color_txt("Expression", "black", "yellow", expression_width), end=" ")
    print(color_txt("Speech", "black", "blue", max(speech_width, len("Speech"))))

    for entry in timeline:
        time_str = display_elapsed_time(entry.timestamp_seconds, _format="short").ljust(
            time_width
        )
        expression_str = EXPRESSION_LABELS.get(entry.expression, entry.expression).ljust(
            expression_width
        )
        speech_str = entry.speech.ljust(speech_width)
        image_str = f"  [{entry.overlay_url}]" if entry.overlay_url else ""
        print(f"{time_str} {expression_str} {speech_str}{image_str}")
