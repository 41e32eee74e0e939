#!/usr/bin/env python3
"""
Context Utilities v1.0.0
========================
Context excerpts and inline markers for matches in wiki markup.

Features:
- Bounded context window around a character span
- Marker insertion around a span (non-destructive highlighting)
- Line-break escaping for single-line display

Usage:
    from context_utils import context_window, format_with_markers, escape_line_breaks

    excerpt = context_window(markup, start=120, end=124, radius=50)
    print("..." + escape_line_breaks(excerpt) + "...")
"""

from typing import Tuple

__version__ = "1.0.0"

# Default markers used when highlighting instead of replacing
HIGHLIGHT_START = "***"
HIGHLIGHT_END = "***"


def clamp_span(text: str, start: int, end: int) -> Tuple[int, int]:
    """Clip a span to the bounds of text, keeping start <= end."""
    start = max(0, min(start, len(text)))
    end = max(start, min(end, len(text)))
    return start, end


def context_window(text: str, start: int, end: int, radius: int = 50) -> str:
    """
    Return the text of a span plus up to `radius` characters on each side.

    Args:
        text: The full text
        start: Start of the span
        end: End of the span (exclusive)
        radius: Characters of context before start and after end

    Returns:
        Slice of text, never longer than 2 * radius + (end - start)
    """
    if not text:
        return ""
    start, end = clamp_span(text, start, end)
    radius = max(0, radius)
    return text[max(0, start - radius):min(len(text), end + radius)]


def format_with_markers(text: str, start: int, end: int,
                        before: str = HIGHLIGHT_START, after: str = HIGHLIGHT_END) -> str:
    """
    Wrap text[start:end] with marker strings, leaving everything else untouched.

    Returns:
        text[:start] + before + text[start:end] + after + text[end:]
    """
    start, end = clamp_span(text, start, end)
    return text[:start] + before + text[start:end] + after + text[end:]


def replace_span(text: str, start: int, end: int, replacement: str) -> str:
    """Replace text[start:end] with replacement."""
    start, end = clamp_span(text, start, end)
    return text[:start] + replacement + text[end:]


def escape_line_breaks(text: str) -> str:
    """Render line breaks as visible escape sequences for one-line output."""
    return text.replace("\r\n", "\\n").replace("\n", "\\n").replace("\r", "\\n")
