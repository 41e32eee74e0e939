"""
Suggestion Replacer
===================
Applies a grammar match, found in plain text, to the original wiki markup.

For each match the plain-text span is translated to a markup span through
the PlainTextMapping, then one RuleMatchApplication is produced per
suggestion (or one marked copy when an ErrorMarker is given, or one
unchanged copy when there are no suggestions).
"""

from typing import List, Optional

from config_logging import UnmappableOffsetError
from context_utils import format_with_markers, replace_span
from nlp.base import GrammarMatch
from .mapping import PlainTextMapping
from .models import ErrorMarker, RuleMatchApplication


def apply_suggestions(
    mapping: PlainTextMapping,
    original_text: str,
    match: GrammarMatch,
    marker: Optional[ErrorMarker] = None,
) -> List[RuleMatchApplication]:
    """
    Apply a match's suggestions to the original markup.

    Args:
        mapping: Plain text to original markup mapping
        original_text: The markup the mapping points into
        match: Match in plain-text coordinates
        marker: If given, wrap the match with marker strings instead of
            replacing it

    Returns:
        One application per suggestion; a single application in marker mode
        or when the match has no suggestions

    Raises:
        UnmappableOffsetError: match offsets lie outside the mapping
    """
    if match.length < 0:
        raise UnmappableOffsetError(f"Negative match length in {match}", offset=match.start)

    start, end = mapping.span_to_original(match.start, match.end)
    if end > len(original_text):
        raise UnmappableOffsetError(
            f"Mapped span {start}-{end} exceeds original text of length {len(original_text)}",
            offset=match.start,
        )

    if marker is not None:
        marked = format_with_markers(original_text, start, end, marker.before, marker.after)
        return [RuleMatchApplication(start, end, marked, original_text, marker=marker)]

    if not match.replacements:
        return [RuleMatchApplication(start, end, original_text, original_text)]

    return [
        RuleMatchApplication(start, end, replace_span(original_text, start, end, replacement),
                             original_text, replacement)
        for replacement in match.replacements
    ]


class SuggestionReplacer:
    """Applies matches against one mapping and markup text."""

    def __init__(self, mapping: PlainTextMapping, original_text: str,
                 marker: Optional[ErrorMarker] = None):
        self.mapping = mapping
        self.original_text = original_text
        self.marker = marker

    def apply(self, match: GrammarMatch) -> List[RuleMatchApplication]:
        return apply_suggestions(self.mapping, self.original_text, match, self.marker)
