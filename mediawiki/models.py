"""
MediaWiki Check Data Models
===========================
Dataclasses for locators, revisions, applied matches, and check results.

Offsets named original_* refer to the wiki markup exactly as fetched;
offsets on GrammarMatch refer to the plain text the engine checked.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Dict, Any

from context_utils import context_window, escape_line_breaks
from nlp.base import GrammarMatch

DEFAULT_CONTEXT_RADIUS = 50


class CheckPhase(Enum):
    """Phases of a page check."""
    IDLE = "idle"
    VALIDATING = "validating"
    FETCHING = "fetching"
    EXTRACTING_REVISION = "extracting_revision"
    CHECKING_EMPTINESS = "checking_emptiness"
    FILTERING = "filtering"
    RULE_CHECKING = "rule_checking"
    MAPPING_BACK = "mapping_back"
    AGGREGATED = "aggregated"
    FAILED = "failed"


@dataclass(frozen=True)
class DocumentLocator:
    """A Wikipedia page: language code plus decoded page title."""
    language: str
    title: str
    url: str = ""


@dataclass(frozen=True)
class RevisionContent:
    """Raw markup and timestamp of one page revision."""
    content: str
    timestamp: Optional[str] = None


@dataclass(frozen=True)
class ErrorMarker:
    """Strings inserted before and after a match instead of a correction."""
    before: str
    after: str


@dataclass(frozen=True)
class RuleMatchApplication:
    """
    One way of applying a match to the original markup.

    Attributes:
        original_start: Start of the match in the original markup
        original_end: End of the match in the original markup (exclusive)
        text: Original markup with the suggestion applied or the match marked
        original_text: Original markup, unchanged
        replacement: Suggestion that produced `text`; None for marker or
            no-suggestion applications
        marker: Marker wrapped around the match in `text`, if any
    """
    original_start: int
    original_end: int
    text: str
    original_text: str = field(repr=False)
    replacement: Optional[str] = None
    marker: Optional[ErrorMarker] = None

    @property
    def has_real_replacement(self) -> bool:
        return self.replacement is not None

    @property
    def original_error(self) -> str:
        return self.original_text[self.original_start:self.original_end]

    def original_error_context(self, radius: int = DEFAULT_CONTEXT_RADIUS) -> str:
        """Original markup around the match, at most `radius` chars each side."""
        return context_window(self.original_text, self.original_start, self.original_end, radius)

    def marked_context(self, radius: int = DEFAULT_CONTEXT_RADIUS) -> str:
        """
        Marked markup around the match; the markers count as part of the span.
        Same as original_error_context when no marker was applied.
        """
        if self.marker is None:
            return self.original_error_context(radius)
        end = self.original_end + len(self.marker.before) + len(self.marker.after)
        return context_window(self.text, self.original_start, end, radius)

    def display_context(self, radius: int = DEFAULT_CONTEXT_RADIUS) -> str:
        """Context excerpt (with markers, if any) escaped for single-line display."""
        return escape_line_breaks(self.marked_context(radius))

    def to_dict(self, radius: int = DEFAULT_CONTEXT_RADIUS) -> Dict[str, Any]:
        return {
            'original_start': self.original_start,
            'original_end': self.original_end,
            'replacement': self.replacement,
            'context': self.original_error_context(radius),
        }


@dataclass
class AppliedRuleMatch:
    """A grammar match together with its applications to the original markup."""
    rule_match: GrammarMatch
    applications: List[RuleMatchApplication] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rule_match': self.rule_match.to_dict(),
            'applications': [a.to_dict() for a in self.applications],
        }


@dataclass
class MarkupAwareResult:
    """
    Result of checking one page.

    internal_errors counts matches that could not be mapped back to the
    markup; those matches are missing from applied_matches.
    """
    revision: RevisionContent
    applied_matches: List[AppliedRuleMatch] = field(default_factory=list)
    internal_errors: int = 0
    language: str = ""
    source: str = ""

    @property
    def is_complete(self) -> bool:
        return self.internal_errors == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'language': self.language,
            'timestamp': self.revision.timestamp,
            'applied_matches': [m.to_dict() for m in self.applied_matches],
            'internal_errors': self.internal_errors,
        }


@dataclass
class PlainTextResult:
    """Result of checking plain text directly, without markup mapping."""
    plain_text: str
    matches: List[GrammarMatch] = field(default_factory=list)
    language: str = ""
