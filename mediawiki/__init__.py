"""
MediaWiki Quick Check Package
=============================
Fetch Wikipedia revisions, filter wiki markup to plain text with an offset
mapping, and map grammar matches back onto the markup.

Usage:
    from mediawiki import WikipediaQuickCheck

    result = WikipediaQuickCheck().check_page("https://en.wikipedia.org/wiki/Eiffel_Tower")
    for applied in result.applied_matches:
        print(applied.rule_match.message, applied.applications[0].display_context())
"""

from .api import MediaWikiClient, parse_locator, build_api_params, api_endpoint
from .links import strip_links, strip_links_with_mapping
from .mapping import MappedRange, MappingBuilder, PlainTextMapping
from .models import (
    AppliedRuleMatch,
    CheckPhase,
    DocumentLocator,
    ErrorMarker,
    MarkupAwareResult,
    PlainTextResult,
    RevisionContent,
    RuleMatchApplication,
)
from .quick_check import REDIRECT_KEYWORDS, WikipediaQuickCheck, is_redirect
from .replacer import SuggestionReplacer, apply_suggestions
from .revision import extract_revision
from .text_filter import build_mapping

__version__ = "1.0.0"

__all__ = [
    'AppliedRuleMatch',
    'CheckPhase',
    'DocumentLocator',
    'ErrorMarker',
    'MappedRange',
    'MappingBuilder',
    'MarkupAwareResult',
    'MediaWikiClient',
    'PlainTextMapping',
    'PlainTextResult',
    'REDIRECT_KEYWORDS',
    'RevisionContent',
    'RuleMatchApplication',
    'SuggestionReplacer',
    'WikipediaQuickCheck',
    'api_endpoint',
    'apply_suggestions',
    'build_api_params',
    'build_mapping',
    'extract_revision',
    'is_redirect',
    'parse_locator',
    'strip_links',
    'strip_links_with_mapping',
]
