#!/usr/bin/env python3
"""
Wiki Quick Check CLI
====================
Check a Wikipedia page with LanguageTool and print each match with its
context from the page's wiki markup.

Usage:
    wiki-quick-check https://de.wikipedia.org/wiki/Angela_Merkel
    wiki-quick-check --disable-rules WHITESPACE_RULE --ngram-dir /data/ngrams <url>
"""

import argparse
import re
import sys
from typing import List, Optional

from config_logging import get_config, get_logger, WikiCheckError, PageNotFoundError
from context_utils import HIGHLIGHT_START, HIGHLIGHT_END
from mediawiki import ErrorMarker, MarkupAwareResult, WikipediaQuickCheck

__version__ = "1.0.0"

logger = get_logger(__name__)

SUGGESTION_TAG = re.compile(r"</?suggestion>")


class _UsageParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _UsageParser(
        prog='wiki-quick-check',
        description='Check a Wikipedia page for grammar and style issues (no spell check)',
    )
    parser.add_argument('url', help='Wikipedia page URL, e.g. https://de.wikipedia.org/wiki/Angela_Merkel')
    parser.add_argument('--disable-rules', default='',
                        help='Comma-separated LanguageTool rule IDs to disable')
    parser.add_argument('--ngram-dir',
                        help="Directory with sub directories like 'en', 'de' containing n-gram data")
    parser.add_argument('--context-radius', type=int, default=None,
                        help='Characters of context shown around each match (default: 50)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def format_message(message: str) -> str:
    """Turn LanguageTool's <suggestion> tags into quotes."""
    return SUGGESTION_TAG.sub("'", message)


def print_result(result: MarkupAwareResult, radius: int, out=None):
    out = out or sys.stdout
    for i, applied in enumerate(result.applied_matches, start=1):
        match = applied.rule_match
        print(f"{i}. {format_message(match.message)} ({match.rule_id})", file=out)
        for application in applied.applications:
            print(f"    ...{application.display_context(radius)}...", file=out)
    if result.internal_errors:
        print(f"Note: {result.internal_errors} match(es) could not be shown", file=out)


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point; returns the exit status."""
    args = build_parser().parse_args(argv)
    radius = args.context_radius if args.context_radius is not None else get_config().context_radius
    disabled = [rule_id.strip() for rule_id in args.disable_rules.split(',') if rule_id.strip()]

    checker = WikipediaQuickCheck(ngram_dir=args.ngram_dir, disabled_rule_ids=disabled)
    try:
        result = checker.check_page(args.url, ErrorMarker(HIGHLIGHT_START, HIGHLIGHT_END))
    except PageNotFoundError as e:
        if e.is_redirect:
            print(f"No content found, page is a redirect: {args.url}", file=sys.stderr)
        else:
            print(f"No content found: {args.url}", file=sys.stderr)
        return 2
    except WikiCheckError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        checker.client.close()

    print_result(result, radius)
    return 0


if __name__ == "__main__":
    sys.exit(main())
