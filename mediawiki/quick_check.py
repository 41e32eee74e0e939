"""
Wikipedia Quick Check
=====================
Checks a Wikipedia page (without spell check), fetching the page via the
MediaWiki API, and reports every match in terms of the page's wiki markup.

Pipeline per page:
    validate URL -> fetch XML -> extract revision -> reject empty/redirect
    -> strip links + filter markup -> LanguageTool -> map matches back

A match that cannot be mapped back is logged and counted in
MarkupAwareResult.internal_errors; it never aborts the check.
"""

from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from config_logging import (
    StructuredLogger,
    get_logger,
    PageNotFoundError,
)
from nlp.base import RuleEngineBase
from nlp.languagetool import open_client
from .api import MediaWikiClient, parse_locator
from .links import strip_links_with_mapping
from .mapping import PlainTextMapping
from .models import (
    AppliedRuleMatch,
    CheckPhase,
    ErrorMarker,
    MarkupAwareResult,
    PlainTextResult,
    RevisionContent,
)
from .replacer import SuggestionReplacer
from .revision import extract_revision, Payload
from .text_filter import build_mapping

__version__ = "1.0.0"

logger = get_logger(__name__)

# '#redirect' is recognized for every language; these are added per language
REDIRECT_KEYWORDS = {
    'de': ('#weiterleitung',),
    'fr': ('#redirection',),
    'es': ('#redirección',),
    'it': ('#rinvia', '#rinvio'),
    'nl': ('#doorverwijzing',),
    'pt': ('#redirecionamento',),
    'pl': ('#patrz', '#przekieruj', '#tam'),
    'ca': ('#redirecció',),
    'ru': ('#перенаправление',),
    'uk': ('#перенаправлення',),
}
DEFAULT_REDIRECT_KEYWORD = '#redirect'

EngineFactory = Callable[..., RuleEngineBase]


def redirect_keywords(language: str) -> Tuple[str, ...]:
    return (DEFAULT_REDIRECT_KEYWORD,) + REDIRECT_KEYWORDS.get(language, ())


def is_redirect(content: str, language: str = '') -> bool:
    """True if the markup starts with a redirect keyword (case-insensitive)."""
    head = content.lstrip().lower()
    return head.startswith(redirect_keywords(language))


class WikipediaQuickCheck:
    """
    Check Wikipedia pages with LanguageTool, reporting in markup coordinates.

    One instance may run many checks one after another; concurrent checks
    should use separate instances. The engine is created per check and
    closed when the check ends.
    """

    def __init__(
        self,
        ngram_dir: Optional[Path] = None,
        disabled_rule_ids: Iterable[str] = (),
        engine_factory: Optional[EngineFactory] = None,
        client: Optional[MediaWikiClient] = None,
    ):
        """
        Args:
            ngram_dir: Directory with sub directories like 'en', 'de' that
                contain n-gram data; enables language model rules
            disabled_rule_ids: Rule IDs to switch off
            engine_factory: Callable(language, disabled_rule_ids=, ngram_dir=)
                returning a RuleEngineBase (default: LanguageTool)
            client: MediaWiki API client (default: new requests session)
        """
        self.ngram_dir = Path(ngram_dir) if ngram_dir else None
        self._disabled_rule_ids: Tuple[str, ...] = tuple(disabled_rule_ids)
        self.engine_factory = engine_factory or open_client
        self.client = client or MediaWikiClient()
        self.last_phase = CheckPhase.IDLE

    @property
    def disabled_rule_ids(self) -> Tuple[str, ...]:
        return self._disabled_rule_ids

    def set_disabled_rule_ids(self, rule_ids: Iterable[str]):
        """Replace the disabled rule IDs; takes effect with the next check."""
        self._disabled_rule_ids = tuple(rule_ids)

    def _enter(self, phase: CheckPhase):
        self.last_phase = phase
        logger.debug(f"Check phase: {phase.value}", phase=phase.value)

    # ------------------------------------------------------------------
    # Page checks
    # ------------------------------------------------------------------

    def check_page(self, url: str, marker: Optional[ErrorMarker] = None) -> MarkupAwareResult:
        """
        Fetch and check a Wikipedia page.

        Args:
            url: Page URL, e.g. https://de.wikipedia.org/wiki/Angela_Merkel
            marker: If given, matches are marked in the markup instead of
                having their suggestions applied

        Raises:
            InvalidLocatorError: URL is not a Wikipedia page URL (no request made)
            FetchError: the API request failed
            MalformedPayloadError: the API response is not valid XML
            PageNotFoundError: the page is empty or a redirect
            RuleEngineError: the grammar engine failed
        """
        StructuredLogger.new_correlation_id()
        self._enter(CheckPhase.IDLE)
        try:
            with logger.log_operation("check_page", url=url):
                self._enter(CheckPhase.VALIDATING)
                locator = parse_locator(url)

                self._enter(CheckPhase.FETCHING)
                payload = self.client.fetch_revision_xml(locator)

                self._enter(CheckPhase.EXTRACTING_REVISION)
                revision = extract_revision(payload)

                self._enter(CheckPhase.CHECKING_EMPTINESS)
                self._ensure_content(revision, locator.language, url)

                return self.check_markup(revision, locator.language, marker, source=url)
        except Exception:
            self._enter(CheckPhase.FAILED)
            raise

    def _ensure_content(self, revision: RevisionContent, language: str, source: str):
        if not revision.content.strip():
            raise PageNotFoundError(f"No content found at '{source}'", reason="empty", url=source)
        if is_redirect(revision.content, language):
            raise PageNotFoundError(f"No content but redirect found at '{source}'",
                                    reason="redirect", url=source)

    def check_markup(
        self,
        revision: RevisionContent,
        language: str,
        marker: Optional[ErrorMarker] = None,
        source: str = "",
    ) -> MarkupAwareResult:
        """Filter, check and map back one revision's markup."""
        try:
            self._enter(CheckPhase.FILTERING)
            mapping = self.build_markup_mapping(revision.content)

            self._enter(CheckPhase.RULE_CHECKING)
            with self._open_engine(language) as engine:
                matches = engine.check(mapping.plain_text)
            logger.info(f"{len(matches)} matches for {source or 'markup'}",
                        language=language, match_count=len(matches))

            self._enter(CheckPhase.MAPPING_BACK)
            replacer = SuggestionReplacer(mapping, revision.content, marker)
            applied_matches: List[AppliedRuleMatch] = []
            internal_errors = 0
            for match in matches:
                try:
                    applications = replacer.apply(match)
                except Exception as e:
                    internal_errors += 1
                    logger.error(
                        f"Failed to apply suggestion for rule match '{match}' for URL {source}: {e}",
                        rule_id=match.rule_id,
                        error_type=type(e).__name__,
                    )
                    continue
                applied_matches.append(AppliedRuleMatch(match, applications))
        except Exception:
            self._enter(CheckPhase.FAILED)
            raise

        self._enter(CheckPhase.AGGREGATED)
        return MarkupAwareResult(
            revision=revision,
            applied_matches=applied_matches,
            internal_errors=internal_errors,
            language=language,
            source=source,
        )

    def check_plain_text(self, plain_text: str, language: str) -> PlainTextResult:
        """Check plain text directly; offsets in the result refer to plain_text."""
        with self._open_engine(language) as engine:
            matches = engine.check(plain_text)
        return PlainTextResult(plain_text=plain_text, matches=matches, language=language)

    def _open_engine(self, language: str) -> RuleEngineBase:
        return self.engine_factory(
            language,
            disabled_rule_ids=self._disabled_rule_ids,
            ngram_dir=self.ngram_dir,
        )

    # ------------------------------------------------------------------
    # Markup helpers
    # ------------------------------------------------------------------

    @staticmethod
    def build_markup_mapping(markup: str) -> PlainTextMapping:
        """Strip links and filter markup; the mapping points into markup."""
        cleaned = strip_links_with_mapping(markup)
        return build_mapping(cleaned.plain_text).rebase(cleaned)

    def get_plain_text(self, payload: Payload) -> str:
        """
        @param payload the API response including the surrounding XML
        """
        return self.get_plain_text_mapping(payload).plain_text

    def get_plain_text_mapping(self, payload: Payload) -> PlainTextMapping:
        """
        @param payload the API response including the surrounding XML
        """
        revision = extract_revision(payload)
        return self.build_markup_mapping(revision.content)
