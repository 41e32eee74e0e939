"""
LanguageTool Client for WikiQuickCheck
======================================
Wraps language_tool_python library for grammar checking of Wikipedia prose.

Features:
- One engine per check, released through the context-manager protocol
- Wikipedia rules force-enabled, dictionary spell checkers force-disabled
- Caller-disabled rule IDs
- Optional n-gram language model directory
- Parallel rule evaluation via LanguageTool's check threads
- Severity mapping from LanguageTool categories

Requires: pip install language-tool-python
"""

from pathlib import Path
from typing import List, Optional, Iterable, FrozenSet

import language_tool_python

from config_logging import get_logger, RuleEngineError
from ..base import RuleEngineBase, GrammarMatch
from ..config import LanguageToolConfig, get_config

logger = get_logger(__name__)


class LanguageToolClient(RuleEngineBase):
    """
    LanguageTool integration for grammar and style checking.

    Starts a local Java server (or talks to a configured remote one) when
    constructed and shuts it down in close(). Use it as a context manager:

        with LanguageToolClient('de') as client:
            matches = client.check(plain_text)
    """

    INTEGRATION_NAME = "LanguageTool"
    INTEGRATION_VERSION = "1.0.0"

    # Severity mapping from LanguageTool categories
    SEVERITY_MAP = {
        'GRAMMAR': 'High',
        'TYPOS': 'High',
        'PUNCTUATION': 'Medium',
        'STYLE': 'Low',
        'TYPOGRAPHY': 'Low',
        'CASING': 'Medium',
        'COLLOCATIONS': 'Low',
        'REDUNDANCY': 'Low',
        'SEMANTICS': 'Medium',
        'WIKIPEDIA': 'Low',
        'MISC': 'Low',
    }

    SPELLING_ISSUE_TYPE = 'misspelling'

    def __init__(
        self,
        language: str,
        config: Optional[LanguageToolConfig] = None,
        disabled_rule_ids: Iterable[str] = (),
        ngram_dir: Optional[Path] = None,
    ):
        """
        Initialize LanguageTool client.

        Args:
            language: Language code as used by Wikipedia ('en', 'de', ...)
            config: LanguageTool settings (default: global NLP config)
            disabled_rule_ids: Rule IDs switched off for this check
            ngram_dir: Directory with per-language n-gram data; overrides config
        """
        super().__init__(language)
        self.config = config or get_config().languagetool
        self.disabled_rule_ids: FrozenSet[str] = frozenset(disabled_rule_ids) | frozenset(self.config.disabled_rules)
        self.spelling_rule_ids: FrozenSet[str] = frozenset(self.config.spelling_rules)
        ngram_dir = ngram_dir or self.config.ngram_dir
        self.ngram_dir: Optional[Path] = Path(ngram_dir) if ngram_dir else None
        self._tool = None
        self._init_tool()

    def _server_config(self) -> dict:
        """Build the local server configuration."""
        server_config = {
            'cacheSize': self.config.cache_size,
            'pipelineCaching': True,
            'maxCheckThreads': self.config.max_check_threads,
        }
        if self.ngram_dir is not None:
            if not (self.ngram_dir / self.language).is_dir():
                logger.warning(
                    f"No n-gram data for '{self.language}' below {self.ngram_dir}",
                    language=self.language,
                )
            server_config['languageModel'] = str(self.ngram_dir)
        return server_config

    def _init_tool(self):
        """Initialize LanguageTool (starts local Java server unless remote)."""
        if not self.config.enabled:
            self._error = "LanguageTool disabled by configuration"
            raise RuleEngineError(self._error, language=self.language)
        try:
            if self.config.remote_server:
                self._tool = language_tool_python.LanguageTool(
                    self.language,
                    remote_server=self.config.remote_server,
                )
            else:
                self._tool = language_tool_python.LanguageTool(
                    self.language,
                    config=self._server_config(),
                )
        except Exception as e:
            self._error = f"LanguageTool initialization failed: {e}"
            raise RuleEngineError(self._error, language=self.language) from e

        self._configure_rules()
        self._available = True
        logger.debug(
            f"LanguageTool ready for '{self.language}'",
            language=self.language,
            disabled_rules=sorted(self.disabled_rule_ids),
        )

    def _configure_rules(self):
        """Enable Wikipedia rules, disable spelling and caller-disabled rules."""
        self._tool.enabled_categories.add(self.config.wikipedia_category)
        self._tool.enabled_rules.update(self.config.wikipedia_rules)
        self._tool.disabled_rules.update(self.spelling_rule_ids)
        self._tool.disabled_rules.update(self.disabled_rule_ids)

    def check(self, text: str) -> List[GrammarMatch]:
        """
        Check text for grammar issues.

        Args:
            text: Plain text to check

        Returns:
            GrammarMatch objects ordered by position, then rule ID
        """
        if not self.is_available:
            raise RuleEngineError(
                self._error or "LanguageTool is not available",
                language=self.language,
            )

        try:
            matches = self._tool.check(text)
        except Exception as e:
            self._error = f"Check failed: {e}"
            raise RuleEngineError(self._error, language=self.language) from e

        issues = []
        for match in matches:
            if self._is_spelling_match(match):
                continue
            if match.ruleId in self.disabled_rule_ids:
                continue

            category = getattr(match, 'category', None) or 'MISC'
            issues.append(GrammarMatch(
                rule_id=match.ruleId,
                message=match.message,
                offset=match.offset,
                length=match.errorLength,
                replacements=list(match.replacements or []),
                category=category,
                severity=self.SEVERITY_MAP.get(category, 'Low'),
                issue_type=getattr(match, 'ruleIssueType', '') or '',
                sentence=getattr(match, 'sentence', '') or '',
            ))

        issues.sort(key=lambda m: (m.offset, m.length, m.rule_id))
        return issues

    def _is_spelling_match(self, match) -> bool:
        """Dictionary-based spelling matches are never reported."""
        if match.ruleId in self.spelling_rule_ids:
            return True
        return getattr(match, 'ruleIssueType', None) == self.SPELLING_ISSUE_TYPE

    def get_status(self) -> dict:
        """Get detailed status of the LanguageTool integration."""
        status = super().get_status()
        status['ngram_dir'] = str(self.ngram_dir) if self.ngram_dir else None
        status['remote_server'] = self.config.remote_server
        return status

    def close(self):
        """Shut down the LanguageTool server."""
        tool, self._tool = self._tool, None
        self._available = False
        if tool is not None:
            try:
                tool.close()
            except Exception as e:
                logger.warning(f"LanguageTool shutdown failed: {e}", language=self.language)
