"""
LanguageTool Integration for WikiQuickCheck
===========================================
Grammar and style checking with LanguageTool's rule set.

Features:
- Grammar and style checking
- Wikipedia-specific rules
- Optional n-gram language model rules
- Local server mode or remote server

Requires: pip install language-tool-python
Note: First run downloads LanguageTool JAR (~200MB)
"""

__version__ = "1.0.0"


def open_client(language: str, **kwargs):
    """
    Create a LanguageToolClient for one check.

    The caller owns the client and must close it, preferably with `with`.
    """
    from .client import LanguageToolClient
    return LanguageToolClient(language, **kwargs)


def get_status(language: str = 'en') -> dict:
    """Start a client briefly and report its status."""
    from config_logging import RuleEngineError
    try:
        with open_client(language) as client:
            return client.get_status()
    except RuleEngineError as e:
        return {
            'available': False,
            'error': e.message,
            'language': language,
        }
