"""
NLP Base Classes
================
Base classes and match types shared by grammar engine integrations.

An engine receives plain text and returns matches expressed as plain-text
offsets. Engines hold external resources (a LanguageTool server, worker
threads), so they are used as context managers and closed after each check.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field

__version__ = "1.0.0"


@dataclass
class GrammarMatch:
    """
    A single issue reported by a grammar engine.

    Offsets refer to the plain text the engine was given.
    """
    rule_id: str
    message: str
    offset: int
    length: int
    replacements: List[str] = field(default_factory=list)
    category: str = ""
    severity: str = "Low"  # 'High', 'Medium', 'Low'
    issue_type: str = ""
    sentence: str = ""

    @property
    def start(self) -> int:
        return self.offset

    @property
    def end(self) -> int:
        return self.offset + self.length

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        return {
            'rule_id': self.rule_id,
            'message': self.message,
            'offset': self.offset,
            'length': self.length,
            'replacements': list(self.replacements),
            'category': self.category,
            'severity': self.severity,
            'issue_type': self.issue_type,
        }

    def __str__(self) -> str:
        return f"{self.rule_id}@{self.start}-{self.end}: {self.message}"


class RuleEngineBase(ABC):
    """
    Abstract base class for grammar engine integrations.

    Subclasses acquire their resources in __init__ and release them in close().
    """

    INTEGRATION_NAME: str = "Rule Engine"
    INTEGRATION_VERSION: str = "1.0.0"

    def __init__(self, language: str):
        self.language = language
        self._available = False
        self._error: Optional[str] = None

    @property
    def is_available(self) -> bool:
        """Check if the integration is available and working."""
        return self._available

    @property
    def error(self) -> Optional[str]:
        """Get initialization error if any."""
        return self._error

    @abstractmethod
    def check(self, text: str) -> List[GrammarMatch]:
        """Check plain text, returning matches ordered by position."""

    @abstractmethod
    def close(self):
        """Release engine resources. Must be safe to call twice."""

    def get_status(self) -> Dict[str, Any]:
        """Get status of the integration."""
        return {
            'name': self.INTEGRATION_NAME,
            'available': self.is_available,
            'language': self.language,
            'error': self._error,
        }

    def __enter__(self) -> 'RuleEngineBase':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
