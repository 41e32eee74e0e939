"""
NLP Configuration Module
========================
Centralized configuration for the grammar engine integration.

Configuration can be set via:
1. Environment variables (NLP_LANGUAGETOOL_MAX_THREADS=4)
2. Config file (nlp_config.json)
3. Direct API calls (config.set('languagetool.cache_size', 500))

Values are read once per check; changing them while a check runs is
not supported.
"""

import os
import json
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

from config_logging import get_logger

__version__ = "1.0.0"

logger = get_logger(__name__)

# Default configuration path
CONFIG_FILE = Path.cwd() / "nlp_config.json"


@dataclass
class LanguageToolConfig:
    """LanguageTool configuration."""
    enabled: bool = True
    disabled_rules: list = field(default_factory=list)
    # Wikipedia rules are off by default in LanguageTool
    wikipedia_category: str = "WIKIPEDIA"
    wikipedia_rules: list = field(default_factory=lambda: [
        "WIKIPEDIA_CONTRACTIONS",
        "WIKIPEDIA_CURRENTLY",
        "WIKIPEDIA_12_AM",
        "WIKIPEDIA_12_PM",
    ])
    # Dictionary-based spell checkers, always switched off
    spelling_rules: list = field(default_factory=lambda: [
        "MORFOLOGIK_RULE_EN_US",
        "MORFOLOGIK_RULE_EN_GB",
        "MORFOLOGIK_RULE_EN_AU",
        "MORFOLOGIK_RULE_EN_CA",
        "MORFOLOGIK_RULE_EN_NZ",
        "MORFOLOGIK_RULE_EN_ZA",
        "GERMAN_SPELLER_RULE",
        "AUSTRIAN_GERMAN_SPELLER_RULE",
        "SWISS_GERMAN_SPELLER_RULE",
        "FR_SPELLING_RULE",
        "HUNSPELL_RULE",
        "HUNSPELL_NO_SUGGEST_RULE",
        "MORFOLOGIK_RULE_ES",
        "MORFOLOGIK_RULE_CA_ES",
        "MORFOLOGIK_RULE_NL_NL",
        "MORFOLOGIK_RULE_PL_PL",
        "MORFOLOGIK_RULE_RU_RU",
        "MORFOLOGIK_RULE_UK_UA",
        "MORFOLOGIK_RULE_IT_IT",
        "MORFOLOGIK_RULE_PT_PT",
        "MORFOLOGIK_RULE_PT_BR",
    ])
    ngram_dir: Optional[str] = None  # dir with 'en', 'de', ... n-gram subdirs
    max_check_threads: int = 4
    cache_size: int = 1000
    remote_server: Optional[str] = None  # e.g. http://localhost:8081


@dataclass
class NLPConfig:
    """Master NLP configuration."""
    languagetool: LanguageToolConfig = field(default_factory=LanguageToolConfig)


# Global configuration instance
_config: Optional[NLPConfig] = None


def get_config() -> NLPConfig:
    """Get the global NLP configuration."""
    global _config
    if _config is None:
        _config = _load_config()
    return _config


def _load_config() -> NLPConfig:
    """Load configuration from file and environment."""
    config = NLPConfig()

    if CONFIG_FILE.exists():
        try:
            with open(CONFIG_FILE, 'r', encoding='utf-8') as f:
                file_config = json.load(f)
            _apply_dict_to_config(config, file_config)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Could not load NLP config file: {e}", path=str(CONFIG_FILE))

    _apply_env_to_config(config)

    return config


def _apply_dict_to_config(config: NLPConfig, data: Dict[str, Any]):
    """Apply dictionary values to config object."""
    for section_name, section_data in data.items():
        if hasattr(config, section_name) and isinstance(section_data, dict):
            section = getattr(config, section_name)
            for key, value in section_data.items():
                if hasattr(section, key):
                    setattr(section, key, value)


def _apply_env_to_config(config: NLPConfig, environ: Optional[Dict[str, str]] = None):
    """Apply environment variables to config."""
    source = os.environ if environ is None else environ
    env_mappings = {
        'NLP_LANGUAGETOOL_ENABLED': ('languagetool', 'enabled', _parse_bool),
        'NLP_LANGUAGETOOL_DISABLED_RULES': ('languagetool', 'disabled_rules', _parse_list),
        'NLP_LANGUAGETOOL_NGRAM_DIR': ('languagetool', 'ngram_dir', str),
        'NLP_LANGUAGETOOL_MAX_THREADS': ('languagetool', 'max_check_threads', int),
        'NLP_LANGUAGETOOL_CACHE_SIZE': ('languagetool', 'cache_size', int),
        'NLP_LANGUAGETOOL_REMOTE_SERVER': ('languagetool', 'remote_server', str),
    }

    for env_var, (section, key, converter) in env_mappings.items():
        value = source.get(env_var)
        if value is not None:
            try:
                section_obj = getattr(config, section)
                setattr(section_obj, key, converter(value))
            except (ValueError, AttributeError) as e:
                logger.warning(f"Invalid env var {env_var}={value}: {e}")


def _parse_bool(value: str) -> bool:
    """Parse boolean from string."""
    return value.lower() in ('true', '1', 'yes', 'on')


def _parse_list(value: str) -> list:
    """Parse a comma-separated list, dropping blanks."""
    return [item.strip() for item in value.split(',') if item.strip()]


def get(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by dot-notation key.

    Example: get('languagetool.max_check_threads') -> 4
    """
    config = get_config()
    parts = key.split('.')

    obj = config
    for part in parts:
        if hasattr(obj, part):
            obj = getattr(obj, part)
        else:
            return default

    return obj


def set(key: str, value: Any):
    """
    Set a configuration value by dot-notation key.

    Example: set('languagetool.ngram_dir', '/data/ngrams')
    """
    config = get_config()
    parts = key.split('.')

    if len(parts) < 2:
        raise ValueError(f"Key must be in format 'section.key': {key}")

    section_name = parts[0]
    attr_name = parts[1]

    if hasattr(config, section_name):
        section = getattr(config, section_name)
        if hasattr(section, attr_name):
            setattr(section, attr_name, value)
        else:
            raise ValueError(f"Unknown config key: {attr_name}")
    else:
        raise ValueError(f"Unknown config section: {section_name}")


def reset_config():
    """Reset configuration to defaults."""
    global _config
    _config = NLPConfig()
