"""
WikiQuickCheck NLP Package
==========================
Version: 1.0.0

Grammar engine integrations used to check the plain text of Wikipedia pages:
- LanguageTool: grammar and style checking (spelling rules disabled)

Uses lazy loading - modules only import when accessed.
"""

__version__ = "1.0.0"

_MODULES = {
    'languagetool': 'nlp.languagetool',
}

_loaded_modules = {}


def __getattr__(name):
    """Lazy load submodules on first access."""
    if name in _MODULES:
        if name not in _loaded_modules:
            import importlib
            _loaded_modules[name] = importlib.import_module(_MODULES[name])
        return _loaded_modules[name]
    raise AttributeError(f"module 'nlp' has no attribute '{name}'")


def __dir__():
    """List available submodules."""
    return list(_MODULES.keys()) + ['config', 'base']
