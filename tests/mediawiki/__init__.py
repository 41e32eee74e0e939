"""
MediaWiki Tests Package
=======================
Tests for fetching, filtering, mapping and checking Wikipedia markup.

Run all tests: python3 -m pytest tests/mediawiki/ -v
"""

__version__ = "1.0.0"
