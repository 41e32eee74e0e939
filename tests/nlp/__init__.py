"""
NLP Tests Package
=================
Test suite for the grammar engine integration.

Run all tests: python3 -m pytest tests/nlp/ -v
Run specific: python3 -m pytest tests/nlp/test_languagetool.py -v
"""

__version__ = "1.0.0"
