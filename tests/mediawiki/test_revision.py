"""
Tests for Revision Extraction
=============================
"""

import pytest

from config_logging import MalformedPayloadError
from mediawiki.revision import extract_revision, CHUNK_SIZE

LEGACY_PAYLOAD = (
    '<?xml version="1.0"?><api><query><pages><page pageid="1" title="Test">'
    '<revisions><rev timestamp="2011-05-01T10:00:00Z" xml:space="preserve">'
    'Text &amp; [[more]]</rev></revisions></page></pages></query></api>'
)

SLOT_PAYLOAD = (
    '<?xml version="1.0"?><api batchcomplete=""><query><pages><page title="Test">'
    '<revisions><rev timestamp="2024-01-02T03:04:05Z"><slots>'
    '<slot contentmodel="wikitext" contentformat="text/x-wiki" xml:space="preserve">'
    "'''Paris''' is the capital.</slot></slots></rev></revisions></page></pages></query></api>"
)


class TestExtractRevision:
    """Tests for extract_revision."""

    def test_legacy_shape(self):
        revision = extract_revision(LEGACY_PAYLOAD)
        assert revision.content == "Text & [[more]]"
        assert revision.timestamp == "2011-05-01T10:00:00Z"

    def test_slot_shape(self):
        revision = extract_revision(SLOT_PAYLOAD)
        assert revision.content == "'''Paris''' is the capital."
        assert revision.timestamp == "2024-01-02T03:04:05Z"

    def test_bytes_payload(self):
        assert extract_revision(SLOT_PAYLOAD.encode('utf-8')).content.startswith("'''Paris'''")

    def test_chunked_payload(self):
        """Chunks may split tags and text anywhere."""
        data = LEGACY_PAYLOAD.encode('utf-8')
        chunks = [data[i:i + 7] for i in range(0, len(data), 7)]
        assert extract_revision(chunks).content == "Text & [[more]]"

    def test_large_content(self):
        text = "x" * (CHUNK_SIZE * 3 + 17)
        revision = extract_revision(f'<api><rev timestamp="t">{text}</rev></api>')
        assert revision.content == text

    def test_first_revision_wins(self):
        payload = '<api><rev timestamp="1">first</rev><rev timestamp="2">second</rev></api>'
        revision = extract_revision(payload)
        assert revision.content == "first"
        assert revision.timestamp == "1"

    def test_no_revision(self):
        revision = extract_revision('<api><query><pages><page missing=""/></pages></query></api>')
        assert revision.content == ""
        assert revision.timestamp is None

    def test_empty_revision(self):
        revision = extract_revision('<api><rev timestamp="t"/></api>')
        assert revision.content == ""
        assert revision.timestamp == "t"

    @pytest.mark.parametrize("payload", [
        "<api><rev>unclosed</api>",
        "not xml at all",
        "<api><rev>a & b</rev></api>",
    ])
    def test_malformed(self, payload):
        with pytest.raises(MalformedPayloadError):
            extract_revision(payload)
