"""
Revision Extractor
==================
Pulls the revision text and timestamp out of a MediaWiki API XML response
in a single forward pass.

The parser is fed in chunks and elements are cleared as soon as they end,
so memory stays proportional to the revision, not the whole payload.
"""

from typing import Iterable, Union
from xml.etree.ElementTree import XMLPullParser, ParseError

from config_logging import get_logger, MalformedPayloadError
from .models import RevisionContent

logger = get_logger(__name__)

REVISION_TAG = "rev"
TIMESTAMP_ATTRIBUTE = "timestamp"
CHUNK_SIZE = 64 * 1024

Payload = Union[str, bytes, Iterable[Union[str, bytes]]]


def _chunks(payload: Payload) -> Iterable[Union[str, bytes]]:
    if isinstance(payload, (str, bytes)):
        for start in range(0, len(payload), CHUNK_SIZE):
            yield payload[start:start + CHUNK_SIZE]
    else:
        yield from payload


def extract_revision(payload: Payload) -> RevisionContent:
    """
    Extract the text and timestamp of the revision in an API response.

    All text inside the first <rev> element is concatenated in document
    order, which covers both <rev>text</rev> and
    <rev><slots><slot>text</slot></slots></rev>. Later <rev> elements and
    all other elements are ignored.

    Returns:
        RevisionContent; content is empty and timestamp None when the
        response has no <rev> element

    Raises:
        MalformedPayloadError: payload is not well-formed XML
    """
    parser = XMLPullParser(events=("start", "end"))
    content = ""
    timestamp = None
    depth = 0  # >0 while inside the tracked <rev>
    seen_revision = False

    try:
        for chunk in _chunks(payload):
            parser.feed(chunk)
            for event, element in parser.read_events():
                if event == "start":
                    if depth:
                        depth += 1
                    elif element.tag == REVISION_TAG:
                        if seen_revision:
                            logger.debug("Ignoring additional <rev> element")
                        else:
                            seen_revision = True
                            depth = 1
                    continue

                if depth:
                    depth -= 1
                    if depth:
                        # text of nested elements is read with the whole <rev>
                        continue
                    content = "".join(element.itertext())
                    timestamp = element.get(TIMESTAMP_ATTRIBUTE)
                element.clear()
        parser.close()
    except ParseError as e:
        raise MalformedPayloadError(f"Could not parse XML: {e}") from e

    return RevisionContent(content=content, timestamp=timestamp)
