"""
Wiki Markup Text Filter
=======================
Converts wiki markup into plain prose and records where every piece of the
prose came from.

Parsing is done by mwparserfromhell; this module walks the node tree,
keeping a running offset into the markup (each node's str() is exactly its
source text), and feeds a MappingBuilder.

Requires: pip install mwparserfromhell
"""

import re

import mwparserfromhell
from mwparserfromhell.nodes import (
    Argument,
    Comment,
    ExternalLink,
    Heading,
    HTMLEntity,
    Tag,
    Template,
    Text,
    Wikilink,
)
from mwparserfromhell.wikicode import Wikicode

from config_logging import get_logger
from .links import CATEGORY_KEYWORDS, FILE_KEYWORDS
from .mapping import MappingBuilder, PlainTextMapping

__version__ = "1.0.0"

logger = get_logger(__name__)

# Tags whose contents are not prose
SKIPPED_TAGS = frozenset({
    'ref', 'references', 'table', 'math', 'gallery', 'syntaxhighlight',
    'source', 'pre', 'timeline', 'imagemap', 'score', 'graph', 'chem',
    'ce', 'templatedata', 'mapframe', 'maplink', 'inputbox', 'categorytree',
})

LINE_BREAK_TAGS = frozenset({'br'})

HIDDEN_LINK_NAMESPACES = frozenset(
    name.lower() for name in CATEGORY_KEYWORDS + FILE_KEYWORDS + ("Image", "Bild", "Imagen", "Media")
)

_NAMESPACE_PREFIX = re.compile(r"^\s*:?\s*([^:|\]]+?)\s*:")


def build_mapping(markup: str) -> PlainTextMapping:
    """
    Convert wiki markup to plain text with an offset mapping into markup.

    Every plain character maps into markup in order; text the filter adds
    itself (line breaks for <br>) maps to a zero-width position.
    """
    builder = MappingBuilder()
    _walk(mwparserfromhell.parse(markup), 0, builder)
    mapping = builder.build()
    logger.debug(
        f"Filtered {len(markup)} chars of markup to {len(mapping.plain_text)} chars of text",
        ranges=len(mapping),
    )
    return mapping


def _walk(code: Wikicode, base: int, builder: MappingBuilder):
    position = base
    for node in code.nodes:
        source = str(node)
        _emit_node(node, source, position, builder)
        position += len(source)


def _emit_node(node, source: str, position: int, builder: MappingBuilder):
    if isinstance(node, Text):
        builder.emit(node.value, position)

    elif isinstance(node, Wikilink):
        title = str(node.title)
        if _is_hidden_link(title):
            return
        if node.text is not None:
            _walk(node.text, position + 2 + len(title) + 1, builder)
        else:
            _walk(node.title, position + 2, builder)

    elif isinstance(node, ExternalLink):
        if not node.brackets:
            builder.emit(source, position)
        elif node.title is not None:
            title = str(node.title)
            _walk(node.title, position + len(source) - 1 - len(title), builder)

    elif isinstance(node, Heading):
        _walk(node.title, position + node.level, builder)

    elif isinstance(node, Tag):
        _emit_tag(node, source, position, builder)

    elif isinstance(node, HTMLEntity):
        builder.emit(node.normalize(), position, position + len(source))

    elif isinstance(node, (Template, Comment, Argument)):
        return

    else:
        logger.debug(f"Skipping unsupported node type {type(node).__name__}")


def _emit_tag(node: Tag, source: str, position: int, builder: MappingBuilder):
    name = str(node.tag).strip().lower()
    if name in LINE_BREAK_TAGS:
        builder.synthesize("\n", position)
        return
    if name in SKIPPED_TAGS or node.self_closing or node.contents is None:
        return

    contents = str(node.contents)
    if not contents:
        return

    if node.wiki_markup and not node.attributes:
        offset = len(str(node.wiki_markup))
    else:
        offset = source.find(">") + 1
    if not source.startswith(contents, offset):
        offset = source.rfind(contents)
        if offset < 0:
            logger.debug(f"Could not locate contents of <{name}> tag")
            return
    _walk(node.contents, position + offset, builder)


def _is_hidden_link(title: str) -> bool:
    match = _NAMESPACE_PREFIX.match(title)
    return bool(match) and match.group(1).lower() in HIDDEN_LINK_NAMESPACES
