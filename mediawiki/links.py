"""
Link Pre-filter
===============
Removes interlanguage links, category links and file/image link prefixes
from wiki markup so they do not end up in the checked prose.

Catches most, not all links: "[[pt:Linux]]" is removed but
"[[zh-min-nan:Linux]]" is not. Might remove some non-interlanguage links.
File links keep their caption and alt text.
"""

import re
from typing import List

from .mapping import MappingBuilder, PlainTextMapping

INTERLANGUAGE_LINK = re.compile(r"\[\[[a-z]{2,6}:.*?\]\]")

CATEGORY_KEYWORDS = ("Category", "Categoria", "Categoría", "Catégorie", "Kategorie")
CATEGORY_LINK = re.compile(r"\[\[:?(" + "|".join(CATEGORY_KEYWORDS) + r"):.*?\]\]")

FILE_KEYWORDS = ("File", "Fitxer", "Fichero", "Ficheiro", "Fichier", "Datei")
IMAGE_EXTENSIONS = ("png", "jpg", "svg", "jpeg", "tiff", "gif")
FILE_LINK_PREFIX = re.compile(
    r"(" + "|".join(FILE_KEYWORDS) + r"):.*?"
    r"\.(" + "|".join(IMAGE_EXTENSIONS + tuple(ext.upper() for ext in IMAGE_EXTENSIONS)) + r")"
    r"\|((thumb|miniatur)\|)?((right|left)\|)?"
)

# Applied in this order; each pass sees the output of the previous one
LINK_PATTERNS = (INTERLANGUAGE_LINK, CATEGORY_LINK, FILE_LINK_PREFIX)


def strip_links(markup: str) -> str:
    """Remove interlanguage, category and file link syntax from markup."""
    for pattern in LINK_PATTERNS:
        markup = pattern.sub("", markup)
    return markup


def strip_links_with_mapping(markup: str) -> PlainTextMapping:
    """
    Same removals as strip_links, keeping track of where each kept
    character came from.

    Returns:
        Mapping whose plain_text equals strip_links(markup) and whose
        original offsets point into markup
    """
    text = markup
    origin: List[int] = list(range(len(markup)))

    for pattern in LINK_PATTERNS:
        kept_parts: List[str] = []
        kept_origin: List[int] = []
        last = 0
        for match in pattern.finditer(text):
            kept_parts.append(text[last:match.start()])
            kept_origin.extend(origin[last:match.start()])
            last = match.end()
        if last == 0:
            continue
        kept_parts.append(text[last:])
        kept_origin.extend(origin[last:])
        text = "".join(kept_parts)
        origin = kept_origin

    builder = MappingBuilder()
    run_start = 0
    for i in range(1, len(origin) + 1):
        if i == len(origin) or origin[i] != origin[i - 1] + 1:
            if run_start:
                builder.mark_break()
            builder.emit(text[run_start:i], origin[run_start])
            run_start = i
    return builder.build()
