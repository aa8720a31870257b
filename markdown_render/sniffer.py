"""
Tag Sniffer: classify an HTML blob into one semantic category.

Classification is a case-insensitive substring test for opening-tag tokens.
The precedence is fixed: TABLE > LIST > HEADING > CODE > BLOCKQUOTE > UNKNOWN.
A blob containing several structures is classified by the first match only.
"""

from enum import Enum

from .logger import get_module_logger

logger = get_module_logger("sniffer")


class TagCategory(str, Enum):
    """Structure recognised inside an HTML block."""
    TABLE = "table"
    LIST = "list"
    HEADING = "heading"
    CODE = "code"
    BLOCKQUOTE = "blockquote"
    UNKNOWN = "unknown"


# Ordered by precedence. The first category with a matching token wins.
CATEGORY_TOKENS = [
    (TagCategory.TABLE, ("<table",)),
    (TagCategory.LIST, ("<ul", "<ol")),
    (TagCategory.HEADING, ("<h1", "<h2", "<h3", "<h4", "<h5", "<h6")),
    (TagCategory.CODE, ("<pre", "<code")),
    (TagCategory.BLOCKQUOTE, ("<blockquote",)),
]


def sniff(html: str) -> TagCategory:
    """Return the category of the first structure found in precedence order."""
    lowered = html.lower()
    for category, tokens in CATEGORY_TOKENS:
        if any(token in lowered for token in tokens):
            logger.debug(f"Classified HTML block as {category.value}")
            return category
    return TagCategory.UNKNOWN
