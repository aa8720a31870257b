"""
Process-wide pattern matchers for the structural extractors.

Matchers are compiled on first use and memoised, so every render pass
shares the same immutable compiled patterns without locking. If any pattern
of a category fails to compile, that category alone is disabled:
get_patterns() returns None and the category's extractor falls back to its
default structure.
"""

import re
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional

from .sniffer import TagCategory
from .exceptions import PatternCompileError
from .logger import get_module_logger

logger = get_module_logger("patterns")

# Every extractor pattern is matched case-insensitively across newlines
PATTERN_FLAGS = re.IGNORECASE | re.DOTALL

PATTERN_SOURCES = {
    TagCategory.TABLE: {
        "header": r"<thead\b[^>]*>.*?<tr\b[^>]*>(.*?)</tr\s*>.*?</thead\s*>",
        "body": r"<tbody\b[^>]*>(.*?)</tbody\s*>",
        "row": r"<tr\b[^>]*>(.*?)</tr\s*>",
        "cell": r"<(?:th|td)\b[^>]*>(.*?)</(?:th|td)\s*>",
    },
    TagCategory.LIST: {
        # Opening or closing list tag; group 1 is "/" for a closing tag
        "tag": r"<(/?)(?:ul|ol)\b[^<>]*>",
        "item": r"<li\b[^<>]*>(.*?)</li\s*>",
        # At most nine digits, longer numbers are ignored
        "start": r"<ol\b[^>]*?\bstart\s*=\s*[\"']?\s*(-?\d{1,9})(?!\d)",
    },
    TagCategory.HEADING: {
        "heading": r"<h([1-6])\b[^>]*>(.*?)</h[1-6]\s*>",
    },
    TagCategory.CODE: {
        "code": r"(?:<pre\b[^>]*>\s*)?<code\b[^>]*>(.*?)</code\s*>",
    },
    TagCategory.BLOCKQUOTE: {
        "blockquote": r"<blockquote\b[^>]*>(.*?)</blockquote\s*>",
    },
}


def compile_pattern(category: TagCategory, name: str, source: str) -> re.Pattern:
    """Compile one extractor pattern, raising PatternCompileError on failure."""
    try:
        return re.compile(source, PATTERN_FLAGS)
    except re.error as e:
        raise PatternCompileError(
            f"Failed to compile {category.value} pattern '{name}': {e}",
            category=category.value,
            pattern=source,
            details={"name": name, "position": e.pos},
        ) from e


@lru_cache(maxsize=None)
def get_patterns(category: TagCategory) -> Optional[Mapping[str, re.Pattern]]:
    """
    Get the compiled matchers for a category.

    Returns:
        Read-only mapping of pattern name to compiled pattern, or None if
        the category is disabled because a pattern failed to compile.
    """
    sources = PATTERN_SOURCES.get(category)
    if not sources:
        return None

    compiled = {}
    try:
        for name, source in sources.items():
            compiled[name] = compile_pattern(category, name, source)
    except PatternCompileError as e:
        logger.error(f"Disabling {e.category} extraction: {e.message}")
        return None

    logger.debug(f"Compiled {len(compiled)} {category.value} patterns")
    return MappingProxyType(compiled)
