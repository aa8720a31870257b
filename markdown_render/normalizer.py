"""
Text Normalizer: the final plain-text pass shared by the extractors.

Strips residual tags left over after structural extraction and collapses
whitespace, so List and Blockquote output is plain text even when the
markup was nested or malformed.
"""

import re

# Anything from '<' to the next '>' counts as a tag
TAG_PATTERN = re.compile(r"<[^>]+>")

WHITESPACE_PATTERN = re.compile(r"\s+")

NEWLINE_PATTERN = re.compile(r"\r\n|\r|\n")


def flatten_newlines(html: str) -> str:
    """Replace line breaks with spaces so multi-line tags match as one line."""
    return NEWLINE_PATTERN.sub(" ", html)


def strip_tags(text: str) -> str:
    """Remove every remaining <...> tag."""
    return TAG_PATTERN.sub("", text)


def collapse_whitespace(text: str) -> str:
    """Merge whitespace runs into single spaces and trim both ends."""
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def normalize_text(text: str) -> str:
    """Strip tags, collapse whitespace, trim."""
    return collapse_whitespace(strip_tags(text))
