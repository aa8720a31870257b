"""
Structural Extractors: pattern-based extraction per tag category.

Each extractor turns an HTML blob into a small typed structure
(TableData, ListData, ...) for the Assembler. Extraction is best effort:
no match, malformed markup, or a disabled category all yield the
category's default structure. Nothing here raises.

Pipeline position: Stage 2 of 3 (Sniffer → Extractor → Assembler).
Input:  raw HTML string + TagCategory
Output: one of the *Data schemas
"""

import re
from typing import Optional, Union

from .schemas import (
    Alignment, TableData, ListData, HeadingData, CodeData, BlockquoteData,
)
from .sniffer import TagCategory
from .patterns import get_patterns
from .normalizer import flatten_newlines, collapse_whitespace, normalize_text
from .logger import get_module_logger

logger = get_module_logger("extractor")

ExtractedData = Union[TableData, ListData, HeadingData, CodeData, BlockquoteData]


class Extractor:
    """Extracts typed sub-structures from HTML blocks."""

    def extract(self, html: str, category: TagCategory) -> Optional[ExtractedData]:
        """
        Run the extractor for a category.

        Args:
            html: Raw HTML block content
            category: Category chosen by the sniffer

        Returns:
            Extracted data, or None for TagCategory.UNKNOWN
        """
        if category == TagCategory.TABLE:
            return self.extract_table(html)
        if category == TagCategory.LIST:
            return self.extract_list(html)
        if category == TagCategory.HEADING:
            return self.extract_heading(html)
        if category == TagCategory.CODE:
            return self.extract_code(html)
        if category == TagCategory.BLOCKQUOTE:
            return self.extract_blockquote(html)
        return None

    # --- Table ---

    def extract_table(self, html: str) -> TableData:
        """
        Extract header and body rows from a table.

        The header row (first <tr> of <thead>) defines the column count.
        Without a header the table gets a single default column, but body
        rows are still extracted, so cell and column counts may differ.
        """
        patterns = get_patterns(TagCategory.TABLE)
        if patterns is None:
            return TableData()

        cleaned = collapse_whitespace(flatten_newlines(html))

        rows = []
        column_count = 0

        header_match = patterns["header"].search(cleaned)
        if header_match:
            header_cells = self._extract_cells(header_match.group(1), patterns["cell"])
            column_count = len(header_cells)
            rows.append(header_cells)

        body_match = patterns["body"].search(cleaned)
        if body_match:
            for row_match in patterns["row"].finditer(body_match.group(1)):
                rows.append(self._extract_cells(row_match.group(1), patterns["cell"]))

        alignments = [Alignment.NONE] * max(column_count, 1)
        logger.debug(f"Extracted table: {len(alignments)} columns, {len(rows)} rows")
        return TableData(alignments=alignments, rows=rows)

    def _extract_cells(self, row_html: str, cell_pattern: re.Pattern) -> list[str]:
        # Inner tags are kept; only the surrounding whitespace goes
        return [m.group(1).strip() for m in cell_pattern.finditer(row_html)]

    # --- List ---

    def extract_list(self, html: str) -> ListData:
        """
        Extract the items of every top-level list as plain text.

        Sibling lists contribute their items in document order. Nested
        lists are removed before the items are read, so an item keeps only
        its own text. Nested content is dropped, never merged into the
        parent item and never parsed recursively.
        """
        flat = flatten_newlines(html)
        ordered = "<ol" in flat.lower()

        patterns = get_patterns(TagCategory.LIST)
        if patterns is None:
            return ListData(ordered=ordered)

        bodies, first_ol_tag = self._split_top_level_lists(flat, patterns["tag"])
        if not bodies:
            # No list tag at all: scan the whole blob
            bodies = [flat]

        start = 1
        if first_ol_tag is not None:
            start_match = patterns["start"].search(first_ol_tag)
            if start_match:
                start = int(start_match.group(1))

        items = []
        for body in bodies:
            # Stop at the last closing tag so an unclosed <li> is never rescanned
            last_close = body.lower().rfind("</li")
            if last_close < 0:
                continue
            end = body.find(">", last_close)
            end = len(body) if end < 0 else end + 1
            for item_match in patterns["item"].finditer(body, 0, end):
                items.append(normalize_text(item_match.group(1)))

        logger.debug(f"Extracted {'ordered' if ordered else 'unordered'} list with {len(items)} items")
        return ListData(ordered=ordered, start=start, items=items)

    def _split_top_level_lists(
        self,
        html: str,
        tag_pattern: re.Pattern
    ) -> tuple[list[str], Optional[str]]:
        """
        Walk list tags once, tracking depth.

        Returns:
            The body of each top-level list with nested list content removed,
            and the first <ol> opening tag seen (None if there is none).
        """
        bodies = []
        parts = []
        first_ol_tag = None
        depth = 0
        position = 0

        for match in tag_pattern.finditer(html):
            if depth == 1:
                parts.append(html[position:match.start()])
            position = match.end()

            if match.group(1):
                # Stray closing tags outside any list are ignored
                if depth == 0:
                    continue
                depth -= 1
                if depth == 0:
                    bodies.append("".join(parts))
                    parts = []
            else:
                if first_ol_tag is None and match.group(0)[:3].lower() == "<ol":
                    first_ol_tag = match.group(0)
                depth += 1

        if depth > 0:
            # Unclosed top-level list runs to the end of the blob
            if depth == 1:
                parts.append(html[position:])
            bodies.append("".join(parts))

        return bodies, first_ol_tag

    # --- Heading ---

    def extract_heading(self, html: str) -> HeadingData:
        """First <h1>..<h6> anywhere in the blob; level 1 and empty text if none."""
        patterns = get_patterns(TagCategory.HEADING)
        if patterns is None:
            return HeadingData()

        match = patterns["heading"].search(flatten_newlines(html))
        if not match:
            return HeadingData()

        return HeadingData(level=int(match.group(1)), text=normalize_text(match.group(2)))

    # --- Code ---

    def extract_code(self, html: str) -> CodeData:
        """
        Inner text of <code>, optionally wrapped in <pre>, returned verbatim.

        Runs on the raw blob so line breaks inside the code survive.
        Entities are not decoded. Falls back to the whole trimmed blob.
        """
        patterns = get_patterns(TagCategory.CODE)
        match = patterns["code"].search(html) if patterns is not None else None
        if not match:
            return CodeData(content=html.strip())
        return CodeData(content=match.group(1))

    # --- Blockquote ---

    def extract_blockquote(self, html: str) -> BlockquoteData:
        """
        Plain text of the first blockquote.

        Inner blockquote tags are stripped like any other tag, so nested
        quotes lose their depth. Without a closing tag the whole blob is
        normalised instead.
        """
        flat = flatten_newlines(html)
        patterns = get_patterns(TagCategory.BLOCKQUOTE)
        match = patterns["blockquote"].search(flat) if patterns is not None else None
        if not match:
            return BlockquoteData(text=normalize_text(flat))
        return BlockquoteData(text=normalize_text(match.group(1)))


def extract(html: str, category: TagCategory) -> Optional[ExtractedData]:
    """Convenience function to run one extractor."""
    return Extractor().extract(html, category)
