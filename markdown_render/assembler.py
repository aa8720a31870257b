"""
Node Assembler: wrap extracted data into native block nodes.

The assembled node uses exactly the variants the upstream parser emits,
so a renderer cannot tell interpreted markup from parsed Markdown.

Pipeline position: Stage 3 of 3 (Sniffer → Extractor → Assembler).
"""

from typing import Optional

from .schemas import (
    BlockNode, Blockquote, BulletedList, CodeBlock, Heading, ListItem,
    NumberedList, Paragraph, Table, TableCell, TableRow, Text,
    TableData, ListData, HeadingData, CodeData, BlockquoteData,
)
from .sniffer import TagCategory
from .extractor import ExtractedData
from .logger import get_module_logger

logger = get_module_logger("assembler")


def text_paragraph(text: str) -> Paragraph:
    """A paragraph holding a single text run."""
    return Paragraph(content=[Text(text=text)])


class Assembler:
    """Builds block nodes from extractor output."""

    def assemble(
        self,
        category: TagCategory,
        data: Optional[ExtractedData],
        original_html: str
    ) -> BlockNode:
        """
        Assemble the node for a category.

        Args:
            category: Category chosen by the sniffer
            data: Extractor output (None for UNKNOWN)
            original_html: The HTML block content, used verbatim by the fallback

        Returns:
            A block node; never an HTMLBlock
        """
        if category == TagCategory.TABLE and isinstance(data, TableData):
            return self.build_table(data)
        if category == TagCategory.LIST and isinstance(data, ListData):
            return self.build_list(data)
        if category == TagCategory.HEADING and isinstance(data, HeadingData):
            return self.build_heading(data)
        if category == TagCategory.CODE and isinstance(data, CodeData):
            return self.build_code(data)
        if category == TagCategory.BLOCKQUOTE and isinstance(data, BlockquoteData):
            return self.build_blockquote(data)

        # Total fallback: the markup is shown as-is
        logger.debug("No structure recognised, falling back to a paragraph")
        return text_paragraph(original_html)

    def build_table(self, data: TableData) -> Table:
        rows = [
            TableRow(cells=[TableCell(content=[Text(text=cell)]) for cell in row])
            for row in data.rows
        ]
        return Table(column_alignments=data.alignments, rows=rows)

    def build_list(self, data: ListData):
        items = [ListItem(children=[text_paragraph(item)]) for item in data.items]
        if data.ordered:
            return NumberedList(tight=True, start=data.start, items=items)
        return BulletedList(tight=True, items=items)

    def build_heading(self, data: HeadingData) -> Heading:
        return Heading(level=data.level, content=[Text(text=data.text)])

    def build_code(self, data: CodeData) -> CodeBlock:
        return CodeBlock(fence_info=None, content=data.content)

    def build_blockquote(self, data: BlockquoteData) -> Blockquote:
        return Blockquote(children=[text_paragraph(data.text)])
