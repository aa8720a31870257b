"""
HTML Fallback Interpreter: orchestrates Sniffer → Extractor → Assembler.

The interpreter is a pure function of the HTML block content. It keeps no
state between calls and caches nothing; a renderer calls it again on every
render pass.
"""

from .schemas import (
    BlockNode, Blockquote, BulletedList, CodeBlock, HTMLBlock, Heading,
    ListItem, NumberedList, Paragraph, Table, TaskList, TaskListItem,
    ThematicBreak,
)
from .sniffer import sniff
from .extractor import Extractor
from .assembler import Assembler
from .logger import get_module_logger

logger = get_module_logger("interpreter")


class HTMLBlockInterpreter:
    """
    Re-expresses opaque HTML blocks as typed block nodes.

    Coordinates the three stages:
    1. Sniffer: picks one category by fixed precedence
    2. Extractor: pulls a typed structure out of the markup
    3. Assembler: wraps it into the native node variant
    """

    def __init__(self):
        self.extractor = Extractor()
        self.assembler = Assembler()

    def interpret(self, html: str) -> BlockNode:
        """Interpret one HTML block's content. Never raises."""
        category = sniff(html)
        data = self.extractor.extract(html, category)
        node = self.assembler.assemble(category, data, html)
        logger.debug(f"Interpreted {category.value} block as {node.kind}")
        return node

    def resolve(self, blocks: list) -> list:
        """
        Return a copy of a block list with every HTMLBlock interpreted.

        Blocks nested inside blockquotes and list items are resolved as
        well, so no HTMLBlock reaches the renderer.
        """
        return [self.resolve_block(block) for block in blocks]

    def resolve_block(self, block: BlockNode) -> BlockNode:
        if isinstance(block, HTMLBlock):
            return self.interpret(block.content)
        if isinstance(block, Blockquote):
            return Blockquote(children=self.resolve(block.children))
        if isinstance(block, BulletedList):
            return block.model_copy(update={"items": self._resolve_items(block.items)})
        if isinstance(block, NumberedList):
            return block.model_copy(update={"items": self._resolve_items(block.items)})
        if isinstance(block, TaskList):
            return block.model_copy(update={"items": self._resolve_items(block.items)})
        if isinstance(block, (CodeBlock, Paragraph, Heading, Table, ThematicBreak)):
            return block
        raise TypeError(f"Unknown block node type: {type(block).__name__}")

    def _resolve_items(self, items: list) -> list:
        resolved = []
        for item in items:
            if isinstance(item, TaskListItem):
                resolved.append(TaskListItem(
                    is_completed=item.is_completed,
                    children=self.resolve(item.children),
                ))
            else:
                resolved.append(ListItem(children=self.resolve(item.children)))
        return resolved


def interpret_html(html: str) -> BlockNode:
    """Convenience function to interpret one HTML block."""
    return HTMLBlockInterpreter().interpret(html)
