"""
Layout tree emitted by the rendering strategies.

The router picks one of two strategies for tables and for paragraphs.
Their layouts use different primitives (a grid versus nested stacks, an
inline flow versus stacked groups) but every layout exposes
reading_order(), and the two strategies for the same input always agree
on it. A UI toolkit adapter walks these models to build real views.
"""

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, Field

from .schemas import Alignment, Image, InlineNode, render_plain_text


class HorizontalAlignment(str, Enum):
    LEADING = "leading"
    CENTER = "center"
    TRAILING = "trailing"


def horizontal_alignment(alignment: Alignment) -> HorizontalAlignment:
    """Map a column alignment to a frame alignment (none reads as left)."""
    if alignment == Alignment.CENTER:
        return HorizontalAlignment.CENTER
    if alignment == Alignment.RIGHT:
        return HorizontalAlignment.TRAILING
    return HorizontalAlignment.LEADING


class BorderStyle(str, Enum):
    GRID_LINES = "grid_lines"            # Drawn by the grid itself
    DECORATION = "decoration"            # Background and overlay around stacks


# --- Tables ---

class CellBox(BaseModel):
    row: int
    column: int
    alignment: HorizontalAlignment = HorizontalAlignment.LEADING
    content: list[InlineNode] = Field(default_factory=list)


class GridRow(BaseModel):
    cells: list[CellBox] = Field(default_factory=list)


class GridTableLayout(BaseModel):
    """Table laid out on a native grid."""
    kind: Literal["grid_table"] = "grid_table"
    column_count: int
    rows: list[GridRow] = Field(default_factory=list)
    border: BorderStyle = BorderStyle.GRID_LINES

    def reading_order(self) -> list[CellBox]:
        return [cell for row in self.rows for cell in row.cells]


class HorizontalStack(BaseModel):
    """One table row: cells side by side, aligned to the top."""
    spacing: float
    cells: list[CellBox] = Field(default_factory=list)


class StackedTableLayout(BaseModel):
    """Table composed from a vertical stack of horizontal stacks."""
    kind: Literal["stacked_table"] = "stacked_table"
    column_count: int
    spacing: float
    padding: float
    rows: list[HorizontalStack] = Field(default_factory=list)
    border: BorderStyle = BorderStyle.DECORATION

    def reading_order(self) -> list[CellBox]:
        return [cell for row in self.rows for cell in row.cells]


# --- Paragraphs ---

class TextLayout(BaseModel):
    kind: Literal["text"] = "text"
    content: list[InlineNode] = Field(default_factory=list)

    def reading_order(self) -> list:
        return list(self.content)


class ImageLayout(BaseModel):
    kind: Literal["image"] = "image"
    image: Image

    @property
    def alt(self) -> str:
        return render_plain_text(self.image.children)

    def reading_order(self) -> list:
        return [self.image]


class FlowLayout(BaseModel):
    """Images and text runs wrapped inline, like words."""
    kind: Literal["flow"] = "flow"
    items: list[InlineNode] = Field(default_factory=list)

    def reading_order(self) -> list:
        return list(self.items)


class StackedParagraphLayout(BaseModel):
    """Each image on its own line, the text between images kept together."""
    kind: Literal["stacked_paragraph"] = "stacked_paragraph"
    spacing: float
    groups: list[Union[TextLayout, ImageLayout]] = Field(default_factory=list)

    def reading_order(self) -> list:
        return [node for group in self.groups for node in group.reading_order()]
