"""
Pydantic schemas for the Markdown node tree and the stage contracts.

Node tree: the block and inline variants produced by the upstream parser.
The HTML interpreter must emit exactly these variants so that downstream
rendering cannot tell an interpreted block from a natively parsed one.

Stage contracts:
  Sniffer   → TagCategory
  Extractor → TableData / ListData / HeadingData / CodeData / BlockquoteData
  Assembler → BlockNode
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


class Alignment(str, Enum):
    """Column alignment of a table."""
    NONE = "none"
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# --- Inline nodes ---

class Text(BaseModel):
    kind: Literal["text"] = "text"
    text: str


class SoftBreak(BaseModel):
    kind: Literal["soft_break"] = "soft_break"


class LineBreak(BaseModel):
    kind: Literal["line_break"] = "line_break"


class Code(BaseModel):
    kind: Literal["code"] = "code"
    code: str


class Emphasis(BaseModel):
    kind: Literal["emphasis"] = "emphasis"
    children: list["InlineNode"] = Field(default_factory=list)


class Strong(BaseModel):
    kind: Literal["strong"] = "strong"
    children: list["InlineNode"] = Field(default_factory=list)


class Strikethrough(BaseModel):
    kind: Literal["strikethrough"] = "strikethrough"
    children: list["InlineNode"] = Field(default_factory=list)


class Link(BaseModel):
    kind: Literal["link"] = "link"
    destination: str
    children: list["InlineNode"] = Field(default_factory=list)


class Image(BaseModel):
    """An image inline. children hold the alt text."""
    kind: Literal["image"] = "image"
    source: str
    children: list["InlineNode"] = Field(default_factory=list)


InlineNode = Annotated[
    Union[Text, SoftBreak, LineBreak, Code, Emphasis, Strong, Strikethrough, Link, Image],
    Field(discriminator="kind"),
]


# --- Table parts ---

class TableCell(BaseModel):
    content: list[InlineNode] = Field(default_factory=list)


class TableRow(BaseModel):
    # Cell count may differ from the table's column count
    cells: list[TableCell] = Field(default_factory=list)


# --- Block nodes ---

class ListItem(BaseModel):
    children: list["BlockNode"] = Field(default_factory=list)


class TaskListItem(BaseModel):
    is_completed: bool = False
    children: list["BlockNode"] = Field(default_factory=list)


class Blockquote(BaseModel):
    kind: Literal["blockquote"] = "blockquote"
    children: list["BlockNode"] = Field(default_factory=list)


class BulletedList(BaseModel):
    kind: Literal["bulleted_list"] = "bulleted_list"
    tight: bool = True
    items: list[ListItem] = Field(default_factory=list)


class NumberedList(BaseModel):
    kind: Literal["numbered_list"] = "numbered_list"
    tight: bool = True
    start: int = 1
    items: list[ListItem] = Field(default_factory=list)


class TaskList(BaseModel):
    kind: Literal["task_list"] = "task_list"
    tight: bool = True
    items: list[TaskListItem] = Field(default_factory=list)


class CodeBlock(BaseModel):
    kind: Literal["code_block"] = "code_block"
    fence_info: Optional[str] = None
    content: str = ""


class HTMLBlock(BaseModel):
    """Raw markup the upstream parser could not interpret. Input only."""
    kind: Literal["html_block"] = "html_block"
    content: str


class Paragraph(BaseModel):
    kind: Literal["paragraph"] = "paragraph"
    content: list[InlineNode] = Field(default_factory=list)


class Heading(BaseModel):
    kind: Literal["heading"] = "heading"
    level: int = 1
    content: list[InlineNode] = Field(default_factory=list)

    @field_validator("level", mode="before")
    @classmethod
    def clamp_level(cls, value) -> int:
        return max(1, min(int(value), 6))


class Table(BaseModel):
    kind: Literal["table"] = "table"
    column_alignments: list[Alignment] = Field(default_factory=lambda: [Alignment.NONE])
    rows: list[TableRow] = Field(default_factory=list)

    @field_validator("column_alignments")
    @classmethod
    def at_least_one_column(cls, value: list[Alignment]) -> list[Alignment]:
        return value or [Alignment.NONE]


class ThematicBreak(BaseModel):
    kind: Literal["thematic_break"] = "thematic_break"


BlockNode = Annotated[
    Union[
        Blockquote, BulletedList, NumberedList, TaskList, CodeBlock,
        HTMLBlock, Paragraph, Heading, Table, ThematicBreak,
    ],
    Field(discriminator="kind"),
]


# Resolve the recursive "InlineNode" / "BlockNode" references
for _model in (
    Emphasis, Strong, Strikethrough, Link, Image, TableCell, TableRow,
    ListItem, TaskListItem, Blockquote, BulletedList, NumberedList, TaskList,
    Paragraph, Heading, Table,
):
    _model.model_rebuild()


def render_plain_text(content: list) -> str:
    """Flatten inline nodes into plain text (alt text, diagnostics)."""
    parts = []
    for node in content:
        if isinstance(node, Text):
            parts.append(node.text)
        elif isinstance(node, Code):
            parts.append(node.code)
        elif isinstance(node, SoftBreak):
            parts.append(" ")
        elif isinstance(node, LineBreak):
            parts.append("\n")
        elif isinstance(node, (Emphasis, Strong, Strikethrough, Link, Image)):
            parts.append(render_plain_text(node.children))
    return "".join(parts)


# --- Extractor output (Extractor → Assembler contract) ---

class TableData(BaseModel):
    """Rows are raw cell strings; the header row, if any, comes first."""
    alignments: list[Alignment] = Field(default_factory=lambda: [Alignment.NONE])
    rows: list[list[str]] = Field(default_factory=list)


class ListData(BaseModel):
    ordered: bool = False
    start: int = 1
    items: list[str] = Field(default_factory=list)


class HeadingData(BaseModel):
    level: int = 1
    text: str = ""

    @field_validator("level", mode="before")
    @classmethod
    def clamp_level(cls, value) -> int:
        return max(1, min(int(value), 6))


class CodeData(BaseModel):
    content: str = ""


class BlockquoteData(BaseModel):
    text: str = ""
