"""
Rendering Capability Router.

Chooses between two behaviourally equivalent rendering strategies for
tables, paragraphs with images, and styled text. The choice depends only
on the injected CapabilityProvider and is re-evaluated on every call;
nothing about a previous render is remembered.

  Table      GRID_LAYOUT        → GridTableLayout     else StackedTableLayout
  Paragraph  FLOW_LAYOUT        → FlowLayout          else StackedParagraphLayout
  Text style NATIVE_ATTRIBUTES  → bridged native attrs else compatible attrs
"""

from typing import Optional, Union

from .schemas import Alignment, Image, Table, TableRow
from .layout import (
    CellBox, GridRow, GridTableLayout, HorizontalStack, StackedTableLayout,
    TextLayout, ImageLayout, FlowLayout, StackedParagraphLayout,
    horizontal_alignment,
)
from .attributes import (
    CompatAttributes, NativeAttributes, TextStyle, apply_style, bridge,
)
from .capabilities import Capability, CapabilityProvider
from .logger import get_module_logger

logger = get_module_logger("router")

DEFAULT_FONT_SIZE = 17.0

# Gap between stacked paragraph groups, relative to the font size
PARAGRAPH_SPACING_RATIO = 0.25

TableLayout = Union[GridTableLayout, StackedTableLayout]
ParagraphLayout = Union[TextLayout, ImageLayout, FlowLayout, StackedParagraphLayout]


class CapabilityRouter:
    """
    Routes nodes to a rendering strategy.

    Args:
        capabilities: The platform capability predicate
        border_width: Table border width, used as spacing by the stacked strategy
    """

    def __init__(self, capabilities: CapabilityProvider, border_width: float = 1.0):
        self.capabilities = capabilities
        self.border_width = border_width

    # --- Tables ---

    def route_table(self, table: Table) -> TableLayout:
        """Lay out a table with the grid strategy if available, stacks otherwise."""
        if self.capabilities.supports(Capability.GRID_LAYOUT):
            logger.debug("Routing table to grid layout")
            return self.grid_table(table.column_alignments, table.rows)
        logger.debug("Routing table to stacked layout")
        return self.stacked_table(table.column_alignments, table.rows)

    def grid_table(self, column_alignments: list[Alignment], rows: list[TableRow]) -> GridTableLayout:
        return GridTableLayout(
            column_count=len(column_alignments),
            rows=[GridRow(cells=cells) for cells in self._cell_boxes(column_alignments, rows)],
        )

    def stacked_table(self, column_alignments: list[Alignment], rows: list[TableRow]) -> StackedTableLayout:
        return StackedTableLayout(
            column_count=len(column_alignments),
            spacing=self.border_width,
            padding=self.border_width,
            rows=[
                HorizontalStack(spacing=self.border_width, cells=cells)
                for cells in self._cell_boxes(column_alignments, rows)
            ],
        )

    def _cell_boxes(self, column_alignments: list[Alignment], rows: list[TableRow]) -> list[list[CellBox]]:
        """
        Row-major cell boxes shared by both table strategies.

        Every cell present is laid out; a row with more cells than columns
        aligns the extra cells to the leading edge.
        """
        boxes = []
        for row_index, row in enumerate(rows):
            row_boxes = []
            for column, cell in enumerate(row.cells):
                alignment = column_alignments[column] if column < len(column_alignments) else Alignment.NONE
                row_boxes.append(CellBox(
                    row=row_index,
                    column=column,
                    alignment=horizontal_alignment(alignment),
                    content=list(cell.content),
                ))
            boxes.append(row_boxes)
        return boxes

    # --- Paragraphs ---

    def compose_paragraph(self, content: list, font_size: Optional[float] = None) -> ParagraphLayout:
        """
        Lay out paragraph inlines.

        A lone image becomes an ImageLayout and text without images a
        TextLayout on every platform. Mixed content flows inline when
        FLOW_LAYOUT is available; otherwise images are split out onto
        their own lines between groups of consecutive text inlines.
        """
        if len(content) == 1 and isinstance(content[0], Image):
            return ImageLayout(image=content[0])

        if not any(isinstance(node, Image) for node in content):
            return TextLayout(content=list(content))

        if self.capabilities.supports(Capability.FLOW_LAYOUT):
            logger.debug("Routing mixed paragraph to flow layout")
            return FlowLayout(items=list(content))

        logger.debug("Routing mixed paragraph to stacked layout")
        size = font_size if font_size is not None else DEFAULT_FONT_SIZE
        return StackedParagraphLayout(
            spacing=size * PARAGRAPH_SPACING_RATIO,
            groups=self._group_inlines(content),
        )

    def _group_inlines(self, content: list) -> list:
        groups = []
        current = []
        for node in content:
            if isinstance(node, Image):
                if current:
                    groups.append(TextLayout(content=current))
                    current = []
                groups.append(ImageLayout(image=node))
            else:
                current.append(node)
        if current:
            groups.append(TextLayout(content=current))
        return groups

    # --- Styled text ---

    def style_text(
        self,
        style: TextStyle,
        attributes: NativeAttributes
    ) -> Union[NativeAttributes, CompatAttributes]:
        """
        Apply a text style in the best representation the platform has.

        Returns bridged NativeAttributes when NATIVE_ATTRIBUTES is supported,
        otherwise CompatAttributes built from the overlapping fields.
        """
        if self.capabilities.supports(Capability.NATIVE_ATTRIBUTES):
            return bridge(style, attributes)
        return apply_style(style, CompatAttributes.from_native(attributes))
