"""
Markdown Render

Renders a parsed Markdown block tree, re-expressing raw HTML blocks as
typed nodes and choosing platform-appropriate rendering strategies.
- Interpreter: Sniffer → Extractor → Assembler for HTML blocks
- Router: capability-based choice between equivalent layouts
- Attributes: bridging between compatible and native text attributes

Public API surface:
  Interpreter      — HTMLBlockInterpreter, interpret_html
  Stages           — sniff, TagCategory, Extractor, Assembler
  Routing          — CapabilityRouter, Capability, capability providers
  Text attributes  — CompatAttributes, NativeAttributes, TextStyle, bridge
  Error types      — PatternCompileError, CapabilityConfigError
"""

# --- Interpreter pipeline ---
from .interpreter import HTMLBlockInterpreter, interpret_html
from .sniffer import TagCategory, sniff
from .extractor import Extractor
from .assembler import Assembler

# --- Node tree ---
from .schemas import (
    Alignment, BlockNode, InlineNode, Blockquote, BulletedList, NumberedList,
    TaskList, CodeBlock, HTMLBlock, Paragraph, Heading, Table, TableRow,
    TableCell, ThematicBreak, ListItem, TaskListItem, Text, Image,
)

# --- Rendering strategies ---
from .router import CapabilityRouter
from .capabilities import (
    Capability, CapabilityProvider, StaticCapabilities, PlatformCapabilities,
    capabilities_from_env,
)

# --- Text attributes ---
from .attributes import CompatAttributes, NativeAttributes, TextStyle, bridge

# --- Exceptions (non-fatal; raised and handled inside the package) ---
from .exceptions import MarkdownRenderError, PatternCompileError, CapabilityConfigError

__version__ = "0.1.0"
__all__ = [
    "HTMLBlockInterpreter",
    "interpret_html",
    "TagCategory",
    "sniff",
    "Extractor",
    "Assembler",
    "Alignment",
    "BlockNode",
    "InlineNode",
    "Blockquote",
    "BulletedList",
    "NumberedList",
    "TaskList",
    "CodeBlock",
    "HTMLBlock",
    "Paragraph",
    "Heading",
    "Table",
    "TableRow",
    "TableCell",
    "ThematicBreak",
    "ListItem",
    "TaskListItem",
    "Text",
    "Image",
    "CapabilityRouter",
    "Capability",
    "CapabilityProvider",
    "StaticCapabilities",
    "PlatformCapabilities",
    "capabilities_from_env",
    "CompatAttributes",
    "NativeAttributes",
    "TextStyle",
    "bridge",
    "MarkdownRenderError",
    "PatternCompileError",
    "CapabilityConfigError",
]
