"""
Text styling attributes and the bridge between their two representations.

CompatAttributes is the limited set every platform understands: colours,
kerning, baseline offset, link, tracking, line-style masks and font
properties. NativeAttributes is the richer container of newer platforms;
it holds the same concepts in other forms and carries fields the
compatible set cannot express.

Text styles are written once, against CompatAttributes. bridge() lets
them run on native attributes:

  snapshot native → build compat → apply style → merge into a fresh native

Only fields the style actually changed are written back. Fields that are
unset in the compatible value are left untouched, never cleared, so a
no-op style returns a value equal to its input.
"""

import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

HEX_COLOR_PATTERN = re.compile(r"^#?([0-9a-fA-F]{6})([0-9a-fA-F]{2})?$")


class Color(BaseModel):
    """8-bit RGBA colour used by the compatible attributes."""
    red: int = Field(ge=0, le=255)
    green: int = Field(ge=0, le=255)
    blue: int = Field(ge=0, le=255)
    alpha: int = Field(default=255, ge=0, le=255)

    def to_hex(self) -> str:
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}{self.alpha:02X}"

    @classmethod
    def from_hex(cls, value: str) -> Optional["Color"]:
        """Parse '#RRGGBB' or '#RRGGBBAA'. Returns None for anything else."""
        match = HEX_COLOR_PATTERN.match(value.strip())
        if not match:
            return None
        rgb, alpha = match.group(1), match.group(2) or "FF"
        return cls(
            red=int(rgb[0:2], 16),
            green=int(rgb[2:4], 16),
            blue=int(rgb[4:6], 16),
            alpha=int(alpha, 16),
        )


# --- Line styles ---

class LinePattern(str, Enum):
    SOLID = "solid"
    DOT = "dot"
    DASH = "dash"
    DASH_DOT = "dash_dot"
    DASH_DOT_DOT = "dash_dot_dot"


class TextLineStyle(BaseModel):
    """Native underline/strikethrough: a pattern plus an optional hex colour."""
    pattern: LinePattern = LinePattern.SOLID
    color: Optional[str] = None


# Compatible line styles are a bit mask: a single line plus pattern bits
LINE_STYLE_SINGLE = 0x01
LINE_PATTERN_MASK = 0x700
LINE_PATTERN_BITS = {
    LinePattern.SOLID: 0x000,
    LinePattern.DOT: 0x100,
    LinePattern.DASH: 0x200,
    LinePattern.DASH_DOT: 0x300,
    LinePattern.DASH_DOT_DOT: 0x400,
}


def line_style_mask(pattern: LinePattern) -> int:
    return LINE_STYLE_SINGLE | LINE_PATTERN_BITS[pattern]


def line_pattern_from_mask(mask: int) -> LinePattern:
    bits = mask & LINE_PATTERN_MASK
    for pattern, pattern_bits in LINE_PATTERN_BITS.items():
        if pattern_bits == bits:
            return pattern
    return LinePattern.SOLID


class FontProperties(BaseModel):
    """Font description shared by both representations."""
    family: Optional[str] = None
    size: float = 17.0
    scale: float = 1.0
    weight: int = 400
    italic: bool = False
    monospaced: bool = False

    @property
    def scaled_size(self) -> float:
        return self.size * self.scale


# --- The two attribute representations ---

class NativeAttributes(BaseModel):
    """Rich attribute container, available above the capability threshold."""
    foreground_color: Optional[str] = None     # '#RRGGBBAA'
    background_color: Optional[str] = None
    kern: Optional[float] = None
    baseline_offset: Optional[float] = None
    link: Optional[str] = None
    tracking: Optional[float] = None
    underline_style: Optional[TextLineStyle] = None
    strikethrough_style: Optional[TextLineStyle] = None
    font_properties: Optional[FontProperties] = None
    # Not representable in CompatAttributes; bridging never touches these
    font_name: Optional[str] = None
    language_identifier: Optional[str] = None


class CompatAttributes(BaseModel):
    """Limited attribute set understood on every platform."""
    foreground_color: Optional[Color] = None
    background_color: Optional[Color] = None
    kern: Optional[float] = None
    baseline_offset: Optional[float] = None
    link: Optional[str] = None
    tracking: Optional[float] = None
    underline_style: Optional[int] = None
    strikethrough_style: Optional[int] = None
    font_properties: Optional[FontProperties] = None

    @classmethod
    def from_native(cls, native: NativeAttributes) -> "CompatAttributes":
        """Copy the overlapping subset out of a native container."""
        values = {}
        for name, (to_compat, _) in BRIDGED_FIELDS.items():
            value = getattr(native, name)
            if value is not None:
                values[name] = to_compat(value)
        return cls(**values)


def _same(value):
    return value


def _copy_model(value):
    return value.model_copy(deep=True)


def _line_style_to_native(mask: int, original: Optional[TextLineStyle]) -> TextLineStyle:
    # The mask has no colour; keep the one the native value already had
    color = original.color if original is not None else None
    return TextLineStyle(pattern=line_pattern_from_mask(mask), color=color)


# field name → (native → compat, (compat, original native) → native)
BRIDGED_FIELDS = {
    "foreground_color": (Color.from_hex, lambda value, _: value.to_hex()),
    "background_color": (Color.from_hex, lambda value, _: value.to_hex()),
    "kern": (_same, lambda value, _: value),
    "baseline_offset": (_same, lambda value, _: value),
    "link": (_same, lambda value, _: value),
    "tracking": (_same, lambda value, _: value),
    "underline_style": (lambda value: line_style_mask(value.pattern), _line_style_to_native),
    "strikethrough_style": (lambda value: line_style_mask(value.pattern), _line_style_to_native),
    "font_properties": (_copy_model, lambda value, _: value.model_copy(deep=True)),
}


# --- Text styles ---

class TextStyle(ABC):
    """A styling transformation expressed on the compatible attributes."""

    @abstractmethod
    def collect_attributes(self, attributes: CompatAttributes) -> None:
        """Update the attributes in place."""
        pass


def _font_properties(attributes: CompatAttributes) -> FontProperties:
    if attributes.font_properties is None:
        attributes.font_properties = FontProperties()
    return attributes.font_properties


class ForegroundColor(TextStyle):
    """Sets the text colour. None leaves the current colour in place."""

    def __init__(self, color: Optional[Color]):
        self.color = color

    def collect_attributes(self, attributes: CompatAttributes) -> None:
        if self.color is not None:
            attributes.foreground_color = self.color


class BackgroundColor(TextStyle):
    """Sets the background colour. None leaves the current colour in place."""

    def __init__(self, color: Optional[Color]):
        self.color = color

    def collect_attributes(self, attributes: CompatAttributes) -> None:
        if self.color is not None:
            attributes.background_color = self.color


class FontSize(TextStyle):
    def __init__(self, size: float):
        self.size = size

    def collect_attributes(self, attributes: CompatAttributes) -> None:
        _font_properties(attributes).size = self.size


class FontWeight(TextStyle):
    def __init__(self, weight: int):
        self.weight = weight

    def collect_attributes(self, attributes: CompatAttributes) -> None:
        _font_properties(attributes).weight = self.weight


class FontFamily(TextStyle):
    def __init__(self, family: str):
        self.family = family

    def collect_attributes(self, attributes: CompatAttributes) -> None:
        _font_properties(attributes).family = self.family


class Underline(TextStyle):
    def __init__(self, pattern: LinePattern = LinePattern.SOLID):
        self.pattern = pattern

    def collect_attributes(self, attributes: CompatAttributes) -> None:
        attributes.underline_style = line_style_mask(self.pattern)


class Strikethrough(TextStyle):
    def __init__(self, pattern: LinePattern = LinePattern.SOLID):
        self.pattern = pattern

    def collect_attributes(self, attributes: CompatAttributes) -> None:
        attributes.strikethrough_style = line_style_mask(self.pattern)


class Kerning(TextStyle):
    def __init__(self, kern: float):
        self.kern = kern

    def collect_attributes(self, attributes: CompatAttributes) -> None:
        attributes.kern = self.kern


class Tracking(TextStyle):
    def __init__(self, tracking: float):
        self.tracking = tracking

    def collect_attributes(self, attributes: CompatAttributes) -> None:
        attributes.tracking = self.tracking


class BaselineOffset(TextStyle):
    def __init__(self, offset: float):
        self.offset = offset

    def collect_attributes(self, attributes: CompatAttributes) -> None:
        attributes.baseline_offset = self.offset


class StyleGroup(TextStyle):
    """Applies several styles in order. An empty group changes nothing."""

    def __init__(self, *styles: TextStyle):
        self.styles = styles

    def collect_attributes(self, attributes: CompatAttributes) -> None:
        for style in self.styles:
            style.collect_attributes(attributes)


# --- Applying styles ---

def apply_style(style: TextStyle, attributes: CompatAttributes) -> CompatAttributes:
    """Apply a style to a copy of compatible attributes."""
    result = attributes.model_copy(deep=True)
    style.collect_attributes(result)
    return result


def bridge(style: TextStyle, native: NativeAttributes) -> NativeAttributes:
    """
    Apply a compatible-attribute style to native attributes.

    Args:
        style: Style written against CompatAttributes
        native: Input attributes; not modified

    Returns:
        A new NativeAttributes with the style's changes merged in
    """
    snapshot = CompatAttributes.from_native(native)
    compat = apply_style(style, snapshot)

    updates = {}
    for name, (_, to_native) in BRIDGED_FIELDS.items():
        value = getattr(compat, name)
        if value is None or value == getattr(snapshot, name):
            continue
        updates[name] = to_native(value, getattr(native, name))

    result = native.model_copy(deep=True)
    for name, value in updates.items():
        setattr(result, name, value)
    return result
