"""
Custom exceptions for the markdown_render package.

Error philosophy:
  - Interpretation and routing never raise. Every extractor degrades to a
    default structure and the assembler always has a Paragraph fallback.
  - PatternCompileError  → NON-FATAL: the affected category is disabled,
    the error is logged, all other categories keep working.
  - CapabilityConfigError → NON-FATAL: bad platform configuration falls back
    to a provider without enhanced capabilities, a warning is logged.

Both exceptions are raised inside their module and caught at the boundary,
so callers only ever see a degraded result.
"""

from typing import Optional


class MarkdownRenderError(Exception):
    """Base exception for all markdown_render errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- NON-FATAL: disables one extractor category ---

class PatternCompileError(MarkdownRenderError):
    """
    Raised when a category's pattern matcher cannot be built.

    Caught by patterns.get_patterns(), which logs it and disables
    the category so its extractor returns the default structure.
    """

    def __init__(
        self,
        message: str,
        category: str,
        pattern: str,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.category = category
        self.pattern = pattern


# --- NON-FATAL: platform configuration issues ---

class CapabilityConfigError(MarkdownRenderError):
    """Raised when the platform name or version cannot be understood."""

    def __init__(
        self,
        message: str,
        platform: Optional[str] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.platform = platform
