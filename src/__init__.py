"""
markstyle - Lightweight markdown to styled text

Converts text with lightweight markup into a styled-text buffer: markup
characters are removed and every construct becomes style attributes bound
to the range it covers.
"""

__version__ = "1.0.0"

from .lib import (
    MarkdownParser,
    MarkdownElement,
    StyledBuffer,
    Compiler,
    Theme,
    LOG,
    state_connectToLogger,
)
from .models import Font, FontVariant, StyleKey, MatchSpec, derive_variant

__all__ = [
    "MarkdownParser",
    "MarkdownElement",
    "StyledBuffer",
    "Compiler",
    "Theme",
    "Font",
    "FontVariant",
    "StyleKey",
    "MatchSpec",
    "derive_variant",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
