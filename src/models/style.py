"""
Style value models

Font descriptors, font variants and the attribute keys that elements bind
to ranges of a StyledBuffer.
"""

from enum import Enum
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from ..config import appsettings


class StyleKey(Enum):
    """
    Attribute keys understood by the compiler

    Elements may bind any hashable key; these are the built-in ones.
    """
    FONT = "font"                  # Font
    COLOR = "color"                # foreground color string
    BACKGROUND = "background"      # background color string
    LINK = "link"                  # target URL
    LINK_TITLE = "link_title"      # optional link title
    INDENT = "indent"              # paragraph indent in points
    HEADER_LEVEL = "header_level"  # 1-6


class FontVariant(Enum):
    """Font variants an element can derive from a base font"""
    REGULAR = "regular"
    BOLD = "bold"
    ITALIC = "italic"
    MONOSPACE = "monospace"


@dataclass(frozen=True)
class Font:
    """
    Immutable font descriptor

    Attributes:
        family: Font family name ("system" for the platform default)
        size: Point size
        bold: Bold weight
        italic: Italic style
        monospace: Fixed-width face (set for code)
    """
    family: str = "system"
    size: float = 12.0
    bold: bool = False
    italic: bool = False
    monospace: bool = False

    def size_scale(self, increase: float) -> "Font":
        """Return a copy of this font enlarged by ``increase`` points"""
        return replace(self, size=self.size + increase)


def font_default() -> Font:
    """Base font built from application settings"""
    return Font(family=appsettings.font_family, size=appsettings.font_size)


def derive_variant(base: Font, variant: FontVariant, monospace_family: Optional[str] = None) -> Font:
    """
    Derive a font variant from a base font.

    Variants compose: deriving BOLD from an italic font gives a bold italic
    font. REGULAR clears every trait but keeps family and size.

    Args:
        base: Font to start from
        variant: Variant to derive
        monospace_family: Family for MONOSPACE (defaults to settings.code_font_family)

    Returns:
        New Font descriptor

    Example:
        >>> derive_variant(Font(), FontVariant.BOLD).bold
        True
    """
    if variant is FontVariant.BOLD:
        return replace(base, bold=True)
    if variant is FontVariant.ITALIC:
        return replace(base, italic=True)
    if variant is FontVariant.MONOSPACE:
        family = monospace_family or appsettings.code_font_family
        return replace(base, family=family, monospace=True)
    return replace(base, bold=False, italic=False, monospace=False)


def font_toDict(font: Font) -> Dict[str, Any]:
    """Plain-dict form of a font (for JSON output)"""
    return {
        "family": font.family,
        "size": font.size,
        "bold": font.bold,
        "italic": font.italic,
        "monospace": font.monospace,
    }
