"""
Models package for markstyle

Contains data structures and type definitions for the parsing pipeline.
"""

from .state import ProgramState, pipeline
from .style import Font, FontVariant, StyleKey, derive_variant, font_default
from .elements import Element, ElementHandle, MatchSpec, ParserConfig

__all__ = [
    "ProgramState",
    "pipeline",
    "Font",
    "FontVariant",
    "StyleKey",
    "derive_variant",
    "font_default",
    "Element",
    "ElementHandle",
    "MatchSpec",
    "ParserConfig",
]
