"""
markstyle - Lightweight markdown to styled text

Parses headers, lists, quotes, links, emphasis, code spans and bare URLs
into a StyledBuffer: plain text plus style attributes bound to ranges.
"""

__version__ = "1.0.0"

from .buffer import StyledBuffer, Span
from .element import MarkdownElement
from .parser import MarkdownParser
from .compiler import Compiler, CompileError
from .theme import Theme, ThemeError
from .log import LOG, state_connectToLogger

__all__ = [
    "StyledBuffer",
    "Span",
    "MarkdownElement",
    "MarkdownParser",
    "Compiler",
    "CompileError",
    "Theme",
    "ThemeError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
