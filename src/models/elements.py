"""
Element-specific data models

Declarations shared by the element pipeline: what an element matches, the
capability every element exposes, and the parser configuration snapshot.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Tuple, TYPE_CHECKING

from ..config import appsettings
from .style import Font, font_default

if TYPE_CHECKING:
    from ..lib.buffer import StyledBuffer


class Element(Protocol):
    """
    Capability every element (built-in or custom) exposes

    apply() rewrites the buffer in place: it finds every non-overlapping
    match left to right, strips the markers and styles the content.
    """

    def apply(self, buffer: "StyledBuffer") -> None:
        ...


@dataclass(frozen=True)
class MatchSpec:
    """
    What a regex-driven element recognizes

    Attributes:
        pattern: Compiled regular expression searched against buffer text
        content: Name of the group holding the text that survives and gets styled
        markers: Names of groups whose text is deleted from the buffer.
                 Groups that did not participate in a match are ignored.

    Example:
        MatchSpec(
            pattern=re.compile(r"(?P<open>~~)(?P<content>.+?)(?P<close>~~)"),
            content="content",
            markers=("open", "close"),
        )
    """
    pattern: re.Pattern
    content: str = "content"
    markers: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ElementHandle:
    """
    Token returned when a custom element is registered

    Handles compare by value, so a handle can be stored and later passed to
    MarkdownParser.customElement_remove() instead of the element itself.
    """
    token: int


@dataclass
class ParserConfig:
    """
    Mutable parser configuration; each parse() call works on a copy()

    Attributes:
        font: Base font applied to the whole text
        color: Base text color
        automaticLinkDetectionEnabled: Run the automatic link element
        customElements: Caller elements, applied after the built-ins in order
    """
    font: Font = field(default_factory=font_default)
    color: str = field(default_factory=lambda: appsettings.color)
    automaticLinkDetectionEnabled: bool = field(
        default_factory=lambda: appsettings.automatic_link_detection
    )
    customElements: List[Element] = field(default_factory=list)

    def copy(self) -> "ParserConfig":
        """Snapshot with its own custom element list"""
        return ParserConfig(
            font=self.font,
            color=self.color,
            automaticLinkDetectionEnabled=self.automaticLinkDetectionEnabled,
            customElements=list(self.customElements),
        )

    def customElement_indexOf(self, element: Element) -> Optional[int]:
        """Index of the first custom element that *is* ``element``"""
        for index, candidate in enumerate(self.customElements):
            if candidate is element:
                return index
        return None
