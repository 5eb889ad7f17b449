"""
Regex-driven element base

Every built-in element is a MarkdownElement: it owns a MatchSpec and
rewrites the buffer once per match, scanning strictly left to right.

The per-match rewrite is:
1. delete the markers that follow the content (highest offset first)
2. style the content range
3. delete the markers that precede the content (highest offset first)

Working from the end of the match towards its start keeps every offset of
the original match valid until it is used. After the rewrite, scanning
resumes right after the rewritten text, so stripped syntax can never be
matched twice.

Example:
    >>> strike = MarkdownElement(
    ...     Font(),
    ...     spec=MatchSpec(re.compile(r"(?P<open>~~)(?P<content>.+?)(?P<close>~~)"),
    ...                    markers=("open", "close")),
    ...     attributes={"strike": True},
    ... )
    >>> buffer = StyledBuffer("a ~~b~~ c")
    >>> strike.apply(buffer)
    >>> buffer.text
    'a b c'
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from ..models.elements import MatchSpec
from ..models.style import Font, FontVariant, StyleKey, derive_variant, font_default
from .buffer import StyledBuffer
from .log import LOG


class MarkdownElement:
    """
    Base class for elements that match a regular expression

    Subclasses set ``spec`` (and optionally ``variant``) as class attributes
    and override attributes_get() or match_apply() when a match needs more
    than "strip markers, style content".

    Attributes:
        spec: What this element matches
        variant: Font variant applied (composed) to the content, or None
        color: Foreground color applied to the content, or None
        attributes: Extra attributes bound to the content of every match
    """

    spec: Optional[MatchSpec] = None
    variant: Optional[FontVariant] = None

    def __init__(
        self,
        font: Optional[Font] = None,
        color: Optional[str] = None,
        spec: Optional[MatchSpec] = None,
        attributes: Optional[Dict[Any, Any]] = None,
    ) -> None:
        self.font = font if font is not None else font_default()
        self.color = color
        if spec is not None:
            self.spec = spec
        self.attributes: Dict[Any, Any] = dict(attributes or {})

    @property
    def font(self) -> Font:
        """Font this element styles with, derived from the base font"""
        return self._font

    @font.setter
    def font(self, base: Font) -> None:
        self._base_font = base
        self._font = self.font_derive(base)

    @property
    def baseFont(self) -> Font:
        return self._base_font

    def font_derive(self, base: Font) -> Font:
        """Font for content whose current font is ``base``"""
        if self.variant is None:
            return base
        return derive_variant(base, self.variant)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def apply(self, buffer: StyledBuffer) -> None:
        """Rewrite every match of ``spec`` in ``buffer``, left to right"""
        if self.spec is None:
            return

        pattern = self.spec.pattern
        position = 0
        count = 0
        while position <= len(buffer):
            match = pattern.search(buffer.text, position)
            if match is None:
                break
            length_before = len(buffer)
            self.match_apply(buffer, match)
            delta = len(buffer) - length_before
            position = match.end() + delta
            if delta >= 0 and position <= match.start():
                # zero-width match that grew nothing
                position = match.start() + 1
            count += 1

        LOG(f"{self!r}: {count} match(es)", level=3)

    def markers_split(self, match: re.Match) -> Tuple[List[Tuple[int, int]], List[Tuple[int, int]]]:
        """
        Marker ranges of a match, split around the content group

        Returns:
            (trailing, leading), each sorted from highest to lowest offset
        """
        if self.spec is None:
            return [], []
        content_end = match.end(self.spec.content)
        trailing: List[Tuple[int, int]] = []
        leading: List[Tuple[int, int]] = []
        for name in self.spec.markers:
            start, end = match.span(name)
            if start < 0 or start == end:
                continue
            if start >= content_end:
                trailing.append((start, end))
            else:
                leading.append((start, end))
        trailing.sort(reverse=True)
        leading.sort(reverse=True)
        return trailing, leading

    def match_apply(self, buffer: StyledBuffer, match: re.Match) -> None:
        """Strip the markers of one match and style its content"""
        if self.spec is None:
            return
        trailing, leading = self.markers_split(match)

        for start, end in trailing:
            buffer.delete(start, end)

        content_start, content_end = match.span(self.spec.content)
        self.content_style(buffer, content_start, content_end, match)

        for start, end in leading:
            buffer.delete(start, end)

    def content_style(self, buffer: StyledBuffer, start: int, end: int, match: re.Match) -> None:
        """Apply this element's font variant and attributes to [start, end)"""
        if self.variant is not None:
            self.font_apply(buffer, start, end)
        attributes = self.attributes_get(match)
        if attributes:
            buffer.attributes_add(start, end, attributes)

    def font_apply(self, buffer: StyledBuffer, start: int, end: int) -> None:
        """Compose this element's variant with the font of every run in range"""
        for run_start, run_end, run_attributes in list(buffer.runs(start, end)):
            current = run_attributes.get(StyleKey.FONT)
            font = self.font if current is None else self.font_derive(current)
            buffer.attributes_add(run_start, run_end, {StyleKey.FONT: font})

    def attributes_get(self, match: re.Match) -> Dict[Any, Any]:
        """Attributes (besides font) bound to the content of ``match``"""
        attributes: Dict[Any, Any] = dict(self.attributes)
        if self.color is not None:
            attributes[StyleKey.COLOR] = self.color
        return attributes
