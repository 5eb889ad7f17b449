"""
Markdown parser facade

Turns markdown text into a StyledBuffer by running an ordered list of
elements over one buffer.

The run list is assembled fresh for every parse() call:
1. Escaping: code escaping, backslash escaping
2. Structural: header, list, quote, link, automatic link, bold, italic
3. Custom elements, in the order they were added
4. Unescaping: code, unescaping

Key features:
- Placeholder protection so escaped characters and code never read as markup
- Font variants composed per range (bold inside italic stays both)
- Automatic link detection toggled per call
- Custom elements registered and removed at runtime

Example:
    >>> parser = MarkdownParser()
    >>> buffer = parser.parse("**Hello** [world](http://example.com)")
    >>> buffer.text
    'Hello world'
    >>> buffer.attributes_at(6)[StyleKey.LINK]
    'http://example.com'
"""

from itertools import count
from typing import List, Optional, Union

from ..models.elements import Element, ElementHandle, ParserConfig
from ..models.style import Font, StyleKey
from .buffer import StyledBuffer
from .element import MarkdownElement
from .elements import (
    AutomaticLinkElement,
    BoldElement,
    CodeElement,
    HeaderElement,
    ItalicElement,
    LinkElement,
    ListElement,
    QuoteElement,
)
from .escaping import CodeEscapingElement, EscapingElement, UnescapingElement, escaping_check
from .log import LOG


class MarkdownParser:
    """
    Parser facade: owns the base style, the built-in elements and the custom
    element list

    Attributes:
        config: ParserConfig (font, color, automatic link flag, custom elements)
        header, list, quote, link, automaticLink, bold, italic, code:
            Built-in element instances; tweak them to restyle output
    """

    def __init__(
        self,
        font: Optional[Font] = None,
        color: Optional[str] = None,
        automaticLinkDetectionEnabled: Optional[bool] = None,
        customElements: Optional[List[Element]] = None,
    ) -> None:
        """
        Initialize parser with its base style

        Args:
            font: Base font (defaults to settings.font_family at settings.font_size)
            color: Base text color (defaults to settings.color)
            automaticLinkDetectionEnabled: Detect bare URLs (defaults to settings)
            customElements: Elements run after the built-ins, in order
        """
        self.config = ParserConfig()
        if font is not None:
            self.config.font = font
        if color is not None:
            self.config.color = color
        if automaticLinkDetectionEnabled is not None:
            self.config.automaticLinkDetectionEnabled = automaticLinkDetectionEnabled

        base = self.config.font
        self.header = HeaderElement(base)
        self.list = ListElement(base)
        self.quote = QuoteElement(base)
        self.link = LinkElement(base)
        self.automaticLink = AutomaticLinkElement(base)
        self.bold = BoldElement(base)
        self.italic = ItalicElement(base)
        self.code = CodeElement(base)

        self.codeEscaping = CodeEscapingElement(base)
        self.escaping = EscapingElement(base)
        self.unescaping = UnescapingElement(base)

        self.escapingElements: List[Element] = [self.codeEscaping, self.escaping]
        self.defaultElements: List[Element] = [
            self.header,
            self.list,
            self.quote,
            self.link,
            self.automaticLink,
            self.bold,
            self.italic,
        ]
        self.unescapingElements: List[Element] = [self.code, self.unescaping]

        # one handle per config.customElements entry, same order
        self._handles: List[ElementHandle] = []
        self._handle_tokens = count(1)
        for element in customElements or []:
            self.customElement_add(element)

    # Configuration -------------------------------------------------------

    @property
    def font(self) -> Font:
        return self.config.font

    @font.setter
    def font(self, font: Font) -> None:
        self.config.font = font

    @property
    def color(self) -> str:
        return self.config.color

    @color.setter
    def color(self, color: str) -> None:
        self.config.color = color

    @property
    def automaticLinkDetectionEnabled(self) -> bool:
        return self.config.automaticLinkDetectionEnabled

    @automaticLinkDetectionEnabled.setter
    def automaticLinkDetectionEnabled(self, enabled: bool) -> None:
        self.config.automaticLinkDetectionEnabled = enabled

    @property
    def customElements(self) -> List[Element]:
        return list(self.config.customElements)

    def baseStyle_update(self, font: Font, color: Optional[str] = None) -> None:
        """
        Change the base font (and optionally color) for later parse() calls

        Every built-in element re-derives the font it styles with (bold,
        italic, monospace, header sizes) from the new base font. Buffers
        already returned are not affected.
        """
        self.config.font = font
        for element in self.builtins_list():
            element.font = font
        if color is not None:
            self.config.color = color
        LOG(f"Base style updated: {font} / {self.config.color}", level=2)

    def builtins_list(self) -> List[MarkdownElement]:
        """Every built-in element instance"""
        return [
            self.header,
            self.list,
            self.quote,
            self.link,
            self.automaticLink,
            self.bold,
            self.italic,
            self.code,
        ]

    # Element extensibility ----------------------------------------------

    def customElement_add(self, element: Element) -> ElementHandle:
        """
        Append a custom element; it runs after the built-ins

        Returns:
            Handle that customElement_remove() accepts instead of the element
        """
        self.config.customElements.append(element)
        handle = ElementHandle(next(self._handle_tokens))
        self._handles.append(handle)
        LOG(f"Custom element added: {element!r}", level=2)
        return handle

    def customElement_remove(self, element: Union[Element, ElementHandle]) -> None:
        """
        Remove one registration of a custom element

        A handle removes exactly the registration it was issued for. An
        element removes its first registration. No-op when nothing matches.
        """
        if isinstance(element, ElementHandle):
            index = self._handles.index(element) if element in self._handles else None
        else:
            index = self.config.customElement_indexOf(element)
        if index is None:
            return

        target = self.config.customElements.pop(index)
        del self._handles[index]
        LOG(f"Custom element removed: {target!r}", level=2)

    # Parsing ------------------------------------------------------------

    def elements_assemble(self, config: ParserConfig) -> List[Element]:
        """Ordered run list for one parse() call"""
        elements: List[Element] = list(self.escapingElements)
        elements.extend(self.defaultElements)
        elements.extend(config.customElements)
        elements.extend(self.unescapingElements)
        return elements

    def parse(self, markdown: Union[str, StyledBuffer]) -> StyledBuffer:
        """
        Parse markdown into a new StyledBuffer

        Args:
            markdown: Plain text, or a pre-styled buffer whose bindings are
                      kept under the parsed styling (it is copied, never mutated)

        Returns:
            Fresh buffer with markup stripped and styling bound
        """
        config = self.config.copy()

        if isinstance(markdown, StyledBuffer):
            buffer = markdown.copy()
        else:
            buffer = StyledBuffer(markdown)

        collision = escaping_check(buffer.text)
        if collision is not None:
            LOG(f"Input holds a reserved placeholder character at offset {collision}", level=1)

        buffer.attributes_add(0, len(buffer), {StyleKey.FONT: config.font, StyleKey.COLOR: config.color})

        elements = self.elements_assemble(config)
        LOG(f"Parsing {len(buffer)} characters with {len(elements)} elements", level=2)
        for element in elements:
            if isinstance(element, AutomaticLinkElement) and not config.automaticLinkDetectionEnabled:
                LOG("Automatic link detection disabled, skipping", level=3)
                continue
            element.apply(buffer)

        return buffer
