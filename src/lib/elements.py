"""
Built-in markdown elements

Structural elements (run between the escaping and unescaping stages, in
this order): header, list, quote, link, automatic link, bold, italic.
CodeElement runs in the unescaping stage, right before UnescapingElement.

Each element is a MarkdownElement; most of them only declare a MatchSpec
and the attributes their content receives.
"""

import re
from typing import Any, Dict, Optional

from pygments.lexers import get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from ..config import appsettings
from ..models.elements import MatchSpec
from ..models.style import Font, FontVariant, StyleKey, derive_variant
from .buffer import StyledBuffer
from .element import MarkdownElement
from .escaping import CODE_CLOSE, CODE_OPEN, FENCE_OPEN, placeholders_restore
from .log import LOG


class HeaderElement(MarkdownElement):
    """
    ATX headers: ``# Title`` through ``###### Title``

    The marker run (and an optional closing run of ``#``) is stripped; the
    content gets a bold font enlarged by ``fontIncrease`` points for every
    level above the smallest.
    """

    MAX_LEVEL = 6

    spec = MatchSpec(
        pattern=re.compile(
            r"^(?P<open>(?P<level>#{1,6})[ \t]+)(?=\S)(?P<content>[^\n]*?)(?P<close>[ \t]+#+)?[ \t]*$",
            re.MULTILINE,
        ),
        markers=("open", "close"),
    )

    def __init__(self, font: Optional[Font] = None, color: Optional[str] = None,
                 fontIncrease: Optional[float] = None) -> None:
        self.fontIncrease = appsettings.header_font_increase if fontIncrease is None else fontIncrease
        super().__init__(font, color)

    def font_derive(self, base: Font) -> Font:
        return derive_variant(base, FontVariant.BOLD)

    def levelFont_get(self, level: int) -> Font:
        """Font for a header of ``level`` (1 is the largest)"""
        return self.font.size_scale((self.MAX_LEVEL + 1 - level) * self.fontIncrease)

    def content_style(self, buffer: StyledBuffer, start: int, end: int, match: re.Match) -> None:
        level = len(match.group("level"))
        attributes = self.attributes_get(match)
        attributes[StyleKey.FONT] = self.levelFont_get(level)
        attributes[StyleKey.HEADER_LEVEL] = level
        buffer.attributes_add(start, end, attributes)


class ListElement(MarkdownElement):
    """
    Single-level list items: ``- item``, ``* item``, ``+ item``, ``1. item``

    Bullet markers become ``indicator``; ordered markers are normalized to
    ``N.``. The whole item line is indented.
    """

    spec = MatchSpec(
        pattern=re.compile(
            r"^(?P<indent>[ \t]{0,3})(?P<marker>(?P<bullet>[*+-])|(?P<number>\d{1,9})[.)])"
            r"(?P<space>[ \t]+)(?=\S)(?P<content>[^\n]*)",
            re.MULTILINE,
        ),
        markers=("marker", "space"),
    )

    def __init__(self, font: Optional[Font] = None, color: Optional[str] = None,
                 indicator: Optional[str] = None, indent: Optional[float] = None) -> None:
        super().__init__(font, color)
        self.indicator = appsettings.list_indicator if indicator is None else indicator
        self.indent = appsettings.list_indent if indent is None else indent

    def match_apply(self, buffer: StyledBuffer, match: re.Match) -> None:
        if match.group("bullet"):
            glyph = self.indicator
        else:
            glyph = f"{match.group('number')}."

        content_start, content_end = match.span("content")
        self.content_style(buffer, content_start, content_end, match)

        length_before = len(buffer)
        buffer.replace(match.start("marker"), match.end("space"), f"{glyph} ")
        line_end = match.end() + len(buffer) - length_before
        buffer.attributes_add(match.start(), line_end, {StyleKey.INDENT: self.indent})


class QuoteElement(MarkdownElement):
    """Block quote lines: ``> text`` (``>>`` nests one level deeper)"""

    variant = FontVariant.ITALIC

    spec = MatchSpec(
        pattern=re.compile(r"^(?P<marker>(?P<depth>>+)[ \t]+)(?=\S)(?P<content>[^\n]*)", re.MULTILINE),
        markers=("marker",),
    )

    def __init__(self, font: Optional[Font] = None, color: Optional[str] = None,
                 indent: Optional[float] = None) -> None:
        super().__init__(font, color)
        self.indent = appsettings.quote_indent if indent is None else indent

    def attributes_get(self, match: re.Match) -> Dict[Any, Any]:
        attributes = super().attributes_get(match)
        attributes[StyleKey.INDENT] = len(match.group("depth")) * self.indent
        return attributes


class LinkElement(MarkdownElement):
    """
    Inline links: ``[text](url)`` or ``[text](url "title")``

    Only the text survives. URLs may hold one level of balanced parentheses.
    Image syntax (``![alt](src)``) is left alone.
    """

    spec = MatchSpec(
        pattern=re.compile(
            r'(?<!!)(?P<open>\[)(?P<content>[^\[\]\n]+)'
            r'(?P<close>\]\((?P<url>(?:[^\s()]|\([^\s()]*\))+)(?:[ \t]+"(?P<title>[^"\n]*)")?\))'
        ),
        markers=("open", "close"),
    )

    def __init__(self, font: Optional[Font] = None, color: Optional[str] = None) -> None:
        super().__init__(font, appsettings.link_color if color is None else color)

    def attributes_get(self, match: re.Match) -> Dict[Any, Any]:
        attributes = super().attributes_get(match)
        attributes[StyleKey.LINK] = placeholders_restore(match.group("url"))
        if match.group("title"):
            attributes[StyleKey.LINK_TITLE] = placeholders_restore(match.group("title"))
        return attributes


class AutomaticLinkElement(MarkdownElement):
    """
    Bare URLs (``http://``, ``https://``, ``ftp://``, ``www.``)

    The visible text is left untouched; trailing punctuation is not part of
    the URL. Text that already carries a link keeps it.
    """

    spec = MatchSpec(
        pattern=re.compile(
            r"(?<![\w/@.])(?P<content>(?:(?:https?|ftp)://|www\.)[^\s<>]*[^\s<>.,;:!?'\")\]])",
            re.IGNORECASE,
        ),
    )

    def __init__(self, font: Optional[Font] = None, color: Optional[str] = None) -> None:
        super().__init__(font, appsettings.link_color if color is None else color)

    def content_style(self, buffer: StyledBuffer, start: int, end: int, match: re.Match) -> None:
        if StyleKey.LINK in buffer.attributes_at(start):
            return
        super().content_style(buffer, start, end, match)

    def attributes_get(self, match: re.Match) -> Dict[Any, Any]:
        attributes = super().attributes_get(match)
        url = placeholders_restore(match.group("content"))
        if url.lower().startswith("www."):
            url = f"http://{url}"
        attributes[StyleKey.LINK] = url
        return attributes


class BoldElement(MarkdownElement):
    """``**text**`` and ``__text__`` (the underscore form never intraword)"""

    variant = FontVariant.BOLD

    spec = MatchSpec(
        pattern=re.compile(
            r"(?:(?P<star>\*\*)|(?<![\w_])(?P<under>__))(?=\S)(?P<content>.+?)(?<=\S)"
            r"(?P<close>(?(star)\*\*|__(?![\w_])))"
        ),
        markers=("star", "under", "close"),
    )


class ItalicElement(MarkdownElement):
    """
    ``*text*`` and ``_text_`` (the underscore form never intraword)

    Runs after BoldElement, so double markers are gone by the time this
    element scans.
    """

    variant = FontVariant.ITALIC

    spec = MatchSpec(
        pattern=re.compile(
            r"(?:(?<!\*)(?P<star>\*)(?!\*)|(?<![\w_])(?P<under>_)(?!_))(?=\S)(?P<content>.+?)(?<=\S)"
            r"(?P<close>(?(star)(?<!\*)\*(?!\*)|(?<!_)_(?![\w_])))"
        ),
        markers=("star", "under", "close"),
    )


class CodeElement(MarkdownElement):
    """
    Code spans and fenced code blocks

    Consumes the delimiters left by CodeEscapingElement and, defensively,
    any raw backtick span still in the buffer. The protected content is
    restored, then styled with the monospace variant and a background.
    Fenced blocks whose first line names a language are colored token by
    token with Pygments.
    """

    variant = FontVariant.MONOSPACE

    spec = MatchSpec(
        pattern=re.compile(
            f"(?:(?P<open>[{re.escape(CODE_OPEN)}{re.escape(FENCE_OPEN)}])|(?<![\\\\`])(?P<ticks>`+)(?!`))"
            f"(?P<content>.*?)"
            f"(?P<close>(?(open){re.escape(CODE_CLOSE)}|(?<!`)(?P=ticks)(?!`)))",
            re.DOTALL,
        ),
        markers=("open", "ticks", "close"),
    )

    def __init__(self, font: Optional[Font] = None, color: Optional[str] = None,
                 fontFamily: Optional[str] = None, background: Optional[str] = None,
                 pygmentsStyle: Optional[str] = None) -> None:
        self.fontFamily = appsettings.code_font_family if fontFamily is None else fontFamily
        super().__init__(font, color)
        self.background = appsettings.code_background if background is None else background
        self.pygmentsStyle = appsettings.pygments_style if pygmentsStyle is None else pygmentsStyle

    def font_derive(self, base: Font) -> Font:
        return derive_variant(base, FontVariant.MONOSPACE, self.fontFamily)

    def attributes_get(self, match: re.Match) -> Dict[Any, Any]:
        attributes = super().attributes_get(match)
        if self.background:
            attributes[StyleKey.BACKGROUND] = self.background
        return attributes

    def match_apply(self, buffer: StyledBuffer, match: re.Match) -> None:
        content_start, content_end = match.span("content")

        # placeholders inside the span become literal again, one for one
        for offset, char in enumerate(match.group("content")):
            literal = appsettings.literal_extract(char)
            if literal is not None:
                index = content_start + offset
                buffer.replace(index, index + 1, literal)
        code = buffer.text[content_start:content_end]

        body_start, body_end = content_start, content_end
        language = ""
        if match.group("open") == FENCE_OPEN:
            newline = code.find("\n")
            language = code[:newline].strip()
            body_start = content_start + newline + 1
            if code.endswith("\n") and body_end > body_start:
                body_end -= 1

        buffer.delete(body_end, match.end())
        self.content_style(buffer, body_start, body_end, match)
        if language:
            self.highlight_apply(buffer, body_start, body_end, language)
        buffer.delete(match.start(), body_start)

    def highlight_apply(self, buffer: StyledBuffer, start: int, end: int, language: str) -> None:
        """Color [start, end) with the Pygments lexer for ``language``"""
        try:
            lexer = get_lexer_by_name(language)
        except ClassNotFound:
            LOG(f"No Pygments lexer for '{language}', leaving code uncolored", level=2)
            return
        try:
            style = get_style_by_name(self.pygmentsStyle)
        except ClassNotFound:
            LOG(f"Unknown Pygments style '{self.pygmentsStyle}', using 'default'", level=2)
            style = get_style_by_name("default")

        code = buffer.text[start:end]
        for index, token, value in lexer.get_tokens_unprocessed(code):
            token_start = start + index
            token_end = min(end, token_start + len(value))
            token_style = style.style_for_token(token)
            if token_style["color"]:
                buffer.attributes_add(token_start, token_end, {StyleKey.COLOR: f"#{token_style['color']}"})
            for variant, enabled in ((FontVariant.BOLD, token_style["bold"]),
                                     (FontVariant.ITALIC, token_style["italic"])):
                if not enabled:
                    continue
                for run_start, run_end, attributes in list(buffer.runs(token_start, token_end)):
                    current = attributes.get(StyleKey.FONT, self.font)
                    buffer.attributes_add(run_start, run_end, {StyleKey.FONT: derive_variant(current, variant)})
