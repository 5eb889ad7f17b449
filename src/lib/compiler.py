"""
Compiler for styled buffers

Turns a parsed StyledBuffer into an output document:
- html: inline-styled <span> runs (links as <a>), whitespace preserved
- json: list of {"text", "attributes"} runs
- text: the bare text

Example:
    >>> buffer = MarkdownParser().parse("**hi**")
    >>> Compiler(buffer).compile("text")
    'hi'
"""

import html
import json
from typing import Any, Callable, Dict, List

from ..models.style import Font, StyleKey, font_toDict
from .buffer import StyledBuffer
from .log import LOG


class CompileError(ValueError):
    """Raised when an output format is not supported"""
    pass


class Compiler:
    """
    Compiles a StyledBuffer to html, json or text

    Responsibilities:
    - Split the buffer into constant-attribute runs
    - Translate attributes to CSS / JSON values
    - Dispatch on the requested format
    """

    def __init__(self, buffer: StyledBuffer) -> None:
        self.buffer = buffer
        self.formats: Dict[str, Callable[[], str]] = {
            "html": self.html_compile,
            "json": self.json_compile,
            "text": self.text_compile,
        }

    def compile(self, output_format: str = "html") -> str:
        """
        Compile the buffer to ``output_format``

        Raises:
            CompileError: If the format is unknown
        """
        handler = self.formats.get(output_format)
        if handler is None:
            raise CompileError(
                f"Unknown output format '{output_format}' (expected one of: {', '.join(self.formats)})"
            )
        LOG(f"Compiling {len(self.buffer)} characters to {output_format}", level=2)
        return handler()

    def text_compile(self) -> str:
        return self.buffer.text

    def json_compile(self) -> str:
        runs: List[Dict[str, Any]] = []
        for start, end, attributes in self.buffer.runs():
            runs.append({
                "text": self.buffer.text[start:end],
                "attributes": {
                    self.key_name(key): self.value_toJson(value)
                    for key, value in attributes.items()
                },
            })
        return json.dumps(runs, indent=2, ensure_ascii=False)

    def html_compile(self) -> str:
        parts: List[str] = []
        for start, end, attributes in self.buffer.runs():
            text = html.escape(self.buffer.text[start:end]).replace("\n", "<br>\n")
            css = self.css_generate(attributes)
            fragment = f'<span style="{css}">{text}</span>' if css else text

            link = attributes.get(StyleKey.LINK)
            if link:
                title = attributes.get(StyleKey.LINK_TITLE)
                title_attr = f' title="{html.escape(title, quote=True)}"' if title else ""
                fragment = f'<a href="{html.escape(link, quote=True)}"{title_attr}>{fragment}</a>'
            parts.append(fragment)

        return f'<div style="white-space: pre-wrap;">{"".join(parts)}</div>\n'

    def css_generate(self, attributes: Dict[Any, Any]) -> str:
        """Inline CSS for one run"""
        rules: List[str] = []
        font = attributes.get(StyleKey.FONT)
        if isinstance(font, Font):
            if font.family != "system":
                rules.append(f"font-family: {font.family}")
            rules.append(f"font-size: {font.size:g}pt")
            if font.bold:
                rules.append("font-weight: bold")
            if font.italic:
                rules.append("font-style: italic")
        if attributes.get(StyleKey.COLOR):
            rules.append(f"color: {attributes[StyleKey.COLOR]}")
        if attributes.get(StyleKey.BACKGROUND):
            rules.append(f"background-color: {attributes[StyleKey.BACKGROUND]}")
        if attributes.get(StyleKey.INDENT):
            rules.append(f"padding-left: {attributes[StyleKey.INDENT]:g}pt")
        return html.escape("; ".join(rules), quote=True)

    @staticmethod
    def key_name(key: Any) -> str:
        return key.value if isinstance(key, StyleKey) else str(key)

    @staticmethod
    def value_toJson(value: Any) -> Any:
        if isinstance(value, Font):
            return font_toDict(value)
        if isinstance(value, (str, int, float, bool)) or value is None:
            return value
        return str(value)
