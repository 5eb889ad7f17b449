r"""
Escaping and unescaping stage

Protects literal syntax characters from the structural elements.

Before anything else runs:
- CodeEscapingElement turns every code span into
  CODE_OPEN (or FENCE_OPEN) + protected content + CODE_CLOSE, where every
  ASCII punctuation character of the content is swapped for its literal
  placeholder.
- EscapingElement turns ``\*`` (any backslash + ASCII punctuation) into the
  literal placeholder for ``*``.

Placeholders are drawn from a private-use block (settings.placeholder_base),
so no structural element can mistake them for markup. At the very end,
CodeElement consumes the code delimiters and UnescapingElement turns every
remaining placeholder back into the character it stands for.

Example:
    Input:  r"\*not italic\* and `a*b`"
    After escaping:  "\U000F002Anot italic\U000F002A and \U000F0080a\U000F002Ab\U000F0081"
    After unescaping (and CodeElement): "*not italic* and a*b"
"""

import re
import string
from typing import Optional

from ..config import appsettings
from ..models.elements import MatchSpec
from .buffer import StyledBuffer
from .element import MarkdownElement

PLACEHOLDER_BASE: int = appsettings.placeholder_base
CODE_OPEN: str = chr(PLACEHOLDER_BASE + 0x80)
CODE_CLOSE: str = chr(PLACEHOLDER_BASE + 0x81)
FENCE_OPEN: str = chr(PLACEHOLDER_BASE + 0x82)

ESCAPABLE: str = string.punctuation
FENCE_MIN_TICKS = 3

_PLACEHOLDER_CLASS = f"[{re.escape(chr(PLACEHOLDER_BASE))}-{re.escape(FENCE_OPEN)}]"


def placeholder_restore(char: str) -> str:
    """Literal text a single placeholder character stands for"""
    literal = appsettings.literal_extract(char)
    if literal is not None:
        return literal
    if char == FENCE_OPEN:
        return "`" * FENCE_MIN_TICKS
    if char in (CODE_OPEN, CODE_CLOSE):
        return "`"
    return char


def placeholders_restore(text: str) -> str:
    """Restore every placeholder in a plain string (e.g. a link URL)"""
    return re.sub(_PLACEHOLDER_CLASS, lambda match: placeholder_restore(match.group(0)), text)


class CodeEscapingElement(MarkdownElement):
    """
    Protect raw code spans before structural matching

    A code span opens with a run of backticks and closes with a run of the
    same length. Backticks preceded by a backslash never open a span.
    """

    spec = MatchSpec(
        pattern=re.compile(r"(?<![\\`])(?P<open>`+)(?!`)(?P<content>.+?)(?<!`)(?P<close>(?P=open))(?!`)", re.DOTALL),
        markers=("open", "close"),
    )

    def match_apply(self, buffer: StyledBuffer, match: re.Match) -> None:
        content = match.group("content")
        fenced = len(match.group("open")) >= FENCE_MIN_TICKS and "\n" in content

        buffer.replace(match.start("close"), match.end("close"), CODE_CLOSE)
        # same-length swaps keep every binding in place
        for offset, char in enumerate(content):
            if char in ESCAPABLE:
                index = match.start("content") + offset
                buffer.replace(index, index + 1, appsettings.placeHolder_make(char))
        buffer.replace(match.start("open"), match.end("open"), FENCE_OPEN if fenced else CODE_OPEN)


class EscapingElement(MarkdownElement):
    r"""Turn ``\<punctuation>`` into one literal placeholder"""

    spec = MatchSpec(
        pattern=re.compile(r"\\(?P<content>[" + re.escape(ESCAPABLE) + r"])"),
    )

    def match_apply(self, buffer: StyledBuffer, match: re.Match) -> None:
        buffer.replace(match.start(), match.end(), appsettings.placeHolder_make(match.group("content")))


class UnescapingElement(MarkdownElement):
    """Restore every remaining placeholder to its literal text"""

    spec = MatchSpec(
        pattern=re.compile(f"(?P<content>{_PLACEHOLDER_CLASS})"),
    )

    def match_apply(self, buffer: StyledBuffer, match: re.Match) -> None:
        buffer.replace(match.start(), match.end(), placeholder_restore(match.group(0)))


def placeholder_is(char: str) -> bool:
    """True when ``char`` is any placeholder of the escaping stage"""
    return len(char) == 1 and PLACEHOLDER_BASE <= ord(char) <= ord(FENCE_OPEN)


def escaping_check(text: str) -> Optional[int]:
    """Offset of the first placeholder in ``text``, or None"""
    for index, char in enumerate(text):
        if placeholder_is(char):
            return index
    return None
