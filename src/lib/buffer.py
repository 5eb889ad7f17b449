"""
Styled text buffer

Text plus attribute bindings over ranges. Elements mutate one buffer in
place during a parse: they bind attributes to ranges and replace text, and
every edit re-anchors the existing bindings so ranges always stay valid
offsets into the current text.

Bindings are kept as contiguous runs covering the whole text, each holding
the merged attributes in effect over it. Run starts to the right of a
movable gap carry one pending shift, so an edit only touches the runs next
to it. Since elements edit the buffer left to right, a whole element pass
moves the gap across the buffer about once.

Example:
    >>> buffer = StyledBuffer("**bold**")
    >>> buffer.attributes_add(2, 6, {"weight": "bold"})
    >>> buffer.delete(6, 8)
    >>> buffer.delete(0, 2)
    >>> buffer.text
    'bold'
    >>> buffer.attributes_at(0)
    {'weight': 'bold'}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple


@dataclass
class Span:
    """
    One attribute binding

    Attributes:
        start: First covered offset (inclusive)
        end: Last covered offset (exclusive)
        attributes: Attribute values bound to the range
    """
    start: int
    end: int
    attributes: Dict[Any, Any] = field(default_factory=dict)


class StyledBuffer:
    """
    Mutable styled text

    Later bindings override earlier ones only for the keys they set, so the
    attributes at any offset are every binding covering it merged in
    insertion order.

    Run attribute dicts are never mutated once stored; binding new
    attributes stores new dicts, so runs (and copies of the buffer) may
    share them.
    """

    def __init__(self, text: str = "", spans: Optional[List[Span]] = None) -> None:
        self._text = text
        # run k covers [start(k), start(k + 1)); the last run ends at len(text)
        self._starts: List[int] = [0] if text else []
        self._attributes: List[Dict[Any, Any]] = [{}] if text else []
        # starts at index >= _gap are stored minus _shift
        self._gap = 0
        self._shift = 0
        for span in spans or []:
            self.attributes_add(span.start, span.end, span.attributes)

    @property
    def text(self) -> str:
        return self._text

    @property
    def spans(self) -> Tuple[Span, ...]:
        """Non-overlapping bindings, one per run that carries attributes"""
        return tuple(
            Span(start, end, attributes)
            for start, end, attributes in self.runs()
            if attributes
        )

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"StyledBuffer({self._text!r}, runs={len(self._starts)})"

    def copy(self) -> "StyledBuffer":
        """Independent copy (text and bindings)"""
        duplicate = StyledBuffer()
        duplicate._text = self._text
        duplicate._starts = [self._start_get(index) for index in range(len(self._starts))]
        duplicate._attributes = list(self._attributes)
        return duplicate

    # Run bookkeeping ----------------------------------------------------

    def _start_get(self, index: int) -> int:
        """Actual start offset of run ``index``"""
        if index >= self._gap:
            return self._starts[index] + self._shift
        return self._starts[index]

    def _gap_move(self, index: int) -> None:
        if self._shift:
            if index > self._gap:
                for k in range(self._gap, index):
                    self._starts[k] += self._shift
            elif index < self._gap:
                for k in range(index, self._gap):
                    self._starts[k] -= self._shift
        self._gap = index

    def _run_find(self, position: int) -> int:
        """Index of the run containing ``position``"""
        low, high = 0, len(self._starts)
        while low < high:
            middle = (low + high) // 2
            if self._start_get(middle) <= position:
                low = middle + 1
            else:
                high = middle
        return low - 1

    def _run_insert(self, index: int, start: int, attributes: Dict[Any, Any]) -> None:
        if index <= self._gap:
            self._starts.insert(index, start)
            self._gap += 1
        else:
            self._starts.insert(index, start - self._shift)
        self._attributes.insert(index, attributes)

    def _run_delete(self, index: int) -> None:
        del self._starts[index]
        del self._attributes[index]
        if index < self._gap:
            self._gap -= 1

    def _boundary_make(self, position: int) -> int:
        """Split runs so one starts at ``position``; returns its index"""
        if position >= len(self._text):
            return len(self._starts)
        index = self._run_find(position)
        if self._start_get(index) == position:
            return index
        self._run_insert(index + 1, position, self._attributes[index])
        return index + 1

    def _runs_coalesce(self, index: int) -> None:
        """Merge run ``index`` into run ``index - 1`` when both carry the same attributes"""
        if 0 < index < len(self._starts) and self._attributes[index - 1] == self._attributes[index]:
            self._run_delete(index)

    # Bindings -----------------------------------------------------------

    def attributes_add(self, start: int, end: int, attributes: Dict[Any, Any]) -> None:
        """
        Bind attributes to [start, end)

        The range is clamped to the text; empty ranges and empty attribute
        sets are ignored.
        """
        start = max(0, start)
        end = min(len(self._text), end)
        if start >= end or not attributes:
            return

        first = self._boundary_make(start)
        last = self._boundary_make(end)
        for index in range(first, last):
            self._attributes[index] = {**self._attributes[index], **attributes}
        self._runs_coalesce(last)
        self._runs_coalesce(first)

    def attributes_at(self, index: int) -> Dict[Any, Any]:
        """Merged attributes in effect at ``index``"""
        if not 0 <= index < len(self._text):
            return {}
        return dict(self._attributes[self._run_find(index)])

    def runs(self, start: int = 0, end: Optional[int] = None) -> Iterator[Tuple[int, int, Dict[Any, Any]]]:
        """
        Yield maximal (start, end, attributes) runs inside [start, end)

        Adjacent runs always differ in their merged attributes. Do not edit
        the buffer while iterating; take a list() first.
        """
        end = len(self._text) if end is None else min(end, len(self._text))
        start = max(0, start)
        if start >= end:
            return

        index = self._run_find(start)
        run_start, run_attributes = start, self._attributes[index]
        for index in range(index + 1, len(self._starts)):
            position = self._start_get(index)
            if position >= end:
                break
            if self._attributes[index] != run_attributes:
                yield run_start, position, dict(run_attributes)
                run_start, run_attributes = position, self._attributes[index]
        yield run_start, end, dict(run_attributes)

    # Editing ------------------------------------------------------------

    def replace(self, start: int, end: int, text: str) -> None:
        """
        Replace [start, end) with ``text`` and re-anchor bindings

        Bindings before the edit are untouched and bindings after it shift by
        the length delta. Bindings inside the replaced range go with it; the
        new text takes the attributes of the first replaced character, or
        for a pure insertion those of the character before it.
        """
        length = len(self._text)
        start = min(max(0, start), length)
        end = min(length, max(start, end))
        if start == end and not text:
            return

        if not self._starts:
            inherited: Dict[Any, Any] = {}
        elif end > start:
            inherited = self._attributes[self._run_find(start)]
        else:
            inherited = self._attributes[self._run_find(max(0, start - 1))]

        index = self._boundary_make(start)
        if end > start:
            last = self._boundary_make(end)
            self._gap_move(last)
            del self._starts[index:last]
            del self._attributes[index:last]
            self._gap = index
            self._shift -= end - start
        else:
            self._gap_move(index)

        if text:
            self._run_insert(index, start, inherited)
            self._shift += len(text)
        self._text = self._text[:start] + text + self._text[end:]

        self._runs_coalesce(index + 1 if text else index)
        self._runs_coalesce(index)

    def delete(self, start: int, end: int) -> None:
        """Delete [start, end)"""
        self.replace(start, end, "")

    def insert(self, index: int, text: str) -> None:
        """Insert ``text`` at ``index``; it takes the attributes of the character before"""
        self.replace(index, index, text)
