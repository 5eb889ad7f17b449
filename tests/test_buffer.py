"""
Styled buffer tests - bindings, runs and range re-anchoring

Tests the StyledBuffer contract every element relies on: attribute
bindings stay valid offsets while text is replaced underneath them.
"""

import pytest

from markstyle.lib.buffer import StyledBuffer, Span


class TestAttributes:
    """Test binding and reading attributes"""

    def test_empty_buffer(self):
        """Empty buffer has no text and no bindings"""
        buffer = StyledBuffer()
        assert buffer.text == ""
        assert len(buffer) == 0
        assert buffer.spans == ()
        assert list(buffer.runs()) == []

    def test_later_binding_overrides_only_its_keys(self):
        """Overlapping bindings merge in insertion order"""
        buffer = StyledBuffer("abcdef")
        buffer.attributes_add(0, 6, {"color": "black", "size": 12})
        buffer.attributes_add(2, 4, {"color": "red"})

        assert buffer.attributes_at(0) == {"color": "black", "size": 12}
        assert buffer.attributes_at(2) == {"color": "red", "size": 12}
        assert buffer.attributes_at(4) == {"color": "black", "size": 12}

    def test_empty_range_ignored(self):
        """Zero-length and empty bindings are not stored"""
        buffer = StyledBuffer("abc")
        buffer.attributes_add(1, 1, {"x": 1})
        buffer.attributes_add(0, 3, {})
        assert buffer.spans == ()

    def test_range_clamped_to_text(self):
        """Bindings never exceed the text"""
        buffer = StyledBuffer("abc")
        buffer.attributes_add(-5, 10, {"x": 1})
        assert buffer.spans[0].start == 0
        assert buffer.spans[0].end == 3

    def test_constructor_spans(self):
        """Spans passed to the constructor are bound"""
        buffer = StyledBuffer("abc", [Span(1, 2, {"x": 1})])
        assert buffer.attributes_at(1) == {"x": 1}
        assert buffer.attributes_at(0) == {}


class TestRuns:
    """Test splitting into constant-attribute runs"""

    def test_runs_split_on_changes(self):
        """Each run has constant merged attributes"""
        buffer = StyledBuffer("abcdef")
        buffer.attributes_add(0, 6, {"c": 1})
        buffer.attributes_add(2, 4, {"b": True})

        assert list(buffer.runs()) == [
            (0, 2, {"c": 1}),
            (2, 4, {"c": 1, "b": True}),
            (4, 6, {"c": 1}),
        ]

    def test_identical_neighbours_merged(self):
        """Adjacent spans with equal attributes form one run"""
        buffer = StyledBuffer("abcd")
        buffer.attributes_add(0, 2, {"c": 1})
        buffer.attributes_add(2, 4, {"c": 1})
        assert list(buffer.runs()) == [(0, 4, {"c": 1})]

    def test_runs_window(self):
        """runs(start, end) only covers the window"""
        buffer = StyledBuffer("abcdef")
        buffer.attributes_add(0, 3, {"a": 1})
        assert list(buffer.runs(2, 5)) == [(2, 3, {"a": 1}), (3, 5, {})]


class TestReplace:
    """Test re-anchoring bindings across edits"""

    def test_delete_shifts_following_spans(self):
        """Spans after a deletion shift left"""
        buffer = StyledBuffer("**bold**")
        buffer.attributes_add(2, 6, {"bold": True})
        buffer.delete(6, 8)
        buffer.delete(0, 2)

        assert buffer.text == "bold"
        assert buffer.spans[0].start == 0
        assert buffer.spans[0].end == 4

    def test_delete_drops_covered_span(self):
        """A span entirely inside a deletion disappears"""
        buffer = StyledBuffer("abcdef")
        buffer.attributes_add(2, 4, {"x": 1})
        buffer.delete(1, 5)
        assert buffer.text == "af"
        assert buffer.spans == ()

    def test_covering_span_shrinks(self):
        """A span covering a deletion keeps covering the remainder"""
        buffer = StyledBuffer("abcdef")
        buffer.attributes_add(0, 6, {"x": 1})
        buffer.delete(2, 4)
        assert buffer.text == "abef"
        assert (buffer.spans[0].start, buffer.spans[0].end) == (0, 4)

    def test_same_length_replace_keeps_spans(self):
        """One-for-one replacement leaves bindings where they were"""
        buffer = StyledBuffer("a*b")
        buffer.attributes_add(1, 2, {"x": 1})
        buffer.attributes_add(0, 3, {"y": 2})
        buffer.replace(1, 2, "+")

        assert buffer.text == "a+b"
        assert buffer.attributes_at(1) == {"x": 1, "y": 2}
        assert buffer.attributes_at(2) == {"y": 2}

    def test_replace_growing_text(self):
        """Spans after a growing replacement shift right"""
        buffer = StyledBuffer("- item")
        buffer.attributes_add(2, 6, {"x": 1})
        buffer.replace(0, 1, "10.")

        assert buffer.text == "10. item"
        assert (buffer.spans[0].start, buffer.spans[0].end) == (4, 8)

    def test_insert_at_span_boundary(self):
        """Text inserted at a span start does not join the span"""
        buffer = StyledBuffer("ab")
        buffer.attributes_add(1, 2, {"x": 1})
        buffer.insert(1, "--")

        assert buffer.text == "a--b"
        assert buffer.attributes_at(1) == {}
        assert buffer.attributes_at(3) == {"x": 1}


class TestCopy:
    """Test buffer independence"""

    def test_copy_is_independent(self):
        """Editing a copy leaves the original untouched"""
        original = StyledBuffer("abc")
        original.attributes_add(0, 3, {"x": 1})

        duplicate = original.copy()
        duplicate.delete(0, 1)
        duplicate.attributes_add(0, 1, {"y": 2})

        assert original.text == "abc"
        assert len(original.spans) == 1
        assert original.attributes_at(0) == {"x": 1}

    @pytest.mark.parametrize("text", ["", "plain", "multi\nline"])
    def test_str_and_len(self, text):
        """str() and len() reflect the text"""
        buffer = StyledBuffer(text)
        assert str(buffer) == text
        assert len(buffer) == len(text)


class TestEditSequences:
    """Test bindings across many edits in mixed order"""

    def test_edits_right_then_left(self):
        """Marker removal from the end of a match, then its start, then the next match"""
        buffer = StyledBuffer("[**a**] [**b**]")
        buffer.attributes_add(0, 15, {"base": 1})
        for _ in range(2):
            start = buffer.text.index("[")
            buffer.delete(start + 4, start + 7)
            buffer.attributes_add(start + 3, start + 4, {"bold": True})
            buffer.delete(start, start + 3)

        assert buffer.text == "a b"
        assert buffer.attributes_at(0) == {"base": 1, "bold": True}
        assert buffer.attributes_at(1) == {"base": 1}
        assert buffer.attributes_at(2) == {"base": 1, "bold": True}

    def test_far_edits_keep_offsets(self):
        """Edits at both ends leave bindings in the middle in place"""
        buffer = StyledBuffer("0123456789")
        buffer.attributes_add(4, 6, {"x": 1})
        buffer.delete(8, 10)
        buffer.insert(0, "ab")
        buffer.delete(9, 10)
        buffer.replace(0, 1, "ZZZ")

        assert buffer.text == "ZZZb0123456"
        assert [span.start for span in buffer.spans] == [8]
        assert buffer.text[8:10] == "45"

    def test_copy_after_edits(self):
        """A copy taken mid-edit sees the same bindings"""
        buffer = StyledBuffer("**x** y")
        buffer.attributes_add(2, 3, {"b": True})
        buffer.delete(3, 5)
        duplicate = buffer.copy()
        duplicate.delete(0, 2)

        assert duplicate.text == "x y"
        assert duplicate.attributes_at(0) == {"b": True}
        assert buffer.attributes_at(2) == {"b": True}
