"""
Parser configuration tests - base style, link detection, custom elements

Tests runtime changes to a MarkdownParser and how they affect later
parse() calls (and only later ones).
"""

import re

import pytest

from markstyle.lib.element import MarkdownElement
from markstyle.lib.parser import MarkdownParser
from markstyle.models.elements import ElementHandle, MatchSpec
from markstyle.models.style import Font, FontVariant, StyleKey, derive_variant


class Recorder:
    """Custom element that records the text it sees"""

    def __init__(self):
        self.seen = []

    def apply(self, buffer):
        self.seen.append(buffer.text)


def tagElement_make(text: str) -> MarkdownElement:
    return MarkdownElement(
        spec=MatchSpec(re.compile(f"(?P<content>{re.escape(text)})")),
        attributes={"tag": "custom"},
    )


@pytest.fixture
def parser():
    return MarkdownParser(font=Font("system", 12.0), color="#000000", automaticLinkDetectionEnabled=True)


class TestBaseStyle:
    """Test changing the base font and color"""

    def test_constructor_style(self):
        """Constructor font and color cover the text"""
        parser = MarkdownParser(font=Font("Georgia", 16.0), color="#333333")
        attributes = parser.parse("x").attributes_at(0)
        assert attributes[StyleKey.FONT] == Font("Georgia", 16.0)
        assert attributes[StyleKey.COLOR] == "#333333"

    def test_update_rederives_element_fonts(self, parser):
        """Bold output follows the new base font"""
        parser.baseStyle_update(Font("Georgia", 16.0), "#333333")
        buffer = parser.parse("**b**")

        assert buffer.attributes_at(0)[StyleKey.FONT] == Font("Georgia", 16.0, bold=True)
        assert buffer.attributes_at(0)[StyleKey.COLOR] == "#333333"
        assert parser.bold.font == derive_variant(Font("Georgia", 16.0), FontVariant.BOLD)
        assert parser.header.levelFont_get(1) == Font("Georgia", 28.0, bold=True)

    def test_update_keeps_color_when_omitted(self, parser):
        """Color is optional in baseStyle_update"""
        parser.baseStyle_update(Font("Georgia", 16.0))
        assert parser.color == "#000000"

    def test_earlier_buffers_unaffected(self, parser):
        """Buffers already returned keep their style"""
        before = parser.parse("text")
        parser.baseStyle_update(Font("Georgia", 16.0), "#333333")

        assert before.attributes_at(0)[StyleKey.FONT] == Font("system", 12.0)
        assert before.attributes_at(0)[StyleKey.COLOR] == "#000000"


class TestAutomaticLinkToggle:
    """Test enabling and disabling bare URL detection"""

    def test_toggle_between_calls(self, parser):
        """The flag read at the start of each call decides"""
        parser.automaticLinkDetectionEnabled = False
        disabled = parser.parse("see http://example.com")
        parser.automaticLinkDetectionEnabled = True
        enabled = parser.parse("see http://example.com")

        assert StyleKey.LINK not in disabled.attributes_at(4)
        assert enabled.attributes_at(4)[StyleKey.LINK] == "http://example.com"

    def test_explicit_links_when_disabled(self):
        """Disabling detection leaves [text](url) links alone"""
        parser = MarkdownParser(automaticLinkDetectionEnabled=False)
        buffer = parser.parse("[go](http://x)")
        assert buffer.attributes_at(0)[StyleKey.LINK] == "http://x"


class TestCustomElements:
    """Test registering and removing custom elements"""

    def test_custom_runs_after_builtins(self, parser):
        """Custom elements see markers already stripped"""
        element = tagElement_make("foo bar")
        parser.customElement_add(element)
        buffer = parser.parse("**foo** bar")

        assert buffer.text == "foo bar"
        assert buffer.attributes_at(0)["tag"] == "custom"
        assert buffer.attributes_at(0)[StyleKey.FONT].bold

    def test_custom_runs_before_unescaping(self, parser):
        """Escaped characters are still protected when custom elements run"""
        recorder = Recorder()
        parser.customElement_add(recorder)
        buffer = parser.parse(r"**foo** bar \*")

        assert len(recorder.seen) == 1
        assert recorder.seen[0].startswith("foo bar ")
        assert "*" not in recorder.seen[0]
        assert buffer.text == "foo bar *"

    def test_custom_elements_in_order(self, parser):
        """Custom elements run in registration order"""
        calls = []

        class Named:
            def __init__(self, name):
                self.name = name

            def apply(self, buffer):
                calls.append(self.name)

        parser.customElement_add(Named("first"))
        parser.customElement_add(Named("second"))
        parser.parse("x")
        assert calls == ["first", "second"]

    def test_remove_by_identity(self, parser):
        """A removed element no longer runs"""
        recorder = Recorder()
        parser.customElement_add(recorder)
        parser.customElement_remove(recorder)
        parser.parse("x")

        assert recorder.seen == []
        assert parser.customElements == []

    def test_remove_by_handle(self, parser):
        """Handles remove the element they were issued for"""
        recorder = Recorder()
        other = Recorder()
        handle = parser.customElement_add(recorder)
        parser.customElement_add(other)
        parser.customElement_remove(handle)
        parser.parse("x")

        assert isinstance(handle, ElementHandle)
        assert recorder.seen == []
        assert other.seen == ["x"]

    def test_remove_unknown_is_noop(self, parser):
        """Removing an unregistered element does nothing"""
        parser.customElement_add(Recorder())
        parser.customElement_remove(Recorder())
        parser.customElement_remove(ElementHandle(999))
        assert len(parser.customElements) == 1

    def test_same_element_twice_removed_by_each_handle(self, parser):
        """Each handle removes one registration of a twice-added element"""
        recorder = Recorder()
        first = parser.customElement_add(recorder)
        second = parser.customElement_add(recorder)

        parser.customElement_remove(second)
        assert parser.customElements == [recorder]
        parser.parse("x")
        assert recorder.seen == ["x"]

        parser.customElement_remove(first)
        assert parser.customElements == []
        parser.customElement_remove(first)
        assert parser.customElements == []

    def test_handle_removes_its_own_position(self, parser):
        """A handle for a later registration leaves earlier ones in place"""
        recorder = Recorder()
        other = Recorder()
        parser.customElement_add(recorder)
        parser.customElement_add(other)
        handle = parser.customElement_add(recorder)
        parser.customElement_remove(handle)

        remaining = parser.customElements
        assert len(remaining) == 2
        assert remaining[0] is recorder
        assert remaining[1] is other

    def test_constructor_custom_elements(self):
        """Elements passed to the constructor are registered"""
        recorder = Recorder()
        MarkdownParser(customElements=[recorder]).parse("x")
        assert recorder.seen == ["x"]

    def test_registration_during_parse_applies_next_call(self, parser):
        """The element list is snapshotted at the start of each call"""
        late = Recorder()

        class Registrar:
            def apply(self, buffer):
                parser.customElement_add(late)

        parser.customElement_add(Registrar())
        parser.parse("one")
        assert late.seen == []
        parser.parse("two")
        assert late.seen == ["two"]
