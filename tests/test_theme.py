"""
Theme tests - loading theme.yaml and configuring parsers
"""

import pytest

from markstyle.lib.parser import MarkdownParser
from markstyle.lib.theme import Theme, ThemeError, theme_validate, themes_listAvailable
from markstyle.models.style import Font, StyleKey


THEME_YAML = """\
font:
  family: Georgia
  size: 16
color: "#333333"
link:
  color: "#0366d6"
code:
  family: Menlo
  background: "#eeeeee"
  pygments_style: friendly
header:
  font_increase: 3
list:
  indicator: "-"
autolink: false
"""


@pytest.fixture
def themes_dir(tmp_path):
    theme_dir = tmp_path / "github"
    theme_dir.mkdir()
    (theme_dir / "theme.yaml").write_text(THEME_YAML, encoding="utf-8")
    return tmp_path


class TestThemeLoading:
    """Test reading theme.yaml"""

    def test_config_get_dot_notation(self, themes_dir):
        """Nested keys resolve with dots"""
        theme = Theme("github", str(themes_dir))
        assert theme.config_get("link.color") == "#0366d6"
        assert theme.config_get("link.missing", "fallback") == "fallback"
        assert theme.pygmentsStyle_get() == "friendly"

    def test_font_and_color(self, themes_dir):
        """Base font and color come from the theme"""
        theme = Theme("github", str(themes_dir))
        assert theme.font_get() == Font("Georgia", 16.0)
        assert theme.color_get() == "#333333"

    def test_missing_theme(self, tmp_path):
        """Unknown theme names raise ThemeError"""
        with pytest.raises(ThemeError, match="not found"):
            Theme("nope", str(tmp_path))

    def test_missing_yaml(self, tmp_path):
        """A theme directory without theme.yaml raises ThemeError"""
        (tmp_path / "empty").mkdir()
        with pytest.raises(ThemeError, match="missing theme.yaml"):
            Theme("empty", str(tmp_path))

    def test_invalid_yaml(self, tmp_path):
        """Unparseable YAML raises ThemeError"""
        (tmp_path / "broken").mkdir()
        (tmp_path / "broken" / "theme.yaml").write_text("font: [unclosed\n", encoding="utf-8")
        with pytest.raises(ThemeError, match="Failed to parse"):
            Theme("broken", str(tmp_path))

    def test_non_mapping_yaml(self, tmp_path):
        """A YAML list is not a theme"""
        (tmp_path / "listy").mkdir()
        (tmp_path / "listy" / "theme.yaml").write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ThemeError, match="mapping"):
            Theme("listy", str(tmp_path))


class TestParserConfigure:
    """Test applying a theme to a parser"""

    def test_configure(self, themes_dir):
        """Every themed setting reaches the parser"""
        parser = Theme("github", str(themes_dir)).parser_configure(MarkdownParser())

        assert parser.font == Font("Georgia", 16.0)
        assert parser.color == "#333333"
        assert parser.link.color == "#0366d6"
        assert parser.automaticLink.color == "#0366d6"
        assert parser.code.font == Font("Menlo", 16.0, monospace=True)
        assert parser.code.background == "#eeeeee"
        assert parser.header.fontIncrease == 3.0
        assert parser.list.indicator == "-"
        assert parser.automaticLinkDetectionEnabled is False

    def test_themed_parse(self, themes_dir):
        """Parsing with a themed parser uses the themed styles"""
        parser = Theme("github", str(themes_dir)).parser_configure(MarkdownParser())
        buffer = parser.parse("# T\n[a](http://x) http://y.com")

        assert buffer.attributes_at(0)[StyleKey.FONT] == Font("Georgia", 34.0, bold=True)
        assert buffer.attributes_at(2)[StyleKey.COLOR] == "#0366d6"
        assert StyleKey.LINK not in buffer.attributes_at(4)


class TestThemeHelpers:
    """Test module-level helpers"""

    def test_list_available(self, themes_dir):
        """Only directories with theme.yaml are listed"""
        (themes_dir / "incomplete").mkdir()
        assert themes_listAvailable(str(themes_dir)) == ["github"]

    def test_list_missing_dir(self, tmp_path):
        """A missing themes directory lists nothing"""
        assert themes_listAvailable(str(tmp_path / "none")) == []

    def test_validate(self, themes_dir):
        """Valid and empty themes are told apart"""
        (themes_dir / "blank").mkdir()
        (themes_dir / "blank" / "theme.yaml").write_text("", encoding="utf-8")

        assert theme_validate("github", str(themes_dir))[0] is True
        assert theme_validate("blank", str(themes_dir))[0] is False
        assert theme_validate("nope", str(themes_dir))[0] is False
