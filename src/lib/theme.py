"""
Theme loader for markstyle parsers.

A theme is a directory holding a theme.yaml that overrides the default
styling:

    font:
      family: Helvetica
      size: 14
    color: "#24292e"
    link:
      color: "#0366d6"
    code:
      family: Menlo
      background: "#f6f8fa"
      pygments_style: friendly
    header:
      font_increase: 3
    list:
      indicator: "–"
    autolink: false

Every key is optional; missing keys keep the settings defaults.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, TYPE_CHECKING

from ..config import appsettings
from ..models.style import Font
from .log import LOG

if TYPE_CHECKING:
    from .parser import MarkdownParser


class ThemeError(Exception):
    """Raised when theme loading or validation fails"""
    pass


class Theme:
    """
    Represents a markstyle theme: a named theme.yaml under a themes directory
    """

    def __init__(self, theme_name: str, themes_dir: str = "themes"):
        """
        Load a theme by name.

        Args:
            theme_name: Name of the theme directory (e.g., "default", "github")
            themes_dir: Path to themes directory (default: "themes")

        Raises:
            ThemeError: If theme directory or theme.yaml doesn't exist, or the
                        YAML cannot be parsed
        """
        self.name = theme_name
        self.themes_dir = Path(themes_dir)
        self.theme_dir = self.themes_dir / theme_name

        if not self.theme_dir.exists():
            raise ThemeError(
                f"Theme '{theme_name}' not found. "
                f"Expected directory: {self.theme_dir}"
            )

        self.config_path = self.theme_dir / "theme.yaml"
        if not self.config_path.exists():
            raise ThemeError(
                f"Theme '{theme_name}' missing theme.yaml"
            )

        self.config = self._config_load()

    def _config_load(self) -> Dict[str, Any]:
        """Load and parse theme.yaml"""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ThemeError(f"Failed to parse theme.yaml: {e}") from e
        except OSError as e:
            raise ThemeError(f"Failed to load theme.yaml: {e}") from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ThemeError(f"Theme '{self.name}': theme.yaml must hold a mapping")
        return config

    def config_get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value from theme.yaml.

        Supports nested keys with dot notation:
          theme.config_get('link.color', '#0000EE')
        """
        keys: list[str] = key.split('.')
        value: Any = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def font_get(self) -> Font:
        """Base font described by the theme"""
        try:
            return Font(
                family=str(self.config_get('font.family', appsettings.font_family)),
                size=float(self.config_get('font.size', appsettings.font_size)),
            )
        except (TypeError, ValueError) as e:
            raise ThemeError(f"Theme '{self.name}': invalid font: {e}") from e

    def color_get(self) -> str:
        return str(self.config_get('color', appsettings.color))

    def pygmentsStyle_get(self) -> str:
        """
        Get Pygments style name for fenced code blocks.

        Returns:
            Pygments style name (default: settings.pygments_style)
        """
        return str(self.config_get('code.pygments_style', appsettings.pygments_style))

    def parser_configure(self, parser: "MarkdownParser") -> "MarkdownParser":
        """
        Apply this theme to a parser's base style and built-in elements.

        Returns:
            The same parser, for chaining
        """
        parser.baseStyle_update(self.font_get(), self.color_get())

        link_color = self.config_get('link.color')
        if link_color is not None:
            parser.link.color = str(link_color)
            parser.automaticLink.color = str(link_color)

        code_family = self.config_get('code.family')
        if code_family is not None:
            parser.code.fontFamily = str(code_family)
            parser.code.font = parser.font
        code_background = self.config_get('code.background')
        if code_background is not None:
            parser.code.background = str(code_background)
        parser.code.pygmentsStyle = self.pygmentsStyle_get()

        font_increase = self.config_get('header.font_increase')
        if font_increase is not None:
            parser.header.fontIncrease = float(font_increase)

        indicator = self.config_get('list.indicator')
        if indicator is not None:
            parser.list.indicator = str(indicator)

        autolink = self.config_get('autolink')
        if autolink is not None:
            parser.automaticLinkDetectionEnabled = bool(autolink)

        LOG(f"Applied theme: {self.name}", level=2)
        return parser

    def __repr__(self) -> str:
        return f"Theme(name='{self.name}', path='{self.theme_dir}')"


def themes_listAvailable(themes_dir: str = "themes") -> list[str]:
    """
    List all available theme names.

    Args:
        themes_dir: Path to themes directory

    Returns:
        List of theme names (directory names with a theme.yaml)
    """
    themes_path: Path = Path(themes_dir)

    if not themes_path.exists():
        return []

    themes: list[str] = []
    for item in themes_path.iterdir():
        if item.is_dir() and (item / "theme.yaml").exists():
            themes.append(item.name)

    return sorted(themes)


def theme_validate(theme_name: str, themes_dir: str = "themes") -> tuple[bool, str]:
    """
    Validate a theme's structure and configuration.

    Args:
        theme_name: Name of theme to validate
        themes_dir: Path to themes directory

    Returns:
        Tuple of (is_valid, message)
    """
    try:
        theme: Theme = Theme(theme_name, themes_dir)

        if not theme.config:
            return False, f"Theme '{theme_name}' has empty configuration"

        theme.font_get()
        return True, f"Theme '{theme_name}' is valid"

    except ThemeError as e:
        return False, str(e)
