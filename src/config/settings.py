"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MARKSTYLE_ prefix (e.g., MARKSTYLE_FONT_SIZE=14).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MARKSTYLE_ prefix.

    Examples:
        MARKSTYLE_FONT_FAMILY=Helvetica
        MARKSTYLE_LINK_COLOR=#0366d6
        MARKSTYLE_AUTOMATIC_LINK_DETECTION=false
    """

    model_config = SettingsConfigDict(
        env_prefix="MARKSTYLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Base style
    font_family: str = Field(
        default="system",
        description="Font family applied to the whole text before any element runs",
    )

    font_size: float = Field(
        default=12.0,
        description="Base font size in points (system default small size)",
    )

    color: str = Field(
        default="#000000",
        description="Base text color",
    )

    # Element styling
    link_color: str = Field(
        default="#0000EE",
        description="Foreground color for links and detected URLs",
    )

    code_font_family: str = Field(
        default="monospace",
        description="Font family used for code spans and fenced code blocks",
    )

    code_background: str = Field(
        default="#F5F5F5",
        description="Background color for code spans",
    )

    pygments_style: str = Field(
        default="default",
        description="Pygments style used to color fenced code blocks with a language",
    )

    header_font_increase: float = Field(
        default=2.0,
        description="Points added to the base size per header level above h6",
    )

    list_indicator: str = Field(
        default="•",
        description="Glyph that replaces -, * and + list markers",
    )

    list_indent: float = Field(
        default=12.0,
        description="Indent (points) applied to list item lines",
    )

    quote_indent: float = Field(
        default=12.0,
        description="Indent (points) applied per quote nesting level",
    )

    automatic_link_detection: bool = Field(
        default=True,
        description="Detect bare URLs and style them as links",
    )

    # Escaping configuration
    placeholder_base: int = Field(
        default=0xF0000,
        description="First code point of the private-use block used for escape placeholders",
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug output while parsing",
    )

    def placeHolder_make(self, char: str) -> str:
        """
        Generate the placeholder standing for a literal ASCII character.

        Args:
            char: Single ASCII character to protect

        Returns:
            Private-use character encoding ``char``

        Example:
            >>> settings = AppSettings()
            >>> settings.placeHolder_make('*') == chr(0xF0000 + ord('*'))
            True
        """
        return chr(self.placeholder_base + ord(char))

    def literal_extract(self, placeholder: str) -> str | None:
        """
        Extract the literal character a placeholder stands for.

        Args:
            placeholder: Single character to decode

        Returns:
            The literal ASCII character, or None if this is not a literal placeholder

        Example:
            >>> settings = AppSettings()
            >>> settings.literal_extract(chr(0xF0000 + ord('_')))
            '_'
        """
        if len(placeholder) != 1:
            return None

        offset = ord(placeholder) - self.placeholder_base
        if 0 <= offset < 0x80:
            return chr(offset)
        return None


# Singleton instance - import this in your code
appsettings = AppSettings()
