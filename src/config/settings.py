"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use LESSONMARK_ prefix (e.g., LESSONMARK_STRICT_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Codec configuration via environment variables.

    Environment variables use LESSONMARK_ prefix.

    Examples:
        LESSONMARK_HIGHLIGHT_STYLE=monokai
        LESSONMARK_STRIP_EDITOR_WRAPPERS=false
        LESSONMARK_STRICT_MODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="LESSONMARK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Envelope configuration
    placeholder_prefix: str = Field(
        default="\x00CDATA_",
        description="Prefix for protected CDATA placeholders (null byte cannot occur in XML text)",
    )

    placeholder_suffix: str = Field(
        default="\x00",
        description="Suffix for protected CDATA placeholders",
    )

    strip_editor_wrappers: bool = Field(
        default=True,
        description="Strip <p>, </p> and <br> wrappers added by the rich-text editor",
    )

    # Parser configuration
    synthetic_root: str = Field(
        default="root",
        description="Element name wrapped around a payload so it may hold several top-level tags",
    )

    default_heading_level: int = Field(
        default=2,
        ge=1,
        le=6,
        description="Heading level used when the level attribute is missing or invalid",
    )

    default_language: str = Field(
        default="plaintext",
        description="Language of <code> and <snippet> elements without a language attribute",
    )

    default_image_alt: str = Field(
        default="Image",
        description="Alt text of an <image> without an alt attribute",
    )

    # Rendering configuration
    default_example_title: str = Field(
        default="Example",
        description="Title displayed for an <example> without a title attribute",
    )

    highlight_style: str = Field(
        default="monokai",
        description="Pygments style used by the default highlighter",
    )

    # Serialization configuration
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: raise on the first unserializable block instead of skipping it",
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug output while decoding",
    )

    def placeHolder_make(self, index: int) -> str:
        """
        Generate a placeholder string for a protected section at given index.

        Args:
            index: Zero-based index of the protected section

        Returns:
            Placeholder string (e.g., "\\x00CDATA_0\\x00")

        Example:
            >>> settings = AppSettings()
            >>> settings.placeHolder_make(0)
            '\\x00CDATA_0\\x00'
        """
        return f"{self.placeholder_prefix}{index}{self.placeholder_suffix}"

    def placeHolder_pattern(self) -> str:
        """Regex matching any placeholder, capturing its index"""
        import re

        return f"{re.escape(self.placeholder_prefix)}(\\d+){re.escape(self.placeholder_suffix)}"


# Singleton instance - import this in your code
appsettings = AppSettings()
