"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MICRON_ prefix (e.g., MICRON_STRIP_ITERATION_CAP=20).

Settings can also be loaded from a .env file in the project root.
"""

import re
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MICRON_ prefix.

    Examples:
        MICRON_THEME_NAME=default
        MICRON_MAX_LINE_LENGTH=100
        MICRON_BLOCKED_URL_SCHEMES='["javascript", "data"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="MICRON_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Parser configuration
    placeholder_prefix: str = Field(
        default="\x00###M",
        description="Prefix for directive placeholders (NUL is reserved and removed from input)",
    )

    placeholder_suffix: str = Field(
        default="###\x00",
        description="Suffix for directive placeholders (NUL is reserved and removed from input)",
    )

    extract_round_cap: int = Field(
        default=32,
        description="Maximum number of ordered rule rounds during marker extraction",
    )

    blocked_url_schemes: List[str] = Field(
        default=["javascript", "data", "vbscript"],
        description="Link URL schemes rendered as an inert '#' href",
    )

    # Stripper configuration
    strip_iteration_cap: int = Field(
        default=10,
        description="Iteration cap for the fixed-point code stripper",
    )

    # Editor configuration
    max_line_length: int = Field(
        default=130,
        description="Soft line length guideline for downstream network compatibility",
    )

    history_limit: int = Field(
        default=50,
        description="Number of undo states kept by an editor session",
    )

    storage_key: str = Field(
        default="micronEditorContent",
        description="Key under which an editor session persists its content",
    )

    download_filename: str = Field(
        default="page.mu",
        description="Default filename for downloaded pages",
    )

    # Rendering configuration
    theme_name: str = Field(
        default="default",
        description="Theme used for fragment styling and standalone pages",
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug output during rendering",
    )

    def placeHolder_make(self, index: int) -> str:
        """
        Generate the placeholder string for the directive at given index.

        Args:
            index: Zero-based index of the directive within one render call

        Returns:
            Placeholder string (e.g., "\\x00###M0###\\x00")

        Example:
            >>> settings = AppSettings()
            >>> settings.placeHolder_make(3)
            '\\x00###M3###\\x00'
        """
        return f"{self.placeholder_prefix}{index}{self.placeholder_suffix}"

    def markerIndex_extract(self, placeholder: str) -> int | None:
        """
        Extract the directive index from a placeholder string.

        Args:
            placeholder: Placeholder string to parse

        Returns:
            Directive index if valid placeholder, None otherwise

        Example:
            >>> settings = AppSettings()
            >>> settings.markerIndex_extract('\\x00###M3###\\x00')
            3
        """
        if not placeholder.startswith(self.placeholder_prefix):
            return None
        if not placeholder.endswith(self.placeholder_suffix):
            return None

        content = placeholder[len(self.placeholder_prefix) : -len(self.placeholder_suffix)]

        try:
            return int(content)
        except ValueError:
            return None

    def placeholder_pattern(self) -> "re.Pattern[str]":
        """Compiled pattern matching any placeholder, index in group 1"""
        return re.compile(
            re.escape(self.placeholder_prefix) + r"(\d+)" + re.escape(self.placeholder_suffix)
        )

    def reservedChars_get(self) -> str:
        """Characters removed from input so placeholders can never collide"""
        return "\x00"


# Singleton instance - import this in your code
appsettings = AppSettings()
