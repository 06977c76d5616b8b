"""
Library configuration loaded from environment variables.

Settings have sensible defaults so the library works without any
configuration. Override them with ZAHLTEIL_* environment variables or a
.env file, or pass a Settings instance to the individual operations.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Library settings with validation.

    All settings are loaded from environment variables prefixed ZAHLTEIL_.
    """

    model_config = SettingsConfigDict(
        env_prefix="ZAHLTEIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Payload
    line_separator: Literal["\r\n", "\n"] = Field(
        default="\r\n",
        description="Line terminator used to encode and decode payload text",
    )

    # Validation
    transliterate_characters: bool = Field(
        default=True,
        description=(
            "Replace unsupported characters by permitted equivalents (warning); "
            "if disabled, every unsupported character is an error"
        ),
    )
    alternative_scheme_limit: int = Field(
        default=2,
        ge=0,
        le=2,
        description="Maximum number of alternative scheme lines per bill",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached library settings.

    Settings are loaded once on first use and shared afterwards.
    """
    return Settings()
