"""
Configuration settings for the query builder.

Uses pydantic-settings for type-safe configuration from environment variables
prefixed with ``QUERYBUILDER_`` (or a ``.env`` file).
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..search.regex_compiler import WILDCARD_PATTERN, WORD_START_PREFIX


class Settings(BaseSettings):
    """Query builder configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="QUERYBUILDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Search settings
    match_within_words: bool = Field(
        default=False,
        description="Default for search(): match tokens anywhere instead of at word beginnings",
    )
    wildcard_pattern: str = Field(
        default=WILDCARD_PATTERN,
        min_length=1,
        description="Regex substituted for the * wildcard in search tokens",
    )
    word_start_prefix: str = Field(
        default=WORD_START_PREFIX,
        min_length=1,
        description="Regex prepended to tokens to anchor them at word beginnings (MongoDB has no \\b)",
    )

    # Output settings
    bson_regex: bool = Field(
        default=False,
        description="Emit bson.regex.Regex values instead of re.Pattern in $regex clauses",
    )

    # Logging (CLI only, the library never configures handlers)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Log level used by the querybuilder CLI",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
