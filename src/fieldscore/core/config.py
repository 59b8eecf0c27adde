"""Configuration management.

Uses pydantic-settings for type-safe configuration from environment variables.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from fieldscore.core.errors import ConfigError


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Prefix: FIELDSCORE_
    """

    model_config = SettingsConfigDict(
        env_prefix="FIELDSCORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Inputs
    reference_path: Path = Field(
        default=Path("reference.csv"),
        description="Trusted reference classifications",
    )
    current_path: Path = Field(
        default=Path("current.csv"),
        description="Classifications produced by the detector under test",
    )

    # Locale selection ("" = no filtering)
    correlation_locale: str = Field(default="en-US")
    evaluation_locale: str = Field(default="")

    # Significance gate for the rendered correlation matrix
    significance_min_matches: int = Field(
        default=10,
        description="Minimum occurrences for a semantic type to appear in the matrix",
    )
    significance_min_correlation: float = Field(
        default=0.1,
        description="Correlation a type must exceed with some other significant type",
    )

    # The last file group of the reference stream is not accumulated unless set
    flush_trailing_group: bool = Field(default=False)

    # Structured dumps are written here
    output_dir: Path = Field(default=Path("."))

    # Catalog client
    catalog_timeout_seconds: float = Field(default=10.0)

    # Logging
    log_level: str = Field(default="WARNING")
    log_format: str = Field(default="console")  # 'json' or 'console'


@lru_cache
def load_settings() -> Settings:
    """Get cached settings instance.

    Raises:
        ConfigError: If an environment override cannot be parsed
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
