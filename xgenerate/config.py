"""Application configuration."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings are loaded in this priority order (highest to lowest):
    1. Environment variables (prefixed with ``XGEN_``)
    2. .env file (for local development)
    3. Default values

    Command line options override these values for a single run.
    """

    model_config = SettingsConfigDict(
        env_prefix="XGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Folders
    # =========================================================================
    # Relative template/config locations given on the command line are
    # resolved against these folders.
    template_folder: Path = Field(
        default=Path("."),
        description="Folder containing the raw templates",
    )
    config_folder: Path = Field(
        default=Path("."),
        description="Folder containing the XGenConfig files",
    )
    output_folder: Path = Field(
        default=Path("output"),
        description="Folder the sectioned templates are written to",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: str = "INFO"
    debug: bool = False

    # =========================================================================
    # Batch processing
    # =========================================================================
    max_workers: int = Field(
        default=1,
        ge=1,
        description="Number of template/config pairs processed in parallel",
    )


def get_settings() -> Settings:
    """Load the settings from the current environment."""
    return Settings()
