"""Configuration management for ContentGuard.

This module provides the ContentGuardSettings class for managing all
configuration options, supporting environment variables, a .env file
and a per-repository YAML override file.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from contentguard.core.exceptions import ConfigurationError


class ContentGuardSettings(BaseSettings):
    """Global configuration for ContentGuard.

    Settings can be configured via:
    - Environment variables (prefixed with CONTENTGUARD_)
    - .env file
    - A .contentguard.yaml file at the repository root
    - Direct instantiation

    Example:
        >>> settings = ContentGuardSettings(min_title_length=5)
        >>> # Or via environment: CONTENTGUARD_MIN_TITLE_LENGTH=5
    """

    # Repository layout
    content_dir: str = Field(
        default="content",
        min_length=1,
        description="Name of the content root below the repository root",
    )
    metadata_filename: str = Field(
        default="index.json",
        min_length=1,
        description="Exact file name of metadata documents",
    )
    body_filename: str = Field(
        default="index.mdx",
        min_length=1,
        description="Exact file name of body documents",
    )
    config_filename: str = Field(
        default=".contentguard.yaml",
        description="Per-repository override file name",
    )

    # Content structure rules
    min_title_length: int = Field(
        default=3,
        ge=0,
        description="Minimum trimmed title length",
    )
    min_description_length: int = Field(
        default=10,
        ge=0,
        description="Minimum trimmed description length for described types",
    )
    min_body_length: int = Field(
        default=10,
        ge=0,
        description="Minimum trimmed body document length",
    )
    described_types: list[str] = Field(
        default_factory=lambda: ["blog", "post"],
        description="Content types that must carry a meaningful description",
    )
    precise_positions: bool = Field(
        default=False,
        description="Locate structural findings by text search instead of 0,0",
    )

    # Metadata field rules
    metadata_required_fields: list[str] = Field(
        default_factory=lambda: ["title", "description", "author", "language"],
        description="Fields the metadata validator requires to be non-empty",
    )
    check_body_file: bool = Field(
        default=False,
        description="Also require a non-empty companion body document",
    )

    # Media references
    media_endpoint_marker: str = Field(
        default="/api/media/",
        min_length=1,
        description="URL fragment identifying media served by the backend",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_format: str = Field(
        default="plain",
        description="Log format: 'structured' or 'plain'",
    )

    model_config = SettingsConfigDict(
        env_prefix="CONTENTGUARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary."""
        return self.model_dump()


# Global settings instance (lazy-loaded)
_settings: ContentGuardSettings | None = None


def get_settings() -> ContentGuardSettings:
    """Get the global settings instance.

    Returns:
        The global ContentGuardSettings instance, creating it if needed.
    """
    global _settings
    if _settings is None:
        _settings = ContentGuardSettings()
    return _settings


def configure(**kwargs: Any) -> ContentGuardSettings:
    """Configure global settings.

    Args:
        **kwargs: Settings to override

    Returns:
        The updated global settings instance

    Example:
        >>> configure(min_title_length=5, log_level="DEBUG")
    """
    global _settings
    _settings = ContentGuardSettings(**kwargs)
    return _settings


def load_repository_settings(
    root: Path | str,
    base: ContentGuardSettings | None = None,
) -> ContentGuardSettings:
    """Apply a repository's override file on top of base settings.

    Args:
        root: Repository root directory
        base: Settings to start from (global settings by default)

    Returns:
        Settings for this repository. Returns base unchanged when the
        repository has no override file.

    Raises:
        ConfigurationError: If the override file is unreadable or invalid
    """
    base = base or get_settings()
    path = Path(root) / base.config_filename
    if not path.is_file():
        return base

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Invalid repository config: {e}",
            setting_name="config_filename",
            setting_value=str(path),
        ) from e

    if data is None:
        return base
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Repository config must be a mapping",
            setting_name="config_filename",
            setting_value=str(path),
        )

    merged = base.model_dump()
    merged.update({k: v for k, v in data.items() if k in ContentGuardSettings.model_fields})

    try:
        return ContentGuardSettings(**merged)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid value in repository config: {e}",
            setting_name="config_filename",
            setting_value=str(path),
        ) from e
