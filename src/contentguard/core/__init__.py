"""Core module for ContentGuard - types, configuration, and utilities."""

from contentguard.core.types import (
    ContentItem,
    FileFailure,
    Position,
    Problem,
    Range,
    Severity,
    ValidationResult,
)
from contentguard.core.config import ContentGuardSettings
from contentguard.core.exceptions import (
    ContentGuardError,
    ConfigurationError,
    RepositoryError,
)
from contentguard.core.repository import ContentRepository

__all__ = [
    # Types
    "ContentItem",
    "FileFailure",
    "Position",
    "Problem",
    "Range",
    "Severity",
    "ValidationResult",
    # Config
    "ContentGuardSettings",
    # Repository
    "ContentRepository",
    # Exceptions
    "ContentGuardError",
    "ConfigurationError",
    "RepositoryError",
]
