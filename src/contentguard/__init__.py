"""ContentGuard - content repository validation before sync.

Validate. Review. Sync.

ContentGuard checks a content repository's metadata documents, body
documents and media references before they are pushed to the
content-management backend, and decides whether a sync may proceed.

Example:
    >>> from contentguard import ValidationEngine
    >>>
    >>> engine = ValidationEngine("/work/site")
    >>> problem_count = await engine.validate_all()
    >>> for path in engine.store.paths():
    ...     for problem in engine.store.get(path):
    ...         print(problem)
    >>>
    >>> # Gate a push on the result
    >>> if await engine.validate_before_sync():
    ...     push_content()
"""

from contentguard._version import __version__
from contentguard.core.config import ContentGuardSettings, configure, get_settings
from contentguard.core.exceptions import (
    ConfigurationError,
    ContentGuardError,
    RepositoryError,
)
from contentguard.core.logging import get_logger, setup_logging
from contentguard.core.repository import ContentRepository
from contentguard.core.types import (
    ContentItem,
    FileFailure,
    Position,
    Problem,
    Range,
    Severity,
    ValidationResult,
)

__all__ = [
    # Version
    "__version__",
    # Core types
    "ContentItem",
    "FileFailure",
    "Position",
    "Problem",
    "Range",
    "Severity",
    "ValidationResult",
    # Config
    "ContentGuardSettings",
    "configure",
    "get_settings",
    # Exceptions
    "ContentGuardError",
    "ConfigurationError",
    "RepositoryError",
    # Logging
    "get_logger",
    "setup_logging",
    # Repository
    "ContentRepository",
    # Validation (lazy)
    "ValidationEngine",
    "ContentStructureValidator",
    "MetadataFieldsValidator",
    "MediaReferencesValidator",
    "MediaUrlExtractor",
    "InMemoryDiagnosticStore",
]


def __getattr__(name: str):
    """Lazy import for the validation layer."""
    if name == "ValidationEngine":
        from contentguard.validate.engine import ValidationEngine
        return ValidationEngine

    if name == "InMemoryDiagnosticStore":
        from contentguard.validate.engine import InMemoryDiagnosticStore
        return InMemoryDiagnosticStore

    if name == "ContentStructureValidator":
        from contentguard.validate.content import ContentStructureValidator
        return ContentStructureValidator

    if name == "MetadataFieldsValidator":
        from contentguard.validate.metadata import MetadataFieldsValidator
        return MetadataFieldsValidator

    if name == "MediaReferencesValidator":
        from contentguard.validate.media import MediaReferencesValidator
        return MediaReferencesValidator

    if name == "MediaUrlExtractor":
        from contentguard.validate.media import MediaUrlExtractor
        return MediaUrlExtractor

    raise AttributeError(f"module 'contentguard' has no attribute {name!r}")
