"""Validation layer for ContentGuard.

This module provides the rule sets run before content is synchronized:
- Content structure: required fields, field formats, type rules, body shape
- Metadata fields: fields the backend requires on create
- Media references: referenced local media files exist
- Engine: runs all rule sets, merges and publishes their problems
"""

from contentguard.validate.base import Validator
from contentguard.validate.content import ContentStructureValidator
from contentguard.validate.engine import (
    ConfirmationPrompt,
    DiagnosticStore,
    InMemoryDiagnosticStore,
    SyncDecision,
    ValidationEngine,
    default_validators,
)
from contentguard.validate.media import MediaReferencesValidator, MediaUrlExtractor
from contentguard.validate.metadata import MetadataFieldsValidator

__all__ = [
    # Contract
    "Validator",
    # Rule sets
    "ContentStructureValidator",
    "MetadataFieldsValidator",
    "MediaReferencesValidator",
    "MediaUrlExtractor",
    # Engine
    "ValidationEngine",
    "DiagnosticStore",
    "InMemoryDiagnosticStore",
    "ConfirmationPrompt",
    "SyncDecision",
    "default_validators",
]
