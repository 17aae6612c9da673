"""Content structure validation.

Checks metadata documents (index.json) for required fields, field
formats and type-specific rules, and body documents (index.mdx) for
minimal length and heading structure.
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Any

from dateutil import parser as date_parser

from contentguard.core.config import ContentGuardSettings
from contentguard.core.exceptions import RepositoryError
from contentguard.core.logging import get_logger
from contentguard.core.repository import ContentRepository
from contentguard.core.types import Problem, Range, Severity, ValidationResult
from contentguard.validate.base import record_failure, validate_each
from contentguard.validate.positions import field_range, json_error_range, parse_json

logger = get_logger(__name__)

SOURCE = "Content Validator"

HEADING_RE = re.compile(r"^#+ ", re.MULTILINE)

_DATE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


class ContentStructureValidator:
    """Validates content structure and required fields.

    Metadata documents get three rule groups:
    - Required fields (title, type)
    - Field formats (title length, tags sequence, publishedAt date)
    - Type-specific rules (blog/post descriptions)

    Body documents get a minimum length and a heading check.

    Example:
        >>> validator = ContentStructureValidator(ContentRepository("/work/site"))
        >>> result = await validator.validate_all()
    """

    id = "content"
    display_name = "Content Structure Validator"

    REQUIRED_FIELDS = ("title", "type")

    def __init__(
        self,
        repository: ContentRepository,
        settings: ContentGuardSettings | None = None,
    ) -> None:
        self.repository = repository
        self.settings = settings or repository.settings

    async def validate_file(self, path: str) -> ValidationResult:
        result = ValidationResult()
        path = str(path)

        try:
            if self.repository.is_metadata_document(path):
                text = await self.repository.read_text(path)
                result.problems.extend(self.check_metadata(path, text))
            elif self.repository.is_body_document(path):
                text = await self.repository.read_text(path)
                result.problems.extend(self.check_body(path, text))
        except RepositoryError as e:
            record_failure(result, self.id, e, path)

        return result

    async def validate_all(self) -> ValidationResult:
        if not self.repository.has_content_root():
            return ValidationResult()

        metadata_suffix = Path(self.settings.metadata_filename).suffix
        body_suffix = Path(self.settings.body_filename).suffix
        try:
            metadata_files = [
                f for f in await self.repository.find_files(metadata_suffix)
                if self.repository.is_metadata_document(f)
            ]
            body_files = [
                f for f in await self.repository.find_files(body_suffix)
                if self.repository.is_body_document(f)
            ]
        except RepositoryError as e:
            result = ValidationResult()
            record_failure(result, self.id, e)
            return result

        logger.info(
            f"Found {len(metadata_files)} metadata and {len(body_files)} body "
            f"documents for content validation"
        )
        return await validate_each([*metadata_files, *body_files], self.validate_file)

    def check_metadata(self, path: str, text: str) -> list[Problem]:
        """Apply the metadata rule groups to one document's raw text."""
        metadata, error = parse_json(text)
        if error is not None:
            return [
                Problem(
                    file_path=path,
                    message=f"Invalid JSON format: {error}",
                    severity=Severity.ERROR,
                    range=json_error_range(text, error),
                    source=SOURCE,
                    code="INVALID_JSON",
                )
            ]

        if not isinstance(metadata, dict):
            metadata = {}

        problems: list[Problem] = []
        self._check_required_fields(path, text, metadata, problems)
        self._check_field_formats(path, text, metadata, problems)
        self._check_content_type(path, text, metadata, problems)
        return problems

    def check_body(self, path: str, text: str) -> list[Problem]:
        """Apply the body structure checks to one document's raw text."""
        problems: list[Problem] = []

        if len(text.strip()) < self.settings.min_body_length:
            problems.append(
                Problem(
                    file_path=path,
                    message="Content appears to be empty or too short",
                    severity=Severity.WARNING,
                    source=SOURCE,
                    code="BODY_TOO_SHORT",
                )
            )

        if not HEADING_RE.search(text):
            problems.append(
                Problem(
                    file_path=path,
                    message="Content should include at least one heading (# Title)",
                    severity=Severity.WARNING,
                    source=SOURCE,
                    code="MISSING_HEADING",
                )
            )

        return problems

    def _property_range(self, text: str, name: str) -> Range:
        if self.settings.precise_positions:
            return field_range(text, name, for_missing=True)
        return Range.placeholder()

    def _check_required_fields(
        self,
        path: str,
        text: str,
        metadata: dict[str, Any],
        problems: list[Problem],
    ) -> None:
        for name in self.REQUIRED_FIELDS:
            if not metadata.get(name):
                problems.append(
                    Problem(
                        file_path=path,
                        message=f"Missing required field: {name}",
                        severity=Severity.ERROR,
                        range=self._property_range(text, name),
                        source=SOURCE,
                        code="MISSING_FIELD",
                    )
                )

    def _check_field_formats(
        self,
        path: str,
        text: str,
        metadata: dict[str, Any],
        problems: list[Problem],
    ) -> None:
        title = metadata.get("title")
        if title and isinstance(title, str):
            if len(title.strip()) < self.settings.min_title_length:
                problems.append(
                    Problem(
                        file_path=path,
                        message=(
                            f"Title is too short (minimum "
                            f"{self.settings.min_title_length} characters)"
                        ),
                        severity=Severity.WARNING,
                        range=self._property_range(text, "title"),
                        source=SOURCE,
                        code="TITLE_TOO_SHORT",
                    )
                )

        if "tags" in metadata and not isinstance(metadata["tags"], list):
            problems.append(
                Problem(
                    file_path=path,
                    message="Tags should be an array",
                    severity=Severity.ERROR,
                    range=self._property_range(text, "tags"),
                    source=SOURCE,
                    code="INVALID_TAGS",
                )
            )

        published_at = metadata.get("publishedAt")
        if published_at and not is_valid_date(published_at):
            problems.append(
                Problem(
                    file_path=path,
                    message="Invalid date format for publishedAt",
                    severity=Severity.ERROR,
                    range=self._property_range(text, "publishedAt"),
                    source=SOURCE,
                    code="INVALID_DATE",
                )
            )

    def _check_content_type(
        self,
        path: str,
        text: str,
        metadata: dict[str, Any],
        problems: list[Problem],
    ) -> None:
        content_type = metadata.get("type")
        if not content_type:
            # Already reported by the required fields check
            return

        if content_type in self.settings.described_types:
            description = metadata.get("description")
            if (
                not isinstance(description, str)
                or len(description.strip()) < self.settings.min_description_length
            ):
                problems.append(
                    Problem(
                        file_path=path,
                        message=(
                            f"Blog posts should have a meaningful description "
                            f"(min {self.settings.min_description_length} chars)"
                        ),
                        severity=Severity.WARNING,
                        range=self._property_range(text, "description"),
                        source=SOURCE,
                        code="SHORT_DESCRIPTION",
                    )
                )
        # "page" and unknown types have no extra rules yet


def is_valid_date(value: Any) -> bool:
    """Check whether a metadata value denotes a calendar date/time."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        # Epoch milliseconds
        try:
            datetime.fromtimestamp(value / 1000)
        except (OverflowError, OSError, ValueError):
            return False
        return True
    if not isinstance(value, str):
        return False

    # Parts missing from the text are filled from the default, so a value
    # naming a full calendar date parses identically under both defaults.
    try:
        parsed = [date_parser.parse(value, default=default) for default in _DATE_DEFAULTS]
    except (ValueError, OverflowError):
        return False
    return parsed[0] == parsed[1]
