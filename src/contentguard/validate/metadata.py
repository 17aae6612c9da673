"""Metadata field validation.

Checks that every metadata document carries the fields the backend
requires when content is created.
"""

from pathlib import Path

from contentguard.core.config import ContentGuardSettings
from contentguard.core.exceptions import RepositoryError
from contentguard.core.logging import get_logger
from contentguard.core.repository import ContentRepository
from contentguard.core.types import Problem, Range, Severity, ValidationResult
from contentguard.validate.base import record_failure, validate_each
from contentguard.validate.positions import field_range, parse_json

logger = get_logger(__name__)

SOURCE = "Metadata Validator"

# Pseudo-field checked against the companion body document instead of a JSON key
BODY_FIELD = "body"


class MetadataFieldsValidator:
    """Validates required metadata fields.

    Missing or blank fields are located in the raw JSON text so
    editors can point at them. Absent fields point at the final
    closing brace, where they would be inserted.

    When check_body_file is enabled the "body" pseudo-field is added
    to the required set: the companion body document must exist and
    must not be empty.
    """

    id = "metadata"
    display_name = "Metadata Fields Validator"

    def __init__(
        self,
        repository: ContentRepository,
        settings: ContentGuardSettings | None = None,
    ) -> None:
        self.repository = repository
        self.settings = settings or repository.settings

    @property
    def required_fields(self) -> list[str]:
        fields = list(self.settings.metadata_required_fields)
        if self.settings.check_body_file and BODY_FIELD not in fields:
            fields.append(BODY_FIELD)
        return fields

    async def validate_file(self, path: str) -> ValidationResult:
        result = ValidationResult()
        path = str(path)

        if not self.repository.is_metadata_document(path):
            return result

        try:
            text = await self.repository.read_text(path)
            metadata, error = parse_json(text)
            if error is not None:
                result.problems.append(
                    Problem(
                        file_path=path,
                        message=f"Invalid JSON: {error}",
                        severity=Severity.ERROR,
                        source=SOURCE,
                        code="INVALID_JSON",
                    )
                )
                return result

            if not isinstance(metadata, dict):
                metadata = {}

            for name in self.required_fields:
                if name == BODY_FIELD:
                    result.problems.extend(await self._check_body_file(path))
                    continue

                value = metadata.get(name)
                if not value or (isinstance(value, str) and not value.strip()):
                    result.problems.append(
                        Problem(
                            file_path=path,
                            message=f"Missing required field: {name}",
                            severity=Severity.ERROR,
                            range=field_range(text, name, for_missing=True),
                            source=SOURCE,
                            code="MISSING_FIELD",
                        )
                    )
        except RepositoryError as e:
            record_failure(result, self.id, e, path)

        return result

    async def validate_all(self) -> ValidationResult:
        if not self.repository.has_content_root():
            return ValidationResult()

        suffix = Path(self.settings.metadata_filename).suffix
        try:
            files = [
                f for f in await self.repository.find_files(suffix)
                if self.repository.is_metadata_document(f)
            ]
        except RepositoryError as e:
            result = ValidationResult()
            record_failure(result, self.id, e)
            return result

        logger.info(f"Found {len(files)} metadata documents for metadata validation")
        return await validate_each(files, self.validate_file)

    async def _check_body_file(self, path: str) -> list[Problem]:
        body_path = self.repository.body_path_for(path)

        if not await self.repository.exists(body_path):
            return [
                Problem(
                    file_path=path,
                    message=f"Missing required file: {body_path.name}",
                    severity=Severity.ERROR,
                    range=Range.placeholder(),
                    source=SOURCE,
                    code="MISSING_BODY_FILE",
                )
            ]

        body = await self.repository.read_text(body_path)
        if not body.strip():
            return [
                Problem(
                    file_path=str(body_path),
                    message="Body content is empty",
                    severity=Severity.ERROR,
                    source=SOURCE,
                    code="EMPTY_BODY",
                )
            ]
        return []
