"""Validation engine.

Runs every registered rule set, merges their problems, drops problems
for files that no longer exist and republishes the merged set to a
diagnostic store. Also provides the proceed-or-cancel gate used before
content is synchronized to the backend.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Protocol

from contentguard.core.config import ContentGuardSettings, load_repository_settings
from contentguard.core.logging import LogContext, get_logger
from contentguard.core.repository import ContentRepository
from contentguard.core.types import FileFailure, Problem, ValidationResult
from contentguard.validate.base import Validator
from contentguard.validate.content import ContentStructureValidator
from contentguard.validate.media import MediaReferencesValidator, MediaUrlSource
from contentguard.validate.metadata import MetadataFieldsValidator

logger = get_logger(__name__)


class DiagnosticStore(Protocol):
    """File-keyed store of the diagnostics currently shown to the user."""

    def clear(self) -> None:
        ...

    def set(self, path: str, problems: list[Problem]) -> None:
        ...

    def delete(self, path: str) -> None:
        ...

    def get(self, path: str) -> list[Problem]:
        ...

    def paths(self) -> list[str]:
        ...


class InMemoryDiagnosticStore:
    """Dictionary-backed DiagnosticStore."""

    def __init__(self) -> None:
        self._entries: dict[str, list[Problem]] = {}

    def clear(self) -> None:
        self._entries.clear()

    def set(self, path: str, problems: list[Problem]) -> None:
        self._entries[path] = list(problems)

    def delete(self, path: str) -> None:
        self._entries.pop(path, None)

    def get(self, path: str) -> list[Problem]:
        return list(self._entries.get(path, []))

    def paths(self) -> list[str]:
        return list(self._entries)

    def all_problems(self) -> list[Problem]:
        return [p for problems in self._entries.values() for p in problems]

    def __len__(self) -> int:
        return sum(len(problems) for problems in self._entries.values())


class ConfirmationPrompt(Protocol):
    """Asks the user whether to continue despite validation problems."""

    async def confirm(self, problem_count: int) -> bool | None:
        """Return True to continue, False to cancel, None if dismissed."""
        ...


class SyncDecision(str, Enum):
    """Outcome of the pre-sync gate."""

    PROCEED = "proceed"
    CANCEL = "cancel"


def default_validators(
    repository: ContentRepository,
    extractor: MediaUrlSource | None = None,
) -> list[Validator]:
    """Built-in rule sets in registration order."""
    return [
        MediaReferencesValidator(repository, extractor=extractor),
        ContentStructureValidator(repository),
        MetadataFieldsValidator(repository),
    ]


class ValidationEngine:
    """Runs all registered rule sets and publishes merged results.

    Rule sets run one after the other. A failure inside one rule set
    is logged and recorded as a FileFailure; the others still run.

    Every publish clears the whole store before writing the new state,
    so files deleted or renamed since the last run lose their entries.
    The merged result of the latest run, failures included, is kept
    as last_result.

    Example:
        >>> engine = ValidationEngine("/work/site")
        >>> count = await engine.validate_all()
        >>> if await engine.validate_before_sync():
        ...     push_content()
    """

    def __init__(
        self,
        root: Path | str,
        validators: list[Validator] | None = None,
        store: DiagnosticStore | None = None,
        prompt: ConfirmationPrompt | None = None,
        settings: ContentGuardSettings | None = None,
        extractor: MediaUrlSource | None = None,
    ) -> None:
        """Initialize ValidationEngine.

        Args:
            root: Repository root directory
            validators: Rule sets to register (built-in set by default)
            store: Diagnostic store to publish into
            prompt: Confirmation collaborator for validate_before_sync
            settings: Settings (repository overrides applied to global by default)
            extractor: Media URL extractor for the built-in media rule set
        """
        settings = settings or load_repository_settings(root)
        self.repository = ContentRepository(root, settings)
        self.store: DiagnosticStore = store if store is not None else InMemoryDiagnosticStore()
        self.prompt = prompt
        self.last_result = ValidationResult()
        self._validators: list[Validator] = list(
            validators if validators is not None
            else default_validators(self.repository, extractor)
        )

    @property
    def validators(self) -> list[Validator]:
        return list(self._validators)

    async def validate_all(self) -> int:
        """Validate the whole repository.

        Returns:
            Total number of problems found by all rule sets
        """
        logger.info("Performing full content validation...")
        self.store.clear()

        result = ValidationResult()
        for validator in self._validators:
            validator_result = await self._run(validator, None)
            if validator_result.problems:
                logger.info(
                    f"Validator {validator.display_name} found "
                    f"{len(validator_result.problems)} problems"
                )
            result.extend(validator_result)

        self.last_result = result
        self.publish(result.problems)
        logger.info(f"Validation complete. Found {len(result.problems)} total problems.")
        return len(result.problems)

    async def validate_file(self, path: Path | str) -> ValidationResult:
        """Validate one file with every rule set."""
        path = str(Path(path).resolve())
        logger.info(f"Validating file: {path}")
        self.store.delete(path)

        result = ValidationResult()
        for validator in self._validators:
            result.extend(await self._run(validator, path))

        self.last_result = result
        self.publish(result.problems)
        return result

    async def validate_before_sync(self) -> bool:
        """Decide whether a sync may proceed."""
        return await self.sync_decision() is SyncDecision.PROCEED

    async def sync_decision(self) -> SyncDecision:
        problem_count = await self.validate_all()
        if problem_count == 0:
            return SyncDecision.PROCEED

        if self.prompt is None:
            logger.info(f"Found {problem_count} problems and no prompt is available, cancelling")
            return SyncDecision.CANCEL

        try:
            answer = await self.prompt.confirm(problem_count)
        except Exception:
            logger.exception("Confirmation prompt failed, cancelling")
            return SyncDecision.CANCEL

        if answer is True:
            return SyncDecision.PROCEED
        logger.info("Content sync cancelled due to validation problems")
        return SyncDecision.CANCEL

    def publish(self, problems: list[Problem]) -> dict[str, list[Problem]]:
        """Replace the store's contents with problems for existing files.

        Returns:
            The published mapping of file path to problems
        """
        grouped: dict[str, list[Problem]] = {}
        for problem in problems:
            if not _file_exists(problem.file_path):
                continue
            grouped.setdefault(problem.file_path, []).append(problem)

        self.store.clear()
        for path, file_problems in grouped.items():
            self.store.set(path, file_problems)
        return grouped

    async def _run(self, validator: Validator, path: str | None) -> ValidationResult:
        with LogContext(logger, validator=validator.id, file=path or "*"):
            try:
                if path is None:
                    return await validator.validate_all()
                return await validator.validate_file(path)
            except Exception as e:
                if path is None:
                    logger.exception(f"Error running validator {validator.display_name}")
                else:
                    logger.exception(
                        f"Error running validator {validator.display_name} on file {path}"
                    )
                return ValidationResult(
                    failures=[FileFailure(validator_id=validator.id, message=str(e), path=path)]
                )


def _file_exists(path: str) -> bool:
    try:
        os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    except (OSError, ValueError) as e:
        logger.error(f"Error checking if file exists: {path!r}: {e}")
        return False
    return True
