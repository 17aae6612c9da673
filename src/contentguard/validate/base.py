"""Validator contract shared by every rule set.

Rule sets do not inherit from a common class. Anything that exposes
the attributes and coroutines below can be registered with the
ValidationEngine.
"""

from typing import Awaitable, Callable, Iterable, Protocol, runtime_checkable

from contentguard.core.exceptions import RepositoryError
from contentguard.core.logging import get_logger
from contentguard.core.types import FileFailure, ValidationResult

logger = get_logger(__name__)


@runtime_checkable
class Validator(Protocol):
    """Capability every rule set must provide.

    Example:
        >>> class MyValidator:
        ...     id = "mine"
        ...     display_name = "My Validator"
        ...     async def validate_file(self, path): ...
        ...     async def validate_all(self): ...
    """

    id: str
    display_name: str

    async def validate_file(self, path: str) -> ValidationResult:
        """Validate one file.

        Files outside this rule set's roles yield an empty result.
        Malformed content becomes problems, never exceptions.
        """
        ...

    async def validate_all(self) -> ValidationResult:
        """Validate every relevant file under the content root."""
        ...


async def validate_each(
    paths: Iterable[str],
    validate_file: Callable[[str], Awaitable[ValidationResult]],
) -> ValidationResult:
    """Run validate_file over paths sequentially and concatenate results."""
    result = ValidationResult()
    for path in paths:
        result.extend(await validate_file(path))
    return result


def record_failure(
    result: ValidationResult,
    validator_id: str,
    error: RepositoryError,
    path: str | None = None,
) -> None:
    """Log an infrastructure error and record it as a FileFailure."""
    target = path or error.path
    logger.error(f"Validator {validator_id} could not process {target}: {error.message}")
    result.failures.append(
        FileFailure(validator_id=validator_id, message=error.message, path=target)
    )
