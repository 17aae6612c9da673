"""Core data types for ContentGuard.

This module defines the fundamental data structures used throughout ContentGuard:
- Severity: Ordered problem severity (most to least severe)
- Position / Range: Zero-based locations inside a document
- Problem: Single validation finding for one file
- FileFailure: A file (or validator) that could not be validated
- ValidationResult: Problems and failures produced by one validation run
- ContentItem: A (content_type, slug) unit on disk
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any


class Severity(IntEnum):
    """Problem severity. Lower values are more severe."""

    ERROR = 0
    WARNING = 1
    INFORMATION = 2
    HINT = 3

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Position:
    """Zero-based line/character position inside a text document."""
    line: int = 0
    character: int = 0

    def __str__(self) -> str:
        return f"{self.line + 1}:{self.character + 1}"


@dataclass(frozen=True)
class Range:
    """Start/end positions of a finding.

    A zero-width range at 0,0 is used whenever the exact location
    of a finding is not tracked.
    """
    start: Position = field(default_factory=Position)
    end: Position = field(default_factory=Position)

    @classmethod
    def placeholder(cls) -> "Range":
        """Zero-width range at the start of the document."""
        return cls()

    @classmethod
    def from_coords(
        cls,
        start_line: int,
        start_character: int,
        end_line: int,
        end_character: int,
    ) -> "Range":
        return cls(
            Position(start_line, start_character),
            Position(end_line, end_character),
        )

    @property
    def is_placeholder(self) -> bool:
        return self.start == self.end == Position()


@dataclass(frozen=True)
class Problem:
    """Single validation finding.

    Attributes:
        file_path: Absolute path of the offending file
        message: Human-readable description
        severity: Problem severity
        range: Location within the file (may be a placeholder)
        source: Label of the validator that produced the finding
        code: Optional machine-readable code (e.g., "MISSING_FIELD")
    """
    file_path: str
    message: str
    severity: Severity
    range: Range = field(default_factory=Range)
    source: str = "ContentGuard"
    code: str | None = None

    def __str__(self) -> str:
        code = f" {self.code}" if self.code else ""
        return (
            f"{self.file_path}:{self.range.start} "
            f"[{self.severity.label.upper()}]{code} {self.message}"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert problem to dictionary for serialization."""
        return {
            "file": self.file_path,
            "message": self.message,
            "severity": self.severity.label,
            "range": {
                "start": {"line": self.range.start.line, "character": self.range.start.character},
                "end": {"line": self.range.end.line, "character": self.range.end.character},
            },
            "source": self.source,
            "code": self.code,
        }


@dataclass(frozen=True)
class FileFailure:
    """A file, or a whole validator pass, that failed to validate.

    Attributes:
        validator_id: Identifier of the validator that failed
        message: Description of the underlying infrastructure error
        path: File that could not be validated, None for a whole pass
    """
    validator_id: str
    message: str
    path: str | None = None

    def __str__(self) -> str:
        target = self.path or "<all files>"
        return f"{self.validator_id}: {target}: {self.message}"


@dataclass
class ValidationResult:
    """Ordered problems (and failures) produced by one validation run."""
    problems: list[Problem] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.problems)

    def __iter__(self):
        return iter(self.problems)

    def __add__(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult(
            problems=[*self.problems, *other.problems],
            failures=[*self.failures, *other.failures],
        )

    def extend(self, other: "ValidationResult") -> None:
        """Append another result's problems and failures, preserving order."""
        self.problems.extend(other.problems)
        self.failures.extend(other.failures)

    @property
    def has_errors(self) -> bool:
        return any(p.severity == Severity.ERROR for p in self.problems)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    def count_by_severity(self) -> dict[Severity, int]:
        counts = Counter(p.severity for p in self.problems)
        return {severity: counts.get(severity, 0) for severity in Severity}

    def by_file(self) -> dict[str, list[Problem]]:
        """Group problems by file path, keeping first-seen order."""
        grouped: dict[str, list[Problem]] = {}
        for problem in self.problems:
            grouped.setdefault(problem.file_path, []).append(problem)
        return grouped

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "total_problems": len(self.problems),
            "by_severity": {
                severity.label: count
                for severity, count in self.count_by_severity().items()
            },
            "problems": [p.to_dict() for p in self.problems],
            "failures": [
                {"validator": f.validator_id, "path": f.path, "message": f.message}
                for f in self.failures
            ],
        }


@dataclass(frozen=True)
class ContentItem:
    """One content item laid out as content/<type>/<slug>/.

    Attributes:
        content_type: First directory below the content root (e.g., "blog")
        slug: Second directory below the content root
        directory: Absolute path of the item's directory
        metadata_path: Expected path of the metadata document
        body_path: Expected path of the companion body document
    """
    content_type: str
    slug: str
    directory: Path
    metadata_path: Path
    body_path: Path

    @property
    def key(self) -> tuple[str, str]:
        return (self.content_type, self.slug)
