"""Custom exceptions for ContentGuard.

This module defines the exception hierarchy used for infrastructure
errors. Content errors (bad JSON, missing fields, broken media
references) are reported as Problems and never raised.
"""


class ContentGuardError(Exception):
    """Base exception for all ContentGuard errors.

    All ContentGuard-specific exceptions inherit from this class,
    allowing users to catch all ContentGuard errors with a single except clause.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """Initialize ContentGuardError.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(ContentGuardError):
    """Raised when configuration is invalid.

    This is raised when settings are misconfigured or a repository
    override file is malformed.
    """

    def __init__(
        self,
        message: str,
        setting_name: str | None = None,
        setting_value: str | None = None,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error message
            setting_name: Name of the problematic setting
            setting_value: Value that caused the error
        """
        details = {}
        if setting_name:
            details["setting_name"] = setting_name
        if setting_value:
            details["setting_value"] = setting_value
        super().__init__(message, details)
        self.setting_name = setting_name
        self.setting_value = setting_value


class RepositoryError(ContentGuardError):
    """Raised when the content repository cannot be read.

    Validators catch this at their per-file boundary and record
    a FileFailure instead of letting it escape.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        operation: str | None = None,
    ) -> None:
        """Initialize RepositoryError.

        Args:
            message: Human-readable error message
            path: File or directory that failed
            operation: What was being done (read, list, stat)
        """
        details = {}
        if path:
            details["path"] = path
        if operation:
            details["operation"] = operation
        super().__init__(message, details)
        self.path = path
        self.operation = operation
