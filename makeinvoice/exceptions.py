"""Central application exception hierarchy.

This module defines the base application exception ``AppError`` and the
specialized subclasses raised by the export pipeline: usage mistakes,
unreadable sources and templates, malformed CSV input, template parse and
execution failures, unwritable destinations and the external PDF converter
being missing or failing. Every error carries a stable machine-readable code
so the CLI can print one grep-able line per failure kind.
"""

from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    """Base exception for all application-level errors.

    Parameters
    ----------
    code : str
        Machine-readable error code (e.g., ``'SOURCE_FILE_ERROR'``).
    message : str
        Human-readable message describing the error.
    context : Mapping[str, Any] | None, optional
        Optional structured context for logging.

    Attributes
    ----------
    code : str
        Stable machine-readable error code.
    message : str
        Human-readable message.
    context : dict
        Structured, non-sensitive context for logging.
    exit_code : int
        Process exit status the CLI uses for this error.

    Examples
    --------
    >>> e = AppError('CODE', 'message', context={'k': 'v'})
    >>> str(e)
    'CODE: message'
    """

    __slots__ = ("code", "message", "context")

    exit_code: int = 1

    def __init__(
        self,
        code: str,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = dict(context or {})

    def __str__(self) -> str:
        """Return a compact string representation of the error."""
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return a log-safe dictionary representation of the error."""
        return {
            "error_code": self.code,
            "message": self.message,
            "context": self.context,
        }


class ConfigurationError(AppError):
    """Raised for invalid or missing configuration."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("CONFIGURATION_ERROR", message, context=context)


class UsageError(AppError):
    """Raised when the command is invoked incorrectly."""

    exit_code = 2

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        code: str = "USAGE_ERROR",
    ) -> None:
        super().__init__(code, message, context=context)


class EmptyInputError(UsageError):
    """Raised when no input file is supplied to the ingestor."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message, context=context, code="EMPTY_INPUT_ERROR")


class SourceFileError(AppError):
    """Raised when an input file cannot be opened or read."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("SOURCE_FILE_ERROR", message, context=context)


class MalformedInputError(AppError):
    """Raised when CSV content cannot be tokenized into records."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("MALFORMED_INPUT_ERROR", message, context=context)


class TemplateReadError(AppError):
    """Raised when a template file cannot be read."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("TEMPLATE_READ_ERROR", message, context=context)


class InvalidTemplateError(AppError):
    """Raised when template content fails to parse."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("INVALID_TEMPLATE_ERROR", message, context=context)


class TemplateExecutionError(AppError):
    """Raised when a parsed template fails while rendering against data."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("TEMPLATE_EXECUTION_ERROR", message, context=context)


class DestinationWriteError(AppError):
    """Raised when the output file cannot be created or written."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("DESTINATION_WRITE_ERROR", message, context=context)


class ToolUnavailableError(AppError):
    """Raised when the external PDF converter is not on the execution path."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("TOOL_UNAVAILABLE_ERROR", message, context=context)


class ConverterFailedError(AppError):
    """Raised when the external PDF converter cannot start or exits non-zero."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("CONVERTER_FAILED_ERROR", message, context=context)
