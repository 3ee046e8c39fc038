"""Exception hierarchy for export request building and execution.

Every error raised by the export package inherits from SheetExportError,
allowing callers to catch all module-specific errors at once.
"""

from collections.abc import Iterable


ErrorDetails = dict[str, str | int | list[str] | None]


class SheetExportError(Exception):
    """Base exception for export operations."""

    def __init__(self, message: str) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
        self.message = message

    def to_dict(self) -> ErrorDetails:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {"error_type": type(self).__name__, "message": self.message}


class ValidationError(SheetExportError):
    """Raised when a setter receives a value outside its field's domain.

    The configuration is left unmodified when this is raised.
    """

    def __init__(
        self,
        field: str,
        message: str,
        *,
        allowed_values: Iterable[object] | None = None,
    ) -> None:
        """Initialize the validation error.

        Args:
            field: Name of the offending field.
            message: Human-readable error description.
            allowed_values: Legal values when the domain is finite.
        """
        self.field = field
        self.allowed_values = (
            [str(v) for v in allowed_values] if allowed_values is not None else None
        )
        text = f"Invalid value for '{field}': {message}"
        if self.allowed_values:
            text += f" (allowed: {', '.join(self.allowed_values)})"
        super().__init__(text)

    def to_dict(self) -> ErrorDetails:
        """Convert error to dictionary for logging/serialization."""
        details = super().to_dict()
        details["field"] = self.field
        details["allowed_values"] = self.allowed_values
        return details


class ConfigurationError(SheetExportError):
    """Raised on a structural cross-field violation or an unknown preset."""

    def __init__(
        self,
        message: str,
        *,
        valid_names: Iterable[str] | None = None,
    ) -> None:
        """Initialize the configuration error.

        Args:
            message: Human-readable error description.
            valid_names: Accepted names, when the error is a failed lookup.
        """
        self.valid_names = list(valid_names) if valid_names is not None else None
        if self.valid_names:
            message = f"{message} (valid: {', '.join(self.valid_names)})"
        super().__init__(message)

    def to_dict(self) -> ErrorDetails:
        """Convert error to dictionary for logging/serialization."""
        details = super().to_dict()
        details["valid_names"] = self.valid_names
        return details


class NotFoundError(SheetExportError):
    """Raised when a sheet cannot be found by its display name."""

    def __init__(
        self,
        name: str,
        message: str,
        *,
        available: Iterable[str] | None = None,
    ) -> None:
        """Initialize the error with the missing sheet name.

        Args:
            name: The sheet name that was looked up.
            message: Human-readable error description.
            available: Sheet names present in the document, if known.
        """
        self.name = name
        self.available = list(available) if available is not None else None
        super().__init__(message)

    def to_dict(self) -> ErrorDetails:
        """Convert error to dictionary for logging/serialization."""
        details = super().to_dict()
        details["name"] = self.name
        details["available"] = self.available
        return details


class InvalidRangeError(SheetExportError):
    """Raised when a range address is malformed or cannot be resolved."""

    def __init__(
        self,
        a1_notation: str,
        message: str,
        *,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the range error.

        Args:
            a1_notation: The range address that failed.
            message: Human-readable error description.
            cause: Underlying exception that caused the failure.
        """
        self.a1_notation = a1_notation
        self.cause = cause
        super().__init__(f"Invalid range '{a1_notation}': {message}")

    def to_dict(self) -> ErrorDetails:
        """Convert error to dictionary for logging/serialization."""
        details = super().to_dict()
        details["a1_notation"] = self.a1_notation
        return details


class ExportFailedError(SheetExportError):
    """Raised when the export request fails.

    Covers both non-success responses and transport-level faults.

    Attributes:
        status_code: HTTP status code, or None for transport faults.
        body: Response body text, if a response was received.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.cause = cause

    def to_dict(self) -> ErrorDetails:
        """Convert error to dictionary for logging/serialization."""
        details = super().to_dict()
        details["status_code"] = self.status_code
        return details
