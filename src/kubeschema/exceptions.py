"""Exception classes for kubeschema operations.

Per-document failures are raised as one of the ``KubeschemaError``
subclasses and gathered into a ``ValidationErrors`` value by the caller,
so a single broken document never hides the results of its siblings.
"""

from collections.abc import Iterable, Iterator


class KubeschemaError(Exception):
    """Base exception for kubeschema operations."""

    error_prefix: str = "Operation failed"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the file or resource that failed.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


class DecodeError(KubeschemaError):
    """Raised when a document is not well-formed YAML."""

    error_prefix = "Failed to decode YAML"


class MissingFieldError(KubeschemaError):
    """Raised when ``kind`` or ``apiVersion`` is absent, null or mistyped."""

    error_prefix = "Missing field"

    def __init__(
        self, field: str, target: str | None = None, message: str | None = None
    ) -> None:
        """Initialize error for the offending field.

        Args:
            field: Name of the field that could not be extracted.
            target: Optional file name the document came from.
            message: Optional message, defaults to a missing-key message.

        """
        super().__init__(message or f"Missing {field} key", target)
        self.field = field


class SchemaError(KubeschemaError):
    """Raised when a schema cannot be fetched, parsed or applied."""

    error_prefix = "Schema error"

    def __init__(
        self,
        message: str,
        url: str | None = None,
        target: str | None = None,
    ) -> None:
        """Initialize error with the schema URL involved.

        Args:
            message: Error message describing the failure.
            url: Schema URL that was being loaded.
            target: Optional file name the document came from.

        """
        super().__init__(message, target)
        self.url = url

    def __str__(self) -> str:
        """Return formatted error message including the schema URL."""
        base = super().__str__()
        if self.url:
            return f"{base} (schema: {self.url})"
        return base


class ConfigurationError(KubeschemaError):
    """Raised when settings cannot be loaded or contain invalid values."""

    error_prefix = "Invalid configuration"


class ValidationErrors(Exception):
    """Combined error holding every per-document failure in order."""

    def __init__(self, errors: Iterable[Exception] = ()) -> None:
        """Initialize the combined error.

        Args:
            errors: Individual errors, kept in the order given.

        """
        self.errors: list[Exception] = list(errors)
        super().__init__(self.errors)

    def append(self, error: Exception) -> None:
        """Add one error, flattening nested combined errors."""
        if isinstance(error, ValidationErrors):
            self.errors.extend(error.errors)
        else:
            self.errors.append(error)

    def extend(self, errors: Iterable[Exception]) -> None:
        """Add several errors in order."""
        for error in errors:
            self.append(error)

    def error_or_none(self) -> "ValidationErrors | None":
        """Return self when at least one error was collected."""
        return self if self.errors else None

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[Exception]:
        return iter(self.errors)

    def __str__(self) -> str:
        """List every collected error."""
        count = len(self.errors)
        if count == 1:
            return f"1 error occurred:\n\t* {self.errors[0]}"
        lines = "\n".join(f"\t* {error}" for error in self.errors)
        return f"{count} errors occurred:\n{lines}"
