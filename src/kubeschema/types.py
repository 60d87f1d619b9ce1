"""Data types shared by the splitter, validator and CLI.

All types are immutable: a result is built once per document and only
read afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kubeschema.exceptions import ValidationErrors


@dataclass(frozen=True, slots=True)
class Document:
    """Raw bytes of one YAML document and the file it came from."""

    content: bytes
    file_name: str

    @property
    def is_blank(self) -> bool:
        """Whether the span holds no bytes at all."""
        return not self.content


@dataclass(frozen=True, slots=True)
class Violation:
    """One way a resource fails to conform to its schema."""

    path: str
    message: str
    validator: str = ""

    def __str__(self) -> str:
        return f"{self.message} (at '{self.path}')"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Validation outcome for a single document.

    ``complete`` is False when processing stopped early; the result then
    only holds the fields extracted before the failure, and the failure
    itself is in the report's combined error.
    """

    file_name: str
    kind: str = ""
    api_version: str = ""
    errors: tuple[Violation, ...] = ()
    complete: bool = True

    @property
    def is_empty(self) -> bool:
        """Whether the document held no resource."""
        return not self.kind

    @property
    def is_valid(self) -> bool:
        """Whether the resource passed schema validation."""
        return not self.errors


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Results for every document of one file plus the combined error."""

    results: list[ValidationResult] = field(default_factory=list)
    error: ValidationErrors | None = None

    @property
    def failed(self) -> bool:
        """Whether any document was invalid or could not be processed."""
        return self.error is not None or any(
            not result.is_valid for result in self.results
        )
