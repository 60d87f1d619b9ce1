"""Rendering of validation results.

Uses print() for result lines so they go to stdout regardless of the
console log level; diagnostics go through the logger on stderr.
"""

from __future__ import annotations

import os
import sys
from typing import TextIO

from kubeschema.constants import RESULT_COLORS
from kubeschema.types import ValidationResult


def color_enabled(stream: TextIO, *, no_color: bool = False) -> bool:
    """Whether ANSI colors should be written to a stream.

    Colors are off with ``--no-color``, when ``NO_COLOR`` is set, or when
    the stream is not a terminal.
    """
    if no_color or os.getenv("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class ResultPrinter:
    """Prints one line per result plus one line per violation."""

    def __init__(
        self, stream: TextIO | None = None, *, color: bool = False
    ) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.color = color

    def _paint(self, status: str, text: str) -> str:
        if not self.color:
            return text
        return f"{RESULT_COLORS[status]}{text}{RESULT_COLORS['RESET']}"

    def format_result(self, result: ValidationResult) -> list[str]:
        """Return the lines describing one result."""
        if not result.is_valid:
            lines = [
                self._paint(
                    "invalid",
                    f"The file {result.file_name} contains an invalid "
                    f"{result.kind}",
                )
            ]
            lines.extend(
                f"--> {self._paint('empty', str(violation))}"
                for violation in result.errors
            )
            return lines
        if result.is_empty:
            return [self._paint("empty", f"The file {result.file_name} is empty")]
        return [
            self._paint(
                "valid",
                f"The file {result.file_name} contains a valid {result.kind}",
            )
        ]

    def print_results(self, results: list[ValidationResult]) -> bool:
        """Print results in order.

        Incomplete results are skipped; their failure is logged by the
        caller.

        Returns:
            True when every result is complete and valid or empty

        """
        success = True
        for result in results:
            if not result.complete:
                success = False
                continue
            if not result.is_valid:
                success = False
            for line in self.format_result(result):
                print(line, file=self.stream)
        return success
