"""CLI runner for kubeschema.

Reads manifests from files or stdin, validates them and renders the
results. Files are handled in order; a file that cannot be read or a
document that cannot be processed is reported without stopping the run.
"""

from __future__ import annotations

import sys
from argparse import Namespace
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path
from typing import BinaryIO, TextIO

from kubeschema import __version__
from kubeschema.config import ConfigManager, Settings
from kubeschema.exceptions import ConfigurationError
from kubeschema.logger import get_logger, set_console_level
from kubeschema.schema import (
    SchemaCache,
    create_http_session,
    create_schema_fetcher,
)
from kubeschema.types import ValidationReport
from kubeschema.ui import ResultPrinter, color_enabled
from kubeschema.validator import ResourceValidator

from .parser import CLIParser

logger = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def read_stdin_lines(stream: BinaryIO) -> bytes:
    """Read every line from stdin, each terminated by ``\\n``."""
    return b"".join(line + b"\n" for line in stream.read().splitlines())


class CLIRunner:
    """CLI command runner and orchestrator."""

    def __init__(
        self,
        argv: Sequence[str] | None = None,
        stdin: TextIO | BinaryIO | None = None,
        stdout: TextIO | None = None,
        config_manager: ConfigManager | None = None,
    ) -> None:
        """Initialize CLI runner.

        Args:
            argv: Command-line arguments, defaults to ``sys.argv[1:]``
            stdin: Input stream used when no files are given
            stdout: Output stream for results
            config_manager: Settings file manager

        """
        self.argv = argv
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.config_manager = config_manager or ConfigManager()

    def build_settings(self, args: Namespace) -> Settings:
        """Apply command-line flags on top of the settings file.

        Raises:
            ConfigurationError: If the settings file or a flag is invalid

        """
        settings = self.config_manager.load_settings()
        overrides: dict[str, object] = {}
        if args.kubernetes_version:
            overrides["kubernetes_version"] = args.kubernetes_version
        if args.schema_location:
            overrides["schema_location"] = args.schema_location
        if args.concurrency is not None:
            if args.concurrency < 1:
                msg = "--concurrency must be at least 1"
                raise ConfigurationError(msg)
            overrides["max_concurrency"] = args.concurrency
        if args.no_cache:
            overrides["cache"] = replace(settings.cache, enabled=False)
        return replace(settings, **overrides)

    def _stdin_bytes(self) -> bytes:
        stream = getattr(self.stdin, "buffer", self.stdin)
        return read_stdin_lines(stream)

    def _stdin_is_piped(self) -> bool:
        isatty = getattr(self.stdin, "isatty", None)
        return not (isatty and isatty())

    def _collect_sources(
        self, args: Namespace
    ) -> list[tuple[str, Path | None]] | None:
        """Return (display name, path) pairs, path None meaning stdin."""
        files: list[str] = args.files
        if not files or files[0] == "-":
            if not self._stdin_is_piped():
                logger.error("Missing filename in argument")
                return None
            return [(args.filename, None)]
        return [(name, Path(name)) for name in files]

    def _report_errors(self, report: ValidationReport) -> None:
        if report.error is None:
            return
        for error in report.error:
            logger.error("%s", error)

    async def run(self) -> int:
        """Run the CLI application.

        Returns:
            Process exit status

        """
        args = CLIParser().parse_args(self.argv)

        if args.version:
            print(f"kubeschema v{__version__}", file=self.stdout)
            return EXIT_SUCCESS

        try:
            settings = self.build_settings(args)
        except ConfigurationError as e:
            logger.error("%s", e)
            return EXIT_FAILURE

        if args.verbose:
            set_console_level("DEBUG")
        elif args.quiet:
            set_console_level("ERROR")
        else:
            set_console_level(settings.console_log_level)

        if args.write_config:
            path = self.config_manager.save_default_config()
            print(f"Wrote {path}", file=self.stdout)
            return EXIT_SUCCESS

        if args.clear_cache:
            removed = SchemaCache(settings.cache.directory).clear()
            logger.info("Removed %d cached schema(s)", removed)
            if not args.files and not self._stdin_is_piped():
                return EXIT_SUCCESS

        sources = self._collect_sources(args)
        if sources is None:
            return EXIT_FAILURE

        printer = ResultPrinter(
            self.stdout, color=color_enabled(self.stdout, no_color=args.no_color)
        )
        return await self._validate_sources(settings, sources, printer)

    async def _validate_sources(
        self,
        settings: Settings,
        sources: list[tuple[str, Path | None]],
        printer: ResultPrinter,
    ) -> int:
        success = True
        async with create_http_session(
            settings.network, settings.max_concurrency
        ) as session:
            validator = ResourceValidator(
                settings, create_schema_fetcher(settings, session)
            )
            logger.debug(
                "Validating against Kubernetes %s schemas at %s",
                validator.kubernetes_version,
                validator.base_url,
            )
            for name, path in sources:
                if path is None:
                    data = self._stdin_bytes()
                else:
                    try:
                        data = path.read_bytes()
                    except OSError as e:
                        logger.error("Failed to open file %s: %s", name, e)
                        success = False
                        continue

                report = await validator.validate(data, name)
                if not printer.print_results(report.results):
                    success = False
                if report.error is not None:
                    self._report_errors(report)
                    success = False

        return EXIT_SUCCESS if success else EXIT_FAILURE
