"""CLI argument parser for kubeschema."""

import argparse
import os
from argparse import Namespace
from collections.abc import Sequence

from kubeschema.constants import DEFAULT_STDIN_FILENAME, ENV_FILENAME


class CLIParser:
    """Command-line argument parser for kubeschema."""

    def parse_args(self, argv: Sequence[str] | None = None) -> Namespace:
        """Parse command-line arguments.

        Args:
            argv: Arguments to parse, defaults to ``sys.argv[1:]``

        Returns:
            Namespace: Parsed arguments namespace.

        """
        parser = self._create_main_parser()
        self._add_schema_options(parser)
        self._add_runtime_options(parser)
        self._add_output_options(parser)
        return parser.parse_args(argv)

    def _create_main_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="kubeschema",
            description="Validate Kubernetes YAML manifests against the "
            "Kubernetes JSON schemas",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Validate one or more files
  %(prog)s deployment.yaml service.yaml

  # Validate rendered helm output from stdin
  helm template ./chart | %(prog)s -f chart.yaml

  # Validate against a specific Kubernetes version
  %(prog)s -v 1.18.0 deployment.yaml

  # Use an offline copy of the schemas
  %(prog)s --schema-location file:///opt/kubernetes-json-schema app.yaml

Environment:
  KUBESCHEMA_SCHEMA_LOCATION     overrides --schema-location
  KUBESCHEMA_KUBERNETES_VERSION  overrides --kubernetes-version
  KUBESCHEMA_FILENAME            default for --filename
            """,
        )
        parser.add_argument(
            "files",
            nargs="*",
            metavar="FILE",
            help="YAML files to validate; '-' or nothing reads stdin",
        )
        parser.add_argument(
            "--version",
            action="store_true",
            help="Show kubeschema version and exit",
        )
        return parser

    def _add_schema_options(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "-v",
            "--kubernetes-version",
            default=None,
            help="Kubernetes version to validate against (default: master)",
        )
        parser.add_argument(
            "--schema-location",
            default=None,
            help=(
                "Base URL, file:// URL or directory used to load schemas. "
                "Also set with KUBESCHEMA_SCHEMA_LOCATION"
            ),
        )
        parser.add_argument(
            "--no-cache",
            action="store_true",
            help="Do not read or write the on-disk schema cache",
        )
        parser.add_argument(
            "--clear-cache",
            action="store_true",
            help="Delete cached schemas before validating",
        )

    def _add_runtime_options(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "-f",
            "--filename",
            default=os.getenv(ENV_FILENAME) or DEFAULT_STDIN_FILENAME,
            help="File name displayed for YAML read from stdin",
        )
        parser.add_argument(
            "--concurrency",
            type=int,
            default=None,
            help="Maximum number of documents validated at the same time",
        )
        parser.add_argument(
            "--write-config",
            action="store_true",
            help="Write a default settings file and exit",
        )

    def _add_output_options(self, parser: argparse.ArgumentParser) -> None:
        verbosity = parser.add_mutually_exclusive_group()
        verbosity.add_argument(
            "--verbose",
            action="store_true",
            help="Show debug logging",
        )
        verbosity.add_argument(
            "--quiet",
            action="store_true",
            help="Only log errors",
        )
        parser.add_argument(
            "--no-color",
            action="store_true",
            help="Disable colored output",
        )
