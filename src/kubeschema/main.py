"""Main CLI entry point for kubeschema."""

import sys

import uvloop

from kubeschema.cli import CLIRunner
from kubeschema.logger import flush_all_handlers, get_logger

logger = get_logger(__name__)


async def async_main() -> int:
    """Run the CLI asynchronously and return its exit status."""
    logger.debug("CLI started")
    runner = CLIRunner()
    try:
        return await runner.run()
    except Exception:
        logger.exception("CLI encountered an error")
        raise


def main() -> None:
    """Run the CLI application on the uvloop event loop."""
    try:
        exit_code = uvloop.run(async_main())
    except KeyboardInterrupt:
        logger.info("Cancelled by user")
        exit_code = 1
    except Exception:
        logger.exception("Unexpected error")
        exit_code = 1
    flush_all_handlers()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
