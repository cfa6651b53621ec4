"""Main entry point for the sonos command line."""

import asyncio
import logging
import sys
from typing import List, Optional

import structlog

from .config import LOG_LEVEL
from .errors import DeviceError


def setup_logging(level: str = LOG_LEVEL):
    """Configure structured logging.

    stdout carries command output, so log lines go to stderr.
    """
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(message)s",
        level=getattr(logging, level, logging.WARNING),
        stream=sys.stderr
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


async def main(args: List[str], store=None) -> int:
    """Run one command and return the process exit code."""
    logger = structlog.get_logger()

    # Import here to ensure logging is configured first
    from .commands import CommandDispatcher, parse_command, usage_text
    from .config import ConfigStore
    from .models import CommandName
    from .sonos_controller import SonosController

    command = parse_command(args)
    if command.name == CommandName.MISSING:
        print(usage_text())
        return 1

    store = store or ConfigStore()
    resolved = store.resolve_address()
    controller = SonosController(resolved.address)
    dispatcher = CommandDispatcher(controller, store, resolved)

    try:
        result = await dispatcher.dispatch(command)
    except DeviceError as e:
        logger.debug("command_failed", command=str(command), error=str(e))
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1
    finally:
        await controller.close()

    print(result.message)
    return result.exit_code


def run(argv: Optional[List[str]] = None):
    """Synchronous entry point."""
    setup_logging()
    args = sys.argv[1:] if argv is None else argv
    try:
        code = asyncio.run(main(args))
    except KeyboardInterrupt:
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    run()
