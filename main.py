"""
docmark MCP server entrypoint.

Transport and log level come from DOCMARK_TRANSPORT and DOCMARK_LOG_LEVEL.
Logs go to stderr because stdout carries the stdio transport.
"""

import logging
import sys

from core.config import get_formatter_config
from core.server import server

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s:%(name)s:%(message)s",
        stream=sys.stderr,
    )


def main() -> None:
    config = get_formatter_config()
    configure_logging(config.log_level)

    # Registers the tools on the shared server.
    import docmark.tools  # noqa: F401

    logger.info(f"Starting docmark server (transport={config.transport}, highlighter={config.highlight_backend})")
    server.run(transport=config.transport)


if __name__ == "__main__":
    main()
