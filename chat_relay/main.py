"""
Main module for the chat relay server.
"""

from __future__ import annotations

import asyncio

import structlog
import uvicorn

from chat_relay.config import Configuration
from chat_relay.logging_utils import configure_logging
from chat_relay.relay.app import create_app

logger = structlog.get_logger(__name__)


async def main() -> None:
    """Main entry point - serve the relay until SIGINT/SIGTERM."""
    config = Configuration()
    configure_logging(config.get_logging_config())

    relay_config = config.get_relay_config()
    server = uvicorn.Server(
        uvicorn.Config(
            create_app(config),
            host=relay_config["host"],
            port=relay_config["port"],
            log_config=None,
        )
    )

    logger.info(
        "Starting chat relay",
        host=relay_config["host"],
        port=relay_config["port"],
        path=relay_config["path"],
    )

    # uvicorn installs its own signal handlers and drains open streams
    try:
        await server.serve()
    except Exception as e:
        logger.error("Application error", error=str(e))
        raise
    finally:
        logger.info("Application shutdown complete")


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
