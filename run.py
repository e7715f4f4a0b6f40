"""Entry point for the API gateway.

Starts the gateway under Uvicorn.  Intended to be executed from the
project root, for example in Docker, where you only specify a single
Python file to run.

Configuration such as HOST, PORT, SERVICE_TARGETS and GATEWAY_ROUTES
is read from environment variables; see ``api_gateway/app/core/config.py``
for the full list.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from api_gateway.app.core.config import settings
from api_gateway.app.main import app


async def main() -> None:
    """Serve the gateway until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info("Starting gateway on %s:%s", settings.host, settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
