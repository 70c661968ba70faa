"""FastAPI application for the fee engine.

The API does not build an engine itself: the process embedding it installs
one with fee_engine.api.endpoints.set_engine() before serving.
"""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI

from fee_engine import __version__
from fee_engine.api.endpoints import router

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("FEE_ENGINE_HOST", "127.0.0.1")
PORT = int(os.environ.get("FEE_ENGINE_PORT", "8000"))
DEBUG = os.environ.get("FEE_ENGINE_DEBUG", "false").lower() in ("true", "1", "yes")

app = FastAPI(
    title="Fee Engine",
    description="Protocol-fee processing engine: registry, configuration and previews",
    version=__version__,
)

app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - FEE_ENGINE_HOST: Host to bind to (default: 127.0.0.1)
    - FEE_ENGINE_PORT: Port to bind to (default: 8000)
    - FEE_ENGINE_DEBUG: Enable debug logging and reload mode (default: false)
    """
    log_level = logging.DEBUG if DEBUG else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )
    uvicorn.run(
        "fee_engine.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
