"""FastAPI application for the best-execution router."""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bestdex import __version__
from bestdex.api.endpoints import router, router_error_handler
from bestdex.errors import RouterError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("BESTDEX_HOST", "0.0.0.0")
PORT = int(os.environ.get("BESTDEX_PORT", "8000"))
DEBUG = os.environ.get("BESTDEX_DEBUG", "false").lower() in ("true", "1", "yes")
LOG_LEVEL = os.environ.get("BESTDEX_LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()

# Maximum request body size (10 MB by default)
MAX_REQUEST_SIZE = int(os.environ.get("BESTDEX_MAX_REQUEST_SIZE", str(10 * 1024 * 1024)))


def configure_logging(level: str = LOG_LEVEL) -> None:
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping().get(level, logging.INFO)
        ),
    )


app = FastAPI(
    title="bestdex",
    description="Best-execution multi-venue order router",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        logger.info("request_too_large", path=request.url.path, content_length=content_length)
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


app.include_router(router)
app.add_exception_handler(RouterError, router_error_handler)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the router API server.

    Configuration via environment variables:
    - BESTDEX_HOST: Host to bind to (default: 0.0.0.0)
    - BESTDEX_PORT: Port to bind to (default: 8000)
    - BESTDEX_DEBUG: Enable debug/reload mode (default: false)
    - BESTDEX_LOG_LEVEL: Log level (default: INFO, DEBUG in debug mode)
    - BESTDEX_MAX_REQUEST_SIZE: Largest accepted body in bytes (default: 10 MB)
    - BESTDEX_SNAPSHOT_PATH, BESTDEX_POSITION_MANAGERS, BESTDEX_MAX_SHARES:
      see create_default_lens
    """
    configure_logging()
    uvicorn.run(
        "bestdex.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
