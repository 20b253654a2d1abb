"""FastAPI application for the exchange.

Note: Rate limiting is intentionally not implemented at the application level.
It should be handled at the infrastructure layer (reverse proxy / load balancer).
"""

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cpamm import __version__
from cpamm.api.endpoints import router
from cpamm.config import Settings, configure_logging
from cpamm.errors import ExchangeError, TransferFailed
from cpamm.safe_int import SafeIntError

logger = structlog.get_logger()

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

app = FastAPI(
    title="cpamm",
    description="Constant product AMM pool engine",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE or a malformed Content-Length."""
    content_length = request.headers.get("content-length")
    if content_length:
        try:
            size = int(content_length)
        except ValueError:
            return JSONResponse(status_code=400, content={"detail": "Invalid Content-Length header"})
        if size > MAX_REQUEST_SIZE:
            return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(ExchangeError)
async def exchange_error_handler(request: Request, exc: ExchangeError) -> JSONResponse:
    """Report rejected operations with their error code."""
    status = 409 if isinstance(exc, TransferFailed) else 400
    logger.info("request_rejected", path=request.url.path, error=exc.code, detail=str(exc))
    return JSONResponse(status_code=status, content={"error": exc.code, "detail": str(exc)})


@app.exception_handler(SafeIntError)
async def arithmetic_error_handler(request: Request, exc: SafeIntError) -> JSONResponse:
    logger.info("request_rejected", path=request.url.path, error="ARITHMETIC_ERROR", detail=str(exc))
    return JSONResponse(status_code=400, content={"error": "ARITHMETIC_ERROR", "detail": str(exc)})


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the exchange API server.

    Configuration via environment variables (see cpamm.config.Settings).
    """
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(
        "cpamm.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
