"""FastAPI application exposing the AMM core.

AmmError subclasses become 4xx responses carrying the error's code.
InvariantViolation becomes a 500 with its own code: it means the pool math
is broken and must reach an operator, not the client's retry logic.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cpamm import __version__
from cpamm.api.endpoints import router
from cpamm.errors import AmmError, InvariantViolation, PoolExists, PoolNotFound
from cpamm.logging_config import configure_logging

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("AMM_HOST", "127.0.0.1")
PORT = int(os.environ.get("AMM_PORT", "8000"))
DEBUG = os.environ.get("AMM_DEBUG", "false").lower() in ("true", "1", "yes")
LOG_LEVEL = os.environ.get("AMM_LOG_LEVEL", "INFO")
JSON_LOGS = os.environ.get("AMM_JSON_LOGS", "false").lower() in ("true", "1", "yes")

app = FastAPI(
    title="Constant Product AMM",
    description="Multi-pool constant product market maker core",
    version=__version__,
)


def _status_for(error: AmmError) -> int:
    if isinstance(error, PoolNotFound):
        return 404
    if isinstance(error, PoolExists):
        return 409
    return 400


@app.exception_handler(AmmError)
async def amm_error_handler(request: Request, exc: AmmError) -> JSONResponse:
    logger.info("request_rejected", path=request.url.path, error=exc.code, detail=str(exc))
    return JSONResponse(
        status_code=_status_for(exc),
        content={"error": exc.code, "detail": str(exc)},
    )


@app.exception_handler(InvariantViolation)
async def invariant_violation_handler(request: Request, exc: InvariantViolation) -> JSONResponse:
    logger.critical(
        "invariant_violation_surfaced",
        path=request.url.path,
        pool_id=exc.pool_id,
        k_before=exc.k_before,
        k_after=exc.k_after,
    )
    return JSONResponse(
        status_code=500,
        content={"error": exc.code, "detail": str(exc)},
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the AMM API server.

    Configuration via environment variables:
    - AMM_HOST: Host to bind to (default: 127.0.0.1)
    - AMM_PORT: Port to bind to (default: 8000)
    - AMM_DEBUG: Enable debug/reload mode (default: false)
    - AMM_LOG_LEVEL: Minimum log level (default: INFO)
    - AMM_JSON_LOGS: Emit JSON log lines (default: false)
    - AMM_FEE_BPS, AMM_CUSTODY_ADDRESS: See cpamm.config.AmmConfig.from_env
    """
    configure_logging(LOG_LEVEL, json_logs=JSON_LOGS)
    # Uvicorn's default single worker; the AMM state lives in this process
    uvicorn.run(
        "cpamm.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
