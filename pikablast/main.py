"""
FastAPI application entry point.

Wires the score ledger into the request handlers and exposes the
``/api/scores``, ``/api/blast``, ``/api/roll``, ``/api/log`` and
``/health`` endpoints.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from pikablast.config import APP_ENV, LOG_DIR, PORT, STATIC_DIR
from pikablast.errors import BlastError, InternalFault, InvalidCategory
from pikablast.schemas import (
    BlastRequest,
    BlastResponse,
    ErrorResponse,
    HealthResponse,
    LogRequest,
    LogResponse,
    RollResponse,
    Scores,
)
from pikablast.services.score_ledger import ScoreLedger
from pikablast.utils.logging_utils import configure_logging, log_frontend, pacific_timestamp

logger = logging.getLogger(__name__)

# Error bodies for malformed JSON, per route
_VALIDATION_ERRORS: dict[str, str] = {
    "/api/blast": InvalidCategory.message,
    "/api/log": "Level and message are required",
}


def get_ledger(request: Request) -> ScoreLedger:
    return request.app.state.ledger


def _log_request(request: Request, status_code: int, started: float) -> None:
    elapsed_ms = round((time.perf_counter() - started) * 1000)
    logger.info(
        f"{request.method} {request.url.path} - {status_code}",
        extra={
            "source": "HTTP",
            "data": {
                "method": request.method,
                "path": request.url.path,
                "ip": request.client.host if request.client else None,
                "userAgent": request.headers.get("user-agent"),
                "statusCode": status_code,
                "responseTime": f"{elapsed_ms}ms",
            },
        },
    )


def _log_invalid_intensity(intensity: Any) -> None:
    logger.warning(
        "Invalid blast intensity",
        extra={"source": "API", "data": {"intensity": intensity}},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging before the first request is served."""
    configure_logging(app.state.log_dir, app.state.env)
    logger.info(f"Pika-Blast server running on port {PORT}", extra={"source": "SERVER"})
    logger.info(f"Environment: {app.state.env}", extra={"source": "SERVER"})
    yield
    logger.info("Shutting down gracefully", extra={"source": "SERVER"})


def create_app(
    ledger: ScoreLedger | None = None,
    log_dir: str | Path = LOG_DIR,
    static_dir: str | Path | None = STATIC_DIR,
    env: str = APP_ENV,
) -> FastAPI:
    app = FastAPI(title="Pika-Blast", version="1.0.0", lifespan=lifespan)
    app.state.ledger = ledger if ledger is not None else ScoreLedger()
    app.state.log_dir = Path(log_dir)
    app.state.env = env

    # -- CORS (allow all origins, the game is served from anywhere) ----------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Request logging -----------------------------------------------------
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        # Unhandled errors escape call_next and are answered with a 500 further out
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            _log_request(request, status_code, started)

    # -- Error handlers ------------------------------------------------------
    @app.exception_handler(BlastError)
    async def blast_error(request: Request, exc: BlastError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        message = _VALIDATION_ERRORS.get(request.url.path, "Invalid request body")
        if request.url.path == "/api/blast":
            body = exc.body if isinstance(exc.body, dict) else {}
            _log_invalid_intensity(body.get("intensity"))
        else:
            logger.warning(
                message,
                extra={"source": "API", "data": {"path": request.url.path, "errors": exc.errors()}},
            )
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            logger.warning(
                "404 Not Found",
                extra={"source": "HTTP", "data": {"path": request.url.path, "method": request.method}},
            )
            return JSONResponse(status_code=404, content={"error": "Not found"})
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error(
            "Unhandled error",
            exc_info=exc,
            extra={
                "source": "SERVER",
                "data": {"error": str(exc), "path": request.url.path, "method": request.method},
            },
        )
        fault = InternalFault()
        return JSONResponse(status_code=fault.status_code, content={"error": fault.message})

    # -- Routes --------------------------------------------------------------

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(timestamp=pacific_timestamp())

    @app.get("/api/scores", response_model=Scores)
    async def get_scores(ledger: ScoreLedger = Depends(get_ledger)):
        """Current counts, no mutation."""
        return Scores(**ledger.snapshot())

    @app.post(
        "/api/blast",
        response_model=BlastResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def record_blast(payload: BlastRequest, ledger: ScoreLedger = Depends(get_ledger)):
        """Count one blast at the intensity the client rolled."""
        try:
            scores = ledger.record(payload.intensity)
        except InvalidCategory:
            _log_invalid_intensity(payload.intensity)
            raise

        message = f"Blast recorded at {payload.intensity} intensity"
        logger.info(message, extra={"source": "API", "data": {"intensity": payload.intensity, "scores": scores}})
        return BlastResponse(scores=Scores(**scores), message=message)

    @app.post("/api/roll", response_model=RollResponse)
    async def roll_blast(ledger: ScoreLedger = Depends(get_ledger)):
        """Roll an intensity server-side and count it."""
        level, scores = ledger.record_one()
        message = f"Blast recorded at {level.value} intensity"
        logger.info(message, extra={"source": "API", "data": {"intensity": level.value, "scores": scores}})
        return RollResponse(intensity=level.value, scores=Scores(**scores), message=message)

    @app.post(
        "/api/log",
        response_model=LogResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def frontend_log(payload: LogRequest):
        """Mirror a browser console entry into the frontend log file."""
        if not payload.level or not payload.message:
            return JSONResponse(status_code=400, content={"error": _VALIDATION_ERRORS["/api/log"]})
        try:
            log_frontend(payload.level, payload.message, payload.stack, payload.data)
        except Exception as exc:
            logger.error(
                "Error processing frontend log",
                extra={"source": "API", "data": {"error": str(exc)}},
            )
            return JSONResponse(status_code=500, content={"error": "Failed to process log"})
        return LogResponse()

    # -- Static frontend (mounted last so /api routes win) -------------------
    if static_dir is not None and Path(static_dir).is_dir():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")

    return app


app = create_app()
