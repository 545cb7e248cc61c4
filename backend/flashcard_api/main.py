"""Flashcard Generator API: application factory and process-wide setup."""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
import time
import uuid
from contextlib import asynccontextmanager

from flashcard_api.core.config import settings

# ── Logging (configured before the routers import their loggers) ─

_LOG_DIR = os.path.join(os.path.dirname(__file__), "..", "logs")
os.makedirs(_LOG_DIR, exist_ok=True)

_log_format = logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
_console = logging.StreamHandler(sys.stdout)
_console.setFormatter(_log_format)
_logfile = logging.handlers.RotatingFileHandler(
    os.path.join(_LOG_DIR, "flashcard_api.log"), maxBytes=5 * 1024 * 1024, backupCount=5
)
_logfile.setFormatter(_log_format)

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    handlers=[_console, _logfile],
)
# The OpenAI SDK logs every HTTP round-trip through httpx
for _name in ("httpx", "httpcore", "openai", "uvicorn.access", "aiosqlite"):
    logging.getLogger(_name).setLevel(logging.WARNING)

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from flashcard_api.db.database import connect_db, disconnect_db
from flashcard_api.routes.auth import router as auth_router
from flashcard_api.routes.flashcard import router as flashcard_router
from flashcard_api.routes.health import router as health_router
from flashcard_api.services.flashcard.errors import AccessDeniedError, PipelineError

logger = logging.getLogger("flashcard_api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Flashcard Generator API (%s)", settings.ENVIRONMENT)
    await connect_db()
    yield
    await disconnect_db()
    logger.info("Shutdown complete")


app = FastAPI(lifespan=lifespan, title="Flashcard Generator API", version="1.0.0")


# ── Middleware ────────────────────────────────────────────
# The last middleware added is the outermost. The body limit must sit inside
# request logging and CORS so its 413 carries X-Request-ID and CORS headers.


# Uploads stay in memory for the whole request
@app.middleware("http")
async def limit_request_body(request: Request, call_next):
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > settings.max_request_body_bytes:
        logger.warning("Rejected %s body of %s bytes", request.url.path, declared)
        return JSONResponse(status_code=413, content={"error": "Request body too large"})
    return await call_next(request)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = uuid.uuid4().hex[:8]
    request.state.request_id = request_id
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as exc:
        elapsed = time.perf_counter() - started
        logger.error("[%s] %s %s raised %s after %.2fs",
                     request_id, request.method, request.url.path, type(exc).__name__, elapsed)
        raise
    elapsed = time.perf_counter() - started
    logger.info("[%s] %s %s -> %d in %.2fs",
                request_id, request.method, request.url.path, response.status_code, elapsed)
    response.headers["X-Request-ID"] = request_id
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
    expose_headers=["X-Request-ID"],
)


# ── Error handlers ────────────────────────────────────────
# Responses built here bypass CORSMiddleware, so the headers are added by hand.


def _error_headers(request: Request) -> dict:
    origin = request.headers.get("origin")
    if origin not in settings.CORS_ORIGINS:
        origin = settings.CORS_ORIGINS[0] if settings.CORS_ORIGINS else "*"
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Credentials": "true",
        "Vary": "Origin",
    }


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError):
    level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    logger.log(level, "[%s] %s %d: %s", _request_id(request), type(exc).__name__, exc.status_code, exc.message)
    headers = _error_headers(request)
    # Only the caller's own credentials earn a challenge; a backend 401 is passed through bare
    if isinstance(exc, AccessDeniedError) and exc.status_code == 401:
        headers["WWW-Authenticate"] = "Bearer"
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers={**_error_headers(request), **(exc.headers or {})},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    request_id = _request_id(request)
    logger.exception("[%s] Unhandled %s", request_id, type(exc).__name__)
    return JSONResponse(
        status_code=500,
        content={"error": "internal", "request_id": request_id},
        headers=_error_headers(request),
    )


# ── Routes ────────────────────────────────────────────────

app.include_router(health_router, tags=["health"])
app.include_router(auth_router, tags=["auth"])
app.include_router(flashcard_router, tags=["flashcards"])
