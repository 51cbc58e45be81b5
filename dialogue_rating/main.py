"""
FastAPI application bootstrap with: \n
- Lifespan-managed schema creation and dialogue loading \n
- CORS configured for the rating frontend \n
- JSON error rendering for the application error taxonomy and unexpected failures \n

Environment contract (from `settings`): \n
- FRONTEND_URL: allowed CORS origin. \n
- API_PREFIX: path prefix of the API router. \n
- DIALOGUES_DIR / DIALOGUES_MANIFEST: dialogue source files. \n
- HOST / PORT: bind address of `run()`. \n
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dialogue_rating.api.fast_api import router
from dialogue_rating.database.config.config import settings
from dialogue_rating.database.config.connection_engine import create_schema
from dialogue_rating.database.core.bootstrap import populate_dialogues
from dialogue_rating.logging_config import setup_logging

setup_logging(settings.LOG_LEVEL.upper())

logger = logging.getLogger("uvicorn")
"""Logger instance for capturing and emitting Uvicorn server logs."""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    App lifespan manager.

    Notes
    ------------
    - On startup (before yielding):
        * Create any missing table.
        * Load new dialogue files (insert-if-absent, safe across restarts).
    - Nothing to release on shutdown: sessions are request-scoped.
    """
    create_schema()
    inserted = populate_dialogues()
    logger.info("Dialogue store ready (%d new dialogues)", inserted)
    yield
    logger.info("App shutting down")


app = FastAPI(title="Dialogue Rating API", lifespan=lifespan)
"""Instantiates the FastAPI application; `lifespan` prepares the database on startup."""

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Render every HTTP error, including the application errors, as `{"error": ...}`."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies and query strings are reported as 400."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def server_error_handler(request: Request, exc: Exception):
    """Anything unexpected is logged with its traceback and reported as a bare 500."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Server error"})


app.include_router(router, prefix=settings.API_PREFIX)


def run() -> None:
    """Entry point of `dialogue-rating-server`."""
    uvicorn.run("dialogue_rating.main:app", host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
