import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gamehub.api import game_list
from gamehub.core.config import settings
from gamehub.core.db import close_pool, get_pool
from gamehub.core.errors import GameServiceError
from gamehub.db.sql import bootstrap_schema


logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    pool = await get_pool()
    async with pool.acquire() as conn:
        await bootstrap_schema(conn)
    yield
    await close_pool()


app = FastAPI(
    title="Gamehub Backend",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(game_list.router)


def _err_envelope(status_code: int, error: str, message: str, details: Any = None, headers=None):
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "details": details},
        headers=headers,
    )


@app.exception_handler(GameServiceError)
async def _game_error_handler(request: Request, exc: GameServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _err_envelope(exc.status_code, exc.error, exc.message, exc.details)


@app.exception_handler(StarletteHTTPException)
async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
    return _err_envelope(
        exc.status_code, "http_error", str(exc.detail), headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def _validation_exc_handler(request: Request, exc: RequestValidationError):
    errors = [{k: v for k, v in e.items() if k != "ctx"} for e in exc.errors()]
    return _err_envelope(422, "validation_error", "request validation failed", errors)


@app.exception_handler(Exception)
async def _unhandled_exc_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _err_envelope(500, "internal_error", "internal server error", {"type": type(exc).__name__})


@app.get("/health")
async def health():
    return {"status": "ok", "version": app.version}
