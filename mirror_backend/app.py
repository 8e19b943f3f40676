"""
FastAPI application entry point for the asset mirror.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mirror_backend.config import get_settings
from mirror_backend.routes import router
from shared.errors import AssetMirrorError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, **extra},
    )


async def handle_mirror_error(request: Request, exc: AssetMirrorError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Error in %s: %s", request.url.path, exc.message)
    return _error_response(exc.status_code, exc.message, **exc.extra)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return _error_response(400, "; ".join(problems) or "Invalid request")


async def handle_http_error(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error in %s", request.url.path)
    return _error_response(500, str(exc) or exc.__class__.__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title="Asset Mirror Backend (FastAPI)", version="0.1.0")
    app.add_exception_handler(AssetMirrorError, handle_mirror_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.include_router(router, prefix=settings.api_prefix)

    @app.get("/")
    def root():
        return {"success": True, "message": "API is running..."}

    return app


app = create_app()
