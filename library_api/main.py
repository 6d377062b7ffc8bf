from __future__ import annotations

import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from library_api.api.router import api_router
from library_api.core.config import settings
from library_api.core.errors import AppError, InternalError, ValidationError
from library_api.core.logging import configure_logging
from library_api.core.otel import init_otel
from library_api.db.init_db import init_db
from library_api.middleware.request_id import RequestIdMiddleware
from library_api.schemas.common import ErrorEnvelope
from starlette.exceptions import HTTPException as StarletteHTTPException

configure_logging()
logger = logging.getLogger(__name__)


def _error_response(
    status_code: int,
    message: str,
    error: dict | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorEnvelope(message=message, error=error)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_response(exc.status_code, exc.message, exc.to_dict())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    err = ValidationError("Validation failed", details=jsonable_encoder(exc.errors()))
    return _error_response(err.status_code, err.message, err.to_dict())


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if (exc.status_code == 404 and exc.detail == "Not Found") or exc.status_code == 405:
        # No route matched the path, or none matched the method on it.
        return _error_response(
            404,
            "Not Found",
            {"path": request.url.path, "message": "API endpoint not found"},
        )
    return _error_response(
        exc.status_code,
        str(exc.detail),
        {"kind": "HTTPError"},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    err = InternalError("Something went wrong!")
    error = err.to_dict()
    if not settings.is_production:
        error["details"] = {
            "type": type(exc).__name__,
            "message": str(exc),
            "traceback": traceback.format_exception(type(exc), exc, exc.__traceback__),
        }
    # Runs outside RequestIdMiddleware, so the header is set here.
    request_id = getattr(request.state, "request_id", None)
    headers = {"X-Request-Id": request_id} if request_id else None
    return _error_response(err.status_code, err.message, error, headers=headers)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        init_db()
    logger.info("%s started (env=%s)", settings.api_name, settings.env)
    yield


def create_app() -> FastAPI:
    app = FastAPI(title=settings.api_name, lifespan=lifespan)

    # Credentials stay off so a "*" origin is valid.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "X-Request-Id"],
    )
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_router)

    init_otel(app)
    return app


app = create_app()
