# troop_manager/core/error_handlers.py
"""
Exception handlers producing the {success: false, error, details?} envelope
"""

import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from pymongo.errors import DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config.settings import settings
from ..utilities.response import error_response
from .exceptions import AppException, ConflictError, InternalError

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def _field_path(location) -> str:
    # ("body", "address", "city") -> "address.city"
    parts = [str(part) for part in location if part not in ("body", "query", "path")]
    return ".".join(parts) or ".".join(str(part) for part in location)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.error_code}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error_code}: {exc.message}")

    headers = BEARER_CHALLENGE if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": _field_path(error.get("loc", ())), "message": error.get("msg", "Invalid value")}
        for error in exc.errors()
    ]
    logger.info(f"{request.method} {request.url.path} -> validation failed: {details}")
    return error_response("Validation error", status.HTTP_400_BAD_REQUEST, details=details)


async def duplicate_key_handler(request: Request, exc: DuplicateKeyError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} -> duplicate key: {exc.details}")
    conflict = ConflictError()
    return JSONResponse(status_code=conflict.status_code, content=conflict.to_dict())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"Route {request.url.path} not found"
    else:
        message = str(exc.detail)

    return error_response(message, exc.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}: {exc}")

    internal = InternalError()
    if settings.DEBUG:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return error_response(str(exc) or internal.message, internal.status_code, stack=stack)

    return JSONResponse(status_code=internal.status_code, content=internal.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
