import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from dashboard.core.store import RecordStoreError

logger = logging.getLogger("dashboard.errors")


def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.info("HTTPException %s path=%s", exc.status_code, request.url.path)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("ValidationError path=%s", request.url.path)
    return JSONResponse(status_code=422, content={"detail": "Invalid request"})


def record_store_exception_handler(request: Request, exc: RecordStoreError):
    # the store layer already logged the stack trace
    logger.warning("RecordStoreError path=%s: %s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Record store unavailable"})


def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("UnhandledException path=%s", request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
