import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from dashboard.routers.auth import router as auth_router
from dashboard.routers.dashboard import router as dashboard_router

from dashboard.core.config import settings
from dashboard.core.logging import (
    REQUEST_ID_HEADER,
    configure_logging,
    request_id_ctx,
    request_id_from,
)
from dashboard.core.operators import ensure_bootstrap_operator
from dashboard.core.store import RecordStoreError
from dashboard.core.errors import (
    http_exception_handler,
    validation_exception_handler,
    record_store_exception_handler,
    unhandled_exception_handler,
)
from dashboard.db import session as db_session
from dashboard.db.base import Base
from dashboard.models.user import User

configure_logging()
logger = logging.getLogger("dashboard")


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = request_id_from(request.headers.get(REQUEST_ID_HEADER))
        token = request_id_ctx.set(rid)
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            request_id_ctx.reset(token)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # the signups table belongs to the product database; only operators are ours
    Base.metadata.create_all(bind=db_session.engine, tables=[User.__table__])
    with db_session.SessionLocal() as db:
        ensure_bootstrap_operator(db)
    logger.info("Application startup complete env=%s", settings.ENV)
    yield


app = FastAPI(title="Signup Dashboard API", lifespan=lifespan)
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(auth_router)
app.include_router(dashboard_router)


app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(RecordStoreError, record_store_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/")
def root():
    return {"status": "ok", "docs": "/docs"}


def run() -> None:
    logger.info("Starting %s on %s:%d", app.title, settings.HOST, settings.PORT)
    uvicorn.run(
        app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()
