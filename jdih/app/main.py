"""FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from jdih.app.api.routes.health import router as health_router
from jdih.app.api.routes.jdihn import router as jdihn_router
from jdih.app.api.routes.metrics import router as metrics_router
from jdih.app.api.routes.public import router as public_router
from jdih.app.api.routes.web import router as web_router
from jdih.app.config import get_settings
from jdih.app.errors import NotFoundError, QueryValidationError, StorageUnavailableError
from jdih.app.utils.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(get_settings().log_level)
    yield


app = FastAPI(title="JDIH Portal API", version="0.1.0", lifespan=lifespan)

# Register routes; web last, its two-segment catch-all would shadow /v1/*
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(jdihn_router)
app.include_router(public_router)
app.include_router(web_router)


@app.exception_handler(QueryValidationError)
async def query_validation_handler(request: Request, exc: QueryValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "detail": [
                {"loc": ["query", exc.field], "msg": exc.message, "type": "value_error"}
            ]
        },
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(StorageUnavailableError)
async def storage_unavailable_handler(
    request: Request, exc: StorageUnavailableError
) -> JSONResponse:
    logger.error(
        "Storage unavailable",
        extra={"structured": {"path": request.url.path, "error": str(exc)}},
    )
    return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})
