"""
DoGoods FastAPI Application
Main entry point: logging, middleware, exception handlers and routers
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
import anyio
from typing import Optional

from api.routes import (
    approval_codes,
    communities,
    feedback,
    functions,
    health,
    listings,
    messages,
    notifications,
    receipts,
    users,
    verification,
)

from domain.models import init_database
from adapters import storage_adapter

from app.config import settings

from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    dogoods_exception_handler,
    general_exception_handler,
)
from app.exceptions import DoGoodsError

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
_logger = logging.getLogger("dogoods.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: create the schema (with retries while the database comes up)
    and the storage bucket.
    """
    _logger.info(f"Starting DoGoods in {settings.environment.value} mode")
    last_exc: Optional[Exception] = None

    for attempt in range(1, settings.db_init_attempts + 1):
        try:
            # Blocking init runs in a thread to keep the event loop free
            await anyio.to_thread.run_sync(init_database)
            _logger.info("Database initialization succeeded")
            break
        except Exception as exc:
            last_exc = exc
            _logger.warning(
                "Database init attempt %d/%d failed: %s",
                attempt,
                settings.db_init_attempts,
                exc,
            )
            if attempt < settings.db_init_attempts:
                await anyio.sleep(settings.db_init_delay_sec)
            else:
                _logger.error(
                    "Database initialization failed after %d attempts", attempt
                )
                raise last_exc

    root = storage_adapter.ensure_bucket()
    _logger.info("Storage bucket ready at %s", root)

    if not settings.twilio_configured():
        _logger.warning("Twilio is not configured; SMS sends will fail")

    try:
        yield
    finally:
        _logger.info("Shutting down DoGoods")


app = FastAPI(
    title=settings.api_title,
    version=settings.app_version,
    description=settings.api_description,
    lifespan=lifespan,
    debug=settings.debug,
    openapi_url=(
        f"{settings.api_prefix}/openapi.json" if not settings.is_production() else None
    ),
    docs_url=f"{settings.api_prefix}/docs" if not settings.is_production() else None,
    redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production() else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(DoGoodsError, dogoods_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

for module in (
    health,
    users,
    communities,
    approval_codes,
    listings,
    receipts,
    messages,
    verification,
    feedback,
    notifications,
    functions,
):
    app.include_router(module.router, prefix=settings.api_prefix)

# Uploaded verification photos
app.mount(
    "/storage",
    StaticFiles(directory=str(settings.storage_dir), check_dir=False),
    name="storage",
)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
