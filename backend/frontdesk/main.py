"""FastAPI application entry point."""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from frontdesk.api.routes import api_router
from frontdesk.container import FrontDeskContainer
from frontdesk.core.config import settings
from frontdesk.core.exceptions import NotFoundError, ValidationError
from frontdesk.core.rate_limit import limiter
from frontdesk.services.locations import LOCATIONS

# Configure logging - use JSON format in production, human-readable in dev
root_logger = logging.getLogger()
root_logger.setLevel(getattr(logging, settings.log_level))
root_logger.handlers.clear()

if settings.debug:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
else:
    import json as _json
    import sys

    class JSONFormatter(logging.Formatter):
        def format(self, record):
            return _json.dumps({
                "ts": self.formatTime(record, self.datefmt),
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
                "module": record.module,
                "line": record.lineno,
            })

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

root_logger.addHandler(handler)
logger = logging.getLogger(__name__)
request_logger = logging.getLogger("requests")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging all HTTP requests and responses."""

    async def dispatch(self, request: Request, call_next):
        if request.url.path in ["/health", "/", "/docs", "/openapi.json"]:
            return await call_next(request)

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            request_logger.error(
                f"Error: {request.method} {request.url.path} - "
                f"Exception: {str(e)} - Time: {time.time() - start_time:.3f}s"
            )
            raise

        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        request_logger.log(
            log_level,
            f"Response: {request.method} {request.url.path} - "
            f"Status: {response.status_code} - Time: {time.time() - start_time:.3f}s"
        )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the service container, seed local data and start the sync loop."""
    logger.info(f"Starting {settings.app_name}")

    container: Optional[FrontDeskContainer] = getattr(app.state, "container", None)
    if container is None:
        container = FrontDeskContainer.from_settings()
        app.state.container = container

    container.auth.initialize_users()
    for location in LOCATIONS:
        rooms = await container.rooms.initialize(location.id)
        logger.info(f"{location.name}: {len(rooms)} rooms ready")
    await container.menu.refresh()

    container.sync.start()
    sync_task = None
    if settings.sync_poll_interval_seconds > 0:
        sync_task = asyncio.create_task(
            container.sync.run_periodic(
                settings.sync_poll_interval_seconds, probe=settings.connectivity_probe_enabled
            )
        )
        logger.info(f"Background sync started (runs every {settings.sync_poll_interval_seconds}s)")

    yield

    container.sync.stop()
    if sync_task is not None:
        sync_task.cancel()
        try:
            await sync_task
        except asyncio.CancelledError:
            pass

    logger.info(f"Shutting down {settings.app_name}")


def create_app(container: Optional[FrontDeskContainer] = None) -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description="Front-desk receipts, rooms and restaurant billing with offline sync",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    if container is not None:
        app.state.container = container

    # Rate limiting setup
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message, "field": exc.field},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    app.add_middleware(RequestLoggingMiddleware)

    # CORS middleware - added last so it runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With"],
        max_age=600,
    )

    app.include_router(api_router, prefix=settings.api_v1_prefix)

    @app.get("/health")
    def health_check(request: Request):
        """Liveness plus the sync picture: online flag and queued records."""
        container: Optional[FrontDeskContainer] = getattr(request.app.state, "container", None)
        body = {
            "status": "healthy",
            "version": "1.0.0",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if container is not None:
            sync_status = container.sync.status()
            body["online"] = sync_status.online
            body["queued"] = sync_status.total_queued
        return body

    return app


app = create_app()
