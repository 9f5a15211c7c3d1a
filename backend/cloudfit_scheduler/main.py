"""Application entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api import api_router
from .core.config import settings
from .core.logging import RequestIDMiddleware, init_logging
from .domain.errors import ERROR_STATUS_CODES, SchedulingError
from .services.registry import SchedulingRegistry
from .services.seed import seed_demo_data

logger = logging.getLogger(__name__)


async def scheduling_error_handler(
    request: Request, exc: SchedulingError
) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(type(exc), 400)
    logger.info(
        "request rejected",
        extra={"path": request.url.path, "error": exc.kind, "status": status_code},
    )
    return JSONResponse(status_code=status_code, content={"detail": exc.to_dict()})


def create_app(registry: SchedulingRegistry | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    init_logging(settings.LOG_LEVEL)

    if registry is None:
        registry = SchedulingRegistry()
        if settings.SEED_DEMO_DATA:
            seed_demo_data(registry)

    app = FastAPI(title=settings.APP_NAME)
    app.state.registry = registry
    app.add_middleware(RequestIDMiddleware)
    app.add_exception_handler(SchedulingError, scheduling_error_handler)
    app.include_router(api_router)
    return app


app = create_app()
