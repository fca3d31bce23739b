"""docrag FastAPI application entry point.

Wires providers and services (see :mod:`docrag.container`) onto
``app.state`` at startup, configures structured logging, and mounts the
API router.  Run with ``python -m docrag.main`` or
``uvicorn docrag.main:app``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Callable

import structlog
import uvicorn
from fastapi import FastAPI

from docrag import __version__
from docrag.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from docrag.api.routes import router as api_router
from docrag.config.settings import Settings
from docrag.container import build_components
from docrag.utils.logging import configure_logging, get_logger

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


def create_app(
    app_settings: Settings | None = None,
    component_factory: Callable[[Settings], dict[str, Any]] = build_components,
) -> FastAPI:
    """Build and configure the FastAPI application.

    *component_factory* lets tests substitute in-memory providers.
    """
    resolved_settings = app_settings or settings

    @asynccontextmanager
    async def _lifespan(application: FastAPI):  # noqa: ANN202
        components = component_factory(resolved_settings)
        for key, value in components.items():
            setattr(application.state, key, value)

        await components["document_store"].initialize()

        _logger.info(
            "app_startup",
            version=__version__,
            environment=resolved_settings.app_env,
            providers=components.get("provider_registry", {}),
        )
        yield
        _logger.info("app_shutdown")

    application = FastAPI(
        title="docrag API",
        version=__version__,
        description=(
            "Upload documents, index them into a vector store, and answer "
            "questions grounded in the retrieved passages."
        ),
        lifespan=_lifespan,
    )

    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    application.include_router(api_router)
    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "docrag.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
