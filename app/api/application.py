"""FastAPI application factory for the lead conversion service."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Sequence

from fastapi import FastAPI

from app.adapters import ConversionEnginePort
from app.config import AppSettings
from app.jobs import BatchConverterPort

from .routers import api_create_conversion_router, api_create_health_router


def create_api_application(
    settings: AppSettings,
    engine: ConversionEnginePort,
    batch_converter: BatchConverterPort,
    shutdown_callbacks: Sequence[Callable[[], None]] = (),
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        engine: Conversion engine port used by health endpoints.
        batch_converter: Job-layer batch converter for conversion endpoints.
        shutdown_callbacks: Callables run once when the application shuts down.

    Returns:
        FastAPI: Framework application instance.
    """

    @asynccontextmanager
    async def api_lifespan(_: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            for shutdown_callback in shutdown_callbacks:
                shutdown_callback()

    application = FastAPI(title="Lead Convert Service", lifespan=api_lifespan)

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return service metadata.

        Returns:
            dict[str, str]: Service name, status and environment.
        """

        return {
            "service": "lead-convert-service",
            "status": "ready",
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router(engine=engine))
    application.include_router(api_create_conversion_router(batch_converter=batch_converter))

    return application
