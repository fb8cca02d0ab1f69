"""Health endpoint router composition for app and conversion-engine checks."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.adapters import ConversionEnginePort


def api_create_health_router(engine: ConversionEnginePort) -> APIRouter:
    """Create health-check router with app and engine reachability status.

    Args:
        engine: Conversion engine port.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when engine is invalid.
    """

    if engine is None:
        raise ValueError("engine must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return application and conversion-engine health state.

        Returns:
            JSONResponse: Deterministic health payload for operational checks.
        """

        try:
            engine_health = engine.engine_check_health()
            payload = {
                "status": "ok",
                "app": "up",
                "engine": engine_health.status,
                "detail": engine_health.detail,
                "target": engine.engine_connection_label(),
            }
            return JSONResponse(content=payload, status_code=status.HTTP_200_OK)
        except (ConnectionError, TimeoutError) as error:
            payload = {
                "status": "degraded",
                "app": "up",
                "engine": "down",
                "detail": str(error),
                "target": engine.engine_connection_label(),
            }
            return JSONResponse(content=payload, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    return router
