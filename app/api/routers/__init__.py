"""API router package for endpoint composition."""

from .conversion import api_create_conversion_router
from .health import api_create_health_router

__all__ = ["api_create_conversion_router", "api_create_health_router"]
