"""API layer package for the FastAPI conversion application."""

from .application import create_api_application

__all__ = ["create_api_application"]
