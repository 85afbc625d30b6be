"""API layer package for the FastAPI webhook application and route composition."""

from .application import create_api_application

__all__ = ["create_api_application"]
