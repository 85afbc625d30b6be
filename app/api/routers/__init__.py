"""API router package for endpoint composition."""

from .deploy import api_create_deploy_router
from .health import api_create_health_router

__all__ = ["api_create_deploy_router", "api_create_health_router"]
