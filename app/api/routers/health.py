"""Health endpoint router composition for liveness checks."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.config import AppSettings
from app.domain import HealthStatus


def api_create_health_router(settings: AppSettings) -> APIRouter:
    """Create health-check router reporting process liveness.

    Args:
        settings: Runtime settings used for environment metadata.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when settings is invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return application health state.

        Returns:
            JSONResponse: Deterministic health payload for operational checks.

        Raises:
            RuntimeError: This handler does not raise runtime errors.
        """

        health = HealthStatus(status="ok", detail="webhook accepting deployments")
        payload = {
            "status": health.status,
            "app": "up",
            "detail": health.detail,
            "environment": settings.environment_name,
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
