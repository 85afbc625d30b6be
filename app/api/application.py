"""FastAPI application factory for the deployment webhook."""

from fastapi import FastAPI

from app.config import AppSettings
from app.jobs import DeploymentOrchestratorPort

from .routers import api_create_deploy_router, api_create_health_router


def create_api_application(
    settings: AppSettings,
    deployment_orchestrator: DeploymentOrchestratorPort,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings holding secrets and metadata.
        deployment_orchestrator: Job orchestrator invoked by the deploy endpoint.

    Returns:
        FastAPI: Framework application instance with deploy and health routes.

    Raises:
        ValueError: Raised when router dependencies are invalid.
    """
    application = FastAPI(title="Compose Deploy Webhook", docs_url=None, redoc_url=None, openapi_url=None)

    application.include_router(api_create_health_router(settings=settings))
    application.include_router(
        api_create_deploy_router(
            settings=settings,
            deployment_orchestrator=deployment_orchestrator,
        )
    )

    return application
