"""Deployment webhook router: payload validation, token check and pipeline trigger."""

from __future__ import annotations

import hmac
import logging

from fastapi import APIRouter, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, ValidationError

from app.config import AppSettings
from app.domain import DeploymentRequest
from app.jobs import DeploymentOrchestratorPort

logger = logging.getLogger(__name__)


class DeployRequestPayload(BaseModel):
    """Decoded `POST /deploy` body; JSON `null` fields count as absent."""

    model_config = ConfigDict(extra="ignore")

    application_name: str | None = None
    environment_vars: dict[str, str] | None = None
    extra_files_to_download: list[str] | None = None

    def payload_to_deployment_request(self) -> DeploymentRequest:
        """Build the immutable domain request.

        Returns:
            DeploymentRequest: Request handed to the orchestrator.

        Raises:
            ValueError: Raised when application name is blank.
        """

        return DeploymentRequest(
            application_name=self.application_name or "",
            environment_vars=self.environment_vars or {},
            extra_files_to_download=tuple(self.extra_files_to_download or ()),
        )


def api_token_matches(supplied_token: str, expected_token: str) -> bool:
    """Return whether the supplied header equals the deploy token exactly.

    Header values arrive latin-1 decoded, so they are compared as the raw bytes
    the client sent against the UTF-8 bytes of the deploy token.

    Args:
        supplied_token: `Authorization` header value as decoded by the server.
        expected_token: Configured deploy token.

    Returns:
        bool: True only when both byte sequences are identical.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    try:
        supplied_bytes = supplied_token.encode("latin-1")
    except UnicodeEncodeError:
        return False
    return hmac.compare_digest(supplied_bytes, expected_token.encode("utf-8"))


def api_create_deploy_router(
    settings: AppSettings,
    deployment_orchestrator: DeploymentOrchestratorPort,
) -> APIRouter:
    """Create deploy router exposing the authenticated redeploy webhook.

    Args:
        settings: Runtime settings holding the deploy token.
        deployment_orchestrator: Job orchestrator running the deployment pipeline.

    Returns:
        APIRouter: Router exposing `POST /deploy`.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if deployment_orchestrator is None:
        raise ValueError("deployment_orchestrator must not be None")

    router = APIRouter(tags=["deploy"])

    @router.post("/deploy", response_class=PlainTextResponse)
    async def api_deploy_trigger(request: Request) -> PlainTextResponse:
        """Validate one webhook call and run the deployment synchronously.

        Checks run in fixed order: JSON shape, then token, then application name.

        Args:
            request: Incoming request with raw body and `Authorization` header.

        Returns:
            PlainTextResponse: 200 on success, 400/401 for client errors, 500 for pipeline failures.

        Raises:
            RuntimeError: Raised when execution fails unexpectedly.
        """

        raw_body = await request.body()
        try:
            payload = DeployRequestPayload.model_validate_json(raw_body)
        except ValidationError:
            logger.info("Rejected deploy request: invalid JSON payload.")
            return PlainTextResponse("Invalid JSON payload.\n", status_code=status.HTTP_400_BAD_REQUEST)

        supplied_token = request.headers.get("Authorization", "")
        if not api_token_matches(supplied_token=supplied_token, expected_token=settings.deploy_token):
            logger.warning("Rejected deploy request: invalid token.")
            return PlainTextResponse("Invalid token.\n", status_code=status.HTTP_401_UNAUTHORIZED)

        if not (payload.application_name or "").strip():
            logger.info("Rejected deploy request: no application name provided.")
            return PlainTextResponse("No application name provided.\n", status_code=status.HTTP_400_BAD_REQUEST)

        deployment_request = payload.payload_to_deployment_request()
        outcome = await run_in_threadpool(deployment_orchestrator.job_execute_deployment, deployment_request)
        if not outcome.deployment_succeeded():
            return PlainTextResponse(
                "Failed to update Docker container.\n",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return PlainTextResponse(
            f"Application '{deployment_request.application_name}' updated successfully.\n",
            status_code=status.HTTP_200_OK,
        )

    return router
