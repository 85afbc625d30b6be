"""Typed interfaces for job-layer orchestration responsibilities."""

from typing import Protocol

from app.domain import DeploymentOutcome, DeploymentRequest


class DeploymentOrchestratorPort(Protocol):
    """Port definition for running one deployment pipeline."""

    def job_execute_deployment(self, request: DeploymentRequest) -> DeploymentOutcome:
        """Fetch artifacts, authenticate, redeploy and prune for one request.

        Args:
            request: Validated deployment request.

        Returns:
            DeploymentOutcome: Exactly one terminal outcome for the request.

        Raises:
            RuntimeError: Raised only for unexpected failures outside the pipeline taxonomy.
        """
