"""Tests for API health endpoint behavior."""

from fastapi.testclient import TestClient

from app.api.application import create_api_application
from app.config import AppSettings
from app.domain import DeploymentOutcome


class _UnusedOrchestrator:
    """Test double that fails loudly if the health check touches the pipeline."""

    def job_execute_deployment(self, request) -> DeploymentOutcome:
        """Fail if invoked.

        Args:
            request: Ignored request.

        Returns:
            DeploymentOutcome: This method does not return.

        Raises:
            AssertionError: Always raised by this test double.
        """

        raise AssertionError(f"health check must not deploy {request!r}")


def test_api_health_returns_ok_with_environment() -> None:
    """Return deterministic liveness payload.

    Returns:
        None: Assertions validate health payload.

    Raises:
        AssertionError: Raised when payload is incorrect.
    """

    settings = AppSettings(
        deploy_token="deploy-secret",
        github_token="github-secret",
        environment_name="production",
        _env_file=None,
    )
    client = TestClient(create_api_application(settings=settings, deployment_orchestrator=_UnusedOrchestrator()))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "app": "up",
        "detail": "webhook accepting deployments",
        "environment": "production",
    }


def test_api_health_payload_never_exposes_secrets() -> None:
    """Keep tokens out of the health payload.

    Returns:
        None: Assertions validate secret hygiene.

    Raises:
        AssertionError: Raised when a token leaks.
    """

    settings = AppSettings(deploy_token="deploy-secret", github_token="github-secret", _env_file=None)
    client = TestClient(create_api_application(settings=settings, deployment_orchestrator=_UnusedOrchestrator()))

    response_text = client.get("/health").text

    assert "deploy-secret" not in response_text
    assert "github-secret" not in response_text
