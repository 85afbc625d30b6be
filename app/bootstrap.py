"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI

from app.adapters import (
    DockerComposeRedeployExecutor,
    DockerRegistryAuthenticator,
    RawFileArtifactFetcher,
    SubprocessCommandRunner,
)
from app.api import create_api_application
from app.config import AppSettings, config_load_settings
from app.jobs import DeploymentOrchestrator, DeploymentOrchestratorConfig


def bootstrap_create_deployment_orchestrator(settings: AppSettings | None = None) -> DeploymentOrchestrator:
    """Build the deployment orchestrator and its adapters from settings.

    Args:
        settings: Optional pre-validated settings; loaded from the environment when omitted.

    Returns:
        DeploymentOrchestrator: Fully wired deployment orchestrator instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    command_runner = SubprocessCommandRunner(timeout_seconds=resolved_settings.command_timeout_seconds)
    artifact_fetcher = RawFileArtifactFetcher(
        working_directory=resolved_settings.working_directory,
        base_url=resolved_settings.source_base_url,
        owner=resolved_settings.source_owner,
        branch=resolved_settings.source_branch,
        request_timeout_seconds=resolved_settings.fetch_timeout_seconds,
    )
    registry_authenticator = DockerRegistryAuthenticator(
        command_runner=command_runner,
        registry_host=resolved_settings.registry_host,
        username=resolved_settings.registry_username,
    )
    redeploy_executor = DockerComposeRedeployExecutor(
        command_runner=command_runner,
        working_directory=resolved_settings.working_directory,
        manifest_file_name=resolved_settings.manifest_file_name,
    )
    return DeploymentOrchestrator(
        artifact_fetcher=artifact_fetcher,
        registry_authenticator=registry_authenticator,
        redeploy_executor=redeploy_executor,
        config=DeploymentOrchestratorConfig(
            access_token=resolved_settings.github_token,
            manifest_file_name=resolved_settings.manifest_file_name,
            prune_enabled=resolved_settings.prune_enabled,
        ),
    )


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional pre-validated settings; loaded from the environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    return create_api_application(
        settings=resolved_settings,
        deployment_orchestrator=bootstrap_create_deployment_orchestrator(settings=resolved_settings),
    )
