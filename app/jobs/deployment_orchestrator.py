"""Job-layer deployment orchestrator driven by an explicit stage state machine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Final

from app.adapters import (
    ArtifactFetcherPort,
    ArtifactFetchFailedError,
    DeployAdapterError,
    PruneFailedError,
    RedeployExecutorPort,
    RedeployFailedError,
    RegistryAuthFailedError,
    RegistryAuthenticatorPort,
)
from app.domain import DeploymentOutcome, DeploymentRequest, DeploymentStage, domain_build_stage_event

from .interfaces import DeploymentOrchestratorPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeploymentOrchestratorConfig:
    """Configuration values for deployment orchestration.

    Attributes:
        access_token: Token used for artifact downloads and registry login.
        manifest_file_name: Primary compose manifest fetched before extra files.
        prune_enabled: Whether dangling images are pruned after a successful redeploy.
    """

    access_token: str
    manifest_file_name: str = "docker-compose.yml"
    prune_enabled: bool = True

    def __repr__(self) -> str:
        return (
            f"DeploymentOrchestratorConfig(access_token='***', manifest_file_name={self.manifest_file_name!r}, "
            f"prune_enabled={self.prune_enabled!r})"
        )


@dataclass
class _DeploymentRunState:
    """Mutable per-execution state; never shared across requests."""

    request: DeploymentRequest
    stage: DeploymentStage = DeploymentStage.START
    timeline: list[dict[str, object]] = field(default_factory=list)


class DeploymentOrchestrator(DeploymentOrchestratorPort):
    """Sequence fetch, registry login, redeploy and prune for one request."""

    _TERMINAL_STAGES: Final[frozenset[DeploymentStage]] = frozenset({DeploymentStage.DONE, DeploymentStage.FAILED})
    _ERROR_CODES: Final[dict[type[DeployAdapterError], str]] = {
        ArtifactFetchFailedError: "DEPLOY_FETCH_ERROR",
        RegistryAuthFailedError: "DEPLOY_REGISTRY_AUTH_ERROR",
        RedeployFailedError: "DEPLOY_REDEPLOY_ERROR",
    }

    def __init__(
        self,
        artifact_fetcher: ArtifactFetcherPort,
        registry_authenticator: RegistryAuthenticatorPort,
        redeploy_executor: RedeployExecutorPort,
        config: DeploymentOrchestratorConfig,
    ):
        """Initialize deployment orchestrator dependencies.

        Args:
            artifact_fetcher: Adapter downloading manifest and extra files.
            registry_authenticator: Adapter logging in to the container registry.
            redeploy_executor: Adapter running compose pull/up and image prune.
            config: Deployment execution configuration.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if artifact_fetcher is None:
            raise ValueError("artifact_fetcher must not be None")
        if registry_authenticator is None:
            raise ValueError("registry_authenticator must not be None")
        if redeploy_executor is None:
            raise ValueError("redeploy_executor must not be None")
        if not config.access_token.strip():
            raise ValueError("config.access_token must not be blank")
        if not config.manifest_file_name.strip():
            raise ValueError("config.manifest_file_name must not be blank")

        self._artifact_fetcher = artifact_fetcher
        self._registry_authenticator = registry_authenticator
        self._redeploy_executor = redeploy_executor
        self._config = config
        self._stage_handlers: dict[DeploymentStage, Callable[[_DeploymentRunState], DeploymentStage]] = {
            DeploymentStage.START: self._job_stage_start,
            DeploymentStage.FETCHING_MANIFEST: self._job_stage_fetch_manifest,
            DeploymentStage.FETCHING_EXTRAS: self._job_stage_fetch_extras,
            DeploymentStage.AUTHENTICATING_REGISTRY: self._job_stage_authenticate_registry,
            DeploymentStage.REDEPLOYING: self._job_stage_redeploy,
            DeploymentStage.PRUNING: self._job_stage_prune,
        }

    def job_execute_deployment(self, request: DeploymentRequest) -> DeploymentOutcome:
        """Run the deployment state machine until a terminal stage is reached.

        Args:
            request: Validated deployment request.

        Returns:
            DeploymentOutcome: `DONE` outcome, or `FAILED` outcome naming stage and cause.

        Raises:
            RuntimeError: Unexpected adapter errors outside the pipeline taxonomy propagate.
        """

        run_state = _DeploymentRunState(request=request)
        logger.info("Starting deployment of application '%s'.", request.application_name)

        while run_state.stage not in self._TERMINAL_STAGES:
            current_stage = run_state.stage
            try:
                run_state.stage = self._stage_handlers[current_stage](run_state)
            except (ArtifactFetchFailedError, RegistryAuthFailedError, RedeployFailedError) as error:
                return self._job_finalize_failure(run_state=run_state, failed_stage=current_stage, error=error)

        run_state.timeline.append(domain_build_stage_event(stage=DeploymentStage.DONE, status="completed"))
        logger.info("Application '%s' updated successfully.", request.application_name)
        return DeploymentOutcome(
            application_name=request.application_name,
            terminal_stage=DeploymentStage.DONE,
            timeline=tuple(run_state.timeline),
        )

    def _job_stage_start(self, run_state: _DeploymentRunState) -> DeploymentStage:
        run_state.timeline.append(
            domain_build_stage_event(
                stage=DeploymentStage.START,
                status="completed",
                details={
                    "application_name": run_state.request.application_name,
                    "extra_file_count": len(run_state.request.extra_files_to_download),
                    "environment_var_names": sorted(run_state.request.environment_vars),
                },
            )
        )
        return DeploymentStage.FETCHING_MANIFEST

    def _job_stage_fetch_manifest(self, run_state: _DeploymentRunState) -> DeploymentStage:
        """Fetch the primary manifest; the pipeline stops here on failure.

        Args:
            run_state: Mutable execution state.

        Returns:
            DeploymentStage: `FETCHING_EXTRAS` on success.

        Raises:
            ArtifactFetchFailedError: Raised when the manifest fetch fails.
        """

        self._job_fetch_one(
            run_state=run_state,
            stage=DeploymentStage.FETCHING_MANIFEST,
            file_name=self._config.manifest_file_name,
        )
        return DeploymentStage.FETCHING_EXTRAS

    def _job_stage_fetch_extras(self, run_state: _DeploymentRunState) -> DeploymentStage:
        """Fetch extra files in request order, aborting on the first failure.

        Args:
            run_state: Mutable execution state.

        Returns:
            DeploymentStage: `AUTHENTICATING_REGISTRY` once every file is fetched.

        Raises:
            ArtifactFetchFailedError: Raised for the first extra file that fails.
        """

        for file_name in run_state.request.extra_files_to_download:
            self._job_fetch_one(run_state=run_state, stage=DeploymentStage.FETCHING_EXTRAS, file_name=file_name)
        return DeploymentStage.AUTHENTICATING_REGISTRY

    def _job_stage_authenticate_registry(self, run_state: _DeploymentRunState) -> DeploymentStage:
        stage = DeploymentStage.AUTHENTICATING_REGISTRY
        run_state.timeline.append(domain_build_stage_event(stage=stage, status="started"))
        self._registry_authenticator.adapter_registry_login(access_token=self._config.access_token)
        run_state.timeline.append(domain_build_stage_event(stage=stage, status="completed"))
        return DeploymentStage.REDEPLOYING

    def _job_stage_redeploy(self, run_state: _DeploymentRunState) -> DeploymentStage:
        run_state.timeline.append(domain_build_stage_event(stage=DeploymentStage.REDEPLOYING, status="started"))
        result = self._redeploy_executor.adapter_redeploy(environment_vars=run_state.request.environment_vars)
        run_state.timeline.append(
            domain_build_stage_event(
                stage=DeploymentStage.REDEPLOYING,
                status="completed",
                details={"exit_code": result.exit_code},
            )
        )
        return DeploymentStage.PRUNING

    def _job_stage_prune(self, run_state: _DeploymentRunState) -> DeploymentStage:
        """Prune dangling images; failures are logged and never fail the deployment.

        Args:
            run_state: Mutable execution state.

        Returns:
            DeploymentStage: Always `DONE`.

        Raises:
            RuntimeError: This stage does not raise pipeline errors.
        """

        if not self._config.prune_enabled:
            run_state.timeline.append(domain_build_stage_event(stage=DeploymentStage.PRUNING, status="skipped"))
            return DeploymentStage.DONE

        try:
            self._redeploy_executor.adapter_prune_dangling_images()
        except PruneFailedError as error:
            logger.warning("Failed to remove dangling images: %s", error.cause)
            run_state.timeline.append(
                domain_build_stage_event(
                    stage=DeploymentStage.PRUNING,
                    status="failed",
                    details={"error_message": error.cause},
                )
            )
            return DeploymentStage.DONE

        run_state.timeline.append(domain_build_stage_event(stage=DeploymentStage.PRUNING, status="completed"))
        return DeploymentStage.DONE

    def _job_fetch_one(self, run_state: _DeploymentRunState, stage: DeploymentStage, file_name: str) -> None:
        """Fetch one file and convert a failed result into a typed error.

        Args:
            run_state: Mutable execution state.
            stage: Fetch stage the file belongs to.
            file_name: File to download.

        Returns:
            None: Timeline is updated as side effect.

        Raises:
            ArtifactFetchFailedError: Raised when the fetch result is not a success.
        """

        run_state.timeline.append(
            domain_build_stage_event(stage=stage, status="started", details={"file_name": file_name})
        )
        fetch_result = self._artifact_fetcher.adapter_fetch_artifact(
            application_name=run_state.request.application_name,
            file_name=file_name,
            access_token=self._config.access_token,
        )
        if not fetch_result.fetch_succeeded():
            raise ArtifactFetchFailedError(file_name=file_name, cause=fetch_result.fetch_failure_detail())

        run_state.timeline.append(
            domain_build_stage_event(
                stage=stage,
                status="completed",
                details={"file_name": file_name, "status_code": fetch_result.status_code},
            )
        )

    def _job_finalize_failure(
        self,
        run_state: _DeploymentRunState,
        failed_stage: DeploymentStage,
        error: DeployAdapterError,
    ) -> DeploymentOutcome:
        """Move to `FAILED` and build the failure outcome.

        Args:
            run_state: Mutable execution state.
            failed_stage: Stage whose handler raised.
            error: Pipeline error raised by the stage.

        Returns:
            DeploymentOutcome: Failed outcome carrying stage, file and cause.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        error_code = self._ERROR_CODES.get(type(error), "DEPLOY_UNEXPECTED_ERROR")
        failed_file = error.file_name if isinstance(error, ArtifactFetchFailedError) else None
        run_state.stage = DeploymentStage.FAILED
        failure_details: dict[str, object] = {
            "failed_stage": failed_stage.value,
            "error_code": error_code,
            "error_type": type(error).__name__,
            "error_message": str(error),
        }
        if failed_file is not None:
            failure_details["file_name"] = failed_file
        run_state.timeline.append(
            domain_build_stage_event(stage=DeploymentStage.FAILED, status="failed", details=failure_details)
        )

        logger.error(
            "Deployment of application '%s' failed at stage %s (%s): %s",
            run_state.request.application_name,
            failed_stage.value,
            error_code,
            error.cause,
        )
        return DeploymentOutcome(
            application_name=run_state.request.application_name,
            terminal_stage=DeploymentStage.FAILED,
            failed_stage=failed_stage,
            failed_file=failed_file,
            error_code=error_code,
            cause=error.cause,
            timeline=tuple(run_state.timeline),
        )
