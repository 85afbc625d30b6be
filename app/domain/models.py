"""Typed domain models shared across runtime layers.

This module provides the data contracts exchanged between the request
gateway, the deployment orchestrator and the adapters that talk to the
artifact host and the container tooling.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class DeploymentStage(str, Enum):
    """Pipeline states reached by one deployment execution."""

    START = "start"
    FETCHING_MANIFEST = "fetching_manifest"
    FETCHING_EXTRAS = "fetching_extras"
    AUTHENTICATING_REGISTRY = "authenticating_registry"
    REDEPLOYING = "redeploying"
    PRUNING = "pruning"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class DeploymentRequest:
    """Validated deployment request for one application.

    Attributes:
        application_name: Repository name used to build artifact fetch paths.
        environment_vars: Variables injected into the compose command environment.
        extra_files_to_download: Files fetched after the manifest, in order.
    """

    application_name: str
    environment_vars: Mapping[str, str] = field(default_factory=dict)
    extra_files_to_download: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.application_name.strip():
            raise ValueError("application_name must not be blank")
        object.__setattr__(self, "environment_vars", MappingProxyType(dict(self.environment_vars)))
        object.__setattr__(self, "extra_files_to_download", tuple(self.extra_files_to_download))


@dataclass(frozen=True)
class FetchResult:
    """Outcome of retrieving one named artifact file.

    Attributes:
        file_name: Requested file name.
        local_path: Local path the file is written to on success.
        status_code: HTTP status reported by the artifact host, if a response arrived.
        error: Transport or local write failure detail, if any.
    """

    file_name: str
    local_path: str
    status_code: int | None = None
    error: str | None = None

    def fetch_succeeded(self) -> bool:
        """Return whether the artifact was retrieved with HTTP 200.

        Returns:
            bool: True only for status 200 without a transport error.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return self.error is None and self.status_code == 200

    def fetch_failure_detail(self) -> str:
        """Return operator-facing failure description."""

        if self.error is not None:
            return self.error
        return f"HTTP status code {self.status_code}"


@dataclass(frozen=True)
class CommandResult:
    """Exit status and combined output of one external command.

    Attributes:
        args: Executed argument vector.
        exit_code: Process exit code.
        output: Combined stdout and stderr text.
    """

    args: tuple[str, ...]
    exit_code: int
    output: str

    def command_succeeded(self) -> bool:
        """Return whether the command exited cleanly.

        Returns:
            bool: True only for exit code 0.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return self.exit_code == 0


@dataclass(frozen=True)
class DeploymentOutcome:
    """Terminal result of one orchestrated deployment.

    Attributes:
        application_name: Application the deployment targeted.
        terminal_stage: `DONE` on success, `FAILED` otherwise.
        failed_stage: Stage where the pipeline stopped, when failed.
        failed_file: File name whose fetch failed, when applicable.
        error_code: Deterministic failure code, when failed.
        cause: Operator-facing failure detail, when failed.
        timeline: Structured stage events recorded during execution.
    """

    application_name: str
    terminal_stage: DeploymentStage
    failed_stage: DeploymentStage | None = None
    failed_file: str | None = None
    error_code: str | None = None
    cause: str | None = None
    timeline: tuple[dict[str, object], ...] = ()

    def deployment_succeeded(self) -> bool:
        """Return whether the pipeline reached the `DONE` state.

        Returns:
            bool: True when the deployment completed.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return self.terminal_stage is DeploymentStage.DONE


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for service health.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str
