"""Project-native typed exceptions for deployment adapter failures."""

from __future__ import annotations


class DeployAdapterError(Exception):
    """Base exception for adapter-level deployment failures.

    Attributes:
        cause: Operator-facing failure detail.
    """

    def __init__(self, message: str, cause: str | None = None):
        super().__init__(message)
        self.cause = cause if cause is not None else message


class CommandExecutionError(DeployAdapterError):
    """External command could not be started or did not finish in time."""


class ArtifactFetchFailedError(DeployAdapterError):
    """Manifest or auxiliary file could not be retrieved from the artifact host."""

    def __init__(self, file_name: str, cause: str):
        super().__init__(message=f"Failed to download {file_name}: {cause}", cause=cause)
        self.file_name = file_name


class RegistryAuthFailedError(DeployAdapterError, RuntimeError):
    """Container registry login was rejected or could not run."""


class RedeployFailedError(DeployAdapterError, RuntimeError):
    """Compose pull or up exited unsuccessfully.

    Attributes:
        output: Captured combined command output.
    """

    def __init__(self, message: str, output: str):
        super().__init__(message=message, cause=output)
        self.output = output


class PruneFailedError(DeployAdapterError, RuntimeError):
    """Dangling image cleanup failed; never fatal to a deployment."""
