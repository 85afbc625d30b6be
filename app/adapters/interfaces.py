"""Typed interfaces for adapter-layer responsibilities."""

from typing import Mapping, Protocol, Sequence

from app.domain import CommandResult, FetchResult


class CommandRunnerPort(Protocol):
    """Port definition for executing external command-line tools."""

    def command_run(
        self,
        args: Sequence[str],
        env: Mapping[str, str] | None = None,
        input_text: str | None = None,
        cwd: str | None = None,
    ) -> CommandResult:
        """Run one command and capture its exit code and combined output.

        Args:
            args: Argument vector, executed without a shell.
            env: Extra environment variables layered over the process environment.
            input_text: Optional text written to the command's stdin.
            cwd: Optional working directory.

        Returns:
            CommandResult: Exit code and combined stdout/stderr.

        Raises:
            CommandExecutionError: Raised when the process cannot start, times out
                or rejects its arguments or environment.
        """


class ArtifactFetcherPort(Protocol):
    """Port definition for downloading application files from the artifact host."""

    def adapter_fetch_artifact(self, application_name: str, file_name: str, access_token: str) -> FetchResult:
        """Download one named file for an application into the working directory.

        Args:
            application_name: Application repository name.
            file_name: File name inside the repository branch.
            access_token: Bearer credential for the artifact host.

        Returns:
            FetchResult: Status code or transport error of the download.

        Raises:
            RuntimeError: Implementations report failures through `FetchResult`.
        """


class RegistryAuthenticatorPort(Protocol):
    """Port definition for establishing a container registry session."""

    def adapter_registry_login(self, access_token: str) -> None:
        """Log in to the configured container registry.

        Args:
            access_token: Registry credential.

        Returns:
            None: Session is established as side effect.

        Raises:
            RegistryAuthFailedError: Raised when login fails.
        """


class RedeployExecutorPort(Protocol):
    """Port definition for pulling images and recreating application containers."""

    def adapter_redeploy(self, environment_vars: Mapping[str, str]) -> CommandResult:
        """Pull latest images and (re)start services with injected variables.

        Args:
            environment_vars: Variables exposed to the compose commands.

        Returns:
            CommandResult: Result of the final compose command.

        Raises:
            RedeployFailedError: Raised when pull or up fails.
        """

    def adapter_prune_dangling_images(self) -> None:
        """Remove dangling image data.

        Returns:
            None: Cleanup runs as side effect.

        Raises:
            PruneFailedError: Raised when cleanup fails.
        """
