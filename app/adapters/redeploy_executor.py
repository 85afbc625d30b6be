"""Docker Compose redeploy adapter: pull, up with orphan removal, prune."""

from __future__ import annotations

import logging
from typing import Mapping

from app.domain import CommandResult

from .deploy_errors import CommandExecutionError, PruneFailedError, RedeployFailedError
from .interfaces import CommandRunnerPort, RedeployExecutorPort

logger = logging.getLogger(__name__)


class DockerComposeRedeployExecutor(RedeployExecutorPort):
    """Recreate compose services in the working directory from the fetched manifest."""

    def __init__(
        self,
        command_runner: CommandRunnerPort,
        working_directory: str = ".",
        manifest_file_name: str = "docker-compose.yml",
        docker_binary: str = "docker",
    ):
        """Initialize redeploy executor.

        Args:
            command_runner: Runner executing the docker CLI.
            working_directory: Directory holding the manifest; compose runs there.
            manifest_file_name: Compose file passed via `--file`.
            docker_binary: Docker CLI executable name or path.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if command_runner is None:
            raise ValueError("command_runner must not be None")
        if not manifest_file_name.strip():
            raise ValueError("manifest_file_name must not be blank")

        self._command_runner = command_runner
        self._working_directory = working_directory
        self._manifest_file_name = manifest_file_name.strip()
        self._docker_binary = docker_binary

    def adapter_compose_commands(self) -> tuple[tuple[str, ...], tuple[str, ...]]:
        """Return the pull and up argument vectors, in execution order."""

        compose_prefix = (self._docker_binary, "compose", "--file", self._manifest_file_name)
        return (
            (*compose_prefix, "pull"),
            (*compose_prefix, "up", "-d", "--remove-orphans"),
        )

    def adapter_redeploy(self, environment_vars: Mapping[str, str]) -> CommandResult:
        """Pull latest images then (re)start all services with orphan removal.

        Args:
            environment_vars: Variables passed unaltered into both compose commands.

        Returns:
            CommandResult: Result of the `up` command.

        Raises:
            RedeployFailedError: Raised when pull or up fails; carries combined output.
        """

        injected_environment = {str(key): str(value) for key, value in environment_vars.items()}
        captured_output: list[str] = []
        result: CommandResult | None = None

        for command_args in self.adapter_compose_commands():
            try:
                result = self._command_runner.command_run(
                    command_args,
                    env=injected_environment,
                    cwd=self._working_directory,
                )
            except CommandExecutionError as error:
                captured_output.append(error.cause)
                output = "\n".join(captured_output)
                logger.error("Error updating Docker: %s\nOutput: %s", error, output)
                raise RedeployFailedError(f"compose {command_args[4]} could not run", output=output) from error

            captured_output.append(result.output)
            if not result.command_succeeded():
                output = "\n".join(captured_output)
                logger.error("Error updating Docker: exit code %s\nOutput: %s", result.exit_code, output)
                raise RedeployFailedError(
                    f"compose {command_args[4]} exited with code {result.exit_code}",
                    output=output,
                )

        logger.info("Compose services pulled and recreated.")
        return result

    def adapter_prune_dangling_images(self) -> None:
        """Run `docker image prune -f`.

        Returns:
            None: Cleanup runs as side effect.

        Raises:
            PruneFailedError: Raised when the prune command fails or cannot run.
        """

        prune_args = (self._docker_binary, "image", "prune", "-f")
        try:
            result = self._command_runner.command_run(prune_args)
        except CommandExecutionError as error:
            raise PruneFailedError("Failed to remove dangling images", cause=error.cause) from error

        if not result.command_succeeded():
            raise PruneFailedError(
                "Failed to remove dangling images",
                cause=result.output.strip() or f"exit code {result.exit_code}",
            )

        logger.info("Removed dangling images.")
