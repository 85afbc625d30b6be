"""Container registry login adapter backed by the docker CLI."""

from __future__ import annotations

import logging

from .deploy_errors import CommandExecutionError, RegistryAuthFailedError
from .interfaces import CommandRunnerPort, RegistryAuthenticatorPort

logger = logging.getLogger(__name__)


class DockerRegistryAuthenticator(RegistryAuthenticatorPort):
    """Run `docker login` once per deployment with the token passed on stdin."""

    def __init__(
        self,
        command_runner: CommandRunnerPort,
        registry_host: str = "ghcr.io",
        username: str = "nielshoek",
        docker_binary: str = "docker",
    ):
        """Initialize registry authenticator.

        Args:
            command_runner: Runner executing the docker CLI.
            registry_host: Registry hostname to authenticate against.
            username: Registry username paired with the access token.
            docker_binary: Docker CLI executable name or path.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if command_runner is None:
            raise ValueError("command_runner must not be None")
        if not registry_host.strip():
            raise ValueError("registry_host must not be blank")
        if not username.strip():
            raise ValueError("username must not be blank")

        self._command_runner = command_runner
        self._registry_host = registry_host.strip()
        self._username = username.strip()
        self._docker_binary = docker_binary

    def adapter_registry_login(self, access_token: str) -> None:
        """Log in to the configured container registry.

        Args:
            access_token: Registry password/token, written to stdin.

        Returns:
            None: Session is stored by the docker CLI as side effect.

        Raises:
            RegistryAuthFailedError: Raised when login exits non-zero or cannot run.
        """

        login_args = (
            self._docker_binary,
            "login",
            self._registry_host,
            "-u",
            self._username,
            "--password-stdin",
        )
        try:
            result = self._command_runner.command_run(login_args, input_text=access_token)
        except CommandExecutionError as error:
            logger.error("Failed to login to %s: %s", self._registry_host, error)
            raise RegistryAuthFailedError(
                f"Failed to login to container registry {self._registry_host}",
                cause=error.cause,
            ) from error

        if not result.command_succeeded():
            logger.error("Failed to login to %s: exit code %s", self._registry_host, result.exit_code)
            raise RegistryAuthFailedError(
                f"Failed to login to container registry {self._registry_host}",
                cause=result.output.strip() or f"exit code {result.exit_code}",
            )

        logger.info("Logged in to container registry %s successfully.", self._registry_host)
