"""Subprocess-backed command runner for external CLI invocations."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Mapping, Sequence

from app.domain import CommandResult

from .deploy_errors import CommandExecutionError
from .interfaces import CommandRunnerPort

logger = logging.getLogger(__name__)


class SubprocessCommandRunner(CommandRunnerPort):
    """Run argv commands without a shell and capture merged stdout/stderr."""

    def __init__(self, timeout_seconds: float = 600.0, base_environment: Mapping[str, str] | None = None):
        """Initialize command runner.

        Args:
            timeout_seconds: Upper bound for each command execution.
            base_environment: Environment every command inherits; defaults to `os.environ`.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when timeout is not positive.
        """

        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

        self._timeout_seconds = timeout_seconds
        self._base_environment = base_environment

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
            env: Extra environment variables layered over the base environment.
            input_text: Optional text written to stdin.
            cwd: Optional working directory.

        Returns:
            CommandResult: Exit code and combined stdout/stderr.

        Raises:
            ValueError: Raised when args is empty.
            CommandExecutionError: Raised when the process cannot start, times out
                or rejects its arguments or environment.
        """

        command_args = tuple(str(argument) for argument in args)
        if not command_args:
            raise ValueError("args must not be empty")

        process_environment = dict(os.environ if self._base_environment is None else self._base_environment)
        if env:
            process_environment.update(env)

        logger.debug("Running command: %s", command_args[0:3])
        try:
            completed = subprocess.run(
                command_args,
                input=input_text,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=process_environment,
                cwd=cwd,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as error:
            raise CommandExecutionError(
                f"Command {command_args[0]} timed out after {self._timeout_seconds} seconds",
                cause=_decode_partial_output(error.output),
            ) from error
        except OSError as error:
            raise CommandExecutionError(f"Command {command_args[0]} could not be started: {error}") from error
        except ValueError as error:
            raise CommandExecutionError(
                f"Command {command_args[0]} rejected its arguments or environment: {error}"
            ) from error

        return CommandResult(args=command_args, exit_code=completed.returncode, output=completed.stdout or "")


def _decode_partial_output(output: str | bytes | None) -> str | None:
    if output is None:
        return None
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output
