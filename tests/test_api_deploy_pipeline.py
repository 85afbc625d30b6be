"""End-to-end webhook tests wiring real adapters to scripted HTTP and command doubles."""
# pylint: disable=duplicate-code

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Mapping, Sequence

import httpx
from fastapi.testclient import TestClient

from app.adapters import (
    CommandRunnerPort,
    DockerComposeRedeployExecutor,
    DockerRegistryAuthenticator,
    RawFileArtifactFetcher,
    SubprocessCommandRunner,
)
from app.api.application import create_api_application
from app.config import AppSettings
from app.domain import CommandResult, DeploymentRequest, DeploymentStage
from app.jobs import DeploymentOrchestrator, DeploymentOrchestratorConfig

_DEPLOY_TOKEN = "deploy-secret"
_GITHUB_TOKEN = "github-secret"


class _ScriptedCommandRunner:
    """Command runner double failing for argv prefixes listed in `failing_commands`."""

    def __init__(self, failing_commands: Mapping[tuple[str, ...], str] | None = None):
        """Initialize runner double.

        Args:
            failing_commands: Argv prefix mapped to the output the failing command prints.

        Returns:
            None: Initializer does not return values.

        Raises:
            RuntimeError: This double does not raise runtime errors.
        """

        self._failing_commands = dict(failing_commands or {})
        self.calls: list[tuple[tuple[str, ...], dict[str, str]]] = []

    def command_run(
        self,
        args: Sequence[str],
        env: Mapping[str, str] | None = None,
        input_text: str | None = None,
        cwd: str | None = None,
    ) -> CommandResult:
        """Record call and return success unless the argv prefix is scripted to fail.

        Args:
            args: Argument vector.
            env: Injected environment.
            input_text: Stdin text.
            cwd: Working directory.

        Returns:
            CommandResult: Scripted result.

        Raises:
            RuntimeError: This double does not raise runtime errors.
        """

        _ = (input_text, cwd)
        command_args = tuple(args)
        self.calls.append((command_args, dict(env or {})))
        for prefix, output in self._failing_commands.items():
            if command_args[: len(prefix)] == prefix:
                return CommandResult(args=command_args, exit_code=1, output=output)
        return CommandResult(args=command_args, exit_code=0, output="")


class _InterpreterCommandRunner:
    """Command runner double that executes a no-op interpreter through the real subprocess runner."""

    def __init__(self):
        self._runner = SubprocessCommandRunner(timeout_seconds=30)
        self.calls: list[tuple[str, ...]] = []

    def command_run(
        self,
        args: Sequence[str],
        env: Mapping[str, str] | None = None,
        input_text: str | None = None,
        cwd: str | None = None,
    ) -> CommandResult:
        """Record the docker argv and run a no-op process with the same environment.

        Args:
            args: Argument vector.
            env: Injected environment, handed to the real runner unaltered.
            input_text: Stdin text.
            cwd: Working directory.

        Returns:
            CommandResult: Result of the no-op process.

        Raises:
            CommandExecutionError: Raised when the real runner cannot start the process.
        """

        self.calls.append(tuple(args))
        return self._runner.command_run([sys.executable, "-c", "pass"], env=env, input_text=input_text, cwd=cwd)


def _build_orchestrator(
    tmp_path: Path,
    runner: CommandRunnerPort,
    fetched_urls: list[str],
    missing_files: set[str] | None = None,
) -> DeploymentOrchestrator:
    """Wire real adapters around scripted HTTP and command doubles.

    Args:
        tmp_path: Working directory for fetched files.
        runner: Command runner double.
        fetched_urls: Mutable list capturing requested URLs.
        missing_files: File names the artifact host answers with 404.

    Returns:
        DeploymentOrchestrator: Orchestrator driving the real adapters.

    Raises:
        ValueError: This helper does not raise value errors.
    """

    def _artifact_host(request: httpx.Request) -> httpx.Response:
        fetched_urls.append(str(request.url))
        file_name = request.url.path.rsplit("/", 1)[-1]
        if file_name in (missing_files or set()):
            return httpx.Response(404, content=b"404: Not Found")
        return httpx.Response(200, content=f"contents of {file_name}".encode("utf-8"))

    return DeploymentOrchestrator(
        artifact_fetcher=RawFileArtifactFetcher(
            working_directory=str(tmp_path),
            transport=httpx.MockTransport(_artifact_host),
        ),
        registry_authenticator=DockerRegistryAuthenticator(command_runner=runner),
        redeploy_executor=DockerComposeRedeployExecutor(command_runner=runner, working_directory=str(tmp_path)),
        config=DeploymentOrchestratorConfig(access_token=_GITHUB_TOKEN),
    )


def _build_client(
    tmp_path: Path,
    runner: CommandRunnerPort,
    fetched_urls: list[str],
    missing_files: set[str] | None = None,
) -> TestClient:
    """Wire settings, real adapters and orchestrator into a test client.

    Args:
        tmp_path: Working directory for fetched files.
        runner: Command runner double.
        fetched_urls: Mutable list capturing requested URLs.
        missing_files: File names the artifact host answers with 404.

    Returns:
        TestClient: Client for the fully wired webhook.

    Raises:
        ValueError: This helper does not raise value errors.
    """

    settings = AppSettings(
        deploy_token=_DEPLOY_TOKEN,
        github_token=_GITHUB_TOKEN,
        working_directory=str(tmp_path),
        _env_file=None,
    )
    orchestrator = _build_orchestrator(tmp_path, runner, fetched_urls, missing_files)
    return TestClient(create_api_application(settings=settings, deployment_orchestrator=orchestrator))


def _blog_body(extra_files: list[str] | None = None) -> str:
    return json.dumps(
        {
            "application_name": "blog",
            "environment_vars": {"TAG": "v2"},
            "extra_files_to_download": ["nginx.conf"] if extra_files is None else extra_files,
        }
    )


def test_api_pipeline_blog_scenario_fetches_logs_in_redeploys_and_prunes(tmp_path: Path) -> None:
    """Run the full blog deployment with TAG=v2 and an nginx.conf extra file.

    Args:
        tmp_path: Pytest temporary directory.

    Returns:
        None: Assertions validate fetch order, commands, environment and response.

    Raises:
        AssertionError: Raised when the pipeline deviates from the expected flow.
    """

    runner = _ScriptedCommandRunner()
    fetched_urls: list[str] = []
    client = _build_client(tmp_path, runner, fetched_urls)

    response = client.post("/deploy", content=_blog_body(), headers={"Authorization": _DEPLOY_TOKEN})

    assert response.status_code == 200
    assert response.text == "Application 'blog' updated successfully.\n"
    assert fetched_urls == [
        "https://raw.githubusercontent.com/nielshoek/blog/main/docker-compose.yml",
        "https://raw.githubusercontent.com/nielshoek/blog/main/nginx.conf",
    ]
    assert (tmp_path / "docker-compose.yml").read_text() == "contents of docker-compose.yml"
    assert (tmp_path / "nginx.conf").read_text() == "contents of nginx.conf"
    executed_commands = [call[0] for call in runner.calls]
    assert executed_commands == [
        ("docker", "login", "ghcr.io", "-u", "nielshoek", "--password-stdin"),
        ("docker", "compose", "--file", "docker-compose.yml", "pull"),
        ("docker", "compose", "--file", "docker-compose.yml", "up", "-d", "--remove-orphans"),
        ("docker", "image", "prune", "-f"),
    ]
    compose_environments = [call[1] for call in runner.calls if call[0][1] == "compose"]
    assert compose_environments == [{"TAG": "v2"}, {"TAG": "v2"}]


def test_api_pipeline_invalid_token_fetches_nothing(tmp_path: Path) -> None:
    """Reject invalid token with 401 and zero fetched files or commands.

    Args:
        tmp_path: Pytest temporary directory.

    Returns:
        None: Assertions validate absence of side effects.

    Raises:
        AssertionError: Raised when any side effect occurs.
    """

    runner = _ScriptedCommandRunner()
    fetched_urls: list[str] = []
    client = _build_client(tmp_path, runner, fetched_urls)

    response = client.post("/deploy", content=_blog_body(), headers={"Authorization": "not-the-token"})

    assert response.status_code == 401
    assert fetched_urls == []
    assert runner.calls == []
    assert list(tmp_path.iterdir()) == []


def test_api_pipeline_first_extra_failure_skips_later_files(tmp_path: Path) -> None:
    """Never fetch `b.env` once `a.env` fails; respond 500.

    Args:
        tmp_path: Pytest temporary directory.

    Returns:
        None: Assertions validate short-circuit on extra files.

    Raises:
        AssertionError: Raised when later file is fetched or commands run.
    """

    runner = _ScriptedCommandRunner()
    fetched_urls: list[str] = []
    client = _build_client(tmp_path, runner, fetched_urls, missing_files={"a.env"})

    response = client.post(
        "/deploy",
        content=_blog_body(extra_files=["a.env", "b.env"]),
        headers={"Authorization": _DEPLOY_TOKEN},
    )

    assert response.status_code == 500
    assert [url.rsplit("/", 1)[-1] for url in fetched_urls] == ["docker-compose.yml", "a.env"]
    assert runner.calls == []


def test_api_pipeline_prune_failure_keeps_200(tmp_path: Path) -> None:
    """Keep success status when only prune fails.

    Args:
        tmp_path: Pytest temporary directory.

    Returns:
        None: Assertions validate non-fatal prune.

    Raises:
        AssertionError: Raised when prune failure changes the response.
    """

    runner = _ScriptedCommandRunner({("docker", "image", "prune"): "Cannot connect to the Docker daemon"})
    fetched_urls: list[str] = []
    client = _build_client(tmp_path, runner, fetched_urls)

    response = client.post("/deploy", content=_blog_body(), headers={"Authorization": _DEPLOY_TOKEN})

    assert response.status_code == 200
    assert runner.calls[-1][0] == ("docker", "image", "prune", "-f")


def test_api_pipeline_redeploy_failure_returns_500_without_output(tmp_path: Path) -> None:
    """Respond 500 without exposing compose output to the caller.

    Args:
        tmp_path: Pytest temporary directory.

    Returns:
        None: Assertions validate opaque failure and skipped prune.

    Raises:
        AssertionError: Raised when output leaks or prune runs.
    """

    runner = _ScriptedCommandRunner({("docker", "compose", "--file", "docker-compose.yml", "up"): "port 80 in use"})
    fetched_urls: list[str] = []
    client = _build_client(tmp_path, runner, fetched_urls)

    response = client.post("/deploy", content=_blog_body(), headers={"Authorization": _DEPLOY_TOKEN})

    assert response.status_code == 500
    assert "port 80" not in response.text
    assert ("docker", "image", "prune", "-f") not in [call[0] for call in runner.calls]


def test_api_pipeline_login_failure_returns_500_without_redeploy(tmp_path: Path) -> None:
    """Respond 500 and skip compose when registry login fails.

    Args:
        tmp_path: Pytest temporary directory.

    Returns:
        None: Assertions validate login short-circuit.

    Raises:
        AssertionError: Raised when compose runs after failed login.
    """

    runner = _ScriptedCommandRunner({("docker", "login"): "unauthorized: authentication required"})
    fetched_urls: list[str] = []
    client = _build_client(tmp_path, runner, fetched_urls)

    response = client.post("/deploy", content=_blog_body(), headers={"Authorization": _DEPLOY_TOKEN})

    assert response.status_code == 500
    assert [call[0][1] for call in runner.calls] == ["login"]


def test_api_pipeline_unusable_environment_fails_at_redeploying(tmp_path: Path) -> None:
    """End in a FAILED outcome at redeploying when the OS refuses an env key.

    Args:
        tmp_path: Pytest temporary directory.

    Returns:
        None: Assertions validate the outcome instead of a raised ValueError.

    Raises:
        AssertionError: Raised when the failure escapes the orchestrator.
    """

    runner = _InterpreterCommandRunner()
    orchestrator = _build_orchestrator(tmp_path, runner, [])

    outcome = orchestrator.job_execute_deployment(
        DeploymentRequest(application_name="blog", environment_vars={"A=B": "v"})
    )

    assert outcome.terminal_stage == DeploymentStage.FAILED
    assert outcome.failed_stage == DeploymentStage.REDEPLOYING
    assert outcome.error_code == "DEPLOY_REDEPLOY_ERROR"
    assert [call[1] for call in runner.calls] == ["login", "compose"]


def test_api_pipeline_unusable_environment_returns_500(tmp_path: Path) -> None:
    """Respond with the generic 500 when an env key cannot reach the compose process.

    Args:
        tmp_path: Pytest temporary directory.

    Returns:
        None: Assertions validate the failure response.

    Raises:
        AssertionError: Raised when the request errors out differently.
    """

    client = _build_client(tmp_path, _InterpreterCommandRunner(), [])
    body = json.dumps({"application_name": "blog", "environment_vars": {"A=B": "v"}})

    response = client.post("/deploy", content=body, headers={"Authorization": _DEPLOY_TOKEN})

    assert response.status_code == 500
    assert response.text == "Failed to update Docker container.\n"
