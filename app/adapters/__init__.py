"""Adapter layer package for artifact host and container tooling boundaries."""

from .artifact_fetcher import RawFileArtifactFetcher
from .command_runner import SubprocessCommandRunner
from .deploy_errors import (
	ArtifactFetchFailedError,
	CommandExecutionError,
	DeployAdapterError,
	PruneFailedError,
	RedeployFailedError,
	RegistryAuthFailedError,
)
from .interfaces import ArtifactFetcherPort, CommandRunnerPort, RedeployExecutorPort, RegistryAuthenticatorPort
from .redeploy_executor import DockerComposeRedeployExecutor
from .registry_authenticator import DockerRegistryAuthenticator

__all__ = [
	"ArtifactFetchFailedError",
	"ArtifactFetcherPort",
	"CommandExecutionError",
	"CommandRunnerPort",
	"DeployAdapterError",
	"DockerComposeRedeployExecutor",
	"DockerRegistryAuthenticator",
	"PruneFailedError",
	"RawFileArtifactFetcher",
	"RedeployExecutorPort",
	"RedeployFailedError",
	"RegistryAuthFailedError",
	"RegistryAuthenticatorPort",
	"SubprocessCommandRunner",
]
