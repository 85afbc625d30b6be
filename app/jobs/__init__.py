"""Job layer package for deployment workflow orchestration boundaries."""

from .interfaces import DeploymentOrchestratorPort
from .deployment_orchestrator import DeploymentOrchestrator, DeploymentOrchestratorConfig

__all__ = [
	"DeploymentOrchestrator",
	"DeploymentOrchestratorConfig",
	"DeploymentOrchestratorPort",
]
