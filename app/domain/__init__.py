"""Domain models used across application layer boundaries."""

from .models import CommandResult, DeploymentOutcome, DeploymentRequest, DeploymentStage, FetchResult, HealthStatus
from .timeline import domain_build_stage_event

__all__ = [
    "CommandResult",
    "DeploymentOutcome",
    "DeploymentRequest",
    "DeploymentStage",
    "FetchResult",
    "HealthStatus",
    "domain_build_stage_event",
]
