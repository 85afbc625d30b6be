"""Shared timeline event helper utilities."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any


def domain_build_stage_event(
    stage: str | Enum,
    status: str,
    details: dict[str, Any] | None = None,
) -> dict[str, object]:
    """Build one structured timeline event payload.

    Args:
        stage: Stage name or stage enum member.
        status: Stage status marker (`started`, `completed`, `failed`, `skipped`).
        details: Optional structured details object.

    Returns:
        dict[str, object]: Structured timeline event.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    stage_name = stage.value if isinstance(stage, Enum) else str(stage)
    event_payload: dict[str, object] = {
        "stage": stage_name,
        "status": status,
        "at_utc": datetime.now(timezone.utc).isoformat(),
    }
    if details:
        event_payload["details"] = dict(details)
    return event_payload
