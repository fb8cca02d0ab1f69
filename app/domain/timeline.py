"""Shared stage timeline helpers for batch conversion diagnostics."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def domain_build_stage_event(
    stage: str,
    status: str,
    details: dict[str, Any] | None = None,
) -> dict[str, object]:
    """Build one structured timeline event payload.

    Args:
        stage: Stage name (`validate`, `submit`, `map_results`).
        status: Stage status marker (`started`, `completed`, `failed`).
        details: Optional structured details object.

    Returns:
        dict[str, object]: Structured timeline event.
    """

    event_payload: dict[str, object] = {
        "stage": stage,
        "status": status,
        "at_utc": datetime.now(timezone.utc).isoformat(),
    }
    if details is not None:
        event_payload["details"] = details
    return event_payload


def domain_build_stage_failure_event(stage: str, error: BaseException) -> dict[str, object]:
    """Build one failed-stage event carrying the error type and message."""

    return domain_build_stage_event(
        stage=stage,
        status="failed",
        details={"error_type": type(error).__name__, "error_message": str(error)},
    )
