"""Trace logging for validation runs."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .utils import ensure_dirs


def log_trace_event(
    trace_path: Path,
    component: str,
    stage: str,
    insight_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """Append a structured trace event as one JSON line."""
    payload: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "component": component,
        "stage": stage,
        "insight_id": insight_id,
    }
    if details:
        payload["details"] = details
    ensure_dirs(trace_path.parent)
    with trace_path.open("a", encoding="utf-8") as handle:
        handle.write(json.dumps(payload) + "\n")


def read_trace_events(trace_path: Path) -> list[Dict[str, Any]]:
    if not trace_path.exists():
        return []
    lines = trace_path.read_text(encoding="utf-8").splitlines()
    return [json.loads(line) for line in lines if line.strip()]
