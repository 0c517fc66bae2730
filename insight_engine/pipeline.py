"""Batch entry points used by the CLI scripts."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .confidence import record_verification
from .schemas import Insight, ValidationResult, VerificationStatus
from .settings import EngineSettings, load_settings
from .storage import load_insights, persist_results
from .tracing import log_trace_event
from .validator import validate_insights

logger = logging.getLogger(__name__)


def run_validation(
    input_path: Path,
    settings: Optional[EngineSettings] = None,
) -> Tuple[List[Insight], List[ValidationResult]]:
    """Validate every insight in ``input_path`` and write artifacts."""
    settings = settings or load_settings()
    insights = load_insights(input_path)
    if not insights:
        logger.warning("No insights found in %s", input_path)
    results = validate_insights(insights, settings=settings)
    for result in results:
        log_trace_event(
            settings.trace_path,
            "validator",
            "validated",
            insight_id=result.insight_id,
            details={
                "confidence": result.confidence.value,
                "verification_status": result.verification_status.value,
                "challenges": len(result.challenges),
                "citations": len(result.citations),
                "skipped_references": result.skipped_references,
                "is_valid": result.is_valid,
            },
        )
    persist_results(insights, results, settings.artifacts_dir)
    return insights, results


def apply_review(
    input_path: Path,
    insight_id: str,
    status: VerificationStatus,
    reviewer: str,
    note: Optional[str] = None,
    output_path: Optional[Path] = None,
    settings: Optional[EngineSettings] = None,
) -> Insight:
    """Record a reviewer decision on one insight and rewrite the insights file."""
    settings = settings or load_settings()
    insights = load_insights(input_path)
    matches = [index for index, insight in enumerate(insights) if insight.id == insight_id]
    if not matches:
        raise KeyError(f"Insight {insight_id!r} not found in {input_path}")
    index = matches[0]
    updated = record_verification(insights[index], status, reviewer, note=note)
    insights[index] = updated

    target = Path(output_path or input_path).expanduser()
    payload = [insight.model_dump(mode="json") for insight in insights]
    target.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    log_trace_event(
        settings.trace_path,
        "reviewer",
        "status_changed",
        insight_id=insight_id,
        details={"status": updated.verification_status.value, "reviewer": reviewer},
    )
    logger.info("Wrote reviewed insights to %s", target)
    return updated
