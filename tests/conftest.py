"""Shared fixtures for the insight engine tests."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from typing import Callable

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from insight_engine.schemas import (  # noqa: E402
    ConfidenceLevel,
    Insight,
    InsightKind,
    Reference,
    SourceType,
    VerificationStatus,
)


@pytest.fixture()
def document_reference() -> Reference:
    return Reference(
        id="ref-doc",
        source_type=SourceType.DOCUMENT,
        title="Q3 Report",
        date_accessed=date(2024, 10, 1),
        excerpt="revenue reached $10M",
    )


@pytest.fixture()
def malformed_url_reference() -> Reference:
    return Reference(id="ref-url", source_type=SourceType.URL, title="Competitor pricing page")


@pytest.fixture()
def make_insight() -> Callable[..., Insight]:
    def _make(**overrides) -> Insight:
        fields = {
            "id": "insight-1",
            "expert_id": "expert-cfo",
            "expert_name": "Virtual CFO",
            "project_id": "project-1",
            "content": "Revenue reached $10M in fiscal 2024.",
            "kind": InsightKind.ANALYSIS,
            "confidence": ConfidenceLevel.MEDIUM,
            "verification_status": VerificationStatus.UNVERIFIED,
        }
        fields.update(overrides)
        return Insight(**fields)

    return _make
