"""Insight validation: confidence, challenges, citations, and rule findings."""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from .challenges import (
    DEFAULT_CHALLENGE_TEMPLATES,
    find_marker,
    generate_challenge_questions,
    marker_pattern,
)
from .citations import DEFAULT_FOOTNOTE_TEMPLATES, FootnoteTemplate, build_citations
from .confidence import derive_confidence
from .schemas import (
    ChallengeAspect,
    CitationError,
    ConfidenceLevel,
    Insight,
    InsightKind,
    IssueKind,
    Severity,
    SourceType,
    ValidationIssue,
    ValidationResult,
    VerificationStatus,
)
from .settings import DEFAULT_SETTINGS, EngineSettings

logger = logging.getLogger(__name__)

HEDGING_MARKERS: Tuple[str, ...] = (
    "i believe",
    "i think",
    "probably",
    "might be",
    "could be",
    "as far as i know",
    "to my knowledge",
    "i recall",
)

_HEDGING_RE = marker_pattern(HEDGING_MARKERS)


def _collect_issues(
    insight: Insight,
    supporting: int,
    citation_errors: Sequence[CitationError],
    settings: EngineSettings,
) -> Tuple[ValidationIssue, ...]:
    issues: List[ValidationIssue] = []

    if insight.kind is InsightKind.FACT and supporting < settings.min_supporting_references:
        issues.append(
            ValidationIssue(
                kind=IssueKind.MISSING_SOURCE,
                severity=Severity.CRITICAL,
                message="Factual claim without supporting citation",
                suggestion="Attach the primary source document for this factual claim",
            )
        )

    if insight.confidence is ConfidenceLevel.SPECULATIVE and insight.kind is not InsightKind.PREDICTION:
        issues.append(
            ValidationIssue(
                kind=IssueKind.LOW_CONFIDENCE,
                severity=Severity.WARNING,
                message="Speculative content not marked as prediction",
                suggestion="Reframe as a prediction or add confidence caveats",
            )
        )

    if (
        insight.verification_status is VerificationStatus.UNVERIFIED
        and insight.confidence >= ConfidenceLevel.HIGH
    ):
        issues.append(
            ValidationIssue(
                kind=IssueKind.UNVERIFIED_CLAIM,
                severity=Severity.WARNING,
                message="High confidence claim not yet verified",
                suggestion="Submit for reviewer verification before finalizing",
            )
        )

    if insight.kind is InsightKind.FACT:
        marker = find_marker(_HEDGING_RE, insight.content)
        if marker:
            issues.append(
                ValidationIssue(
                    kind=IssueKind.POTENTIAL_HALLUCINATION,
                    severity=Severity.WARNING,
                    message=f'Uncertainty language ("{marker}") detected in factual claim',
                    suggestion="Verify this statement or reclassify it as opinion or analysis",
                )
            )

    for error in citation_errors:
        issues.append(
            ValidationIssue(
                kind=IssueKind.MALFORMED_REFERENCE,
                severity=Severity.WARNING,
                message=error.message,
                suggestion=f"Add {', '.join(error.missing_fields)} to reference {error.reference_id}",
                reference_id=error.reference_id,
            )
        )

    return tuple(issues)


def validate_insight(
    insight: Insight,
    settings: Optional[EngineSettings] = None,
    challenge_templates: Mapping[ChallengeAspect, str] = DEFAULT_CHALLENGE_TEMPLATES,
    footnote_templates: Mapping[SourceType, FootnoteTemplate] = DEFAULT_FOOTNOTE_TEMPLATES,
) -> ValidationResult:
    """Validate one insight.

    Malformed references are reported in ``citation_errors`` and counted in
    ``skipped_references``; they never abort the pass. Unknown enum values
    still raise ``UnsupportedValueError``.
    """
    settings = settings or DEFAULT_SETTINGS

    confidence = derive_confidence(insight.confidence, insight.verification_status)
    challenges = generate_challenge_questions(
        insight,
        templates=challenge_templates,
        settings=settings,
        footnote_templates=footnote_templates,
    )
    batch = build_citations(insight, footnote_templates)
    issues = _collect_issues(insight, len(batch.citations), batch.errors, settings)

    result = ValidationResult(
        insight_id=insight.id,
        confidence=confidence,
        verification_status=insight.verification_status,
        challenges=challenges,
        citations=batch.citations,
        citation_errors=batch.errors,
        issues=issues,
    )
    logger.debug(
        "Validated insight %s: confidence=%s challenges=%d citations=%d skipped=%d",
        insight.id,
        confidence.value,
        len(challenges),
        len(batch.citations),
        result.skipped_references,
    )
    return result


def validate_insights(
    insights: Iterable[Insight],
    settings: Optional[EngineSettings] = None,
) -> List[ValidationResult]:
    """Validate a batch of insights, preserving input order."""
    return [validate_insight(insight, settings=settings) for insight in insights]
