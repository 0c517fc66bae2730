"""End-to-end insight validation tests."""

from __future__ import annotations

import json

from insight_engine.schemas import (
    ChallengeAspect,
    ConfidenceLevel,
    InsightKind,
    IssueKind,
    Severity,
    VerificationStatus,
)
from insight_engine.validator import validate_insight, validate_insights


def test_malformed_reference_is_skipped_not_fatal(make_insight, document_reference, malformed_url_reference) -> None:
    insight = make_insight(
        content="Customer acquisition cost is probably falling across the mid-market segment.",
        confidence=ConfidenceLevel.MEDIUM,
        verification_status=VerificationStatus.UNVERIFIED,
        references=(malformed_url_reference, document_reference),
    )
    result = validate_insight(insight)

    assert result.confidence is ConfidenceLevel.MEDIUM
    assert result.verification_status is VerificationStatus.UNVERIFIED
    assert len(result.citations) == 1
    assert result.citations[0].footnote == "Q3 Report, retrieved 2024-10-01"
    assert result.skipped_references == 1
    assert result.citation_errors[0].reference_id == "ref-url"
    assert result.challenges
    assert ChallengeAspect.MISSING_EVIDENCE not in [c.aspect for c in result.challenges]
    assert [issue.kind for issue in result.issues] == [IssueKind.MALFORMED_REFERENCE]
    assert result.is_valid


def test_validation_is_idempotent(make_insight, document_reference, malformed_url_reference) -> None:
    insight = make_insight(
        content="Sales always rise in Q4 because of holiday demand.",
        references=(malformed_url_reference, document_reference),
    )
    first = validate_insight(insight)
    second = validate_insight(insight)
    assert first == second
    assert first.model_dump_json() == second.model_dump_json()


def test_disputed_insight_drops_to_lowest_confidence(make_insight, document_reference) -> None:
    insight = make_insight(
        confidence=ConfidenceLevel.HIGH,
        verification_status=VerificationStatus.DISPUTED,
        references=(document_reference,),
    )
    assert validate_insight(insight).confidence is ConfidenceLevel.SPECULATIVE


def test_verified_confidence_needs_confirmation(make_insight, document_reference) -> None:
    pending = make_insight(
        confidence=ConfidenceLevel.VERIFIED,
        verification_status=VerificationStatus.PENDING,
        references=(document_reference,),
    )
    confirmed = pending.model_copy(update={"verification_status": VerificationStatus.CONFIRMED})
    assert validate_insight(pending).confidence is ConfidenceLevel.HIGH
    assert validate_insight(confirmed).confidence is ConfidenceLevel.VERIFIED


def test_fact_without_sources_is_invalid(make_insight) -> None:
    result = validate_insight(make_insight(kind=InsightKind.FACT))
    missing = [issue for issue in result.issues if issue.kind is IssueKind.MISSING_SOURCE]
    assert len(missing) == 1
    assert missing[0].severity is Severity.CRITICAL
    assert not result.is_valid


def test_unverified_high_confidence_is_flagged(make_insight, document_reference) -> None:
    result = validate_insight(make_insight(confidence=ConfidenceLevel.HIGH, references=(document_reference,)))
    assert [issue.kind for issue in result.issues] == [IssueKind.UNVERIFIED_CLAIM]
    assert result.is_valid


def test_hedged_fact_is_flagged_as_potential_hallucination(make_insight, document_reference) -> None:
    insight = make_insight(
        kind=InsightKind.FACT,
        content="I think the company revenue is $10M.",
        references=(document_reference,),
    )
    issues = validate_insight(insight).issues
    assert [issue.kind for issue in issues] == [IssueKind.POTENTIAL_HALLUCINATION]
    assert '"i think"' in issues[0].message


def test_speculative_non_prediction_is_flagged(make_insight, document_reference) -> None:
    speculative = make_insight(confidence=ConfidenceLevel.SPECULATIVE, references=(document_reference,))
    prediction = make_insight(
        confidence=ConfidenceLevel.SPECULATIVE,
        kind=InsightKind.PREDICTION,
        references=(document_reference,),
    )
    assert [i.kind for i in validate_insight(speculative).issues] == [IssueKind.LOW_CONFIDENCE]
    assert validate_insight(prediction).issues == ()


def test_batch_preserves_order(make_insight) -> None:
    insights = [make_insight(id=f"insight-{n}") for n in range(3)]
    results = validate_insights(insights)
    assert [result.insight_id for result in results] == ["insight-0", "insight-1", "insight-2"]


def test_serialized_result_exposes_counts(make_insight, malformed_url_reference) -> None:
    result = validate_insight(make_insight(references=(malformed_url_reference,)))
    payload = json.loads(result.model_dump_json())
    assert payload["skipped_references"] == 1
    assert payload["is_valid"] is True
    assert payload["confidence"] == "medium"
    assert payload["challenges"][0]["aspect"] == "missing_evidence"
