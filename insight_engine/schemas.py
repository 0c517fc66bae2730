"""Data models for insights, references, challenges, and validation results."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, computed_field


class ConfidenceLevel(str, Enum):
    """Ordered confidence classification, lowest first."""

    SPECULATIVE = "speculative"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERIFIED = "verified"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_ORDER.index(self)

    @classmethod
    def lowest(cls) -> "ConfidenceLevel":
        return _CONFIDENCE_ORDER[0]

    # str ordering would compare the values alphabetically
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ConfidenceLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, ConfidenceLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, ConfidenceLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, ConfidenceLevel):
            return NotImplemented
        return self.rank >= other.rank


_CONFIDENCE_ORDER: Tuple[ConfidenceLevel, ...] = tuple(ConfidenceLevel)


class VerificationStatus(str, Enum):
    """Outcome of human review. Only reviewers change it."""

    UNVERIFIED = "unverified"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DISPUTED = "disputed"
    REJECTED = "rejected"


class SourceType(str, Enum):
    DOCUMENT = "document"
    URL = "url"
    EXPERT_STATEMENT = "expert_statement"
    DATA_SOURCE = "data_source"


class InsightKind(str, Enum):
    FACT = "fact"
    OPINION = "opinion"
    RECOMMENDATION = "recommendation"
    ANALYSIS = "analysis"
    PREDICTION = "prediction"


class ChallengeAspect(str, Enum):
    """Weak points a challenge can target, in evaluation order."""

    MISSING_EVIDENCE = "missing_evidence"
    UNSTATED_ASSUMPTION = "unstated_assumption"
    ALTERNATIVE_EXPLANATION = "alternative_explanation"
    SCOPE_BOUNDARY = "scope_boundary"


class IssueKind(str, Enum):
    MISSING_SOURCE = "missing_source"
    LOW_CONFIDENCE = "low_confidence"
    UNVERIFIED_CLAIM = "unverified_claim"
    POTENTIAL_HALLUCINATION = "potential_hallucination"
    MALFORMED_REFERENCE = "malformed_reference"


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class Reference(BaseModel):
    """External source material cited in support of an insight."""

    model_config = ConfigDict(frozen=True)

    id: str
    source_type: SourceType
    title: Optional[str] = None
    url: Optional[str] = None
    author: Optional[str] = None
    organization: Optional[str] = None
    date_published: Optional[date] = None
    date_accessed: Optional[date] = None
    page: Optional[str] = None
    section: Optional[str] = None
    excerpt: Optional[str] = None


class VerificationEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_status: VerificationStatus
    to_status: VerificationStatus
    reviewer: str
    note: Optional[str] = None
    at: datetime


class Insight(BaseModel):
    """AI-generated analysis emitted by an expert persona.

    Instances are frozen; reviewer actions produce a new instance with an
    extra ``verification_history`` entry.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    expert_id: str
    expert_name: str = ""
    project_id: Optional[str] = None
    content: str
    kind: InsightKind = InsightKind.ANALYSIS
    confidence: ConfidenceLevel = ConfidenceLevel.MEDIUM
    verification_status: VerificationStatus = VerificationStatus.UNVERIFIED
    references: Tuple[Reference, ...] = ()
    verification_history: Tuple[VerificationEvent, ...] = ()
    created_at: Optional[datetime] = None


class Citation(BaseModel):
    model_config = ConfigDict(frozen=True)

    reference_id: str
    index: int
    footnote: str
    inline: str
    # span of the reference excerpt inside the insight content, when found
    span_start: Optional[int] = None
    span_end: Optional[int] = None


class CitationError(BaseModel):
    model_config = ConfigDict(frozen=True)

    reference_id: str
    source_type: SourceType
    missing_fields: Tuple[str, ...]
    message: str


class Challenge(BaseModel):
    model_config = ConfigDict(frozen=True)

    aspect: ChallengeAspect
    question: str
    trigger: str


class ValidationIssue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: IssueKind
    severity: Severity
    message: str
    suggestion: Optional[str] = None
    reference_id: Optional[str] = None


class ValidationResult(BaseModel):
    """Aggregate output of one validation pass over an insight."""

    model_config = ConfigDict(frozen=True)

    insight_id: str
    confidence: ConfidenceLevel
    verification_status: VerificationStatus
    challenges: Tuple[Challenge, ...] = ()
    citations: Tuple[Citation, ...] = ()
    citation_errors: Tuple[CitationError, ...] = ()
    issues: Tuple[ValidationIssue, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def skipped_references(self) -> int:
        return len(self.citation_errors)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return not any(issue.severity is Severity.CRITICAL for issue in self.issues)
