"""Confidence derivation, reviewer status transitions, and display labels."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Type

from .errors import InvalidStatusTransition, UnsupportedValueError
from .schemas import ConfidenceLevel, Insight, SourceType, VerificationEvent, VerificationStatus

logger = logging.getLogger(__name__)


def require_complete(table: Mapping[Any, Any], enum_cls: Type[Enum], name: str) -> Mapping[Any, Any]:
    """Fail if ``table`` does not have an entry for every member of ``enum_cls``."""
    missing = [member for member in enum_cls if member not in table]
    if missing:
        raise UnsupportedValueError(f"{name} table", missing, allowed=list(table))
    return table


def coerce_enum(enum_cls: Type[Enum], value: Any, kind: str) -> Any:
    """Return ``value`` as a member of ``enum_cls`` or raise loudly."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise UnsupportedValueError(kind, value, allowed=[m.value for m in enum_cls]) from exc


CONFIDENCE_INDICATORS: Mapping[ConfidenceLevel, Mapping[str, str]] = require_complete(
    MappingProxyType(
        {
            ConfidenceLevel.VERIFIED: MappingProxyType(
                {
                    "label": "Verified",
                    "color": "text-emerald-600",
                    "icon": "✓✓✓",
                    "description": "Confirmed by a human reviewer against cited sources",
                }
            ),
            ConfidenceLevel.HIGH: MappingProxyType(
                {
                    "label": "High Confidence",
                    "color": "text-green-500",
                    "icon": "✓✓",
                    "description": "Multiple reliable sources, widely accepted",
                }
            ),
            ConfidenceLevel.MEDIUM: MappingProxyType(
                {
                    "label": "Medium Confidence",
                    "color": "text-yellow-500",
                    "icon": "✓",
                    "description": "Single reliable source or expert consensus",
                }
            ),
            ConfidenceLevel.LOW: MappingProxyType(
                {
                    "label": "Low Confidence",
                    "color": "text-orange-500",
                    "icon": "?",
                    "description": "Limited sources, some uncertainty",
                }
            ),
            ConfidenceLevel.SPECULATIVE: MappingProxyType(
                {
                    "label": "Speculative",
                    "color": "text-red-500",
                    "icon": "??",
                    "description": "No direct sources, based on inference",
                }
            ),
        }
    ),
    ConfidenceLevel,
    "confidence indicator",
)

VERIFICATION_STATUS_LABELS: Mapping[VerificationStatus, Mapping[str, str]] = require_complete(
    MappingProxyType(
        {
            VerificationStatus.CONFIRMED: MappingProxyType(
                {"label": "Confirmed", "color": "text-green-500", "icon": "✅"}
            ),
            VerificationStatus.PENDING: MappingProxyType(
                {"label": "Pending Review", "color": "text-yellow-500", "icon": "⏳"}
            ),
            VerificationStatus.DISPUTED: MappingProxyType(
                {"label": "Disputed", "color": "text-orange-500", "icon": "⚠️"}
            ),
            VerificationStatus.UNVERIFIED: MappingProxyType(
                {"label": "Unverified", "color": "text-gray-500", "icon": "❓"}
            ),
            VerificationStatus.REJECTED: MappingProxyType(
                {"label": "Rejected", "color": "text-red-500", "icon": "❌"}
            ),
        }
    ),
    VerificationStatus,
    "verification status label",
)

SOURCE_TYPE_LABELS: Mapping[SourceType, Mapping[str, str]] = require_complete(
    MappingProxyType(
        {
            SourceType.DOCUMENT: MappingProxyType(
                {"label": "Document", "description": "Report, filing, or other original document"}
            ),
            SourceType.URL: MappingProxyType(
                {"label": "Web Source", "description": "Published page identified by its link"}
            ),
            SourceType.EXPERT_STATEMENT: MappingProxyType(
                {"label": "Expert Opinion", "description": "Professional judgment from a qualified expert"}
            ),
            SourceType.DATA_SOURCE: MappingProxyType(
                {"label": "Data Source", "description": "Dataset or statistical series from an organization"}
            ),
        }
    ),
    SourceType,
    "source type label",
)

ALLOWED_TRANSITIONS: Mapping[VerificationStatus, FrozenSet[VerificationStatus]] = require_complete(
    MappingProxyType(
        {
            VerificationStatus.UNVERIFIED: frozenset({VerificationStatus.PENDING}),
            VerificationStatus.PENDING: frozenset(
                {
                    VerificationStatus.CONFIRMED,
                    VerificationStatus.DISPUTED,
                    VerificationStatus.REJECTED,
                }
            ),
            VerificationStatus.CONFIRMED: frozenset({VerificationStatus.PENDING}),
            VerificationStatus.DISPUTED: frozenset({VerificationStatus.PENDING}),
            VerificationStatus.REJECTED: frozenset({VerificationStatus.PENDING}),
        }
    ),
    VerificationStatus,
    "status transition",
)


def derive_confidence(current: ConfidenceLevel, status: VerificationStatus) -> ConfidenceLevel:
    """Apply the reviewer's verdict to an insight's stated confidence.

    Disputed and rejected insights drop to the lowest level. Confirmed
    insights keep the supplied level and are never raised above it. Only a
    confirmed insight may carry ``VERIFIED``; any other status caps it at
    ``HIGH``.
    """
    current = coerce_enum(ConfidenceLevel, current, "confidence level")
    status = coerce_enum(VerificationStatus, status, "verification status")

    if status in (VerificationStatus.DISPUTED, VerificationStatus.REJECTED):
        return ConfidenceLevel.lowest()
    if status is VerificationStatus.CONFIRMED:
        return current
    if status in (VerificationStatus.PENDING, VerificationStatus.UNVERIFIED):
        return min(current, ConfidenceLevel.HIGH)
    raise UnsupportedValueError("verification status", status)


def transition_status(current: VerificationStatus, target: VerificationStatus) -> VerificationStatus:
    """Validate a reviewer-initiated status change and return the new status."""
    current = coerce_enum(VerificationStatus, current, "verification status")
    target = coerce_enum(VerificationStatus, target, "verification status")
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStatusTransition(current.value, target.value)
    return target


def record_verification(
    insight: Insight,
    status: VerificationStatus,
    reviewer: str,
    note: Optional[str] = None,
    at: Optional[datetime] = None,
) -> Insight:
    """Return a copy of ``insight`` with the reviewer's transition appended."""
    if not reviewer or not reviewer.strip():
        raise ValueError("Reviewer must not be empty")
    new_status = transition_status(insight.verification_status, status)
    event = VerificationEvent(
        from_status=insight.verification_status,
        to_status=new_status,
        reviewer=reviewer,
        note=note,
        at=at or datetime.now(timezone.utc),
    )
    logger.info(
        "Insight %s moved %s -> %s by %s",
        insight.id,
        event.from_status.value,
        event.to_status.value,
        reviewer,
    )
    update: Dict[str, Any] = {
        "verification_status": new_status,
        "verification_history": insight.verification_history + (event,),
    }
    return insight.model_copy(update=update)
