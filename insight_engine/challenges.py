"""Template-driven challenge questions aimed at weak points in an insight."""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from .citations import DEFAULT_FOOTNOTE_TEMPLATES, FootnoteTemplate, is_well_formed
from .confidence import require_complete
from .errors import UnsupportedValueError
from .schemas import Challenge, ChallengeAspect, Insight, InsightKind, SourceType
from .settings import DEFAULT_SETTINGS, EngineSettings
from .utils import clip_text

logger = logging.getLogger(__name__)

ASPECT_ORDER: Tuple[ChallengeAspect, ...] = (
    ChallengeAspect.MISSING_EVIDENCE,
    ChallengeAspect.UNSTATED_ASSUMPTION,
    ChallengeAspect.ALTERNATIVE_EXPLANATION,
    ChallengeAspect.SCOPE_BOUNDARY,
)

DEFAULT_CHALLENGE_TEMPLATES: Mapping[ChallengeAspect, str] = require_complete(
    MappingProxyType(
        {
            ChallengeAspect.MISSING_EVIDENCE: (
                'What primary source or data point supports "{excerpt}"? '
                "Only {count} of the {required} required supporting reference(s) are attached."
            ),
            ChallengeAspect.UNSTATED_ASSUMPTION: (
                'The insight rests on "{trigger}". What assumption sits behind it, '
                "and how would you confirm it holds?"
            ),
            ChallengeAspect.ALTERNATIVE_EXPLANATION: (
                'The insight explains an outcome with "{trigger}". '
                "What other explanation could account for the same result?"
            ),
            ChallengeAspect.SCOPE_BOUNDARY: (
                '"{trigger}" makes this a universal claim. '
                "Under what conditions or for which segments would it stop holding?"
            ),
        }
    ),
    ChallengeAspect,
    "challenge template",
)


def marker_pattern(markers: Tuple[str, ...]) -> re.Pattern[str]:
    alternation = "|".join(re.escape(marker) for marker in sorted(markers, key=len, reverse=True))
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


ASSUMPTION_MARKERS: Tuple[str, ...] = (
    "i believe",
    "i think",
    "i recall",
    "probably",
    "presumably",
    "likely",
    "might be",
    "could be",
    "assume",
    "assuming",
    "as far as i know",
    "to my knowledge",
    "should",
    "expected to",
)

CAUSAL_MARKERS: Tuple[str, ...] = (
    "because",
    "due to",
    "driven by",
    "caused by",
    "as a result",
    "leads to",
    "led to",
    "results in",
    "therefore",
    "thanks to",
)

SCOPE_MARKERS: Tuple[str, ...] = (
    "always",
    "never",
    "all",
    "every",
    "everyone",
    "no one",
    "definitely",
    "certainly",
    "guaranteed",
    "entire market",
)

_ASSUMPTION_RE = marker_pattern(ASSUMPTION_MARKERS)
_CAUSAL_RE = marker_pattern(CAUSAL_MARKERS)
_SCOPE_RE = marker_pattern(SCOPE_MARKERS)

_FORWARD_LOOKING_KINDS = frozenset({InsightKind.PREDICTION, InsightKind.RECOMMENDATION})


def find_marker(pattern: re.Pattern[str], text: str) -> Optional[str]:
    """Return the leftmost marker phrase in ``text`` (lowercased), if any."""
    match = pattern.search(text)
    return match.group(0).lower() if match else None


def count_supporting_references(
    insight: Insight,
    footnote_templates: Mapping[SourceType, FootnoteTemplate] = DEFAULT_FOOTNOTE_TEMPLATES,
) -> int:
    return sum(1 for reference in insight.references if is_well_formed(reference, footnote_templates))


def _evaluate_aspect(
    aspect: ChallengeAspect,
    insight: Insight,
    supporting: int,
    settings: EngineSettings,
) -> Optional[str]:
    """Return the trigger that trips ``aspect`` for this insight, or None."""
    if aspect is ChallengeAspect.MISSING_EVIDENCE:
        if supporting < settings.min_supporting_references:
            return f"{supporting} supporting reference(s)"
        return None
    if aspect is ChallengeAspect.UNSTATED_ASSUMPTION:
        marker = find_marker(_ASSUMPTION_RE, insight.content)
        if marker:
            return marker
        if insight.kind in _FORWARD_LOOKING_KINDS:
            return f"{insight.kind.value} without stated assumptions"
        return None
    if aspect is ChallengeAspect.ALTERNATIVE_EXPLANATION:
        return find_marker(_CAUSAL_RE, insight.content)
    if aspect is ChallengeAspect.SCOPE_BOUNDARY:
        return find_marker(_SCOPE_RE, insight.content)
    raise UnsupportedValueError("challenge aspect", aspect)


def generate_challenge_questions(
    insight: Insight,
    templates: Mapping[ChallengeAspect, str] = DEFAULT_CHALLENGE_TEMPLATES,
    settings: Optional[EngineSettings] = None,
    footnote_templates: Mapping[SourceType, FootnoteTemplate] = DEFAULT_FOOTNOTE_TEMPLATES,
) -> Tuple[Challenge, ...]:
    """Produce at most one challenge per aspect, evidence gaps first.

    The output depends only on the insight text, kind, and references, so
    repeated calls return identical tuples. An empty tuple means no aspect
    tripped.
    """
    settings = settings or DEFAULT_SETTINGS
    supporting = count_supporting_references(insight, footnote_templates)
    excerpt = clip_text(insight.content, settings.claim_excerpt_chars)

    challenges: List[Challenge] = []
    for aspect in ASPECT_ORDER:
        trigger = _evaluate_aspect(aspect, insight, supporting, settings)
        if trigger is None:
            continue
        if aspect not in templates:
            raise UnsupportedValueError("challenge template", aspect, allowed=list(templates))
        question = templates[aspect].format(
            excerpt=excerpt,
            trigger=trigger,
            count=supporting,
            required=settings.min_supporting_references,
        )
        challenges.append(Challenge(aspect=aspect, question=question, trigger=trigger))

    logger.debug("Insight %s produced %d challenge(s)", insight.id, len(challenges))
    return tuple(challenges)
