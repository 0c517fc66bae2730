"""Citation footnotes and reference tables."""

from __future__ import annotations

import logging
import re
import string
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .confidence import SOURCE_TYPE_LABELS, coerce_enum, require_complete
from .errors import CitationFormatError, UnsupportedValueError
from .schemas import Citation, CitationError, Insight, Reference, SourceType

logger = logging.getLogger(__name__)

_FORMATTER = string.Formatter()


@dataclass(frozen=True)
class FootnoteTemplate:
    """Segments are rendered in order when all their fields are present."""

    required: Tuple[str, ...]
    segments: Tuple[str, ...]
    separator: str = ", "


@dataclass(frozen=True)
class CitationBatch:
    citations: Tuple[Citation, ...]
    errors: Tuple[CitationError, ...]


DEFAULT_FOOTNOTE_TEMPLATES: Mapping[SourceType, FootnoteTemplate] = require_complete(
    MappingProxyType(
        {
            SourceType.DOCUMENT: FootnoteTemplate(
                required=("title",),
                segments=(
                    "{author}",
                    "{title}",
                    "{organization}",
                    "{year}",
                    "p. {page}",
                    "§{section}",
                    "retrieved {date_accessed}",
                ),
            ),
            SourceType.URL: FootnoteTemplate(
                required=("url",),
                segments=("{title}", "<{url}>", "(accessed {date_accessed})"),
                separator=" ",
            ),
            SourceType.EXPERT_STATEMENT: FootnoteTemplate(
                required=("author",),
                segments=("{author}", "{organization}", "personal communication", "{date_published}"),
            ),
            SourceType.DATA_SOURCE: FootnoteTemplate(
                required=("title",),
                segments=("{organization}", "{title}", "{year}", "retrieved {date_accessed}"),
            ),
        }
    ),
    SourceType,
    "footnote template",
)


def _reference_fields(reference: Reference) -> Dict[str, str]:
    raw = {
        "title": reference.title,
        "url": reference.url,
        "author": reference.author,
        "organization": reference.organization,
        "page": reference.page,
        "section": reference.section,
        "date_published": reference.date_published.isoformat() if reference.date_published else None,
        "date_accessed": reference.date_accessed.isoformat() if reference.date_accessed else None,
        "year": str(reference.date_published.year) if reference.date_published else None,
    }
    return {key: value.strip() for key, value in raw.items() if value and value.strip()}


def _segment_fields(segment: str) -> List[str]:
    return [name for _, name, _, _ in _FORMATTER.parse(segment) if name]


def _template_for(
    reference: Reference,
    templates: Mapping[SourceType, FootnoteTemplate],
) -> FootnoteTemplate:
    source_type = coerce_enum(SourceType, reference.source_type, "reference source type")
    if source_type not in templates:
        raise UnsupportedValueError("footnote template", source_type, allowed=list(templates))
    return templates[source_type]


def missing_required_fields(
    reference: Reference,
    templates: Mapping[SourceType, FootnoteTemplate] = DEFAULT_FOOTNOTE_TEMPLATES,
) -> Tuple[str, ...]:
    template = _template_for(reference, templates)
    fields = _reference_fields(reference)
    return tuple(name for name in template.required if name not in fields)


def is_well_formed(
    reference: Reference,
    templates: Mapping[SourceType, FootnoteTemplate] = DEFAULT_FOOTNOTE_TEMPLATES,
) -> bool:
    return not missing_required_fields(reference, templates)


def format_citation_footnote(
    reference: Reference,
    templates: Mapping[SourceType, FootnoteTemplate] = DEFAULT_FOOTNOTE_TEMPLATES,
) -> str:
    """Render ``reference`` as a footnote using the template for its source type.

    Raises:
        CitationFormatError: a field required by the source type is missing.
        UnsupportedValueError: the source type has no template.
    """
    template = _template_for(reference, templates)
    fields = _reference_fields(reference)
    missing = [name for name in template.required if name not in fields]
    if missing:
        raise CitationFormatError(reference.id, reference.source_type.value, missing)

    parts = []
    for segment in template.segments:
        if all(name in fields for name in _segment_fields(segment)):
            parts.append(segment.format(**fields))
    return template.separator.join(parts)


def format_citation_inline(reference: Reference, number: int) -> str:
    """Author-year marker when an author is known, otherwise a numbered one."""
    author = (reference.author or "").strip()
    if author:
        surname = author.split()[-1]
        year = reference.date_published.year if reference.date_published else "n.d."
        return f"({surname}, {year})"
    return f"[{number}]"


def locate_excerpt(content: str, excerpt: Optional[str]) -> Optional[Tuple[int, int]]:
    """Find the claim span a reference excerpt supports, ignoring case."""
    if not excerpt or not excerpt.strip():
        return None
    match = re.search(re.escape(excerpt.strip()), content, re.IGNORECASE)
    return match.span() if match else None


def build_citations(
    insight: Insight,
    templates: Mapping[SourceType, FootnoteTemplate] = DEFAULT_FOOTNOTE_TEMPLATES,
) -> CitationBatch:
    """Format every reference on ``insight``, collecting failures instead of raising."""
    citations: List[Citation] = []
    errors: List[CitationError] = []
    for reference in insight.references:
        try:
            footnote = format_citation_footnote(reference, templates)
        except CitationFormatError as exc:
            logger.warning("Skipping reference %s on insight %s: %s", reference.id, insight.id, exc)
            errors.append(
                CitationError(
                    reference_id=reference.id,
                    source_type=reference.source_type,
                    missing_fields=exc.missing_fields,
                    message=str(exc),
                )
            )
            continue
        number = len(citations) + 1
        span = locate_excerpt(insight.content, reference.excerpt)
        citations.append(
            Citation(
                reference_id=reference.id,
                index=number,
                footnote=footnote,
                inline=format_citation_inline(reference, number),
                span_start=span[0] if span else None,
                span_end=span[1] if span else None,
            )
        )
    return CitationBatch(citations=tuple(citations), errors=tuple(errors))


def _table_cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", " ")


def generate_reference_table(references: Iterable[Reference]) -> str:
    """Markdown table of references for inclusion in generated documents."""
    lines = [
        "## References",
        "",
        "| # | Title | Type | Source |",
        "|---|-------|------|--------|",
    ]
    for number, reference in enumerate(references, start=1):
        title = reference.title or reference.url or "Untitled Reference"
        source = reference.organization or reference.author or reference.url or "Unknown"
        kind = SOURCE_TYPE_LABELS[reference.source_type]["label"]
        lines.append(
            f"| {number} | {_table_cell(title)} | {kind} | {_table_cell(source)} |"
        )
    return "\n".join(lines) + "\n"
