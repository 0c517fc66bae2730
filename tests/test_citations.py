"""Citation footnote and reference table tests."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from insight_engine.citations import (
    DEFAULT_FOOTNOTE_TEMPLATES,
    build_citations,
    format_citation_footnote,
    format_citation_inline,
    generate_reference_table,
    locate_excerpt,
)
from insight_engine.errors import CitationFormatError, UnsupportedValueError
from insight_engine.schemas import Reference, SourceType


def test_document_footnote_contains_title_and_retrieval_date(document_reference: Reference) -> None:
    footnote = format_citation_footnote(document_reference)
    assert footnote == "Q3 Report, retrieved 2024-10-01"


def test_document_footnote_includes_optional_segments() -> None:
    reference = Reference(
        id="ref-annual",
        source_type=SourceType.DOCUMENT,
        title="Annual Report 2024",
        author="Finance Team",
        organization="Acme Corp",
        date_published=date(2024, 1, 15),
        page="15",
        section="3.2",
    )
    assert format_citation_footnote(reference) == "Finance Team, Annual Report 2024, Acme Corp, 2024, p. 15, §3.2"


def test_url_footnote() -> None:
    reference = Reference(
        id="ref-web",
        source_type=SourceType.URL,
        title="Market Study",
        url="https://example.com/study",
    )
    assert format_citation_footnote(reference) == "Market Study <https://example.com/study>"


@pytest.mark.parametrize("url", [None, "", "   "])
def test_url_reference_without_url_raises(url) -> None:
    reference = Reference(id="ref-web", source_type=SourceType.URL, title="Market Study", url=url)
    with pytest.raises(CitationFormatError) as excinfo:
        format_citation_footnote(reference)
    error = excinfo.value
    assert isinstance(error, ValueError)
    assert error.reference_id == "ref-web"
    assert error.missing_fields == ("url",)


def test_expert_statement_footnote() -> None:
    reference = Reference(id="ref-expert", source_type=SourceType.EXPERT_STATEMENT, author="Dr. Jane Smith")
    assert format_citation_footnote(reference) == "Dr. Jane Smith, personal communication"


def test_expert_statement_requires_author() -> None:
    reference = Reference(id="ref-expert", source_type=SourceType.EXPERT_STATEMENT, title="Call notes")
    with pytest.raises(CitationFormatError):
        format_citation_footnote(reference)


def test_data_source_footnote() -> None:
    reference = Reference(
        id="ref-data",
        source_type=SourceType.DATA_SOURCE,
        title="GDP Series",
        organization="World Bank",
        date_accessed=date(2024, 5, 1),
    )
    assert format_citation_footnote(reference) == "World Bank, GDP Series, retrieved 2024-05-01"


def test_unknown_source_type_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Reference(id="ref-x", source_type="podcast", title="Episode 12")


def test_template_table_without_source_type_fails_loudly(document_reference: Reference) -> None:
    templates = {SourceType.URL: DEFAULT_FOOTNOTE_TEMPLATES[SourceType.URL]}
    with pytest.raises(UnsupportedValueError):
        format_citation_footnote(document_reference, templates)


def test_inline_citation_markers() -> None:
    authored = Reference(
        id="ref-a",
        source_type=SourceType.DOCUMENT,
        title="Pricing Review",
        author="Jane Smith",
        date_published=date(2023, 2, 1),
    )
    undated = Reference(id="ref-b", source_type=SourceType.DOCUMENT, title="Board Memo", author="Sam Lee")
    anonymous = Reference(id="ref-c", source_type=SourceType.DOCUMENT, title="Board Memo")
    assert format_citation_inline(authored, 1) == "(Smith, 2023)"
    assert format_citation_inline(undated, 1) == "(Lee, n.d.)"
    assert format_citation_inline(anonymous, 2) == "[2]"


def test_locate_excerpt_ignores_case() -> None:
    content = "Revenue reached $10M in fiscal 2024."
    assert locate_excerpt(content, "REVENUE reached") == (0, 15)
    assert locate_excerpt(content, "profit") is None
    assert locate_excerpt(content, None) is None


def test_locate_excerpt_spans_original_text_after_non_ascii_prefix() -> None:
    content = "İstanbul revenue reached $10M."
    start, end = locate_excerpt(content, "Revenue Reached")
    assert content[start:end] == "revenue reached"


def test_build_citations_skips_malformed_references(
    make_insight, document_reference: Reference, malformed_url_reference: Reference
) -> None:
    insight = make_insight(references=(malformed_url_reference, document_reference))
    batch = build_citations(insight)

    assert len(batch.citations) == 1
    citation = batch.citations[0]
    assert citation.reference_id == "ref-doc"
    assert citation.index == 1
    assert citation.inline == "[1]"
    assert (citation.span_start, citation.span_end) == (0, 20)

    assert len(batch.errors) == 1
    assert batch.errors[0].reference_id == "ref-url"
    assert batch.errors[0].missing_fields == ("url",)


def test_reference_table_lists_every_reference(document_reference: Reference) -> None:
    piped = Reference(id="ref-p", source_type=SourceType.DATA_SOURCE, title="Sales | EMEA", organization="Acme")
    table = generate_reference_table([document_reference, piped])
    assert table.startswith("## References")
    assert "| # |" in table
    assert "| 1 | Q3 Report | Document | Unknown |" in table
    assert "| 2 | Sales \\| EMEA | Data Source | Acme |" in table
