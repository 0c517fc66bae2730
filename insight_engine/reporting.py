"""Rendering of validation summaries for review screens and exports."""

from __future__ import annotations

import html
from typing import Dict, Iterable, List, Sequence

from .citations import generate_reference_table
from .confidence import CONFIDENCE_INDICATORS, VERIFICATION_STATUS_LABELS
from .schemas import Insight, Severity, ValidationResult

REPORT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Insight Validation Report</title>
<style>
body {{ font-family: sans-serif; margin: 2rem; }}
.insight {{ border: 1px solid #ddd; border-radius: 6px; padding: 1rem; margin-bottom: 1rem; }}
.issue-critical {{ color: #c62828; }}
.issue-warning {{ color: #ef6c00; }}
.issue-info {{ color: #9e9d24; }}
</style>
</head>
<body>
<h1>Insight Validation Report</h1>
<p>{summary}</p>
{insight_cards}
</body>
</html>
"""


def confidence_badge(result: ValidationResult) -> str:
    indicator = CONFIDENCE_INDICATORS[result.confidence]
    return f"{indicator['icon']} {indicator['label']}"


def verification_badge(result: ValidationResult) -> str:
    label = VERIFICATION_STATUS_LABELS[result.verification_status]
    return f"{label['icon']} {label['label']}"


def render_validation_markdown(insight: Insight, result: ValidationResult) -> str:
    """Markdown summary of one validated insight, with footnotes."""
    lines = [
        f"### {insight.expert_name or insight.expert_id}: {insight.kind.value}",
        "",
        insight.content,
        "",
        f"**Confidence:** {confidence_badge(result)}  ",
        f"**Verification:** {verification_badge(result)}",
    ]
    if result.challenges:
        lines += ["", "**Challenge questions**", ""]
        lines += [f"{n}. {challenge.question}" for n, challenge in enumerate(result.challenges, start=1)]
    if result.issues:
        lines += ["", "**Issues**", ""]
        lines += [f"- [{issue.severity.value}] {issue.message}" for issue in result.issues]
    if result.citations:
        lines.append("")
        lines += [f"[^{citation.index}]: {citation.footnote}" for citation in result.citations]
    if result.skipped_references:
        lines += ["", f"_{result.skipped_references} reference(s) skipped: incomplete citation data._"]
    return "\n".join(lines) + "\n"


def render_report_markdown(insights: Sequence[Insight], results: Sequence[ValidationResult]) -> str:
    if len(insights) != len(results):
        raise ValueError("Each insight needs exactly one validation result")
    sections = [render_validation_markdown(insight, result) for insight, result in zip(insights, results)]
    references = [reference for insight in insights for reference in insight.references]
    body = "# Insight Validation Report\n\n" + "\n".join(sections)
    if references:
        body += "\n" + generate_reference_table(references)
    return body


def _render_list(items: Iterable[str]) -> str:
    rendered = "".join(f"<li>{item}</li>" for item in items)
    return f"<ul>{rendered}</ul>" if rendered else ""


def _render_insight_cards(insights: Sequence[Insight], results: Sequence[ValidationResult]) -> str:
    cards = []
    for insight, result in zip(insights, results):
        challenges = _render_list(html.escape(challenge.question) for challenge in result.challenges)
        issues = _render_list(
            f"<span class='issue-{issue.severity.value}'>{html.escape(issue.message)}</span>"
            for issue in result.issues
        )
        citations = _render_list(
            f"{html.escape(citation.inline)} {html.escape(citation.footnote)}" for citation in result.citations
        )
        cards.append(
            "<section class='insight'>"
            f"<h3>{html.escape(insight.id)} · {html.escape(confidence_badge(result))}"
            f" · {html.escape(verification_badge(result))}</h3>"
            f"<p><strong>{html.escape(insight.expert_name or insight.expert_id)}</strong>"
            f" ({html.escape(insight.kind.value)})</p>"
            f"<p>{html.escape(insight.content)}</p>"
            f"{'<h4>Challenges</h4>' + challenges if challenges else ''}"
            f"{'<h4>Issues</h4>' + issues if issues else ''}"
            f"{'<h4>Citations</h4>' + citations if citations else ''}"
            "</section>"
        )
    return "\n".join(cards)


def summarize_results(results: Sequence[ValidationResult]) -> Dict[str, int]:
    return {
        "insights": len(results),
        "invalid": sum(1 for result in results if not result.is_valid),
        "challenges": sum(len(result.challenges) for result in results),
        "citations": sum(len(result.citations) for result in results),
        "skipped_references": sum(result.skipped_references for result in results),
        "critical_issues": sum(
            1 for result in results for issue in result.issues if issue.severity is Severity.CRITICAL
        ),
    }


def render_report_html(insights: List[Insight], results: List[ValidationResult]) -> str:
    """Render an HTML report of validated insights."""
    if len(insights) != len(results):
        raise ValueError("Each insight needs exactly one validation result")
    stats = summarize_results(results)
    summary = (
        f"{stats['insights']} insight(s), {stats['invalid']} with critical issues, "
        f"{stats['citations']} citation(s), {stats['skipped_references']} skipped reference(s)."
    )
    return REPORT_TEMPLATE.format(
        summary=html.escape(summary),
        insight_cards=_render_insight_cards(insights, results),
    )
