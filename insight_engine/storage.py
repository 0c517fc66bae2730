"""Loading insights from JSON and writing validation artifacts."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Sequence

from .reporting import render_report_html, render_report_markdown
from .schemas import Insight, ValidationResult
from .utils import ensure_dirs

logger = logging.getLogger(__name__)

RESULTS_FILENAME = "validation.json"
MARKDOWN_FILENAME = "report.md"
HTML_FILENAME = "report.html"


def load_insights(path: Path) -> List[Insight]:
    """Read a JSON list of insight records.

    Raises ``pydantic.ValidationError`` for records with unknown enum values
    or missing fields.
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"{path} not found")
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("insights", [])
    insights = [Insight.model_validate(item) for item in data]
    logger.info("Loaded %d insights from %s", len(insights), path)
    return insights


def load_results(path: Path) -> List[ValidationResult]:
    path = Path(path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"{path} not found. Run the validator first.")
    data = json.loads(path.read_text(encoding="utf-8"))
    return [ValidationResult.model_validate(item) for item in data]


def persist_results(
    insights: Sequence[Insight],
    results: Sequence[ValidationResult],
    artifacts_dir: Path,
) -> Dict[str, Path]:
    """Write validation JSON plus Markdown and HTML reports into ``artifacts_dir``."""
    artifacts_dir = Path(artifacts_dir).expanduser()
    ensure_dirs(artifacts_dir)

    results_path = artifacts_dir / RESULTS_FILENAME
    payload = [result.model_dump(mode="json") for result in results]
    results_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")

    markdown_path = artifacts_dir / MARKDOWN_FILENAME
    markdown_path.write_text(render_report_markdown(insights, results), encoding="utf-8")

    html_path = artifacts_dir / HTML_FILENAME
    html_path.write_text(render_report_html(list(insights), list(results)), encoding="utf-8")

    logger.info("Wrote %d validation results to %s", len(payload), results_path)
    return {"results": results_path, "markdown": markdown_path, "html": html_path}
