"""CLI to validate a JSON file of insights and write report artifacts."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from insight_engine.pipeline import run_validation
from insight_engine.settings import load_settings
from insight_engine.utils import configure_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate AI expert insights")
    parser.add_argument("--input", required=True, help="Path to a JSON list of insights")
    parser.add_argument(
        "--artifacts",
        default=None,
        help="Output directory (defaults to $ARTIFACTS_DIR or artifacts/)",
    )
    return parser.parse_args()


def main() -> None:
    configure_logging()
    args = parse_args()
    settings = load_settings(artifacts_dir=args.artifacts)

    insights, results = run_validation(Path(args.input), settings=settings)
    logging.getLogger(__name__).info("Validated %d insights", len(results))
    for result in results:
        status = "ok" if result.is_valid else "needs attention"
        print(
            f"{result.insight_id}: {result.confidence.value} / {result.verification_status.value} "
            f"({len(result.challenges)} challenges, {result.skipped_references} skipped) {status}"
        )
    print(f"Saved output to {settings.artifacts_dir}/validation.json and report.{{md,html}}")


if __name__ == "__main__":
    main()
