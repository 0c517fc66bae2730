"""CLI to record a reviewer decision on a saved insight."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from insight_engine.pipeline import apply_review
from insight_engine.schemas import VerificationStatus
from insight_engine.utils import configure_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Move an insight through reviewer verification")
    parser.add_argument("--input", required=True, help="Path to a JSON list of insights")
    parser.add_argument("--insight", required=True, help="Insight id to review")
    parser.add_argument(
        "--status",
        required=True,
        choices=[status.value for status in VerificationStatus],
        help="New verification status",
    )
    parser.add_argument("--reviewer", required=True, help="Reviewer name or id")
    parser.add_argument("--note", default=None, help="Optional reviewer note")
    parser.add_argument("--output", default=None, help="Write to this path instead of overwriting --input")
    return parser.parse_args()


def main() -> None:
    configure_logging()
    args = parse_args()
    updated = apply_review(
        Path(args.input),
        args.insight,
        VerificationStatus(args.status),
        args.reviewer,
        note=args.note,
        output_path=Path(args.output) if args.output else None,
    )
    print(f"{updated.id}: {updated.verification_status.value} ({len(updated.verification_history)} review events)")


if __name__ == "__main__":
    main()
