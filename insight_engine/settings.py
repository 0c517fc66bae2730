"""Runtime configuration for the validation engine."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ARTIFACTS_DIR = "artifacts"


class EngineSettings(BaseModel):
    """Thresholds and output locations.

    Engine functions take an explicit instance (or the defaults); only
    ``load_settings`` reads the environment.
    """

    model_config = ConfigDict(frozen=True)

    # well-formed references needed before the missing-evidence challenge is suppressed
    min_supporting_references: int = Field(default=1, ge=0)
    claim_excerpt_chars: int = Field(default=80, ge=10)
    artifacts_dir: Path = Path(DEFAULT_ARTIFACTS_DIR)
    trace_path: Path = Path(DEFAULT_ARTIFACTS_DIR) / "traces.jsonl"


DEFAULT_SETTINGS = EngineSettings()


def load_settings(artifacts_dir: Optional[Union[str, Path]] = None) -> EngineSettings:
    """Build settings from environment variables, falling back to defaults.

    An explicit ``artifacts_dir`` wins over ``ARTIFACTS_DIR``. Unless
    ``TRACE_PATH`` is set, the trace file lives inside the artifacts dir.
    """
    artifacts_dir = Path(artifacts_dir or os.getenv("ARTIFACTS_DIR", DEFAULT_ARTIFACTS_DIR)).expanduser()
    trace_path = Path(os.getenv("TRACE_PATH", str(artifacts_dir / "traces.jsonl"))).expanduser()
    return EngineSettings(
        min_supporting_references=int(
            os.getenv("INSIGHT_MIN_REFERENCES", DEFAULT_SETTINGS.min_supporting_references)
        ),
        claim_excerpt_chars=int(
            os.getenv("INSIGHT_EXCERPT_CHARS", DEFAULT_SETTINGS.claim_excerpt_chars)
        ),
        artifacts_dir=artifacts_dir,
        trace_path=trace_path,
    )
