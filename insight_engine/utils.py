"""Logging and filesystem helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable


def configure_logging(level: int = logging.INFO) -> None:
    """Ensure logging has at least a basic configuration."""
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )


def ensure_dirs(*paths: str | Path | Iterable[str | Path]) -> None:
    """Create directories if they do not exist."""
    flat: list[str | Path] = []
    for item in paths:
        if isinstance(item, (list, tuple, set)):
            flat.extend(item)
        else:
            flat.append(item)
    for raw_path in flat:
        Path(raw_path).expanduser().mkdir(parents=True, exist_ok=True)


def clip_text(text: str, limit: int) -> str:
    """Collapse whitespace and trim to ``limit`` characters with an ellipsis."""
    normalized = " ".join(text.split())
    if len(normalized) <= limit:
        return normalized
    return normalized[: max(limit - 3, 0)].rstrip() + "..."
