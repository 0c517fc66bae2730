"""Exceptions raised by the insight validation engine."""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence


class InsightEngineError(Exception):
    """Base class for engine errors."""


class CitationFormatError(InsightEngineError, ValueError):
    """
    Raised when a reference lacks a field its source type requires.

    This is the only recoverable error in the engine: batch formatting
    records it against the reference and carries on with the rest.
    """

    def __init__(self, reference_id: str, reference_type: str, missing_fields: Sequence[str]):
        self.reference_id = reference_id
        self.reference_type = reference_type
        self.missing_fields = tuple(missing_fields)
        super().__init__(
            f"Reference {reference_id!r} ({reference_type}) is missing "
            f"required field(s): {', '.join(self.missing_fields)}"
        )


class UnsupportedValueError(InsightEngineError, ValueError):
    """Raised for an enum value or template table the engine does not cover."""

    def __init__(self, kind: str, value: Any, allowed: Optional[Iterable[Any]] = None):
        self.kind = kind
        self.value = value
        self.allowed = tuple(allowed) if allowed is not None else ()
        message = f"Unsupported {kind}: {value!r}"
        if self.allowed:
            message += f" (expected one of: {', '.join(str(item) for item in self.allowed)})"
        super().__init__(message)


class InvalidStatusTransition(InsightEngineError):
    """Raised when a reviewer requests a transition the status machine forbids."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move verification status from {current} to {target}")
