"""Per-cycle result collection for pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CycleReport:
    """What one pass of a stage did, keyed by asset id (or prediction id).

    Stages record here instead of logging; the scheduler decides what to do
    with errors.
    """

    stage: str
    results: dict[int, Any] = field(default_factory=dict)
    skipped: dict[int, str] = field(default_factory=dict)
    errors: dict[int, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def record_error(self, key: int, exc: BaseException) -> None:
        self.errors[key] = f"{type(exc).__name__}: {exc}"
