"""
app/domain/ingest_result.py

Partial-success outcome of one batch of insert attempts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class IngestResult:
    """
    How many records were attempted and how many landed.

    Results compose with ``+``; ``IngestResult()`` is the identity.
    """

    total: int = 0
    success: int = 0

    def __post_init__(self) -> None:
        if self.total < 0:
            raise ValueError(f"total must be >= 0, got {self.total}.")
        if not 0 <= self.success <= self.total:
            raise ValueError(
                f"success must be between 0 and total ({self.total}), got {self.success}."
            )

    def __add__(self, other: IngestResult) -> IngestResult:
        if not isinstance(other, IngestResult):
            return NotImplemented
        return IngestResult(
            total=self.total + other.total,
            success=self.success + other.success,
        )

    @property
    def failed(self) -> int:
        return self.total - self.success

    def as_dict(self) -> dict[str, Any]:
        return {"total": self.total, "success": self.success, "failed": self.failed}


EMPTY_RESULT = IngestResult()


def concat_results(*results: IngestResult) -> IngestResult:
    """
    Fold any number of results into one; no arguments yields the identity.
    """

    combined = EMPTY_RESULT
    for result in results:
        combined = combined + result
    return combined
