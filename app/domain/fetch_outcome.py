"""
app/domain/fetch_outcome.py

Three-way outcome of one upstream fetch.

``FetchEmpty`` means the upstream legitimately has nothing for the selector.
``FetchHardLimit`` means the upstream refused or failed; callers stop asking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeAlias


@dataclass(frozen=True)
class FetchedData:
    records: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.records:
            raise ValueError("FetchedData requires at least one record; use FetchEmpty.")


@dataclass(frozen=True)
class FetchEmpty:
    pass


@dataclass(frozen=True)
class FetchHardLimit:
    reason: str = "upstream refused the request"


FetchOutcome: TypeAlias = FetchedData | FetchEmpty | FetchHardLimit
