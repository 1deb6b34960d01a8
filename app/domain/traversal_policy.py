"""
app/domain/traversal_policy.py

Caller-supplied knobs for one traversal-driven ingestion pass.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TraversalPolicy:
    """
    step_size: records consumed per cursor before it is closed and reopened.
    reverse:   walk newest rows first.
    overwrite: fetch even when the store already holds data for the item.
    throttle:  pause a randomized interval after each successful fetch.
    """

    step_size: int = 100
    reverse: bool = False
    overwrite: bool = False
    throttle: bool = False

    def __post_init__(self) -> None:
        if self.step_size <= 0:
            raise ValueError(f"step_size must be > 0, got {self.step_size}.")
