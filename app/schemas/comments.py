"""
app/schemas/comments.py

Response schema mirroring the upstream ``comments/show`` envelope.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ShowCommentsResponse(BaseModel):
    comments: list[dict[str, Any]] = Field(default_factory=list)
    marks: list[Any] = Field(default_factory=list)
    hasvisible: bool = False
    previous_cursor: int = 0
    next_cursor: int = 0
    previous_cursor_str: str = "0"
    next_cursor_str: str = "0"
    total_number: int = Field(0, ge=0)
    status: dict[str, Any] = Field(default_factory=dict)
