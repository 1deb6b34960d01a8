"""
app/schemas/ingestion.py

Request and response schemas for ingestion operations.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class IngestIDsRequest(BaseModel):
    """
    Upstream status ids to ingest for.
    """

    ids: list[int] = Field(default_factory=list)


class IngestResultResponse(BaseModel):
    """
    API response model for one ingestion pass.
    """

    total: int = Field(..., ge=0)
    success: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)


class IngestionRunResponse(BaseModel):
    run_id: UUID
    operation: str
    status: str
    total: int
    success: int
    request_payload: dict[str, Any] | None = None
    error_message: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None


class IngestionRunListResponse(BaseModel):
    runs: list[IngestionRunResponse] = Field(default_factory=list)
