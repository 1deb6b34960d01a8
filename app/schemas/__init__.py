"""
app/schemas package marker.
"""

from app.schemas.comments import ShowCommentsResponse
from app.schemas.ingestion import (
    IngestIDsRequest,
    IngestionRunListResponse,
    IngestionRunResponse,
    IngestResultResponse,
)

__all__ = [
    "IngestIDsRequest",
    "IngestResultResponse",
    "IngestionRunListResponse",
    "IngestionRunResponse",
    "ShowCommentsResponse",
]
