"""
app/domain package marker.
"""

from app.domain.fetch_outcome import FetchedData, FetchEmpty, FetchHardLimit, FetchOutcome
from app.domain.ingest_result import EMPTY_RESULT, IngestResult, concat_results
from app.domain.traversal_policy import TraversalPolicy

__all__ = [
    "EMPTY_RESULT",
    "FetchEmpty",
    "FetchHardLimit",
    "FetchOutcome",
    "FetchedData",
    "IngestResult",
    "TraversalPolicy",
    "concat_results",
]
