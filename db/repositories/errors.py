"""
Repository-layer exceptions for record store flows.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base exception for record store failures."""


class RecordInsertError(StoreError):
    """Raised when one record cannot be inserted; siblings are unaffected."""

    def __init__(self, message: str, *, collection: str, record_id: object = None) -> None:
        super().__init__(message)
        self.collection = collection
        self.record_id = record_id


class DuplicateRecordError(RecordInsertError):
    """Raised when an insert violates a uniqueness or integrity constraint."""


class RecordRejectedError(RecordInsertError):
    """Raised when a payload is malformed or cannot be stored as given."""


class StoreUnavailableError(StoreError):
    """Raised when the backing database cannot serve the request at all."""


class UnknownCollectionError(StoreError, ValueError):
    """Raised when a caller names a collection or field the store does not have."""
