"""Data models for pkgbridge.

This module exports the core data structures used throughout the application.
"""

from pkgbridge.models.history import HistoryActionType, HistoryEntry, create_history_entry
from pkgbridge.models.operation import OperationKind, OperationRequest, OperationResult
from pkgbridge.models.package import BackendKind, ListingContext, Package, SearchField

__all__ = [
    "BackendKind",
    "HistoryActionType",
    "HistoryEntry",
    "ListingContext",
    "OperationKind",
    "OperationRequest",
    "OperationResult",
    "Package",
    "SearchField",
    "create_history_entry",
]
