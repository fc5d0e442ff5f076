from stockroom.utils.exceptions import (
    StockroomError,
    DocumentNotFound,
    NotConnected,
    InvalidCursor,
    InvalidRequest,
    StorageError,
)
from stockroom.utils.pagination import Page
from stockroom.utils.types import (
    DocumentData,
    FilterSpec,
    SortSpec,
    DocumentId,
    merge_filters,
    and_filters,
)

__all__ = [
    "StockroomError",
    "DocumentNotFound",
    "NotConnected",
    "InvalidCursor",
    "InvalidRequest",
    "StorageError",
    "Page",
    "DocumentData",
    "FilterSpec",
    "SortSpec",
    "DocumentId",
    "merge_filters",
    "and_filters",
]
