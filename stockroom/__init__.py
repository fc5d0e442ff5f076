from stockroom.core import (
    Document,
    QuerySet,
    connect,
    disconnect,
    get_database,
    get_client,
    ping,
)
from stockroom.fields import (
    PyObjectId,
    Indexed,
    IndexSpec,
)
from stockroom.lifecycle import (
    enable_tracing,
    disable_tracing,
    QueryEvent,
    add_listener,
)
from stockroom.plugins import TimestampsMixin
from stockroom.pagination import (
    CursorPayload,
    FilterSet,
    PaginationRequest,
    SortField,
    SortOrder,
    decode_cursor,
    encode_cursor,
    paginate,
)
from stockroom.utils import (
    StockroomError,
    DocumentNotFound,
    NotConnected,
    InvalidCursor,
    InvalidRequest,
    StorageError,
    Page,
)

__all__ = [
    # Core
    "Document",
    "QuerySet",
    "connect",
    "disconnect",
    "get_database",
    "get_client",
    "ping",
    # Fields
    "PyObjectId",
    "Indexed",
    "IndexSpec",
    # Lifecycle
    "enable_tracing",
    "disable_tracing",
    "QueryEvent",
    "add_listener",
    # Plugins
    "TimestampsMixin",
    # Pagination
    "CursorPayload",
    "FilterSet",
    "PaginationRequest",
    "SortField",
    "SortOrder",
    "decode_cursor",
    "encode_cursor",
    "paginate",
    # Utils
    "StockroomError",
    "DocumentNotFound",
    "NotConnected",
    "InvalidCursor",
    "InvalidRequest",
    "StorageError",
    "Page",
]
