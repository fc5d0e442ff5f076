class StockroomError(Exception):
    """Base exception for all Stockroom errors."""


class DocumentNotFound(StockroomError):
    """Raised when a document is not found in the database."""


class NotConnected(StockroomError):
    """Raised when attempting to use a database that is not connected."""


class InvalidCursor(StockroomError):
    """Raised when a continuation token cannot be decoded."""


class InvalidRequest(StockroomError):
    """Raised when pagination parameters are out of range or unknown."""


class StorageError(StockroomError):
    """Raised when the underlying query fails to execute."""
