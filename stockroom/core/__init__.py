from stockroom.core.document import Document
from stockroom.core.queryset import QuerySet
from stockroom.core.connection import connect, disconnect, get_database, get_client, ping

__all__ = [
    "Document",
    "QuerySet",
    "connect",
    "disconnect",
    "get_database",
    "get_client",
    "ping",
]
