from stockroom.api.app import create_app
from stockroom.api.auth import Identity, create_access_token, get_identity

__all__ = [
    "create_app",
    "Identity",
    "create_access_token",
    "get_identity",
]
