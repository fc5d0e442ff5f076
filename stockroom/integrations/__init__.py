from stockroom.integrations.fastapi import (
    CursorPageData,
    CursorParams,
    PaginationMeta,
    create_schema,
    init_app,
    register_exception_handlers,
    update_schema,
)

__all__ = [
    "CursorPageData",
    "CursorParams",
    "PaginationMeta",
    "create_schema",
    "init_app",
    "register_exception_handlers",
    "update_schema",
]
