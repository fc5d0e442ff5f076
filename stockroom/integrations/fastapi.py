import logging
from contextlib import asynccontextmanager
from typing import Any, Generic, Optional, TypeVar

from fastapi import Depends, Query
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, create_model
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from stockroom.config import Settings, get_settings
from stockroom.core.connection import connect, disconnect
from stockroom.pagination.request import FilterSet, PaginationRequest
from stockroom.utils.exceptions import (
    DocumentNotFound,
    InvalidCursor,
    InvalidRequest,
    StockroomError,
    StorageError,
)
from stockroom.utils.pagination import Page

logger = logging.getLogger(__name__)

T = TypeVar("T")


def init_app(app: Any, uri: str, alias: str = "default", **client_options: Any) -> Any:
    """Bind a MongoDB connection to a FastAPI app's lifespan.

    The connection is opened before the app's own lifespan runs and closed
    after it finishes.

    Args:
        app: FastAPI application instance
        uri: MongoDB connection URI
        alias: Connection alias for multi-connection support (default: "default")
        **client_options: Passed through to AsyncMongoClient
    """
    original_lifespan = app.router.lifespan_context

    @asynccontextmanager
    async def lifespan(a: Any):
        await connect(uri, alias=alias, **client_options)
        try:
            if original_lifespan is not None:
                async with original_lifespan(a) as state:
                    yield state
            else:
                yield
        finally:
            await disconnect(alias)

    app.router.lifespan_context = lifespan
    return app


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def register_exception_handlers(app: Any) -> None:
    """Render stockroom and HTTP errors as ``{"success": false, "message": ...}``."""

    @app.exception_handler(InvalidCursor)
    async def invalid_cursor_handler(request: Any, exc: InvalidCursor):
        logger.info("Rejected cursor on %s: %s", request.url.path, exc)
        return _error(400, "Invalid cursor format")

    @app.exception_handler(InvalidRequest)
    async def invalid_request_handler(request: Any, exc: InvalidRequest):
        return _error(400, str(exc))

    @app.exception_handler(DocumentNotFound)
    async def document_not_found_handler(request: Any, exc: DocumentNotFound):
        return _error(404, str(exc))

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Any, exc: StorageError):
        return _error(500, str(exc) or "Server error")

    @app.exception_handler(StockroomError)
    async def stockroom_error_handler(request: Any, exc: StockroomError):
        logger.error("Unhandled stockroom error on %s: %s", request.url.path, exc)
        return _error(500, str(exc) or "Server error")

    @app.exception_handler(PyMongoError)
    async def pymongo_error_handler(request: Any, exc: PyMongoError):
        logger.error("Database error on %s: %s", request.url.path, exc)
        return _error(500, str(exc) or "Server error")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Any, exc: StarletteHTTPException):
        response = _error(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Any, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        return _error(400, problems or "Invalid request")


class CursorParams:
    """FastAPI dependency collecting list query parameters.

    ``limit`` defaults to the configured page size and is capped at
    ``max_page_limit``; values below 1 are passed through so the paginator
    rejects them.
    """

    def __init__(
        self,
        cursor: Optional[str] = Query(None),
        limit: Optional[int] = Query(None),
        sort_by: str = Query("createdAt", alias="sortBy"),
        sort_order: str = Query("desc", alias="sortOrder"),
        category: Optional[str] = Query(None),
        status: Optional[str] = Query(None),
        min_price: Optional[float] = Query(None, alias="minPrice"),
        max_price: Optional[float] = Query(None, alias="maxPrice"),
        search: Optional[str] = Query(None),
        settings: Settings = Depends(get_settings),
    ):
        if limit is None:
            limit = settings.default_page_limit
        self.cursor = cursor or None
        self.limit = min(limit, settings.max_page_limit)
        self.sort_by = sort_by
        self.sort_order = sort_order
        self.filters = FilterSet(
            category=category or None,
            status=status or None,
            min_price=min_price,
            max_price=max_price,
            search=search or None,
        )

    def to_request(self) -> PaginationRequest:
        return PaginationRequest(
            sort_by=self.sort_by,
            sort_order=self.sort_order,
            limit=self.limit,
            cursor=self.cursor,
            filters=self.filters,
        )


class PaginationMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    has_more: bool = Field(alias="hasMore")
    next_cursor: Optional[str] = Field(default=None, alias="nextCursor")
    limit: int
    count: int


class CursorPageData(BaseModel, Generic[T]):
    """``data`` section of a list response."""

    items: list[T]
    pagination: PaginationMeta

    @classmethod
    def from_page(cls, page_obj: Page, items: list[Any] | None = None) -> "CursorPageData":
        return cls(
            items=page_obj.items if items is None else items,
            pagination=PaginationMeta(
                has_more=page_obj.has_more,
                next_cursor=page_obj.next_cursor,
                limit=page_obj.limit,
                count=page_obj.count,
            ),
        )


def create_schema(
    document_class: type,
    *,
    name: str | None = None,
    exclude: set[str] = frozenset(),
) -> type[BaseModel]:
    """Generate a create schema from a Document class, excluding id.

    Field constraints (min_length, ge, ...) carry over from the document.
    """
    model_name = name or f"{document_class.__name__}Create"
    fields: dict[str, Any] = {}

    for field_name, field_info in document_class.model_fields.items():
        if field_name == "id" or field_name in exclude:
            continue
        fields[field_name] = (field_info.annotation, field_info)

    return create_model(model_name, **fields)


def update_schema(
    document_class: type,
    *,
    name: str | None = None,
    exclude: set[str] = frozenset(),
) -> type[BaseModel]:
    """Generate an update schema where all fields are optional.

    Unknown or excluded fields are rejected. Values are validated again
    against the document on update.
    """
    model_name = name or f"{document_class.__name__}Update"
    fields: dict[str, Any] = {}

    for field_name, field_info in document_class.model_fields.items():
        if field_name == "id" or field_name in exclude:
            continue
        fields[field_name] = (Optional[field_info.annotation], None)

    return create_model(model_name, __config__=ConfigDict(extra="forbid"), **fields)
