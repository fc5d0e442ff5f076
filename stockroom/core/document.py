from __future__ import annotations

from typing import Any, ClassVar, Optional, Self, TYPE_CHECKING

if TYPE_CHECKING:
    from stockroom.core.queryset import QuerySet

from bson import ObjectId
from pydantic import BaseModel, Field, ValidationError
from pymongo.asynchronous.collection import AsyncCollection

from stockroom.core.connection import get_database
from stockroom.fields.base import PyObjectId
from stockroom.lifecycle.observability import track_query
from stockroom.utils.exceptions import DocumentNotFound
from stockroom.utils.settings import SettingsResolver
from stockroom.utils.types import DocumentData, DocumentId, FilterSpec, merge_filters


class Document(BaseModel):
    """Base document class for MongoDB models.

    Provides CRUD operations and automatic collection binding.
    """

    model_config = {"populate_by_name": True, "arbitrary_types_allowed": True}

    id: Optional[PyObjectId] = Field(default=None, alias="_id")

    # ClassVars, set by __init_subclass__
    _collection_name: ClassVar[str] = ""
    _connection_alias: ClassVar[str] = "default"

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._collection_name = SettingsResolver.get_collection_name(cls)
        cls._connection_alias = SettingsResolver.get_connection_alias(cls)

    # --- Serialization ---

    def _to_mongo(self) -> DocumentData:
        """Convert document to a MongoDB-compatible dict.

        Uses mode='python' to preserve native types like ObjectId and datetime.
        """
        data = self.model_dump(by_alias=True, mode="python")
        if data.get("_id") is None:
            data.pop("_id", None)
        return data

    @classmethod
    def _from_mongo(cls, data: DocumentData) -> Self:
        return cls.model_validate(data)

    # --- Collection access ---

    @classmethod
    def get_collection(cls) -> AsyncCollection:
        """Get the MongoDB collection for this document class."""
        db = get_database(cls._connection_alias)
        return db[cls._collection_name]

    # --- Indexing ---

    @classmethod
    async def ensure_indexes(cls) -> list[str]:
        """Create all indexes defined on this document class.

        Reads field-level indexes from Indexed() fields and class-level
        indexes from Settings.indexes. Returns list of created index names.
        """
        from stockroom.fields.indexed import IndexSpec

        collection = cls.get_collection()
        index_names: list[str] = []

        for field_name, field_info in cls.model_fields.items():
            extra = field_info.json_schema_extra
            if extra and isinstance(extra, dict) and extra.get("_stockroom_index"):
                keys = [(field_info.alias or field_name, extra.get("_index_direction", 1))]
                kwargs: dict[str, Any] = {}
                if extra.get("_index_unique"):
                    kwargs["unique"] = True
                name = await collection.create_index(keys, **kwargs)
                index_names.append(name)

        for spec in SettingsResolver.get_indexes(cls):
            if not isinstance(spec, IndexSpec):
                spec = IndexSpec(**spec)
            keys, kwargs = spec.to_pymongo()
            name = await collection.create_index(keys, **kwargs)
            index_names.append(name)

        return index_names

    # --- Class-level CRUD ---

    @classmethod
    async def create(cls, **kwargs: Any) -> Self:
        """Create and insert a new document."""
        doc = cls(**kwargs)
        await doc.insert()
        return doc

    @classmethod
    async def get(cls, id: DocumentId) -> Self:
        """Find a document by its _id. Raises DocumentNotFound if missing or malformed."""
        if isinstance(id, str):
            if not ObjectId.is_valid(id):
                raise DocumentNotFound(f"{cls.__name__} with id '{id}' not found")
            id = ObjectId(id)
        async with track_query("get", cls._collection_name, cls.__name__, filter={"_id": id}):
            collection = cls.get_collection()
            data = await collection.find_one({"_id": id})
            if data is None:
                raise DocumentNotFound(
                    f"{cls.__name__} with id '{id}' not found"
                )
            return cls._from_mongo(data)

    @classmethod
    def find(cls, filter: FilterSpec | None = None, **kwargs: Any) -> "QuerySet[Self]":
        """Return a QuerySet for fluent query building.

        Args:
            filter: MongoDB filter criteria
            **kwargs: Additional filter criteria

        Returns:
            QuerySet for this document type
        """
        from stockroom.core.queryset import QuerySet

        return QuerySet(cls, merge_filters(filter, **kwargs))

    # --- Instance-level CRUD ---

    async def insert(self) -> None:
        """Insert this document into the database."""
        async with track_query("insert", self._collection_name, self.__class__.__name__):
            collection = self.get_collection()
            result = await collection.insert_one(self._to_mongo())
            self.id = result.inserted_id

    async def update(self, **kwargs: Any) -> None:
        """Validate a partial update, $set it in the database, and refresh local state.

        Raises:
            ValueError: If a field doesn't exist or a value is invalid
        """
        for key in kwargs:
            if key not in self.__class__.model_fields or key == "id":
                raise ValueError(f"Unknown field: {key}")

        try:
            current_data = self.model_dump(mode="python")
            current_data.update(kwargs)
            validated = self.__class__.model_validate(current_data)
        except ValidationError as e:
            raise ValueError(f"Invalid update values: {e}") from e

        changes = {key: getattr(validated, key) for key in kwargs}
        async with track_query("update", self._collection_name, self.__class__.__name__, update=changes):
            collection = self.get_collection()
            result = await collection.update_one({"_id": self.id}, {"$set": changes})
            if result.matched_count == 0:
                raise DocumentNotFound(
                    f"{self.__class__.__name__} with id '{self.id}' not found"
                )
        for key, value in changes.items():
            setattr(self, key, value)

    async def delete(self) -> None:
        """Delete this document from the database."""
        async with track_query("delete", self._collection_name, self.__class__.__name__):
            collection = self.get_collection()
            await collection.delete_one({"_id": self.id})
