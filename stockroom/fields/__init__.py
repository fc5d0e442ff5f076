from stockroom.fields.base import PyObjectId
from stockroom.fields.indexed import Indexed, IndexSpec

__all__ = [
    "PyObjectId",
    "Indexed",
    "IndexSpec",
]
