from typing import Any

from bson import ObjectId

# Type aliases for better clarity
DocumentData = dict[str, Any]
FilterSpec = dict[str, Any]
SortSpec = list[tuple[str, int]]
DocumentId = ObjectId | str


def merge_filters(
    base: FilterSpec | None = None,
    override: FilterSpec | None = None,
    **kwargs: Any
) -> FilterSpec:
    """Merge multiple filter dictionaries with proper precedence.

    Args:
        base: Base filter dict
        override: Override filter dict (takes precedence over base)
        **kwargs: Additional filters (highest precedence)

    Returns:
        Merged filter dictionary
    """
    return {**(base or {}), **(override or {}), **kwargs}


def and_filters(*clauses: FilterSpec) -> FilterSpec:
    """Combine filter documents with ``$and``, dropping empty ones.

    A single remaining clause is returned as-is so simple queries stay flat.

    Args:
        *clauses: MongoDB filter documents

    Returns:
        Combined filter document (``{}`` when nothing is left)
    """
    active = [clause for clause in clauses if clause]
    if not active:
        return {}
    if len(active) == 1:
        return active[0]
    return {"$and": active}
