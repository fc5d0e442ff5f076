"""Item routes. Every route requires a bearer token."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import ValidationError

from stockroom.api.auth import IdentityDep, get_identity
from stockroom.integrations.fastapi import CursorPageData, CursorParams, create_schema, update_schema
from stockroom.models import Item
from stockroom.pagination import PageSource, paginate
from stockroom.utils.exceptions import InvalidRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/items", tags=["items"], dependencies=[Depends(get_identity)])

_SERVER_MANAGED = {"created_at", "updated_at"}

ItemCreate = create_schema(Item, exclude=_SERVER_MANAGED)
ItemUpdate = update_schema(Item, exclude=_SERVER_MANAGED)


def get_item_source() -> PageSource[Item]:
    """Collection that list queries paginate over."""
    return Item.find()


def _item_body(item: Item) -> dict[str, Any]:
    return item.model_dump(mode="json")


@router.get("")
async def list_items(
    params: CursorParams = Depends(),
    source: PageSource[Item] = Depends(get_item_source),
) -> dict[str, Any]:
    """List items one page at a time.

    Pass the returned ``nextCursor`` back as ``cursor`` to get the next page.
    """
    page = await paginate(source, params.to_request())
    data = CursorPageData.from_page(page, items=[_item_body(item) for item in page.items])
    return {"success": True, "data": data.model_dump(by_alias=True)}


@router.get("/categories")
async def list_categories() -> dict[str, Any]:
    categories = await Item.find().distinct("category")
    return {"success": True, "data": {"categories": sorted(categories)}}


@router.get("/{item_id}")
async def get_item(item_id: str) -> dict[str, Any]:
    item = await Item.get(item_id)
    return {"success": True, "data": {"item": _item_body(item)}}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_item(payload: ItemCreate, identity: IdentityDep) -> dict[str, Any]:
    try:
        item = await Item.create(**payload.model_dump())
    except ValidationError as e:
        raise InvalidRequest(f"Invalid item: {e.errors()[0]['msg']}") from e
    logger.info("Item %s created by %s", item.id, identity.user_id)
    return {
        "success": True,
        "message": "Item created successfully",
        "data": {"item": _item_body(item)},
    }


@router.put("/{item_id}")
async def update_item(item_id: str, payload: ItemUpdate, identity: IdentityDep) -> dict[str, Any]:
    item = await Item.get(item_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes:
        try:
            await item.update(**changes)
        except ValueError as e:
            raise InvalidRequest(str(e)) from e
        logger.info("Item %s updated by %s: %s", item.id, identity.user_id, sorted(changes))
    return {
        "success": True,
        "message": "Item updated successfully",
        "data": {"item": _item_body(item)},
    }


@router.delete("/{item_id}")
async def delete_item(item_id: str, identity: IdentityDep) -> dict[str, Any]:
    item = await Item.get(item_id)
    await item.delete()
    logger.info("Item %s deleted by %s", item.id, identity.user_id)
    return {"success": True, "message": "Item deleted successfully"}
