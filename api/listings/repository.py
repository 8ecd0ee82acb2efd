"""
Listing persistence (raw SQL), shared by every category.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from core import db

from .resources import Resource


async def list_all(resource: Resource) -> list[dict]:
    """
    Every row of the category's table. Order is unspecified.
    """
    return await db.fetch_all(resource.select_all_sql())


async def create(resource: Resource, values: Mapping[str, Any] | None) -> int:
    new_id = await db.fetch_val(resource.insert_sql(), *resource.bind(values))
    if new_id is None:
        raise db.DatabaseError(f"Insert into {resource.name} returned no id.")
    return int(new_id)


async def delete_by_id(resource: Resource, record_id: int) -> bool:
    """
    Hard-delete one row. False means nothing matched `record_id`.
    """
    row = await db.fetch_one(resource.delete_by_id_sql(), record_id)
    return row is not None
