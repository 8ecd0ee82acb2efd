"""
Listing business logic.

There are no business rules beyond "store what was sent": this layer turns
repository outcomes into HTTP outcomes and logs datastore failures where they
are caught. The failures themselves are re-raised and rendered as a generic
500 by `core.errors`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fastapi import HTTPException, status

from core import db

from . import repository
from .resources import Resource

# ids are SERIAL (int4); anything outside this range can not exist.
MAX_ID = 2**31 - 1

logger = logging.getLogger(__name__)


def parse_record_id(raw: str) -> int | None:
    # Plain ASCII digits only: int() would also take "1_0", "+5" or " 5".
    if not isinstance(raw, str) or not (raw.isascii() and raw.isdigit()):
        return None
    value = int(raw)
    if value < 1 or value > MAX_ID:
        return None
    return value


async def list_records(resource: Resource) -> list[dict]:
    try:
        return await repository.list_all(resource)
    except db.DatabaseError:
        logger.exception("list_failed resource=%s", resource.name)
        raise


async def create_record(resource: Resource, payload: Any) -> dict:
    values = payload if isinstance(payload, Mapping) else {}
    try:
        new_id = await repository.create(resource, values)
    except db.DatabaseError:
        logger.exception("create_failed resource=%s", resource.name)
        raise
    logger.info("record_created resource=%s id=%s", resource.name, new_id)
    return {"id": new_id}


async def delete_record(resource: Resource, raw_id: str) -> dict:
    record_id = parse_record_id(raw_id)
    deleted = False
    if record_id is not None:
        try:
            deleted = await repository.delete_by_id(resource, record_id)
        except db.DatabaseError:
            logger.exception("delete_failed resource=%s id=%s", resource.name, record_id)
            raise

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource.label} not found")
    logger.info("record_deleted resource=%s id=%s", resource.name, record_id)
    return {"message": f"{resource.label} deleted successfully"}
