"""
FastAPI routes for listing categories.

One router per `Resource`, all built by `build_router`:
- GET    /api/{name}       -> list every record
- POST   /api/{name}       -> create, returns {"id": ...}
- DELETE /api/{name}/{id}  -> delete, 404 when nothing matched
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from fastapi import APIRouter, Body, FastAPI

from . import schemas, service
from .resources import RESOURCES, Resource

API_PREFIX = "/api"


def build_router(resource: Resource) -> APIRouter:
    router = APIRouter()

    @router.get("", name=f"list_{resource.name}")
    async def list_records() -> list[dict]:
        return await service.list_records(resource)

    @router.post("", name=f"create_{resource.name}", response_model=schemas.CreatedResponse)
    async def create_record(payload: Any = Body(default=None)) -> dict:
        return await service.create_record(resource, payload)

    @router.delete(
        "/{record_id}",
        name=f"delete_{resource.name}",
        response_model=schemas.MessageResponse,
        responses={404: {"model": schemas.ErrorResponse}},
    )
    async def delete_record(record_id: str) -> dict:
        return await service.delete_record(resource, record_id)

    return router


def include_resources(app: FastAPI, resources: Iterable[Resource] = RESOURCES) -> None:
    for resource in resources:
        app.include_router(
            build_router(resource),
            prefix=f"{API_PREFIX}/{resource.name}",
            tags=[resource.name],
        )
