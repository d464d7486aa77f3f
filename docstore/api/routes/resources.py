"""Resource Routes — REST verbs over collections and records.

Invariants:
    - A None result from StoreService always becomes a 404 envelope
    - A missing body is treated as {}; a non-object body fails validation (400)
    - POST returns 201, every other success 200

Design Decisions:
    - Catch-all `/{name}` paths: collections are discovered from the data file,
      so routes cannot be declared per collection
    - Service pulled from app.state via dependency: one StoreService per app
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status

from docstore.api.query_params import parse_query
from docstore.core.errors import ResourceNotFoundError
from docstore.services.store_service import StoreService, dependents_from_query

logger = logging.getLogger(__name__)
router = APIRouter(tags=["resources"])


def get_service(request: Request) -> StoreService:
    """FastAPI dependency for the app's StoreService."""
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise RuntimeError("Store not loaded")
    return service


def _found(result: Any, name: str, item_id: str | None = None) -> Any:
    if result is None:
        raise ResourceNotFoundError(name, item_id)
    return result


@router.get("/")
async def index(request: Request, service: StoreService = Depends(get_service)):
    """List the endpoints served by the loaded store."""
    base = str(request.base_url).rstrip("/")
    return {
        "endpoints": [
            {
                "name": name,
                "url": f"{base}/{name}",
                "kind": "list" if isinstance(service.get(name), list) else "object",
            }
            for name in service.collections()
        ],
    }


@router.get("/{name}")
async def list_items(
    name: str, request: Request, service: StoreService = Depends(get_service),
):
    query = parse_query(request.query_params.multi_items())
    return _found(service.find(name, query), name)


@router.get("/{name}/{item_id}")
async def get_item(
    name: str, item_id: str, request: Request,
    service: StoreService = Depends(get_service),
):
    query = parse_query(request.query_params.multi_items())
    return _found(service.find_by_id(name, item_id, query), name, item_id)


@router.post("/{name}", status_code=status.HTTP_201_CREATED)
async def create_item(
    name: str,
    body: dict[str, Any] | None = Body(None),
    service: StoreService = Depends(get_service),
):
    return _found(await service.create(name, body or {}), name)


@router.put("/{name}")
async def replace_object(
    name: str,
    body: dict[str, Any] | None = Body(None),
    service: StoreService = Depends(get_service),
):
    return _found(await service.update(name, body or {}), name)


@router.patch("/{name}")
async def patch_object(
    name: str,
    body: dict[str, Any] | None = Body(None),
    service: StoreService = Depends(get_service),
):
    return _found(await service.patch(name, body or {}), name)


@router.put("/{name}/{item_id}")
@router.patch("/{name}/{item_id}")
async def update_item(
    name: str, item_id: str,
    body: dict[str, Any] | None = Body(None),
    service: StoreService = Depends(get_service),
):
    return _found(
        await service.update_by_id(name, item_id, body or {}), name, item_id,
    )


@router.delete("/{name}/{item_id}")
async def delete_item(
    name: str, item_id: str, request: Request,
    service: StoreService = Depends(get_service),
):
    query = parse_query(request.query_params.multi_items())
    return _found(
        await service.destroy_by_id(name, item_id, dependents_from_query(query)),
        name, item_id,
    )
