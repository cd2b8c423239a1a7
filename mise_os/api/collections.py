# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Ordered Collections API — One router per CollectionKind.

Routes (relative to ``/<kind>``):
  GET    /                                  list containers
  POST   /                                  create container
  GET    /{container_id}/items              sorted active items
  POST   /{container_id}/items              append, or insert at ``position``
  PUT    /{container_id}/items/reorder      bulk reorder
  POST   /{container_id}/items/{id}/move    one step up/down
  POST   /{container_id}/items/{id}/duplicate
  DELETE /{container_id}/items/{id}
  PUT    /{container_id}/items/{id}/publish     publishable kinds only
  PUT    /{container_id}/items/{id}/unpublish

Every manager call runs under the RetryManager; only storage failures
are retried.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from mise_os.api.deps import get_current_principal, get_required_scope, get_tenant_scope
from mise_os.core.security import Principal
from mise_os.core.tenant import TenantScope
from mise_os.ordering.kinds import COLLECTION_KINDS, CollectionKind
from mise_os.ordering.manager import Direction, OrderedCollectionManager
from mise_os.resilience.retry import RetryManager
from mise_os.storage.database import get_db
from mise_os.storage.repositories import ContainerRepository

logger = logging.getLogger("mise.api.collections")


# ── Request Models ──────────────────────────────────────────

class ContainerCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)


class ItemCreateRequest(BaseModel):
    """``position`` plus the kind's payload fields, validated by the manager."""

    model_config = ConfigDict(extra="allow")

    position: Optional[int] = None


class MoveRequest(BaseModel):
    direction: Direction


class ReorderRequest(BaseModel):
    item_ids: List[int]


# ── Serialization ───────────────────────────────────────────

def container_to_dict(container) -> Dict[str, Any]:
    return {
        "id": container.id,
        "restaurant_id": container.restaurant_id,
        "owner_id": container.owner_id,
        "name": container.name,
    }


def item_to_dict(item) -> Dict[str, Any]:
    return {
        "id": item.id,
        "display_order": item.display_order,
        "is_active": item.is_active,
        **item.payload(),
    }


def items_response(items: List[Any]) -> Dict[str, Any]:
    return {"items": [item_to_dict(i) for i in items], "count": len(items)}


# ── Router Factory ──────────────────────────────────────────

def build_collection_router(kind: CollectionKind) -> APIRouter:
    router = APIRouter(prefix=f"/{kind.name}", tags=[kind.name])
    retry = RetryManager()

    def manager_for(db, scope, principal) -> OrderedCollectionManager:
        return OrderedCollectionManager(db, kind, scope, owner_id=principal.id)

    def owner_filter(principal: Principal) -> Optional[int]:
        return principal.id if kind.owner_scoped else None

    @router.get("")
    async def list_containers(
        scope: TenantScope = Depends(get_tenant_scope),
        principal: Principal = Depends(get_current_principal),
        db: AsyncSession = Depends(get_db),
    ):
        """Containers across the readable restaurants."""
        repo = ContainerRepository(db, kind.container_model)
        containers = await repo.list_for_scope(scope, owner_id=owner_filter(principal))
        return {
            kind.name: [container_to_dict(c) for c in containers],
            "count": len(containers),
        }

    @router.post("", status_code=201)
    async def create_container(
        req: ContainerCreateRequest,
        scope: TenantScope = Depends(get_required_scope),
        principal: Principal = Depends(get_current_principal),
        db: AsyncSession = Depends(get_db),
    ):
        repo = ContainerRepository(db, kind.container_model)
        container = await repo.create(scope.require_tenant(), principal.id, req.name)
        await db.commit()
        logger.info(
            "Created %s %s", kind.container_label.lower(), container.id,
            extra={"tenant_id": scope.resolved_tenant_id, "principal_id": principal.id},
        )
        return container_to_dict(container)

    @router.get("/{container_id}/items")
    async def list_items(
        container_id: int,
        scope: TenantScope = Depends(get_tenant_scope),
        principal: Principal = Depends(get_current_principal),
        db: AsyncSession = Depends(get_db),
    ):
        manager = manager_for(db, scope, principal)
        items = await retry.run(
            lambda: manager.list_items(container_id), label=f"{kind.name}.list",
        )
        return items_response(items)

    @router.post("/{container_id}/items", status_code=201)
    async def create_item(
        container_id: int,
        req: ItemCreateRequest,
        scope: TenantScope = Depends(get_required_scope),
        principal: Principal = Depends(get_current_principal),
        db: AsyncSession = Depends(get_db),
    ):
        """Append, or insert before the item currently at ``position``."""
        manager = manager_for(db, scope, principal)
        data = dict(req.model_extra or {})
        item = await retry.run(
            lambda: manager.insert_at(container_id, data, position=req.position),
            label=f"{kind.name}.create",
        )
        return item_to_dict(item)

    @router.put("/{container_id}/items/reorder")
    async def reorder_items(
        container_id: int,
        req: ReorderRequest,
        scope: TenantScope = Depends(get_required_scope),
        principal: Principal = Depends(get_current_principal),
        db: AsyncSession = Depends(get_db),
    ):
        manager = manager_for(db, scope, principal)
        items = await retry.run(
            lambda: manager.bulk_reorder(container_id, req.item_ids),
            label=f"{kind.name}.reorder",
        )
        return items_response(items)

    @router.post("/{container_id}/items/{item_id}/move")
    async def move_item(
        container_id: int,
        item_id: int,
        req: MoveRequest,
        scope: TenantScope = Depends(get_required_scope),
        principal: Principal = Depends(get_current_principal),
        db: AsyncSession = Depends(get_db),
    ):
        manager = manager_for(db, scope, principal)
        items = await retry.run(
            lambda: manager.move_step(container_id, item_id, req.direction),
            label=f"{kind.name}.move",
        )
        return items_response(items)

    @router.post("/{container_id}/items/{item_id}/duplicate", status_code=201)
    async def duplicate_item(
        container_id: int,
        item_id: int,
        scope: TenantScope = Depends(get_required_scope),
        principal: Principal = Depends(get_current_principal),
        db: AsyncSession = Depends(get_db),
    ):
        manager = manager_for(db, scope, principal)
        item = await retry.run(
            lambda: manager.duplicate(container_id, item_id),
            label=f"{kind.name}.duplicate",
        )
        return item_to_dict(item)

    @router.delete("/{container_id}/items/{item_id}", status_code=204)
    async def delete_item(
        container_id: int,
        item_id: int,
        scope: TenantScope = Depends(get_required_scope),
        principal: Principal = Depends(get_current_principal),
        db: AsyncSession = Depends(get_db),
    ):
        manager = manager_for(db, scope, principal)
        await retry.run(
            lambda: manager.delete(container_id, item_id),
            label=f"{kind.name}.delete",
        )
        return Response(status_code=204)

    if kind.publishable:
        @router.put("/{container_id}/items/{item_id}/publish")
        async def publish_item(
            container_id: int,
            item_id: int,
            scope: TenantScope = Depends(get_required_scope),
            principal: Principal = Depends(get_current_principal),
            db: AsyncSession = Depends(get_db),
        ):
            manager = manager_for(db, scope, principal)
            item = await retry.run(
                lambda: manager.set_published(container_id, item_id, True),
                label=f"{kind.name}.publish",
            )
            return item_to_dict(item)

        @router.put("/{container_id}/items/{item_id}/unpublish")
        async def unpublish_item(
            container_id: int,
            item_id: int,
            scope: TenantScope = Depends(get_required_scope),
            principal: Principal = Depends(get_current_principal),
            db: AsyncSession = Depends(get_db),
        ):
            manager = manager_for(db, scope, principal)
            item = await retry.run(
                lambda: manager.set_published(container_id, item_id, False),
                label=f"{kind.name}.unpublish",
            )
            return item_to_dict(item)

    return router


collection_routers: List[APIRouter] = [
    build_collection_router(kind) for kind in COLLECTION_KINDS.values()
]
