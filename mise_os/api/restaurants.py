# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Restaurants API — What the caller can see and what this request acts on.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mise_os.api.deps import get_tenant_scope
from mise_os.core.tenant import TenantScope
from mise_os.storage.database import get_db
from mise_os.storage.repositories import RestaurantRepository

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


@router.get("/context")
async def get_context(scope: TenantScope = Depends(get_tenant_scope)):
    """The resolved tenant scope for this request."""
    return scope.to_dict()


@router.get("")
async def list_restaurants(
    scope: TenantScope = Depends(get_tenant_scope),
    db: AsyncSession = Depends(get_db),
):
    restaurants = await RestaurantRepository(db).list_for_scope(scope)
    return {
        "restaurants": [
            {"id": r.id, "name": r.name, "slug": r.slug, "is_active": r.is_active}
            for r in restaurants
        ],
        "count": len(restaurants),
    }
