# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Public API — Unauthenticated reads for a restaurant's customer site.

The restaurant is named by its slug; only active restaurants and
published, active content blocks are visible.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mise_os.api.collections import items_response
from mise_os.core.errors import NotFound
from mise_os.storage.database import get_db
from mise_os.storage.repositories import PublicContentRepository, RestaurantRepository

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/{slug}/pages/{page_id}/blocks")
async def get_published_blocks(
    slug: str,
    page_id: int,
    db: AsyncSession = Depends(get_db),
):
    restaurant = await RestaurantRepository(db).get_active_by_slug(slug)
    if restaurant is None:
        raise NotFound("Restaurant", slug)
    blocks = await PublicContentRepository(db).published_blocks(restaurant.id, page_id)
    if blocks is None:
        raise NotFound("Page", page_id)
    return items_response(blocks)
