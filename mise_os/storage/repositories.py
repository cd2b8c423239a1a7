# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Repository Layer — Typed access to principals, restaurants and containers.

Each repository takes an AsyncSession. Ordered items are handled by
``mise_os.ordering.manager`` and never written from here.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mise_os.core.tenant import TenantScope
from mise_os.storage.models import ContentBlock, Page, Restaurant, RestaurantStaff, User
from mise_os.storage.scoping import tenant_filter


# ── User Repository ─────────────────────────────────────────

class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self, email: str, name: Optional[str] = None, global_role: str = "ordinary",
    ) -> User:
        user = User(email=email, name=name, global_role=global_role)
        self.db.add(user)
        await self.db.flush()
        return user

    async def get_active(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.id == user_id, User.is_active.is_(True))
        )
        return result.scalar_one_or_none()


# ── Restaurant Repository ───────────────────────────────────

class RestaurantRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, name: str, slug: str) -> Restaurant:
        restaurant = Restaurant(name=name, slug=slug)
        self.db.add(restaurant)
        await self.db.flush()
        return restaurant

    async def get_active_by_slug(self, slug: str) -> Optional[Restaurant]:
        result = await self.db.execute(
            select(Restaurant).where(Restaurant.slug == slug, Restaurant.is_active.is_(True))
        )
        return result.scalar_one_or_none()

    async def add_staff(self, restaurant_id: int, user_id: int, role: str = "staff") -> RestaurantStaff:
        staff = RestaurantStaff(restaurant_id=restaurant_id, user_id=user_id, role=role)
        self.db.add(staff)
        await self.db.flush()
        return staff

    async def list_for_scope(self, scope: TenantScope) -> List[Restaurant]:
        result = await self.db.execute(
            select(Restaurant)
            .where(tenant_filter(Restaurant.id, scope))
            .order_by(Restaurant.id)
        )
        return list(result.scalars().all())


# ── Container Repository ────────────────────────────────────

class ContainerRepository:
    """Creates and lists the containers of one CollectionKind."""

    def __init__(self, db: AsyncSession, model):
        self.db = db
        self.model = model

    async def create(self, restaurant_id: int, owner_id: Optional[int], name: str):
        container = self.model(restaurant_id=restaurant_id, owner_id=owner_id, name=name)
        self.db.add(container)
        await self.db.flush()
        return container

    async def list_for_scope(self, scope: TenantScope, owner_id: Optional[int] = None) -> List:
        stmt = select(self.model).where(tenant_filter(self.model.restaurant_id, scope))
        if owner_id is not None:
            stmt = stmt.where(self.model.owner_id == owner_id)
        result = await self.db.execute(stmt.order_by(self.model.id))
        return list(result.scalars().all())


# ── Public Content ──────────────────────────────────────────

class PublicContentRepository:
    """Unauthenticated reads for the customer-facing site."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def published_blocks(self, restaurant_id: int, page_id: int) -> Optional[List[ContentBlock]]:
        """Published, active blocks of a page in display order; None if no such page."""
        page = (
            await self.db.execute(
                select(Page).where(Page.id == page_id, Page.restaurant_id == restaurant_id)
            )
        ).scalar_one_or_none()
        if page is None:
            return None
        result = await self.db.execute(
            select(ContentBlock)
            .where(
                ContentBlock.container_id == page.id,
                ContentBlock.is_active.is_(True),
                ContentBlock.is_published.is_(True),
            )
            .order_by(ContentBlock.display_order, ContentBlock.id)
        )
        return list(result.scalars().all())
