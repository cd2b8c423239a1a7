# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Ordered Collection Manager — Positions of items inside one container.

One implementation serves every orderable resource (prep columns, content
blocks, navigation items); the CollectionKind supplies the models.

Operations:
  - append:       order = max(active orders) + 1, or 0 when empty
  - insert_at:    integer midpoint between neighbours, else full renumber
                  to ``index * step`` including the new item
  - move_step:    swap order with the adjacent sibling (no-op at the edge)
  - bulk_reorder: caller supplies every active id; order = index
  - duplicate:    copy an item's payload into a new item right after it
  - delete:       remove the row, gaps are left in place
  - set_published: show or hide a content block on the public site

Every mutation runs as one transaction: the container row is locked
(``SELECT ... FOR UPDATE``), items are read, all writes are issued, then a
single commit. Orderings returned to callers are read inside that same
transaction, so a caller retrying on StorageFailure never re-applies a
committed move. Any failure, including cancellation, rolls the whole batch
back, so readers only ever see the old or the new ordering.

The container lookup is always filtered by the request's TenantScope; an
id from another restaurant is indistinguishable from a missing one.
"""

from __future__ import annotations

import enum
import logging
from collections import Counter
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mise_os.core.config import settings
from mise_os.core.errors import InvalidReorder, NotFound, StorageFailure
from mise_os.core.metrics import platform_metrics
from mise_os.core.tenant import TenantScope
from mise_os.ordering.kinds import CollectionKind
from mise_os.storage.scoping import tenant_filter

logger = logging.getLogger("mise.ordering")


class Direction(str, enum.Enum):
    UP = "up"
    DOWN = "down"


class OrderedCollectionManager:
    """Append / insert / move / reorder / delete within a scoped container."""

    def __init__(
        self,
        db: AsyncSession,
        kind: CollectionKind,
        scope: TenantScope,
        owner_id: Optional[int] = None,
        renumber_step: Optional[int] = None,
    ):
        self.db = db
        self.kind = kind
        self.scope = scope
        self.owner_id = owner_id
        self.step = renumber_step or settings.ORDER_RENUMBER_STEP
        if self.step < 2:
            raise ValueError("renumber_step must be >= 2")

    # ── Reads ───────────────────────────────────────────────────

    async def get_container(self, container_id: int, *, lock: bool = False):
        model = self.kind.container_model
        stmt = select(model).where(
            model.id == container_id,
            tenant_filter(model.restaurant_id, self.scope),
        )
        if self.kind.owner_scoped:
            stmt = stmt.where(model.owner_id == self.owner_id)
        if lock:
            stmt = stmt.with_for_update()
        container = (await self.db.execute(stmt)).scalar_one_or_none()
        if container is None:
            raise NotFound(self.kind.container_label, container_id)
        return container

    async def list_items(self, container_id: int) -> List[Any]:
        """Active items of a container, ascending by order."""
        try:
            await self.get_container(container_id)
            return await self._load_items(container_id)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise self._storage_failure("list", e) from e

    # ── Mutations ───────────────────────────────────────────────

    async def append(self, container_id: int, data: Dict[str, Any]):
        return await self.insert_at(container_id, data, position=None)

    async def insert_at(
        self, container_id: int, data: Dict[str, Any], position: Optional[int] = None,
    ):
        """Create an item at ``position`` (0-based among active items); None appends."""
        payload = self.kind.validate_payload(data)
        op = "append" if position is None else "insert_at"
        async with self._atomic(op):
            await self.get_container(container_id, lock=True)
            items = await self._load_items(container_id)
            item = await self._place(container_id, items, payload, position)
        return item

    async def duplicate(self, container_id: int, item_id: int):
        async with self._atomic("duplicate"):
            await self.get_container(container_id, lock=True)
            items = await self._load_items(container_id)
            index = self._index_of(items, item_id)
            payload = items[index].payload()
            item = await self._place(container_id, items, payload, index + 1)
        return item

    async def move_step(self, container_id: int, item_id: int, direction: Direction) -> List[Any]:
        """Swap an item with its neighbour; already first/last is a no-op."""
        direction = Direction(direction)
        async with self._atomic("move_step"):
            await self.get_container(container_id, lock=True)
            items = await self._load_items(container_id)
            index = self._index_of(items, item_id)
            neighbour = index - 1 if direction is Direction.UP else index + 1
            if 0 <= neighbour < len(items):
                a, b = items[index], items[neighbour]
                await self._write_orders(
                    [(a.id, b.display_order), (b.id, a.display_order)]
                )
                items = await self._load_items(container_id)
        return items

    async def bulk_reorder(self, container_id: int, ordered_ids: Sequence[int]) -> List[Any]:
        """
        Rewrite the whole ordering of a container.

        Raises:
            InvalidReorder: ``ordered_ids`` is not exactly the set of active
                item ids (something missing, foreign or repeated). Nothing
                is written in that case.
        """
        async with self._atomic("bulk_reorder"):
            await self.get_container(container_id, lock=True)
            items = await self._load_items(container_id)
            self._validate_reorder(items, ordered_ids)
            current = {item.id: item.display_order for item in items}
            await self._write_orders(
                [
                    (item_id, index)
                    for index, item_id in enumerate(ordered_ids)
                    if current[item_id] != index
                ]
            )
            items = await self._load_items(container_id)
        logger.info(
            "Reordered %s %s (%d items)",
            self.kind.container_label, container_id, len(ordered_ids),
            extra={"tenant_id": self.scope.resolved_tenant_id},
        )
        return items

    async def delete(self, container_id: int, item_id: int) -> None:
        async with self._atomic("delete"):
            await self.get_container(container_id, lock=True)
            item = await self._get_item(container_id, item_id)
            await self.db.delete(item)

    async def set_published(self, container_id: int, item_id: int, published: bool):
        """Show or hide an item on the public site. Setting the current state is a no-op."""
        if not self.kind.publishable:
            raise ValueError(f"{self.kind.name} items cannot be published")
        async with self._atomic("publish" if published else "unpublish"):
            await self.get_container(container_id, lock=True)
            item = await self._get_item(container_id, item_id)
            item.is_published = published
        logger.info(
            "%s %s %s", self.kind.item_label, item_id,
            "published" if published else "unpublished",
            extra={"tenant_id": self.scope.resolved_tenant_id},
        )
        return item

    # ── Internals ───────────────────────────────────────────────

    @asynccontextmanager
    async def _atomic(self, op: str) -> AsyncIterator[None]:
        platform_metrics.inc(f"ordering:{op}")
        try:
            yield
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise self._storage_failure(op, e) from e
        except BaseException:
            await self.db.rollback()
            raise

    def _storage_failure(self, op: str, error: Exception) -> StorageFailure:
        platform_metrics.inc("storage_failure")
        logger.error(
            "%s on %s failed: %s", op, self.kind.name, error,
            extra={"tenant_id": self.scope.resolved_tenant_id},
        )
        return StorageFailure(f"{op} failed for {self.kind.name}")

    async def _load_items(self, container_id: int) -> List[Any]:
        model = self.kind.item_model
        result = await self.db.execute(
            select(model)
            .where(model.container_id == container_id, model.is_active.is_(True))
            .order_by(model.display_order, model.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def _get_item(self, container_id: int, item_id: int):
        model = self.kind.item_model
        item = (
            await self.db.execute(
                select(model).where(model.id == item_id, model.container_id == container_id)
            )
        ).scalar_one_or_none()
        if item is None:
            raise NotFound(self.kind.item_label, item_id)
        return item

    def _index_of(self, items: List[Any], item_id: int) -> int:
        for index, item in enumerate(items):
            if item.id == item_id:
                return index
        raise NotFound(self.kind.item_label, item_id)

    async def _place(
        self,
        container_id: int,
        items: List[Any],
        payload: Dict[str, Any],
        position: Optional[int],
    ):
        if position is None or position >= len(items):
            order = items[-1].display_order + 1 if items else 0
        else:
            position = max(position, 0)
            lower = items[position - 1].display_order if position > 0 else -1
            upper = items[position].display_order
            if upper - lower >= 2:
                order = lower + (upper - lower) // 2
            else:
                order = position * self.step
                await self._renumber(items, skip_slot=position)

        item = self.kind.build_item(container_id, order, payload)
        self.db.add(item)
        await self.db.flush()
        return item

    async def _renumber(self, items: List[Any], skip_slot: int) -> None:
        """Spread orders to ``index * step``, leaving ``skip_slot`` free."""
        platform_metrics.inc("ordering:renumber")
        updates = []
        for index, item in enumerate(items):
            slot = index if index < skip_slot else index + 1
            updates.append((item.id, slot * self.step))
        logger.info(
            "Renumbering %d %s rows with step %d",
            len(items), self.kind.item_label.lower(), self.step,
            extra={"tenant_id": self.scope.resolved_tenant_id},
        )
        await self._write_orders(updates)

    async def _write_orders(self, updates: List[tuple]) -> None:
        model = self.kind.item_model
        for item_id, order in updates:
            await self.db.execute(
                update(model)
                .where(model.id == item_id)
                .values(display_order=order)
                .execution_options(synchronize_session=False)
            )

    def _validate_reorder(self, items: List[Any], ordered_ids: Sequence[int]) -> None:
        current = {item.id for item in items}
        supplied = set(ordered_ids)
        duplicates = [i for i, n in Counter(ordered_ids).items() if n > 1]
        missing = current - supplied
        unexpected = supplied - current
        if missing or unexpected or duplicates:
            platform_metrics.inc("ordering:invalid_reorder")
            raise InvalidReorder(
                missing=list(missing),
                unexpected=list(unexpected),
                duplicates=duplicates,
            )
