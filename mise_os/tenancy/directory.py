# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Tenant Directory — Typed read of a principal's staff assignments.

Only assignments that are active *and* point at an active restaurant are
returned; a deactivated restaurant is invisible regardless of assignment.

Backends:
  - SqlTenantDirectory:      restaurant_staff ⋈ restaurants via AsyncSession
  - InMemoryTenantDirectory: dict-backed, for tests
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mise_os.core.errors import StorageFailure
from mise_os.core.metrics import platform_metrics
from mise_os.storage.models import Restaurant, RestaurantStaff

logger = logging.getLogger("mise.tenancy.directory")


@dataclass(frozen=True)
class AssignmentRecord:
    """One active staff assignment joined with its restaurant."""

    principal_id: int
    tenant_id: int
    tenant_slug: str
    role: str


class SqlTenantDirectory:
    """Reads assignments from PostgreSQL (or any SQLAlchemy backend)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def active_assignments(self, principal_id: int) -> List[AssignmentRecord]:
        stmt = (
            select(
                RestaurantStaff.user_id,
                RestaurantStaff.restaurant_id,
                Restaurant.slug,
                RestaurantStaff.role,
            )
            .join(Restaurant, Restaurant.id == RestaurantStaff.restaurant_id)
            .where(
                RestaurantStaff.user_id == principal_id,
                RestaurantStaff.is_active.is_(True),
                Restaurant.is_active.is_(True),
            )
            .order_by(RestaurantStaff.restaurant_id, RestaurantStaff.id)
        )
        try:
            rows = (await self.db.execute(stmt)).all()
        except SQLAlchemyError as e:
            platform_metrics.inc("storage_failure")
            logger.error("Assignment lookup failed for principal %s: %s", principal_id, e)
            raise StorageFailure("Failed to load staff assignments") from e

        return [
            AssignmentRecord(
                principal_id=user_id,
                tenant_id=restaurant_id,
                tenant_slug=slug,
                role=role,
            )
            for user_id, restaurant_id, slug, role in rows
        ]


class InMemoryTenantDirectory:
    """In-memory tenant directory for testing."""

    def __init__(self):
        self._tenants: Dict[int, Dict] = {}
        self._assignments: List[Dict] = []
        self.fail_with: Optional[Exception] = None

    def add_tenant(self, tenant_id: int, slug: Optional[str] = None, active: bool = True) -> None:
        self._tenants[tenant_id] = {"slug": slug or f"restaurant-{tenant_id}", "active": active}

    def assign(
        self, principal_id: int, tenant_id: int, role: str = "staff", active: bool = True,
    ) -> None:
        if tenant_id not in self._tenants:
            self.add_tenant(tenant_id)
        self._assignments.append(
            {"principal_id": principal_id, "tenant_id": tenant_id, "role": role, "active": active}
        )

    async def active_assignments(self, principal_id: int) -> List[AssignmentRecord]:
        if self.fail_with is not None:
            raise self.fail_with
        records = []
        for a in self._assignments:
            tenant = self._tenants[a["tenant_id"]]
            if a["principal_id"] == principal_id and a["active"] and tenant["active"]:
                records.append(
                    AssignmentRecord(
                        principal_id=principal_id,
                        tenant_id=a["tenant_id"],
                        tenant_slug=tenant["slug"],
                        role=a["role"],
                    )
                )
        return records
