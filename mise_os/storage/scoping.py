# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Scoped Queries — Render a TenantScope predicate as a SQL filter.

Every read or write of a restaurant-owned row goes through
``tenant_filter(Model.restaurant_id, scope)``.
"""

from __future__ import annotations

from sqlalchemy import ColumnElement

from mise_os.core.tenant import NO_TENANT_SENTINEL, PredicateKind, TenantScope


def tenant_filter(column, scope: TenantScope) -> ColumnElement[bool]:
    """WHERE clause restricting ``column`` to what ``scope`` may see."""
    predicate = scope.predicate()
    if predicate.kind is PredicateKind.EXACT:
        (tenant_id,) = predicate.tenant_ids
        return column == tenant_id
    if predicate.kind is PredicateKind.MEMBER:
        return column.in_(sorted(predicate.tenant_ids))
    return column == NO_TENANT_SENTINEL
