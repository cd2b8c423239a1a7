# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Tenant Scope — The per-request restaurant access decision.

A TenantScope is computed once per request by the TenantAccessResolver and
threaded explicitly through the call chain (never stored in process-wide
state). It answers two questions:

  - which single restaurant, if any, this request acts on
  - which restaurants the caller may read across

``predicate()`` turns the scope into a storage-agnostic filter that every
controller applies to tenant-owned rows. An empty scope yields a predicate
that matches nothing, so a forgotten check degrades to zero rows rather
than an unfiltered scan.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from mise_os.core.errors import NoTenantAccess, TenantContextRequired

# Restaurant ids are positive; this one never matches a row.
NO_TENANT_SENTINEL = -1


class ResolutionSource(str, enum.Enum):
    """Where the resolved restaurant came from."""

    HEADER = "header"
    QUERY = "query"
    PATH = "path"
    SINGLETON = "singleton"
    NONE = "none"
    EMPTY = "empty"


class PredicateKind(str, enum.Enum):
    EXACT = "exact"
    MEMBER = "member"
    NOTHING = "nothing"


@dataclass(frozen=True)
class TenantPredicate:
    """Filter over a restaurant id column."""

    kind: PredicateKind
    tenant_ids: FrozenSet[int] = frozenset()

    def matches(self, tenant_id: Optional[int]) -> bool:
        if tenant_id is None or self.kind is PredicateKind.NOTHING:
            return False
        return tenant_id in self.tenant_ids


@dataclass(frozen=True)
class TenantScope:
    """Immutable restaurant access decision for one request."""

    accessible_tenant_ids: FrozenSet[int] = field(default_factory=frozenset)
    resolved_tenant_id: Optional[int] = None
    resolved_slug: Optional[str] = None
    is_owner: bool = False
    source: ResolutionSource = ResolutionSource.EMPTY

    def __post_init__(self):
        if (
            self.resolved_tenant_id is not None
            and self.resolved_tenant_id not in self.accessible_tenant_ids
        ):
            raise ValueError("resolved_tenant_id must be one of accessible_tenant_ids")
        if self.is_owner and self.resolved_tenant_id is None:
            raise ValueError("is_owner requires a resolved tenant")

    @classmethod
    def empty(cls) -> "TenantScope":
        return cls()

    @property
    def has_access(self) -> bool:
        return bool(self.accessible_tenant_ids)

    @property
    def is_resolved(self) -> bool:
        return self.resolved_tenant_id is not None

    def predicate(self) -> TenantPredicate:
        if self.resolved_tenant_id is not None:
            return TenantPredicate(PredicateKind.EXACT, frozenset({self.resolved_tenant_id}))
        if self.accessible_tenant_ids:
            return TenantPredicate(PredicateKind.MEMBER, self.accessible_tenant_ids)
        return TenantPredicate(PredicateKind.NOTHING)

    def require_tenant(self) -> int:
        """Return the resolved restaurant id or raise.

        Raises:
            NoTenantAccess: the caller has no accessible restaurant at all.
            TenantContextRequired: several are accessible and none was chosen.
        """
        if self.resolved_tenant_id is not None:
            return self.resolved_tenant_id
        if not self.accessible_tenant_ids:
            raise NoTenantAccess()
        raise TenantContextRequired(
            message="Select a restaurant or provide a restaurant id",
            accessible_ids=self.accessible_tenant_ids,
        )

    def to_dict(self) -> dict:
        return {
            "resolved_restaurant_id": self.resolved_tenant_id,
            "resolved_slug": self.resolved_slug,
            "accessible_restaurant_ids": sorted(self.accessible_tenant_ids),
            "is_owner": self.is_owner,
            "source": self.source.value,
        }

    def __repr__(self) -> str:
        return (
            f"TenantScope(resolved={self.resolved_tenant_id!r}, "
            f"accessible={sorted(self.accessible_tenant_ids)!r}, owner={self.is_owner})"
        )
