# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Tenant Access Resolver — Bind a request to at most one restaurant.

Resolution order for the restaurant hint:
  1. explicit header         (X-Restaurant-Id)
  2. explicit query param    (?restaurantId=)
  3. explicit path param     (/restaurants/{restaurant_id}/...)
  4. implicit singleton      (the caller has exactly one restaurant)

Any hint, explicit or implicit, must be in the accessible set or the
request is denied. With several restaurants and no hint the scope stays
unresolved but still lists the accessible set, so reads may span all of
them while writes must name one.

The resolver never raises for "no access"; that is an empty scope and
endpoints that need a restaurant reject it themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Tuple

from mise_os.core.errors import AccessDenied
from mise_os.core.metrics import platform_metrics
from mise_os.core.security import Principal
from mise_os.core.tenant import ResolutionSource, TenantScope
from mise_os.tenancy.directory import AssignmentRecord

logger = logging.getLogger("mise.tenancy")


class TenantDirectory(Protocol):
    async def active_assignments(self, principal_id: int) -> List[AssignmentRecord]:
        ...


@dataclass(frozen=True)
class TenantHints:
    """Raw restaurant-id signals supplied by the request."""

    header: Optional[str] = None
    query: Optional[str] = None
    path: Optional[str] = None

    def first_explicit(self) -> Optional[Tuple[ResolutionSource, str]]:
        for source, value in (
            (ResolutionSource.HEADER, self.header),
            (ResolutionSource.QUERY, self.query),
            (ResolutionSource.PATH, self.path),
        ):
            if value is not None and value.strip() != "":
                return source, value.strip()
        return None


def _parse_tenant_id(raw: str) -> Optional[int]:
    try:
        return int(raw)
    except ValueError:
        return None


class TenantAccessResolver:
    """Computes a TenantScope from a principal's assignments and request hints."""

    def __init__(self, directory: TenantDirectory):
        self._directory = directory

    async def resolve(self, principal: Principal, hints: Optional[TenantHints] = None) -> TenantScope:
        """
        Resolve the request's tenant scope.

        Raises:
            AccessDenied: a hint names a restaurant outside the accessible set.
            StorageFailure: the assignment lookup failed (propagated).
        """
        hints = hints or TenantHints()
        assignments = await self._directory.active_assignments(principal.id)

        if not assignments:
            return self._finish(principal, TenantScope.empty())

        by_tenant: Dict[int, AssignmentRecord] = {}
        for record in assignments:
            by_tenant.setdefault(record.tenant_id, record)
        accessible = frozenset(by_tenant)

        explicit = hints.first_explicit()
        if explicit is not None:
            source, raw = explicit
            # Malformed or zero hints are denied rather than skipped to the next source.
            hinted = _parse_tenant_id(raw)
        elif len(accessible) == 1:
            source, hinted = ResolutionSource.SINGLETON, next(iter(accessible))
        else:
            return self._finish(
                principal,
                TenantScope(accessible_tenant_ids=accessible, source=ResolutionSource.NONE),
            )

        if hinted is None or hinted not in accessible:
            platform_metrics.inc("tenant_denied")
            logger.warning(
                "Tenant hint from %s rejected for principal %s",
                source.value, principal.id,
                extra={"principal_id": principal.id, "resolution": "denied"},
            )
            raise AccessDenied()

        record = by_tenant[hinted]
        scope = TenantScope(
            accessible_tenant_ids=accessible,
            resolved_tenant_id=hinted,
            resolved_slug=record.tenant_slug,
            is_owner=principal.is_elevated,
            source=source,
        )
        return self._finish(principal, scope)

    def _finish(self, principal: Principal, scope: TenantScope) -> TenantScope:
        platform_metrics.inc(f"tenant_resolution:{scope.source.value}")
        if scope.source is ResolutionSource.SINGLETON:
            message = "Resolved restaurant %s implicitly (single assignment)"
        elif scope.is_resolved:
            message = "Resolved restaurant %s from explicit hint"
        else:
            message = "No restaurant resolved (%s)"
        logger.info(
            message,
            scope.resolved_tenant_id if scope.is_resolved else scope.source.value,
            extra={
                "principal_id": principal.id,
                "tenant_id": scope.resolved_tenant_id,
                "resolution": scope.source.value,
            },
        )
        return scope
