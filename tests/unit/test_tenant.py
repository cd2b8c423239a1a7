# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.
"""Unit tests for TenantScope and TenantPredicate."""

import pytest

from mise_os.core.errors import NoTenantAccess, TenantContextRequired
from mise_os.core.tenant import (
    NO_TENANT_SENTINEL,
    PredicateKind,
    ResolutionSource,
    TenantScope,
)


class TestTenantScope:
    def test_empty(self):
        scope = TenantScope.empty()
        assert scope.resolved_tenant_id is None
        assert scope.accessible_tenant_ids == frozenset()
        assert scope.is_owner is False
        assert scope.has_access is False
        assert scope.source is ResolutionSource.EMPTY

    def test_resolved_must_be_accessible(self):
        with pytest.raises(ValueError, match="accessible"):
            TenantScope(accessible_tenant_ids=frozenset({5}), resolved_tenant_id=9)

    def test_owner_requires_resolved(self):
        with pytest.raises(ValueError, match="is_owner"):
            TenantScope(accessible_tenant_ids=frozenset({5}), is_owner=True)

    def test_is_frozen(self):
        scope = TenantScope.empty()
        with pytest.raises(AttributeError):
            scope.resolved_tenant_id = 5

    def test_require_tenant_resolved(self):
        scope = TenantScope(accessible_tenant_ids=frozenset({5, 9}), resolved_tenant_id=9)
        assert scope.require_tenant() == 9

    def test_require_tenant_no_access(self):
        with pytest.raises(NoTenantAccess):
            TenantScope.empty().require_tenant()

    def test_require_tenant_ambiguous_lists_own_ids(self):
        scope = TenantScope(accessible_tenant_ids=frozenset({9, 5}), source=ResolutionSource.NONE)
        with pytest.raises(TenantContextRequired) as exc_info:
            scope.require_tenant()
        assert not isinstance(exc_info.value, NoTenantAccess)
        assert exc_info.value.accessible_ids == [5, 9]

    def test_to_dict(self):
        scope = TenantScope(
            accessible_tenant_ids=frozenset({9, 5}),
            resolved_tenant_id=5,
            resolved_slug="five-spice",
            is_owner=True,
            source=ResolutionSource.QUERY,
        )
        assert scope.to_dict() == {
            "resolved_restaurant_id": 5,
            "resolved_slug": "five-spice",
            "accessible_restaurant_ids": [5, 9],
            "is_owner": True,
            "source": "query",
        }

    def test_repr(self):
        scope = TenantScope(accessible_tenant_ids=frozenset({5}), resolved_tenant_id=5)
        assert "resolved=5" in repr(scope)


class TestTenantPredicate:
    def test_exact_when_resolved(self):
        pred = TenantScope(
            accessible_tenant_ids=frozenset({5, 9}), resolved_tenant_id=9,
        ).predicate()
        assert pred.kind is PredicateKind.EXACT
        assert pred.matches(9)
        assert not pred.matches(5)

    def test_member_when_unresolved(self):
        pred = TenantScope(accessible_tenant_ids=frozenset({5, 9})).predicate()
        assert pred.kind is PredicateKind.MEMBER
        assert pred.matches(5) and pred.matches(9)
        assert not pred.matches(7)

    def test_nothing_when_empty(self):
        pred = TenantScope.empty().predicate()
        assert pred.kind is PredicateKind.NOTHING
        for tenant_id in (1, 5, NO_TENANT_SENTINEL, None):
            assert not pred.matches(tenant_id)
