# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Domain Errors — Tenant access and ordered-collection failures.

These are raised by the tenancy, ordering and storage layers and carry no
HTTP semantics; ``mise_os.api.errors`` maps them to responses.
"""

from __future__ import annotations

from typing import Iterable, List, Optional


class MiseError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str = "") -> None:
        self.message = message or self.__class__.__name__
        super().__init__(self.message)


class AuthenticationFailed(MiseError):
    """No valid principal could be established for the request."""


class AccessDenied(MiseError):
    """An explicit restaurant hint is outside the caller's accessible set."""

    def __init__(self, message: str = "Access denied to this restaurant") -> None:
        super().__init__(message)


class TenantContextRequired(MiseError):
    """The operation needs a single resolved restaurant and none was established."""

    def __init__(
        self,
        message: str = "Restaurant context required",
        accessible_ids: Iterable[int] = (),
    ) -> None:
        super().__init__(message)
        self.accessible_ids = sorted(accessible_ids)


class NoTenantAccess(TenantContextRequired):
    """The principal has no active staff assignment to any active restaurant."""

    def __init__(self, message: str = "No restaurant access") -> None:
        super().__init__(message)


class NotFound(MiseError):
    """A container or item does not exist within the caller's scope."""

    def __init__(self, what: str, ident: object = None) -> None:
        self.what = what
        self.ident = ident
        if ident is None:
            super().__init__(f"{what} not found")
        else:
            super().__init__(f"{what} '{ident}' not found")


class InvalidReorder(MiseError):
    """A bulk reorder id list does not match the container's current items."""

    def __init__(
        self,
        missing: Optional[List[int]] = None,
        unexpected: Optional[List[int]] = None,
        duplicates: Optional[List[int]] = None,
    ) -> None:
        self.missing = sorted(missing or [])
        self.unexpected = sorted(unexpected or [])
        self.duplicates = sorted(duplicates or [])
        parts = []
        if self.missing:
            parts.append(f"missing={self.missing}")
        if self.unexpected:
            parts.append(f"unexpected={self.unexpected}")
        if self.duplicates:
            parts.append(f"duplicates={self.duplicates}")
        super().__init__("Reorder list does not match container items: " + ", ".join(parts))


class StorageFailure(MiseError):
    """Transport or transaction failure against the persistence layer. Retryable."""
