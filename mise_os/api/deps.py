# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
API Dependencies — FastAPI dependency injection.

  - get_current_principal: Bearer JWT -> active user
  - get_tenant_scope:      principal + request hints -> TenantScope
  - get_required_scope:    as above, but a single restaurant must be resolved
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from mise_os.core.config import settings
from mise_os.core.errors import AuthenticationFailed
from mise_os.core.security import GlobalRole, Principal, decode_access_token
from mise_os.core.tenant import TenantScope
from mise_os.storage.database import get_db
from mise_os.storage.repositories import UserRepository
from mise_os.tenancy.directory import SqlTenantDirectory
from mise_os.tenancy.resolver import TenantAccessResolver, TenantHints


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise AuthenticationFailed("Missing bearer token")
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise AuthenticationFailed("Malformed Authorization header")
    return parts[1]


async def get_current_principal(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """Resolve the caller from the Authorization header."""
    user_id = decode_access_token(_bearer_token(authorization))
    user = await UserRepository(db).get_active(user_id)
    if user is None:
        raise AuthenticationFailed("Unknown or inactive user")
    try:
        role = GlobalRole(user.global_role)
    except ValueError:
        role = GlobalRole.ORDINARY
    return Principal(id=user.id, global_role=role, email=user.email)


def hints_from_request(request: Request) -> TenantHints:
    """Collect the raw restaurant hints; names come from settings."""
    path_value = request.path_params.get(settings.TENANT_PATH_PARAM)
    return TenantHints(
        header=request.headers.get(settings.TENANT_HEADER),
        query=request.query_params.get(settings.TENANT_QUERY_PARAM),
        path=str(path_value) if path_value is not None else None,
    )


async def get_tenant_scope(
    request: Request,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
) -> TenantScope:
    resolver = TenantAccessResolver(SqlTenantDirectory(db))
    scope = await resolver.resolve(principal, hints_from_request(request))
    request.state.tenant_id = scope.resolved_tenant_id
    return scope


async def get_required_scope(
    scope: TenantScope = Depends(get_tenant_scope),
) -> TenantScope:
    """Scope for operations that write into exactly one restaurant."""
    scope.require_tenant()
    return scope
