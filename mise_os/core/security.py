# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Principal & Access Tokens — Who is making the request.

Tokens are HS256 JWTs whose ``sub`` claim is the user id. The token only
identifies the principal; restaurant access is always derived from the
staff assignments in the database, never from claims.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from mise_os.core.config import settings
from mise_os.core.errors import AuthenticationFailed


class GlobalRole(str, enum.Enum):
    ORDINARY = "ordinary"
    ELEVATED = "elevated"


@dataclass(frozen=True)
class Principal:
    """An authenticated actor."""

    id: int
    global_role: GlobalRole = GlobalRole.ORDINARY
    email: Optional[str] = None

    @property
    def is_elevated(self) -> bool:
        return self.global_role is GlobalRole.ELEVATED


def create_access_token(
    principal_id: int,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign an access token for ``principal_id``."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(principal_id),
        "iat": now,
        "exp": now + (expires_delta or timedelta(minutes=settings.JWT_EXP_MINUTES)),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """Validate ``token`` and return the principal id it names."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationFailed("Token has expired")
    except jwt.InvalidTokenError:
        raise AuthenticationFailed("Invalid token")

    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationFailed("Invalid token subject")
