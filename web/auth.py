"""Authentication for web API: JWT issue/verify and the admin gate."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

import config

http_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AdminPrincipal:
    """Authenticated administrator, attached to ``request.state.principal``."""

    username: str


def create_access_token(username: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(hours=config.JWT_EXPIRE_HOURS)
    payload = {"sub": username, "exp": expire}
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Payload of a valid, unexpired token, else None."""
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        return None


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
    x_auth_token: Optional[str] = Header(None, alias="X-Auth-Token"),
) -> Optional[AdminPrincipal]:
    """Return the admin from the JWT, or None if not authenticated. Accepts Authorization: Bearer or X-Auth-Token (fallback for proxies that strip Authorization)."""
    token = None
    if credentials and credentials.credentials:
        token = credentials.credentials
    elif x_auth_token:
        token = x_auth_token
    if not token:
        return None
    payload = decode_token(token)
    if not payload:
        return None
    username = payload.get("sub")
    if not username or username != config.ADMIN_USERNAME:
        return None
    return AdminPrincipal(username=username)


async def require_admin(
    request: Request,
    principal: Optional[AdminPrincipal] = Depends(get_current_principal),
) -> AdminPrincipal:
    """Require authenticated admin. Raises 401 if not logged in."""
    if not principal:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    request.state.principal = principal
    return principal
