from typing import Optional

from fastapi import Depends, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ..models.user import UserRole
from ..services.redis import redis_client
from .cache import CacheKeys

security = HTTPBearer(auto_error=False)

NAVIGATION_BY_ROLE = {
    UserRole.CUSTOMER: "customer",
    UserRole.VENDOR: "vendor",
    UserRole.DRIVER: "driver",
    UserRole.NONE: "public",
}


def resolve_role(session_token: Optional[str]) -> UserRole:
    """Role stored with the session; anything missing or unknown is NONE"""
    if not session_token:
        return UserRole.NONE

    session = redis_client.get(CacheKeys.CUSTOMER_SESSION.format(session_token=session_token))
    if not isinstance(session, dict):
        return UserRole.NONE

    try:
        return UserRole(session.get("role"))
    except ValueError:
        return UserRole.NONE


def navigation_for(role: UserRole) -> str:
    return NAVIGATION_BY_ROLE.get(role, NAVIGATION_BY_ROLE[UserRole.NONE])


async def get_current_role(
    token: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session_token: Optional[str] = Query(None),
) -> UserRole:
    if token is not None:
        return resolve_role(token.credentials)
    return resolve_role(session_token)
