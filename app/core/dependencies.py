"""FastAPI dependencies for authentication and authorization."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.policies import PolicyDenied, AccessDecision, evaluate_finance_access, evaluate_role_access
from app.models.enums import UserRole
from app.models.user import User
from app.services.auth import decode_access_token

optional_security = HTTPBearer(auto_error=False)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Resolve the bearer token to an active user.

    Returns None if no token is provided, the token is invalid, or the user
    no longer exists / is disabled.
    """
    if not credentials:
        return None

    payload = decode_access_token(credentials.credentials)
    if not payload:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user and user.is_active:
        return user
    return None


async def get_current_user(
    current_user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    """Require an authenticated user. Raises 401 otherwise."""
    if current_user is None:
        raise PolicyDenied(AccessDecision.unauthenticated())
    return current_user


def require_role(*roles: UserRole):
    """Dependency factory that checks if user has one of the required roles.

    Usage:
        require_manager = require_role(UserRole.MANAGER)

        @router.get("/manager-only")
        async def manager_route(user: User = Depends(require_manager)):
            ...
    """
    async def role_checker(current_user: Optional[User] = Depends(get_current_user_optional)) -> User:
        decision = evaluate_role_access(current_user, *roles)
        if not decision.allowed:
            raise PolicyDenied(decision)
        return current_user

    return role_checker


async def require_finance_access(
    current_user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    """Gate finance endpoints on the finance access policy."""
    decision = evaluate_finance_access(current_user)
    if not decision.allowed:
        raise PolicyDenied(decision)
    return current_user


# Pre-configured role dependencies
require_manager = require_role(UserRole.MANAGER)
