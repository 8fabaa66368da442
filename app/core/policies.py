"""Role-based access policies.

Policies are plain functions of the actor and know nothing about HTTP.
The FastAPI layer (app.core.dependencies) turns a denied decision into a
PolicyDenied exception, which app.main renders as a JSON response.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from app.models.enums import UserRole

FINANCE_ROLES = (UserRole.FINANCE, UserRole.MANAGER)


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of a policy check. A denial carries its HTTP status and body."""
    allowed: bool
    status_code: int = 200
    body: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(allowed=True)

    @classmethod
    def unauthenticated(cls) -> "AccessDecision":
        return cls(allowed=False, status_code=401, body={"message": "Unauthenticated."})

    @classmethod
    def unauthorized(cls, message: str, required_roles, user_role) -> "AccessDecision":
        return cls(
            allowed=False,
            status_code=403,
            body={
                "message": message,
                "required_roles": [role.value for role in required_roles],
                "user_role": getattr(user_role, "value", user_role),
            },
        )


class PolicyDenied(Exception):
    """Raised by dependencies when a policy denies access."""

    def __init__(self, decision: AccessDecision):
        self.decision = decision
        super().__init__(decision.body.get("message", "Access denied"))


def can_access_finance(actor) -> bool:
    """True iff the actor holds the finance or manager role."""
    return actor is not None and actor.role in FINANCE_ROLES


def evaluate_finance_access(actor: Optional[Any]) -> AccessDecision:
    """Finance access policy.

    Missing actor -> 401, actor without finance/manager role -> 403.
    Evaluated on every request; roles may change between requests.
    """
    if actor is None:
        return AccessDecision.unauthenticated()

    if not can_access_finance(actor):
        return AccessDecision.unauthorized(
            "Unauthorized. Only finance users and managers can access this resource.",
            FINANCE_ROLES,
            actor.role,
        )

    return AccessDecision.allow()


def evaluate_role_access(actor: Optional[Any], *roles: UserRole) -> AccessDecision:
    """Generic role gate used for manager-only endpoints."""
    if actor is None:
        return AccessDecision.unauthenticated()

    if actor.role not in roles:
        names = ", ".join(role.value for role in roles)
        return AccessDecision.unauthorized(f"Access denied. Required role: {names}", roles, actor.role)

    return AccessDecision.allow()
