"""Authorizer: decides whether an actor may perform an action on a resource.

The decision is a pure function of the actor snapshot and the role
snapshot resolved for it; nothing here reads storage, so it is safe to
call speculatively before a mutation. Unauthenticated actors always use
the fixed anonymous permission set.
"""

from dataclasses import dataclass
from enum import Enum

from reviewhub.role.permissions import (
    ADMIN_RESOURCES,
    ANONYMOUS_PERMISSIONS,
    Action,
    Resource,
    parse_action,
    parse_resource,
)


class DenyReason(Enum):
    NO_ROLE = "NoRole"
    ROLE_INACTIVE = "RoleInactive"
    INSUFFICIENT_PERMISSION = "InsufficientPermission"


@dataclass(frozen=True)
class Actor:
    """Who is acting: a user id and the role reference supplied by the identity layer."""

    user_id: str | None = None
    role_id: str | None = None

    @classmethod
    def anonymous(cls) -> "Actor":
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: DenyReason | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason) -> "Decision":
        return cls(allowed=False, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed


class Authorizer:
    @staticmethod
    def decide(actor: Actor, role, resource, action) -> Decision:
        """Decide for ``actor`` given the role snapshot resolved from its role reference."""
        resource = parse_resource(resource)
        action = parse_action(action)

        if not actor.is_authenticated:
            if ANONYMOUS_PERMISSIONS.allows(resource, action):
                return Decision.allow()
            return Decision.deny(DenyReason.INSUFFICIENT_PERMISSION)

        if role is None or role.is_deleted:
            return Decision.deny(DenyReason.NO_ROLE)

        if not role.is_active:
            return Decision.deny(DenyReason.ROLE_INACTIVE)

        if role.has_permission(resource, action):
            return Decision.allow()

        return Decision.deny(DenyReason.INSUFFICIENT_PERMISSION)

    @staticmethod
    def can_access_admin(actor: Actor, role) -> bool:
        """Admin console access: allow-all, an admin/owner role, or any admin-level grant."""
        if not actor.is_authenticated or role is None or not role.is_active:
            return False
        if role.allow_all_action or role.kind in ("admin", "owner"):
            return True
        matrix = role.permission_matrix
        return any(matrix.actions_for(resource) for resource in ADMIN_RESOURCES)


__all__ = ["Action", "Actor", "Authorizer", "Decision", "DenyReason", "Resource"]
