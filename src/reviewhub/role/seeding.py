"""Seed the built-in roles.

Runs outside authorization: it bootstraps the very roles that later
authorize role management. Idempotent, a kind that already has a live
role is skipped.
"""

import structlog
from protean.utils.globals import current_domain

from reviewhub.role.permissions import BUILTIN_PERMISSIONS
from reviewhub.role.role import Role, RoleKind
from reviewhub.role.store import RoleStore

logger = structlog.get_logger(__name__)

BUILTIN_ROLES = {
    RoleKind.OWNER: ("Owner", "Platform owner with unrestricted access", True),
    RoleKind.ADMIN: ("Admin", "Administrator of users, companies and content", False),
    RoleKind.USER: ("User", "Registered reviewer", False),
    RoleKind.ANONYMOUS: ("Anonymous", "Visitor without an account", False),
}


def seed_builtin_roles() -> dict[str, str]:
    """Create missing built-in roles; returns ``{kind: role_id}`` for all of them."""
    store = RoleStore()
    repo = current_domain.repository_for(Role)
    seeded = {}

    for kind, (name, description, allow_all) in BUILTIN_ROLES.items():
        existing = store.find_by_kind(kind.value)
        if existing is not None:
            seeded[kind.value] = str(existing.id)
            continue

        role = Role.create(
            name=name,
            description=description,
            allow_all_action=allow_all,
            permissions=BUILTIN_PERMISSIONS[kind.value],
            kind=kind.value,
        )
        repo.add(role)
        seeded[kind.value] = str(role.id)
        logger.info("Seeded built-in role", kind=kind.value, role_id=str(role.id))

    return seeded
