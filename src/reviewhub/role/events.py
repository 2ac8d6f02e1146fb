"""Domain events for the Role aggregate.

Consumed by the AdminActivity projection to keep the admin audit trail.
"""

from protean.fields import Boolean, DateTime, Identifier, String, Text

from reviewhub.domain import reviewhub


@reviewhub.event(part_of="Role")
class RoleCreated:
    """An administrator created a role."""

    __version__ = 1

    role_id = Identifier(required=True)
    name = String(required=True)
    kind = String(required=True)
    allow_all_action = Boolean(default=False)
    permissions = Text()
    created_by = Identifier()
    created_at = DateTime(required=True)


@reviewhub.event(part_of="Role")
class RolePermissionsChanged:
    """The grants or the allow-all flag of a role changed."""

    __version__ = 1

    role_id = Identifier(required=True)
    name = String(required=True)
    allow_all_action = Boolean(default=False)
    permissions = Text()
    changed_by = Identifier()
    changed_at = DateTime(required=True)


@reviewhub.event(part_of="Role")
class RoleStatusChanged:
    """A role was activated or deactivated."""

    __version__ = 1

    role_id = Identifier(required=True)
    name = String(required=True)
    previous_status = String(required=True)
    status = String(required=True)
    changed_by = Identifier()
    changed_at = DateTime(required=True)


@reviewhub.event(part_of="Role")
class RoleDeleted:
    """A role was soft-deleted."""

    __version__ = 1

    role_id = Identifier(required=True)
    name = String(required=True)
    deleted_by = Identifier()
    deleted_at = DateTime(required=True)
