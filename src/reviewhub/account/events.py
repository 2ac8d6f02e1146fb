"""Domain events for the Account aggregate."""

from protean.fields import DateTime, Identifier, String

from reviewhub.domain import reviewhub


@reviewhub.event(part_of="Account")
class AccountRegistered:
    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True)
    role_id = Identifier()
    registered_at = DateTime(required=True)


@reviewhub.event(part_of="Account")
class RoleAssigned:
    """An administrator moved an account to another role."""

    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True)
    previous_role_id = Identifier()
    role_id = Identifier(required=True)
    assigned_by = Identifier()
    assigned_at = DateTime(required=True)


@reviewhub.event(part_of="Account")
class AccountDeactivated:
    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True)
    deactivated_by = Identifier()
    deactivated_at = DateTime(required=True)
