"""Role management: commands and handler.

Every command names the acting user; the handler checks the matching
``roles`` permission before touching the Role aggregate.
"""

import json

from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviewhub.domain import reviewhub
from reviewhub.errors import RoleInUseError
from reviewhub.role.permissions import Action, Resource
from reviewhub.role.role import Role
from reviewhub.role.store import RoleStore


@reviewhub.command(part_of="Role")
class CreateRole:
    actor_id = Identifier()
    name = String(required=True, max_length=50)
    description = String(max_length=255)
    allow_all_action = Boolean(default=False)
    permissions = Text()  # JSON: {"reviews": ["read", "approve"]}


@reviewhub.command(part_of="Role")
class SetRolePermissions:
    actor_id = Identifier()
    role_id = Identifier(required=True)
    resource = String(required=True)
    actions = Text()  # JSON array of action names; empty removes the resource


@reviewhub.command(part_of="Role")
class ReplaceRolePermissions:
    actor_id = Identifier()
    role_id = Identifier(required=True)
    permissions = Text()


@reviewhub.command(part_of="Role")
class GrantPermission:
    actor_id = Identifier()
    role_id = Identifier(required=True)
    resource = String(required=True)
    action = String(required=True)


@reviewhub.command(part_of="Role")
class RevokePermission:
    actor_id = Identifier()
    role_id = Identifier(required=True)
    resource = String(required=True)
    action = String(required=True)


@reviewhub.command(part_of="Role")
class SetAllowAllAction:
    actor_id = Identifier()
    role_id = Identifier(required=True)
    allow_all_action = Boolean(required=True)


@reviewhub.command(part_of="Role")
class ChangeRoleStatus:
    actor_id = Identifier()
    role_id = Identifier(required=True)
    status = String(required=True)


@reviewhub.command(part_of="Role")
class DeleteRole:
    actor_id = Identifier()
    role_id = Identifier(required=True)
    accept_soft_delete = Boolean(default=False)


def _load_json(value, field):
    if not value:
        return None
    try:
        return json.loads(value)
    except ValueError:
        raise ValidationError({field: ["Malformed JSON"]}) from None


def _ensure_unique_name(store, name, role_id=None):
    clash = store.find_by_name(name)
    if clash is not None and str(clash.id) != str(role_id):
        raise ValidationError({"name": [f"Role name '{clash.name}' is already taken"]})


@reviewhub.command_handler(part_of=Role)
class ManageRoleHandler:
    def _editable_role(self, command, action):
        store = RoleStore()
        store.require(store.actor_for(command.actor_id), Resource.ROLES, action)
        return store.get(command.role_id)

    @handle(CreateRole)
    def create_role(self, command):
        store = RoleStore()
        store.require(store.actor_for(command.actor_id), Resource.ROLES, Action.CREATE)

        if command.name is not None:
            _ensure_unique_name(store, command.name.strip())

        role = Role.create(
            name=command.name,
            description=command.description,
            allow_all_action=command.allow_all_action,
            permissions=_load_json(command.permissions, "permissions"),
            created_by=command.actor_id,
        )
        current_domain.repository_for(Role).add(role)
        return str(role.id)

    @handle(SetRolePermissions)
    def set_role_permissions(self, command):
        role = self._editable_role(command, Action.UPDATE)
        actions = _load_json(command.actions, "actions") or []
        if not isinstance(actions, list):
            raise ValidationError({"actions": ["Actions must be a list"]})

        role.set_permissions(command.resource, actions, changed_by=command.actor_id)
        current_domain.repository_for(Role).add(role)
        return str(role.id)

    @handle(ReplaceRolePermissions)
    def replace_role_permissions(self, command):
        role = self._editable_role(command, Action.UPDATE)
        role.replace_permissions(_load_json(command.permissions, "permissions"), changed_by=command.actor_id)
        current_domain.repository_for(Role).add(role)
        return str(role.id)

    @handle(GrantPermission)
    def grant_permission(self, command):
        role = self._editable_role(command, Action.UPDATE)
        role.grant_permission(command.resource, command.action, changed_by=command.actor_id)
        current_domain.repository_for(Role).add(role)
        return str(role.id)

    @handle(RevokePermission)
    def revoke_permission(self, command):
        role = self._editable_role(command, Action.UPDATE)
        role.revoke_permission(command.resource, command.action, changed_by=command.actor_id)
        current_domain.repository_for(Role).add(role)
        return str(role.id)

    @handle(SetAllowAllAction)
    def set_allow_all_action(self, command):
        role = self._editable_role(command, Action.UPDATE)
        role.set_allow_all_action(command.allow_all_action, changed_by=command.actor_id)
        current_domain.repository_for(Role).add(role)
        return str(role.id)

    @handle(ChangeRoleStatus)
    def change_role_status(self, command):
        role = self._editable_role(command, Action.UPDATE)
        role.change_status(command.status, changed_by=command.actor_id)
        current_domain.repository_for(Role).add(role)
        return str(role.id)

    @handle(DeleteRole)
    def delete_role(self, command):
        store = RoleStore()
        role = self._editable_role(command, Action.DELETE)

        # Protected roles fail first, whatever their references
        if not role.is_protected and not command.accept_soft_delete and store.is_referenced(role.id):
            raise RoleInUseError({"role": [f"Role '{role.name}' is assigned to active users"]})

        role.mark_deleted(deleted_by=command.actor_id)
        current_domain.repository_for(Role).add(role)
        return str(role.id)
