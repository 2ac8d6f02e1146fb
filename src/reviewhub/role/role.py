"""Role aggregate: the persisted unit of the role store.

A role carries a status, an allow-all flag and a PermissionMatrix stored as
JSON text. When ``allow_all_action`` is set the matrix is kept for the
admin UI but ignored for authorization.

Status machine:
    ACTIVE ⇄ INACTIVE
    ACTIVE | INACTIVE → DELETED (only through ``mark_deleted``)
    DELETED → (terminal, no further edits)
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String, Text

from reviewhub.domain import reviewhub
from reviewhub.errors import InvalidTransition, ProtectedRoleError
from reviewhub.role.events import RoleCreated, RoleDeleted, RolePermissionsChanged, RoleStatusChanged
from reviewhub.role.permissions import Action, PermissionMatrix, Resource, parse_action, parse_resource


class RoleStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DELETED = "deleted"


class RoleKind(Enum):
    USER = "user"
    ADMIN = "admin"
    OWNER = "owner"
    ANONYMOUS = "anonymous"
    CUSTOM = "custom"


PROTECTED_KINDS = frozenset({RoleKind.USER, RoleKind.ADMIN, RoleKind.OWNER, RoleKind.ANONYMOUS})


@reviewhub.aggregate
class Role:
    """A named set of permissions assigned to accounts."""

    name = String(required=True, max_length=50)
    description = String(max_length=255)
    kind = String(choices=RoleKind, default=RoleKind.CUSTOM.value)
    status = String(choices=RoleStatus, default=RoleStatus.ACTIVE.value)
    allow_all_action = Boolean(default=False)
    permissions = Text()  # JSON: {"reviews": ["read", "approve"], ...}

    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def name_must_not_be_blank(self):
        if self.name is not None and len(self.name.strip()) == 0:
            raise ValidationError({"name": ["Role name cannot be empty"]})

    @invariant.post
    def permissions_must_be_well_formed(self):
        # Raises ValidationError on unknown resources or actions
        PermissionMatrix.from_json(self.permissions)

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        description=None,
        allow_all_action=False,
        permissions=None,
        kind=RoleKind.CUSTOM.value,
        created_by=None,
    ):
        if name is None or not str(name).strip():
            raise ValidationError({"name": ["Role name cannot be empty"]})

        matrix = permissions if isinstance(permissions, PermissionMatrix) else PermissionMatrix.from_mapping(permissions)
        now = datetime.now(UTC)

        role = cls(
            name=str(name).strip(),
            description=description,
            kind=kind,
            status=RoleStatus.ACTIVE.value,
            allow_all_action=bool(allow_all_action),
            permissions=matrix.to_json(),
            created_at=now,
            updated_at=now,
        )
        role.raise_(
            RoleCreated(
                role_id=str(role.id),
                name=role.name,
                kind=kind,
                allow_all_action=role.allow_all_action,
                permissions=role.permissions,
                created_by=str(created_by) if created_by else None,
                created_at=now,
            )
        )
        return role

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def permission_matrix(self) -> PermissionMatrix:
        return PermissionMatrix.from_json(self.permissions)

    @property
    def is_active(self) -> bool:
        return self.status == RoleStatus.ACTIVE.value

    @property
    def is_deleted(self) -> bool:
        return self.status == RoleStatus.DELETED.value

    @property
    def is_protected(self) -> bool:
        return RoleKind(self.kind) in PROTECTED_KINDS

    @property
    def permissions_summary(self) -> str:
        if self.allow_all_action:
            return "All permissions"
        return self.permission_matrix.summary()

    def has_permission(self, resource, action) -> bool:
        """Allow-all short-circuits; otherwise the action must be granted on the resource."""
        if self.allow_all_action:
            # Still reject names outside the closed enumerations
            parse_resource(resource)
            parse_action(action)
            return True
        return self.permission_matrix.allows(resource, action)

    def allowed_actions(self, resource) -> list[str]:
        if self.allow_all_action:
            parse_resource(resource)
            return [action.value for action in Action]
        granted = self.permission_matrix.actions_for(resource)
        return [action.value for action in Action if action in granted]

    def accessible_resources(self) -> list[str]:
        if self.allow_all_action:
            return [resource.value for resource in Resource]
        return [resource.value for resource in self.permission_matrix.resources()]

    # -------------------------------------------------------------------
    # Permission edits
    # -------------------------------------------------------------------
    def _assert_editable(self):
        if self.is_deleted:
            raise InvalidTransition({"status": ["Deleted roles cannot be modified"]})

    def _replace_matrix(self, matrix, changed_by):
        self._assert_editable()
        now = datetime.now(UTC)
        self.permissions = matrix.to_json()
        self.updated_at = now
        self.raise_(
            RolePermissionsChanged(
                role_id=str(self.id),
                name=self.name,
                allow_all_action=self.allow_all_action,
                permissions=self.permissions,
                changed_by=str(changed_by) if changed_by else None,
                changed_at=now,
            )
        )

    def set_permissions(self, resource, actions, changed_by=None):
        """Replace the action set of one resource; an empty set drops the resource."""
        self._replace_matrix(self.permission_matrix.with_actions(resource, actions or []), changed_by)

    def replace_permissions(self, permissions, changed_by=None):
        """Replace the whole matrix from a ``{resource: [actions]}`` mapping."""
        self._replace_matrix(PermissionMatrix.from_mapping(permissions), changed_by)

    def grant_permission(self, resource, action, changed_by=None):
        self._replace_matrix(self.permission_matrix.with_grant(resource, action), changed_by)

    def revoke_permission(self, resource, action, changed_by=None):
        self._replace_matrix(self.permission_matrix.without_grant(resource, action), changed_by)

    def set_allow_all_action(self, allow_all_action, changed_by=None):
        self._assert_editable()
        self.allow_all_action = bool(allow_all_action)
        self._replace_matrix(self.permission_matrix, changed_by)

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def change_status(self, status, changed_by=None):
        """Toggle between active and inactive. Same status is a no-op."""
        self._assert_editable()

        try:
            target = RoleStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown role status: {status}"]}) from None

        if target == RoleStatus.DELETED:
            raise InvalidTransition({"status": ["Roles can only be deleted through role deletion"]})

        if target.value == self.status:
            return

        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            RoleStatusChanged(
                role_id=str(self.id),
                name=self.name,
                previous_status=previous,
                status=self.status,
                changed_by=str(changed_by) if changed_by else None,
                changed_at=now,
            )
        )

    def mark_deleted(self, deleted_by=None):
        """Soft-delete the role. Built-in roles are protected."""
        if self.is_protected:
            raise ProtectedRoleError({"role": [f"Built-in role '{self.kind}' cannot be deleted"]})
        self._assert_editable()

        now = datetime.now(UTC)
        self.status = RoleStatus.DELETED.value
        self.updated_at = now
        self.raise_(
            RoleDeleted(
                role_id=str(self.id),
                name=self.name,
                deleted_by=str(deleted_by) if deleted_by else None,
                deleted_at=now,
            )
        )
