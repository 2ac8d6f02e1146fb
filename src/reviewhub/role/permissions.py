"""PermissionMatrix: the (resource, action) grants of a role.

Roles persist their grants as JSON text; this module is the boundary that
turns the loosely-typed stored/posted mapping into a validated, immutable
matrix and back.
"""

import json
from enum import Enum

from protean.exceptions import ValidationError


class Resource(Enum):
    USERS = "users"
    COMPANIES = "companies"
    REVIEWS = "reviews"
    ROLES = "roles"
    DASHBOARD = "dashboard"
    SETTINGS = "settings"


class Action(Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    APPROVE = "approve"


# Resources whose grants open the admin console
ADMIN_RESOURCES = (Resource.USERS, Resource.ROLES, Resource.DASHBOARD, Resource.SETTINGS)


def parse_resource(value) -> Resource:
    if isinstance(value, Resource):
        return value
    try:
        return Resource(str(value).strip().lower())
    except ValueError:
        raise ValidationError({"resource": [f"Unknown resource: {value}"]}) from None


def parse_action(value) -> Action:
    if isinstance(value, Action):
        return value
    try:
        return Action(str(value).strip().lower())
    except ValueError:
        raise ValidationError({"action": [f"Unknown action: {value}"]}) from None


class PermissionMatrix:
    """Immutable mapping of Resource to a non-empty frozenset of Actions."""

    __slots__ = ("_grants",)

    def __init__(self, grants=None):
        cleaned = {}
        for resource, actions in (grants or {}).items():
            actions = frozenset(actions)
            if actions:
                cleaned[resource] = actions
        self._grants = cleaned

    @classmethod
    def from_mapping(cls, mapping) -> "PermissionMatrix":
        """Validate a ``{resource: [action, ...]}`` mapping.

        Unknown resources or actions raise ``ValidationError``; duplicates
        collapse and empty action lists are dropped.
        """
        if mapping is None:
            return cls()
        if not isinstance(mapping, dict):
            raise ValidationError({"permissions": ["Permissions must be a mapping of resource to actions"]})

        grants = {}
        for resource, actions in mapping.items():
            if isinstance(actions, str) or not hasattr(actions, "__iter__"):
                raise ValidationError({"permissions": [f"Actions for {resource} must be a list"]})
            grants[parse_resource(resource)] = {parse_action(action) for action in actions}
        return cls(grants)

    @classmethod
    def from_json(cls, raw: str | None) -> "PermissionMatrix":
        return cls.from_mapping(json.loads(raw) if raw else {})

    def allows(self, resource, action) -> bool:
        return parse_action(action) in self._grants.get(parse_resource(resource), frozenset())

    def actions_for(self, resource) -> frozenset:
        return self._grants.get(parse_resource(resource), frozenset())

    def resources(self) -> list[Resource]:
        return [resource for resource in Resource if resource in self._grants]

    def with_actions(self, resource, actions) -> "PermissionMatrix":
        """Return a copy with ``resource``'s action set replaced."""
        grants = dict(self._grants)
        grants[parse_resource(resource)] = {parse_action(action) for action in actions}
        return PermissionMatrix(grants)

    def with_grant(self, resource, action) -> "PermissionMatrix":
        return self.with_actions(resource, self.actions_for(resource) | {parse_action(action)})

    def without_grant(self, resource, action) -> "PermissionMatrix":
        return self.with_actions(resource, self.actions_for(resource) - {parse_action(action)})

    def to_dict(self) -> dict[str, list[str]]:
        # Canonical order keeps the stored JSON stable across edits
        return {
            resource.value: [action.value for action in Action if action in self._grants[resource]]
            for resource in self.resources()
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def summary(self) -> str:
        if not self._grants:
            return "No permissions"
        return " | ".join(f"{resource}: {', '.join(actions)}" for resource, actions in self.to_dict().items())

    def __bool__(self):
        return bool(self._grants)

    def __eq__(self, other):
        if not isinstance(other, PermissionMatrix):
            return NotImplemented
        return self._grants == other._grants

    def __hash__(self):
        return hash(frozenset(self._grants.items()))

    def __repr__(self):
        return f"PermissionMatrix({self.to_dict()!r})"


# The fixed permission set of unauthenticated actors
ANONYMOUS_PERMISSIONS = PermissionMatrix(
    {
        Resource.REVIEWS: {Action.READ},
        Resource.COMPANIES: {Action.READ},
    }
)

_ALL_ACTIONS = set(Action)

# Default grants of the built-in roles, keyed by role kind
BUILTIN_PERMISSIONS = {
    "admin": PermissionMatrix(
        {
            Resource.USERS: {Action.READ, Action.CREATE, Action.UPDATE, Action.DELETE},
            Resource.COMPANIES: {Action.READ, Action.CREATE, Action.UPDATE, Action.DELETE},
            Resource.REVIEWS: _ALL_ACTIONS,
            Resource.ROLES: {Action.READ, Action.CREATE, Action.UPDATE, Action.DELETE},
            Resource.DASHBOARD: {Action.READ},
            Resource.SETTINGS: {Action.READ, Action.UPDATE},
        }
    ),
    "owner": PermissionMatrix(
        {
            Resource.USERS: {Action.READ, Action.CREATE, Action.UPDATE, Action.DELETE},
            Resource.COMPANIES: {Action.READ, Action.CREATE, Action.UPDATE, Action.DELETE},
            Resource.REVIEWS: _ALL_ACTIONS,
            Resource.ROLES: {Action.READ, Action.CREATE, Action.UPDATE, Action.DELETE},
            Resource.DASHBOARD: {Action.READ},
            Resource.SETTINGS: {Action.READ, Action.UPDATE},
        }
    ),
    "user": PermissionMatrix(
        {
            Resource.COMPANIES: {Action.READ},
            Resource.REVIEWS: {Action.READ, Action.CREATE},
        }
    ),
    "anonymous": ANONYMOUS_PERMISSIONS,
}
