"""AdminActivity: append-only audit trail of administrative actions.

Role management, role assignment, account deactivation and review
moderation each leave one entry naming the acting administrator.
"""

import json
import uuid

from protean.core.projector import on
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from reviewhub.account.account import Account
from reviewhub.account.events import AccountDeactivated, RoleAssigned
from reviewhub.domain import reviewhub
from reviewhub.review.events import ReviewModerated, ReviewRestored, ReviewSoftDeleted
from reviewhub.review.review import Review
from reviewhub.role.events import RoleCreated, RoleDeleted, RolePermissionsChanged, RoleStatusChanged
from reviewhub.role.role import Role


@reviewhub.projection
class AdminActivity:
    entry_id = Identifier(identifier=True, required=True)
    actor_id = Identifier()
    activity = String(required=True)
    target_type = String(required=True)
    target_id = Identifier(required=True)
    description = String(required=True, max_length=500)
    occurred_at = DateTime(required=True)
    details = Text()  # JSON: extra event data


def _record(actor_id, activity, target_type, target_id, description, occurred_at, details=None):
    current_domain.repository_for(AdminActivity).add(
        AdminActivity(
            entry_id=str(uuid.uuid4()),
            actor_id=actor_id,
            activity=activity,
            target_type=target_type,
            target_id=target_id,
            description=description,
            occurred_at=occurred_at,
            details=json.dumps(details) if details else None,
        )
    )


@reviewhub.projector(projector_for=AdminActivity, aggregates=[Role, Account, Review])
class AdminActivityProjector:
    @on(RoleCreated)
    def on_role_created(self, event):
        _record(
            event.created_by,
            "RoleCreated",
            "role",
            event.role_id,
            f"Role {event.name} was created",
            event.created_at,
            {"kind": event.kind, "allow_all_action": event.allow_all_action},
        )

    @on(RolePermissionsChanged)
    def on_role_permissions_changed(self, event):
        _record(
            event.changed_by,
            "RolePermissionsChanged",
            "role",
            event.role_id,
            f"Permissions of role {event.name} changed",
            event.changed_at,
            {"allow_all_action": event.allow_all_action, "permissions": json.loads(event.permissions or "{}")},
        )

    @on(RoleStatusChanged)
    def on_role_status_changed(self, event):
        _record(
            event.changed_by,
            "RoleStatusChanged",
            "role",
            event.role_id,
            f"Role {event.name} changed from {event.previous_status} to {event.status}",
            event.changed_at,
        )

    @on(RoleDeleted)
    def on_role_deleted(self, event):
        _record(event.deleted_by, "RoleDeleted", "role", event.role_id, f"Role {event.name} was deleted", event.deleted_at)

    @on(RoleAssigned)
    def on_role_assigned(self, event):
        _record(
            event.assigned_by,
            "RoleAssigned",
            "account",
            event.user_id,
            f"{event.email} was assigned a new role",
            event.assigned_at,
            {"previous_role_id": event.previous_role_id, "role_id": event.role_id},
        )

    @on(AccountDeactivated)
    def on_account_deactivated(self, event):
        _record(
            event.deactivated_by,
            "AccountDeactivated",
            "account",
            event.user_id,
            f"{event.email} was deactivated",
            event.deactivated_at,
        )

    @on(ReviewModerated)
    def on_review_moderated(self, event):
        _record(
            event.moderator_id,
            "ReviewModerated",
            "review",
            event.review_id,
            f"Review moved from {event.previous_status} to {event.status}",
            event.moderated_at,
            {"notes": event.notes} if event.notes else None,
        )

    @on(ReviewSoftDeleted)
    def on_review_soft_deleted(self, event):
        _record(event.deleted_by, "ReviewSoftDeleted", "review", event.review_id, "Review was deleted", event.deleted_at)

    @on(ReviewRestored)
    def on_review_restored(self, event):
        _record(event.restored_by, "ReviewRestored", "review", event.review_id, "Review was restored", event.restored_at)
