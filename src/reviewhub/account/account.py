"""Account aggregate: the identity layer's user record as seen by this domain.

Only what access control needs: the role reference of the user, and
whether the account is live. Accounts are what make a role "in use".
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from reviewhub.account.events import AccountDeactivated, AccountRegistered, RoleAssigned
from reviewhub.domain import reviewhub


@reviewhub.aggregate
class Account:
    user_id = Identifier(identifier=True, required=True)
    email = String(required=True, max_length=255)
    display_name = String(max_length=100)
    role_id = Identifier()
    is_deleted = Boolean(default=False)
    registered_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, user_id, email, role_id=None, display_name=None):
        now = datetime.now(UTC)
        account = cls(
            user_id=user_id,
            email=email,
            display_name=display_name,
            role_id=role_id,
            is_deleted=False,
            registered_at=now,
            updated_at=now,
        )
        account.raise_(
            AccountRegistered(
                user_id=str(user_id),
                email=email,
                role_id=str(role_id) if role_id else None,
                registered_at=now,
            )
        )
        return account

    @property
    def label(self):
        return self.display_name or self.email

    def assign_role(self, role_id, assigned_by=None):
        if self.is_deleted:
            raise ValidationError({"account": ["Cannot assign a role to a deleted account"]})

        previous = self.role_id
        now = datetime.now(UTC)
        self.role_id = role_id
        self.updated_at = now
        self.raise_(
            RoleAssigned(
                user_id=str(self.user_id),
                email=self.email,
                previous_role_id=str(previous) if previous else None,
                role_id=str(role_id),
                assigned_by=str(assigned_by) if assigned_by else None,
                assigned_at=now,
            )
        )

    def deactivate(self, deactivated_by=None):
        if self.is_deleted:
            return

        now = datetime.now(UTC)
        self.is_deleted = True
        self.updated_at = now
        self.raise_(
            AccountDeactivated(
                user_id=str(self.user_id),
                email=self.email,
                deactivated_by=str(deactivated_by) if deactivated_by else None,
                deactivated_at=now,
            )
        )
