"""Account management: registration and role assignment."""

from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviewhub.account.account import Account
from reviewhub.domain import reviewhub
from reviewhub.role.permissions import Action, Resource
from reviewhub.role.role import RoleKind
from reviewhub.role.store import RoleStore


@reviewhub.command(part_of="Account")
class RegisterAccount:
    user_id = Identifier(required=True)
    email = String(required=True, max_length=255)
    display_name = String(max_length=100)


@reviewhub.command(part_of="Account")
class AssignRole:
    actor_id = Identifier()
    user_id = Identifier(required=True)
    role_id = Identifier(required=True)


@reviewhub.command(part_of="Account")
class DeactivateAccount:
    actor_id = Identifier()
    user_id = Identifier(required=True)


@reviewhub.command_handler(part_of=Account)
class ManageAccountHandler:
    @handle(RegisterAccount)
    def register_account(self, command):
        repo = current_domain.repository_for(Account)

        existing = repo._dao.query.filter(user_id=str(command.user_id)).all()
        if existing.items:
            raise ValidationError({"user_id": ["Account already registered"]})

        # New accounts start on the built-in user role when it is seeded
        default_role = RoleStore().find_by_kind(RoleKind.USER.value)

        account = Account.register(
            user_id=command.user_id,
            email=command.email,
            role_id=str(default_role.id) if default_role else None,
            display_name=command.display_name,
        )
        repo.add(account)
        return str(account.user_id)

    @handle(AssignRole)
    def assign_role(self, command):
        store = RoleStore()
        store.require(store.actor_for(command.actor_id), Resource.USERS, Action.UPDATE)

        role = store.find(command.role_id)
        if role is None or role.is_deleted:
            raise ValidationError({"role_id": ["Role does not exist"]})

        repo = current_domain.repository_for(Account)
        account = repo.get(command.user_id)
        account.assign_role(str(role.id), assigned_by=command.actor_id)
        repo.add(account)
        return str(account.user_id)

    @handle(DeactivateAccount)
    def deactivate_account(self, command):
        store = RoleStore()
        store.require(store.actor_for(command.actor_id), Resource.USERS, Action.DELETE)

        repo = current_domain.repository_for(Account)
        account = repo.get(command.user_id)
        account.deactivate(deactivated_by=command.actor_id)
        repo.add(account)
        return str(account.user_id)
