"""RoleStore: resolves role snapshots for actors and answers role queries.

Thin layer over the Role and Account repositories of the active domain
context; authorization itself stays in the pure Authorizer.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from reviewhub.account.account import Account
from reviewhub.errors import Forbidden
from reviewhub.role.authorization import Actor, Authorizer, Decision
from reviewhub.role.permissions import parse_action, parse_resource
from reviewhub.role.role import Role, RoleStatus

logger = structlog.get_logger(__name__)


class RoleStore:
    def get(self, role_id) -> Role:
        return current_domain.repository_for(Role).get(role_id)

    def find(self, role_id) -> Role | None:
        if not role_id:
            return None
        try:
            return self.get(role_id)
        except ObjectNotFoundError:
            return None

    def live_roles(self) -> list[Role]:
        roles = current_domain.repository_for(Role)._dao.query.all().items
        return [role for role in roles if role.status != RoleStatus.DELETED.value]

    def find_by_name(self, name) -> Role | None:
        """Case-insensitive lookup among roles that are not deleted."""
        wanted = str(name).strip().lower()
        return next((role for role in self.live_roles() if role.name.lower() == wanted), None)

    def find_by_kind(self, kind) -> Role | None:
        return next((role for role in self.live_roles() if role.kind == kind), None)

    def is_referenced(self, role_id) -> bool:
        accounts = current_domain.repository_for(Account)._dao.query.filter(role_id=str(role_id)).all().items
        return any(not account.is_deleted for account in accounts)

    # -------------------------------------------------------------------
    # Actor resolution
    # -------------------------------------------------------------------
    def actor_for(self, user_id) -> Actor:
        """Snapshot the actor behind ``user_id``; no account or a deactivated one carries no role."""
        if not user_id:
            return Actor.anonymous()
        try:
            account = current_domain.repository_for(Account).get(str(user_id))
        except ObjectNotFoundError:
            return Actor(user_id=str(user_id))
        if account.is_deleted or not account.role_id:
            return Actor(user_id=str(user_id))
        return Actor(user_id=str(user_id), role_id=str(account.role_id))

    def role_for(self, actor: Actor) -> Role | None:
        if not actor.is_authenticated:
            return None
        return self.find(actor.role_id)

    def authorize(self, actor: Actor, resource, action) -> Decision:
        return Authorizer.decide(actor, self.role_for(actor), resource, action)

    def require(self, actor: Actor, resource, action) -> None:
        """Raise ``Forbidden`` unless ``actor`` may perform ``action`` on ``resource``."""
        decision = self.authorize(actor, resource, action)
        if not decision.allowed:
            logger.info(
                "Authorization denied",
                actor_id=actor.user_id,
                role_id=actor.role_id,
                resource=parse_resource(resource).value,
                action=parse_action(action).value,
                reason=decision.reason.value,
            )
            raise Forbidden(reason=decision.reason)

    def can_access_admin(self, actor: Actor) -> bool:
        return Authorizer.can_access_admin(actor, self.role_for(actor))

