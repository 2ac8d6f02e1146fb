"""Soft delete and restore of reviews.

Deleting requires ``reviews:delete`` and only flags the review; restoring
requires ``reviews:update`` and brings the previous moderation status back
into view. Both are no-ops when the review is already in the target state.
"""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviewhub.domain import reviewhub
from reviewhub.review.review import Review
from reviewhub.role.permissions import Action, Resource
from reviewhub.role.store import RoleStore


@reviewhub.command(part_of="Review")
class SoftDeleteReview:
    actor_id = Identifier()
    review_id = Identifier(required=True)


@reviewhub.command(part_of="Review")
class RestoreReview:
    actor_id = Identifier()
    review_id = Identifier(required=True)


def _outcome(review):
    return {"review_id": str(review.id), "status": review.status, "is_deleted": review.is_deleted}


@reviewhub.command_handler(part_of=Review)
class ReviewRemovalHandler:
    @handle(SoftDeleteReview)
    def soft_delete_review(self, command):
        store = RoleStore()
        store.require(store.actor_for(command.actor_id), Resource.REVIEWS, Action.DELETE)

        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        review.soft_delete(deleted_by=command.actor_id)
        repo.add(review)
        return _outcome(review)

    @handle(RestoreReview)
    def restore_review(self, command):
        store = RoleStore()
        store.require(store.actor_for(command.actor_id), Resource.REVIEWS, Action.UPDATE)

        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        review.restore(restored_by=command.actor_id)
        repo.add(review)
        return _outcome(review)
