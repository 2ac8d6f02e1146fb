"""ModerateReview — approve or reject a review.

Requires ``reviews:approve``. The permission is checked before the review
is loaded, so a denied moderator never changes anything.
"""

from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviewhub.domain import reviewhub
from reviewhub.review.review import Review
from reviewhub.role.permissions import Action, Resource
from reviewhub.role.store import RoleStore


@reviewhub.command(part_of="Review")
class ModerateReview:
    actor_id = Identifier()
    review_id = Identifier(required=True)
    status = String(required=True)  # "approved" or "rejected"
    notes = Text()


@reviewhub.command_handler(part_of=Review)
class ModerateReviewHandler:
    @handle(ModerateReview)
    def moderate_review(self, command):
        store = RoleStore()
        store.require(store.actor_for(command.actor_id), Resource.REVIEWS, Action.APPROVE)

        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        review.moderate(
            command.status,
            moderator_id=command.actor_id,
            notes=command.notes,
        )
        repo.add(review)

        return {"review_id": str(review.id), "status": review.status}
