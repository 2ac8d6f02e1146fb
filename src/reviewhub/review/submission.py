"""SubmitReview — post a new review of a company.

The review starts in the configured initial status (approved unless the
platform moderates before publication). Requires ``reviews:create``.
"""

from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviewhub.config import initial_review_status
from reviewhub.domain import reviewhub
from reviewhub.review.review import Review
from reviewhub.role.permissions import Action, Resource
from reviewhub.role.store import RoleStore


@reviewhub.command(part_of="Review")
class SubmitReview:
    actor_id = Identifier()
    company_id = Identifier(required=True)
    title = String(required=True, max_length=100)
    content = Text(required=True)
    score = Integer(required=True)
    job_title = String(max_length=100)
    is_anonymous = Boolean(default=True)


@reviewhub.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        store = RoleStore()
        store.require(store.actor_for(command.actor_id), Resource.REVIEWS, Action.CREATE)

        review = Review.submit(
            company_id=command.company_id,
            author_id=command.actor_id,
            title=command.title,
            content=command.content,
            score=command.score,
            job_title=command.job_title,
            is_anonymous=command.is_anonymous,
            status=initial_review_status(),
        )
        current_domain.repository_for(Review).add(review)
        return str(review.id)
