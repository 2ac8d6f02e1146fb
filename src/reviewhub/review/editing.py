"""EditReview — the author edits their own review.

Only the original author can edit, and not once the review is soft-deleted.
"""

from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviewhub.domain import reviewhub
from reviewhub.errors import Forbidden
from reviewhub.review.review import Review


@reviewhub.command(part_of="Review")
class EditReview:
    actor_id = Identifier()
    review_id = Identifier(required=True)
    title = String(max_length=100)
    content = Text()
    job_title = String(max_length=100)
    score = Integer()


@reviewhub.command_handler(part_of=Review)
class EditReviewHandler:
    @handle(EditReview)
    def edit_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        # Verify ownership
        if not command.actor_id or str(review.author_id) != str(command.actor_id):
            raise Forbidden()

        kwargs = {}
        if command.title is not None:
            kwargs["title"] = command.title
        if command.content is not None:
            kwargs["content"] = command.content
        if command.job_title is not None:
            kwargs["job_title"] = command.job_title
        if command.score is not None:
            kwargs["score"] = command.score

        review.edit(**kwargs)
        repo.add(review)
        return str(review.id)
