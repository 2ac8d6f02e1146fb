"""ModerationQueue — pending reviews awaiting moderator action."""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from reviewhub.domain import reviewhub
from reviewhub.review.events import (
    ReviewEdited,
    ReviewModerated,
    ReviewRestored,
    ReviewSoftDeleted,
    ReviewSubmitted,
)
from reviewhub.review.review import Review, ReviewStatus


@reviewhub.projection
class ModerationQueue:
    review_id = Identifier(identifier=True, required=True)
    company_id = Identifier(required=True)
    author_id = Identifier()
    score = Integer(required=True)
    title = String(required=True)
    content = Text()
    submitted_at = DateTime()


def _drop(review_id):
    repo = current_domain.repository_for(ModerationQueue)
    try:
        repo.remove(repo.get(review_id))
    except ObjectNotFoundError:
        return


@reviewhub.projector(projector_for=ModerationQueue, aggregates=[Review])
class ModerationQueueProjector:
    @on(ReviewSubmitted)
    def on_review_submitted(self, event):
        if event.status != ReviewStatus.PENDING.value:
            return

        current_domain.repository_for(ModerationQueue).add(
            ModerationQueue(
                review_id=event.review_id,
                company_id=event.company_id,
                author_id=event.author_id,
                score=event.score,
                title=event.title,
                content=event.content,
                submitted_at=event.submitted_at,
            )
        )

    @on(ReviewEdited)
    def on_review_edited(self, event):
        repo = current_domain.repository_for(ModerationQueue)
        try:
            entry = repo.get(event.review_id)
        except ObjectNotFoundError:
            return

        entry.title = event.title
        entry.content = event.content
        entry.score = event.score
        repo.add(entry)

    @on(ReviewModerated)
    def on_review_moderated(self, event):
        _drop(event.review_id)

    @on(ReviewSoftDeleted)
    def on_review_soft_deleted(self, event):
        _drop(event.review_id)

    @on(ReviewRestored)
    def on_review_restored(self, event):
        if event.status != ReviewStatus.PENDING.value:
            return

        # Re-enqueue from the aggregate, the restore event carries no content
        review = current_domain.repository_for(Review).get(event.review_id)
        current_domain.repository_for(ModerationQueue).add(
            ModerationQueue(
                review_id=str(review.id),
                company_id=str(review.company_id),
                author_id=review.author_id,
                score=review.score.value,
                title=review.title,
                content=review.content,
                submitted_at=review.created_at,
            )
        )
