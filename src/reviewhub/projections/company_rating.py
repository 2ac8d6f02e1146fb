"""CompanyRating: review count and average score per company.

Counts publicly visible reviews only; moderation, soft delete, restore and
score edits move a review in or out of the tally.
"""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer
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
class CompanyRating:
    company_id = Identifier(identifier=True, required=True)
    review_count = Integer(default=0)
    score_total = Integer(default=0)
    average_score = Float(default=0.0)
    updated_at = DateTime()


def _adjust(company_id, score_delta, count_delta, at):
    repo = current_domain.repository_for(CompanyRating)
    try:
        rating = repo.get(company_id)
    except ObjectNotFoundError:
        rating = CompanyRating(company_id=company_id, review_count=0, score_total=0, average_score=0.0)

    rating.review_count = max(0, rating.review_count + count_delta)
    rating.score_total = max(0, rating.score_total + score_delta) if rating.review_count else 0
    rating.average_score = round(rating.score_total / rating.review_count, 2) if rating.review_count else 0.0
    rating.updated_at = at
    repo.add(rating)


@reviewhub.projector(projector_for=CompanyRating, aggregates=[Review])
class CompanyRatingProjector:
    @on(ReviewSubmitted)
    def on_review_submitted(self, event):
        if event.status == ReviewStatus.APPROVED.value:
            _adjust(event.company_id, event.score, 1, event.submitted_at)

    @on(ReviewModerated)
    def on_review_moderated(self, event):
        # Moderation never touches deleted reviews
        if event.status == ReviewStatus.APPROVED.value:
            _adjust(event.company_id, event.score, 1, event.moderated_at)
        elif event.previous_status == ReviewStatus.APPROVED.value:
            _adjust(event.company_id, -event.score, -1, event.moderated_at)

    @on(ReviewSoftDeleted)
    def on_review_soft_deleted(self, event):
        if event.status == ReviewStatus.APPROVED.value:
            _adjust(event.company_id, -event.score, -1, event.deleted_at)

    @on(ReviewRestored)
    def on_review_restored(self, event):
        if event.status == ReviewStatus.APPROVED.value:
            _adjust(event.company_id, event.score, 1, event.restored_at)

    @on(ReviewEdited)
    def on_review_edited(self, event):
        if event.score == event.previous_score:
            return

        review = current_domain.repository_for(Review).get(event.review_id)
        if review.is_publicly_visible:
            _adjust(event.company_id, event.score - event.previous_score, 0, event.edited_at)
