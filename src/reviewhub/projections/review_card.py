"""ReviewCard — the public card of a review.

Holds only publicly visible reviews: a card is dropped when its review is
rejected or soft-deleted and rebuilt when it becomes visible again. The
author is hidden on anonymous reviews.
"""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from reviewhub.domain import reviewhub
from reviewhub.review.events import (
    ReplyAdded,
    ReplyDeleted,
    ReviewEdited,
    ReviewModerated,
    ReviewRestored,
    ReviewSoftDeleted,
    ReviewSubmitted,
    ReviewVoteCast,
)
from reviewhub.review.review import Review


@reviewhub.projection
class ReviewCard:
    review_id = Identifier(identifier=True, required=True)
    company_id = Identifier(required=True)
    author_id = Identifier()
    is_anonymous = Boolean(default=True)
    title = String(required=True)
    content = Text()
    job_title = String()
    score = Integer(required=True)
    total_like = Integer(default=0)
    total_dislike = Integer(default=0)
    total_reply = Integer(default=0)
    is_edited = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()


def _refresh(review_id):
    """Rebuild the card from the review, or drop it when the review is not visible."""
    repo = current_domain.repository_for(ReviewCard)
    review = current_domain.repository_for(Review).get(review_id)

    try:
        existing = repo.get(review_id)
    except ObjectNotFoundError:
        existing = None

    if not review.is_publicly_visible:
        if existing is not None:
            repo.remove(existing)
        return

    repo.add(
        ReviewCard(
            review_id=str(review.id),
            company_id=str(review.company_id),
            author_id=None if review.is_anonymous else review.author_id,
            is_anonymous=review.is_anonymous,
            title=review.title,
            content=review.content,
            job_title=review.job_title,
            score=review.score.value,
            total_like=review.total_like,
            total_dislike=review.total_dislike,
            total_reply=review.total_reply,
            is_edited=review.is_edited,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )
    )


@reviewhub.projector(projector_for=ReviewCard, aggregates=[Review])
class ReviewCardProjector:
    @on(ReviewSubmitted)
    def on_review_submitted(self, event):
        _refresh(event.review_id)

    @on(ReviewEdited)
    def on_review_edited(self, event):
        _refresh(event.review_id)

    @on(ReviewModerated)
    def on_review_moderated(self, event):
        _refresh(event.review_id)

    @on(ReviewSoftDeleted)
    def on_review_soft_deleted(self, event):
        _refresh(event.review_id)

    @on(ReviewRestored)
    def on_review_restored(self, event):
        _refresh(event.review_id)

    @on(ReviewVoteCast)
    def on_review_vote_cast(self, event):
        _refresh(event.review_id)

    @on(ReplyAdded)
    def on_reply_added(self, event):
        _refresh(event.review_id)

    @on(ReplyDeleted)
    def on_reply_deleted(self, event):
        _refresh(event.review_id)
