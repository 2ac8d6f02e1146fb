"""VoteOnReview — like or dislike a review, and the EngagementLedger in front of it.

Any authenticated user may vote on a publicly visible review. Voting
toggles: the same polarity twice withdraws the vote, the opposite polarity
flips it. The handler returns the authoritative counters so clients can
reconcile their optimistic view.

``cast_vote`` serializes votes per review inside the process and retries a
storage conflict exactly once. Across processes the aggregate version check
is the guard; a stale write surfaces as ``ConflictError``.
"""

import structlog
from protean.exceptions import ExpectedVersionError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviewhub.config import self_vote_allowed
from reviewhub.domain import reviewhub
from reviewhub.errors import ConflictError, Forbidden
from reviewhub.review.review import Review
from reviewhub.role.authorization import DenyReason
from reviewhub.utils.locks import KeyedLocks

logger = structlog.get_logger(__name__)


@reviewhub.command(part_of="Review")
class VoteOnReview:
    actor_id = Identifier()
    review_id = Identifier(required=True)
    polarity = String(required=True)  # "like" or "dislike"


@reviewhub.command_handler(part_of=Review)
class VoteOnReviewHandler:
    @handle(VoteOnReview)
    def vote_on_review(self, command):
        if not command.actor_id:
            logger.info(
                "Authorization denied",
                resource="reviews",
                action="vote",
                reason=DenyReason.INSUFFICIENT_PERMISSION.value,
            )
            raise Forbidden(reason=DenyReason.INSUFFICIENT_PERMISSION)

        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        status = review.vote(
            user_id=command.actor_id,
            polarity=command.polarity,
            allow_self_vote=self_vote_allowed(),
        )
        repo.add(review)

        return {
            "review_id": str(review.id),
            "total_like": review.total_like,
            "total_dislike": review.total_dislike,
            "user_vote_status": status,
        }


# ---------------------------------------------------------------------------
# EngagementLedger
# ---------------------------------------------------------------------------
_locks = KeyedLocks()


def _apply(command) -> dict:
    try:
        return current_domain.process(command, asynchronous=False)
    except ExpectedVersionError as exc:
        raise ConflictError({"review": ["Review was modified concurrently"]}) from exc


def cast_vote(review_id, user_id, polarity) -> dict:
    """Apply one vote and return ``{review_id, total_like, total_dislike, user_vote_status}``."""
    command = VoteOnReview(actor_id=user_id, review_id=review_id, polarity=polarity)

    with _locks.hold(str(review_id)):
        try:
            return _apply(command)
        except ConflictError:
            logger.warning("Vote conflicted with a concurrent write, retrying", review_id=str(review_id))
            return _apply(command)
