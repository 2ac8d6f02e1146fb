"""Review aggregate: the core of the content lifecycle.

A review carries a moderation status, an independent soft-delete flag and
the engagement counters (likes, dislikes, replies). The counters are only
ever written here, next to the Vote and Reply rows they summarize, so a
single aggregate write keeps them consistent.

Moderation status machine:
    PENDING → APPROVED | REJECTED
    APPROVED ⇄ REJECTED
    Soft delete is a flag on top of the status: restoring brings the
    previous status back into view.

Publicly visible: status is APPROVED and the review is not soft-deleted.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from reviewhub.domain import reviewhub
from reviewhub.errors import InvalidTransition, ReviewNotVisible, SelfVoteNotApplicable
from reviewhub.review.events import (
    ReplyAdded,
    ReplyDeleted,
    ReplyEdited,
    ReviewEdited,
    ReviewModerated,
    ReviewRestored,
    ReviewSoftDeleted,
    ReviewSubmitted,
    ReviewVoteCast,
)

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ReviewStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Polarity(Enum):
    LIKE = "like"
    DISLIKE = "dislike"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    ReviewStatus.PENDING: {ReviewStatus.APPROVED, ReviewStatus.REJECTED},
    ReviewStatus.APPROVED: {ReviewStatus.REJECTED},
    ReviewStatus.REJECTED: {ReviewStatus.APPROVED},
}


def parse_polarity(value) -> Polarity:
    if isinstance(value, Polarity):
        return value
    try:
        return Polarity(str(value).strip().lower())
    except ValueError:
        raise ValidationError({"polarity": [f"Unknown vote polarity: {value}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@reviewhub.value_object(part_of="Review")
class Score:
    """An overall score from 1 to 10."""

    value = Integer(required=True)

    @invariant.post
    def value_must_be_in_range(self):
        if self.value is not None and (self.value < 1 or self.value > 10):
            raise ValidationError({"score": ["Score must be between 1 and 10"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@reviewhub.entity(part_of="Review")
class Vote:
    """One user's like or dislike. At most one per user and review."""

    user_id = Identifier(required=True)
    polarity = String(choices=Polarity, required=True)
    voted_at = DateTime(required=True)


@reviewhub.entity(part_of="Review")
class Reply:
    author_id = Identifier(required=True)
    content = Text(required=True)
    is_edited = Boolean(default=False)
    is_deleted = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@reviewhub.aggregate
class Review:
    """An employee's review of a company."""

    company_id = Identifier(required=True)
    author_id = Identifier()
    is_anonymous = Boolean(default=True)

    # Content
    title = String(required=True, max_length=100)
    content = Text(required=True)
    job_title = String(max_length=100)
    score = ValueObject(Score, required=True)

    # Lifecycle
    status = String(choices=ReviewStatus, default=ReviewStatus.APPROVED.value)
    moderation_notes = Text()
    moderated_by = Identifier()
    is_deleted = Boolean(default=False)
    deleted_at = DateTime()

    # Engagement
    votes = HasMany(Vote)
    total_like = Integer(default=0)
    total_dislike = Integer(default=0)
    replies = HasMany(Reply)
    total_reply = Integer(default=0)

    # Editing
    is_edited = Boolean(default=False)

    # Timestamps
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def title_length_within_bounds(self):
        if self.title is not None and len(self.title.strip()) < 5:
            raise ValidationError({"title": ["Review title must be at least 5 characters"]})

    @invariant.post
    def counters_cannot_be_negative(self):
        if min(self.total_like or 0, self.total_dislike or 0, self.total_reply or 0) < 0:
            raise ValidationError({"counters": ["Engagement counters cannot be negative"]})

    @invariant.post
    def vote_counters_match_votes(self):
        likes = sum(1 for vote in self.votes if vote.polarity == Polarity.LIKE.value)
        dislikes = len(self.votes) - likes
        if (self.total_like or 0, self.total_dislike or 0) != (likes, dislikes):
            raise ValidationError({"votes": ["Vote counters are out of sync with votes"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def submit(
        cls,
        company_id,
        author_id,
        title,
        content,
        score,
        job_title=None,
        is_anonymous=True,
        status=ReviewStatus.APPROVED.value,
    ):
        """Create a review in the configured initial status."""
        initial = ReviewStatus(status)
        if initial == ReviewStatus.REJECTED:
            raise InvalidTransition({"status": ["Reviews cannot be submitted as rejected"]})

        now = datetime.now(UTC)
        review = cls(
            company_id=company_id,
            author_id=author_id,
            is_anonymous=bool(is_anonymous),
            title=title,
            content=content,
            job_title=job_title,
            score=Score(value=score),
            status=initial.value,
            is_deleted=False,
            total_like=0,
            total_dislike=0,
            total_reply=0,
            is_edited=False,
            created_at=now,
            updated_at=now,
        )

        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                company_id=str(company_id),
                author_id=str(author_id) if author_id else None,
                is_anonymous=review.is_anonymous,
                title=title,
                content=content,
                job_title=job_title,
                score=score,
                status=review.status,
                submitted_at=now,
            )
        )
        return review

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_publicly_visible(self) -> bool:
        return self.status == ReviewStatus.APPROVED.value and not self.is_deleted

    @property
    def live_replies(self) -> list:
        return [reply for reply in self.replies if not reply.is_deleted]

    def vote_of(self, user_id):
        """Return the user's current polarity value, or None."""
        vote = self._find_vote(user_id)
        return vote.polarity if vote else None

    def _find_vote(self, user_id):
        return next((v for v in self.votes if str(v.user_id) == str(user_id)), None)

    # -------------------------------------------------------------------
    # Edit
    # -------------------------------------------------------------------
    def edit(self, title=_UNSET, content=_UNSET, job_title=_UNSET, score=_UNSET):
        """Edit the review's content. Not allowed once soft-deleted."""
        if self.is_deleted:
            raise InvalidTransition({"review": ["Deleted reviews cannot be edited"]})

        previous_score = self.score.value
        now = datetime.now(UTC)
        with atomic_change(self):
            if title is not _UNSET:
                self.title = title
            if content is not _UNSET:
                self.content = content
            if job_title is not _UNSET:
                self.job_title = job_title
            if score is not _UNSET:
                self.score = Score(value=score)
            self.is_edited = True
            self.updated_at = now

        self.raise_(
            ReviewEdited(
                review_id=str(self.id),
                company_id=str(self.company_id),
                title=self.title,
                content=self.content,
                job_title=self.job_title,
                score=self.score.value,
                previous_score=previous_score,
                edited_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Moderation
    # -------------------------------------------------------------------
    def moderate(self, status, moderator_id=None, notes=None):
        """Move the review to approved or rejected.

        Moderating to the current status is a no-op. Soft-deleted reviews
        must be restored before they can be moderated.
        """
        try:
            target = ReviewStatus(str(status).strip().lower())
        except ValueError:
            raise ValidationError({"status": [f"Unknown review status: {status}"]}) from None

        if self.is_deleted:
            raise InvalidTransition({"status": ["Deleted reviews cannot be moderated"]})

        if target == ReviewStatus.PENDING:
            raise InvalidTransition({"status": ["Reviews cannot be moved back to pending"]})

        current = ReviewStatus(self.status)
        if target == current:
            return

        if target not in _VALID_TRANSITIONS[current]:
            raise InvalidTransition({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.status = target.value
        self.moderation_notes = notes
        self.moderated_by = moderator_id
        self.updated_at = now

        self.raise_(
            ReviewModerated(
                review_id=str(self.id),
                company_id=str(self.company_id),
                previous_status=current.value,
                status=target.value,
                score=self.score.value,
                notes=notes,
                moderator_id=str(moderator_id) if moderator_id else None,
                moderated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Soft delete / restore
    # -------------------------------------------------------------------
    def soft_delete(self, deleted_by=None):
        """Flag the review as deleted, keeping its moderation status and replies."""
        if self.is_deleted:
            return

        now = datetime.now(UTC)
        self.is_deleted = True
        self.deleted_at = now
        self.updated_at = now

        self.raise_(
            ReviewSoftDeleted(
                review_id=str(self.id),
                company_id=str(self.company_id),
                status=self.status,
                score=self.score.value,
                deleted_by=str(deleted_by) if deleted_by else None,
                deleted_at=now,
            )
        )

    def restore(self, restored_by=None):
        if not self.is_deleted:
            return

        now = datetime.now(UTC)
        self.is_deleted = False
        self.deleted_at = None
        self.updated_at = now

        self.raise_(
            ReviewRestored(
                review_id=str(self.id),
                company_id=str(self.company_id),
                status=self.status,
                score=self.score.value,
                restored_by=str(restored_by) if restored_by else None,
                restored_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Voting
    # -------------------------------------------------------------------
    def vote(self, user_id, polarity, allow_self_vote=True):
        """Toggle the user's vote and return the resulting polarity value.

        No vote yet: record it. Same polarity again: withdraw it (neutral).
        Opposite polarity: the row is replaced with the new polarity.
        Counters move together with the rows in one atomic change.
        """
        polarity = parse_polarity(polarity)

        if not self.is_publicly_visible:
            raise ReviewNotVisible({"review": ["Review not found"]})

        if not allow_self_vote and self.author_id and str(user_id) == str(self.author_id):
            raise SelfVoteNotApplicable({"vote": ["You cannot vote on your own review"]})

        now = datetime.now(UTC)
        existing = self._find_vote(user_id)

        with atomic_change(self):
            if existing is None:
                self.add_votes(Vote(user_id=user_id, polarity=polarity.value, voted_at=now))
                self._bump(polarity, +1)
                result = polarity.value
            elif existing.polarity == polarity.value:
                self.remove_votes(existing)
                self._bump(polarity, -1)
                result = None
            else:
                previous = Polarity(existing.polarity)
                self.remove_votes(existing)
                self.add_votes(Vote(user_id=user_id, polarity=polarity.value, voted_at=now))
                self._bump(previous, -1)
                self._bump(polarity, +1)
                result = polarity.value
            self.updated_at = now

        self.raise_(
            ReviewVoteCast(
                review_id=str(self.id),
                user_id=str(user_id),
                polarity=polarity.value,
                user_vote_status=result,
                total_like=self.total_like,
                total_dislike=self.total_dislike,
                voted_at=now,
            )
        )
        return result

    def _bump(self, polarity, delta):
        # Floors at zero
        if polarity == Polarity.LIKE:
            self.total_like = max(0, (self.total_like or 0) + delta)
        else:
            self.total_dislike = max(0, (self.total_dislike or 0) + delta)

    # -------------------------------------------------------------------
    # Replies
    # -------------------------------------------------------------------
    def _live_reply(self, reply_id):
        reply = next((r for r in self.replies if str(r.id) == str(reply_id)), None)
        if reply is None or reply.is_deleted:
            raise ValidationError({"reply_id": ["Reply not found"]})
        return reply

    def add_reply(self, author_id, content):
        """Reply to a publicly visible review. Returns the new reply."""
        if not self.is_publicly_visible:
            raise ReviewNotVisible({"review": ["Review not found"]})
        if content is None or not str(content).strip():
            raise ValidationError({"content": ["Reply cannot be empty"]})

        now = datetime.now(UTC)
        reply = Reply(
            author_id=author_id,
            content=content,
            is_edited=False,
            is_deleted=False,
            created_at=now,
            updated_at=now,
        )
        with atomic_change(self):
            self.add_replies(reply)
            self.total_reply = (self.total_reply or 0) + 1
            self.updated_at = now

        self.raise_(
            ReplyAdded(
                review_id=str(self.id),
                reply_id=str(reply.id),
                author_id=str(author_id),
                content=content,
                total_reply=self.total_reply,
                replied_at=now,
            )
        )
        return reply

    def edit_reply(self, reply_id, content):
        reply = self._live_reply(reply_id)
        if content is None or not str(content).strip():
            raise ValidationError({"content": ["Reply cannot be empty"]})

        now = datetime.now(UTC)
        reply.content = content
        reply.is_edited = True
        reply.updated_at = now
        self.add_replies(reply)
        self.updated_at = now

        self.raise_(
            ReplyEdited(
                review_id=str(self.id),
                reply_id=str(reply.id),
                content=content,
                edited_at=now,
            )
        )

    def delete_reply(self, reply_id, deleted_by=None):
        """Soft-delete a reply and decrement the reply counter."""
        reply = self._live_reply(reply_id)

        now = datetime.now(UTC)
        with atomic_change(self):
            reply.is_deleted = True
            reply.updated_at = now
            self.add_replies(reply)
            self.total_reply = max(0, (self.total_reply or 0) - 1)
            self.updated_at = now

        self.raise_(
            ReplyDeleted(
                review_id=str(self.id),
                reply_id=str(reply.id),
                deleted_by=str(deleted_by) if deleted_by else None,
                total_reply=self.total_reply,
                deleted_at=now,
            )
        )

    def find_reply(self, reply_id):
        return self._live_reply(reply_id)
