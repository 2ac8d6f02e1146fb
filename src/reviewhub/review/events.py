"""Domain events for the Review aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from reviewhub.domain import reviewhub


@reviewhub.event(part_of="Review")
class ReviewSubmitted:
    __version__ = 1

    review_id = Identifier(required=True)
    company_id = Identifier(required=True)
    author_id = Identifier()
    is_anonymous = Boolean(default=True)
    title = String(required=True)
    content = Text()
    job_title = String()
    score = Integer(required=True)
    status = String(required=True)
    submitted_at = DateTime(required=True)


@reviewhub.event(part_of="Review")
class ReviewEdited:
    __version__ = 1

    review_id = Identifier(required=True)
    company_id = Identifier(required=True)
    title = String()
    content = Text()
    job_title = String()
    score = Integer()
    previous_score = Integer()
    edited_at = DateTime(required=True)


@reviewhub.event(part_of="Review")
class ReviewModerated:
    """A moderator moved a review to approved or rejected."""

    __version__ = 1

    review_id = Identifier(required=True)
    company_id = Identifier(required=True)
    previous_status = String(required=True)
    status = String(required=True)
    score = Integer(required=True)
    notes = Text()
    moderator_id = Identifier()
    moderated_at = DateTime(required=True)


@reviewhub.event(part_of="Review")
class ReviewSoftDeleted:
    __version__ = 1

    review_id = Identifier(required=True)
    company_id = Identifier(required=True)
    status = String(required=True)
    score = Integer(required=True)
    deleted_by = Identifier()
    deleted_at = DateTime(required=True)


@reviewhub.event(part_of="Review")
class ReviewRestored:
    __version__ = 1

    review_id = Identifier(required=True)
    company_id = Identifier(required=True)
    status = String(required=True)
    score = Integer(required=True)
    restored_by = Identifier()
    restored_at = DateTime(required=True)


@reviewhub.event(part_of="Review")
class ReviewVoteCast:
    """Carries the authoritative counters after the vote was applied."""

    __version__ = 1

    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    polarity = String(required=True)
    user_vote_status = String()  # like, dislike, or None when the vote was withdrawn
    total_like = Integer(required=True)
    total_dislike = Integer(required=True)
    voted_at = DateTime(required=True)


@reviewhub.event(part_of="Review")
class ReplyAdded:
    __version__ = 1

    review_id = Identifier(required=True)
    reply_id = Identifier(required=True)
    author_id = Identifier(required=True)
    content = Text(required=True)
    total_reply = Integer(required=True)
    replied_at = DateTime(required=True)


@reviewhub.event(part_of="Review")
class ReplyEdited:
    __version__ = 1

    review_id = Identifier(required=True)
    reply_id = Identifier(required=True)
    content = Text(required=True)
    edited_at = DateTime(required=True)


@reviewhub.event(part_of="Review")
class ReplyDeleted:
    __version__ = 1

    review_id = Identifier(required=True)
    reply_id = Identifier(required=True)
    deleted_by = Identifier()
    total_reply = Integer(required=True)
    deleted_at = DateTime(required=True)
