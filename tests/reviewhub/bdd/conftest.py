"""Shared BDD fixtures and step definitions for ReviewHub."""

import pytest
from pytest_bdd import given, parsers, then, when
from reviewhub.errors import InvalidTransition
from reviewhub.review.events import (
    ReviewEdited,
    ReviewModerated,
    ReviewRestored,
    ReviewSoftDeleted,
    ReviewSubmitted,
    ReviewVoteCast,
)
from reviewhub.review.review import Review

_REVIEW_EVENT_CLASSES = {
    "ReviewSubmitted": ReviewSubmitted,
    "ReviewEdited": ReviewEdited,
    "ReviewModerated": ReviewModerated,
    "ReviewSoftDeleted": ReviewSoftDeleted,
    "ReviewRestored": ReviewRestored,
    "ReviewVoteCast": ReviewVoteCast,
}


@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a visible review", target_fixture="review")
def visible_review():
    review = Review.submit(
        company_id="comp-bdd",
        author_id="author-bdd",
        title="BDD Test Review",
        content="A review written for behaviour scenarios.",
        score=7,
    )
    review._events.clear()
    return review


@given("the review is rejected")
def review_is_rejected(review):
    review.moderate("rejected", moderator_id="mod-bdd")
    review._events.clear()


@given("the review is soft-deleted")
@when("the review is soft-deleted")
def review_is_soft_deleted(review):
    review.soft_delete(deleted_by="mod-bdd")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the review status is "{status}"'))
def review_status_is(review, status):
    assert review.status == status


@then("the review is publicly visible")
def review_is_visible(review):
    assert review.is_publicly_visible is True


@then("the review is not publicly visible")
def review_is_not_visible(review):
    assert review.is_publicly_visible is False


@then("the review action fails with an invalid transition")
def review_action_fails(error):
    assert error["exc"] is not None, "Expected an invalid transition but none was raised"
    assert isinstance(error["exc"], InvalidTransition)


@then(parsers.cfparse("a {event_type} event is raised"))
def review_event_raised(review, event_type):
    event_cls = _REVIEW_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in review._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in review._events]}"
