"""BDD tests for moderation through the command layer."""

from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when
from reviewhub.errors import Forbidden, InvalidTransition
from reviewhub.review.moderation import ModerateReview
from reviewhub.review.review import Review

scenarios("features/review_moderation.feature")


@given(parsers.cfparse('a registered "{kind}" account "{user_id}"'))
def registered_account(make_account, kind, user_id):
    make_account(user_id, kind=kind)


@given("an approved review", target_fixture="review_id")
def approved_review():
    review = Review.submit(
        company_id="comp-bdd",
        author_id="author-bdd",
        title="Moderation scenario",
        content="A review waiting for a moderator.",
        score=4,
    )
    current_domain.repository_for(Review).add(review)
    return str(review.id)


@when(parsers.cfparse('"{user_id}" moderates the review to "{status}"'))
def moderate(review_id, user_id, status, error):
    try:
        current_domain.process(
            ModerateReview(actor_id=user_id, review_id=review_id, status=status),
            asynchronous=False,
        )
    except (Forbidden, InvalidTransition) as exc:
        error["exc"] = exc


@then("the moderation is refused as not authorized")
def refused(error):
    assert isinstance(error["exc"], Forbidden)
    assert error["exc"].messages == {"permission": ["Not authorized"]}


@then("the moderation fails with an invalid transition")
def invalid_transition(error):
    assert isinstance(error["exc"], InvalidTransition)


@then(parsers.cfparse('the stored review status is "{status}"'))
def stored_status(review_id, status):
    assert current_domain.repository_for(Review).get(review_id).status == status
