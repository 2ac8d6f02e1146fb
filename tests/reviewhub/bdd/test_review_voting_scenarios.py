"""BDD tests for review voting."""

from pytest_bdd import parsers, scenarios, then, when
from reviewhub.errors import ReviewNotVisible

scenarios("features/review_voting.feature")


@when(parsers.cfparse('user "{user_id}" votes "{polarity}" on the review'))
def vote_on_review(review, user_id, polarity, error):
    try:
        review.vote(user_id=user_id, polarity=polarity)
    except ReviewNotVisible as exc:
        error["exc"] = exc


@then(parsers.cfparse("the review has {likes:d} likes and {dislikes:d} dislikes"))
def review_counters(review, likes, dislikes):
    assert (review.total_like, review.total_dislike) == (likes, dislikes)


@then(parsers.cfparse('user "{user_id}" has no vote on the review'))
def user_has_no_vote(review, user_id):
    assert review.vote_of(user_id) is None


@then(parsers.cfparse('user "{user_id}" has voted "{polarity}" on the review'))
def user_has_voted(review, user_id, polarity):
    assert review.vote_of(user_id) == polarity


@then("the vote fails because the review is not visible")
def vote_fails(error):
    assert isinstance(error["exc"], ReviewNotVisible)
