"""Tests for like/dislike voting: toggle, flip, neutral, counter invariant."""

import random

import pytest
from protean.exceptions import ValidationError
from reviewhub.errors import ReviewNotVisible, SelfVoteNotApplicable
from reviewhub.review.events import ReviewVoteCast
from reviewhub.review.review import Polarity, Review


def _make_review(**overrides):
    defaults = {
        "company_id": "comp-vote",
        "author_id": "author-vote",
        "title": "Vote on this review",
        "content": "Content worth an opinion.",
        "score": 7,
    }
    defaults.update(overrides)
    review = Review.submit(**defaults)
    review._events.clear()
    return review


def _counters(review):
    return review.total_like, review.total_dislike


class TestToggle:
    def test_first_like(self):
        review = _make_review()
        assert review.vote("u-1", "like") == "like"
        assert _counters(review) == (1, 0)
        assert len(review.votes) == 1

    def test_like_twice_is_neutral(self):
        review = _make_review()
        review.vote("u-1", "like")
        assert review.vote("u-1", "like") is None
        assert _counters(review) == (0, 0)
        assert len(review.votes) == 0

    def test_flip_like_to_dislike(self):
        review = _make_review()
        review.vote("u-1", "like")
        assert review.vote("u-1", "dislike") == "dislike"
        assert _counters(review) == (0, 1)
        assert len(review.votes) == 1
        assert review.vote_of("u-1") == Polarity.DISLIKE.value

    def test_scenario_from_existing_counters(self):
        review = _make_review()
        for user in ("u-2", "u-3", "u-4"):
            review.vote(user, "like")
        review.vote("u-5", "dislike")
        assert _counters(review) == (3, 1)

        assert review.vote("u-1", "like") == "like"
        assert _counters(review) == (4, 1)
        assert review.vote("u-1", "dislike") == "dislike"
        assert _counters(review) == (3, 2)
        assert review.vote("u-1", "dislike") is None
        assert _counters(review) == (3, 1)

    def test_users_are_independent(self):
        review = _make_review()
        review.vote("u-1", "like")
        review.vote("u-2", "dislike")
        assert review.vote_of("u-1") == "like"
        assert review.vote_of("u-2") == "dislike"
        assert review.vote_of("u-3") is None

    def test_event_carries_counters(self):
        review = _make_review()
        review.vote("u-1", "dislike")
        event = review._events[-1]
        assert isinstance(event, ReviewVoteCast)
        assert event.user_vote_status == "dislike"
        assert (event.total_like, event.total_dislike) == (0, 1)

    def test_polarity_is_case_insensitive(self):
        review = _make_review()
        assert review.vote("u-1", "LIKE") == "like"

    def test_unknown_polarity(self):
        with pytest.raises(ValidationError):
            _make_review().vote("u-1", "love")


class TestCounterInvariant:
    def test_random_sequence_matches_rows(self):
        review = _make_review()
        rng = random.Random(42)
        for _ in range(60):
            review.vote(f"u-{rng.randint(1, 6)}", rng.choice(["like", "dislike"]))
            likes = sum(1 for v in review.votes if v.polarity == "like")
            dislikes = sum(1 for v in review.votes if v.polarity == "dislike")
            assert _counters(review) == (likes, dislikes)
            assert review.total_like >= 0 and review.total_dislike >= 0

    def test_one_row_per_user(self):
        review = _make_review()
        for polarity in ("like", "dislike", "like", "like", "dislike"):
            review.vote("u-1", polarity)
        assert len([v for v in review.votes if str(v.user_id) == "u-1"]) <= 1


class TestGuards:
    def test_hidden_review_rejects_votes(self):
        review = _make_review(status="pending")
        with pytest.raises(ReviewNotVisible):
            review.vote("u-1", "like")

    def test_deleted_review_rejects_votes(self):
        review = _make_review()
        review.soft_delete()
        with pytest.raises(ReviewNotVisible):
            review.vote("u-1", "like")
        assert _counters(review) == (0, 0)

    def test_self_vote_allowed_by_default(self):
        review = _make_review()
        assert review.vote("author-vote", "like") == "like"

    def test_self_vote_can_be_disabled(self):
        review = _make_review()
        with pytest.raises(SelfVoteNotApplicable):
            review.vote("author-vote", "like", allow_self_vote=False)
