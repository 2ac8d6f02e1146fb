"""Integration tests for review projections: verify projectors maintain read models."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from reviewhub.account.management import AssignRole
from reviewhub.projections.admin_activity import AdminActivity
from reviewhub.projections.company_rating import CompanyRating
from reviewhub.projections.moderation_queue import ModerationQueue
from reviewhub.projections.review_card import ReviewCard
from reviewhub.review.editing import EditReview
from reviewhub.review.moderation import ModerateReview
from reviewhub.review.removal import RestoreReview, SoftDeleteReview
from reviewhub.review.reply import AddReply
from reviewhub.review.submission import SubmitReview
from reviewhub.review.voting import cast_vote
from reviewhub.role.management import CreateRole


def _submit_review(actor_id, **overrides):
    defaults = {
        "actor_id": actor_id,
        "company_id": "comp-proj-001",
        "title": "Projection test review",
        "content": "A review long enough to be projected.",
        "score": 8,
    }
    defaults.update(overrides)
    return current_domain.process(SubmitReview(**defaults), asynchronous=False)


def _card(review_id):
    return current_domain.repository_for(ReviewCard).get(review_id)


class TestReviewCardProjection:
    def test_created_on_submit(self, member):
        review_id = _submit_review(member, is_anonymous=False)
        card = _card(review_id)
        assert card.title == "Projection test review"
        assert card.score == 8
        assert str(card.author_id) == member

    def test_reviews_are_anonymous_unless_named(self, member):
        review_id = _submit_review(member)
        card = _card(review_id)
        assert card.is_anonymous is True
        assert card.author_id is None

    def test_counters_follow_votes_and_replies(self, member):
        review_id = _submit_review(member)
        cast_vote(review_id, "voter-1", "like")
        cast_vote(review_id, "voter-2", "dislike")
        current_domain.process(AddReply(actor_id="voter-1", review_id=review_id, content="Agreed"), asynchronous=False)

        card = _card(review_id)
        assert (card.total_like, card.total_dislike, card.total_reply) == (1, 1, 1)

    def test_dropped_on_reject(self, admin, member):
        review_id = _submit_review(member)
        current_domain.process(
            ModerateReview(actor_id=admin, review_id=review_id, status="rejected"), asynchronous=False
        )
        with pytest.raises(ObjectNotFoundError):
            _card(review_id)

    def test_dropped_on_delete_and_rebuilt_on_restore(self, admin, member):
        review_id = _submit_review(member)
        current_domain.process(SoftDeleteReview(actor_id=admin, review_id=review_id), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            _card(review_id)

        current_domain.process(RestoreReview(actor_id=admin, review_id=review_id), asynchronous=False)
        assert _card(review_id).title == "Projection test review"

    def test_pending_review_has_no_card(self, member, monkeypatch):
        monkeypatch.setenv("REVIEWHUB_INITIAL_REVIEW_STATUS", "pending")
        review_id = _submit_review(member)
        with pytest.raises(ObjectNotFoundError):
            _card(review_id)


class TestModerationQueueProjection:
    def test_pending_review_is_queued(self, member, monkeypatch):
        monkeypatch.setenv("REVIEWHUB_INITIAL_REVIEW_STATUS", "pending")
        review_id = _submit_review(member)
        entry = current_domain.repository_for(ModerationQueue).get(review_id)
        assert entry.score == 8

    def test_edit_updates_entry(self, member, monkeypatch):
        monkeypatch.setenv("REVIEWHUB_INITIAL_REVIEW_STATUS", "pending")
        review_id = _submit_review(member)
        current_domain.process(
            EditReview(actor_id=member, review_id=review_id, title="Sharper title"), asynchronous=False
        )
        assert current_domain.repository_for(ModerationQueue).get(review_id).title == "Sharper title"

    def test_moderation_dequeues(self, admin, member, monkeypatch):
        monkeypatch.setenv("REVIEWHUB_INITIAL_REVIEW_STATUS", "pending")
        review_id = _submit_review(member)
        current_domain.process(
            ModerateReview(actor_id=admin, review_id=review_id, status="approved"), asynchronous=False
        )
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(ModerationQueue).get(review_id)
        assert _card(review_id).review_id == review_id

    def test_restored_pending_review_is_requeued(self, admin, member, monkeypatch):
        monkeypatch.setenv("REVIEWHUB_INITIAL_REVIEW_STATUS", "pending")
        review_id = _submit_review(member)
        current_domain.process(SoftDeleteReview(actor_id=admin, review_id=review_id), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(ModerationQueue).get(review_id)

        current_domain.process(RestoreReview(actor_id=admin, review_id=review_id), asynchronous=False)
        assert current_domain.repository_for(ModerationQueue).get(review_id).review_id == review_id

    def test_approved_review_is_not_queued(self, member):
        review_id = _submit_review(member)
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(ModerationQueue).get(review_id)


class TestCompanyRatingProjection:
    def _rating(self, company_id):
        return current_domain.repository_for(CompanyRating).get(company_id)

    def test_average_over_visible_reviews(self, member):
        _submit_review(member, company_id="comp-avg", score=8)
        _submit_review(member, company_id="comp-avg", score=5)
        rating = self._rating("comp-avg")
        assert rating.review_count == 2
        assert rating.average_score == 6.5

    def test_rejected_and_deleted_reviews_leave_the_tally(self, admin, member):
        first = _submit_review(member, company_id="comp-tally", score=8)
        second = _submit_review(member, company_id="comp-tally", score=4)
        current_domain.process(ModerateReview(actor_id=admin, review_id=first, status="rejected"), asynchronous=False)
        current_domain.process(SoftDeleteReview(actor_id=admin, review_id=second), asynchronous=False)

        rating = self._rating("comp-tally")
        assert rating.review_count == 0
        assert rating.average_score == 0.0

    def test_restore_and_score_edit(self, admin, member):
        review_id = _submit_review(member, company_id="comp-edit", score=4)
        current_domain.process(SoftDeleteReview(actor_id=admin, review_id=review_id), asynchronous=False)
        current_domain.process(RestoreReview(actor_id=admin, review_id=review_id), asynchronous=False)
        current_domain.process(EditReview(actor_id=member, review_id=review_id, score=10), asynchronous=False)

        rating = self._rating("comp-edit")
        assert rating.review_count == 1
        assert rating.average_score == 10.0


class TestAdminActivityProjection:
    def _entries(self, activity):
        return current_domain.repository_for(AdminActivity)._dao.query.filter(activity=activity).all().items

    def test_role_creation_is_recorded(self, admin):
        role_id = current_domain.process(
            CreateRole(actor_id=admin, name="Editor", permissions=json.dumps({"reviews": ["read", "update"]})),
            asynchronous=False,
        )
        entries = self._entries("RoleCreated")
        entry = next(e for e in entries if str(e.target_id) == role_id)
        assert str(entry.actor_id) == admin
        assert entry.target_type == "role"

    def test_moderation_is_recorded(self, admin, member):
        review_id = _submit_review(member)
        current_domain.process(
            ModerateReview(actor_id=admin, review_id=review_id, status="rejected", notes="spam"),
            asynchronous=False,
        )
        entries = self._entries("ReviewModerated")
        assert len(entries) == 1
        assert json.loads(entries[0].details) == {"notes": "spam"}

    def test_role_assignment_is_recorded(self, admin, member, roles):
        current_domain.process(
            AssignRole(actor_id=admin, user_id=member, role_id=roles["admin"]), asynchronous=False
        )
        entries = self._entries("RoleAssigned")
        entry = next(e for e in entries if str(e.target_id) == member and e.actor_id)
        assert str(entry.actor_id) == admin
