"""Application tests for submit, edit, moderate, delete and restore."""

import pytest
from protean import current_domain
from reviewhub.errors import Forbidden, InvalidTransition
from reviewhub.review.editing import EditReview
from reviewhub.review.moderation import ModerateReview
from reviewhub.review.removal import RestoreReview, SoftDeleteReview
from reviewhub.review.review import Review, ReviewStatus
from reviewhub.review.submission import SubmitReview


def _submit_review(actor_id, **overrides):
    defaults = {
        "actor_id": actor_id,
        "company_id": "comp-app",
        "title": "Solid employer overall",
        "content": "Good benefits, slow promotions.",
        "score": 7,
    }
    defaults.update(overrides)
    return current_domain.process(SubmitReview(**defaults), asynchronous=False)


def _review(review_id):
    return current_domain.repository_for(Review).get(review_id)


class TestSubmitReview:
    def test_member_submits_approved_review(self, member):
        review = _review(_submit_review(member))
        assert review.status == ReviewStatus.APPROVED.value
        assert str(review.author_id) == member

    def test_initial_status_is_configurable(self, member, monkeypatch):
        monkeypatch.setenv("REVIEWHUB_INITIAL_REVIEW_STATUS", "pending")
        assert _review(_submit_review(member)).status == ReviewStatus.PENDING.value

    def test_anonymous_cannot_submit(self, roles):
        with pytest.raises(Forbidden):
            _submit_review(None)


class TestEditReview:
    def test_author_edits(self, member):
        review_id = _submit_review(member)
        current_domain.process(EditReview(actor_id=member, review_id=review_id, score=9), asynchronous=False)
        review = _review(review_id)
        assert review.score.value == 9
        assert review.is_edited is True

    def test_other_user_cannot_edit(self, member, admin):
        review_id = _submit_review(member)
        with pytest.raises(Forbidden):
            current_domain.process(EditReview(actor_id=admin, review_id=review_id, score=1), asynchronous=False)
        assert _review(review_id).score.value == 7


class TestModerateReview:
    def test_admin_rejects(self, admin, member):
        review_id = _submit_review(member)
        outcome = current_domain.process(
            ModerateReview(actor_id=admin, review_id=review_id, status="rejected", notes="off-topic"),
            asynchronous=False,
        )
        assert outcome == {"review_id": review_id, "status": "rejected"}
        assert _review(review_id).moderation_notes == "off-topic"

    def test_member_without_approve_is_forbidden(self, member):
        review_id = _submit_review(member)
        with pytest.raises(Forbidden) as exc:
            current_domain.process(
                ModerateReview(actor_id=member, review_id=review_id, status="rejected"),
                asynchronous=False,
            )
        assert exc.value.messages == {"permission": ["Not authorized"]}
        assert _review(review_id).status == ReviewStatus.APPROVED.value

    def test_moderating_to_pending(self, admin, member):
        review_id = _submit_review(member)
        with pytest.raises(InvalidTransition):
            current_domain.process(
                ModerateReview(actor_id=admin, review_id=review_id, status="pending"),
                asynchronous=False,
            )


class TestRemoval:
    def test_delete_then_restore_returns_to_approved(self, admin, member):
        review_id = _submit_review(member)

        deleted = current_domain.process(SoftDeleteReview(actor_id=admin, review_id=review_id), asynchronous=False)
        assert deleted == {"review_id": review_id, "status": "approved", "is_deleted": True}

        restored = current_domain.process(RestoreReview(actor_id=admin, review_id=review_id), asynchronous=False)
        assert restored == {"review_id": review_id, "status": "approved", "is_deleted": False}
        assert _review(review_id).is_publicly_visible

    def test_member_cannot_delete(self, member):
        review_id = _submit_review(member)
        with pytest.raises(Forbidden):
            current_domain.process(SoftDeleteReview(actor_id=member, review_id=review_id), asynchronous=False)
        assert _review(review_id).is_deleted is False

    def test_restore_requires_update(self, admin, make_account):
        editor = make_account("cleaner-1", kind="user")
        review_id = _submit_review(editor)
        current_domain.process(SoftDeleteReview(actor_id=admin, review_id=review_id), asynchronous=False)
        with pytest.raises(Forbidden):
            current_domain.process(RestoreReview(actor_id=editor, review_id=review_id), asynchronous=False)
        assert _review(review_id).is_deleted is True
