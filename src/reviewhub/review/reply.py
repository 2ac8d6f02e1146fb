"""Replies — add, edit and delete replies on a review.

Any authenticated user may reply to a publicly visible review. Only the
reply's author may edit it; the author or a holder of ``reviews:delete``
may delete it. Deleting keeps the row and decrements ``total_reply``.
"""

from protean.fields import Identifier, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviewhub.domain import reviewhub
from reviewhub.errors import Forbidden
from reviewhub.review.review import Review
from reviewhub.role.authorization import DenyReason
from reviewhub.role.permissions import Action, Resource
from reviewhub.role.store import RoleStore


@reviewhub.command(part_of="Review")
class AddReply:
    actor_id = Identifier()
    review_id = Identifier(required=True)
    content = Text(required=True)


@reviewhub.command(part_of="Review")
class EditReply:
    actor_id = Identifier()
    review_id = Identifier(required=True)
    reply_id = Identifier(required=True)
    content = Text(required=True)


@reviewhub.command(part_of="Review")
class DeleteReply:
    actor_id = Identifier()
    review_id = Identifier(required=True)
    reply_id = Identifier(required=True)


@reviewhub.command_handler(part_of=Review)
class ReplyHandler:
    @handle(AddReply)
    def add_reply(self, command):
        if not command.actor_id:
            raise Forbidden(reason=DenyReason.INSUFFICIENT_PERMISSION)

        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        reply = review.add_reply(author_id=command.actor_id, content=command.content)
        repo.add(review)

        return {"review_id": str(review.id), "reply_id": str(reply.id), "total_reply": review.total_reply}

    @handle(EditReply)
    def edit_reply(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        reply = review.find_reply(command.reply_id)
        if not command.actor_id or str(reply.author_id) != str(command.actor_id):
            raise Forbidden()

        review.edit_reply(command.reply_id, command.content)
        repo.add(review)

        return {"review_id": str(review.id), "reply_id": str(reply.id), "total_reply": review.total_reply}

    @handle(DeleteReply)
    def delete_reply(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        reply = review.find_reply(command.reply_id)
        if str(reply.author_id) != str(command.actor_id):
            # Moderators may remove other users' replies
            store = RoleStore()
            store.require(store.actor_for(command.actor_id), Resource.REVIEWS, Action.DELETE)

        review.delete_reply(command.reply_id, deleted_by=command.actor_id)
        repo.add(review)

        return {"review_id": str(review.id), "reply_id": str(command.reply_id), "total_reply": review.total_reply}
