"""FastAPI routes for ReviewHub.

Each route translates between Pydantic schemas (external contract) and
Protean commands (internal domain concepts). The acting user comes from
the ``X-User-Id`` header.
"""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from reviewhub.account.account import Account
from reviewhub.account.management import AssignRole, DeactivateAccount, RegisterAccount
from reviewhub.api.dependencies import current_actor_id
from reviewhub.api.schemas import (
    AccountResponse,
    AssignRoleRequest,
    AuthorizationResponse,
    CreateRoleRequest,
    DeleteRoleRequest,
    EditReviewRequest,
    ModerateReviewRequest,
    RegisterAccountRequest,
    ReplyRequest,
    ReplyResponse,
    ReviewIdResponse,
    ReviewStateResponse,
    RoleGrantRequest,
    RolePermissionsRequest,
    RoleResponse,
    RoleSchema,
    RoleStatusRequest,
    StatusResponse,
    SubmitReviewRequest,
    VoteRequest,
    VoteResponse,
)
from reviewhub.review.editing import EditReview
from reviewhub.review.moderation import ModerateReview
from reviewhub.review.removal import RestoreReview, SoftDeleteReview
from reviewhub.review.reply import AddReply, DeleteReply, EditReply
from reviewhub.review.submission import SubmitReview
from reviewhub.review.voting import cast_vote
from reviewhub.role.management import (
    ChangeRoleStatus,
    CreateRole,
    DeleteRole,
    GrantPermission,
    ReplaceRolePermissions,
    RevokePermission,
    SetAllowAllAction,
    SetRolePermissions,
)
from reviewhub.role.store import RoleStore

review_router = APIRouter(prefix="/reviews", tags=["reviews"])
role_router = APIRouter(prefix="/roles", tags=["roles"])
account_router = APIRouter(prefix="/accounts", tags=["accounts"])
authorization_router = APIRouter(tags=["authorization"])


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
@review_router.post("", status_code=201, response_model=ReviewIdResponse)
async def submit_review(body: SubmitReviewRequest, actor_id: str | None = Depends(current_actor_id)):
    """Post a new review of a company."""
    command = SubmitReview(
        actor_id=actor_id,
        company_id=body.company_id,
        title=body.title,
        content=body.content,
        score=body.score,
        job_title=body.job_title,
        is_anonymous=body.is_anonymous,
    )
    review_id = current_domain.process(command, asynchronous=False)
    return ReviewIdResponse(review_id=review_id)


@review_router.put("/{review_id}", response_model=StatusResponse)
async def edit_review(review_id: str, body: EditReviewRequest, actor_id: str | None = Depends(current_actor_id)):
    """Edit a review. Authors only."""
    command = EditReview(
        actor_id=actor_id,
        review_id=review_id,
        title=body.title,
        content=body.content,
        job_title=body.job_title,
        score=body.score,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@review_router.put("/{review_id}/moderate", response_model=ReviewStateResponse)
async def moderate_review(
    review_id: str, body: ModerateReviewRequest, actor_id: str | None = Depends(current_actor_id)
):
    """Approve or reject a review."""
    command = ModerateReview(actor_id=actor_id, review_id=review_id, status=body.status, notes=body.notes)
    outcome = current_domain.process(command, asynchronous=False)
    return ReviewStateResponse(**outcome)


@review_router.put("/{review_id}/delete", response_model=ReviewStateResponse)
async def delete_review(review_id: str, actor_id: str | None = Depends(current_actor_id)):
    """Soft-delete a review."""
    outcome = current_domain.process(SoftDeleteReview(actor_id=actor_id, review_id=review_id), asynchronous=False)
    return ReviewStateResponse(**outcome)


@review_router.put("/{review_id}/restore", response_model=ReviewStateResponse)
async def restore_review(review_id: str, actor_id: str | None = Depends(current_actor_id)):
    """Restore a soft-deleted review."""
    outcome = current_domain.process(RestoreReview(actor_id=actor_id, review_id=review_id), asynchronous=False)
    return ReviewStateResponse(**outcome)


@review_router.post("/{review_id}/votes", response_model=VoteResponse)
async def vote_on_review(review_id: str, body: VoteRequest, actor_id: str | None = Depends(current_actor_id)):
    """Like or dislike a review; returns the authoritative counters."""
    return VoteResponse(**cast_vote(review_id, actor_id, body.polarity))


@review_router.post("/{review_id}/replies", status_code=201, response_model=ReplyResponse)
async def add_reply(review_id: str, body: ReplyRequest, actor_id: str | None = Depends(current_actor_id)):
    command = AddReply(actor_id=actor_id, review_id=review_id, content=body.content)
    return ReplyResponse(**current_domain.process(command, asynchronous=False))


@review_router.put("/{review_id}/replies/{reply_id}", response_model=ReplyResponse)
async def edit_reply(
    review_id: str, reply_id: str, body: ReplyRequest, actor_id: str | None = Depends(current_actor_id)
):
    command = EditReply(actor_id=actor_id, review_id=review_id, reply_id=reply_id, content=body.content)
    return ReplyResponse(**current_domain.process(command, asynchronous=False))


@review_router.delete("/{review_id}/replies/{reply_id}", response_model=ReplyResponse)
async def delete_reply(review_id: str, reply_id: str, actor_id: str | None = Depends(current_actor_id)):
    command = DeleteReply(actor_id=actor_id, review_id=review_id, reply_id=reply_id)
    return ReplyResponse(**current_domain.process(command, asynchronous=False))


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------
def _role_response(role_id) -> RoleResponse:
    role = RoleStore().get(role_id)
    return RoleResponse(
        role=RoleSchema(
            id=str(role.id),
            name=role.name,
            description=role.description,
            kind=role.kind,
            status=role.status,
            allow_all_action=role.allow_all_action,
            permissions=role.permission_matrix.to_dict(),
            permissions_summary=role.permissions_summary,
        )
    )


@role_router.post("", status_code=201, response_model=RoleResponse)
async def create_role(body: CreateRoleRequest, actor_id: str | None = Depends(current_actor_id)):
    command = CreateRole(
        actor_id=actor_id,
        name=body.name,
        description=body.description,
        allow_all_action=body.allow_all_action,
        permissions=json.dumps(body.permissions) if body.permissions is not None else None,
    )
    return _role_response(current_domain.process(command, asynchronous=False))


@role_router.put("/{role_id}/permissions", response_model=RoleResponse)
async def update_role_permissions(
    role_id: str, body: RolePermissionsRequest, actor_id: str | None = Depends(current_actor_id)
):
    """Replace one resource's actions, the whole matrix, and/or the allow-all flag."""
    if body.allow_all_action is not None:
        current_domain.process(
            SetAllowAllAction(actor_id=actor_id, role_id=role_id, allow_all_action=body.allow_all_action),
            asynchronous=False,
        )
    if body.permissions is not None:
        current_domain.process(
            ReplaceRolePermissions(actor_id=actor_id, role_id=role_id, permissions=json.dumps(body.permissions)),
            asynchronous=False,
        )
    if body.resource is not None:
        current_domain.process(
            SetRolePermissions(
                actor_id=actor_id,
                role_id=role_id,
                resource=body.resource,
                actions=json.dumps(body.actions or []),
            ),
            asynchronous=False,
        )
    return _role_response(role_id)


@role_router.put("/{role_id}/grants", response_model=RoleResponse)
async def update_role_grant(role_id: str, body: RoleGrantRequest, actor_id: str | None = Depends(current_actor_id)):
    command_class = GrantPermission if body.granted else RevokePermission
    command = command_class(actor_id=actor_id, role_id=role_id, resource=body.resource, action=body.action)
    current_domain.process(command, asynchronous=False)
    return _role_response(role_id)


@role_router.put("/{role_id}/status", response_model=RoleResponse)
async def change_role_status(
    role_id: str, body: RoleStatusRequest, actor_id: str | None = Depends(current_actor_id)
):
    command = ChangeRoleStatus(actor_id=actor_id, role_id=role_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    return _role_response(role_id)


@role_router.put("/{role_id}/delete", response_model=RoleResponse)
async def delete_role(
    role_id: str, body: DeleteRoleRequest | None = None, actor_id: str | None = Depends(current_actor_id)
):
    accept_soft_delete = body.accept_soft_delete if body else False
    command = DeleteRole(actor_id=actor_id, role_id=role_id, accept_soft_delete=accept_soft_delete)
    current_domain.process(command, asynchronous=False)
    return _role_response(role_id)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------
def _account_response(user_id) -> AccountResponse:
    account = current_domain.repository_for(Account).get(user_id)
    return AccountResponse(
        user_id=str(account.user_id),
        email=account.email,
        role_id=str(account.role_id) if account.role_id else None,
    )


@account_router.post("", status_code=201, response_model=AccountResponse)
async def register_account(body: RegisterAccountRequest):
    command = RegisterAccount(user_id=body.user_id, email=body.email, display_name=body.display_name)
    return _account_response(current_domain.process(command, asynchronous=False))


@account_router.put("/{user_id}/role", response_model=AccountResponse)
async def assign_role(user_id: str, body: AssignRoleRequest, actor_id: str | None = Depends(current_actor_id)):
    command = AssignRole(actor_id=actor_id, user_id=user_id, role_id=body.role_id)
    return _account_response(current_domain.process(command, asynchronous=False))


@account_router.put("/{user_id}/deactivate", response_model=AccountResponse)
async def deactivate_account(user_id: str, actor_id: str | None = Depends(current_actor_id)):
    command = DeactivateAccount(actor_id=actor_id, user_id=user_id)
    return _account_response(current_domain.process(command, asynchronous=False))


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------
@authorization_router.get("/authorize", response_model=AuthorizationResponse)
async def authorize(resource: str, action: str, actor_id: str | None = Depends(current_actor_id)):
    """Ask whether the acting user may perform ``action`` on ``resource``."""
    store = RoleStore()
    actor = store.actor_for(actor_id)
    decision = store.authorize(actor, resource, action)
    return AuthorizationResponse(
        allowed=decision.allowed,
        reason=decision.reason.value if decision.reason else None,
        can_access_admin=store.can_access_admin(actor),
    )
