"""Pydantic request/response schemas for the ReviewHub API.

These are separate from Protean commands (anti-corruption pattern).
Content rules live in the domain, so the schemas only fix the shapes.
"""

from __future__ import annotations

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class SubmitReviewRequest(BaseModel):
    company_id: str
    title: str
    content: str
    score: int
    job_title: str | None = None
    is_anonymous: bool = True


class EditReviewRequest(BaseModel):
    title: str | None = None
    content: str | None = None
    job_title: str | None = None
    score: int | None = None


class ModerateReviewRequest(BaseModel):
    status: str  # "approved" or "rejected"
    notes: str | None = None


class VoteRequest(BaseModel):
    polarity: str  # "like" or "dislike"


class ReplyRequest(BaseModel):
    content: str


class CreateRoleRequest(BaseModel):
    name: str
    description: str | None = None
    allow_all_action: bool = False
    permissions: dict[str, list[str]] | None = None


class RolePermissionsRequest(BaseModel):
    """Either one resource's action set, the whole matrix, or the allow-all flag."""

    resource: str | None = None
    actions: list[str] | None = None
    permissions: dict[str, list[str]] | None = None
    allow_all_action: bool | None = None


class RoleGrantRequest(BaseModel):
    resource: str
    action: str
    granted: bool = True


class RoleStatusRequest(BaseModel):
    status: str


class DeleteRoleRequest(BaseModel):
    accept_soft_delete: bool = False


class RegisterAccountRequest(BaseModel):
    user_id: str
    email: str
    display_name: str | None = None


class AssignRoleRequest(BaseModel):
    role_id: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ReviewIdResponse(BaseModel):
    review_id: str


class ReviewStateResponse(BaseModel):
    review_id: str
    status: str
    is_deleted: bool = False


class VoteResponse(BaseModel):
    review_id: str
    total_like: int
    total_dislike: int
    user_vote_status: str | None = None


class ReplyResponse(BaseModel):
    review_id: str
    reply_id: str
    total_reply: int


class RoleSchema(BaseModel):
    id: str
    name: str
    description: str | None = None
    kind: str
    status: str
    allow_all_action: bool
    permissions: dict[str, list[str]]
    permissions_summary: str


class RoleResponse(BaseModel):
    role: RoleSchema


class AccountResponse(BaseModel):
    user_id: str
    email: str
    role_id: str | None = None


class AuthorizationResponse(BaseModel):
    allowed: bool
    reason: str | None = None
    can_access_admin: bool = False


class StatusResponse(BaseModel):
    status: str = "ok"
