"""Error taxonomy of the access-control and content-lifecycle engine.

Every error is a Protean exception carrying a ``{field: [message]}`` dict,
plus a stable machine-readable ``code`` used by the API layer.
"""

from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError

NOT_AUTHORIZED = "Not authorized"
REQUEST_FAILED = "Request could not be completed"


class Forbidden(InvalidOperationError):
    """Authorization denied.

    ``reason`` holds the deny reason for server-side logging only; the
    messages never name the missing permission.
    """

    code = "forbidden"

    def __init__(self, reason=None):
        super().__init__({"permission": [NOT_AUTHORIZED]})
        self.reason = reason


class InvalidTransition(InvalidOperationError):
    code = "invalid_transition"


class ProtectedRoleError(InvalidOperationError):
    code = "protected_role"


class RoleInUseError(InvalidOperationError):
    code = "role_in_use"


class ConflictError(InvalidOperationError):
    """Concurrent write on the same record.

    Retried once by the ledger; a second conflict reaches the caller as a
    generic failure.
    """

    code = "conflict"


class ReviewNotVisible(ObjectNotFoundError):
    code = "not_found"


class SelfVoteNotApplicable(ValidationError):
    code = "self_vote"
