"""Map domain errors to HTTP responses.

Every error body is ``{"code": ..., "error": ...}``. Handlers are looked up
along the exception's MRO, so the specific classes below win over the
generic Protean handlers registered first.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from reviewhub.errors import (
    NOT_AUTHORIZED,
    REQUEST_FAILED,
    ConflictError,
    Forbidden,
    InvalidTransition,
    ProtectedRoleError,
    ReviewNotVisible,
    RoleInUseError,
    SelfVoteNotApplicable,
)

_STATUS_CODES = {
    ValidationError: (400, "validation_error"),
    SelfVoteNotApplicable: (400, SelfVoteNotApplicable.code),
    Forbidden: (403, Forbidden.code),
    ObjectNotFoundError: (404, "not_found"),
    ReviewNotVisible: (404, ReviewNotVisible.code),
    ProtectedRoleError: (409, ProtectedRoleError.code),
    RoleInUseError: (409, RoleInUseError.code),
    InvalidTransition: (409, InvalidTransition.code),
    # Survived the ledger retry; reported as a plain failure
    ConflictError: (500, "error"),
}


def _handler(status_code, code):
    async def handle(request: Request, exc: Exception) -> JSONResponse:
        if isinstance(exc, Forbidden):
            # Never name the missing permission
            error = NOT_AUTHORIZED
        elif isinstance(exc, ConflictError):
            error = REQUEST_FAILED
        else:
            error = getattr(exc, "messages", None) or str(exc)
        return JSONResponse(status_code=status_code, content={"code": code, "error": error})

    return handle


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    for exc_class, (status_code, code) in _STATUS_CODES.items():
        app.add_exception_handler(exc_class, _handler(status_code, code))
