"""ReviewHub FastAPI application.

Processes commands synchronously over HTTP. Every request runs inside the
reviewhub domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → event_processing = "sync"  (projectors fire in UoW)
#   - "production" → event_processing = "async" (projectors fire via Engine)
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from reviewhub.domain import reviewhub  # noqa: E402
from reviewhub.utils.logging import add_context, clear_context  # noqa: E402

reviewhub.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="ReviewHub API",
    description="Company reviews, access control and content lifecycle",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the reviewhub domain context for each request."""
    add_context(actor_id=request.headers.get("x-user-id"), path=request.url.path)
    try:
        with reviewhub.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    return response


# ---------------------------------------------------------------------------
# Routers and error handlers
# ---------------------------------------------------------------------------
from reviewhub.api import account_router, authorization_router, review_router, role_router  # noqa: E402
from reviewhub.api.errors import register_error_handlers  # noqa: E402

app.include_router(review_router)
app.include_router(role_router)
app.include_router(account_router)
app.include_router(authorization_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": reviewhub.name}})
