"""ReviewHub API package."""

from reviewhub.api.routes import account_router, authorization_router, review_router, role_router

__all__ = ["account_router", "authorization_router", "review_router", "role_router"]
