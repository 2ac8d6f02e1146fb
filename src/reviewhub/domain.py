"""ReviewHub domain: company reviews, moderation and role-based access.

One bounded context covers the access-control engine (roles, permission
matrix, authorizer), the accounts that reference roles, and the review
lifecycle (moderation, soft delete, votes, replies).
"""

from protean.domain import Domain

from reviewhub.utils.logging import configure_logging

configure_logging()

# Domain Composition Root
reviewhub = Domain(name="reviewhub")
