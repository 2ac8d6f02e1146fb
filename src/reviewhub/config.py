"""Policy switches for the review lifecycle.

Read from the environment on every call so tests can flip them with
``monkeypatch.setenv``.
"""

import os

_TRUTHY = {"1", "true", "yes", "on"}


def initial_review_status() -> str:
    """Status a freshly submitted review starts in ("approved" or "pending")."""
    status = os.environ.get("REVIEWHUB_INITIAL_REVIEW_STATUS", "approved").strip().lower()
    if status not in ("approved", "pending"):
        raise ValueError(f"Unknown initial review status: {status}")
    return status


def self_vote_allowed() -> bool:
    """Whether authors may like or dislike their own reviews."""
    return os.environ.get("REVIEWHUB_ALLOW_SELF_VOTE", "true").strip().lower() in _TRUTHY
