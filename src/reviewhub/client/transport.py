"""Vote transport: the client's view of ``POST /reviews/{id}/votes``.

``VoteTransport`` is the port the synchronizer depends on;
``HttpVoteTransport`` is the adapter over a ``requests``-compatible
session (a ``requests.Session`` in production, FastAPI's ``TestClient``
in tests).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

import requests
import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ServerEngagement:
    """Authoritative counters echoed back by the server after a vote."""

    review_id: str
    total_like: int
    total_dislike: int
    user_vote_status: str | None = None


class VoteRejected(Exception):
    """The server refused the vote (4xx/5xx)."""

    def __init__(self, status_code: int, code: str | None = None, error=None):
        super().__init__(f"Vote rejected with status {status_code}: {code or error}")
        self.status_code = status_code
        self.code = code
        self.error = error


class VoteTransportError(Exception):
    """The vote never reached the server."""


class VoteTransport(ABC):
    @abstractmethod
    def send_vote(self, review_id: str, polarity: str) -> ServerEngagement:
        """Send one vote and return the server's counters."""
        ...


class HttpVoteTransport(VoteTransport):
    def __init__(self, session=None, base_url: str = "", user_id: str | None = None, timeout: float = 10):
        self.session = session if session is not None else requests.Session()
        self.base_url = base_url.rstrip("/")
        self.user_id = user_id
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {"X-User-Id": self.user_id} if self.user_id else {}

    def send_vote(self, review_id: str, polarity: str) -> ServerEngagement:
        url = f"{self.base_url}/reviews/{review_id}/votes"
        try:
            response = self.session.post(
                url,
                json={"polarity": polarity},
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            logger.error("Vote request failed", review_id=review_id, error=str(exc))
            raise VoteTransportError(f"Cannot reach {url}") from exc

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {"error": response.text}
            raise VoteRejected(response.status_code, body.get("code"), body.get("error"))

        data = response.json()
        return ServerEngagement(
            review_id=str(data["review_id"]),
            total_like=int(data["total_like"]),
            total_dislike=int(data["total_dislike"]),
            user_vote_status=data.get("user_vote_status"),
        )
