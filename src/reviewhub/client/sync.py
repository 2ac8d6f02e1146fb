"""OptimisticSync: client-side optimistic voting with rollback.

The synchronizer keeps a local engagement view per review, keyed by
``("reviews", review_id)``. A vote is applied locally first, then sent; the
server's counters replace the local view on success and the snapshot taken
before the vote is restored on failure. A per-key lock keeps at most one
vote in flight per review; it is released once no vote for that review is
waiting.
"""

from dataclasses import dataclass, replace

import structlog

from reviewhub.client.transport import ServerEngagement, VoteTransport
from reviewhub.utils.locks import KeyedLocks

logger = structlog.get_logger(__name__)

LIKE = "like"
DISLIKE = "dislike"


@dataclass(frozen=True)
class ReviewEngagement:
    total_like: int = 0
    total_dislike: int = 0
    user_vote_status: str | None = None

    @classmethod
    def from_server(cls, engagement: ServerEngagement) -> "ReviewEngagement":
        return cls(
            total_like=engagement.total_like,
            total_dislike=engagement.total_dislike,
            user_vote_status=engagement.user_vote_status,
        )

    def _bump(self, polarity: str, delta: int) -> "ReviewEngagement":
        if polarity == LIKE:
            return replace(self, total_like=max(0, self.total_like + delta))
        return replace(self, total_dislike=max(0, self.total_dislike + delta))

    def toggled(self, polarity: str) -> "ReviewEngagement":
        """Predict the server's answer to ``polarity`` using the same toggle rules."""
        if polarity not in (LIKE, DISLIKE):
            raise ValueError(f"Unknown vote polarity: {polarity}")

        if self.user_vote_status is None:
            return replace(self._bump(polarity, +1), user_vote_status=polarity)
        if self.user_vote_status == polarity:
            return replace(self._bump(polarity, -1), user_vote_status=None)
        flipped = self._bump(self.user_vote_status, -1)._bump(polarity, +1)
        return replace(flipped, user_vote_status=polarity)


class VoteSynchronizer:
    def __init__(self, transport: VoteTransport):
        self.transport = transport
        self._state: dict[tuple[str, str], ReviewEngagement] = {}
        self._locks = KeyedLocks()
        self._pending: set[tuple[str, str]] = set()

    @staticmethod
    def _key(review_id) -> tuple[str, str]:
        return ("reviews", str(review_id))

    def seed(self, review_id, engagement: ReviewEngagement) -> None:
        """Load the engagement shown to the user, e.g. from a review card."""
        self._state[self._key(review_id)] = engagement

    def current(self, review_id) -> ReviewEngagement:
        return self._state.get(self._key(review_id), ReviewEngagement())

    def is_pending(self, review_id) -> bool:
        return self._key(review_id) in self._pending

    def vote(self, review_id, polarity: str) -> ReviewEngagement:
        """Apply ``polarity`` optimistically, then reconcile with the server."""
        key = self._key(review_id)
        polarity = str(polarity).strip().lower()

        with self._locks.hold(key):
            snapshot = self.current(review_id)
            self._state[key] = snapshot.toggled(polarity)
            self._pending.add(key)
            try:
                confirmed = self.transport.send_vote(str(review_id), polarity)
            except Exception:
                self._state[key] = snapshot
                logger.warning("Vote rolled back", review_id=str(review_id), polarity=polarity)
                raise
            finally:
                self._pending.discard(key)

            # Replace, never merge
            self._state[key] = ReviewEngagement.from_server(confirmed)
            return self._state[key]
