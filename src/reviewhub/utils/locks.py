"""Per-key mutual exclusion whose registry only holds keys that are in use."""

import threading
from contextlib import contextmanager


class KeyedLocks:
    """Hand out one lock per key; a key's entry is dropped when its last holder leaves."""

    def __init__(self):
        self._guard = threading.Lock()
        # key -> [lock, number of threads holding or waiting on it]
        self._entries: dict = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def __contains__(self, key) -> bool:
        with self._guard:
            return key in self._entries

    @contextmanager
    def hold(self, key):
        with self._guard:
            entry = self._entries.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1

        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[key]
