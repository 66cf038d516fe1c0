"""Per-user serialization of trades."""

from contextlib import contextmanager
from threading import Lock
from typing import Iterator


class UserLockRegistry:
    """
    Hands out one lock per user ID.

    Holding a user's lock guarantees no other trade for that user is
    between reading the account and committing its changes.
    """

    def __init__(self) -> None:
        self._guard = Lock()
        self._locks: dict[str, Lock] = {}

    def lock_for(self, user_id: str) -> Lock:
        """Return the lock for ``user_id``, creating it on first use."""
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = Lock()
                self._locks[user_id] = lock
            return lock

    @contextmanager
    def hold(self, user_id: str) -> Iterator[None]:
        """Context manager that holds the user's lock."""
        with self.lock_for(user_id):
            yield
