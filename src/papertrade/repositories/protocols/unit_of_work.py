"""Unit of work protocol."""

from typing import Protocol


class UnitOfWork(Protocol):
    """
    Groups account and lot writes into one atomic commit.

    ``commit`` raises PersistenceError after rolling back when the store
    rejects the write; ``rollback`` discards everything staged so far.
    """

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...
