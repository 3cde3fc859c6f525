from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ContextManager, Protocol


@dataclass(frozen=True)
class Transaction:
    """Handle for one open database transaction.

    Stores receive it on every call instead of opening their own connection, so
    all reads and writes of a use case commit or roll back together.
    """

    conn: Any
    cursor: Any


class TransactionManager(Protocol):
    def begin(self) -> ContextManager[Transaction]:
        """Open a transaction; commit on normal exit, roll back if the block raises."""

        raise NotImplementedError
