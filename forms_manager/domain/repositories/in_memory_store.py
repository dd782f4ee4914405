"""
In-memory document store for Tier-1 tests and database-less development.

Real transaction semantics: ``transaction()`` snapshots every table and
restores the snapshot if the block raises, so a failed operation leaves no
partial writes behind. Transactions run one at a time, so a rollback can
only ever undo its own writes.
"""

import asyncio
import copy
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Tuple


@dataclass
class InMemoryTables:
    """The session handle passed to in-memory repositories."""
    metadata: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    definitions: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    versions: List[Dict[str, Any]] = field(default_factory=list)
    secrets: Dict[Tuple[str, str], str] = field(default_factory=dict)


class InMemoryDatabase:
    """Drop-in for ``PostgresDatabase`` backed by plain dicts."""

    def __init__(self):
        self.tables = InMemoryTables()
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[InMemoryTables]:
        yield self.tables

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[InMemoryTables]:
        async with self._lock:
            snapshot = copy.deepcopy(self.tables)
            try:
                yield self.tables
            except BaseException:
                # Restore in place so handles held by callers stay valid
                self.tables.__dict__.update(snapshot.__dict__)
                raise

    async def dispose(self) -> None:
        self.tables = InMemoryTables()
