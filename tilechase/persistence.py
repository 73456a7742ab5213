"""
LedgerStore interface for pluggable storage of hook and debt counters.

Persistence is OPTIONAL - a session can run entirely in-memory with no file
system dependencies.

Two included implementations:
1. InMemoryLedgerStore - attribute storage, data lost on exit (testing, prototyping)
2. JsonLedgerStore - a single human-readable JSON file

Usage pattern:
    store = JsonLedgerStore("ledger.json")
    await store.initialize()
    snapshot = await store.load()        # None on first run
    await store.save(ledger.snapshot())
    await store.close()
"""

import asyncio
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .config import Config
from .economy import LedgerSnapshot


class LedgerStore(ABC):
    """Abstract base class for ledger persistence.

    All methods are async so file or network backends never block the tick
    loop; for the in-memory store they are effectively no-ops.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend (create directories, open connections)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release any resources held by the backend."""
        pass

    @abstractmethod
    async def save(self, snapshot: LedgerSnapshot) -> None:
        """Persist the latest counters, replacing any earlier snapshot."""
        pass

    @abstractmethod
    async def load(self) -> Optional[LedgerSnapshot]:
        """Return the last saved counters, or None if nothing was saved."""
        pass


class InMemoryLedgerStore(LedgerStore):
    """Keeps the latest snapshot in memory. Also counts saves for diagnostics."""

    def __init__(self, snapshot: Optional[LedgerSnapshot] = None):
        self._snapshot = snapshot
        self.save_count = 0

    async def initialize(self) -> None:
        return None

    async def close(self) -> None:
        return None

    async def save(self, snapshot: LedgerSnapshot) -> None:
        self._snapshot = snapshot.model_copy()
        self.save_count += 1

    async def load(self) -> Optional[LedgerSnapshot]:
        if self._snapshot is None:
            return None
        return self._snapshot.model_copy()


class JsonLedgerStore(LedgerStore):
    """Stores the snapshot as pretty-printed JSON in a single file.

    File I/O runs in a thread (asyncio.to_thread) so saves do not stall the
    tick loop. A missing file means "never saved".
    """

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path or Config.LEDGER_PATH)

    async def initialize(self) -> None:
        await asyncio.to_thread(self.path.parent.mkdir, parents=True, exist_ok=True)

    async def close(self) -> None:
        # Nothing to clean up for JSON persistence
        return None

    async def save(self, snapshot: LedgerSnapshot) -> None:
        payload = snapshot.model_dump(mode="json")
        await asyncio.to_thread(
            self.path.write_text, json.dumps(payload, indent=2), "utf-8"
        )

    async def load(self) -> Optional[LedgerSnapshot]:
        if not self.path.exists():
            return None

        text = await asyncio.to_thread(self.path.read_text, "utf-8")
        return LedgerSnapshot.model_validate(json.loads(text))
