"""Tests for the in-memory and JSON ledger stores."""

import json

import pytest

from tilechase.economy import LedgerSnapshot
from tilechase.persistence import InMemoryLedgerStore, JsonLedgerStore


def make_snapshot() -> LedgerSnapshot:
    return LedgerSnapshot(wear_ticks=60001, debt=1_000_100, lifetime_worn=60001, lifetime_paid=0)


@pytest.mark.asyncio
async def test_in_memory_store_round_trip():
    store = InMemoryLedgerStore()
    await store.initialize()

    assert await store.load() is None

    snapshot = make_snapshot()
    await store.save(snapshot)
    loaded = await store.load()

    assert loaded == snapshot
    assert loaded is not snapshot
    assert store.save_count == 1
    await store.close()


@pytest.mark.asyncio
async def test_in_memory_store_keeps_only_the_latest_snapshot():
    store = InMemoryLedgerStore(LedgerSnapshot(debt=5))

    assert (await store.load()).debt == 5

    await store.save(LedgerSnapshot(debt=7))
    await store.save(LedgerSnapshot(debt=0, lifetime_paid=7))

    assert await store.load() == LedgerSnapshot(debt=0, lifetime_paid=7)
    assert store.save_count == 2


@pytest.mark.asyncio
async def test_json_store_round_trip(tmp_path):
    path = tmp_path / "nested" / "ledger.json"
    store = JsonLedgerStore(path)
    await store.initialize()

    assert await store.load() is None

    snapshot = make_snapshot()
    await store.save(snapshot)

    payload = json.loads(path.read_text("utf-8"))
    assert payload["debt"] == 1_000_100

    reopened = JsonLedgerStore(str(path))
    await reopened.initialize()
    assert await reopened.load() == snapshot
    await reopened.close()


@pytest.mark.asyncio
async def test_json_store_rejects_invalid_counters(tmp_path):
    path = tmp_path / "ledger.json"
    path.write_text(json.dumps({"wear_ticks": -1}), "utf-8")
    store = JsonLedgerStore(path)

    with pytest.raises(ValueError):
        await store.load()
