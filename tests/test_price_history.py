import asyncio
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest

from dex_arb.core.price_history import PriceHistory
from dex_arb.strategies.spread_arb.types import PriceObservation


def _obs(venue: str, price: float) -> PriceObservation:
    return PriceObservation(venue=venue, pair="ETH/USDC", price=price, observed_at=datetime.now(timezone.utc))


def test_append_keeps_arrival_order() -> None:
    history = PriceHistory()
    history.append(_obs("DEX2", 1001.0))
    history.append(_obs("DEX1", 999.0))

    assert [o.venue for o in history.snapshot()] == ["DEX2", "DEX1"]
    assert len(history) == 2


def test_snapshot_is_a_copy() -> None:
    history = PriceHistory()
    history.append(_obs("DEX1", 999.0))

    snap = history.snapshot()
    snap.clear()

    assert len(history) == 1


def test_latest_returns_most_recent_for_venue() -> None:
    history = PriceHistory()
    history.extend([_obs("DEX1", 999.0), _obs("DEX2", 1001.0), _obs("DEX1", 998.0)])

    latest = history.latest("DEX1")
    assert latest is not None
    assert latest.price == 998.0
    assert history.latest("DEX9") is None


def test_bounded_history_drops_oldest() -> None:
    history = PriceHistory(max_entries=3)
    for i in range(5):
        history.append(_obs("DEX1", 1000.0 + i))

    assert [o.price for o in history.snapshot()] == [1002.0, 1003.0, 1004.0]


def test_invalid_bound_rejected() -> None:
    with pytest.raises(ValueError):
        PriceHistory(max_entries=0)


def test_concurrent_thread_appends_lose_nothing() -> None:
    history = PriceHistory()
    n = 200

    with ThreadPoolExecutor(max_workers=32) as pool:
        list(pool.map(lambda i: history.append(_obs(f"V{i}", 1000.0 + i)), range(n)))

    assert len(history) == n
    assert {o.venue for o in history.snapshot()} == {f"V{i}" for i in range(n)}


def test_concurrent_task_appends_lose_nothing() -> None:
    history = PriceHistory()
    n = 64

    async def writer(i: int) -> None:
        await asyncio.sleep(0)
        history.append(_obs(f"V{i}", 1000.0 + i))

    async def run() -> None:
        await asyncio.gather(*(writer(i) for i in range(n)))

    asyncio.run(run())

    assert len(history) == n
