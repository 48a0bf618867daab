import asyncio
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pytest

from dex_arb.core.errors import BuyFailed, SellFailed, VenueNotFound
from dex_arb.strategies.spread_arb.executor import TradeExecutor


@dataclass
class StubLogger:
    infos: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    criticals: List[str] = field(default_factory=list)

    def log_info(self, message: str) -> None:
        self.infos.append(message)

    def log_error(self, message: str) -> None:
        self.errors.append(message)

    def log_critical(self, message: str) -> None:
        self.criticals.append(message)


class MockVenue:
    def __init__(self, venue_id: str, journal: List[Tuple[str, str, float]], error: Optional[Exception] = None, delay: float = 0.0):
        self.venue_id = venue_id
        self.journal = journal
        self.error = error
        self.delay = delay
        self.calls = 0

    async def fetch_price(self, pair: str) -> float:
        return 1000.0

    async def submit_order(self, pair: str, signed_amount: float) -> None:
        self.calls += 1
        self.journal.append(("start", self.venue_id, signed_amount))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.journal.append(("done", self.venue_id, signed_amount))

    async def close(self) -> None:
        return


def _executor(buy_error=None, sell_error=None, delay: float = 0.0):
    journal: List[Tuple[str, str, float]] = []
    buy = MockVenue("DEX1", journal, error=buy_error, delay=delay)
    sell = MockVenue("DEX2", journal, error=sell_error, delay=delay)
    logger = StubLogger()
    executor = TradeExecutor({"DEX1": buy, "DEX2": sell}, "ETH/USDC", logger)
    return executor, buy, sell, journal, logger


def test_successful_pair_buys_then_sells() -> None:
    executor, buy, sell, journal, logger = _executor(delay=0.02)

    result = asyncio.run(executor.execute("DEX1", "DEX2", 2.5))

    assert result.success
    assert result.error is None
    assert not result.unhedged
    assert journal == [
        ("start", "DEX1", 2.5),
        ("done", "DEX1", 2.5),
        ("start", "DEX2", -2.5),
        ("done", "DEX2", -2.5),
    ]
    assert buy.calls == 1 and sell.calls == 1
    assert logger.errors == [] and logger.criticals == []


def test_failed_buy_never_attempts_sell() -> None:
    executor, buy, sell, _, logger = _executor(buy_error=ConnectionError("rejected"))

    result = asyncio.run(executor.execute("DEX1", "DEX2", 1.0))

    assert not result.success
    assert isinstance(result.error, BuyFailed)
    assert isinstance(result.error.cause, ConnectionError)
    assert not result.unhedged
    assert buy.calls == 1
    assert sell.calls == 0
    assert len(logger.errors) == 1
    assert logger.criticals == []


def test_failed_sell_reports_unhedged_state() -> None:
    executor, buy, sell, _, logger = _executor(sell_error=RuntimeError("insufficient liquidity"))

    result = asyncio.run(executor.execute("DEX1", "DEX2", 1.0))

    assert not result.success
    assert isinstance(result.error, SellFailed)
    assert result.error.buy_venue == "DEX1"
    assert result.unhedged
    assert buy.calls == 1 and sell.calls == 1
    assert len(logger.criticals) == 1
    assert "UNHEDGED" in logger.criticals[0]


@pytest.mark.parametrize("buy_venue,sell_venue,missing", [("NOPE", "DEX2", "NOPE"), ("DEX1", "NOPE", "NOPE")])
def test_unknown_venue_fails_without_network_calls(buy_venue: str, sell_venue: str, missing: str) -> None:
    executor, buy, sell, journal, _ = _executor()

    result = asyncio.run(executor.execute(buy_venue, sell_venue, 1.0))

    assert not result.success
    assert isinstance(result.error, VenueNotFound)
    assert result.error.venue == missing
    assert buy.calls == 0 and sell.calls == 0
    assert journal == []


def test_non_positive_amount_is_rejected() -> None:
    executor, buy, sell, _, _ = _executor()

    with pytest.raises(ValueError):
        asyncio.run(executor.execute("DEX1", "DEX2", 0.0))

    assert buy.calls == 0 and sell.calls == 0
