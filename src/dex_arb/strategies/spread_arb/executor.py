from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Mapping, Protocol

from dex_arb.connectors.venue_client import VenueClient
from dex_arb.core.errors import BuyFailed, ExecutionError, SellFailed, VenueNotFound
from dex_arb.strategies.spread_arb.types import ExecutionResult


class Logger(Protocol):
    def log_info(self, message: str) -> None: ...

    def log_error(self, message: str) -> None: ...

    def log_critical(self, message: str) -> None: ...


@dataclass
class TradeExecutor:
    venues: Mapping[str, VenueClient]
    pair: str
    logger: Logger

    async def execute(self, buy_venue: str, sell_venue: str, amount: float) -> ExecutionResult:
        if amount <= 0:
            raise ValueError("amount must be > 0")

        started = time.monotonic()

        try:
            await self._execute_pair(buy_venue, sell_venue, amount)
        except ExecutionError as e:
            elapsed = time.monotonic() - started
            if e.unhedged:
                self.logger.log_critical(
                    f"UNHEDGED buy_venue={buy_venue} sell_venue={sell_venue} amount={amount} pair={self.pair} error={e}"
                )
            else:
                self.logger.log_error(f"Trade pair failed: {e} ({elapsed:.2f}s)")
            return ExecutionResult(
                buy_venue=buy_venue,
                sell_venue=sell_venue,
                amount=amount,
                success=False,
                error=e,
                operation_time=elapsed,
            )

        elapsed = time.monotonic() - started
        self.logger.log_info(
            f"EXECUTED pair={self.pair} buy_venue={buy_venue} sell_venue={sell_venue} amount={amount} time={elapsed:.2f}s"
        )
        return ExecutionResult(
            buy_venue=buy_venue,
            sell_venue=sell_venue,
            amount=amount,
            success=True,
            operation_time=elapsed,
        )

    async def _execute_pair(self, buy_venue: str, sell_venue: str, amount: float) -> None:
        buyer = self.venues.get(buy_venue)
        if buyer is None:
            raise VenueNotFound(buy_venue)
        seller = self.venues.get(sell_venue)
        if seller is None:
            raise VenueNotFound(sell_venue)

        # The sell leg must not be sent until the buy leg has settled.
        try:
            await buyer.submit_order(self.pair, amount)
        except Exception as e:
            raise BuyFailed(buy_venue, e) from e

        try:
            await seller.submit_order(self.pair, -amount)
        except Exception as e:
            raise SellFailed(sell_venue, buy_venue, e) from e
