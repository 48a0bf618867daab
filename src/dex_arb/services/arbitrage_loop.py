from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Mapping, Protocol

from dex_arb.connectors.venue_client import VenueClient
from dex_arb.core.bot_config import BotConfig
from dex_arb.core.price_history import PriceHistory
from dex_arb.strategies.spread_arb.aggregator import PriceAggregator
from dex_arb.strategies.spread_arb.detector import SpreadDetector
from dex_arb.strategies.spread_arb.executor import TradeExecutor
from dex_arb.strategies.spread_arb.types import CycleReport, ExecutionResult, OpportunitySignal, TradeLog


class Logger(Protocol):
    def log_cycle_start(self, cycle: int, pair: str) -> None: ...

    def log_fetch_failure(self, venue: str, reason: str) -> None: ...

    def log_opportunity(self, signal: OpportunitySignal) -> None: ...

    def log_trade_success(self, result: ExecutionResult) -> None: ...

    def log_trade_failure(self, result: ExecutionResult) -> None: ...

    def log_info(self, message: str) -> None: ...

    def log_error(self, message: str) -> None: ...

    def log_critical(self, message: str) -> None: ...


@dataclass
class ArbitrageLoopService:
    """Runs poll -> detect -> execute -> wait, one cycle at a time, until stopped.

    stop() takes effect between cycles: a cycle that has started always
    finishes, then the inter-cycle wait returns early and the loop exits.
    """

    venues: Mapping[str, VenueClient]
    config: BotConfig
    logger: Logger
    history: PriceHistory = field(default_factory=PriceHistory)

    aggregator: PriceAggregator = field(init=False)
    detector: SpreadDetector = field(init=False)
    executor: TradeExecutor = field(init=False)

    cycles: int = field(default=0, init=False)
    trades_ok: int = field(default=0, init=False)
    trades_failed: int = field(default=0, init=False)
    unhedged: int = field(default=0, init=False)

    _running: bool = field(default=False, init=False)
    _trade_logs: List[TradeLog] = field(default_factory=list, init=False)
    _stop_event: asyncio.Event | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.aggregator = PriceAggregator(
            self.venues,
            self.history,
            self.logger,
            fetch_timeout_seconds=self.config.fetch_timeout_seconds,
        )
        self.detector = SpreadDetector(threshold_fraction=self.config.profit_threshold)
        self.executor = TradeExecutor(self.venues, self.config.pair, self.logger)

    async def start(self) -> None:
        self._running = True
        self._stop_event = asyncio.Event()

        self.logger.log_info(
            f"Starting spread arbitrage | pair={self.config.pair} venues={','.join(self.venues)} "
            f"threshold={self.config.profit_threshold * 100:.2f}% interval={self.config.poll_interval_ms}ms "
            f"paper={self.config.paper_trading} mock={self.config.mock_mode}"
        )

        while self._running:
            try:
                await self.run_cycle()
            except Exception as e:
                self.logger.log_error(f"cycle error: {type(e).__name__}: {e}")

            if not self._running:
                break

            # Allow stop() to interrupt the wait.
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.config.poll_interval_seconds)
            except asyncio.TimeoutError:
                pass

    async def run_cycle(self) -> CycleReport:
        self.cycles += 1
        cycle = self.cycles
        self.logger.log_cycle_start(cycle, self.config.pair)

        observations = await self.aggregator.poll_all(self.config.pair)

        signal = self.detector.detect(observations)
        if signal is None:
            return CycleReport(cycle=cycle, observations=len(observations))

        self.logger.log_opportunity(signal)

        result = await self.executor.execute(signal.buy_venue, signal.sell_venue, self.config.trade_amount)
        self._record(signal, result)

        if result.success:
            self.trades_ok += 1
            self.logger.log_trade_success(result)
        else:
            self.trades_failed += 1
            if result.unhedged:
                self.unhedged += 1
            self.logger.log_trade_failure(result)

        return CycleReport(cycle=cycle, observations=len(observations), signal=signal, result=result)

    def stop(self) -> None:
        self._running = False
        if self._stop_event is not None:
            self._stop_event.set()
        self.logger.log_info("Stopping after current cycle...")

    @property
    def running(self) -> bool:
        return self._running

    def get_trade_logs(self) -> List[TradeLog]:
        return list(self._trade_logs)

    def _record(self, signal: OpportunitySignal, result: ExecutionResult) -> None:
        self._trade_logs.append(
            TradeLog(
                timestamp=datetime.now(timezone.utc),
                buy_venue=result.buy_venue,
                sell_venue=result.sell_venue,
                amount=result.amount,
                reference_price=signal.reference_price,
                margin=signal.margin,
                success=result.success,
                operation_time=result.operation_time,
            )
        )
