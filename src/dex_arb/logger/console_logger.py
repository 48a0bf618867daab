from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from dex_arb.strategies.spread_arb.types import ExecutionResult, OpportunitySignal


_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _ts() -> str:
    return datetime.now().strftime("%H:%M:%S")


@dataclass
class ConsoleLogger:
    log_level: str = "info"
    log_dir: str = "logs"
    log_file: str = "bot.log"
    title: str = "DEX SPREAD ARBITRAGE"

    console: Console = field(default_factory=lambda: Console(), init=False)
    file_logger: logging.Logger = field(default_factory=lambda: logging.getLogger("dex_arb"), init=False)

    _level: int = field(default=logging.INFO, init=False, repr=False)

    def __post_init__(self) -> None:
        self._level = _LEVELS.get(self.log_level.strip().lower(), logging.INFO)

        os.makedirs(self.log_dir, exist_ok=True)

        self.file_logger.setLevel(self._level)
        self.file_logger.propagate = False
        self.file_logger.handlers.clear()

        fh = logging.FileHandler(os.path.join(self.log_dir, self.log_file), encoding="utf-8")
        fh.setLevel(self._level)
        fh.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"))
        self.file_logger.addHandler(fh)

        self._print_header()

    def _print_header(self) -> None:
        self.console.print(Panel(Text(self.title, style="bold cyan"), expand=False, border_style="cyan"))

    def _log(self, level: int, message: str, *, style: Optional[str] = None) -> None:
        if level < self._level:
            return
        prefix = f"[{_ts()}] "
        if style:
            self.console.print(prefix + message, style=style, markup=False)
        else:
            self.console.print(prefix + message, markup=False)
        self.file_logger.log(level, message)

    def log_cycle_start(self, cycle: int, pair: str) -> None:
        self._log(logging.DEBUG, f"🔄 CYCLE START | cycle={cycle} pair={pair}", style="dim")

    def log_fetch_failure(self, venue: str, reason: str) -> None:
        self._log(logging.WARNING, f"⚠️ FETCH FAILED | venue={venue} reason={reason}", style="yellow")

    def log_opportunity(self, signal: OpportunitySignal) -> None:
        self._log(
            logging.INFO,
            f"🔍 OPPORTUNITY | buy_venue={signal.buy_venue} buy_price={signal.reference_price:.4f} "
            f"sell_venue={signal.sell_venue} sell_price={signal.sell_price:.4f} margin={signal.margin * 100:.3f}%",
            style="bold yellow",
        )

    def log_trade_success(self, result: ExecutionResult) -> None:
        self._log(
            logging.INFO,
            f"✅ TRADE OK | buy_venue={result.buy_venue} sell_venue={result.sell_venue} "
            f"amount={result.amount} time={result.operation_time:.2f}s",
            style="bold green",
        )

    def log_trade_failure(self, result: ExecutionResult) -> None:
        error_kind = type(result.error).__name__ if result.error is not None else "Unknown"
        message = (
            f"TRADE FAILED | kind={error_kind} buy_venue={result.buy_venue} "
            f"sell_venue={result.sell_venue} amount={result.amount} error={result.error}"
        )
        if result.unhedged:
            self.log_critical(message)
        else:
            self.log_error(message)

    def log_info(self, message: str) -> None:
        self._log(logging.INFO, message)

    def log_error(self, message: str) -> None:
        self._log(logging.ERROR, f"❌ {message}", style="bold red")

    def log_critical(self, message: str) -> None:
        self._log(logging.CRITICAL, f"🚨 {message}", style="bold white on red")

    def log_summary(self, cycles: int, trades: int, failures: int, unhedged: int, history_size: int) -> None:
        self._log(
            logging.INFO,
            f"📌 SUMMARY | cycles={cycles} trades={trades} failures={failures} "
            f"unhedged={unhedged} history={history_size}",
            style="bold cyan",
        )
