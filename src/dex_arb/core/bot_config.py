from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv


_LOG_LEVELS = {"debug", "info", "warning", "error"}


def _getenv_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _getenv_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return float(raw)


def _getenv_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return int(raw)


def _getenv_list(name: str, default: str) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        raw = default
    return tuple(part.strip() for part in raw.split(","))


def _credentials_for(venues: Tuple[str, ...]) -> Dict[str, Tuple[str, str]]:
    creds: Dict[str, Tuple[str, str]] = {}
    for venue in venues:
        prefix = venue.upper().replace("-", "_").replace(".", "_")
        creds[venue] = (os.getenv(f"{prefix}_API_KEY", ""), os.getenv(f"{prefix}_API_SECRET", ""))
    return creds


@dataclass(frozen=True)
class BotConfig:
    """Static startup config for the spread arbitrage loop."""

    venues: Tuple[str, ...]
    pair: str

    poll_interval_ms: int
    profit_threshold: float
    fetch_timeout_ms: int
    trade_amount: float
    history_max_entries: int

    mock_mode: bool
    paper_trading: bool
    mock_base_price: float
    mock_failure_rate: float

    log_level: str
    log_dir: str

    api_credentials: Dict[str, Tuple[str, str]] = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, dotenv_path: Optional[str] = None) -> "BotConfig":
        load_dotenv(dotenv_path=dotenv_path)

        venues = _getenv_list("VENUES", "DEX1,DEX2,DEX3")

        return cls(
            venues=venues,
            pair=os.getenv("TRADING_PAIR", "ETH/USDC").strip(),
            poll_interval_ms=_getenv_int("POLL_INTERVAL_MS", 100),
            profit_threshold=_getenv_float("PROFIT_THRESHOLD", 0.005),
            fetch_timeout_ms=_getenv_int("FETCH_TIMEOUT_MS", 2_000),
            trade_amount=_getenv_float("TRADE_AMOUNT", 1.0),
            history_max_entries=_getenv_int("HISTORY_MAX_ENTRIES", 0),
            mock_mode=_getenv_bool("MOCK_MODE", True),
            paper_trading=_getenv_bool("PAPER_TRADING", True),
            mock_base_price=_getenv_float("MOCK_BASE_PRICE", 1_000.0),
            mock_failure_rate=_getenv_float("MOCK_FAILURE_RATE", 0.0),
            log_level=os.getenv("LOG_LEVEL", "info").strip().lower(),
            log_dir=os.getenv("LOG_DIR", "logs"),
            api_credentials=_credentials_for(venues),
        )

    def validate(self) -> None:
        if any(not v for v in self.venues):
            raise ValueError("VENUES must not contain empty venue ids")
        if len(set(self.venues)) != len(self.venues):
            raise ValueError("VENUES must not contain duplicates")
        if len(self.venues) < 2:
            raise ValueError("VENUES must list at least 2 venues")
        if not self.pair:
            raise ValueError("TRADING_PAIR must not be empty")
        if self.poll_interval_ms <= 0:
            raise ValueError("POLL_INTERVAL_MS must be > 0")
        if self.profit_threshold < 0:
            raise ValueError("PROFIT_THRESHOLD must be >= 0")
        if self.fetch_timeout_ms <= 0:
            raise ValueError("FETCH_TIMEOUT_MS must be > 0")
        if self.trade_amount <= 0:
            raise ValueError("TRADE_AMOUNT must be > 0")
        if self.history_max_entries < 0:
            raise ValueError("HISTORY_MAX_ENTRIES must be >= 0")
        if self.mock_base_price <= 0:
            raise ValueError("MOCK_BASE_PRICE must be > 0")
        if not (0.0 <= self.mock_failure_rate <= 1.0):
            raise ValueError("MOCK_FAILURE_RATE must be in [0, 1]")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}")

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000.0

    @property
    def fetch_timeout_seconds(self) -> float:
        return self.fetch_timeout_ms / 1000.0
