from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from dex_arb.core.errors import ExecutionError


VenueId = str


@dataclass(frozen=True)
class PriceObservation:
    """One successful price fetch from one venue."""

    venue: VenueId
    pair: str
    price: float
    observed_at: datetime


@dataclass(frozen=True)
class OpportunitySignal:
    buy_venue: VenueId
    sell_venue: VenueId
    reference_price: float
    sell_price: float
    margin: float


@dataclass(frozen=True)
class ExecutionResult:
    buy_venue: VenueId
    sell_venue: VenueId
    amount: float
    success: bool
    error: Optional[ExecutionError] = None
    operation_time: float = 0.0

    @property
    def unhedged(self) -> bool:
        return self.error is not None and self.error.unhedged


@dataclass(frozen=True)
class TradeLog:
    timestamp: datetime
    buy_venue: VenueId
    sell_venue: VenueId
    amount: float
    reference_price: float
    margin: float
    success: bool
    operation_time: float


@dataclass(frozen=True)
class CycleReport:
    cycle: int
    observations: int
    signal: Optional[OpportunitySignal] = None
    result: Optional[ExecutionResult] = None
