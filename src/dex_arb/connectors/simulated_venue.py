from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class SimulatedVenueClient:
    """In-process venue that quotes a noisy price around base_price."""

    venue_id: str
    base_price: float = 1_000.0
    variation: float = 5.0
    failure_rate: float = 0.0
    fetch_delay_seconds: float = 0.05
    order_delay_seconds: float = 0.1
    seed: Optional[int] = None

    orders: List[Tuple[str, float]] = field(default_factory=list, init=False)
    _rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    async def fetch_price(self, pair: str) -> float:
        await asyncio.sleep(self.fetch_delay_seconds)

        if self.failure_rate > 0 and self._rng.random() < self.failure_rate:
            raise ConnectionError(f"simulated outage on {self.venue_id}")

        return self.base_price + self._rng.uniform(-self.variation, self.variation)

    async def submit_order(self, pair: str, signed_amount: float) -> None:
        if signed_amount == 0:
            raise ValueError("signed_amount must be non-zero")

        await asyncio.sleep(self.order_delay_seconds)
        self.orders.append((pair, float(signed_amount)))

    async def close(self) -> None:
        return
