from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, List, Tuple


@dataclass
class CcxtVenueClient:
    """Venue backed by a ccxt exchange; venue_id is the ccxt exchange id (e.g. "kraken")."""

    venue_id: str
    api_key: str = ""
    api_secret: str = ""
    paper_trading: bool = True

    paper_orders: List[Tuple[str, str, float]] = field(default_factory=list, init=False)
    _exchange: Any = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        import ccxt.async_support as ccxt_async

        exchange_cls = getattr(ccxt_async, self.venue_id, None)
        if exchange_cls is None:
            raise ValueError(f"Unknown ccxt exchange id: {self.venue_id}")

        params: dict[str, Any] = {"enableRateLimit": True}
        if self.api_key and self.api_secret:
            params["apiKey"] = self.api_key
            params["secret"] = self.api_secret
        self._exchange = exchange_cls(params)

    async def fetch_price(self, pair: str) -> float:
        ticker = await self._exchange.fetch_ticker(pair)
        last = ticker.get("last")
        if last is None:
            raise ValueError(f"{self.venue_id} returned no last price for {pair}")
        return float(last)

    async def submit_order(self, pair: str, signed_amount: float) -> None:
        if signed_amount == 0:
            raise ValueError("signed_amount must be non-zero")

        side = "buy" if signed_amount > 0 else "sell"
        amount = abs(float(signed_amount))

        if self.paper_trading:
            self.paper_orders.append((f"paper-{uuid.uuid4().hex}", side, amount))
            return

        if not self.api_key or not self.api_secret:
            raise RuntimeError(f"API credentials are required for live trading on {self.venue_id}")

        await self._exchange.create_market_order(pair, side, amount)

    async def close(self) -> None:
        await self._exchange.close()
