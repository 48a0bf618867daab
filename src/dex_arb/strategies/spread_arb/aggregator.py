from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Mapping, Optional, Protocol

from dex_arb.connectors.venue_client import VenueClient
from dex_arb.core.errors import FetchError
from dex_arb.core.price_history import PriceHistory
from dex_arb.strategies.spread_arb.types import PriceObservation


class Logger(Protocol):
    def log_fetch_failure(self, venue: str, reason: str) -> None: ...


@dataclass
class PriceAggregator:
    """Fans one price request out to every venue and joins the results.

    Failures (exceptions, timeouts, unusable prices) are logged per venue and
    dropped; they never fail the poll. Successes are appended to the shared
    history before poll_all returns.
    """

    venues: Mapping[str, VenueClient]
    history: PriceHistory
    logger: Logger
    fetch_timeout_seconds: float = 2.0

    async def poll_all(self, pair: str) -> List[PriceObservation]:
        results = await asyncio.gather(
            *(self._fetch_one(venue, client, pair) for venue, client in self.venues.items())
        )
        return [obs for obs in results if obs is not None]

    async def _fetch_one(self, venue: str, client: VenueClient, pair: str) -> Optional[PriceObservation]:
        try:
            price = await self._fetch_price(venue, client, pair)
        except FetchError as e:
            self.logger.log_fetch_failure(e.venue, e.reason)
            return None

        obs = PriceObservation(venue=venue, pair=pair, price=price, observed_at=datetime.now(timezone.utc))
        self.history.append(obs)
        return obs

    async def _fetch_price(self, venue: str, client: VenueClient, pair: str) -> float:
        try:
            raw = await asyncio.wait_for(client.fetch_price(pair), timeout=self.fetch_timeout_seconds)
        except asyncio.TimeoutError as e:
            raise FetchError(venue, f"timed out after {self.fetch_timeout_seconds:.3f}s", e) from e
        except Exception as e:
            raise FetchError(venue, f"{type(e).__name__}: {e}", e) from e

        try:
            price = float(raw)
        except (TypeError, ValueError) as e:
            raise FetchError(venue, f"non-numeric price {raw!r}", e) from e

        if not math.isfinite(price) or price <= 0:
            raise FetchError(venue, f"invalid price {price!r}")

        return price
