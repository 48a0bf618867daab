from __future__ import annotations

from typing import Dict, Protocol

from dex_arb.connectors.ccxt_venue import CcxtVenueClient
from dex_arb.connectors.simulated_venue import SimulatedVenueClient
from dex_arb.core.bot_config import BotConfig


class VenueClient(Protocol):
    """What the arbitrage core needs from a trading venue.

    fetch_price returns the current price or raises. submit_order takes a
    signed amount: positive buys, negative sells.
    """

    venue_id: str

    async def fetch_price(self, pair: str) -> float: ...

    async def submit_order(self, pair: str, signed_amount: float) -> None: ...

    async def close(self) -> None: ...


def build_venue_clients(cfg: BotConfig) -> Dict[str, VenueClient]:
    clients: Dict[str, VenueClient] = {}

    for venue in cfg.venues:
        if cfg.mock_mode:
            clients[venue] = SimulatedVenueClient(
                venue_id=venue,
                base_price=cfg.mock_base_price,
                failure_rate=cfg.mock_failure_rate,
            )
        else:
            api_key, api_secret = cfg.api_credentials.get(venue, ("", ""))
            clients[venue] = CcxtVenueClient(
                venue_id=venue,
                api_key=api_key,
                api_secret=api_secret,
                paper_trading=cfg.paper_trading,
            )

    return clients
