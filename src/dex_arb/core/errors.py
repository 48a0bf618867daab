from __future__ import annotations

from typing import Optional


class ArbitrageError(Exception):
    """Base class for every error the arbitrage core reports."""


class FetchError(ArbitrageError):
    """A single venue failed to produce a usable price this cycle."""

    def __init__(self, venue: str, reason: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"{venue}: {reason}")
        self.venue = venue
        self.reason = reason
        self.cause = cause


class ExecutionError(ArbitrageError):
    """Base class for trade pair failures."""

    unhedged: bool = False

    def __init__(self, venue: str, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.venue = venue
        self.cause = cause


class VenueNotFound(ExecutionError):
    def __init__(self, venue: str) -> None:
        super().__init__(venue, f"venue not found: {venue}")


class BuyFailed(ExecutionError):
    def __init__(self, venue: str, cause: BaseException) -> None:
        super().__init__(venue, f"buy on {venue} failed: {cause}", cause)


class SellFailed(ExecutionError):
    """Sell leg failed after the buy leg was committed; inventory is unhedged."""

    unhedged = True

    def __init__(self, venue: str, buy_venue: str, cause: BaseException) -> None:
        super().__init__(venue, f"sell on {venue} failed after buy on {buy_venue} committed: {cause}", cause)
        self.buy_venue = buy_venue
