from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from dex_arb.strategies.spread_arb.types import OpportunitySignal, PriceObservation


DEFAULT_THRESHOLD = 0.005


def detect(
    observations: Sequence[PriceObservation],
    threshold_fraction: float = DEFAULT_THRESHOLD,
) -> Optional[OpportunitySignal]:
    """Return a buy-low/sell-high signal when the cycle's spread beats the threshold.

    Scan order is input order: on equal prices the first venue seen wins,
    for both the minimum and the maximum. Needs at least two distinct venues.
    """

    if len({obs.venue for obs in observations}) < 2:
        return None

    cheapest = observations[0]
    dearest = observations[0]
    for obs in observations[1:]:
        if obs.price < cheapest.price:
            cheapest = obs
        if obs.price > dearest.price:
            dearest = obs

    # Several quotes from one venue can put both extremes on it.
    if cheapest.venue == dearest.venue:
        return None

    margin = (dearest.price - cheapest.price) / cheapest.price
    if margin <= threshold_fraction:
        return None

    return OpportunitySignal(
        buy_venue=cheapest.venue,
        sell_venue=dearest.venue,
        reference_price=cheapest.price,
        sell_price=dearest.price,
        margin=margin,
    )


@dataclass(frozen=True)
class SpreadDetector:
    threshold_fraction: float = DEFAULT_THRESHOLD

    def detect(self, observations: Sequence[PriceObservation]) -> Optional[OpportunitySignal]:
        return detect(observations, self.threshold_fraction)
