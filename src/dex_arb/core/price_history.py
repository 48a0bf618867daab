from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, List, Optional

from dex_arb.strategies.spread_arb.types import PriceObservation, VenueId


@dataclass
class PriceHistory:
    """Append-only log of observed prices shared by the fetch tasks of a cycle.

    Entries keep arrival order. Every append holds the lock only for the
    append itself; readers get a copy through snapshot().

    max_entries=None keeps everything for the process lifetime. A positive
    bound turns the log into a ring buffer that drops the oldest entries.
    """

    max_entries: Optional[int] = None

    _entries: Deque[PriceObservation] = field(init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.max_entries is not None and self.max_entries <= 0:
            raise ValueError("max_entries must be > 0 (or None for unbounded)")
        self._entries = deque(maxlen=self.max_entries)

    def append(self, observation: PriceObservation) -> None:
        with self._lock:
            self._entries.append(observation)

    def extend(self, observations: Iterable[PriceObservation]) -> None:
        items = list(observations)
        with self._lock:
            self._entries.extend(items)

    def snapshot(self) -> List[PriceObservation]:
        with self._lock:
            return list(self._entries)

    def latest(self, venue: VenueId) -> Optional[PriceObservation]:
        with self._lock:
            for obs in reversed(self._entries):
                if obs.venue == venue:
                    return obs
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
