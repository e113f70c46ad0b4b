"""
Score ledger.

In-memory per-intensity blast counters. Counts reset on restart.
"""

from __future__ import annotations

import threading
from typing import Any, Mapping

from pikablast.services.intensity import Intensity, IntensitySampler


class ScoreLedger:
    """
    Thread-safe counter map keyed by ``Intensity``.

    A single lock guards the whole map; every operation is O(1).
    """

    def __init__(
        self,
        sampler: IntensitySampler | None = None,
        initial: Mapping[Any, int] | None = None,
    ) -> None:
        self.sampler = sampler if sampler is not None else IntensitySampler()
        self._lock = threading.Lock()
        self._counts: dict[Intensity, int] = {level: 0 for level in Intensity}

        for name, count in (initial or {}).items():
            if count < 0:
                raise ValueError(f"initial count for {name} must be >= 0")
            self._counts[Intensity.parse(name)] = int(count)

    def _snapshot(self) -> dict[str, int]:
        return {level.value: count for level, count in self._counts.items()}

    def snapshot(self) -> dict[str, int]:
        """Return a copy of the current counts for all levels."""
        with self._lock:
            return self._snapshot()

    def record(self, intensity: Any) -> dict[str, int]:
        """
        Increment the counter for a caller-chosen *intensity*.

        Raises ``InvalidCategory`` without touching the counts when
        *intensity* is not one of the known levels.
        """
        level = Intensity.parse(intensity)
        with self._lock:
            self._counts[level] += 1
            return self._snapshot()

    def record_one(self) -> tuple[Intensity, dict[str, int]]:
        """Sample a level, increment it, and return it with the new counts."""
        level = self.sampler.sample()
        return level, self.record(level)

    @property
    def total(self) -> int:
        with self._lock:
            return sum(self._counts.values())
