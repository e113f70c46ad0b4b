"""
Intensity sampler.

Draws one intensity level per call from a fixed, ordered
probability distribution.
"""

from __future__ import annotations

import math
import random
from enum import Enum
from typing import Any, Sequence

from pikablast.config import INTENSITY_WEIGHTS, WEIGHT_TOLERANCE
from pikablast.errors import InvalidCategory


class Intensity(str, Enum):
    """Blast intensity level. Values are the lowercase wire names."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"

    @classmethod
    def parse(cls, value: Any) -> "Intensity":
        """Return the level named by *value* or raise ``InvalidCategory``."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidCategory(value)
        try:
            return cls(value)
        except ValueError:
            raise InvalidCategory(value) from None


Distribution = tuple[tuple[Intensity, float], ...]


def make_distribution(weights: Sequence[tuple[Any, float]]) -> Distribution:
    """
    Validate *weights* and freeze them into a ``Distribution``.

    Raises ``ValueError`` for an empty sequence, duplicate levels,
    negative or non-finite weights, or weights that do not sum to 1.0.
    """
    if not weights:
        raise ValueError("distribution must not be empty")

    pairs: list[tuple[Intensity, float]] = []
    seen: set[Intensity] = set()
    for name, weight in weights:
        level = Intensity(name)
        if level in seen:
            raise ValueError(f"duplicate intensity in distribution: {level.value}")
        if not math.isfinite(weight) or weight < 0:
            raise ValueError(f"weight for {level.value} must be a non-negative real number, got {weight}")
        seen.add(level)
        pairs.append((level, float(weight)))

    total = sum(w for _, w in pairs)
    if not math.isclose(total, 1.0, rel_tol=0.0, abs_tol=WEIGHT_TOLERANCE):
        raise ValueError(f"weights must sum to 1.0, got {total}")
    return tuple(pairs)


DEFAULT_DISTRIBUTION: Distribution = make_distribution(INTENSITY_WEIGHTS)


def pick(distribution: Distribution, r: float) -> Intensity:
    """Return the first level whose cumulative weight reaches *r*."""
    cumulative = 0.0
    for level, weight in distribution:
        cumulative += weight
        if cumulative >= r:
            return level
    # Float drift can leave the running sum just short of r
    return distribution[-1][0]


class IntensitySampler:
    """Weighted intensity selection over an injected random source."""

    def __init__(
        self,
        distribution: Distribution = DEFAULT_DISTRIBUTION,
        rng: random.Random | None = None,
    ) -> None:
        self.distribution = distribution
        self._rng = rng if rng is not None else random.Random()

    def sample(self) -> Intensity:
        return pick(self.distribution, self._rng.random())

    @property
    def probabilities(self) -> dict[str, float]:
        return {level.value: weight for level, weight in self.distribution}
