# selector.py
# Random pick of two distinct providers; randomness is injected so tests can pin it.

from __future__ import annotations
import random
from typing import Protocol

from providers.registry import ModelRegistry


class RandomSource(Protocol):
    def next_index(self, bound: int) -> int:
        """Return an int in [0, bound)."""
        ...


class SystemRandomSource:
    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def next_index(self, bound: int) -> int:
        return self._rng.randrange(bound)


class RandomPairSelector:
    def __init__(self, registry: ModelRegistry, rng: RandomSource | None = None):
        if len(registry) < 2:
            raise ValueError("pair selection needs at least 2 registered providers")
        self.registry = registry
        self.rng = rng or SystemRandomSource()

    def _draw(self, pool: list[str]) -> str:
        i = self.rng.next_index(len(pool))
        if not 0 <= i < len(pool):
            raise ValueError(f"random source returned {i} for bound {len(pool)}")
        return pool.pop(i)

    def select_pair(self) -> tuple[str, str]:
        # without replacement: the first pick leaves the pool
        pool = self.registry.list_providers()
        first = self._draw(pool)
        second = self._draw(pool)
        return first, second
