from __future__ import annotations

import random
from typing import Protocol


class RandomSource(Protocol):
    def random(self) -> float: ...

    def randrange(self, stop: int) -> int: ...


class EntropyEngine:
    """Randomness helpers behind an injectable source."""

    def __init__(self, source: RandomSource | None = None):
        self._source = source

    def draw_unit(self) -> float:
        """Uniform value in [0, 1)."""
        return float(self._resolve().random())

    def pick_index(self, size: int) -> int:
        if size <= 0:
            raise ValueError("cannot pick from an empty sequence")
        return int(self._resolve().randrange(size))

    def _resolve(self) -> RandomSource:
        # Without an injected source every draw uses a freshly seeded generator.
        if self._source is not None:
            return self._source
        return random.Random()
