from __future__ import annotations

import random
from typing import Protocol


class RandomSource(Protocol):
    def uniform_int(self, n: int) -> int:
        """Return an integer drawn uniformly from [0, n)."""
        ...


class PyRandomSource:
    """RandomSource backed by ``random.Random``.

    ``randrange`` draws with rejection sampling over ``getrandbits``, so there
    is no modulo bias for any ``n``.
    """

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng

    def uniform_int(self, n: int) -> int:
        if n <= 0:
            raise ValueError(f"uniform_int requires n >= 1, got {n}.")
        return self.rng.randrange(n)


def resolve_random_source(seed: int | None) -> PyRandomSource:
    if seed is None:
        return PyRandomSource(random.SystemRandom())
    return PyRandomSource(random.Random(seed))


def stratum_random_source(seed: int | None, key: str) -> PyRandomSource:
    # One stream per stratum: results must not depend on worker scheduling.
    if seed is None:
        return PyRandomSource(random.SystemRandom())
    return PyRandomSource(random.Random(f"{seed}:{key}"))
