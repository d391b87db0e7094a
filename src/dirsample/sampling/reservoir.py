"""Single-pass uniform sampling of a fixed number of items.

Reservoir sampling keeps ``capacity`` slots. The first ``capacity`` items fill
the slots in order; the ``i``-th item after that (1-indexed over the whole
stream) replaces slot ``j`` when a draw ``j`` from ``[0, i)`` lands below
``capacity``. Every item of a stream of length ``m >= capacity`` ends up in
the reservoir with probability ``capacity / m``, without knowing ``m`` in
advance and with O(capacity) memory.

Streams shorter than ``capacity`` leave trailing slots unfilled. Those slots
hold the ``None`` sentinel under the ``pad`` policy; the ``strict`` policy
rejects such a stream instead.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generic, Iterable, TypeVar

from ..errors import InsufficientItemsError
from .random_source import RandomSource

PAD = "pad"
STRICT = "strict"
SHORT_STRATUM_POLICIES = (PAD, STRICT)

FILLING = "filling"
REPLACING = "replacing"
DRAINED = "drained"

T = TypeVar("T")


class ReservoirSampler(Generic[T]):
    def __init__(self, capacity: int, random_source: RandomSource) -> None:
        if capacity < 0:
            raise ValueError(f"Reservoir capacity must be >= 0, got {capacity}.")
        self.capacity = capacity
        self.random_source = random_source
        self.seen = 0
        self._slots: list[T | None] = [None] * capacity
        self._drained = False

    @property
    def state(self) -> str:
        if self._drained:
            return DRAINED
        return FILLING if self.seen < self.capacity else REPLACING

    def offer(self, item: T) -> None:
        if self._drained:
            raise RuntimeError("Cannot offer items to a drained reservoir.")
        self.seen += 1
        if self.seen <= self.capacity:
            self._slots[self.seen - 1] = item
            return
        if self.capacity == 0:
            return

        j = self.random_source.uniform_int(self.seen)
        if j < self.capacity:
            self._slots[j] = item

    def drain(self, policy: str = PAD, stratum: Path | None = None) -> list[T | None]:
        """End the stream and return the slots, sentinels included."""
        if policy not in SHORT_STRATUM_POLICIES:
            raise ValueError(f"Unknown short-stratum policy '{policy}'; expected pad|strict.")
        self._drained = True
        if policy == STRICT and self.seen < self.capacity:
            raise InsufficientItemsError(stratum=stratum, found=self.seen, required=self.capacity)
        return list(self._slots)


def reservoir_sample(
    items: Iterable[T],
    capacity: int,
    random_source: RandomSource,
    policy: str = PAD,
    stratum: Path | None = None,
) -> tuple[list[T | None], int]:
    """Consume ``items`` once; return the drained slots and the number of items seen."""
    sampler: ReservoirSampler[T] = ReservoirSampler(capacity, random_source)
    for item in items:
        sampler.offer(item)
    return sampler.drain(policy=policy, stratum=stratum), sampler.seen


def filled_slots(slots: Iterable[T | None]) -> list[T]:
    return [slot for slot in slots if slot is not None]
