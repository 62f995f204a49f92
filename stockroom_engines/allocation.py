"""
Module: stockroom_engines.allocation
Responsibility:
    Choose an anchor slot for an item using a pluggable search strategy.
    Two strategies are provided: a stateful round-robin scan and a
    stateless greedy (nearest-to-origin) search.

Architecture position:
    Engines -- pure search layer, zero I/O.
    May only import stockroom_kernel and sibling engine modules.

Invariants enforced:
    - Legality comes only from stockroom_engines.availability; strategies
      differ in search order, never in what they accept.
    - Round-robin progress: successive successes (without removals) never
      move backwards in lexicographic order; exhaustion resets the cursor.
    - Greedy minimality: the returned anchor has minimum Manhattan distance
      from the origin among all acceptable anchors.

Failure modes:
    - alloc returns None when no acceptable anchor exists; the ledger turns
      that into FailedAllocationError.
    - create_allocator raises ValueError for an unknown strategy name.

Usage:
    from stockroom_engines.allocation import GreedyAllocator, RoundRobinAllocator

    allocator = RoundRobinAllocator()
    anchor = allocator.alloc(item=item, occupancy=ledger.occupancy)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from itertools import permutations
from typing import ClassVar

from stockroom_engines.availability import is_acceptable, is_available
from stockroom_engines.tracer import traced_engine
from stockroom_kernel.domain.items import Item
from stockroom_kernel.domain.occupancy import OccupancyView
from stockroom_kernel.domain.values import ORIGIN, Slot
from stockroom_kernel.logging_config import get_logger

logger = get_logger("engines.allocation")


class AllocationStrategy(ABC):
    """
    Common contract of every allocation strategy.

    Contract:
        ``alloc`` proposes an anchor or returns None.  It may update the
        strategy's own search state, and nothing else.
    Guarantees:
        - Any returned anchor satisfies is_available and the item's category
          constraint against the occupancy passed in.
    Non-goals:
        - Does not commit anything; the ledger owns all placement state.
    """

    name: ClassVar[str] = "abstract"

    @abstractmethod
    def alloc(self, item: Item, occupancy: OccupancyView) -> Slot | None:
        """Return an acceptable anchor for ``item`` or None."""
        ...

    def is_available(self, slot: Slot, item: Item, occupancy: OccupancyView) -> bool:
        return is_available(slot, item, occupancy)

    def reset(self) -> None:
        """Forget any search state."""

    def describe(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        return self.describe()


class RoundRobinAllocator(AllocationStrategy):
    """
    Resume scanning from the last successful anchor.

    Scans slots in lexicographic order starting at the cursor (or the
    origin when there is none) and takes the first acceptable one.  Space
    freed behind the cursor is not reclaimed until a failed search resets
    the cursor to the origin.
    """

    name: ClassVar[str] = "round_robin"

    def __init__(self) -> None:
        self._cursor: Slot | None = None

    @property
    def cursor(self) -> Slot | None:
        """Last successful anchor, or None before the first success."""
        return self._cursor

    @traced_engine("round_robin", "1.0", fingerprint_fields=("item",))
    def alloc(self, item: Item, occupancy: OccupancyView) -> Slot | None:
        start = self._cursor or ORIGIN
        for slot in occupancy.grid.slots_from(start):
            if is_acceptable(slot, item, occupancy):
                self._cursor = slot
                return slot

        logger.debug(
            "round_robin_exhausted",
            extra={"start": str(start), "item_id": item.item_id},
        )
        # failed search, restart from the origin next time
        self._cursor = None
        return None

    def reset(self) -> None:
        self._cursor = None

    def describe(self) -> str:
        return f"RoundRobinAllocator(cursor={self._cursor})"


def slots_by_distance(distance: int, extent: int) -> Iterator[Slot]:
    """
    Every in-grid slot whose components sum to ``distance``.

    Builds each triple (i, j, distance - i - j), expands it into all its
    orderings and drops repeats, so every coordinate is produced exactly
    once.  Triples with a component >= ``extent`` are skipped.
    """
    seen: set[tuple[int, int, int]] = set()
    for i in range(distance + 1):
        for j in range(distance - i + 1):
            k = distance - i - j
            for perm in permutations((i, j, k)):
                if perm in seen:
                    continue
                seen.add(perm)
                if max(perm) < extent:
                    yield Slot(*perm)


class GreedyAllocator(AllocationStrategy):
    """
    Stateless nearest-to-origin search.

    Walks distance layers 0, 1, ..., 3(N-1) and returns the first acceptable
    slot, which packs items toward the origin corner.  Ties inside a layer
    are broken by generation order.
    """

    name: ClassVar[str] = "greedy"

    @traced_engine("greedy", "1.0", fingerprint_fields=("item",))
    def alloc(self, item: Item, occupancy: OccupancyView) -> Slot | None:
        grid = occupancy.grid
        for distance in range(grid.max_distance + 1):
            for slot in slots_by_distance(distance, grid.extent):
                if is_acceptable(slot, item, occupancy):
                    return slot
        return None


ALLOCATION_STRATEGIES: dict[str, type[AllocationStrategy]] = {
    RoundRobinAllocator.name: RoundRobinAllocator,
    GreedyAllocator.name: GreedyAllocator,
}


def create_allocator(name: str) -> AllocationStrategy:
    """Instantiate a registered strategy by name."""
    try:
        strategy_cls = ALLOCATION_STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown allocation strategy '{name}'. "
            f"Known strategies: {sorted(ALLOCATION_STRATEGIES)}"
        ) from None
    return strategy_cls()
