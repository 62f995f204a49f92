"""
Occupancy -- read-only view of the ledger's anchor map.

Responsibility:
    Wraps the ledger's ``Slot -> Item`` occupancy map together with its
    Grid so strategies and admission filters can inspect, but never
    mutate, ledger state.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - The view is live: it always reflects the ledger's current map.
    - No mutating method is exposed.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from stockroom_kernel.domain.items import Item
from stockroom_kernel.domain.values import Grid, Slot


class OccupancyView(Mapping[Slot, Item]):
    """Anchor slot -> item mapping, read-only, bound to a grid."""

    __slots__ = ("_grid", "_slots")

    def __init__(self, grid: Grid, slots: Mapping[Slot, Item]):
        self._grid = grid
        self._slots = slots

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def extent(self) -> int:
        return self._grid.extent

    def __getitem__(self, slot: Slot) -> Item:
        return self._slots[slot]

    def __iter__(self) -> Iterator[Slot]:
        return iter(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, slot: object) -> bool:
        return slot in self._slots

    def __repr__(self) -> str:
        return f"OccupancyView(extent={self.extent}, occupied={len(self)})"
