"""
Values -- Immutable, self-validating grid value objects.

Responsibility:
    Provides the coordinate types every other module speaks in: Slot (a
    single row/shelf/zone address) and Grid (the bounded extent those
    addresses live in).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by every other domain module, the engines and the ledger.

Invariants enforced:
    - Slot components are non-negative integers (bools rejected).
    - Grid extent is a positive integer; every axis spans [0, extent).
    - Slot ordering is lexicographic (row, then shelf, then zone), which is
      the scan order of the round-robin strategy.

Failure modes:
    - TypeError on construction with non-integer components.
    - ValueError on negative components or a non-positive extent.
    - SlotOutOfBoundsError from Grid.require for coordinates outside the grid.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from stockroom_kernel.exceptions import SlotOutOfBoundsError


def _require_index(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} cannot be negative, got {value}")


@dataclass(frozen=True, slots=True, order=True)
class Slot:
    """
    A (row, shelf, zone) address in the storage grid.

    Contract:
        Value type: equality, hashing and ordering by component.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - Ordered lexicographically by (row, shelf, zone)

    Non-goals:
        - Does NOT know the grid extent; bounds are checked by Grid.
    """

    row: int
    shelf: int
    zone: int

    def __post_init__(self) -> None:
        _require_index("row", self.row)
        _require_index("shelf", self.shelf)
        _require_index("zone", self.zone)

    @property
    def distance(self) -> int:
        """Manhattan distance from the origin."""
        return self.row + self.shelf + self.zone

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.row, self.shelf, self.zone)

    def with_zone(self, zone: int) -> Slot:
        """Same row and shelf, different zone."""
        return Slot(self.row, self.shelf, zone)

    def __str__(self) -> str:
        return f"[{self.row}|{self.shelf}|{self.zone}]"


ORIGIN = Slot(0, 0, 0)


@dataclass(frozen=True, slots=True)
class Grid:
    """
    The bounded three-dimensional storage grid.

    Contract:
        Every axis (row, shelf, zone) spans [0, extent).

    Guarantees:
        - slots() and slots_from() yield coordinates in lexicographic order
          and never repeat a coordinate.
    """

    extent: int

    def __post_init__(self) -> None:
        if isinstance(self.extent, bool) or not isinstance(self.extent, int):
            raise TypeError(
                f"extent must be an int, got {type(self.extent).__name__}"
            )
        if self.extent < 1:
            raise ValueError(f"extent must be >= 1, got {self.extent}")

    @property
    def max_distance(self) -> int:
        """Largest Manhattan distance of any slot in the grid."""
        return 3 * (self.extent - 1)

    @property
    def size(self) -> int:
        return self.extent ** 3

    def contains(self, slot: Slot) -> bool:
        n = self.extent
        return slot.row < n and slot.shelf < n and slot.zone < n

    def require(self, slot: Slot) -> Slot:
        """Return ``slot`` unchanged, or raise if it lies outside the grid."""
        if not self.contains(slot):
            raise SlotOutOfBoundsError(slot, self.extent)
        return slot

    def slots(self) -> Iterator[Slot]:
        """All slots in lexicographic order."""
        return self.slots_from(ORIGIN)

    def slots_from(self, start: Slot) -> Iterator[Slot]:
        """
        All slots >= ``start`` in lexicographic order.

        Slots before ``start`` are never yielded, so a scan resumed from a
        cursor only moves forward through the grid.
        """
        n = self.extent
        if not self.contains(start):
            return
        for row in range(start.row, n):
            first_shelf = start.shelf if row == start.row else 0
            for shelf in range(first_shelf, n):
                if row == start.row and shelf == start.shelf:
                    first_zone = start.zone
                else:
                    first_zone = 0
                for zone in range(first_zone, n):
                    yield Slot(row, shelf, zone)
