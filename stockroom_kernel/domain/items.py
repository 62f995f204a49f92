"""
Items -- inventory records and their placement categories.

Responsibility:
    Defines the placement category tagged union (Normal, OverSized,
    Fragile) and the Item record the ledger stores at an anchor slot.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - OverSized span is a positive integer (it may exceed the grid extent;
      such items simply never find a slot).
    - Fragile expiry is timezone-aware so expiry comparisons are total.
    - Item quantity is a non-negative integer; item_id is a non-negative
      integer; name is a non-empty string.
    - stored_at is excluded from equality: two records describing the same
      goods compare equal regardless of when they were committed.

Failure modes:
    - TypeError / ValueError on construction with invalid fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import ClassVar


class CategoryKind(str, Enum):
    """Discriminator of the placement category union."""

    NORMAL = "normal"
    OVERSIZED = "oversized"
    FRAGILE = "fragile"


def _require_non_negative_int(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} cannot be negative, got {value}")


@dataclass(frozen=True, slots=True)
class Normal:
    """Occupies exactly one slot anywhere in the grid."""

    kind: ClassVar[CategoryKind] = CategoryKind.NORMAL

    @property
    def footprint(self) -> int:
        return 1

    def permits_row(self, row: int) -> bool:
        return True

    def __str__(self) -> str:
        return "Normal"


@dataclass(frozen=True, slots=True)
class OverSized:
    """Occupies ``span`` consecutive zones on the anchor's row and shelf."""

    span: int
    kind: ClassVar[CategoryKind] = CategoryKind.OVERSIZED

    def __post_init__(self) -> None:
        _require_non_negative_int("span", self.span)
        if self.span < 1:
            raise ValueError(f"span must be >= 1, got {self.span}")

    @property
    def footprint(self) -> int:
        return self.span

    def permits_row(self, row: int) -> bool:
        return True

    def __str__(self) -> str:
        return f"OverSized({self.span})"


@dataclass(frozen=True, slots=True)
class Fragile:
    """
    Occupies one slot at a row no higher than ``max_row``.

    Carries an expiry used by the ledger's expiry index.
    """

    expires_at: datetime
    max_row: int
    kind: ClassVar[CategoryKind] = CategoryKind.FRAGILE

    def __post_init__(self) -> None:
        if not isinstance(self.expires_at, datetime):
            raise TypeError(
                f"expires_at must be a datetime, got {type(self.expires_at).__name__}"
            )
        if self.expires_at.tzinfo is None or self.expires_at.utcoffset() is None:
            raise ValueError("expires_at must be timezone-aware")
        _require_non_negative_int("max_row", self.max_row)

    @property
    def footprint(self) -> int:
        return 1

    def permits_row(self, row: int) -> bool:
        return row <= self.max_row

    def __str__(self) -> str:
        return f"Fragile({self.expires_at.isoformat()}, {self.max_row})"


PlacementCategory = Normal | OverSized | Fragile


@dataclass(frozen=True)
class Item:
    """
    An inventory record.

    Contract:
        Created by the caller without ``stored_at``; the ledger stamps the
        commit time when the item is placed.

    Guarantees:
        - Immutable and hashable.
        - Equality ignores ``stored_at``.

    Non-goals:
        - item_id is NOT unique: several physical units of one id may sit in
          different slots.
    """

    item_id: int
    name: str
    quantity: int
    category: PlacementCategory = field(default_factory=Normal)
    stored_at: datetime | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        _require_non_negative_int("item_id", self.item_id)
        _require_non_negative_int("quantity", self.quantity)
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("name must be a non-empty string")
        if not isinstance(self.category, (Normal, OverSized, Fragile)):
            raise TypeError(
                f"category must be a placement category, got {self.category!r}"
            )

    @property
    def footprint(self) -> int:
        """Number of consecutive zones the item occupies."""
        return self.category.footprint

    @property
    def is_oversized(self) -> bool:
        return isinstance(self.category, OverSized)

    @property
    def is_fragile(self) -> bool:
        return isinstance(self.category, Fragile)

    @property
    def expires_at(self) -> datetime | None:
        if isinstance(self.category, Fragile):
            return self.category.expires_at
        return None

    def stamped(self, at: datetime) -> Item:
        """Copy of this item with its insertion timestamp set."""
        return replace(self, stored_at=at)
