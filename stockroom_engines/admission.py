"""
Module: stockroom_engines.admission
Responsibility:
    Admission filters: independent boolean predicates evaluated against a
    candidate item and the current occupancy before any allocation is
    attempted, and the ordered chain that combines them.

Architecture position:
    Engines -- pure predicate layer, zero I/O.
    May only import stockroom_kernel.

Invariants enforced:
    - Filters only read the occupancy view; they never mutate ledger state.
    - A chain admits an item only if every filter admits it; evaluation
      stops at the first veto, in registration order.
    - A chain is immutable; reconfiguration builds a new chain.

Failure modes:
    - ValueError on construction with negative limits.
    - create_filter raises ValueError for an unknown filter kind.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any, ClassVar

from stockroom_kernel.domain.items import Item, PlacementCategory
from stockroom_kernel.domain.occupancy import OccupancyView


class AdmissionFilter(ABC):
    """A predicate over (candidate item, current occupancy)."""

    kind: ClassVar[str] = "abstract"

    @abstractmethod
    def admits(self, item: Item, occupancy: OccupancyView) -> bool:
        """True if ``item`` may be stored given ``occupancy``."""
        ...

    @abstractmethod
    def describe(self) -> str:
        ...

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return self.describe()


def _require_limit(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} cannot be negative, got {value}")


class LimitOverSized(AdmissionFilter):
    """Cap the number of over-sized occupants."""

    kind: ClassVar[str] = "limit_oversized"

    def __init__(self, max_allowed: int):
        _require_limit("max_allowed", max_allowed)
        self.max_allowed = max_allowed

    def admits(self, item: Item, occupancy: OccupancyView) -> bool:
        if not item.is_oversized:
            return True
        count = sum(1 for occupant in occupancy.values() if occupant.is_oversized)
        return count < self.max_allowed

    def describe(self) -> str:
        return f"LimitOverSized({self.max_allowed})"


class LimitItemQuantity(AdmissionFilter):
    """Cap the total quantity stored under one item id."""

    kind: ClassVar[str] = "limit_item_quantity"

    def __init__(self, item_id: int, max_allowed: int):
        _require_limit("item_id", item_id)
        _require_limit("max_allowed", max_allowed)
        self.item_id = item_id
        self.max_allowed = max_allowed

    def admits(self, item: Item, occupancy: OccupancyView) -> bool:
        if item.item_id != self.item_id:
            return True
        total = sum(
            occupant.quantity
            for occupant in occupancy.values()
            if occupant.item_id == self.item_id
        )
        return total + item.quantity <= self.max_allowed

    def describe(self) -> str:
        return f"LimitItemQuantity({self.item_id}, {self.max_allowed})"


class BanCategory(AdmissionFilter):
    """Reject items whose placement category equals ``category`` exactly."""

    kind: ClassVar[str] = "ban_category"

    def __init__(self, category: PlacementCategory):
        self.category = category

    def admits(self, item: Item, occupancy: OccupancyView) -> bool:
        return item.category != self.category

    def describe(self) -> str:
        return f"BanCategory({self.category})"


class FilterChain:
    """Ordered, immutable collection of admission filters."""

    __slots__ = ("_filters",)

    def __init__(self, filters: Iterable[AdmissionFilter] = ()):
        filters = tuple(filters)
        for f in filters:
            if not isinstance(f, AdmissionFilter):
                raise TypeError(f"Not an AdmissionFilter: {f!r}")
        self._filters: tuple[AdmissionFilter, ...] = filters

    @property
    def filters(self) -> tuple[AdmissionFilter, ...]:
        return self._filters

    def first_rejection(
        self, item: Item, occupancy: OccupancyView
    ) -> AdmissionFilter | None:
        """The first filter that vetoes ``item``, or None if all admit it."""
        for f in self._filters:
            if not f.admits(item, occupancy):
                return f
        return None

    def admits(self, item: Item, occupancy: OccupancyView) -> bool:
        return self.first_rejection(item, occupancy) is None

    def describe(self) -> tuple[str, ...]:
        return tuple(f.describe() for f in self._filters)

    def extended(self, extra: AdmissionFilter) -> FilterChain:
        return FilterChain((*self._filters, extra))

    def __iter__(self) -> Iterator[AdmissionFilter]:
        return iter(self._filters)

    def __len__(self) -> int:
        return len(self._filters)

    def __repr__(self) -> str:
        return f"FilterChain({list(self.describe())})"


ADMISSION_FILTERS: dict[str, type[AdmissionFilter]] = {
    LimitOverSized.kind: LimitOverSized,
    LimitItemQuantity.kind: LimitItemQuantity,
    BanCategory.kind: BanCategory,
}


def create_filter(kind: str, **params: Any) -> AdmissionFilter:
    """Instantiate a registered filter by kind with its parameters."""
    try:
        filter_cls = ADMISSION_FILTERS[kind]
    except KeyError:
        raise ValueError(
            f"Unknown admission filter '{kind}'. "
            f"Known filters: {sorted(ADMISSION_FILTERS)}"
        ) from None
    return filter_cls(**params)
