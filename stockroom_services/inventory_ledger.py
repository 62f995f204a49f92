"""
InventoryLedger -- owner of the occupancy map and its derived indices.

Responsibility:
    Admits, places, stores and removes inventory items.  Runs the admission
    filter chain, delegates anchor selection to the configured allocation
    strategy, commits the stamped item and keeps the four derived indices
    (count-by-id, count-by-name, slots-by-id, slots-by-expiry) exact.

Architecture position:
    Services -- imperative shell around the pure kernel and engines.
    The ledger is the single writer of placement state; strategies and
    filters only ever see a read-only OccupancyView.

Invariants enforced:
    - Footprint legality: every committed anchor is re-checked with the
      availability predicate before mutation.
    - Index consistency: occupancy and indices change together inside
      _commit / _evict, never separately.
    - Atomic failure: filter rejection, allocation failure and illegal
      placement all raise before any mutation.
    - Pruned indices: removal cleans up only the touched index entries.

Failure modes:
    - FilteredItemError: an admission filter vetoed the item.
    - FailedAllocationError: the strategy found no acceptable anchor.
    - IllegalPlacementError: the strategy proposed an unavailable anchor.
    - SlotOutOfBoundsError: require_item addressed a slot outside the grid.
    - SlotNotFoundError: require_item addressed an empty anchor.
    - ValueError: find_expired was given a naive datetime.

Non-goals:
    - Not thread-safe: a multi-threaded host must hold one lock around each
      whole insert_item / remove_item call.
    - No persistence; state lives for the lifetime of the instance.

Usage:
    ledger = InventoryLedger(3, RoundRobinAllocator(), [LimitOverSized(1)])
    anchor = ledger.insert_item(Item(0, "Flour", 10))
    ledger.remove_item(*anchor.as_tuple())
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from types import MappingProxyType
from typing import Any
from uuid import uuid4

from stockroom_config.bridges import build_allocator, build_filters
from stockroom_config.schema import LedgerConfiguration
from stockroom_engines.admission import AdmissionFilter, FilterChain
from stockroom_engines.allocation import AllocationStrategy
from stockroom_engines.availability import is_acceptable
from stockroom_kernel.domain.clock import Clock, SystemClock
from stockroom_kernel.domain.indices import LedgerIndices
from stockroom_kernel.domain.items import Item
from stockroom_kernel.domain.occupancy import OccupancyView
from stockroom_kernel.domain.values import Grid, Slot
from stockroom_kernel.exceptions import (
    FailedAllocationError,
    FilteredItemError,
    IllegalPlacementError,
    IndexDriftError,
    SlotNotFoundError,
)
from stockroom_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.inventory_ledger")


class InventoryLedger:
    """Inventory ledger over a bounded row x shelf x zone grid."""

    def __init__(
        self,
        grid: Grid | int,
        allocator: AllocationStrategy,
        filters: Iterable[AdmissionFilter] = (),
        clock: Clock | None = None,
        ledger_id: str | None = None,
    ):
        self._grid = grid if isinstance(grid, Grid) else Grid(grid)
        self._allocator = allocator
        self._chain = FilterChain(filters)
        self._clock = clock or SystemClock()
        self._ledger_id = ledger_id or str(uuid4())

        self._slots: dict[Slot, Item] = {}
        self._view = OccupancyView(self._grid, MappingProxyType(self._slots))
        self._indices = LedgerIndices()

    @classmethod
    def from_config(
        cls,
        config: LedgerConfiguration,
        clock: Clock | None = None,
        ledger_id: str | None = None,
    ) -> InventoryLedger:
        """Build a ledger from a validated configuration."""
        return cls(
            Grid(config.grid_extent),
            build_allocator(config.strategy),
            build_filters(config.filters),
            clock=clock,
            ledger_id=ledger_id,
        )

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def ledger_id(self) -> str:
        return self._ledger_id

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def allocator(self) -> AllocationStrategy:
        return self._allocator

    @property
    def filters(self) -> tuple[AdmissionFilter, ...]:
        return self._chain.filters

    @property
    def occupancy(self) -> OccupancyView:
        return self._view

    @property
    def indices(self) -> dict[str, Any]:
        """Snapshot of the derived indices."""
        return self._indices.snapshot()

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, slot: object) -> bool:
        return slot in self._slots

    def __repr__(self) -> str:
        return (
            f"InventoryLedger(id={self._ledger_id}, extent={self._grid.extent}, "
            f"occupied={len(self._slots)}, allocator={self._allocator}, "
            f"filters={list(self._chain.describe())})"
        )

    # ------------------------------------------------------------------
    # Reconfiguration
    # ------------------------------------------------------------------

    def set_filters(self, filters: Iterable[AdmissionFilter]) -> None:
        """Replace the whole admission chain."""
        self._chain = FilterChain(filters)
        logger.info(
            "filters_replaced",
            extra={"ledger_id": self._ledger_id, "filters": list(self._chain.describe())},
        )

    def add_filter(self, admission_filter: AdmissionFilter) -> None:
        """Append one filter to the end of the admission chain."""
        self._chain = self._chain.extended(admission_filter)
        logger.info(
            "filter_added",
            extra={"ledger_id": self._ledger_id, "filter": admission_filter.describe()},
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def insert_item(self, item: Item) -> Slot:
        """
        Admit, place and store ``item``.

        Returns:
            The anchor slot the item was committed at.

        Raises:
            FilteredItemError: an admission filter vetoed the item.
            FailedAllocationError: no acceptable anchor exists.
            IllegalPlacementError: the strategy proposed an unavailable anchor.
        """
        with LogContext.bind(
            ledger_id=self._ledger_id,
            item_id=str(item.item_id),
            operation="insert_item",
        ):
            vetoed_by = self._chain.first_rejection(item, self._view)
            if vetoed_by is not None:
                logger.info(
                    "item_rejected",
                    extra={"rejected_by": vetoed_by.describe(), "item_name": item.name},
                )
                raise FilteredItemError(
                    item,
                    filters=self._chain.describe(),
                    rejected_by=vetoed_by.describe(),
                )

            anchor = self._allocator.alloc(item=item, occupancy=self._view)
            if anchor is None:
                logger.warning(
                    "allocation_failed",
                    extra={"allocator": self._allocator.describe(), "item_name": item.name},
                )
                raise FailedAllocationError(item, allocator=self._allocator.describe())

            if not is_acceptable(anchor, item, self._view):
                raise IllegalPlacementError(
                    item, slot=anchor, allocator=self._allocator.describe()
                )

            stored = item.stamped(self._clock.now())
            self._commit(anchor, stored)

            logger.info(
                "item_inserted",
                extra={
                    "slot": str(anchor),
                    "item_name": item.name,
                    "category": str(item.category),
                    "occupied": len(self._slots),
                },
            )
            return anchor

    def remove_item(self, row: int, shelf: int, zone: int) -> Item | None:
        """
        Remove whatever is anchored at (row, shelf, zone).

        An empty anchor, including one outside the grid, is a silent no-op;
        returns the removed item or None.
        """
        slot = Slot(row, shelf, zone)
        with LogContext.bind(ledger_id=self._ledger_id, operation="remove_item"):
            item = self._slots.get(slot)
            if item is None:
                logger.debug("remove_noop", extra={"slot": str(slot)})
                return None

            self._evict(slot, item)
            logger.info(
                "item_removed",
                extra={"slot": str(slot), "removed_item_id": item.item_id},
            )
            return item

    def _commit(self, slot: Slot, item: Item) -> None:
        self._slots[slot] = item
        self._indices.record_insert(slot, item)

    def _evict(self, slot: Slot, item: Item) -> None:
        del self._slots[slot]
        self._indices.record_remove(slot, item)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_item(self, row: int, shelf: int, zone: int) -> Item | None:
        """The item anchored at (row, shelf, zone), or None (also outside the grid)."""
        return self._slots.get(Slot(row, shelf, zone))

    def require_item(self, row: int, shelf: int, zone: int) -> Item:
        """Like get_item, but an empty anchor raises SlotNotFoundError."""
        slot = self._grid.require(Slot(row, shelf, zone))
        try:
            return self._slots[slot]
        except KeyError:
            raise SlotNotFoundError(slot) from None

    def find_id(self, item_id: int) -> list[Slot] | None:
        """Anchors currently holding ``item_id`` (insertion order), or None."""
        return self._indices.slots_for(item_id)

    def count_id(self, item_id: int) -> int:
        return self._indices.count_id(item_id)

    def count_name(self, name: str) -> int:
        return self._indices.count_name(name)

    def find_expired(self, as_of: datetime | None = None) -> list[Item]:
        """
        Fragile items whose expiry is at or before ``as_of``.

        Defaults to the ledger clock's current time.  Results come back in
        ascending expiry order.

        Raises:
            ValueError: if ``as_of`` is a naive datetime.
        """
        cutoff = as_of if as_of is not None else self._clock.now()
        if cutoff.tzinfo is None or cutoff.utcoffset() is None:
            raise ValueError("as_of must be timezone-aware")
        return [self._slots[slot] for slot in self._indices.expired_up_to(cutoff)]

    def ordered_listing(self) -> list[Item]:
        """All items sorted by name; ties keep occupancy iteration order."""
        return sorted(self._slots.values(), key=lambda item: item.name)

    def verify_indices(self) -> None:
        """
        Rebuild the indices from occupancy and compare.

        Raises:
            IndexDriftError: if any index differs from the rebuilt one.
        """
        differences = self._indices.diff(LedgerIndices.from_occupancy(self._slots))
        if differences:
            logger.error("index_drift_detected", extra={"indices": sorted(differences)})
            raise IndexDriftError(differences)
