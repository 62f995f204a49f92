"""
Typed Exception Hierarchy for the Stockroom Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

A caller that gets an insert rejected needs to know *why* without parsing a
message string: was the item vetoed by an admission filter, did the
allocation strategy run out of space, or was the request itself malformed?

Every error therefore:
  1. Has its own class (catch by type, not message)
  2. Carries a class-level CODE attribute (machine-readable, API-safe)
  3. Stores its context as attributes (item, slot, filters, ...)

Example:
    try:
        ledger.insert_item(item)
    except FilteredItemError as e:
        notify(f"{e.rejected_by} vetoed item {e.item.item_id}")
    except FailedAllocationError as e:
        notify(f"{e.allocator} found no slot")

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    StockroomError (base)
    |
    +-- AdmissionError
    |   +-- FilteredItemError
    |
    +-- AllocationError
    |   +-- FailedAllocationError
    |   +-- IllegalPlacementError
    |
    +-- SlotError
    |   +-- SlotNotFoundError
    |   +-- SlotOutOfBoundsError
    |
    +-- LedgerIntegrityError
        +-- IndexDriftError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                  | When Raised
----------------|-----------------------|-----------------------------------------
Admission       | FILTERED_ITEM         | An admission filter vetoed the item
----------------|-----------------------|-----------------------------------------
Allocation      | FAILED_ALLOCATION     | Strategy exhausted the grid
                | ILLEGAL_PLACEMENT     | Strategy returned an unavailable anchor
----------------|-----------------------|-----------------------------------------
Slot            | SLOT_NOT_FOUND        | Read-side lookup hit an empty anchor
                | SLOT_OUT_OF_BOUNDS    | Coordinate outside the grid extent
----------------|-----------------------|-----------------------------------------
Integrity       | INDEX_DRIFT           | Derived indices disagree with occupancy

===============================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stockroom_kernel.domain.items import Item
    from stockroom_kernel.domain.values import Slot


class StockroomError(Exception):
    """
    Base exception for all stockroom errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "STOCKROOM_ERROR"


# Admission-related exceptions


class AdmissionError(StockroomError):
    """Base exception for admission filter errors."""

    code: str = "ADMISSION_ERROR"


class FilteredItemError(AdmissionError):
    """
    An admission filter rejected the candidate item.

    ``filters`` lists every filter in force at evaluation time;
    ``rejected_by`` names the first filter that vetoed the item.
    """

    code: str = "FILTERED_ITEM"

    def __init__(
        self,
        item: Item,
        filters: tuple[str, ...],
        rejected_by: str | None = None,
    ):
        self.item = item
        self.filters = tuple(filters)
        self.rejected_by = rejected_by
        super().__init__(
            f"{item!r} was rejected by {rejected_by or 'some filter'} "
            f"(filters in force: {list(self.filters)})"
        )


# Allocation-related exceptions


class AllocationError(StockroomError):
    """Base exception for allocation strategy errors."""

    code: str = "ALLOCATION_ERROR"


class FailedAllocationError(AllocationError):
    """The allocation strategy exhausted its search without a legal anchor."""

    code: str = "FAILED_ALLOCATION"

    def __init__(self, item: Item, allocator: str):
        self.item = item
        self.allocator = allocator
        super().__init__(f"{allocator} did not find a valid slot for {item!r}")


class IllegalPlacementError(AllocationError):
    """
    The allocation strategy returned an anchor the availability predicate
    rejects.

    Raised before any mutation so the ledger stays untouched.
    """

    code: str = "ILLEGAL_PLACEMENT"

    def __init__(self, item: Item, slot: Slot, allocator: str):
        self.item = item
        self.slot = slot
        self.allocator = allocator
        super().__init__(
            f"{allocator} returned unavailable slot {slot} for {item!r}"
        )


# Slot-related exceptions


class SlotError(StockroomError):
    """Base exception for coordinate errors."""

    code: str = "SLOT_ERROR"


class SlotNotFoundError(SlotError):
    """No item is anchored at the requested slot."""

    code: str = "SLOT_NOT_FOUND"

    def __init__(self, slot: Slot):
        self.slot = slot
        super().__init__(f"No items found in slot {slot}")


class SlotOutOfBoundsError(SlotError):
    """The requested slot lies outside the grid."""

    code: str = "SLOT_OUT_OF_BOUNDS"

    def __init__(self, slot: Slot, extent: int):
        self.slot = slot
        self.extent = extent
        super().__init__(
            f"Slot {slot} is outside a grid of extent {extent}"
        )


# Integrity exceptions


class LedgerIntegrityError(StockroomError):
    """Base exception for ledger integrity failures."""

    code: str = "LEDGER_INTEGRITY_ERROR"


class IndexDriftError(LedgerIntegrityError):
    """Derived indices no longer match the occupancy map."""

    code: str = "INDEX_DRIFT"

    def __init__(self, differences: dict[str, Any]):
        self.differences = differences
        super().__init__(
            f"Derived indices drifted from occupancy: {sorted(differences)}"
        )
