"""
Module: stockroom_engines.availability
Responsibility:
    Decide whether a candidate anchor slot can host an item without
    overlapping any existing footprint.  This is the single source of
    spatial legality: every allocation strategy calls it unmodified and
    differs only in the order it proposes candidates.

Architecture position:
    Engines -- pure predicate layer, zero I/O.
    May only import stockroom_kernel.

Algorithm (is_available):
    1. size = footprint of the item (1, or the over-sized span).
    2. Reject if the anchor is outside the grid or anchor.zone + size > N.
    3. Forward check: reject if any zone in [anchor.zone, anchor.zone + size)
       on the anchor's row/shelf is an occupied anchor.
    4. Backward check: reject if an occupied anchor at an earlier zone on the
       same row/shelf has a footprint reaching anchor.zone.

Category acceptance (satisfies_category) is separate: a Fragile item also
needs anchor.row <= max_row.
"""

from __future__ import annotations

from collections.abc import Mapping

from stockroom_kernel.domain.items import Item
from stockroom_kernel.domain.occupancy import OccupancyView
from stockroom_kernel.domain.values import Slot


def footprint_size(item: Item) -> int:
    """Number of consecutive zones ``item`` occupies."""
    return item.category.footprint


def footprint(anchor: Slot, item: Item) -> tuple[Slot, ...]:
    """Every slot covered by ``item`` when anchored at ``anchor``."""
    return tuple(
        anchor.with_zone(zone)
        for zone in range(anchor.zone, anchor.zone + footprint_size(item))
    )


def _blocked_forward(anchor: Slot, size: int, occupied: Mapping[Slot, Item]) -> bool:
    return any(
        anchor.with_zone(zone) in occupied
        for zone in range(anchor.zone, anchor.zone + size)
    )


def _blocked_backward(anchor: Slot, occupied: Mapping[Slot, Item]) -> bool:
    for zone in range(anchor.zone):
        occupant = occupied.get(anchor.with_zone(zone))
        if occupant is not None and zone + footprint_size(occupant) > anchor.zone:
            return True
    return False


def is_available(anchor: Slot, item: Item, occupancy: OccupancyView) -> bool:
    """True if ``item`` fits at ``anchor`` without overlapping any occupant."""
    grid = occupancy.grid
    if not grid.contains(anchor):
        return False

    size = footprint_size(item)
    if anchor.zone + size > grid.extent:
        return False

    if _blocked_forward(anchor, size, occupancy):
        return False

    return not _blocked_backward(anchor, occupancy)


def satisfies_category(anchor: Slot, item: Item) -> bool:
    """Category-specific anchor constraint (Fragile max_row)."""
    return item.category.permits_row(anchor.row)


def is_acceptable(anchor: Slot, item: Item, occupancy: OccupancyView) -> bool:
    """Spatially available and allowed by the item's category."""
    return is_available(anchor, item, occupancy) and satisfies_category(anchor, item)
