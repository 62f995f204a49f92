"""
Stockroom domain layer -- pure functional core, zero I/O.

Re-exports the value objects used throughout the engines and services.
"""

from stockroom_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from stockroom_kernel.domain.items import (
    CategoryKind,
    Fragile,
    Item,
    Normal,
    OverSized,
    PlacementCategory,
)
from stockroom_kernel.domain.occupancy import OccupancyView
from stockroom_kernel.domain.values import Grid, Slot

__all__ = [
    "CategoryKind",
    "Clock",
    "DeterministicClock",
    "Fragile",
    "Grid",
    "Item",
    "Normal",
    "OccupancyView",
    "OverSized",
    "PlacementCategory",
    "Slot",
    "SystemClock",
]
