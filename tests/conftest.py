"""
Pytest fixtures for the stockroom test suite.

Provides:
- A deterministic clock
- Ledger factories for both allocation strategies
- Occupancy builders for engine-level tests
- Logging isolation between tests
"""

from datetime import UTC, datetime

import pytest

from stockroom_engines.allocation import GreedyAllocator, RoundRobinAllocator
from stockroom_kernel.domain.clock import DeterministicClock
from stockroom_kernel.domain.items import Item
from stockroom_kernel.domain.occupancy import OccupancyView
from stockroom_kernel.domain.values import Grid, Slot
from stockroom_kernel.logging_config import LogContext, reset_logging
from stockroom_services.inventory_ledger import InventoryLedger

# Grid extent used by the reference scenarios
GRID_EXTENT = 3

FIXED_NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(FIXED_NOW)


@pytest.fixture
def round_robin_ledger(clock) -> InventoryLedger:
    return InventoryLedger(GRID_EXTENT, RoundRobinAllocator(), clock=clock)


@pytest.fixture
def greedy_ledger(clock) -> InventoryLedger:
    return InventoryLedger(GRID_EXTENT, GreedyAllocator(), clock=clock)


@pytest.fixture
def make_occupancy():
    """Factory building a read-only occupancy view from {(row, shelf, zone): item}."""

    def _make(
        placements: dict[tuple[int, int, int], Item],
        extent: int = GRID_EXTENT,
    ) -> OccupancyView:
        slots = {Slot(*coords): item for coords, item in placements.items()}
        return OccupancyView(Grid(extent), slots)

    return _make
