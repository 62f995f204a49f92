"""
Module: stockroom_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the search and
    predicate engines.  This is the canonical import surface for higher
    layers (stockroom_config, stockroom_services).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import stockroom_kernel (and sibling engine modules).
    MUST NOT import stockroom_config or stockroom_services.

Invariants enforced:
    - Purity: engines never read the clock and never mutate ledger state;
      the only state they own is a strategy's own search cursor.
    - Determinism: identical inputs (and identical strategy state) always
      produce identical outputs.

Usage:
    from stockroom_engines import GreedyAllocator, LimitOverSized, is_available
"""

from stockroom_engines.admission import (
    ADMISSION_FILTERS,
    AdmissionFilter,
    BanCategory,
    FilterChain,
    LimitItemQuantity,
    LimitOverSized,
    create_filter,
)
from stockroom_engines.allocation import (
    ALLOCATION_STRATEGIES,
    AllocationStrategy,
    GreedyAllocator,
    RoundRobinAllocator,
    create_allocator,
    slots_by_distance,
)
from stockroom_engines.availability import (
    footprint,
    footprint_size,
    is_acceptable,
    is_available,
    satisfies_category,
)
from stockroom_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "ADMISSION_FILTERS",
    "ALLOCATION_STRATEGIES",
    "AdmissionFilter",
    "AllocationStrategy",
    "BanCategory",
    "FilterChain",
    "GreedyAllocator",
    "LimitItemQuantity",
    "LimitOverSized",
    "RoundRobinAllocator",
    "compute_input_fingerprint",
    "create_allocator",
    "create_filter",
    "footprint",
    "footprint_size",
    "is_acceptable",
    "is_available",
    "satisfies_category",
    "slots_by_distance",
    "traced_engine",
]
