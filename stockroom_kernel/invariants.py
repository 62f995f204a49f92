"""
Ledger Invariants Contract.

These invariants are structural law for every InventoryLedger. No
configuration, strategy or filter may override them.

This module exists solely to declare these invariants explicitly. The
enforcement is distributed across the availability predicate
(stockroom_engines.availability), the derived indices
(stockroom_kernel.domain.indices) and InventoryLedger.insert_item.
"""

from enum import Enum, unique


@unique
class LedgerInvariant(str, Enum):
    """Non-configurable invariants enforced by the ledger.

    Strategies decide *where* an item goes; these rules decide *whether*
    the resulting state is legal.
    """

    FOOTPRINT_LEGALITY = "footprint_legality"
    """Every occupant's footprint lies inside the grid and intersects no
    other occupant's footprint. Enforced by is_available before commit."""

    INDEX_CONSISTENCY = "index_consistency"
    """The count-by-id, count-by-name, slots-by-id and slots-by-expiry
    indices are exact functions of the occupancy map. Enforced by
    LedgerIndices.record_insert / record_remove."""

    SINGLE_OCCUPANT = "single_occupant"
    """An anchor slot maps to at most one item at a time."""

    PRUNED_INDICES = "pruned_indices"
    """Counts are positive and no empty bucket is retained in any index."""

    ATOMIC_FAILURE = "atomic_failure"
    """A failed insert leaves occupancy and every index untouched."""


# All invariants as a frozenset for programmatic checks.
ALL_LEDGER_INVARIANTS: frozenset[LedgerInvariant] = frozenset(LedgerInvariant)

# The kernel package may not import from these packages.
# This is enforced by tests/architecture/test_import_boundaries.py.
FORBIDDEN_KERNEL_IMPORTS: tuple[str, ...] = (
    "stockroom_engines",
    "stockroom_config",
    "stockroom_services",
)
