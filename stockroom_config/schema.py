"""
LedgerConfiguration schema.

Defines the human-authored, reviewable configuration of an inventory
ledger. YAML files are parsed into these types by the loader and turned
into engine objects by the bridges.

Key distinction:
  LedgerConfiguration = declarative data (frozen, comparable, checksummed)
  AllocationStrategy / AdmissionFilter = runtime objects built from it
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CategoryDef:
    """A placement category named in configuration (used by ban filters)."""

    kind: str  # normal, oversized, fragile
    span: int | None = None
    expires_at: datetime | None = None
    max_row: int | None = None


@dataclass(frozen=True)
class FilterDef:
    """One admission filter, in chain order."""

    kind: str  # limit_oversized, limit_item_quantity, ban_category
    max_allowed: int | None = None
    item_id: int | None = None
    category: CategoryDef | None = None


@dataclass(frozen=True)
class StrategyDef:
    """The allocation strategy to instantiate."""

    kind: str  # round_robin, greedy


@dataclass(frozen=True)
class LedgerConfiguration:
    """Complete construction-time configuration of one ledger."""

    config_id: str
    grid_extent: int
    strategy: StrategyDef
    filters: tuple[FilterDef, ...] = ()
    checksum: str = ""
