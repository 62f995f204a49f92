"""
Config -> Engine Bridges.

Functions that convert LedgerConfiguration artifacts into the runtime
objects the ledger is constructed with. These live in stockroom_config
(the producer) because the kernel and engines must never import
stockroom_config.

Usage:
    from stockroom_config.bridges import build_allocator, build_filters

    config = get_ledger_config()
    allocator = build_allocator(config.strategy)
    filters = build_filters(config.filters)
"""

from __future__ import annotations

from collections.abc import Iterable

from stockroom_config.schema import CategoryDef, FilterDef, StrategyDef
from stockroom_engines.admission import AdmissionFilter, create_filter
from stockroom_engines.allocation import AllocationStrategy, create_allocator
from stockroom_kernel.domain.items import (
    CategoryKind,
    Fragile,
    Normal,
    OverSized,
    PlacementCategory,
)


def build_category(definition: CategoryDef) -> PlacementCategory:
    """Build a placement category from its definition."""
    kind = CategoryKind(definition.kind)
    if kind is CategoryKind.OVERSIZED:
        return OverSized(span=definition.span)
    if kind is CategoryKind.FRAGILE:
        return Fragile(expires_at=definition.expires_at, max_row=definition.max_row)
    return Normal()


def build_filter(definition: FilterDef) -> AdmissionFilter:
    """Build one admission filter from its definition."""
    if definition.kind == "limit_oversized":
        return create_filter(definition.kind, max_allowed=definition.max_allowed)
    if definition.kind == "limit_item_quantity":
        return create_filter(
            definition.kind,
            item_id=definition.item_id,
            max_allowed=definition.max_allowed,
        )
    return create_filter(definition.kind, category=build_category(definition.category))


def build_filters(definitions: Iterable[FilterDef]) -> list[AdmissionFilter]:
    """Build the admission filters in chain order."""
    return [build_filter(definition) for definition in definitions]


def build_allocator(definition: StrategyDef) -> AllocationStrategy:
    """Build a fresh allocation strategy instance."""
    return create_allocator(definition.kind)
