"""
Indices -- derived lookup structures over the occupancy map.

Responsibility:
    Maintains the four reverse indices the ledger answers queries from:
    count-by-id, count-by-name, slots-by-id and slots-by-expiry.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Owned exclusively by InventoryLedger; never shared.

Invariants enforced:
    - Index consistency: after every record_insert / record_remove pair the
      indices equal LedgerIndices.from_occupancy(occupancy).
    - Pruned indices: a count that reaches zero and a bucket that becomes
      empty are deleted immediately. Cleanup touches only the entries of the
      slot being removed, never the whole structure.
    - Slot buckets keep insertion order (dicts used as ordered sets), so
      lookups are deterministic for identical histories.

Failure modes:
    - KeyError from record_remove if the slot/item pair was never recorded;
      the ledger only calls it for occupants it holds.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right, insort
from collections.abc import Iterator, Mapping
from datetime import datetime
from typing import Any

from stockroom_kernel.domain.items import Item
from stockroom_kernel.domain.values import Slot


def _decrement(counts: dict[Any, int], key: Any) -> None:
    remaining = counts[key] - 1
    if remaining:
        counts[key] = remaining
    else:
        del counts[key]


class ExpiryIndex:
    """
    Ordered ``expires_at -> slots`` mapping supporting "at or before T"
    range queries.

    Keys are kept in a sorted list (bisect); each key owns an
    insertion-ordered bucket of slots.
    """

    __slots__ = ("_keys", "_buckets")

    def __init__(self) -> None:
        self._keys: list[datetime] = []
        self._buckets: dict[datetime, dict[Slot, None]] = {}

    def add(self, expires_at: datetime, slot: Slot) -> None:
        bucket = self._buckets.get(expires_at)
        if bucket is None:
            bucket = self._buckets[expires_at] = {}
            insort(self._keys, expires_at)
        bucket[slot] = None

    def discard(self, expires_at: datetime, slot: Slot) -> None:
        bucket = self._buckets[expires_at]
        del bucket[slot]
        if not bucket:
            del self._buckets[expires_at]
            del self._keys[bisect_left(self._keys, expires_at)]

    def up_to(self, as_of: datetime) -> Iterator[Slot]:
        """Slots whose expiry is <= ``as_of``, earliest expiry first."""
        stop = bisect_right(self._keys, as_of)
        for key in self._keys[:stop]:
            yield from self._buckets[key]

    def items(self) -> Iterator[tuple[datetime, tuple[Slot, ...]]]:
        for key in self._keys:
            yield key, tuple(self._buckets[key])

    def __len__(self) -> int:
        return len(self._keys)


class LedgerIndices:
    """The ledger's four derived indices, updated one slot at a time."""

    def __init__(self) -> None:
        self._count_by_id: dict[int, int] = {}
        self._count_by_name: dict[str, int] = {}
        self._slots_by_id: dict[int, dict[Slot, None]] = {}
        self._slots_by_expiry = ExpiryIndex()

    @classmethod
    def from_occupancy(cls, occupancy: Mapping[Slot, Item]) -> LedgerIndices:
        """Rebuild indices from scratch (verification and tests)."""
        indices = cls()
        for slot, item in occupancy.items():
            indices.record_insert(slot, item)
        return indices

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def record_insert(self, slot: Slot, item: Item) -> None:
        self._count_by_id[item.item_id] = self._count_by_id.get(item.item_id, 0) + 1
        self._count_by_name[item.name] = self._count_by_name.get(item.name, 0) + 1
        self._slots_by_id.setdefault(item.item_id, {})[slot] = None

        expires_at = item.expires_at
        if expires_at is not None:
            self._slots_by_expiry.add(expires_at, slot)

    def record_remove(self, slot: Slot, item: Item) -> None:
        _decrement(self._count_by_id, item.item_id)
        _decrement(self._count_by_name, item.name)

        id_slots = self._slots_by_id[item.item_id]
        del id_slots[slot]
        if not id_slots:
            del self._slots_by_id[item.item_id]

        expires_at = item.expires_at
        if expires_at is not None:
            self._slots_by_expiry.discard(expires_at, slot)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def count_id(self, item_id: int) -> int:
        return self._count_by_id.get(item_id, 0)

    def count_name(self, name: str) -> int:
        return self._count_by_name.get(name, 0)

    def slots_for(self, item_id: int) -> list[Slot] | None:
        slots = self._slots_by_id.get(item_id)
        if slots is None:
            return None
        return list(slots)

    def expired_up_to(self, as_of: datetime) -> Iterator[Slot]:
        return self._slots_by_expiry.up_to(as_of)

    def snapshot(self) -> dict[str, Any]:
        """
        Plain, comparable copy of every index.

        Slot buckets are frozensets so two snapshots compare equal whenever
        they hold the same anchors, whatever the insertion history.
        """
        return {
            "count_by_id": dict(self._count_by_id),
            "count_by_name": dict(self._count_by_name),
            "slots_by_id": {
                item_id: frozenset(slots)
                for item_id, slots in self._slots_by_id.items()
            },
            "slots_by_expiry": {
                expires_at: frozenset(slots)
                for expires_at, slots in self._slots_by_expiry.items()
            },
        }

    def diff(self, other: LedgerIndices) -> dict[str, Any]:
        """Index names whose contents differ, with (self, other) values."""
        mine = self.snapshot()
        theirs = other.snapshot()
        return {
            name: (mine[name], theirs[name])
            for name in mine
            if mine[name] != theirs[name]
        }
