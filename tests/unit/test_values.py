"""
Unit tests for Slot and Grid value objects.

Verifies:
- Slot validation, ordering, distance and rendering
- Grid bounds checks
- Lexicographic enumeration with and without a start cursor
"""

import pytest

from stockroom_kernel.domain.values import ORIGIN, Grid, Slot
from stockroom_kernel.exceptions import SlotOutOfBoundsError


class TestSlot:
    """Tests for the Slot coordinate."""

    def test_components_and_tuple(self):
        slot = Slot(1, 2, 0)
        assert (slot.row, slot.shelf, slot.zone) == (1, 2, 0)
        assert slot.as_tuple() == (1, 2, 0)

    def test_manhattan_distance(self):
        assert Slot(0, 0, 0).distance == 0
        assert Slot(2, 1, 2).distance == 5

    def test_equality_and_hash(self):
        assert Slot(0, 1, 2) == Slot(0, 1, 2)
        assert len({Slot(0, 1, 2), Slot(0, 1, 2), Slot(2, 1, 0)}) == 2

    def test_lexicographic_ordering(self):
        slots = [Slot(1, 0, 0), Slot(0, 2, 2), Slot(0, 2, 0), Slot(0, 0, 1)]
        assert sorted(slots) == [
            Slot(0, 0, 1),
            Slot(0, 2, 0),
            Slot(0, 2, 2),
            Slot(1, 0, 0),
        ]

    def test_with_zone_keeps_row_and_shelf(self):
        assert Slot(2, 1, 0).with_zone(2) == Slot(2, 1, 2)

    def test_str(self):
        assert str(Slot(0, 1, 2)) == "[0|1|2]"

    def test_negative_component_rejected(self):
        with pytest.raises(ValueError, match="zone"):
            Slot(0, 0, -1)

    @pytest.mark.parametrize("bad", [1.0, "1", True, None])
    def test_non_integer_component_rejected(self, bad):
        with pytest.raises(TypeError):
            Slot(bad, 0, 0)

    def test_immutable(self):
        slot = Slot(0, 0, 0)
        with pytest.raises(AttributeError):
            slot.row = 1


class TestGrid:
    """Tests for the bounded grid."""

    def test_extent_must_be_positive(self):
        with pytest.raises(ValueError):
            Grid(0)

    def test_extent_must_be_int(self):
        with pytest.raises(TypeError):
            Grid(2.5)

    def test_contains(self):
        grid = Grid(3)
        assert grid.contains(Slot(2, 2, 2))
        assert not grid.contains(Slot(3, 0, 0))
        assert not grid.contains(Slot(0, 0, 3))

    def test_require_returns_slot(self):
        assert Grid(3).require(Slot(1, 1, 1)) == Slot(1, 1, 1)

    def test_require_out_of_bounds(self):
        with pytest.raises(SlotOutOfBoundsError) as exc_info:
            Grid(3).require(Slot(0, 3, 0))
        assert exc_info.value.code == "SLOT_OUT_OF_BOUNDS"
        assert exc_info.value.extent == 3

    def test_max_distance_and_size(self):
        assert Grid(3).max_distance == 6
        assert Grid(1).max_distance == 0
        assert Grid(3).size == 27

    def test_slots_enumerates_whole_grid_in_order(self):
        slots = list(Grid(3).slots())
        assert len(slots) == 27
        assert slots == sorted(slots)
        assert slots[0] == ORIGIN
        assert slots[-1] == Slot(2, 2, 2)

    def test_slots_from_resumes_lexicographically(self):
        slots = list(Grid(3).slots_from(Slot(0, 1, 2)))
        assert slots[:3] == [Slot(0, 1, 2), Slot(0, 2, 0), Slot(0, 2, 1)]
        # every slot after the cursor, nothing before it
        assert len(slots) == 27 - 5
        assert all(slot >= Slot(0, 1, 2) for slot in slots)

    def test_slots_from_crosses_rows(self):
        slots = list(Grid(2).slots_from(Slot(0, 1, 1)))
        assert slots == [
            Slot(0, 1, 1),
            Slot(1, 0, 0),
            Slot(1, 0, 1),
            Slot(1, 1, 0),
            Slot(1, 1, 1),
        ]

    def test_slots_from_outside_grid_is_empty(self):
        assert list(Grid(2).slots_from(Slot(2, 0, 0))) == []
