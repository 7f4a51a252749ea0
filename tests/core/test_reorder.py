import pytest

from section_toolkit.core.exceptions import EmptySourceError, PositionIndexError, StructuralError
from section_toolkit.core.models import Item
from section_toolkit.core.reorder import move_between_sections, reorder_sections, reorder_within_section

from helpers import ids, make_item, make_section, positions


def _abc():
    return [make_item("a", 0), make_item("b", 1), make_item("c", 2)]


class TestReorderWithinSection:
    def test_move_first_to_last(self):
        result = reorder_within_section(_abc(), 0, 2)
        assert result == [make_item("b", 0), make_item("c", 1), make_item("a", 2)]

    def test_move_last_to_first(self):
        result = reorder_within_section(_abc(), 2, 0)
        assert ids(result) == ["c", "a", "b"]
        assert positions(result) == [0, 1, 2]

    def test_moved_item_precedes_item_originally_at_destination(self):
        items = [make_item(x, i) for i, x in enumerate("abcde")]
        result = reorder_within_section(items, 1, 3)
        # Others keep their relative order
        assert ids(result) == ["a", "c", "d", "b", "e"]

    def test_same_index_returns_unchanged(self):
        items = _abc()
        assert reorder_within_section(items, 1, 1) == items

    def test_input_not_mutated(self):
        items = _abc()
        reorder_within_section(items, 0, 2)
        assert items == _abc()

    def test_cardinality_preserved(self):
        assert len(reorder_within_section(_abc(), 2, 1)) == 3

    @pytest.mark.parametrize("src,dst", [(-1, 0), (0, 3), (3, 0), (0, -1), (None, 0), (True, 0)])
    def test_invalid_indices_raise(self, src, dst):
        with pytest.raises(PositionIndexError) as excinfo:
            reorder_within_section(_abc(), src, dst)
        assert excinfo.value.length == 3
        assert "Invalid indices" in str(excinfo.value)

    def test_empty_list_raises(self):
        with pytest.raises(PositionIndexError):
            reorder_within_section([], 0, 0)

    def test_index_error_is_structural(self):
        with pytest.raises(StructuralError):
            reorder_within_section(_abc(), 0, 9)
        with pytest.raises(IndexError):
            reorder_within_section(_abc(), 0, 9)

    def test_dataclass_items(self):
        items = [Item(id="a", position=0), Item(id="b", position=1)]
        result = reorder_within_section(items, 1, 0)
        assert result == [Item(id="b", position=0), Item(id="a", position=1)]


class TestReorderSections:
    def test_rewrites_order_only(self):
        sections = [make_section("s1", 0, ["a"]), make_section("s2", 1, ["b"]), make_section("s3", 2)]
        result = reorder_sections(sections, 2, 0)
        assert ids(result) == ["s3", "s1", "s2"]
        assert positions(result, "order") == [0, 1, 2]
        assert result[1]["items"] == sections[0]["items"]

    def test_invalid_index(self):
        with pytest.raises(PositionIndexError):
            reorder_sections([make_section("s1", 0)], 0, 1)


class TestMoveBetweenSections:
    def test_move_into_front(self):
        result = move_between_sections([make_item("x", 0)], [make_item("y", 0)], 0, 0)
        assert result.source_items == []
        assert result.dest_items == [make_item("x", 0), make_item("y", 1)]

    def test_append_at_length(self):
        source = [make_item("a", 0), make_item("b", 1)]
        dest = [make_item("x", 0)]
        result = move_between_sections(source, dest, 0, 1)
        assert ids(result.source_items) == ["b"]
        assert positions(result.source_items) == [0]
        assert ids(result.dest_items) == ["x", "a"]
        assert positions(result.dest_items) == [0, 1]

    def test_into_empty_destination(self):
        result = move_between_sections([make_item("a", 0)], [], 0, 0)
        assert ids(result.dest_items) == ["a"]

    def test_moved_item_keeps_other_fields(self):
        source = [make_item("a", 0, name="Flour", amount="2 cups")]
        result = move_between_sections(source, [make_item("x", 0)], 0, 1)
        moved = result.dest_items[1]
        assert moved["name"] == "Flour"
        assert moved["amount"] == "2 cups"
        assert moved["position"] == 1

    def test_total_count_preserved(self):
        source = [make_item("a", 0), make_item("b", 1), make_item("c", 2)]
        dest = [make_item("x", 0), make_item("y", 1)]
        result = move_between_sections(source, dest, 1, 1)
        assert len(result.source_items) + len(result.dest_items) == 5

    def test_inputs_not_mutated(self):
        source = [make_item("a", 0)]
        dest = [make_item("x", 0)]
        move_between_sections(source, dest, 0, 0)
        assert source == [make_item("a", 0)]
        assert dest == [make_item("x", 0)]

    def test_result_unpacks_as_pair(self):
        source_items, dest_items = move_between_sections([make_item("a", 0)], [], 0, 0)
        assert source_items == []
        assert ids(dest_items) == ["a"]

    def test_empty_source_raises(self):
        with pytest.raises(EmptySourceError):
            move_between_sections([], [make_item("x", 0)], 0, 0)

    def test_bad_source_index(self):
        with pytest.raises(PositionIndexError) as excinfo:
            move_between_sections([make_item("a", 0)], [], 1, 0)
        assert excinfo.value.source_index == 1
        assert "Invalid source index" in str(excinfo.value)

    def test_destination_past_end(self):
        with pytest.raises(PositionIndexError) as excinfo:
            move_between_sections([make_item("a", 0)], [make_item("x", 0)], 0, 2)
        assert excinfo.value.destination_index == 2
        assert "max allowed=1" in str(excinfo.value)
