from section_toolkit.core.conflicts import resolve_position_conflicts, resolve_section_conflicts
from section_toolkit.core.reorder import move_between_sections

from helpers import ids, make_item, make_section, positions


class TestResolvePositionConflicts:
    def test_incoming_wins(self):
        existing = [make_item("a", 0), make_item("b", 1)]
        incoming = [make_item("b", 3), make_item("c", 3)]
        assert resolve_position_conflicts(existing, incoming) == [make_item("b", 0), make_item("c", 1)]

    def test_explicit_empty_incoming_wins(self):
        assert resolve_position_conflicts([make_item("a", 0)], []) == []

    def test_missing_incoming_keeps_existing_reindexed(self):
        existing = [make_item("b", 4), make_item("a", 2)]
        assert resolve_position_conflicts(existing, None) == [make_item("a", 0), make_item("b", 1)]

    def test_nothing_at_all(self):
        assert resolve_position_conflicts(None, None) == []


class TestResolveSectionConflicts:
    def test_missing_incoming_reindexes_existing(self):
        s1 = make_section("s1", 3, ["a", "b"])
        s1["items"][0]["position"] = 5
        result = resolve_section_conflicts([s1, make_section("s0", 1)], None)
        assert ids(result) == ["s0", "s1"]
        assert positions(result, "order") == [0, 1]
        assert ids(result[1]["items"]) == ["b", "a"]
        assert positions(result[1]["items"]) == [0, 1]

    def test_incoming_sections_replace_existing(self):
        existing = [make_section("s1", 0, ["a"]), make_section("s2", 1, ["b"])]
        incoming = [make_section("s2", 0, ["b"])]
        result = resolve_section_conflicts(existing, incoming)
        assert ids(result) == ["s2"]

    def test_incoming_section_without_items_falls_back_to_stored(self):
        existing = [make_section("s1", 0, ["a", "b"])]
        incoming = [{"id": "s1", "name": "Renamed", "order": 0}]
        result = resolve_section_conflicts(existing, incoming)
        assert result[0]["name"] == "Renamed"
        assert ids(result[0]["items"]) == ["a", "b"]

    def test_items_moved_out_do_not_reappear(self):
        # Client moves every item out of s1 into s2, then saves.
        existing = [make_section("s1", 0, ["a", "b"]), make_section("s2", 1, ["x"])]
        s1_items, s2_items = existing[0]["items"], existing[1]["items"]
        s1_items, s2_items = move_between_sections(s1_items, s2_items, 0, 0)
        s1_items, s2_items = move_between_sections(s1_items, s2_items, 0, 0)
        incoming = [
            {**existing[0], "items": s1_items},
            {**existing[1], "items": s2_items},
        ]

        result = resolve_section_conflicts(existing, incoming)

        assert result[0]["items"] == []
        assert sorted(ids(result[1]["items"])) == ["a", "b", "x"]
        all_ids = [i["id"] for s in result for i in s["items"]]
        assert len(all_ids) == len(set(all_ids))

    def test_output_is_contiguous(self):
        incoming = [make_section("s2", 7, ["y"]), make_section("s1", 7, ["x", "z"])]
        incoming[1]["items"][1]["position"] = 9
        result = resolve_section_conflicts([], incoming)
        assert ids(result) == ["s1", "s2"]
        assert positions(result, "order") == [0, 1]
        assert positions(result[0]["items"]) == [0, 1]
