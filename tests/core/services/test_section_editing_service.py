import pytest

from section_toolkit.config.settings import EditingSettings
from section_toolkit.core.drag import DropTarget
from section_toolkit.core.sections import EmptySectionPolicy
from section_toolkit.core.services import OperationResult, SectionEditingService, SnapshotService

from helpers import ids, make_item, make_section, positions


@pytest.fixture
def service():
    return SectionEditingService(settings=EditingSettings(), snapshots=SnapshotService(max_snapshots=5))


def _items(result, section_id):
    for section in result.sections:
        if section["id"] == section_id:
            return ids(section["items"])
    raise AssertionError(f"section {section_id} missing")


def test_default_construction_reads_config():
    service = SectionEditingService()
    assert service.settings.default_section_name == "Untitled Section"
    assert service.snapshots.max_snapshots == 10


class TestSectionLifecycle:
    def test_add_section_uses_default_name(self, service, two_sections):
        result = service.add_section(two_sections)
        assert isinstance(result, OperationResult)
        assert result.success
        assert result.sections[-1]["name"] == "Untitled Section"
        assert result.details["order"] == 2
        assert positions(result.sections, "order") == [0, 1, 2]

    def test_add_section_blank_name_fails(self, service, two_sections):
        result = service.add_section(two_sections, "  ")
        assert not result.success
        assert result.sections == two_sections

    def test_rename_strips_ends_only(self, service, two_sections):
        result = service.rename_section(two_sections, "B", "  Sauce   base ")
        assert result.success
        assert result.sections[1]["name"] == "Sauce   base"
        assert result.details["changed"] is True

    def test_rename_unknown_is_noop(self, service, two_sections):
        result = service.rename_section(two_sections, "gone", "X")
        assert result.success
        assert result.details["changed"] is False
        assert result.sections == two_sections

    def test_rename_blank_fails(self, service, two_sections):
        assert not service.rename_section(two_sections, "A", "").success

    def test_delete_middle_section(self, service):
        sections = [make_section("s1", 0), make_section("s2", 1), make_section("s3", 2)]
        result = service.delete_section(sections, "s2")
        assert result.success
        assert ids(result.sections) == ["s1", "s3"]
        assert positions(result.sections, "order") == [0, 1]

    def test_delete_unknown_fails(self, service, two_sections):
        result = service.delete_section(two_sections, "nope")
        assert not result.success
        assert "nope" in result.message

    def test_reorder_sections(self, service, two_sections):
        result = service.reorder_sections(two_sections, 1, 0)
        assert ids(result.sections) == ["B", "A"]
        assert positions(result.sections, "order") == [0, 1]

    def test_reorder_sections_bad_index(self, service, two_sections):
        result = service.reorder_sections(two_sections, 0, 5)
        assert not result.success
        assert result.details["length"] == 2


class TestItems:
    def test_add_item_generates_id(self, service, two_sections):
        result = service.add_item(two_sections, "B", {"name": "Pepper"})
        assert result.success
        new_items = result.sections[1]["items"]
        assert new_items[-1]["name"] == "Pepper"
        assert new_items[-1]["id"] == result.details["item_id"]
        assert positions(new_items) == [0, 1, 2]

    def test_add_item_unknown_section(self, service, two_sections):
        assert not service.add_item(two_sections, "Z", {"id": "n"}).success

    def test_remove_item(self, service, two_sections):
        result = service.remove_item(two_sections, "A", "b")
        assert _items(result, "A") == ["a", "c"]
        assert positions(result.sections[0]["items"]) == [0, 1]

    def test_remove_missing_item(self, service, two_sections):
        assert not service.remove_item(two_sections, "A", "x").success

    def test_reorder_item(self, service, two_sections):
        result = service.reorder_item(two_sections, "A", 0, 2)
        assert _items(result, "A") == ["b", "c", "a"]

    def test_reorder_item_bad_index(self, service, two_sections):
        result = service.reorder_item(two_sections, "A", 0, 3)
        assert not result.success
        assert result.sections == two_sections


class TestMoveItem:
    def test_cross_section_move(self, service, two_sections):
        result = service.move_item(two_sections, "A", 0, DropTarget.for_section("B", 2))

        assert result.success
        assert _items(result, "A") == ["b", "c"]
        assert _items(result, "B") == ["x", "y", "a"]
        assert positions(result.sections[1]["items"]) == [0, 1, 2]
        assert service.snapshots.count() == 1
        assert "validation_errors" not in result.details

    def test_move_accepts_mapping_destination(self, service, two_sections):
        result = service.move_item(two_sections, "B", 1, {"droppableId": "section-A", "index": 0})
        assert _items(result, "A") == ["y", "a", "b", "c"]

    def test_drop_at_end_of_same_section(self, service, two_sections):
        result = service.move_item(two_sections, "A", 0, DropTarget.for_section("A", 3))
        assert result.success
        assert _items(result, "A") == ["b", "c", "a"]

    def test_dropped_outside(self, service, two_sections):
        result = service.move_item(two_sections, "A", 0, None)
        assert not result.success
        assert result.details["error_type"] == "INVALID_DESTINATION"
        assert result.sections == two_sections
        assert service.snapshots.count() == 0

    def test_missing_target_section(self, service, two_sections):
        result = service.move_item(two_sections, "A", 0, DropTarget.for_section("Q", 0))
        assert result.details["error_type"] == "MISSING_SECTION"
        assert result.details["section_id"] == "Q"

    def test_flat_list_target_rejected(self, service, two_sections):
        result = service.move_item(two_sections, "A", 0, DropTarget("flat-items", 0))
        assert not result.success
        assert result.details["error_type"] == "INVALID_DESTINATION"

    def test_failed_move_reverts_to_snapshot(self, service, two_sections):
        result = service.move_item(two_sections, "A", 9, DropTarget.for_section("B", 0))

        assert not result.success
        assert result.details["error_type"] == "DATA_CORRUPTION"
        assert result.details["reverted"] is True
        assert result.sections == two_sections
        assert result.sections is not two_sections

    def test_move_from_empty_section_reverts(self, service, two_sections):
        sections = two_sections + [make_section("E", 2)]
        result = service.move_item(sections, "E", 0, DropTarget.for_section("A", 0))
        assert not result.success
        assert result.details["original_error"] == "EmptySourceError"
        assert result.sections == sections

    def test_emptied_section_kept_by_default(self, service):
        sections = [make_section("A", 0, ["a"]), make_section("B", 1, ["x"])]
        result = service.move_item(sections, "A", 0, DropTarget.for_section("B", 1))
        assert ids(result.sections) == ["A", "B"]
        assert result.sections[0]["items"] == []
        assert result.details["removed_empty_section"] is False

    def test_emptied_section_removed_when_configured(self):
        service = SectionEditingService(settings=EditingSettings(empty_section_policy=EmptySectionPolicy.REMOVE))
        sections = [make_section("A", 0, ["a"]), make_section("B", 1, ["x"])]

        result = service.move_item(sections, "A", 0, DropTarget.for_section("B", 1))

        assert ids(result.sections) == ["B"]
        assert result.sections[0]["order"] == 0
        assert ids(result.sections[0]["items"]) == ["x", "a"]
        assert result.details["removed_empty_section"] is True


class TestIntegrityAndSave:
    def test_check_integrity_fixes_positions(self, service):
        s1 = make_section("A", 0, ["a", "b"])
        s1["items"][1]["position"] = 0
        result = service.check_integrity([s1, make_section("B", 0, ["x"])])

        assert result.success
        assert result.message == "Fixed 2 position problems."
        assert positions(result.sections, "order") == [0, 1]
        assert positions(result.sections[0]["items"]) == [0, 1]
        assert result.details["data_errors"] == []

    def test_check_integrity_clean(self, service, two_sections):
        result = service.check_integrity(two_sections)
        assert result.message == "No changes needed."
        assert result.details["fixed"] == 0

    def test_check_integrity_reports_data_problems(self, service):
        sections = [make_section("A", 0, ["a"], name="")]
        result = service.check_integrity(sections)
        assert result.success
        assert result.details["data_errors"] == ["Section at index 0 has empty name"]

    def test_edit_on_broken_input_reports_validation_errors(self, service):
        sections = [make_section("A", 0, ["a"]), make_section("B", 0, ["x"])]
        result = service.rename_section(sections, "A", "Renamed")
        assert result.success
        assert result.details["validation_errors"] == ["Duplicate position: 0 (used 2 times)"]

    def test_resolve_save_incoming_wins(self, service, two_sections):
        incoming = [{**two_sections[0], "items": []}, two_sections[1]]
        result = service.resolve_save(two_sections, incoming)
        assert result.sections[0]["items"] == []
        assert result.details["used_incoming"] is True

    def test_resolve_save_without_incoming(self, service, two_sections):
        result = service.resolve_save(two_sections, None)
        assert result.sections == two_sections
        assert result.details["used_incoming"] is False

    def test_normalize_uses_configured_section_name(self):
        service = SectionEditingService(settings=EditingSettings(imported_section_name="From the web"))
        result = service.normalize({"ingredient_sections": [{"items": [{"name": "Rice"}]}]})
        assert result.data["ingredient_sections"][0]["name"] == "From the web"
        assert result.summary.sections_renamed == 1
