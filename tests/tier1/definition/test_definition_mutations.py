"""Tests for the form definition mutation helpers.

Tier-1 tests: pure functions, no DB.
"""

import copy

import pytest

from forms_manager.domain.definition import mutations_pure as helpers
from forms_manager.domain.definition.constants import ApiErrorCode, ControllerType
from forms_manager.domain.errors import DuplicatePagePathError, NotFoundError


def _page(page_id, path, **extra):
    return {"id": page_id, "path": path, "title": path.strip("/"), "components": [], **extra}


def _summary():
    return {"id": "summary", "path": "/summary", "title": "Summary", "controller": ControllerType.SUMMARY.value}


def _payment_page():
    return _page("pay", "/pay", components=[{"id": "p1", "type": "PaymentField", "name": "payment"}])


def _definition(*pages):
    return {
        "name": "Test",
        "engine": "V2",
        "schema": 2,
        "pages": list(pages),
        "lists": [],
        "conditions": [],
        "sections": [],
    }


# =========================================================================
# Lookups
# =========================================================================

class TestLookups:

    def test_get_page_returns_page(self):
        definition = _definition(_page("a", "/a"))
        assert helpers.get_page(definition, "a")["path"] == "/a"

    def test_get_page_missing_names_kind_and_id(self):
        with pytest.raises(NotFoundError, match="Page not found with id 'missing'"):
            helpers.get_page(_definition(), "missing")

    def test_find_component_on_missing_page_is_none(self):
        assert helpers.find_component(_definition(), "nope", "c1") is None

    def test_get_component_missing_raises(self):
        definition = _definition(_page("a", "/a"))
        with pytest.raises(NotFoundError, match="Component not found on page 'a'"):
            helpers.get_component(definition, "a", "c1")


# =========================================================================
# Page insert position
# =========================================================================

class TestPageInsertPosition:

    def test_appends_when_no_summary(self):
        definition = _definition(_page("a", "/a"))
        assert helpers.get_page_insert_position(definition) is None

    def test_before_trailing_summary(self):
        definition = _definition(_page("a", "/a"), _summary())
        assert helpers.get_page_insert_position(definition) == -1

    def test_before_payment_page_preceding_summary(self):
        definition = _definition(_page("a", "/a"), _payment_page(), _summary())
        assert helpers.get_page_insert_position(definition, _page("b", "/b")) == -2

    def test_payment_page_goes_directly_before_summary(self):
        definition = _definition(_page("a", "/a"), _summary())
        assert helpers.get_page_insert_position(definition, _payment_page()) == -1

    def test_added_page_keeps_summary_last(self):
        definition = _definition(_page("a", "/a"), _summary())
        position = helpers.get_page_insert_position(definition)
        updated = helpers.modify_add_page(definition, _page("b", "/b"), position)
        assert [p["id"] for p in updated["pages"]] == ["a", "b", "summary"]


# =========================================================================
# Gates
# =========================================================================

class TestUniquePathGate:

    def test_duplicate_path_raises_with_code(self):
        definition = _definition(_page("a", "/a"))
        with pytest.raises(DuplicatePagePathError) as exc_info:
            helpers.unique_path_gate(definition, "/a", "Duplicate", ApiErrorCode.DUPLICATE_PAGE_PATH_PAGE)
        assert exc_info.value.error_code == "duplicate_page_path_page"

    def test_same_page_excluded(self):
        definition = _definition(_page("a", "/a"))
        helpers.unique_path_gate(definition, "/a", "Duplicate", exclude_page_id="a")

    def test_new_path_passes(self):
        helpers.unique_path_gate(_definition(_page("a", "/a")), "/b", "Duplicate")


# =========================================================================
# Pages
# =========================================================================

class TestPageMutations:

    def test_helpers_never_mutate_input(self):
        definition = _definition(_page("a", "/a"), _page("b", "/b"))
        before = copy.deepcopy(definition)

        helpers.modify_delete_page(definition, "a")
        helpers.modify_reorder_pages(definition, ["b", "a"])
        helpers.modify_update_page_fields(definition, "a", {"title": "New"})

        assert definition == before

    def test_reorder_listed_first_unlisted_keep_order(self):
        definition = _definition(_page("A", "/a"), _page("B", "/b"), _page("C", "/c"))
        updated = helpers.modify_reorder_pages(definition, ["C", "A"])
        assert [p["id"] for p in updated["pages"]] == ["C", "A", "B"]

    def test_reorder_is_idempotent(self):
        definition = _definition(_page("A", "/a"), _page("B", "/b"), _page("C", "/c"))
        once = helpers.modify_reorder_pages(definition, ["B", "C"])
        twice = helpers.modify_reorder_pages(once, ["B", "C"])
        assert once == twice

    def test_adding_payment_page_turns_on_reference_number(self):
        updated = helpers.modify_add_page(_definition(_page("a", "/a")), _payment_page())
        assert updated["options"]["showReferenceNumber"] is True

    def test_update_page_fields_allows_empty_title(self):
        updated = helpers.modify_update_page_fields(_definition(_page("a", "/a")), "a", {"title": ""})
        assert updated["pages"][0]["title"] == ""

    def test_update_page_fields_none_controller_removes_it(self):
        definition = _definition(_page("a", "/a", controller=ControllerType.TERMINAL.value))
        updated = helpers.modify_update_page_fields(definition, "a", {"controller": None})
        assert "controller" not in updated["pages"][0]

    def test_update_page_fields_omitted_controller_left_alone(self):
        definition = _definition(_page("a", "/a", controller=ControllerType.TERMINAL.value))
        updated = helpers.modify_update_page_fields(definition, "a", {"title": "T"})
        assert updated["pages"][0]["controller"] == ControllerType.TERMINAL.value

    def test_file_upload_controller_coerces_first_field(self):
        page = _page("a", "/a", components=[
            {"id": "h", "type": "Html", "name": "intro"},
            {"id": "t", "type": "TextField", "name": "doc"},
        ])
        updated = helpers.modify_update_page_fields(
            _definition(page), "a", {"controller": ControllerType.FILE_UPLOAD.value}
        )
        types = [c["type"] for c in updated["pages"][0]["components"]]
        assert types == ["Html", "FileUploadField"]

    def test_repeat_ignored_on_non_repeater(self):
        repeat = {"options": {"name": "r", "title": "R"}, "schema": {"min": 1, "max": 2}}
        updated = helpers.modify_update_page_fields(_definition(_page("a", "/a")), "a", {"repeat": repeat})
        assert "repeat" not in updated["pages"][0]

    def test_delete_missing_page_raises(self):
        with pytest.raises(NotFoundError):
            helpers.modify_delete_page(_definition(), "missing")


# =========================================================================
# Components
# =========================================================================

class TestComponentMutations:

    def test_add_at_position_zero_prepends(self):
        page = _page("a", "/a", components=[{"id": "c1", "type": "TextField", "name": "one"}])
        updated = helpers.modify_add_component(
            _definition(page), "a", {"id": "c2", "type": "TextField", "name": "two"}, position=0
        )
        assert [c["id"] for c in updated["pages"][0]["components"]] == ["c2", "c1"]

    def test_summary_without_components_gets_list(self):
        updated = helpers.modify_add_component(
            _definition(_summary()), "summary", {"id": "m", "type": "Markdown", "name": "md"}
        )
        assert updated["pages"][0]["components"][0]["id"] == "m"

    def test_page_without_components_left_unchanged(self):
        definition = _definition({"id": "a", "path": "/a", "title": "A"})

        updated = helpers.modify_add_component(definition, "a", {"id": "c", "type": "TextField", "name": "c"})

        assert updated == definition
        assert updated is not definition

    def test_reorder_components(self):
        page = _page("a", "/a", components=[
            {"id": "x", "type": "TextField", "name": "x"},
            {"id": "y", "type": "TextField", "name": "y"},
            {"id": "z", "type": "TextField", "name": "z"},
        ])
        updated = helpers.modify_reorder_components(_definition(page), "a", ["z", "x"])
        assert [c["id"] for c in updated["pages"][0]["components"]] == ["z", "x", "y"]


# =========================================================================
# Conditions and sections
# =========================================================================

class TestConditionMutations:

    def test_unassign_removes_condition_from_pages(self):
        definition = _definition(_page("a", "/a", condition="c1"), _page("b", "/b", condition="c2"))
        updated = helpers.modify_unassign_condition(definition, "c1")
        assert "condition" not in updated["pages"][0]
        assert updated["pages"][1]["condition"] == "c2"

    def test_delete_missing_condition_raises(self):
        with pytest.raises(NotFoundError):
            helpers.modify_delete_condition(_definition(), "c1")


class TestSectionMutations:

    def test_assign_generates_id_and_name(self):
        definition = _definition(_page("a", "/a"))
        updated = helpers.modify_assign_sections(
            definition, [{"title": "About You", "pageIds": ["a"]}]
        )
        section = updated["sections"][0]
        assert section["name"] == "about-you"
        assert section["id"]
        assert "pageIds" not in section
        assert updated["pages"][0]["section"] == section["id"]

    def test_assign_clears_unlisted_pages(self):
        definition = _definition(_page("a", "/a", section="old"), _page("b", "/b"))
        updated = helpers.modify_assign_sections(
            definition, [{"id": "s1", "name": "s", "title": "S", "pageIds": ["b"]}]
        )
        assert "section" not in updated["pages"][0]
        assert updated["pages"][1]["section"] == "s1"

    def test_assign_unknown_page_raises(self):
        with pytest.raises(NotFoundError):
            helpers.modify_assign_sections(_definition(), [{"title": "S", "pageIds": ["nope"]}])

    def test_sections_response_derives_page_ids(self):
        definition = _definition(_page("a", "/a"), _page("b", "/b"))
        updated = helpers.modify_assign_sections(
            definition, [{"id": "s1", "name": "s", "title": "S", "hideTitle": True, "pageIds": ["a", "b"]}]
        )
        assert helpers.build_sections_response(updated) == [
            {"id": "s1", "name": "s", "title": "S", "hideTitle": True, "pageIds": ["a", "b"]}
        ]
