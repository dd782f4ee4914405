"""Tests for the V1 -> V2 definition migration helpers.

Tier-1 tests: pure functions, no DB.
"""

import copy

import pytest

from forms_manager.domain.definition import migration_pure as migration
from forms_manager.domain.definition.constants import SUMMARY_PAGE_ID, SchemaVersion
from forms_manager.domain.definition.templates import empty_v1, empty_v2
from forms_manager.domain.definition.validation import validate
from forms_manager.domain.errors import BadRequestError


def _v1_with_condition(page_condition="isBob"):
    definition = empty_v1()
    definition["pages"].insert(1, {
        "path": "/bob",
        "title": "Hello Bob",
        "section": "section",
        "condition": page_condition,
        "components": [{"type": "Html", "name": "hello", "content": "<p>Hi</p>", "options": {}}],
    })
    definition["conditions"] = [{
        "name": "isBob",
        "displayName": "Is Bob",
        "value": {
            "name": "isBob",
            "conditions": [{
                "field": {"name": "textField", "type": "TextField", "display": "Name"},
                "operator": "is",
                "value": {"type": "Value", "value": "Bob", "display": "Bob"},
            }],
        },
    }]
    return definition


class TestSummaryPosition:

    def test_summary_helper_finds_summary(self):
        position = migration.summary_helper(empty_v1())
        assert position.summary_exists
        assert not position.should_reposition
        assert position.index == 1

    def test_reposition_moves_summary_last(self):
        definition = empty_v1()
        definition["pages"].reverse()

        updated = migration.reposition_summary(definition)

        assert [p["path"] for p in updated["pages"]] == ["/page-one", "/summary"]
        assert definition["pages"][0]["path"] == "/summary"

    def test_no_summary(self):
        definition = empty_v1()
        definition["pages"].pop()
        position = migration.summary_helper(definition)
        assert not position.summary_exists
        assert position.summary is None


class TestIds:

    def test_summary_gets_fixed_id(self):
        updated = migration.populate_page_ids(empty_v1())
        assert updated["pages"][1]["id"] == SUMMARY_PAGE_ID
        assert updated["pages"][0]["id"] not in ("", SUMMARY_PAGE_ID)

    def test_existing_ids_kept(self):
        definition = empty_v1()
        definition["pages"][0]["id"] = "keep-me"
        assert migration.populate_page_ids(definition)["pages"][0]["id"] == "keep-me"

    def test_component_ids_added(self):
        updated = migration.add_component_ids_to_definition(empty_v1())
        assert updated["pages"][0]["components"][0]["id"]


class TestConditionType:

    @pytest.mark.parametrize("field_type,operator,expected", [
        ("RadiosField", "is", "ListItemRef"),
        ("NumberField", "is at least", "NumberValue"),
        ("YesNoField", "is", "BooleanValue"),
        ("TextField", "is longer than", "NumberValue"),
        ("TextField", "is", "StringValue"),
    ])
    def test_determine_condition_type(self, field_type, operator, expected):
        condition_data = {
            "field": {"name": "f", "type": field_type},
            "operator": operator,
            "value": {"type": "Value", "value": "1"},
        }
        assert migration.determine_condition_type(condition_data) == expected

    def test_relative_date(self):
        condition_data = {
            "field": {"name": "f", "type": "DatePartsField"},
            "operator": "is at least",
            "value": {"type": "RelativeDate", "period": "3", "unit": "days", "direction": "in the past"},
        }
        assert migration.determine_condition_type(condition_data) == "RelativeDate"


class TestMigrateToV2:

    def test_empty_v1_becomes_valid_v2(self):
        migrated = migration.migrate_to_v2(empty_v1())

        assert migrated["engine"] == "V2"
        assert migrated["schema"] == 2
        assert all("next" not in page for page in migrated["pages"])
        validate(migrated, SchemaVersion.V2)

    def test_sections_referenced_by_id(self):
        migrated = migration.migrate_to_v2(empty_v1())
        section_id = migrated["sections"][0]["id"]
        assert migrated["pages"][0]["section"] == section_id

    def test_form_fields_get_short_description(self):
        migrated = migration.migrate_to_v2(empty_v1())
        component = migrated["pages"][0]["components"][0]
        assert component["shortDescription"] == "This is your first field"

    def test_declaration_moves_to_summary(self):
        definition = {**empty_v1(), "declaration": "I declare this is true"}
        migrated = migration.migrate_to_v2(definition)

        assert "declaration" not in migrated
        summary = migrated["pages"][-1]
        assert summary["components"][0]["type"] == "Markdown"
        assert summary["components"][0]["content"] == "I declare this is true"

    def test_conditions_converted_and_pages_repointed(self):
        migrated = migration.migrate_to_v2(_v1_with_condition())

        condition = migrated["conditions"][0]
        text_field_id = migrated["pages"][0]["components"][0]["id"]
        assert condition["displayName"] == "Is Bob"
        assert condition["items"][0]["componentId"] == text_field_id
        assert condition["items"][0]["type"] == "StringValue"
        assert migrated["pages"][1]["condition"] == condition["id"]
        validate(migrated, SchemaVersion.V2)

    def test_unknown_list_name_rejected(self):
        definition = empty_v1()
        definition["pages"][0]["components"][0]["list"] = "missing"
        with pytest.raises(BadRequestError, match="missing"):
            migration.migrate_to_v2(definition)

    def test_v2_input_returned_unchanged(self):
        definition = empty_v2()
        assert migration.migrate_to_v2(definition) == definition

    def test_schema_version_decides_v2(self):
        flipped_engine = {**empty_v1(), "engine": "V2"}

        assert migration.is_v2(flipped_engine) is False
        assert migration.is_v2({**empty_v2(), "engine": "V1"}) is True

    def test_input_not_mutated(self):
        definition = _v1_with_condition()
        before = copy.deepcopy(definition)
        migration.migrate_to_v2(definition)
        assert definition == before
