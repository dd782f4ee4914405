"""Tests for form definition validation.

Tier-1 tests: JSON Schema structure plus uniqueness and reference rules.
"""

import pytest

from forms_manager.domain.definition.constants import SchemaVersion
from forms_manager.domain.definition.templates import empty_v1, empty_v2
from forms_manager.domain.definition.validation import (
    FormDefinitionError,
    get_causes,
    get_validation_schema,
    validate,
)
from forms_manager.domain.errors import InvalidFormDefinitionError


def _v2_with_page(**page_extra):
    definition = empty_v2()
    definition["pages"].insert(0, {
        "id": "p1",
        "path": "/what-is-your-name",
        "title": "What is your name?",
        "components": [{"id": "c1", "type": "TextField", "name": "fullName", "title": "Name"}],
        **page_extra,
    })
    return definition


def _cause_ids(definition, schema=SchemaVersion.V2):
    return [cause["id"] for cause in get_causes(definition, schema)]


class TestSchemaSelection:

    def test_v2_engine_selects_v2(self):
        assert get_validation_schema(empty_v2()) == SchemaVersion.V2

    def test_v1_engine_selects_v1(self):
        assert get_validation_schema(empty_v1()) == SchemaVersion.V1

    def test_missing_engine_defaults_to_v1(self):
        assert get_validation_schema({"pages": []}) == SchemaVersion.V1


class TestTemplatesAreValid:

    def test_empty_v1(self):
        assert validate(empty_v1()) == empty_v1()

    def test_empty_v2(self):
        assert validate(empty_v2(), SchemaVersion.V2) == empty_v2()


class TestStructure:

    def test_missing_page_title_is_type_cause(self):
        definition = _v2_with_page()
        del definition["pages"][0]["title"]

        with pytest.raises(InvalidFormDefinitionError) as exc_info:
            validate(definition)

        cause = exc_info.value.causes[0]
        assert cause["type"] == "type"
        assert cause["id"] == FormDefinitionError.OTHER.value

    def test_unknown_top_level_field_rejected_on_v2(self):
        definition = {**empty_v2(), "feeOptions": {}}
        assert _cause_ids(definition) == [FormDefinitionError.OTHER.value]

    def test_section_may_not_carry_page_ids(self):
        definition = empty_v2()
        definition["sections"] = [{"id": "s1", "name": "s", "title": "S", "pageIds": []}]
        assert FormDefinitionError.OTHER.value in _cause_ids(definition)

    def test_error_carries_status_and_causes(self):
        definition = _v2_with_page()
        definition["pages"][0]["path"] = "no-slash"

        with pytest.raises(InvalidFormDefinitionError) as exc_info:
            validate(definition)

        assert exc_info.value.status_code == 400
        assert exc_info.value.to_dict()["details"]["causes"]


class TestUniqueness:

    def test_duplicate_page_path(self):
        definition = _v2_with_page()
        definition["pages"][1]["path"] = "/what-is-your-name"
        assert _cause_ids(definition) == [FormDefinitionError.UNIQUE_PAGE_PATH.value]

    def test_duplicate_component_name_across_pages(self):
        definition = _v2_with_page()
        definition["pages"][1]["components"] = [{"id": "c2", "type": "TextField", "name": "fullName"}]
        assert _cause_ids(definition) == [FormDefinitionError.UNIQUE_PAGE_COMPONENT_NAME.value]

    def test_duplicate_list_item_value(self):
        definition = empty_v2()
        definition["lists"] = [{
            "id": "l1",
            "name": "colours",
            "title": "Colours",
            "type": "string",
            "items": [{"text": "Red", "value": "red"}, {"text": "Crimson", "value": "red"}],
        }]
        assert _cause_ids(definition) == [FormDefinitionError.UNIQUE_LIST_ITEM_VALUE.value]

    def test_unique_cause_reports_positions(self):
        definition = _v2_with_page()
        definition["pages"][1]["id"] = "p1"
        cause = get_causes(definition, SchemaVersion.V2)[0]
        assert cause["detail"] == {"path": ["pages", 1], "pos": 1, "dupePos": 0}


class TestReferences:

    def test_page_section_must_exist(self):
        definition = _v2_with_page(section="missing")
        assert _cause_ids(definition) == [FormDefinitionError.REF_PAGE_SECTION.value]

    def test_component_list_must_exist(self):
        definition = _v2_with_page()
        definition["pages"][0]["components"][0]["list"] = "missing"
        assert _cause_ids(definition) == [FormDefinitionError.REF_PAGE_COMPONENT_LIST.value]

    def test_page_condition_must_exist_on_v2(self):
        definition = _v2_with_page(condition="missing")
        assert _cause_ids(definition) == [FormDefinitionError.REF_PAGE_CONDITION.value]

    def test_condition_component_must_exist(self):
        definition = _v2_with_page()
        definition["conditions"] = [{
            "id": "cond1",
            "displayName": "Is Bob",
            "items": [{
                "id": "i1",
                "componentId": "nope",
                "operator": "is",
                "type": "StringValue",
                "value": "Bob",
            }],
        }]
        assert _cause_ids(definition) == [FormDefinitionError.REF_CONDITION_COMPONENT_ID.value]

    def test_valid_condition_reference_passes(self):
        definition = _v2_with_page(condition="cond1")
        definition["conditions"] = [{
            "id": "cond1",
            "displayName": "Is Bob",
            "items": [{"id": "i1", "componentId": "c1", "operator": "is", "type": "StringValue", "value": "Bob"}],
        }]
        assert get_causes(definition, SchemaVersion.V2) == []

    def test_v1_sections_referenced_by_name(self):
        assert get_causes(empty_v1(), SchemaVersion.V1) == []
