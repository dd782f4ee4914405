"""
Form definition validation.

Structure is checked with JSON Schema (one schema per engine version). Once
the structure is sound, uniqueness and reference rules that JSON Schema
cannot express are checked by hand. Every failure becomes a cause:

    {"id": <FormDefinitionError>, "type": "unique" | "ref" | "type",
     "message": <str>, "detail": {...}}

and the whole list is carried by ``InvalidFormDefinitionError``.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Hashable, List, Optional

import jsonschema

from forms_manager.domain.definition.constants import Engine, SchemaVersion
from forms_manager.domain.errors import InvalidFormDefinitionError

SCHEMA_DIR = Path(__file__).parent / "schemas"


class FormDefinitionError(str, Enum):
    UNIQUE_PAGE_ID = "unique_page_id"
    UNIQUE_PAGE_PATH = "unique_page_path"
    UNIQUE_PAGE_COMPONENT_ID = "unique_page_component_id"
    UNIQUE_PAGE_COMPONENT_NAME = "unique_page_component_name"
    UNIQUE_SECTION_ID = "unique_section_id"
    UNIQUE_SECTION_NAME = "unique_section_name"
    UNIQUE_SECTION_TITLE = "unique_section_title"
    UNIQUE_LIST_ID = "unique_list_id"
    UNIQUE_LIST_NAME = "unique_list_name"
    UNIQUE_LIST_TITLE = "unique_list_title"
    UNIQUE_LIST_ITEM_TEXT = "unique_list_item_text"
    UNIQUE_LIST_ITEM_VALUE = "unique_list_item_value"
    UNIQUE_CONDITION_ID = "unique_condition_id"
    UNIQUE_CONDITION_DISPLAY_NAME = "unique_condition_displayname"
    REF_PAGE_CONDITION = "ref_page_condition"
    REF_PAGE_SECTION = "ref_page_section"
    REF_PAGE_COMPONENT_LIST = "ref_page_component_list"
    REF_CONDITION_COMPONENT_ID = "ref_condition_component_id"
    REF_CONDITION_CONDITION_ID = "ref_condition_condition_id"
    OTHER = "other"


class FormDefinitionErrorType(str, Enum):
    UNIQUE = "unique"
    REF = "ref"
    TYPE = "type"


def _load_schema(filename: str) -> Dict[str, Any]:
    with open(SCHEMA_DIR / filename, "r", encoding="utf-8") as f:
        return json.load(f)


_VALIDATORS = {
    SchemaVersion.V1: jsonschema.Draft7Validator(_load_schema("form-definition-v1.json")),
    SchemaVersion.V2: jsonschema.Draft7Validator(_load_schema("form-definition-v2.json")),
}


def get_validation_schema(definition: Dict[str, Any]) -> SchemaVersion:
    """Schema matching the definition's engine."""
    if definition.get("engine") == Engine.V2.value or definition.get("schema") == SchemaVersion.V2.value:
        return SchemaVersion.V2
    return SchemaVersion.V1


def _format_path(path: List[Any]) -> str:
    text = ""
    for part in path:
        if isinstance(part, int):
            text += f"[{part}]"
        else:
            text += f".{part}" if text else str(part)
    return text


def _cause(
    error: FormDefinitionError,
    error_type: FormDefinitionErrorType,
    message: str,
    detail: Dict[str, Any],
) -> Dict[str, Any]:
    return {
        "id": error.value,
        "type": error_type.value,
        "message": message,
        "detail": detail,
    }


# =============================================================================
# STRUCTURE
# =============================================================================

def _schema_causes(definition: Dict[str, Any], schema: SchemaVersion) -> List[Dict[str, Any]]:
    errors = sorted(_VALIDATORS[schema].iter_errors(definition), key=lambda e: list(e.absolute_path))
    causes = []
    for error in errors:
        path = list(error.absolute_path)
        label = _format_path(path) or "value"
        causes.append(_cause(
            FormDefinitionError.OTHER,
            FormDefinitionErrorType.TYPE,
            f'"{label}" {error.message}',
            {"path": path, "validator": error.validator},
        ))
    return causes


# =============================================================================
# UNIQUENESS
# =============================================================================

def _unique_causes(
    entries: List[tuple],
    key: Callable[[Dict[str, Any]], Optional[Hashable]],
    error: FormDefinitionError,
) -> List[Dict[str, Any]]:
    """entries are (path, item) pairs; the path of the duplicate is reported."""
    seen: Dict[Hashable, int] = {}
    causes = []
    for pos, (path, item) in enumerate(entries):
        value = key(item)
        if value is None:
            continue
        if value in seen:
            causes.append(_cause(
                error,
                FormDefinitionErrorType.UNIQUE,
                f'"{_format_path(path)}" contains a duplicate value',
                {"path": path, "pos": pos, "dupePos": seen[value]},
            ))
        else:
            seen[value] = pos
    return causes


def _all_components(definition: Dict[str, Any]) -> List[tuple]:
    entries = []
    for page_idx, page in enumerate(definition.get("pages", [])):
        for comp_idx, component in enumerate(page.get("components") or []):
            entries.append((["pages", page_idx, "components", comp_idx], component))
    return entries


def _indexed(definition: Dict[str, Any], field: str) -> List[tuple]:
    return [([field, idx], item) for idx, item in enumerate(definition.get(field, []))]


def _uniqueness_causes(definition: Dict[str, Any]) -> List[Dict[str, Any]]:
    pages = _indexed(definition, "pages")
    components = _all_components(definition)
    sections = _indexed(definition, "sections")
    lists = _indexed(definition, "lists")
    conditions = _indexed(definition, "conditions")

    causes = []
    causes += _unique_causes(pages, lambda p: p.get("id"), FormDefinitionError.UNIQUE_PAGE_ID)
    causes += _unique_causes(pages, lambda p: p.get("path"), FormDefinitionError.UNIQUE_PAGE_PATH)
    causes += _unique_causes(components, lambda c: c.get("id"), FormDefinitionError.UNIQUE_PAGE_COMPONENT_ID)
    causes += _unique_causes(components, lambda c: c.get("name"), FormDefinitionError.UNIQUE_PAGE_COMPONENT_NAME)
    causes += _unique_causes(sections, lambda s: s.get("id"), FormDefinitionError.UNIQUE_SECTION_ID)
    causes += _unique_causes(sections, lambda s: s.get("name"), FormDefinitionError.UNIQUE_SECTION_NAME)
    causes += _unique_causes(sections, lambda s: s.get("title"), FormDefinitionError.UNIQUE_SECTION_TITLE)
    causes += _unique_causes(lists, lambda l: l.get("id"), FormDefinitionError.UNIQUE_LIST_ID)
    causes += _unique_causes(lists, lambda l: l.get("name"), FormDefinitionError.UNIQUE_LIST_NAME)
    causes += _unique_causes(lists, lambda l: l.get("title"), FormDefinitionError.UNIQUE_LIST_TITLE)
    causes += _unique_causes(conditions, lambda c: c.get("id"), FormDefinitionError.UNIQUE_CONDITION_ID)
    causes += _unique_causes(
        conditions, lambda c: c.get("displayName"), FormDefinitionError.UNIQUE_CONDITION_DISPLAY_NAME
    )

    for list_path, list_ in lists:
        items = [(list_path + ["items", idx], item) for idx, item in enumerate(list_.get("items", []))]
        causes += _unique_causes(items, lambda i: i.get("text"), FormDefinitionError.UNIQUE_LIST_ITEM_TEXT)
        causes += _unique_causes(items, lambda i: i.get("value"), FormDefinitionError.UNIQUE_LIST_ITEM_VALUE)

    return causes


# =============================================================================
# REFERENCES
# =============================================================================

def _ref_cause(error: FormDefinitionError, path: List[Any], valid: List[str]) -> Dict[str, Any]:
    return _cause(
        error,
        FormDefinitionErrorType.REF,
        f'"{_format_path(path)}" must be one of [{", ".join(valid)}]',
        {"path": path},
    )


def _reference_causes(definition: Dict[str, Any], schema: SchemaVersion) -> List[Dict[str, Any]]:
    ref_key = "id" if schema == SchemaVersion.V2 else "name"
    section_refs = [s[ref_key] for s in definition.get("sections", []) if s.get(ref_key)]
    list_refs = [l[ref_key] for l in definition.get("lists", []) if l.get(ref_key)]
    component_ids = [c["id"] for _, c in _all_components(definition) if c.get("id")]

    causes = []
    for page_idx, page in enumerate(definition.get("pages", [])):
        if "section" in page and page["section"] not in section_refs:
            causes.append(_ref_cause(FormDefinitionError.REF_PAGE_SECTION, ["pages", page_idx, "section"], section_refs))

    for path, component in _all_components(definition):
        if "list" in component and component["list"] not in list_refs:
            causes.append(_ref_cause(FormDefinitionError.REF_PAGE_COMPONENT_LIST, path + ["list"], list_refs))

    if schema != SchemaVersion.V2:
        return causes

    condition_ids = [c["id"] for c in definition.get("conditions", []) if c.get("id")]
    for page_idx, page in enumerate(definition.get("pages", [])):
        if "condition" in page and page["condition"] not in condition_ids:
            causes.append(
                _ref_cause(FormDefinitionError.REF_PAGE_CONDITION, ["pages", page_idx, "condition"], condition_ids)
            )

    for cond_idx, condition in enumerate(definition.get("conditions", [])):
        for item_idx, item in enumerate(condition.get("items", [])):
            path = ["conditions", cond_idx, "items", item_idx]
            if "componentId" in item and item["componentId"] not in component_ids:
                causes.append(
                    _ref_cause(FormDefinitionError.REF_CONDITION_COMPONENT_ID, path + ["componentId"], component_ids)
                )
            if "conditionId" in item and item["conditionId"] not in condition_ids:
                causes.append(
                    _ref_cause(FormDefinitionError.REF_CONDITION_CONDITION_ID, path + ["conditionId"], condition_ids)
                )

    return causes


def get_causes(definition: Dict[str, Any], schema: SchemaVersion) -> List[Dict[str, Any]]:
    """All validation causes for a definition; empty when it is valid."""
    causes = _schema_causes(definition, schema)
    if causes:
        return causes
    return _uniqueness_causes(definition) + _reference_causes(definition, schema)


def validate(definition: Dict[str, Any], schema: Optional[SchemaVersion] = None) -> Dict[str, Any]:
    """
    Validate a whole definition.

    Args:
        definition: The definition to check
        schema: Schema version to check against; derived from the engine when omitted

    Returns:
        The definition, unchanged

    Raises:
        InvalidFormDefinitionError: carrying the structured cause list
    """
    if schema is None:
        schema = get_validation_schema(definition)
    causes = get_causes(definition, schema)
    if causes:
        raise InvalidFormDefinitionError(causes[0]["message"], causes)
    return definition
