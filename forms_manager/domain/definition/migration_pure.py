"""
Engine V1 -> V2 migration helpers.

The migration pipeline runs as separate steps (reposition summary, page ids,
component ids, flip), each persisted on its own. ``migrate_to_v2`` is the
final flip: it applies the remaining structural conversions and returns a
definition that satisfies the V2 schema.

All functions are pure (no DB, no I/O, no logging) to enable Tier-1 testing.
"""

import copy
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from forms_manager.domain.definition.constants import (
    LIST_COMPONENT_TYPES,
    SUMMARY_PAGE_ID,
    ComponentType,
    Engine,
    SchemaVersion,
)
from forms_manager.domain.definition.mutations_pure import (
    has_components,
    is_form_field,
    is_summary_page,
)
from forms_manager.domain.errors import BadRequestError

Definition = Dict[str, Any]

# Operators that compare text length rather than text content
_LENGTH_OPERATORS = frozenset({"is shorter than", "is longer than", "has length"})
_LENGTH_COMPARABLE_TYPES = frozenset({
    ComponentType.TEXT_FIELD.value,
    ComponentType.MULTILINE_TEXT_FIELD.value,
    ComponentType.EMAIL_ADDRESS_FIELD.value,
})


def _new_id() -> str:
    return str(uuid.uuid4())


def is_v2(definition: Definition) -> bool:
    """The schema version decides; the engine may be flipped on a V1-shaped draft."""
    return definition.get("schema") == SchemaVersion.V2.value


# =============================================================================
# SUMMARY POSITION
# =============================================================================

@dataclass(frozen=True)
class SummaryPosition:
    """Where the summary page sits in ``pages``."""
    summary_exists: bool
    should_reposition: bool
    index: int
    summary: Optional[Dict[str, Any]]


def summary_helper(definition: Definition) -> SummaryPosition:
    pages = definition["pages"]
    index = next((idx for idx, page in enumerate(pages) if is_summary_page(page)), -1)
    exists = index >= 0
    return SummaryPosition(
        summary_exists=exists,
        should_reposition=exists and index != len(pages) - 1,
        index=index,
        summary=pages[index] if exists else None,
    )


def reposition_summary(definition: Definition) -> Definition:
    """Move the summary page to the end; other pages keep their order."""
    updated = copy.deepcopy(definition)
    position = summary_helper(updated)
    if position.should_reposition:
        summary = updated["pages"].pop(position.index)
        updated["pages"].append(summary)
    return updated


# =============================================================================
# IDS
# =============================================================================

def add_id_to_summary(definition: Definition) -> Definition:
    updated = copy.deepcopy(definition)
    position = summary_helper(updated)
    if position.summary_exists and not updated["pages"][position.index].get("id"):
        updated["pages"][position.index]["id"] = SUMMARY_PAGE_ID
    return updated


def populate_page_ids(definition: Definition) -> Definition:
    updated = add_id_to_summary(definition)
    for page in updated["pages"]:
        if not page.get("id"):
            page["id"] = _new_id()
    return updated


def populate_component_ids(page: Dict[str, Any]) -> Dict[str, Any]:
    updated = copy.deepcopy(page)
    for component in updated.get("components") or []:
        if "id" not in component:
            component["id"] = _new_id()
    return updated


def add_component_ids_to_definition(definition: Definition) -> Definition:
    updated = copy.deepcopy(definition)
    updated["pages"] = [populate_component_ids(page) for page in updated["pages"]]
    return updated


# =============================================================================
# STRUCTURAL CONVERSIONS
# =============================================================================

def convert_list_names_to_ids(definition: Definition) -> Definition:
    """Give every list (and list item) an id and point components at list ids."""
    updated = copy.deepcopy(definition)
    for list_ in updated["lists"]:
        list_.setdefault("id", _new_id())
        for item in list_.get("items", []):
            item.setdefault("id", _new_id())

    name_to_id = {list_["name"]: list_["id"] for list_ in updated["lists"]}
    list_ids = set(name_to_id.values())

    for page in updated["pages"]:
        for component in page.get("components") or []:
            ref = component.get("list")
            if not ref or ref in list_ids:
                continue
            if ref not in name_to_id:
                raise BadRequestError(
                    f'List name "{ref}" not found in definition lists - cannot migrate'
                )
            component["list"] = name_to_id[ref]
    return updated


def apply_page_titles(definition: Definition) -> Definition:
    """Non-summary pages without a title take their first component's title."""
    updated = copy.deepcopy(definition)
    for page in updated["pages"]:
        if is_summary_page(page) or page.get("title"):
            continue
        components = page.get("components") or []
        page["title"] = components[0].get("title", "") if components else ""
    return updated


def migrate_component_fields(definition: Definition) -> Definition:
    """Form fields get a ``shortDescription`` copied from their title."""
    updated = copy.deepcopy(definition)
    for page in updated["pages"]:
        for component in page.get("components") or []:
            if is_form_field(component) and "title" in component:
                component["shortDescription"] = component["title"]
    return updated


def convert_declaration(definition: Definition) -> Definition:
    """Move root ``declaration`` text onto the summary page as Markdown."""
    updated = copy.deepcopy(definition)
    declaration = updated.pop("declaration", None)
    position = summary_helper(updated)

    if position.summary_exists:
        summary = updated["pages"][position.index]
    else:
        summary = {
            "title": "Check your answers",
            "controller": "SummaryPageController",
            "path": "/summary",
        }
        updated["pages"].append(summary)

    summary.setdefault("components", [])
    if declaration:
        summary["components"].insert(0, {
            "type": ComponentType.MARKDOWN.value,
            "name": "declaration",
            "title": "Declaration",
            "content": declaration,
            "options": {},
        })
    return updated


def convert_sections(definition: Definition) -> Definition:
    """Give sections ids and point pages at section ids instead of names."""
    updated = copy.deepcopy(definition)
    name_to_id = {}
    for section in updated["sections"]:
        section.setdefault("id", _new_id())
        section.pop("pageIds", None)
        name_to_id[section["name"]] = section["id"]

    for page in updated["pages"]:
        if page.get("section") in name_to_id:
            page["section"] = name_to_id[page["section"]]
    return updated


# =============================================================================
# CONDITIONS
# =============================================================================

def _component_index(definition: Definition) -> Dict[str, Dict[str, Any]]:
    index = {}
    for page in definition["pages"]:
        for component in page.get("components") or []:
            if isinstance(component.get("name"), str) and isinstance(component.get("id"), str):
                index[component["name"]] = component
    return index


def _conditions_in_use(definition: Definition) -> Set[str]:
    used = set()
    for page in definition["pages"]:
        for next_ in page.get("next") or []:
            if next_.get("condition"):
                used.add(next_["condition"])
        if page.get("condition"):
            used.add(page["condition"])
    return used


def _is_length_comparison(condition_data: Dict[str, Any]) -> bool:
    return (
        condition_data["field"].get("type") in _LENGTH_COMPARABLE_TYPES
        and condition_data.get("operator") in _LENGTH_OPERATORS
    )


def determine_condition_type(condition_data: Dict[str, Any]) -> str:
    field_type = condition_data["field"].get("type")
    if field_type in LIST_COMPONENT_TYPES:
        return "ListItemRef"
    if field_type == ComponentType.NUMBER_FIELD.value:
        return "NumberValue"
    if field_type == ComponentType.YES_NO_FIELD.value:
        return "BooleanValue"
    if field_type == ComponentType.DATE_PARTS_FIELD.value:
        return "RelativeDate" if condition_data["value"].get("type") == "RelativeDate" else "DateValue"
    return "NumberValue" if _is_length_comparison(condition_data) else "StringValue"


def _relative_date_value(condition_data: Dict[str, Any]) -> Dict[str, Any]:
    value = condition_data["value"]
    if value.get("period") in (None, ""):
        raise BadRequestError(
            "Missing period value in condition value for relative date: "
            f"period: {value.get('period', '')} unit: {value.get('unit', '')} "
            f"direction: {value.get('direction', '')}"
        )
    return {
        "period": int(value["period"]),
        "unit": value.get("unit"),
        "direction": value.get("direction"),
    }


def _list_item_ref(component: Dict[str, Any], value: str, definition: Definition) -> Dict[str, str]:
    list_id = component.get("list", "unknown")
    list_ = next((l for l in definition["lists"] if l.get("id") == list_id), None)
    item = next(
        (i for i in (list_ or {}).get("items", []) if str(i.get("value")) == value),
        None,
    )
    if item is None:
        raise BadRequestError(
            f"List item {value} not found in list id {list_id} for component {component.get('name')}"
        )
    return {"listId": list_id, "itemId": item["id"]}


def determine_condition_value(
    condition_data: Dict[str, Any],
    component: Dict[str, Any],
    definition: Definition,
) -> Any:
    raw = str(condition_data["value"].get("value", ""))
    field_type = condition_data["field"].get("type")

    if field_type in LIST_COMPONENT_TYPES:
        return _list_item_ref(component, raw, definition)
    if field_type == ComponentType.NUMBER_FIELD.value:
        return int(raw)
    if field_type == ComponentType.YES_NO_FIELD.value:
        return raw == "true"
    if field_type == ComponentType.DATE_PARTS_FIELD.value:
        if condition_data["value"].get("type") == "RelativeDate":
            return _relative_date_value(condition_data)
        return raw
    return int(raw) if _is_length_comparison(condition_data) else raw


def _convert_condition_data(
    condition_data: Dict[str, Any],
    components: Dict[str, Dict[str, Any]],
    used: Set[str],
    condition_name: str,
    definition: Definition,
) -> Optional[Dict[str, Any]]:
    if condition_data["value"].get("type") not in ("Value", "RelativeDate"):
        raise BadRequestError(
            f"Unsupported condition value type found: {condition_data['value'].get('type')}"
        )

    field_name = condition_data["field"]["name"]
    component = components.get(field_name)
    if component is None:
        if condition_name in used:
            raise BadRequestError(
                f"Cannot migrate condition: field name '{field_name}' not found in components but is in use."
            )
        return None

    return {
        "id": _new_id(),
        "componentId": component["id"],
        "operator": condition_data["operator"],
        "type": determine_condition_type(condition_data),
        "value": determine_condition_value(condition_data, component, definition),
    }


def _is_condition_data(item: Any) -> bool:
    return isinstance(item, dict) and isinstance(item.get("field"), dict) and "value" in item


def convert_conditions(definition: Definition) -> Definition:
    """
    Rewrite V1 condition wrappers as V2 wrappers.

    Items referencing unknown fields are dropped when the condition is not in
    use, and wrappers left without items are dropped entirely. Page
    conditions are rewritten from condition names to the new ids.
    """
    updated = copy.deepcopy(definition)
    components = _component_index(updated)
    used = _conditions_in_use(updated)
    name_to_id: Dict[str, str] = {}

    conditions: List[Dict[str, Any]] = []
    for wrapper in updated["conditions"]:
        if "items" in wrapper and "id" in wrapper:
            conditions.append(wrapper)
            continue

        coordinators = set()
        items = []
        for condition_data in wrapper["value"]["conditions"]:
            if not _is_condition_data(condition_data):
                raise BadRequestError("Unsupported condition type found")
            if condition_data.get("coordinator"):
                coordinators.add(condition_data["coordinator"])
            item = _convert_condition_data(condition_data, components, used, wrapper["name"], updated)
            if item is not None:
                items.append(item)

        if len(coordinators) > 1 and len(items) > 1:
            raise BadRequestError(
                "Different unique coordinators found in condition items. Manual intervention is required."
            )

        converted = {"id": _new_id(), "displayName": wrapper["displayName"], "items": items}
        if len(coordinators) == 1:
            converted["coordinator"] = coordinators.pop()
        name_to_id[wrapper["name"]] = converted["id"]
        conditions.append(converted)

    updated["conditions"] = [c for c in conditions if c["items"]]
    kept_ids = {c["id"] for c in updated["conditions"]}

    for page in updated["pages"]:
        ref = page.get("condition")
        if ref is None:
            continue
        new_ref = name_to_id.get(ref, ref)
        if new_ref in kept_ids:
            page["condition"] = new_ref
        else:
            del page["condition"]
    return updated


# =============================================================================
# FLIP
# =============================================================================

def _strip_v1_only_fields(definition: Definition) -> Definition:
    updated = copy.deepcopy(definition)
    updated.setdefault("name", "")
    for field in ("feeOptions", "fees"):
        updated.pop(field, None)
    for page in updated["pages"]:
        page.pop("next", None)
    return updated


_MIGRATION_STEPS = [
    reposition_summary,
    apply_page_titles,
    migrate_component_fields,
    convert_declaration,
    convert_list_names_to_ids,
    populate_page_ids,
    add_component_ids_to_definition,
    convert_sections,
    convert_conditions,
    _strip_v1_only_fields,
]


def migrate_to_v2(definition: Definition) -> Definition:
    """Apply every V1 -> V2 conversion and set engine V2 / schema 2."""
    if is_v2(definition):
        return copy.deepcopy(definition)

    migrated = definition
    for step in _MIGRATION_STEPS:
        migrated = step(migrated)

    migrated["engine"] = Engine.V2.value
    migrated["schema"] = SchemaVersion.V2.value
    return migrated
