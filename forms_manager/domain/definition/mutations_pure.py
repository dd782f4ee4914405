"""Structural mutation helpers for form definitions.

Every ``modify_*`` function takes a definition and returns a new one; the
input is never mutated, so a pipeline that stops part way cannot leave a
half-edited definition behind. Lookups raise ``NotFoundError`` naming the
missing entity kind and id.

All functions are pure (no DB, no I/O, no logging) to enable Tier-1 testing.
"""

import copy
import sys
import uuid
from typing import Any, Dict, List, Optional

from forms_manager.domain.definition.constants import (
    CONTENT_COMPONENT_TYPES,
    SUMMARY_CONTROLLERS,
    ApiErrorCode,
    ComponentType,
    ControllerType,
    Engine,
)
from forms_manager.domain.errors import DuplicatePagePathError, NotFoundError
from forms_manager.domain.strings import slugify

Definition = Dict[str, Any]
Page = Dict[str, Any]
Component = Dict[str, Any]

# Position given to ids missing from a reorder list
MAX_POSITION = sys.maxsize


# =========================================================================
# Predicates
# =========================================================================


def is_summary_page(page: Page) -> bool:
    return page.get("controller") in SUMMARY_CONTROLLERS


def has_components(page: Page) -> bool:
    return isinstance(page.get("components"), list)


def has_repeater(page: Page) -> bool:
    return page.get("controller") == ControllerType.REPEAT.value


def is_payment_page(page: Page) -> bool:
    return any(
        component.get("type") == ComponentType.PAYMENT_FIELD.value
        for component in page.get("components") or []
    )


def is_form_field(component: Component) -> bool:
    return component.get("type") not in CONTENT_COMPONENT_TYPES


def is_condition_wrapper_v2(condition: Dict[str, Any]) -> bool:
    return isinstance(condition, dict) and "id" in condition and "items" in condition


# =========================================================================
# Lookups
# =========================================================================


def find_page_index(definition: Definition, page_id: str) -> int:
    for idx, page in enumerate(definition["pages"]):
        if page.get("id") == page_id:
            return idx
    return -1


def get_page_index(definition: Definition, page_id: str) -> int:
    idx = find_page_index(definition, page_id)
    if idx == -1:
        raise NotFoundError(f"Page not found with id '{page_id}'")
    return idx


def find_page(definition: Definition, page_id: str) -> Optional[Page]:
    idx = find_page_index(definition, page_id)
    return definition["pages"][idx] if idx != -1 else None


def get_page(definition: Definition, page_id: str) -> Page:
    return definition["pages"][get_page_index(definition, page_id)]


def find_component_index(page: Page, component_id: str) -> int:
    if not has_components(page):
        return -1
    for idx, component in enumerate(page["components"]):
        if component.get("id") == component_id:
            return idx
    return -1


def get_component_index(page: Page, component_id: str) -> int:
    idx = find_component_index(page, component_id)
    if idx == -1:
        raise NotFoundError(
            f"Component not found on page '{page.get('id')}' with id '{component_id}'"
        )
    return idx


def find_component(definition: Definition, page_id: str, component_id: str) -> Optional[Component]:
    page = find_page(definition, page_id)
    if page is None:
        return None
    idx = find_component_index(page, component_id)
    return page["components"][idx] if idx != -1 else None


def get_component(definition: Definition, page_id: str, component_id: str) -> Component:
    page = get_page(definition, page_id)
    return page["components"][get_component_index(page, component_id)]


def find_list_index(definition: Definition, list_id: str) -> int:
    for idx, list_ in enumerate(definition["lists"]):
        if list_.get("id") == list_id:
            return idx
    return -1


def get_list_index(definition: Definition, list_id: str) -> int:
    idx = find_list_index(definition, list_id)
    if idx == -1:
        raise NotFoundError(f"List not found with id '{list_id}'")
    return idx


def get_list(definition: Definition, list_id: str) -> Dict[str, Any]:
    return definition["lists"][get_list_index(definition, list_id)]


def find_condition_index(definition: Definition, condition_id: str) -> int:
    for idx, condition in enumerate(definition["conditions"]):
        if is_condition_wrapper_v2(condition) and condition["id"] == condition_id:
            return idx
    return -1


def get_condition_index(definition: Definition, condition_id: str) -> int:
    idx = find_condition_index(definition, condition_id)
    if idx == -1:
        raise NotFoundError(f"Condition not found with id '{condition_id}'")
    return idx


def get_condition(definition: Definition, condition_id: str) -> Dict[str, Any]:
    return definition["conditions"][get_condition_index(definition, condition_id)]


# =========================================================================
# Gates and positions
# =========================================================================


def unique_path_gate(
    definition: Definition,
    path: str,
    message: str,
    error_code: ApiErrorCode = ApiErrorCode.GENERAL,
    exclude_page_id: Optional[str] = None,
) -> None:
    """Raise DuplicatePagePathError if another page already uses ``path``."""
    for page in definition["pages"]:
        if page.get("path") == path and page.get("id") != exclude_page_id:
            raise DuplicatePagePathError(message, error_code.value)


def get_page_insert_position(definition: Definition, page: Optional[Page] = None) -> Optional[int]:
    """
    Where a new page goes so the summary page stays last.

    Returns None (append) when there is no trailing summary page, -1 to
    insert just before it, or -2 to insert before a payment page that
    immediately precedes it. Payment pages themselves always go at -1.
    """
    pages = definition["pages"]
    if not pages or not is_summary_page(pages[-1]):
        return None
    if page is not None and is_payment_page(page):
        return -1
    if len(pages) >= 2 and is_payment_page(pages[-2]):
        return -2
    return -1


def _insert(items: List[Any], item: Any, position: Optional[int]) -> None:
    if position is None:
        items.append(item)
    else:
        items.insert(position, item)


def _apply_reference_number_option(definition: Definition) -> Definition:
    if any(is_payment_page(page) for page in definition["pages"]):
        definition.setdefault("options", {})["showReferenceNumber"] = True
    return definition


def _sort_by_order(items: List[Dict[str, Any]], order: List[str]) -> List[Dict[str, Any]]:
    positions: Dict[str, int] = {}
    for idx, item_id in enumerate(order):
        positions.setdefault(item_id, idx)
    return sorted(items, key=lambda item: positions.get(item.get("id"), MAX_POSITION))


# =========================================================================
# Pages
# =========================================================================


def modify_add_page(definition: Definition, page: Page, position: Optional[int] = None) -> Definition:
    updated = copy.deepcopy(definition)
    _insert(updated["pages"], copy.deepcopy(page), position)
    return _apply_reference_number_option(updated)


def modify_update_page(definition: Definition, page: Page, page_id: str) -> Definition:
    updated = copy.deepcopy(definition)
    updated["pages"][get_page_index(updated, page_id)] = copy.deepcopy(page)
    return updated


def modify_delete_page(definition: Definition, page_id: str) -> Definition:
    updated = copy.deepcopy(definition)
    del updated["pages"][get_page_index(updated, page_id)]
    return updated


def modify_reorder_pages(definition: Definition, order: List[str]) -> Definition:
    updated = copy.deepcopy(definition)
    updated["pages"] = _sort_by_order(updated["pages"], order)
    return updated


def _coerce_file_upload(page: Page) -> None:
    for component in page.get("components") or []:
        if is_form_field(component):
            component["type"] = ComponentType.FILE_UPLOAD_FIELD.value
            return


def modify_update_page_fields(definition: Definition, page_id: str, page_fields: Dict[str, Any]) -> Definition:
    """
    Patch only the supplied page fields.

    ``title`` may be set to ''. ``controller`` or ``condition`` supplied as
    None removes the field; omitted leaves it alone. ``repeat`` only applies
    to repeater pages.
    """
    updated = copy.deepcopy(definition)
    page = get_page(updated, page_id)

    title = page_fields.get("title")
    if title is not None:
        page["title"] = title

    if page_fields.get("path"):
        page["path"] = page_fields["path"]

    if "controller" in page_fields:
        controller = page_fields["controller"]
        if controller is None:
            page.pop("controller", None)
        elif controller:
            page["controller"] = controller
            if controller == ControllerType.FILE_UPLOAD.value:
                _coerce_file_upload(page)

    if page_fields.get("repeat") and has_repeater(page):
        page["repeat"] = page_fields["repeat"]

    if "condition" in page_fields:
        if page_fields["condition"] is None:
            page.pop("condition", None)
        else:
            page["condition"] = page_fields["condition"]

    return updated


# =========================================================================
# Components
# =========================================================================


def modify_add_component(
    definition: Definition,
    page_id: str,
    component: Component,
    position: Optional[int] = None,
) -> Definition:
    updated = copy.deepcopy(definition)
    page = get_page(updated, page_id)
    if not has_components(page):
        # Only the summary page gains a component list on demand
        if not is_summary_page(page):
            return updated
        page["components"] = []
    _insert(page["components"], copy.deepcopy(component), position)
    return _apply_reference_number_option(updated)


def modify_update_component(
    definition: Definition,
    page_id: str,
    component_id: str,
    component: Component,
) -> Definition:
    updated = copy.deepcopy(definition)
    page = get_page(updated, page_id)
    page["components"][get_component_index(page, component_id)] = copy.deepcopy(component)
    return updated


def modify_delete_component(definition: Definition, page_id: str, component_id: str) -> Definition:
    updated = copy.deepcopy(definition)
    page = get_page(updated, page_id)
    del page["components"][get_component_index(page, component_id)]
    return updated


def modify_reorder_components(definition: Definition, page_id: str, order: List[str]) -> Definition:
    updated = copy.deepcopy(definition)
    page = get_page(updated, page_id)
    if has_components(page):
        page["components"] = _sort_by_order(page["components"], order)
    return updated


# =========================================================================
# Lists
# =========================================================================


def modify_add_list(definition: Definition, list_: Dict[str, Any]) -> Definition:
    updated = copy.deepcopy(definition)
    updated["lists"].append(copy.deepcopy(list_))
    return updated


def modify_update_list(definition: Definition, list_id: str, list_: Dict[str, Any]) -> Definition:
    updated = copy.deepcopy(definition)
    updated["lists"][get_list_index(updated, list_id)] = copy.deepcopy(list_)
    return updated


def modify_delete_list(definition: Definition, list_id: str) -> Definition:
    updated = copy.deepcopy(definition)
    del updated["lists"][get_list_index(updated, list_id)]
    return updated


# =========================================================================
# Conditions
# =========================================================================


def modify_add_condition(definition: Definition, condition: Dict[str, Any]) -> Definition:
    updated = copy.deepcopy(definition)
    updated["conditions"].append(copy.deepcopy(condition))
    return updated


def modify_update_condition(definition: Definition, condition_id: str, condition: Dict[str, Any]) -> Definition:
    updated = copy.deepcopy(definition)
    updated["conditions"][get_condition_index(updated, condition_id)] = copy.deepcopy(condition)
    return updated


def modify_unassign_condition(definition: Definition, condition_id: str) -> Definition:
    """Remove ``condition`` from every page that references ``condition_id``."""
    updated = copy.deepcopy(definition)
    for page in updated["pages"]:
        if page.get("condition") == condition_id:
            del page["condition"]
    return updated


def modify_delete_condition(definition: Definition, condition_id: str) -> Definition:
    # Callers unassign first, otherwise pages are left referencing a missing id
    updated = copy.deepcopy(definition)
    del updated["conditions"][get_condition_index(updated, condition_id)]
    return updated


# =========================================================================
# Sections
# =========================================================================


def modify_assign_sections(definition: Definition, assignments: List[Dict[str, Any]]) -> Definition:
    """
    Replace the section list and rebuild every page's ``section``.

    Each assignment is ``{id?, name?, title, hideTitle?, pageIds}``. Sections
    without an id get a fresh UUID, without a name get a slug of the title.
    ``pageIds`` are never persisted on the section itself.
    """
    updated = copy.deepcopy(definition)

    sections = []
    page_to_section: Dict[str, str] = {}
    for assignment in assignments:
        section = {
            "id": assignment.get("id") or str(uuid.uuid4()),
            "name": assignment.get("name") or slugify(assignment["title"]),
            "title": assignment["title"],
        }
        if "hideTitle" in assignment:
            section["hideTitle"] = assignment["hideTitle"]
        sections.append(section)

        for page_id in assignment.get("pageIds", []):
            get_page_index(updated, page_id)
            page_to_section[page_id] = section["id"]

    for page in updated["pages"]:
        page.pop("section", None)
        section_id = page_to_section.get(page.get("id"))
        if section_id:
            page["section"] = section_id

    updated["sections"] = sections
    return updated


def build_sections_response(definition: Definition) -> List[Dict[str, Any]]:
    """Sections with their derived ``pageIds``."""
    response = []
    for section in definition["sections"]:
        ref = section.get("id") or section["name"]
        response.append({
            **section,
            "pageIds": [
                page["id"] for page in definition["pages"]
                if page.get("section") == ref and page.get("id")
            ],
        })
    return response


# =========================================================================
# Form-level fields
# =========================================================================


def modify_update_option(definition: Definition, option_name: str, option_value: Any) -> Definition:
    updated = copy.deepcopy(definition)
    updated.setdefault("options", {})[option_name] = option_value
    return updated


def modify_engine_version(definition: Definition, engine: Engine) -> Definition:
    updated = copy.deepcopy(definition)
    updated["engine"] = engine.value
    return updated


def modify_name(definition: Definition, name: str) -> Definition:
    updated = copy.deepcopy(definition)
    updated["name"] = name
    return updated
