"""
Service orchestration layer.

Each operation takes a ``FormsContext`` first and runs its repository
mutation, audit stamp, version entry and event publication in one
transaction.
"""

from forms_manager.services.component import (
    create_component_on_draft_definition,
    delete_component_on_draft_definition,
    get_form_definition_page_component,
    reorder_draft_form_definition_components,
    update_component_on_draft_definition,
)
from forms_manager.services.conditions import (
    add_condition_to_draft_form_definition,
    remove_condition_on_draft_form_definition,
    update_condition_on_draft_form_definition,
)
from forms_manager.services.context import (
    FormsContext,
    create_context,
    create_in_memory_context,
    create_postgres_context,
)
from forms_manager.services.definition import (
    create_draft_from_live,
    create_live_from_draft,
    delete_draft_form_definition,
    get_form_definition,
    update_draft_form_definition,
)
from forms_manager.services.forms import (
    create_form,
    get_form,
    get_form_by_slug,
    list_forms,
    remove_form,
    update_form_metadata,
)
from forms_manager.services.legacy import (
    copy_legacy_draft_to_live,
    copy_legacy_live_to_draft,
    get_legacy_form_definition,
    save_legacy_form_definition,
)
from forms_manager.services.lists import (
    add_list_to_draft_form_definition,
    remove_list_on_draft_form_definition,
    update_list_on_draft_form_definition,
)
from forms_manager.services.migration import (
    add_component_ids_pipeline,
    add_page_ids_pipeline,
    migrate_definition_to_v1,
    migrate_definition_to_v2,
    reposition_summary_pipeline,
)
from forms_manager.services.options import update_option_on_draft_definition
from forms_manager.services.page import (
    create_page_on_draft_definition,
    delete_page_on_draft_definition,
    get_form_definition_page,
    patch_fields_on_draft_definition_page,
    reorder_draft_form_definition_pages,
    update_page_on_draft_definition,
)
from forms_manager.services.secrets import (
    encrypt_secret,
    exists_form_secret,
    get_form_secret,
    save_form_secret,
)
from forms_manager.services.sections import assign_sections_to_form
from forms_manager.services.versioning import (
    create_form_version,
    get_form_version,
    get_form_versions,
    get_latest_form_version,
    remove_form_versions,
)

__all__ = [
    "FormsContext",
    "add_component_ids_pipeline",
    "add_condition_to_draft_form_definition",
    "add_list_to_draft_form_definition",
    "add_page_ids_pipeline",
    "assign_sections_to_form",
    "copy_legacy_draft_to_live",
    "copy_legacy_live_to_draft",
    "create_component_on_draft_definition",
    "create_context",
    "create_draft_from_live",
    "create_form",
    "create_form_version",
    "create_in_memory_context",
    "create_live_from_draft",
    "create_page_on_draft_definition",
    "create_postgres_context",
    "delete_component_on_draft_definition",
    "delete_draft_form_definition",
    "delete_page_on_draft_definition",
    "encrypt_secret",
    "exists_form_secret",
    "get_form",
    "get_form_by_slug",
    "get_form_definition",
    "get_form_definition_page",
    "get_form_definition_page_component",
    "get_form_secret",
    "get_form_version",
    "get_form_versions",
    "get_latest_form_version",
    "get_legacy_form_definition",
    "list_forms",
    "migrate_definition_to_v1",
    "migrate_definition_to_v2",
    "patch_fields_on_draft_definition_page",
    "remove_condition_on_draft_form_definition",
    "remove_form",
    "remove_form_versions",
    "remove_list_on_draft_form_definition",
    "reorder_draft_form_definition_components",
    "reorder_draft_form_definition_pages",
    "reposition_summary_pipeline",
    "save_form_secret",
    "save_legacy_form_definition",
    "update_component_on_draft_definition",
    "update_condition_on_draft_form_definition",
    "update_draft_form_definition",
    "update_form_metadata",
    "update_list_on_draft_form_definition",
    "update_option_on_draft_definition",
    "update_page_on_draft_definition",
]
