"""
Form definition repository.

Key design rules:
- Repository does NOT commit (caller owns transaction)
- Every draft mutation is locked load -> helper -> validate -> write
- Writes expected to touch one row fail on any other count
- Mutations against the live state are rejected before any read or write

Storage is abstracted behind a few primitives (``_find``, ``_write``,
``_copy``, ``_upsert``, ``_delete``) implemented by the PostgreSQL and
in-memory subclasses.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from forms_manager.domain.definition import mutations_pure as helpers
from forms_manager.domain.definition.constants import (
    ApiErrorCode,
    Engine,
    FormStatus,
    SchemaVersion,
)
from forms_manager.domain.definition.validation import get_validation_schema, validate
from forms_manager.domain.errors import (
    ApplicationError,
    ConflictError,
    FormIsLiveError,
    NotFoundError,
    wrap_error,
)

logger = logging.getLogger(__name__)

Definition = Dict[str, Any]
DefinitionHelper = Callable[[Definition], Definition]


class FormDefinitionRepository(ABC):
    """Shared read/modify/write logic over draft and live definitions."""

    # =========================================================================
    # STORAGE PRIMITIVES
    # =========================================================================

    @abstractmethod
    async def _find(
        self, session: Any, form_id: str, lock: bool = False
    ) -> Optional[Dict[str, Optional[Definition]]]:
        """
        Return ``{"draft": ..., "live": ...}`` or None when the row is absent.

        ``lock`` holds the row until the transaction ends.
        """
        ...

    @abstractmethod
    async def _write(self, session: Any, form_id: str, state: FormStatus, definition: Optional[Definition]) -> int:
        """Replace one state's definition. Returns the affected row count."""
        ...

    @abstractmethod
    async def _copy(self, session: Any, form_id: str, source: FormStatus, target: FormStatus) -> int:
        ...

    @abstractmethod
    async def _upsert(self, session: Any, form_id: str, draft: Definition) -> None:
        ...

    @abstractmethod
    async def _delete(self, session: Any, form_id: str) -> int:
        ...

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _failure(self, operation: str, form_id: str, error: Exception) -> ApplicationError:
        logger.error(f"[{operation}] Failed for form ID {form_id} - {error}")
        return wrap_error(error)

    @staticmethod
    def _live_gate(state: FormStatus, message: str) -> None:
        if state == FormStatus.LIVE:
            raise FormIsLiveError(message)

    @staticmethod
    def _expect_one(count: int, form_id: str) -> None:
        if count != 1:
            raise ConflictError(
                f"Form definition with ID '{form_id}' not updated. Modified count {count}"
            )

    async def _modify_draft(
        self,
        session: Any,
        form_id: str,
        helper: DefinitionHelper,
        operation: str,
        schema: Optional[SchemaVersion] = None,
    ) -> Definition:
        try:
            row = await self._find(session, form_id, lock=True)
            if row is None:
                raise NotFoundError(f"Document not found '{form_id}'")
            draft = row.get(FormStatus.DRAFT.value)
            if not draft:
                raise NotFoundError(f"Draft not found in document '{form_id}'")

            updated = helper(draft)
            validate(updated, schema or get_validation_schema(updated))

            self._expect_one(await self._write(session, form_id, FormStatus.DRAFT, updated), form_id)
            return updated
        except Exception as error:
            raise self._failure(operation, form_id, error)

    # =========================================================================
    # WHOLE DEFINITIONS
    # =========================================================================

    async def get(self, form_id: str, session: Any, state: FormStatus = FormStatus.DRAFT) -> Definition:
        logger.info(f"Getting form definition ({state.value}) for form ID {form_id}")
        try:
            row = await self._find(session, form_id)
            if not row or not row.get(state.value):
                raise NotFoundError(f"Form definition with ID '{form_id}' not found")
            return row[state.value]
        except Exception as error:
            raise self._failure("getFormDefinition", form_id, error)

    async def insert(
        self,
        form_id: str,
        definition: Definition,
        session: Any,
        schema: Optional[SchemaVersion] = None,
    ) -> Definition:
        """Validate and store a new draft definition."""
        logger.info(f"Creating form definition (draft) for form ID {form_id}")
        try:
            validate(definition, schema)
            await self._upsert(session, form_id, definition)
            return definition
        except Exception as error:
            raise self._failure("insertFormDefinition", form_id, error)

    async def update(
        self,
        form_id: str,
        definition: Definition,
        session: Any,
        schema: Optional[SchemaVersion] = None,
    ) -> Definition:
        """Replace the whole draft definition."""
        return await self._modify_draft(session, form_id, lambda _: definition, "updateFormDefinition", schema)

    async def create_live_from_draft(self, form_id: str, session: Any) -> None:
        """Copy draft to live and clear the draft."""
        logger.info(f"Copying form definition (draft to live) for form ID {form_id}")
        try:
            self._expect_one(await self._copy(session, form_id, FormStatus.DRAFT, FormStatus.LIVE), form_id)
            self._expect_one(await self._write(session, form_id, FormStatus.DRAFT, None), form_id)
        except Exception as error:
            raise self._failure("createLiveFromDraft", form_id, error)

    async def create_draft_from_live(self, form_id: str, session: Any) -> None:
        logger.info(f"Copying form definition (live to draft) for form ID {form_id}")
        try:
            self._expect_one(await self._copy(session, form_id, FormStatus.LIVE, FormStatus.DRAFT), form_id)
        except Exception as error:
            raise self._failure("createDraftFromLive", form_id, error)

    async def delete_draft(self, form_id: str, session: Any) -> None:
        logger.info(f"Deleting form definition (draft) for form ID {form_id}")
        try:
            self._expect_one(await self._write(session, form_id, FormStatus.DRAFT, None), form_id)
        except Exception as error:
            raise self._failure("deleteDraft", form_id, error)

    async def remove(self, form_id: str, session: Any) -> None:
        logger.info(f"Removing form definition with ID {form_id}")
        try:
            self._expect_one(await self._delete(session, form_id), form_id)
        except Exception as error:
            raise self._failure("removeFormDefinition", form_id, error)

    # =========================================================================
    # FORM-LEVEL FIELDS
    # =========================================================================

    async def update_name(
        self, form_id: str, name: str, session: Any, state: FormStatus = FormStatus.DRAFT
    ) -> Definition:
        self._live_gate(state, f"Cannot update the name of a live form - {form_id}")
        return await self._modify_draft(
            session, form_id, lambda d: helpers.modify_name(d, name), "updateName"
        )

    async def update_engine_version(
        self, form_id: str, engine: Engine, session: Any, state: FormStatus = FormStatus.DRAFT
    ) -> Definition:
        self._live_gate(state, f"Cannot update the engine version of a live form - {form_id}")
        schema = SchemaVersion.V2 if engine == Engine.V2 else SchemaVersion.V1
        return await self._modify_draft(
            session, form_id, lambda d: helpers.modify_engine_version(d, engine), "updateEngineVersion", schema
        )

    async def update_option(
        self, form_id: str, option_name: str, option_value: Any, session: Any, state: FormStatus = FormStatus.DRAFT
    ) -> Definition:
        self._live_gate(state, f"Cannot update option on a live form - {form_id}")
        return await self._modify_draft(
            session,
            form_id,
            lambda d: helpers.modify_update_option(d, option_name, option_value),
            "updateOption",
        )

    # =========================================================================
    # PAGES
    # =========================================================================

    async def add_page_at_position(
        self,
        form_id: str,
        page: Dict[str, Any],
        session: Any,
        position: Optional[int] = None,
        state: FormStatus = FormStatus.DRAFT,
    ) -> Definition:
        self._live_gate(state, f"Cannot add page on a live form - {form_id}")

        def add(definition: Definition) -> Definition:
            helpers.unique_path_gate(
                definition,
                page["path"],
                f"Duplicate page path on Form ID {form_id}",
                ApiErrorCode.DUPLICATE_PAGE_PATH_PAGE,
            )
            return helpers.modify_add_page(definition, page, position)

        return await self._modify_draft(session, form_id, add, "addPageAtPosition")

    async def update_page(
        self, form_id: str, page_id: str, page: Dict[str, Any], session: Any, state: FormStatus = FormStatus.DRAFT
    ) -> Definition:
        self._live_gate(state, f"Cannot update page on a live form - {form_id}")
        return await self._modify_draft(
            session, form_id, lambda d: helpers.modify_update_page(d, page, page_id), "updatePage"
        )

    async def update_page_fields(
        self,
        form_id: str,
        page_id: str,
        page_fields: Dict[str, Any],
        session: Any,
        state: FormStatus = FormStatus.DRAFT,
    ) -> Definition:
        self._live_gate(state, f"Cannot update pageFields on a live form - {form_id}")

        def patch(definition: Definition) -> Definition:
            if page_fields.get("path"):
                helpers.unique_path_gate(
                    definition,
                    page_fields["path"],
                    f"Duplicate page path on Form ID {form_id}",
                    ApiErrorCode.DUPLICATE_PAGE_PATH_PAGE,
                    exclude_page_id=page_id,
                )
            return helpers.modify_update_page_fields(definition, page_id, page_fields)

        return await self._modify_draft(session, form_id, patch, "updatePageFields")

    async def delete_page(
        self, form_id: str, page_id: str, session: Any, state: FormStatus = FormStatus.DRAFT
    ) -> Definition:
        self._live_gate(state, f"Cannot delete page on a live form - {form_id}")
        return await self._modify_draft(
            session, form_id, lambda d: helpers.modify_delete_page(d, page_id), "deletePage"
        )

    async def reorder_pages(
        self, form_id: str, order: List[str], session: Any, state: FormStatus = FormStatus.DRAFT
    ) -> Definition:
        self._live_gate(state, f"Cannot reorder pages on a live form - {form_id}")
        return await self._modify_draft(
            session, form_id, lambda d: helpers.modify_reorder_pages(d, order), "reorderPages"
        )

    # =========================================================================
    # COMPONENTS
    # =========================================================================

    async def add_component(
        self,
        form_id: str,
        page_id: str,
        component: Dict[str, Any],
        session: Any,
        position: Optional[int] = None,
        state: FormStatus = FormStatus.DRAFT,
    ) -> Definition:
        self._live_gate(state, f"Cannot add component on a live form - {form_id}")
        return await self._modify_draft(
            session,
            form_id,
            lambda d: helpers.modify_add_component(d, page_id, component, position),
            "addComponent",
        )

    async def update_component(
        self,
        form_id: str,
        page_id: str,
        component_id: str,
        component: Dict[str, Any],
        session: Any,
        state: FormStatus = FormStatus.DRAFT,
    ) -> Definition:
        self._live_gate(state, f"Cannot update component on a live form - {form_id}")
        return await self._modify_draft(
            session,
            form_id,
            lambda d: helpers.modify_update_component(d, page_id, component_id, component),
            "updateComponent",
        )

    async def delete_component(
        self,
        form_id: str,
        page_id: str,
        component_id: str,
        session: Any,
        state: FormStatus = FormStatus.DRAFT,
    ) -> Definition:
        self._live_gate(state, f"Cannot delete component on a live form - {form_id}")
        return await self._modify_draft(
            session,
            form_id,
            lambda d: helpers.modify_delete_component(d, page_id, component_id),
            "deleteComponent",
        )

    async def reorder_components(
        self,
        form_id: str,
        page_id: str,
        order: List[str],
        session: Any,
        state: FormStatus = FormStatus.DRAFT,
    ) -> Definition:
        self._live_gate(state, f"Cannot reorder components on a live form - {form_id}")
        return await self._modify_draft(
            session,
            form_id,
            lambda d: helpers.modify_reorder_components(d, page_id, order),
            "reorderComponents",
        )

    # =========================================================================
    # LISTS
    # =========================================================================

    async def add_list(
        self, form_id: str, list_: Dict[str, Any], session: Any, state: FormStatus = FormStatus.DRAFT
    ) -> Definition:
        self._live_gate(state, f"Cannot add list on a live form - {form_id}")
        return await self._modify_draft(
            session, form_id, lambda d: helpers.modify_add_list(d, list_), "addList"
        )

    async def update_list(
        self,
        form_id: str,
        list_id: str,
        list_: Dict[str, Any],
        session: Any,
        state: FormStatus = FormStatus.DRAFT,
    ) -> Definition:
        self._live_gate(state, f"Cannot update list on a live form - {form_id}")
        return await self._modify_draft(
            session, form_id, lambda d: helpers.modify_update_list(d, list_id, list_), "updateList"
        )

    async def delete_list(
        self, form_id: str, list_id: str, session: Any, state: FormStatus = FormStatus.DRAFT
    ) -> Definition:
        self._live_gate(state, f"Cannot delete list on a live form - {form_id}")
        return await self._modify_draft(
            session, form_id, lambda d: helpers.modify_delete_list(d, list_id), "deleteList"
        )

    # =========================================================================
    # CONDITIONS
    # =========================================================================

    async def add_condition(
        self, form_id: str, condition: Dict[str, Any], session: Any, state: FormStatus = FormStatus.DRAFT
    ) -> Definition:
        self._live_gate(state, f"Cannot add condition on a live form - {form_id}")
        return await self._modify_draft(
            session, form_id, lambda d: helpers.modify_add_condition(d, condition), "addCondition"
        )

    async def update_condition(
        self,
        form_id: str,
        condition_id: str,
        condition: Dict[str, Any],
        session: Any,
        state: FormStatus = FormStatus.DRAFT,
    ) -> Definition:
        self._live_gate(state, f"Cannot update condition on a live form - {form_id}")
        return await self._modify_draft(
            session,
            form_id,
            lambda d: helpers.modify_update_condition(d, condition_id, condition),
            "updateCondition",
        )

    async def delete_condition(
        self, form_id: str, condition_id: str, session: Any, state: FormStatus = FormStatus.DRAFT
    ) -> Definition:
        """Unassign the condition from every page, then delete it."""
        self._live_gate(state, f"Cannot delete condition on a live form - {form_id}")

        def delete(definition: Definition) -> Definition:
            unassigned = helpers.modify_unassign_condition(definition, condition_id)
            return helpers.modify_delete_condition(unassigned, condition_id)

        return await self._modify_draft(session, form_id, delete, "deleteCondition")

    # =========================================================================
    # SECTIONS
    # =========================================================================

    async def assign_sections(
        self,
        form_id: str,
        assignments: List[Dict[str, Any]],
        session: Any,
        state: FormStatus = FormStatus.DRAFT,
    ) -> Definition:
        self._live_gate(state, f"Cannot assign sections on a live form - {form_id}")
        return await self._modify_draft(
            session, form_id, lambda d: helpers.modify_assign_sections(d, assignments), "assignSections"
        )
