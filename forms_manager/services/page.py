"""Page operations on the draft definition."""

import logging
import uuid
from typing import Any, Dict, List, Optional

from forms_manager.domain.definition import mutations_pure as helpers
from forms_manager.domain.definition.constants import ApiErrorCode, FormStatus, VersionChangeType
from forms_manager.messaging.messages import FormDefinitionRequestType
from forms_manager.services.audit import record_draft_change
from forms_manager.services.context import FormsContext
from forms_manager.services.definition import get_form_definition
from forms_manager.services.shared import Author, run_in_transaction

logger = logging.getLogger(__name__)

Page = Dict[str, Any]


def with_ids(page: Page) -> Page:
    """Copy of ``page`` with an id on the page and on every component."""
    updated = {**page, "id": page.get("id") or str(uuid.uuid4())}
    if "components" in page:
        updated["components"] = [
            {**component, "id": component.get("id") or str(uuid.uuid4())}
            for component in page["components"]
        ]
    return updated


async def get_form_definition_page(ctx: FormsContext, form_id: str, page_id: str) -> Page:
    logger.info(f"Getting Page ID {page_id} for Form ID {form_id}")
    definition = await get_form_definition(ctx, form_id, FormStatus.DRAFT)
    return helpers.get_page(definition, page_id)


async def create_page_on_draft_definition(ctx: FormsContext, form_id: str, page: Page, author: Author) -> Page:
    """
    Add a page where it keeps the summary (and any payment page) at the end.

    Raises:
        DuplicatePagePathError: the path is already used in the form
    """
    logger.info(f"Creating new page for form with ID {form_id}")

    definition = await get_form_definition(ctx, form_id, FormStatus.DRAFT)
    helpers.unique_path_gate(
        definition,
        page["path"],
        f"Duplicate page path on Form ID {form_id}",
        ApiErrorCode.DUPLICATE_PAGE_PATH_PAGE,
    )

    new_page = with_ids(page)
    position = helpers.get_page_insert_position(definition, new_page)

    async def handler(session: Any) -> None:
        await ctx.definitions.add_page_at_position(form_id, new_page, session, position=position)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.PAGE_CREATED, FormDefinitionRequestType.CREATE_PAGE, new_page,
        )

    await run_in_transaction(ctx, "addPage", form_id, handler)
    logger.info(f"Created new page for form with ID {form_id}")
    return new_page


async def update_page_on_draft_definition(
    ctx: FormsContext, form_id: str, page_id: str, page: Page, author: Author
) -> Page:
    """Replace a whole page; the page keeps its id."""
    definition = await get_form_definition(ctx, form_id, FormStatus.DRAFT)
    helpers.get_page(definition, page_id)
    helpers.unique_path_gate(
        definition,
        page["path"],
        f"Duplicate page path on Form ID {form_id}",
        ApiErrorCode.DUPLICATE_PAGE_PATH_PAGE,
        exclude_page_id=page_id,
    )

    replacement = with_ids({**page, "id": page_id})

    async def handler(session: Any) -> None:
        await ctx.definitions.update_page(form_id, page_id, replacement, session)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.PAGE_UPDATED, FormDefinitionRequestType.UPDATE_PAGE, replacement,
        )

    await run_in_transaction(ctx, "updatePage", form_id, handler)
    return replacement


async def patch_fields_on_draft_definition_page(
    ctx: FormsContext, form_id: str, page_id: str, page_fields: Dict[str, Any], author: Author
) -> Optional[Page]:
    """Patch the supplied page fields and return the updated page."""

    async def handler(session: Any) -> Page:
        definition = await ctx.definitions.update_page_fields(form_id, page_id, page_fields, session)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.PAGE_UPDATED,
            FormDefinitionRequestType.UPDATE_PAGE_FIELDS,
            {"pageId": page_id, "pageFields": page_fields},
        )
        return helpers.get_page(definition, page_id)

    return await run_in_transaction(ctx, "updatePageFields", form_id, handler)


async def delete_page_on_draft_definition(ctx: FormsContext, form_id: str, page_id: str, author: Author) -> None:
    logger.info(f"Deleting Page ID {page_id} on Form ID {form_id}")

    async def handler(session: Any) -> None:
        await ctx.definitions.delete_page(form_id, page_id, session)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.PAGE_DELETED, FormDefinitionRequestType.DELETE_PAGE, {"pageId": page_id},
        )

    await run_in_transaction(ctx, "deletePage", form_id, handler)
    logger.info(f"Deleted Page ID {page_id} on Form ID {form_id}")


async def reorder_draft_form_definition_pages(
    ctx: FormsContext, form_id: str, order: List[str], author: Author
) -> Dict[str, Any]:
    """Reorder pages by id; unlisted pages keep their relative order at the end."""
    logger.info(f"Reordering pages on Form ID {form_id}")

    async def handler(session: Any) -> Dict[str, Any]:
        definition = await ctx.definitions.reorder_pages(form_id, order, session)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.PAGES_REORDERED, FormDefinitionRequestType.REORDER_PAGES, order,
        )
        return definition

    definition = await run_in_transaction(ctx, "reorderPages", form_id, handler)
    logger.info(f"Reordered pages on Form ID {form_id}")
    return definition
