"""Component operations on a draft page."""

import logging
import uuid
from typing import Any, Dict, List

from forms_manager.domain.definition import mutations_pure as helpers
from forms_manager.domain.definition.constants import FormStatus, VersionChangeType
from forms_manager.domain.errors import NotFoundError
from forms_manager.messaging.messages import FormDefinitionRequestType
from forms_manager.services.audit import record_draft_change
from forms_manager.services.context import FormsContext
from forms_manager.services.definition import get_form_definition
from forms_manager.services.shared import Author, run_in_transaction

logger = logging.getLogger(__name__)

Component = Dict[str, Any]


async def get_form_definition_page_component(
    ctx: FormsContext, form_id: str, page_id: str, component_id: str
) -> Component:
    logger.info(f"Getting Component ID {component_id} on Page ID {page_id} & Form ID {form_id}")

    definition = await get_form_definition(ctx, form_id, FormStatus.DRAFT)
    component = helpers.find_component(definition, page_id, component_id)
    if component is None:
        raise NotFoundError(f"Component ID {component_id} not found on Page ID {page_id} & Form ID {form_id}")
    return component


async def create_component_on_draft_definition(
    ctx: FormsContext,
    form_id: str,
    page_id: str,
    components: List[Component],
    author: Author,
    prepend: bool = False,
) -> List[Component]:
    """
    Add components to the end of a page (or the start with ``prepend``).

    Every component gets a fresh id; the created components are returned.
    """
    logger.info(f"Adding new component on Page ID {page_id} on Form ID {form_id}")

    definition = await get_form_definition(ctx, form_id, FormStatus.DRAFT)
    helpers.get_page(definition, page_id)

    created = [{**component, "id": str(uuid.uuid4())} for component in components]

    async def handler(session: Any) -> None:
        # Prepending in reverse keeps the submitted order
        ordered = list(reversed(created)) if prepend else created
        for component in ordered:
            await ctx.definitions.add_component(
                form_id, page_id, component, session, position=0 if prepend else None
            )
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.COMPONENT_CREATED,
            FormDefinitionRequestType.CREATE_COMPONENT,
            {"pageId": page_id, "components": created},
        )

    await run_in_transaction(ctx, "addComponent", form_id, handler)
    logger.info(f"Added new component on Page ID {page_id} on Form ID {form_id}")
    return created


async def update_component_on_draft_definition(
    ctx: FormsContext,
    form_id: str,
    page_id: str,
    component_id: str,
    component: Component,
    author: Author,
) -> Component:
    logger.info(f"Updating Component ID {component_id} on Page ID {page_id} & Form ID {form_id}")

    await get_form_definition_page_component(ctx, form_id, page_id, component_id)
    replacement = {**component, "id": component_id}

    async def handler(session: Any) -> Component:
        definition = await ctx.definitions.update_component(form_id, page_id, component_id, replacement, session)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.COMPONENT_UPDATED,
            FormDefinitionRequestType.UPDATE_COMPONENT,
            {"pageId": page_id, "component": replacement},
        )
        return helpers.get_component(definition, page_id, component_id)

    updated = await run_in_transaction(ctx, "updateComponent", form_id, handler)
    logger.info(f"Updated Component ID {component_id} on Page ID {page_id} & Form ID {form_id}")
    return updated


async def delete_component_on_draft_definition(
    ctx: FormsContext, form_id: str, page_id: str, component_id: str, author: Author
) -> None:
    logger.info(f"Deleting Component ID {component_id} on Page ID {page_id} & Form ID {form_id}")

    async def handler(session: Any) -> None:
        await ctx.definitions.delete_component(form_id, page_id, component_id, session)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.COMPONENT_DELETED,
            FormDefinitionRequestType.DELETE_COMPONENT,
            {"pageId": page_id, "componentId": component_id},
        )

    await run_in_transaction(ctx, "deleteComponent", form_id, handler)
    logger.info(f"Deleted Component ID {component_id} on Page ID {page_id} & Form ID {form_id}")


async def reorder_draft_form_definition_components(
    ctx: FormsContext, form_id: str, page_id: str, order: List[str], author: Author
) -> Dict[str, Any]:

    async def handler(session: Any) -> Dict[str, Any]:
        definition = await ctx.definitions.reorder_components(form_id, page_id, order, session)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.COMPONENTS_REORDERED,
            FormDefinitionRequestType.REORDER_COMPONENTS,
            {"pageId": page_id, "order": order},
        )
        return definition

    return await run_in_transaction(ctx, "reorderComponents", form_id, handler)
