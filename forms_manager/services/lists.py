"""List operations on the draft definition."""

import logging
import uuid
from typing import Any, Dict

from forms_manager.domain.definition import mutations_pure as helpers
from forms_manager.domain.definition.constants import VersionChangeType
from forms_manager.messaging.messages import FormDefinitionRequestType
from forms_manager.services.audit import record_draft_change
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author, run_in_transaction

logger = logging.getLogger(__name__)

FormList = Dict[str, Any]


def with_item_ids(list_: FormList) -> FormList:
    return {
        **list_,
        "items": [{**item, "id": item.get("id") or str(uuid.uuid4())} for item in list_.get("items", [])],
    }


async def add_list_to_draft_form_definition(
    ctx: FormsContext, form_id: str, list_: FormList, author: Author
) -> FormList:
    """
    Append a list. Name and title uniqueness is enforced by validation.
    """
    logger.info(f"Adding list on Form ID {form_id}")
    new_list = with_item_ids({**list_, "id": list_.get("id") or str(uuid.uuid4())})

    async def handler(session: Any) -> None:
        await ctx.definitions.add_list(form_id, new_list, session)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.LIST_CREATED, FormDefinitionRequestType.CREATE_LIST, new_list,
        )

    await run_in_transaction(ctx, "addList", form_id, handler)
    logger.info(f"Added list {new_list['id']} on Form ID {form_id}")
    return new_list


async def update_list_on_draft_form_definition(
    ctx: FormsContext, form_id: str, list_id: str, list_: FormList, author: Author
) -> FormList:
    logger.info(f"Updating list {list_id} on Form ID {form_id}")
    replacement = with_item_ids({**list_, "id": list_id})

    async def handler(session: Any) -> FormList:
        definition = await ctx.definitions.update_list(form_id, list_id, replacement, session)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.LIST_UPDATED, FormDefinitionRequestType.UPDATE_LIST, replacement,
        )
        return helpers.get_list(definition, list_id)

    updated = await run_in_transaction(ctx, "updateList", form_id, handler)
    logger.info(f"Updated list {list_id} on Form ID {form_id}")
    return updated


async def remove_list_on_draft_form_definition(
    ctx: FormsContext, form_id: str, list_id: str, author: Author
) -> None:
    logger.info(f"Removing list {list_id} on Form ID {form_id}")

    async def handler(session: Any) -> None:
        await ctx.definitions.delete_list(form_id, list_id, session)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.LIST_DELETED, FormDefinitionRequestType.DELETE_LIST, {"listId": list_id},
        )

    await run_in_transaction(ctx, "removeList", form_id, handler)
    logger.info(f"Removed list {list_id} on Form ID {form_id}")
