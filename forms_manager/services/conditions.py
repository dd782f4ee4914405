"""Condition operations on the draft definition (V2 definitions only)."""

import logging
import uuid
from typing import Any, Dict

from forms_manager.domain.definition import mutations_pure as helpers
from forms_manager.domain.definition.constants import FormStatus, VersionChangeType
from forms_manager.domain.definition.migration_pure import is_v2
from forms_manager.domain.errors import BadRequestError
from forms_manager.messaging.messages import FormDefinitionRequestType
from forms_manager.services.audit import record_draft_change
from forms_manager.services.context import FormsContext
from forms_manager.services.definition import get_form_definition
from forms_manager.services.shared import Author, run_in_transaction

logger = logging.getLogger(__name__)

Condition = Dict[str, Any]


async def require_v2(ctx: FormsContext, form_id: str) -> None:
    definition = await get_form_definition(ctx, form_id, FormStatus.DRAFT)
    if not is_v2(definition):
        raise BadRequestError(f"Conditions can only be edited on V2 forms - {form_id}")


async def add_condition_to_draft_form_definition(
    ctx: FormsContext, form_id: str, condition: Condition, author: Author
) -> Condition:
    logger.info(f"Adding condition on Form ID {form_id}")
    await require_v2(ctx, form_id)

    new_condition = {
        **condition,
        "id": condition.get("id") or str(uuid.uuid4()),
        "items": [{**item, "id": item.get("id") or str(uuid.uuid4())} for item in condition.get("items", [])],
    }

    async def handler(session: Any) -> None:
        await ctx.definitions.add_condition(form_id, new_condition, session)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.CONDITION_CREATED, FormDefinitionRequestType.CREATE_CONDITION, new_condition,
        )

    await run_in_transaction(ctx, "addCondition", form_id, handler)
    logger.info(f"Added condition {new_condition['id']} on Form ID {form_id}")
    return new_condition


async def update_condition_on_draft_form_definition(
    ctx: FormsContext, form_id: str, condition_id: str, condition: Condition, author: Author
) -> Condition:
    logger.info(f"Updating condition {condition_id} on Form ID {form_id}")
    await require_v2(ctx, form_id)
    replacement = {**condition, "id": condition_id}

    async def handler(session: Any) -> Condition:
        definition = await ctx.definitions.update_condition(form_id, condition_id, replacement, session)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.CONDITION_UPDATED, FormDefinitionRequestType.UPDATE_CONDITION, replacement,
        )
        return helpers.get_condition(definition, condition_id)

    updated = await run_in_transaction(ctx, "updateCondition", form_id, handler)
    logger.info(f"Updated condition {condition_id} on Form ID {form_id}")
    return updated


async def remove_condition_on_draft_form_definition(
    ctx: FormsContext, form_id: str, condition_id: str, author: Author
) -> None:
    """Delete a condition after unassigning it from every page that uses it."""
    logger.info(f"Removing condition {condition_id} on Form ID {form_id}")
    await require_v2(ctx, form_id)

    async def handler(session: Any) -> None:
        await ctx.definitions.delete_condition(form_id, condition_id, session)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.CONDITION_DELETED,
            FormDefinitionRequestType.DELETE_CONDITION,
            {"conditionId": condition_id},
        )

    await run_in_transaction(ctx, "removeCondition", form_id, handler)
    logger.info(f"Removed condition {condition_id} on Form ID {form_id}")
