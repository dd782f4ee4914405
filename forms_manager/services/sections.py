"""Section assignment on the draft definition."""

import logging
from typing import Any, Dict, List

from forms_manager.domain.definition import mutations_pure as helpers
from forms_manager.domain.definition.constants import VersionChangeType
from forms_manager.messaging.messages import FormDefinitionRequestType
from forms_manager.services.audit import record_draft_change
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author, run_in_transaction

logger = logging.getLogger(__name__)


async def assign_sections_to_form(
    ctx: FormsContext, form_id: str, assignments: List[Dict[str, Any]], author: Author
) -> List[Dict[str, Any]]:
    """
    Replace the sections and page assignments; an empty list unassigns all.

    Returns the sections with their derived ``pageIds``.
    """
    logger.info(f"Assigning sections on Form ID {form_id}")
    request_type = (
        FormDefinitionRequestType.ASSIGN_SECTIONS if assignments
        else FormDefinitionRequestType.UNASSIGN_SECTIONS
    )

    async def handler(session: Any) -> List[Dict[str, Any]]:
        definition = await ctx.definitions.assign_sections(form_id, assignments, session)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.SECTIONS_UPDATED, request_type, {"sections": assignments},
        )
        return helpers.build_sections_response(definition)

    sections = await run_in_transaction(ctx, "assignSections", form_id, handler)
    logger.info(f"Assigned sections on Form ID {form_id}")
    return sections
