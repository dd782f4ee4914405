"""Definition options."""

import logging
from typing import Any, Dict

from forms_manager.domain.definition.constants import VersionChangeType
from forms_manager.messaging.messages import FormDefinitionRequestType
from forms_manager.services.audit import record_draft_change
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author, run_in_transaction

logger = logging.getLogger(__name__)


async def update_option_on_draft_definition(
    ctx: FormsContext, form_id: str, option_name: str, option_value: Any, author: Author
) -> Dict[str, Any]:
    logger.info(f"Updating option '{option_name}' on Form ID {form_id}")

    async def handler(session: Any) -> Dict[str, Any]:
        definition = await ctx.definitions.update_option(form_id, option_name, option_value, session)
        await record_draft_change(
            ctx, session, form_id, author,
            VersionChangeType.OPTION_UPDATED,
            FormDefinitionRequestType.UPDATE_OPTION,
            {"option": {option_name: option_value}},
        )
        return {"option": {option_name: definition["options"][option_name]}}

    result = await run_in_transaction(ctx, "updateOption", form_id, handler)
    logger.info(f"Updated option '{option_name}' on Form ID {form_id}")
    return result
