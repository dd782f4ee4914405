"""Audit tail run after every draft-definition edit."""

from typing import Any, Dict, Optional

from forms_manager.domain.definition.constants import VersionChangeType
from forms_manager.messaging.mappers import form_updated_mapper
from forms_manager.messaging.messages import FormDefinitionRequestType
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author, map_form
from forms_manager.services.versioning import create_form_version


async def record_draft_change(
    ctx: FormsContext,
    session: Any,
    form_id: str,
    author: Author,
    change_type: VersionChangeType,
    request_type: FormDefinitionRequestType,
    payload: Any,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Stamp the audit fields, append a version entry and publish FORM_UPDATED.

    Runs inside the caller's transaction, so a publish failure rolls the
    edit back.
    """
    form = map_form(await ctx.metadata.update_audit(form_id, author, session))
    await create_form_version(ctx, form_id, author, change_type, session=session, description=description)
    await ctx.publisher.publish(form_updated_mapper(form, request_type, payload))
    return form
