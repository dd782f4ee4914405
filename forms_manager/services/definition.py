"""
Whole-definition operations and the draft/live lifecycle.
"""

import logging
from typing import Any, Dict

from forms_manager.domain.definition.constants import Engine, FormStatus, VersionChangeType
from forms_manager.domain.definition.validation import get_validation_schema
from forms_manager.domain.errors import BadRequestError
from forms_manager.domain.repositories.form_metadata_repository import (
    DemoteTransition,
    DiscardDraftTransition,
    PromoteTransition,
)
from forms_manager.messaging.mappers import (
    form_draft_created_from_live_mapper,
    form_draft_deleted_mapper,
    form_live_created_from_draft_mapper,
)
from forms_manager.messaging.messages import FormDefinitionRequestType
from forms_manager.services.audit import record_draft_change
from forms_manager.services.constants import MAKE_FORM_LIVE_ERROR_MESSAGES
from forms_manager.services.context import FormsContext
from forms_manager.services.forms import get_form
from forms_manager.services.shared import Author, map_form, run_in_transaction, utc_now
from forms_manager.services.versioning import create_form_version

logger = logging.getLogger(__name__)

Definition = Dict[str, Any]


async def get_form_definition(
    ctx: FormsContext, form_id: str, state: FormStatus = FormStatus.DRAFT
) -> Definition:
    async with ctx.database.session() as session:
        return await ctx.definitions.get(form_id, session, state)


async def update_draft_form_definition(
    ctx: FormsContext, form_id: str, definition: Definition, author: Author
) -> Definition:
    """
    Replace the whole draft definition.

    ``name`` always follows the form title so uploaded definitions cannot
    drift from their metadata.
    """
    logger.info(f"Updating form definition (draft) for form ID {form_id}")

    form = await get_form(ctx, form_id)
    if not form.get("draft"):
        raise BadRequestError(f"Form with ID '{form_id}' has no draft state")

    definition = {**definition, "name": form["title"]}

    async def handler(session: Any) -> Definition:
        updated = await ctx.definitions.update(form_id, definition, session, get_validation_schema(definition))
        await record_draft_change(
            ctx,
            session,
            form_id,
            author,
            VersionChangeType.FORM_UPDATED,
            FormDefinitionRequestType.REPLACE_DRAFT,
            {"name": definition["name"]},
        )
        return updated

    updated = await run_in_transaction(ctx, "updateDraftFormDefinition", form_id, handler)
    logger.info(f"Updated form definition (draft) for form ID {form_id}")
    return updated


def has_privacy_notice(form: Dict[str, Any]) -> bool:
    """A notice URL, or free text when the notice type is ``text``."""
    if form.get("privacyNoticeType") == "text":
        return bool(form.get("privacyNoticeText"))
    return bool(form.get("privacyNoticeUrl"))


def check_ready_for_live(form: Dict[str, Any], draft: Definition) -> None:
    """
    Raise BadRequestError naming the first missing publishing requirement.
    """
    checks = (
        ("missingContact", bool(form.get("contact"))),
        ("missingSubmissionGuidance", bool(form.get("submissionGuidance"))),
        ("missingPrivacyNotice", has_privacy_notice(form)),
        ("missingTermsAndConditions", bool(form.get("termsAndConditionsAgreed"))),
        ("missingOutputEmail", bool(form.get("notificationEmail") or draft.get("outputEmail"))),
        ("missingStartPage", draft.get("engine") == Engine.V2.value or bool(draft.get("startPage"))),
    )
    for key, passed in checks:
        if not passed:
            raise BadRequestError(MAKE_FORM_LIVE_ERROR_MESSAGES[key])


async def create_live_from_draft(ctx: FormsContext, form_id: str, author: Author) -> None:
    """
    Publish the draft: copy it to live and clear the draft.

    Every requirement is checked before the transaction is opened.
    """
    logger.info(f"Make draft live for form ID {form_id}")

    form = await get_form(ctx, form_id)
    if not form.get("draft"):
        logger.error(f"Form with ID '{form_id}' has no draft state so failed deployment to live")
        raise BadRequestError(MAKE_FORM_LIVE_ERROR_MESSAGES["missingDraft"])

    check_ready_for_live(form, await get_form_definition(ctx, form_id, FormStatus.DRAFT))

    async def handler(session: Any) -> None:
        await ctx.definitions.create_live_from_draft(form_id, session)
        transition = PromoteTransition(author=author, date=utc_now())
        updated = map_form(await ctx.metadata.update(form_id, transition, session))
        await create_form_version(ctx, form_id, author, VersionChangeType.LIVE_PUBLISHED, session=session)
        await ctx.publisher.publish(form_live_created_from_draft_mapper(updated))

    await run_in_transaction(ctx, "createLiveFromDraft", form_id, handler)
    logger.info(f"Made draft live for form ID {form_id}")


async def create_draft_from_live(ctx: FormsContext, form_id: str, author: Author) -> None:
    """Recreate the draft from the current live definition."""
    logger.info(f"Create draft to edit for form ID {form_id}")

    form = await get_form(ctx, form_id)
    if not form.get("live"):
        raise BadRequestError(f"Form with ID '{form_id}' has no live state")

    async def handler(session: Any) -> None:
        await ctx.definitions.create_draft_from_live(form_id, session)
        transition = DemoteTransition(author=author, date=utc_now())
        updated = map_form(await ctx.metadata.update(form_id, transition, session))
        await create_form_version(ctx, form_id, author, VersionChangeType.DRAFT_CREATED_FROM_LIVE, session=session)
        await ctx.publisher.publish(form_draft_created_from_live_mapper(updated))

    await run_in_transaction(ctx, "createDraftFromLive", form_id, handler)
    logger.info(f"Created draft to edit for form ID {form_id}")


async def delete_draft_form_definition(ctx: FormsContext, form_id: str, author: Author) -> None:
    """Discard the draft of a live form; the live definition is untouched."""
    logger.info(f"Deleting draft for form ID {form_id}")

    form = await get_form(ctx, form_id)
    if not form.get("live"):
        raise BadRequestError(f"Form with ID '{form_id}' has no live state so its draft cannot be deleted")
    if not form.get("draft"):
        raise BadRequestError(f"Form with ID '{form_id}' has no draft state")

    async def handler(session: Any) -> None:
        await ctx.definitions.delete_draft(form_id, session)
        transition = DiscardDraftTransition(author=author, date=utc_now())
        updated = map_form(await ctx.metadata.update(form_id, transition, session))
        await create_form_version(ctx, form_id, author, VersionChangeType.DRAFT_DELETED, session=session)
        await ctx.publisher.publish(form_draft_deleted_mapper(updated))

    await run_in_transaction(ctx, "deleteDraftFormDefinition", form_id, handler)
    logger.info(f"Deleted draft for form ID {form_id}")
