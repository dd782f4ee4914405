"""Definitions held in the legacy S3 form store."""

import logging
from typing import Any, Dict

from forms_manager.domain.definition.constants import FormStatus
from forms_manager.domain.errors import InternalError
from forms_manager.domain.repositories import FormDefinitionBlobRepository
from forms_manager.services.context import FormsContext

logger = logging.getLogger(__name__)


def _blobs(ctx: FormsContext) -> FormDefinitionBlobRepository:
    if ctx.blobs is None:
        raise InternalError("Legacy form store is not configured (FORM_DEFINITION_BUCKET_NAME)")
    return ctx.blobs


async def get_legacy_form_definition(
    ctx: FormsContext, form_id: str, state: FormStatus = FormStatus.DRAFT
) -> Dict[str, Any]:
    logger.info(f"Getting legacy form definition ({state.value}) for form ID {form_id}")
    return await _blobs(ctx).get(form_id, state)


async def save_legacy_form_definition(ctx: FormsContext, form_id: str, definition: Dict[str, Any]) -> None:
    logger.info(f"Saving legacy form definition (draft) for form ID {form_id}")
    await _blobs(ctx).put(form_id, definition, FormStatus.DRAFT)


async def copy_legacy_draft_to_live(ctx: FormsContext, form_id: str) -> None:
    await _blobs(ctx).copy(form_id, FormStatus.DRAFT, FormStatus.LIVE)


async def copy_legacy_live_to_draft(ctx: FormsContext, form_id: str) -> None:
    await _blobs(ctx).copy(form_id, FormStatus.LIVE, FormStatus.DRAFT)
