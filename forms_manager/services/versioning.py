"""Version ledger operations."""

import logging
from typing import Any, Dict, List, Optional

from forms_manager.domain.definition.constants import VersionChangeType
from forms_manager.domain.repositories.form_metadata_repository import to_iso
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author, run_in_transaction, snapshot_state, utc_now

logger = logging.getLogger(__name__)

VersionDocument = Dict[str, Any]

# Metadata fields denormalised into each version entry
VERSION_METADATA_FIELDS = ("title", "slug", "organisation", "teamName", "teamEmail")


async def _create_version_in_transaction(
    ctx: FormsContext,
    session: Any,
    form_id: str,
    author: Author,
    change_type: VersionChangeType,
    description: Optional[str],
) -> VersionDocument:
    metadata = await ctx.metadata.get(form_id, session)
    state = snapshot_state(metadata)
    definition = await ctx.definitions.get(form_id, session, state)

    version_number = await ctx.metadata.get_and_increment_version_number(form_id, session)
    created_at = to_iso(utc_now())

    document = {
        "formId": form_id,
        "versionNumber": version_number,
        "formDefinition": definition,
        "metadata": {name: metadata.get(name) for name in VERSION_METADATA_FIELDS},
        "status": state.value,
        "createdAt": created_at,
        "createdBy": author,
        "changeType": change_type.value,
    }
    if description:
        document["changeDescription"] = description

    await ctx.versions.create_version(document, session)
    await ctx.metadata.add_version_summary(
        form_id, {"versionNumber": version_number, "createdAt": created_at}, session
    )
    return document


async def create_form_version(
    ctx: FormsContext,
    form_id: str,
    author: Author,
    change_type: VersionChangeType,
    session: Any = None,
    description: Optional[str] = None,
) -> VersionDocument:
    """
    Append a snapshot of the form's current definition to the ledger.

    Joins the caller's transaction when ``session`` is given, otherwise runs
    in its own.
    """
    logger.info(f"Creating new version for form ID {form_id}")

    if session is not None:
        version = await _create_version_in_transaction(ctx, session, form_id, author, change_type, description)
    else:
        version = await run_in_transaction(
            ctx,
            "createFormVersion",
            form_id,
            lambda s: _create_version_in_transaction(ctx, s, form_id, author, change_type, description),
        )

    logger.info(f"Created version {version['versionNumber']} for form ID {form_id}")
    return version


async def get_form_version(ctx: FormsContext, form_id: str, version_number: int) -> VersionDocument:
    logger.info(f"Getting version {version_number} for form ID {form_id}")
    async with ctx.database.session() as session:
        return await ctx.versions.get_version(form_id, version_number, session)


async def get_form_versions(ctx: FormsContext, form_id: str) -> List[VersionDocument]:
    """Newest first, capped at ``MAX_VERSIONS``."""
    logger.info(f"Getting all versions for form ID {form_id}")
    async with ctx.database.session() as session:
        page = await ctx.versions.get_versions(form_id, session, limit=ctx.settings.max_versions, offset=0)
    return page.versions


async def get_latest_form_version(ctx: FormsContext, form_id: str) -> VersionDocument:
    logger.info(f"Getting latest version for form ID {form_id}")
    async with ctx.database.session() as session:
        return await ctx.versions.get_latest_version(form_id, session)


async def remove_form_versions(ctx: FormsContext, form_id: str, session: Any) -> int:
    logger.info(f"Removing all versions for form ID {form_id}")
    return await ctx.versions.remove_versions_for_form(form_id, session)
