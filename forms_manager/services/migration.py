"""
V1 -> V2 definition migration.

The migration runs as a pipeline of steps, each in its own transaction:
reposition the summary page, add page ids, add component ids, then convert
the remaining structures and flip the engine. A failed step leaves the draft
at the last completed step and the migration can simply be re-run.
"""

import logging
from typing import Any, Callable, Dict

from forms_manager.domain.definition import migration_pure as migration
from forms_manager.domain.definition.constants import FormStatus, SchemaVersion, VersionChangeType
from forms_manager.domain.errors import IrreversibleMigrationError
from forms_manager.messaging.mappers import form_migrated_mapper
from forms_manager.services.context import FormsContext
from forms_manager.services.definition import get_form_definition
from forms_manager.services.shared import Author, map_form, run_in_transaction
from forms_manager.services.versioning import create_form_version

logger = logging.getLogger(__name__)

Definition = Dict[str, Any]


async def _apply_step(
    ctx: FormsContext,
    form_id: str,
    author: Author,
    operation: str,
    step: Callable[[Definition], Definition],
) -> Definition:
    async def handler(session: Any) -> Definition:
        draft = await ctx.definitions.get(form_id, session, FormStatus.DRAFT)
        updated = step(draft)
        if updated != draft:
            await ctx.definitions.update(form_id, updated, session)
            await ctx.metadata.update_audit(form_id, author, session)
        return updated

    return await run_in_transaction(ctx, operation, form_id, handler)


async def reposition_summary_pipeline(ctx: FormsContext, form_id: str, author: Author) -> Definition:
    """Move the summary page to the end of ``pages``."""
    logger.info(f"Checking summary page position on Form ID {form_id}")
    return await _apply_step(ctx, form_id, author, "repositionSummary", migration.reposition_summary)


async def add_page_ids_pipeline(ctx: FormsContext, form_id: str, author: Author) -> Definition:
    logger.info(f"Adding missing page ids on Form ID {form_id}")
    return await _apply_step(ctx, form_id, author, "addPageIds", migration.populate_page_ids)


async def add_component_ids_pipeline(ctx: FormsContext, form_id: str, author: Author) -> Definition:
    logger.info(f"Adding missing component ids on Form ID {form_id}")
    return await _apply_step(ctx, form_id, author, "addComponentIds", migration.add_component_ids_to_definition)


async def migrate_definition_to_v2(ctx: FormsContext, form_id: str, author: Author) -> Definition:
    """
    Migrate the draft to the V2 engine and return it.

    A draft that is already V2 is returned unchanged without any write.
    """
    logger.info(f"Migrating form with ID {form_id} to engine version 2")

    draft = await get_form_definition(ctx, form_id, FormStatus.DRAFT)
    if migration.is_v2(draft):
        logger.info(f"Form with ID {form_id} is already on engine version 2")
        return draft

    await reposition_summary_pipeline(ctx, form_id, author)
    await add_page_ids_pipeline(ctx, form_id, author)
    await add_component_ids_pipeline(ctx, form_id, author)

    async def handler(session: Any) -> Definition:
        current = await ctx.definitions.get(form_id, session, FormStatus.DRAFT)
        migrated = migration.migrate_to_v2(current)
        await ctx.definitions.update(form_id, migrated, session, SchemaVersion.V2)
        form = map_form(await ctx.metadata.update_audit(form_id, author, session))
        await create_form_version(ctx, form_id, author, VersionChangeType.FORM_MIGRATED, session=session)
        await ctx.publisher.publish(form_migrated_mapper(form))
        return migrated

    migrated = await run_in_transaction(ctx, "migrateDefinitionToV2", form_id, handler)
    logger.info(f"Migrated form with ID {form_id} to engine version 2")
    return migrated


async def migrate_definition_to_v1(ctx: FormsContext, form_id: str, author: Author) -> Definition:
    """V2 conversions drop V1 structures, so there is no way back."""
    logger.info(f"Rejected migration of form with ID {form_id} to engine version 1")
    raise IrreversibleMigrationError(f"Form with ID '{form_id}' cannot be migrated back to engine version 1")
