"""
Form lifecycle: create, read, list, update metadata, remove.
"""

import logging
import uuid
from typing import Any, Dict, List

from forms_manager.domain.definition.constants import SchemaVersion, VersionChangeType
from forms_manager.domain.definition.templates import empty_v2
from forms_manager.domain.definition.validation import validate
from forms_manager.domain.errors import BadRequestError, FormAlreadyExistsError
from forms_manager.domain.repositories.aggregation_pure import QueryOptions
from forms_manager.domain.repositories.form_metadata_repository import PatchTransition, to_iso
from forms_manager.domain.strings import slugify
from forms_manager.messaging.mappers import (
    form_created_mapper,
    form_deleted_mapper,
    form_title_updated_mapper,
    get_form_metadata_audit_messages,
)
from forms_manager.services.constants import REMOVE_FORM_ERROR_MESSAGES
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author, map_form, run_in_transaction, utc_now
from forms_manager.services.versioning import create_form_version, remove_form_versions

logger = logging.getLogger(__name__)

Form = Dict[str, Any]


async def create_form(ctx: FormsContext, metadata_input: Dict[str, Any], author: Author) -> Form:
    """
    Create a form with a blank V2 draft definition named after its title.

    Raises:
        FormAlreadyExistsError: another form already has the title's slug
    """
    title = metadata_input["title"]
    definition = {**empty_v2(), "name": title}
    validate(definition, SchemaVersion.V2)

    form_id = str(uuid.uuid4())
    slug = slugify(title)
    now = to_iso(utc_now())
    audit = {"createdAt": now, "createdBy": author, "updatedAt": now, "updatedBy": author}

    document = {
        **metadata_input,
        "id": form_id,
        "slug": slug,
        "draft": dict(audit),
        **audit,
        "lastVersionNumber": 0,
        "versions": [],
    }

    logger.info(f"Creating form '{title}' with slug {slug}")

    async def handler(session: Any) -> Form:
        await ctx.metadata.create(document, session)
        await ctx.definitions.insert(form_id, definition, session, SchemaVersion.V2)
        await create_form_version(ctx, form_id, author, VersionChangeType.FORM_CREATED, session=session)
        metadata = map_form(await ctx.metadata.get(form_id, session))
        await ctx.publisher.publish(form_created_mapper(metadata))
        return metadata

    metadata = await run_in_transaction(ctx, "createForm", form_id, handler)
    logger.info(f"Created form ID {form_id} with slug {slug}")
    return metadata


async def get_form(ctx: FormsContext, form_id: str) -> Form:
    async with ctx.database.session() as session:
        return map_form(await ctx.metadata.get(form_id, session))


async def get_form_by_slug(ctx: FormsContext, slug: str) -> Form:
    async with ctx.database.session() as session:
        return map_form(await ctx.metadata.get_by_slug(slug, session))


async def list_forms(ctx: FormsContext, options: QueryOptions) -> Dict[str, Any]:
    """One page of forms with pagination metadata and filter facets."""
    async with ctx.database.session() as session:
        result = await ctx.metadata.list(options, session)

    forms: List[Form] = [map_form(document) for document in result.documents]
    return {
        "forms": forms,
        "totalItems": result.total_items,
        "totalPages": result.total_pages(options.per_page),
        "filters": result.filters,
    }


async def update_form_metadata(
    ctx: FormsContext,
    form_id: str,
    form_update: Dict[str, Any],
    author: Author,
) -> str:
    """
    Patch metadata fields and return the (possibly new) slug.

    A title change also renames the draft definition and moves the slug;
    it is rejected once the form is live. One audit message is published per
    changed field.
    """
    logger.info(f"Updating form metadata for form ID {form_id}")

    form = await get_form(ctx, form_id)
    if form.get("live") and "title" in form_update:
        raise BadRequestError(f"Form with ID '{form_id}' is live so 'title' cannot be updated")

    title = form_update.get("title")
    fields = dict(form_update)
    if title:
        fields["slug"] = slugify(title)

    async def handler(session: Any) -> str:
        transition = PatchTransition(author=author, date=utc_now(), fields=fields)
        updated = map_form(await ctx.metadata.update(form_id, transition, session))

        if title:
            await ctx.definitions.update_name(form_id, title, session)

        messages = get_form_metadata_audit_messages(updated, form, form_update)
        title_changed = bool(title) and title != form["title"]
        if title_changed:
            messages.insert(0, form_title_updated_mapper(updated, form))

        if messages:
            await create_form_version(ctx, form_id, author, VersionChangeType.METADATA_UPDATED, session=session)
        for message in messages:
            await ctx.publisher.publish(message)

        return updated["slug"]

    try:
        slug = await run_in_transaction(ctx, "updateFormMetadata", form_id, handler)
    except FormAlreadyExistsError as error:
        logger.info(f"[duplicateFormTitle] Form title {title} already exists - validation failed")
        raise BadRequestError(f"Form title {title} already exists", cause=error)

    logger.info(f"Updated form metadata for form ID {form_id}")
    return slug


async def remove_form(ctx: FormsContext, form_id: str, author: Author) -> None:
    """Remove metadata, definitions and versions. Forbidden once live."""
    logger.info(f"Removing form with ID {form_id}")

    form = await get_form(ctx, form_id)
    if form.get("live"):
        raise BadRequestError(REMOVE_FORM_ERROR_MESSAGES["formIsAlreadyLive"])

    async def handler(session: Any) -> None:
        await ctx.metadata.remove(form_id, session)
        await ctx.definitions.remove(form_id, session)
        await remove_form_versions(ctx, form_id, session)
        await ctx.publisher.publish(form_deleted_mapper(form, author, utc_now()))

    await run_in_transaction(ctx, "removeForm", form_id, handler)
    logger.info(f"Removed form with ID {form_id}")