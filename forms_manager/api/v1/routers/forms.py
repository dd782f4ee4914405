"""V1 Forms API endpoints: metadata CRUD and listing."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from forms_manager.api.v1.dependencies import get_author, get_context
from forms_manager.api.v1.schemas import (
    FormListResponse,
    FormMetadataInput,
    FormMetadataUpdate,
    StatusResponse,
)
from forms_manager.domain.definition.constants import FormStatus
from forms_manager.domain.repositories.aggregation_pure import QueryOptions
from forms_manager.services import forms as forms_service
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author

router = APIRouter(prefix="/forms", tags=["forms"])


@router.get(
    "",
    response_model=FormListResponse,
    summary="List forms",
    description="List forms with pagination, sorting, search and filter facets.",
)
async def list_forms(
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100, alias="perPage"),
    sort_by: Optional[Literal["updatedAt", "title"]] = Query(None, alias="sortBy"),
    order: Optional[Literal["asc", "desc"]] = Query(None),
    title: Optional[str] = Query(None, description="Case-insensitive title search"),
    author: Optional[str] = Query(None, description="Filter by author display name"),
    organisations: Optional[List[str]] = Query(None),
    status: Optional[List[FormStatus]] = Query(None),
    ctx: FormsContext = Depends(get_context),
):
    options = QueryOptions(
        page=page,
        per_page=per_page,
        sort_by=sort_by,
        order=order,
        title=title,
        author=author,
        organisations=organisations or [],
        status=status or [],
    )
    result = await forms_service.list_forms(ctx, options)

    search = {
        "title": title,
        "author": author,
        "organisations": organisations,
        "status": [s.value for s in status] if status else None,
    }
    return FormListResponse(
        data=result["forms"],
        meta={
            "pagination": {
                "page": page,
                "perPage": per_page,
                "totalItems": result["totalItems"],
                "totalPages": result["totalPages"],
            },
            "sorting": {"sortBy": sort_by or "updatedAt", "order": order or "desc"},
            "search": {key: value for key, value in search.items() if value},
            "filters": result["filters"],
        },
    )


@router.post(
    "",
    response_model=StatusResponse,
    summary="Create form",
)
async def create_form(
    body: FormMetadataInput,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    form = await forms_service.create_form(ctx, body.to_document(), author)
    return StatusResponse(id=form["id"], slug=form["slug"], status="created")


@router.get("/slug/{slug}", summary="Get form by slug")
async def get_form_by_slug(slug: str, ctx: FormsContext = Depends(get_context)):
    return await forms_service.get_form_by_slug(ctx, slug)


@router.get("/{form_id}", summary="Get form metadata")
async def get_form(form_id: str, ctx: FormsContext = Depends(get_context)):
    return await forms_service.get_form(ctx, form_id)


@router.patch(
    "/{form_id}",
    response_model=StatusResponse,
    summary="Update form metadata",
    description="Apply the supplied fields. The title cannot change once the form is live.",
)
async def update_form(
    form_id: str,
    body: FormMetadataUpdate,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    slug = await forms_service.update_form_metadata(ctx, form_id, body.to_document(exclude_unset=True), author)
    return StatusResponse(id=form_id, slug=slug, status="updated")


@router.delete(
    "/{form_id}",
    response_model=StatusResponse,
    summary="Remove form",
    description="Remove a form that has never been published.",
)
async def remove_form(
    form_id: str,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    await forms_service.remove_form(ctx, form_id, author)
    return StatusResponse(id=form_id, status="deleted")
