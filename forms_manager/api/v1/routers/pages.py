"""V1 Page endpoints on the draft definition."""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from forms_manager.api.v1.dependencies import get_author, get_context
from forms_manager.api.v1.schemas import PageInput, StatusResponse, passthrough
from forms_manager.services import page as page_service
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author

router = APIRouter(prefix="/forms/{form_id}/definition/draft/pages", tags=["pages"])


@router.post("", summary="Add page")
async def create_page(
    form_id: str,
    body: PageInput,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    return await page_service.create_page_on_draft_definition(ctx, form_id, passthrough(body), author)


@router.post(
    "/order",
    summary="Reorder pages",
    description="Pages listed move to the front in the given order; the rest keep their order.",
)
async def reorder_pages(
    form_id: str,
    order: List[str] = Body(...),
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    return await page_service.reorder_draft_form_definition_pages(ctx, form_id, order, author)


@router.get("/{page_id}", summary="Get page")
async def get_page(form_id: str, page_id: str, ctx: FormsContext = Depends(get_context)):
    return await page_service.get_form_definition_page(ctx, form_id, page_id)


@router.put("/{page_id}", summary="Replace page")
async def update_page(
    form_id: str,
    page_id: str,
    body: PageInput,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    return await page_service.update_page_on_draft_definition(ctx, form_id, page_id, passthrough(body), author)


@router.patch("/{page_id}", summary="Update page fields")
async def patch_page(
    form_id: str,
    page_id: str,
    page_fields: Dict[str, Any] = Body(...),
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    return await page_service.patch_fields_on_draft_definition_page(ctx, form_id, page_id, page_fields, author)


@router.delete("/{page_id}", response_model=StatusResponse, summary="Delete page")
async def delete_page(
    form_id: str,
    page_id: str,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    await page_service.delete_page_on_draft_definition(ctx, form_id, page_id, author)
    return StatusResponse(id=page_id, status="deleted")
