"""V1 Component endpoints on a draft page."""

from typing import List

from fastapi import APIRouter, Body, Depends, Query

from forms_manager.api.v1.dependencies import get_author, get_context
from forms_manager.api.v1.schemas import ComponentInput, passthrough
from forms_manager.services import component as component_service
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author

router = APIRouter(
    prefix="/forms/{form_id}/definition/draft/pages/{page_id}/components",
    tags=["components"],
)


@router.post("", summary="Add component")
async def create_component(
    form_id: str,
    page_id: str,
    body: ComponentInput,
    prepend: bool = Query(False, description="Insert at the start of the page"),
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    created = await component_service.create_component_on_draft_definition(
        ctx, form_id, page_id, [passthrough(body)], author, prepend=prepend
    )
    return created[0]


@router.post("/order", summary="Reorder components")
async def reorder_components(
    form_id: str,
    page_id: str,
    order: List[str] = Body(...),
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    return await component_service.reorder_draft_form_definition_components(ctx, form_id, page_id, order, author)


@router.get("/{component_id}", summary="Get component")
async def get_component(
    form_id: str, page_id: str, component_id: str, ctx: FormsContext = Depends(get_context)
):
    return await component_service.get_form_definition_page_component(ctx, form_id, page_id, component_id)


@router.put("/{component_id}", summary="Replace component")
async def update_component(
    form_id: str,
    page_id: str,
    component_id: str,
    body: ComponentInput,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    return await component_service.update_component_on_draft_definition(
        ctx, form_id, page_id, component_id, passthrough(body), author
    )


@router.delete("/{component_id}", summary="Delete component")
async def delete_component(
    form_id: str,
    page_id: str,
    component_id: str,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    await component_service.delete_component_on_draft_definition(ctx, form_id, page_id, component_id, author)
    return {"componentId": component_id, "status": "deleted"}
