"""V1 List endpoints on the draft definition."""

from fastapi import APIRouter, Depends

from forms_manager.api.v1.dependencies import get_author, get_context
from forms_manager.api.v1.schemas import ListInput, passthrough
from forms_manager.services import lists as lists_service
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author

router = APIRouter(prefix="/forms/{form_id}/definition/draft/lists", tags=["lists"])


@router.post("", summary="Add list")
async def create_list(
    form_id: str,
    body: ListInput,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    created = await lists_service.add_list_to_draft_form_definition(ctx, form_id, passthrough(body), author)
    return {"id": created["id"], "list": created, "status": "created"}


@router.put("/{list_id}", summary="Replace list")
async def update_list(
    form_id: str,
    list_id: str,
    body: ListInput,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    updated = await lists_service.update_list_on_draft_form_definition(
        ctx, form_id, list_id, passthrough(body), author
    )
    return {"id": list_id, "list": updated, "status": "updated"}


@router.delete("/{list_id}", summary="Delete list")
async def delete_list(
    form_id: str,
    list_id: str,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    await lists_service.remove_list_on_draft_form_definition(ctx, form_id, list_id, author)
    return {"id": list_id, "status": "deleted"}
