"""V1 Condition endpoints on the draft definition."""

from fastapi import APIRouter, Depends

from forms_manager.api.v1.dependencies import get_author, get_context
from forms_manager.api.v1.schemas import ConditionInput, passthrough
from forms_manager.services import conditions as conditions_service
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author

router = APIRouter(prefix="/forms/{form_id}/definition/draft/conditions", tags=["conditions"])


@router.post("", summary="Add condition")
async def create_condition(
    form_id: str,
    body: ConditionInput,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    created = await conditions_service.add_condition_to_draft_form_definition(
        ctx, form_id, passthrough(body), author
    )
    return {"id": created["id"], "condition": created, "status": "created"}


@router.put("/{condition_id}", summary="Replace condition")
async def update_condition(
    form_id: str,
    condition_id: str,
    body: ConditionInput,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    updated = await conditions_service.update_condition_on_draft_form_definition(
        ctx, form_id, condition_id, passthrough(body), author
    )
    return {"id": condition_id, "condition": updated, "status": "updated"}


@router.delete(
    "/{condition_id}",
    summary="Delete condition",
    description="Pages using the condition are unassigned first.",
)
async def delete_condition(
    form_id: str,
    condition_id: str,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    await conditions_service.remove_condition_on_draft_form_definition(ctx, form_id, condition_id, author)
    return {"id": condition_id, "status": "deleted"}
