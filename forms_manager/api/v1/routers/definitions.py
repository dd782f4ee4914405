"""V1 Form definition endpoints: whole-definition reads and the draft/live lifecycle."""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from forms_manager.api.v1.dependencies import get_author, get_context
from forms_manager.api.v1.schemas import StatusResponse
from forms_manager.domain.definition.constants import FormStatus
from forms_manager.services import definition as definition_service
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author

router = APIRouter(prefix="/forms/{form_id}", tags=["definitions"])


@router.get("/definition", summary="Get draft definition")
async def get_definition(form_id: str, ctx: FormsContext = Depends(get_context)):
    return await definition_service.get_form_definition(ctx, form_id, FormStatus.DRAFT)


@router.get("/definition/draft", summary="Get draft definition")
async def get_draft_definition(form_id: str, ctx: FormsContext = Depends(get_context)):
    return await definition_service.get_form_definition(ctx, form_id, FormStatus.DRAFT)


@router.get("/definition/live", summary="Get live definition")
async def get_live_definition(form_id: str, ctx: FormsContext = Depends(get_context)):
    return await definition_service.get_form_definition(ctx, form_id, FormStatus.LIVE)


@router.post(
    "/definition/draft",
    response_model=StatusResponse,
    summary="Replace draft definition",
)
async def update_draft_definition(
    form_id: str,
    definition: Dict[str, Any] = Body(...),
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    await definition_service.update_draft_form_definition(ctx, form_id, definition, author)
    return StatusResponse(id=form_id, status="updated")


@router.delete(
    "/definition/draft",
    response_model=StatusResponse,
    summary="Discard draft",
    description="Discard the draft of a live form.",
)
async def delete_draft_definition(
    form_id: str,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    await definition_service.delete_draft_form_definition(ctx, form_id, author)
    return StatusResponse(id=form_id, status="deleted")


@router.post(
    "/create-live",
    response_model=StatusResponse,
    summary="Publish draft",
)
async def create_live_from_draft(
    form_id: str,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    await definition_service.create_live_from_draft(ctx, form_id, author)
    return StatusResponse(id=form_id, status="created-live")


@router.post(
    "/create-draft",
    response_model=StatusResponse,
    summary="Create draft from live",
)
async def create_draft_from_live(
    form_id: str,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    await definition_service.create_draft_from_live(ctx, form_id, author)
    return StatusResponse(id=form_id, status="created-draft")
