"""V1 Legacy form store endpoints (S3 file-based definitions)."""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from forms_manager.api.v1.dependencies import get_context
from forms_manager.api.v1.schemas import StatusResponse
from forms_manager.domain.definition.constants import FormStatus
from forms_manager.services import legacy as legacy_service
from forms_manager.services.context import FormsContext

router = APIRouter(prefix="/legacy/forms/{form_id}", tags=["legacy"])


@router.get("/definition/{state}", summary="Get legacy definition")
async def get_legacy_definition(form_id: str, state: FormStatus, ctx: FormsContext = Depends(get_context)):
    return await legacy_service.get_legacy_form_definition(ctx, form_id, state)


@router.put("/definition/draft", response_model=StatusResponse, summary="Store legacy draft definition")
async def save_legacy_definition(
    form_id: str,
    definition: Dict[str, Any] = Body(...),
    ctx: FormsContext = Depends(get_context),
):
    await legacy_service.save_legacy_form_definition(ctx, form_id, definition)
    return StatusResponse(id=form_id, status="updated")


@router.post("/create-live", response_model=StatusResponse, summary="Copy legacy draft to live")
async def copy_draft_to_live(form_id: str, ctx: FormsContext = Depends(get_context)):
    await legacy_service.copy_legacy_draft_to_live(ctx, form_id)
    return StatusResponse(id=form_id, status="created-live")


@router.post("/create-draft", response_model=StatusResponse, summary="Copy legacy live to draft")
async def copy_live_to_draft(form_id: str, ctx: FormsContext = Depends(get_context)):
    await legacy_service.copy_legacy_live_to_draft(ctx, form_id)
    return StatusResponse(id=form_id, status="created-draft")
