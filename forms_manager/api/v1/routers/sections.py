"""V1 Section assignment endpoint."""

from fastapi import APIRouter, Depends

from forms_manager.api.v1.dependencies import get_author, get_context
from forms_manager.api.v1.schemas import SectionAssignmentRequest
from forms_manager.services import sections as sections_service
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author

router = APIRouter(prefix="/forms/{form_id}/definition/draft/sections", tags=["sections"])


@router.put(
    "",
    summary="Assign sections",
    description="Replace all sections and page assignments. An empty list removes every section.",
)
async def assign_sections(
    form_id: str,
    body: SectionAssignmentRequest,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    assignments = [section.to_document() for section in body.sections]
    sections = await sections_service.assign_sections_to_form(ctx, form_id, assignments, author)
    return {"id": form_id, "sections": sections, "status": "updated"}
