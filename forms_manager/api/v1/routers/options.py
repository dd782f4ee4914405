"""V1 Definition option endpoint."""

from fastapi import APIRouter, Depends

from forms_manager.api.v1.dependencies import get_author, get_context
from forms_manager.api.v1.schemas import OptionRequest
from forms_manager.services import options as options_service
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author

router = APIRouter(prefix="/forms/{form_id}/definition/draft/options", tags=["options"])


@router.post("/{option_name}", summary="Set option")
async def update_option(
    form_id: str,
    option_name: str,
    body: OptionRequest,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    return await options_service.update_option_on_draft_definition(
        ctx, form_id, option_name, body.option_value, author
    )
