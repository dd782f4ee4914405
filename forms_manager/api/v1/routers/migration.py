"""V1 Definition migration endpoints."""

from fastapi import APIRouter, Depends

from forms_manager.api.v1.dependencies import get_author, get_context
from forms_manager.services import migration as migration_service
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author

router = APIRouter(prefix="/forms/{form_id}/definition/draft/migrate", tags=["migration"])


@router.post("/v2", summary="Migrate draft to engine V2")
async def migrate_to_v2(
    form_id: str,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    return await migration_service.migrate_definition_to_v2(ctx, form_id, author)


@router.post("/v1", summary="Migrate draft to engine V1", description="Always rejected: the migration is one-way.")
async def migrate_to_v1(
    form_id: str,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    return await migration_service.migrate_definition_to_v1(ctx, form_id, author)
