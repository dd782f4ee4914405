"""V1 Form version history endpoints."""

from fastapi import APIRouter, Depends

from forms_manager.api.v1.dependencies import get_context
from forms_manager.services import versioning as versioning_service
from forms_manager.services.context import FormsContext

router = APIRouter(prefix="/forms/{form_id}/versions", tags=["versions"])


@router.get("", summary="List versions", description="Newest first.")
async def list_versions(form_id: str, ctx: FormsContext = Depends(get_context)):
    versions = await versioning_service.get_form_versions(ctx, form_id)
    return {"versions": versions, "total": len(versions)}


@router.get("/latest", summary="Get latest version")
async def get_latest_version(form_id: str, ctx: FormsContext = Depends(get_context)):
    return await versioning_service.get_latest_form_version(ctx, form_id)


@router.get("/{version_number}", summary="Get version")
async def get_version(form_id: str, version_number: int, ctx: FormsContext = Depends(get_context)):
    return await versioning_service.get_form_version(ctx, form_id, version_number)
