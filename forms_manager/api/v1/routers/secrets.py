"""V1 Form secret endpoints. Values are only ever returned encrypted."""

from fastapi import APIRouter, Depends

from forms_manager.api.v1.dependencies import get_author, get_context
from forms_manager.api.v1.schemas import SecretRequest
from forms_manager.services import secrets as secrets_service
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author

router = APIRouter(prefix="/forms/{form_id}/secrets", tags=["secrets"])


@router.get("/{name}", summary="Get encrypted secret")
async def get_secret(form_id: str, name: str, ctx: FormsContext = Depends(get_context)):
    return await secrets_service.get_form_secret(ctx, form_id, name)


@router.get("/{name}/exists", summary="Check secret exists")
async def secret_exists(form_id: str, name: str, ctx: FormsContext = Depends(get_context)):
    return await secrets_service.exists_form_secret(ctx, form_id, name)


@router.post("/{name}", summary="Save secret")
async def save_secret(
    form_id: str,
    name: str,
    body: SecretRequest,
    ctx: FormsContext = Depends(get_context),
    author: Author = Depends(get_author),
):
    await secrets_service.save_form_secret(ctx, form_id, name, body.secret_value, author)
    return {"id": form_id, "secretName": name, "status": "saved"}
