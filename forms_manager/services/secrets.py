"""
Per-form secrets.

Values are encrypted with the configured RSA public key before they are
stored and are only ever returned encrypted.
"""

import base64
import logging
from typing import Any, Optional

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding

from forms_manager.domain.errors import InternalError
from forms_manager.messaging.mappers import form_secret_saved_mapper
from forms_manager.services.context import FormsContext
from forms_manager.services.shared import Author, map_form, run_in_transaction, utc_now

logger = logging.getLogger(__name__)


def encrypt_secret(secret_value: str, public_key_pem: Optional[str]) -> str:
    """
    Encrypt with RSA-OAEP (SHA-1) and return base64.

    Raises:
        InternalError: no public key is configured
    """
    if not public_key_pem:
        raise InternalError("Public key is missing")

    public_key = serialization.load_pem_public_key(public_key_pem.encode("utf-8"))
    encrypted = public_key.encrypt(
        secret_value.encode("utf-8"),
        padding.OAEP(mgf=padding.MGF1(algorithm=hashes.SHA1()), algorithm=hashes.SHA1(), label=None),
    )
    return base64.b64encode(encrypted).decode("ascii")


async def get_form_secret(ctx: FormsContext, form_id: str, secret_name: str) -> str:
    """The stored value, still encrypted."""
    async with ctx.database.session() as session:
        return await ctx.secrets.get(form_id, secret_name, session)


async def exists_form_secret(ctx: FormsContext, form_id: str, secret_name: str) -> bool:
    async with ctx.database.session() as session:
        return await ctx.secrets.exists(form_id, secret_name, session)


async def save_form_secret(
    ctx: FormsContext, form_id: str, secret_name: str, secret_value: str, author: Author
) -> None:
    """Encrypt and store a secret, replacing any previous value."""

    async def handler(session: Any) -> None:
        metadata = map_form(await ctx.metadata.get(form_id, session))
        encrypted = encrypt_secret(secret_value, ctx.settings.public_key_for_secrets)
        await ctx.secrets.save(form_id, secret_name, encrypted, session)
        await ctx.publisher.publish(form_secret_saved_mapper(metadata, secret_name, author, utc_now()))

    await run_in_transaction(ctx, "saveFormSecret", form_id, handler)
    logger.info(f"Saved secret '{secret_name}' to form ID {form_id}")
