"""
PostgreSQL implementation.

IMPORTANT: Does NOT commit. Caller owns transaction.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from forms_manager.domain.models.forms import FormSecretRow
from forms_manager.domain.repositories.secrets_repository import SecretsRepository


class PostgresSecretsRepository(SecretsRepository):
    """PostgreSQL repository. Does NOT commit internally."""

    async def _find(self, session: AsyncSession, form_id: str, secret_name: str) -> Optional[str]:
        result = await session.execute(
            select(FormSecretRow.secret_value).where(
                FormSecretRow.form_id == form_id,
                FormSecretRow.secret_name == secret_name,
            )
        )
        return result.scalar_one_or_none()

    async def _save(self, session: AsyncSession, form_id: str, secret_name: str, secret_value: str) -> None:
        stmt = insert(FormSecretRow).values(form_id=form_id, secret_name=secret_name, secret_value=secret_value)
        await session.execute(
            stmt.on_conflict_do_update(
                index_elements=[FormSecretRow.form_id, FormSecretRow.secret_name],
                set_={"secret_value": stmt.excluded.secret_value},
            )
        )
