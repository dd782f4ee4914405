"""
PostgreSQL implementation.

IMPORTANT: Does NOT commit. Caller owns transaction.
"""

from typing import Any, Dict, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from forms_manager.domain.definition.constants import STATE_FIELDS, FormStatus
from forms_manager.domain.models.forms import FormDefinitionRow
from forms_manager.domain.repositories.form_definition_repository import FormDefinitionRepository


def _column(state: FormStatus):
    return getattr(FormDefinitionRow, STATE_FIELDS[state])


class PostgresFormDefinitionRepository(FormDefinitionRepository):
    """PostgreSQL repository. Does NOT commit internally."""

    async def _find(self, session: AsyncSession, form_id: str, lock: bool = False) -> Optional[Dict[str, Any]]:
        stmt = select(FormDefinitionRow.draft, FormDefinitionRow.live).where(FormDefinitionRow.id == form_id)
        if lock:
            stmt = stmt.with_for_update()
        row = (await session.execute(stmt)).first()
        if row is None:
            return None
        return {"draft": row.draft, "live": row.live}

    async def _write(
        self,
        session: AsyncSession,
        form_id: str,
        state: FormStatus,
        definition: Optional[Dict[str, Any]],
    ) -> int:
        result = await session.execute(
            update(FormDefinitionRow)
            .where(FormDefinitionRow.id == form_id)
            .values({STATE_FIELDS[state]: definition})
        )
        return result.rowcount

    async def _copy(self, session: AsyncSession, form_id: str, source: FormStatus, target: FormStatus) -> int:
        result = await session.execute(
            update(FormDefinitionRow)
            .where(FormDefinitionRow.id == form_id)
            .where(_column(source).isnot(None))
            .values({STATE_FIELDS[target]: _column(source)})
        )
        return result.rowcount

    async def _upsert(self, session: AsyncSession, form_id: str, draft: Dict[str, Any]) -> None:
        stmt = insert(FormDefinitionRow).values(id=form_id, draft=draft)
        await session.execute(
            stmt.on_conflict_do_update(index_elements=[FormDefinitionRow.id], set_={"draft": stmt.excluded.draft})
        )

    async def _delete(self, session: AsyncSession, form_id: str) -> int:
        result = await session.execute(delete(FormDefinitionRow).where(FormDefinitionRow.id == form_id))
        return result.rowcount
