"""
PostgreSQL implementation.

IMPORTANT: Does NOT commit. Caller owns transaction.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from forms_manager.domain.errors import ConflictError
from forms_manager.domain.models.forms import FormVersionRow
from forms_manager.domain.repositories.form_versions_repository import FormVersionsRepository


class PostgresFormVersionsRepository(FormVersionsRepository):
    """PostgreSQL repository. Does NOT commit internally."""

    async def _insert(self, session: AsyncSession, document: Dict[str, Any]) -> None:
        row = FormVersionRow(
            form_id=document["formId"],
            version_number=document["versionNumber"],
            document=document,
            created_at=datetime.fromisoformat(document["createdAt"]),
        )
        try:
            async with session.begin_nested():
                session.add(row)
                await session.flush()
        except IntegrityError as error:
            raise ConflictError(
                f"Version {document['versionNumber']} already exists for form ID '{document['formId']}'",
                cause=error,
            )

    async def _find(
        self, session: AsyncSession, form_id: str, version_number: Optional[int]
    ) -> Optional[Dict[str, Any]]:
        stmt = select(FormVersionRow.document).where(FormVersionRow.form_id == form_id)
        if version_number is None:
            stmt = stmt.order_by(FormVersionRow.version_number.desc()).limit(1)
        else:
            stmt = stmt.where(FormVersionRow.version_number == version_number)
        return (await session.execute(stmt)).scalar_one_or_none()

    async def _page(
        self, session: AsyncSession, form_id: str, limit: int, offset: int
    ) -> Tuple[List[Dict[str, Any]], int]:
        result = await session.execute(
            select(FormVersionRow.document)
            .where(FormVersionRow.form_id == form_id)
            .order_by(FormVersionRow.version_number.desc())
            .offset(offset)
            .limit(limit)
        )
        total = await session.execute(
            select(func.count()).select_from(FormVersionRow).where(FormVersionRow.form_id == form_id)
        )
        return list(result.scalars().all()), total.scalar_one()

    async def _delete_for_form(self, session: AsyncSession, form_id: str) -> int:
        result = await session.execute(delete(FormVersionRow).where(FormVersionRow.form_id == form_id))
        return result.rowcount

    async def _summaries(self, session: AsyncSession, form_ids: List[str]) -> List[Dict[str, Any]]:
        result = await session.execute(
            select(FormVersionRow.form_id, FormVersionRow.version_number, FormVersionRow.created_at)
            .where(FormVersionRow.form_id.in_(form_ids))
        )
        return [
            {
                "formId": row.form_id,
                "versionNumber": row.version_number,
                "createdAt": row.created_at.isoformat(),
            }
            for row in result.fetchall()
        ]
