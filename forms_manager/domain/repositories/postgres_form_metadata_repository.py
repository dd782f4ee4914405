"""
PostgreSQL implementation.

IMPORTANT: Does NOT commit. Caller owns transaction.

``last_version_number`` and ``slug`` live in their own columns; the column
values are authoritative and merged into the document on read. Listings are
filtered, sorted and paginated in SQL over the JSONB document.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, cast, delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from forms_manager.domain.definition.constants import FormStatus
from forms_manager.domain.errors import FormAlreadyExistsError
from forms_manager.domain.models.forms import FormMetadataRow
from forms_manager.domain.repositories.aggregation_pure import (
    QueryOptions,
    QueryResult,
    filter_options,
    page_offset,
)
from forms_manager.domain.repositories.form_metadata_repository import FormMetadataRepository

_COLUMN_FIELDS = ("lastVersionNumber",)


def _to_document(row) -> Dict[str, Any]:
    document = dict(row.document)
    document["id"] = row.id
    document["slug"] = row.slug
    document["lastVersionNumber"] = row.last_version_number
    return document


def _stored(document: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in document.items() if key not in _COLUMN_FIELDS}


# =============================================================================
# LISTING
# =============================================================================

_document = FormMetadataRow.document
_title = _document["title"].as_string()
_organisation = _document["organisation"].as_string()
_created_by = _document["createdBy"]["displayName"].as_string()
_updated_by = _document["updatedBy"]["displayName"].as_string()
_live = _document["live"].as_string()

# UTC calendar day of updatedAt, as updated_date_only() computes it
_updated_on = func.to_char(
    func.timezone("UTC", cast(_document["updatedAt"].as_string(), DateTime(timezone=True))),
    "YYYY-MM-DD",
)


def _conditions(options: QueryOptions) -> List[Any]:
    conditions = []
    if options.title:
        conditions.append(_title.icontains(options.title, autoescape=True))
    if options.author:
        conditions.append(_created_by.icontains(options.author, autoescape=True))
    if options.organisations:
        conditions.append(_organisation.in_(options.organisations))

    statuses = set(options.status)
    if statuses == {FormStatus.LIVE}:
        conditions.append(_live.isnot(None))
    elif statuses == {FormStatus.DRAFT}:
        conditions.append(_live.is_(None))
    return conditions


def _order_by(options: QueryOptions) -> List[Any]:
    descending = options.order != "asc"
    if options.sort_by == "title":
        title = func.lower(_title)
        keys = [title.desc() if descending else title.asc(), _updated_on.desc()]
    elif options.sort_by == "updatedAt":
        keys = [_updated_on.desc() if descending else _updated_on.asc()]
    else:
        keys = [_updated_on.desc()]
    return keys + [func.lower(_updated_by).asc(), FormMetadataRow.id.asc()]


class PostgresFormMetadataRepository(FormMetadataRepository):
    """PostgreSQL repository. Does NOT commit internally."""

    _columns = (
        FormMetadataRow.id,
        FormMetadataRow.slug,
        FormMetadataRow.last_version_number,
        FormMetadataRow.document,
    )

    async def _find(self, session: AsyncSession, form_id: str, lock: bool = False) -> Optional[Dict[str, Any]]:
        stmt = select(*self._columns).where(FormMetadataRow.id == form_id)
        if lock:
            stmt = stmt.with_for_update()
        row = (await session.execute(stmt)).first()
        return _to_document(row) if row else None

    async def _find_by_slug(self, session: AsyncSession, slug: str) -> Optional[Dict[str, Any]]:
        row = (await session.execute(select(*self._columns).where(FormMetadataRow.slug == slug))).first()
        return _to_document(row) if row else None

    async def _query(self, session: AsyncSession, options: QueryOptions) -> QueryResult:
        conditions = _conditions(options)

        rows = await session.execute(
            select(*self._columns)
            .where(*conditions)
            .order_by(*_order_by(options))
            .offset(page_offset(options.page, options.per_page))
            .limit(options.per_page)
        )
        documents = [_to_document(row) for row in rows.fetchall()]
        total = await session.execute(select(func.count()).select_from(FormMetadataRow).where(*conditions))

        # Facets span the whole table, not just the filtered rows
        authors = await session.execute(select(_created_by).distinct())
        organisations = await session.execute(select(_organisation).distinct())
        live_flags = await session.execute(select(_live.isnot(None)).distinct())

        return QueryResult(
            documents=documents,
            total_items=total.scalar_one(),
            filters=filter_options(
                authors.scalars().all(),
                organisations.scalars().all(),
                [(FormStatus.LIVE if live else FormStatus.DRAFT).value for live in live_flags.scalars().all()],
            ),
        )

    async def _insert(self, session: AsyncSession, document: Dict[str, Any]) -> None:
        row = FormMetadataRow(
            id=document["id"],
            slug=document["slug"],
            last_version_number=document.get("lastVersionNumber", 0),
            document=_stored(document),
        )
        try:
            # Savepoint so a duplicate slug does not poison the outer transaction
            async with session.begin_nested():
                session.add(row)
                await session.flush()
        except IntegrityError as error:
            raise FormAlreadyExistsError(document["slug"], cause=error)

    async def _replace(self, session: AsyncSession, form_id: str, document: Dict[str, Any]) -> int:
        try:
            async with session.begin_nested():
                result = await session.execute(
                    update(FormMetadataRow)
                    .where(FormMetadataRow.id == form_id)
                    .values(slug=document["slug"], document=_stored(document))
                )
        except IntegrityError as error:
            raise FormAlreadyExistsError(document["slug"], cause=error)
        return result.rowcount

    async def _delete(self, session: AsyncSession, form_id: str) -> int:
        result = await session.execute(delete(FormMetadataRow).where(FormMetadataRow.id == form_id))
        return result.rowcount

    async def _increment_version(self, session: AsyncSession, form_id: str) -> Optional[int]:
        result = await session.execute(
            update(FormMetadataRow)
            .where(FormMetadataRow.id == form_id)
            .values(last_version_number=FormMetadataRow.last_version_number + 1)
            .returning(FormMetadataRow.last_version_number)
        )
        return result.scalar_one_or_none()
