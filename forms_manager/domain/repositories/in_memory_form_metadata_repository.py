"""
In-memory implementation for Tier-1 tests.

Real storage semantics, queryable, no DB dependency. Slugs are unique
exactly as the PostgreSQL unique constraint enforces them.
"""

import copy
from typing import Any, Dict, Optional

from forms_manager.domain.errors import FormAlreadyExistsError
from forms_manager.domain.repositories.aggregation_pure import QueryOptions, QueryResult, run_query
from forms_manager.domain.repositories.form_metadata_repository import FormMetadataRepository
from forms_manager.domain.repositories.in_memory_store import InMemoryTables


class InMemoryFormMetadataRepository(FormMetadataRepository):
    """Metadata documents held in ``InMemoryTables.metadata``."""

    @staticmethod
    def _slug_taken(session: InMemoryTables, slug: str, form_id: str) -> bool:
        return any(doc["slug"] == slug and key != form_id for key, doc in session.metadata.items())

    async def _find(self, session: InMemoryTables, form_id: str, lock: bool = False) -> Optional[Dict[str, Any]]:
        document = session.metadata.get(form_id)
        return copy.deepcopy(document) if document is not None else None

    async def _find_by_slug(self, session: InMemoryTables, slug: str) -> Optional[Dict[str, Any]]:
        for document in session.metadata.values():
            if document["slug"] == slug:
                return copy.deepcopy(document)
        return None

    async def _query(self, session: InMemoryTables, options: QueryOptions) -> QueryResult:
        return run_query([copy.deepcopy(document) for document in session.metadata.values()], options)

    async def _insert(self, session: InMemoryTables, document: Dict[str, Any]) -> None:
        if self._slug_taken(session, document["slug"], document["id"]) or document["id"] in session.metadata:
            raise FormAlreadyExistsError(document["slug"])
        stored = copy.deepcopy(document)
        stored.setdefault("lastVersionNumber", 0)
        session.metadata[document["id"]] = stored

    async def _replace(self, session: InMemoryTables, form_id: str, document: Dict[str, Any]) -> int:
        current = session.metadata.get(form_id)
        if current is None:
            return 0
        if self._slug_taken(session, document["slug"], form_id):
            raise FormAlreadyExistsError(document["slug"])
        stored = copy.deepcopy(document)
        # The counter is only ever moved by _increment_version
        stored["lastVersionNumber"] = current.get("lastVersionNumber", 0)
        session.metadata[form_id] = stored
        return 1

    async def _delete(self, session: InMemoryTables, form_id: str) -> int:
        return 1 if session.metadata.pop(form_id, None) is not None else 0

    async def _increment_version(self, session: InMemoryTables, form_id: str) -> Optional[int]:
        document = session.metadata.get(form_id)
        if document is None:
            return None
        document["lastVersionNumber"] = document.get("lastVersionNumber", 0) + 1
        return document["lastVersionNumber"]
