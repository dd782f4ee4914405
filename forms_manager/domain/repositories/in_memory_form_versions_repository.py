"""
In-memory implementation for Tier-1 tests.

Real storage semantics, queryable, no DB dependency.
"""

import copy
from typing import Any, Dict, List, Optional, Tuple

from forms_manager.domain.errors import ConflictError
from forms_manager.domain.repositories.form_versions_repository import FormVersionsRepository
from forms_manager.domain.repositories.in_memory_store import InMemoryTables


class InMemoryFormVersionsRepository(FormVersionsRepository):
    """Versions held in ``InMemoryTables.versions``."""

    @staticmethod
    def _for_form(session: InMemoryTables, form_id: str) -> List[Dict[str, Any]]:
        return sorted(
            (v for v in session.versions if v["formId"] == form_id),
            key=lambda v: v["versionNumber"],
            reverse=True,
        )

    async def _insert(self, session: InMemoryTables, document: Dict[str, Any]) -> None:
        for existing in session.versions:
            if (existing["formId"], existing["versionNumber"]) == (document["formId"], document["versionNumber"]):
                raise ConflictError(
                    f"Version {document['versionNumber']} already exists for form ID '{document['formId']}'"
                )
        session.versions.append(copy.deepcopy(document))

    async def _find(
        self, session: InMemoryTables, form_id: str, version_number: Optional[int]
    ) -> Optional[Dict[str, Any]]:
        for version in self._for_form(session, form_id):
            if version_number is None or version["versionNumber"] == version_number:
                return copy.deepcopy(version)
        return None

    async def _page(
        self, session: InMemoryTables, form_id: str, limit: int, offset: int
    ) -> Tuple[List[Dict[str, Any]], int]:
        versions = self._for_form(session, form_id)
        return copy.deepcopy(versions[offset:offset + limit]), len(versions)

    async def _delete_for_form(self, session: InMemoryTables, form_id: str) -> int:
        before = len(session.versions)
        session.versions[:] = [v for v in session.versions if v["formId"] != form_id]
        return before - len(session.versions)

    async def _summaries(self, session: InMemoryTables, form_ids: List[str]) -> List[Dict[str, Any]]:
        wanted = set(form_ids)
        return [
            {"formId": v["formId"], "versionNumber": v["versionNumber"], "createdAt": v["createdAt"]}
            for v in session.versions
            if v["formId"] in wanted
        ]
