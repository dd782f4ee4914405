"""
In-memory implementation for Tier-1 tests.

Real storage semantics, queryable, no DB dependency.
"""

import copy
from typing import Any, Dict, Optional

from forms_manager.domain.definition.constants import STATE_FIELDS, FormStatus
from forms_manager.domain.repositories.form_definition_repository import FormDefinitionRepository
from forms_manager.domain.repositories.in_memory_store import InMemoryTables


class InMemoryFormDefinitionRepository(FormDefinitionRepository):
    """Definitions held in ``InMemoryTables.definitions``, copied on every read and write."""

    async def _find(self, session: InMemoryTables, form_id: str, lock: bool = False) -> Optional[Dict[str, Any]]:
        row = session.definitions.get(form_id)
        return copy.deepcopy(row) if row is not None else None

    async def _write(
        self,
        session: InMemoryTables,
        form_id: str,
        state: FormStatus,
        definition: Optional[Dict[str, Any]],
    ) -> int:
        row = session.definitions.get(form_id)
        if row is None:
            return 0
        row[STATE_FIELDS[state]] = copy.deepcopy(definition)
        return 1

    async def _copy(self, session: InMemoryTables, form_id: str, source: FormStatus, target: FormStatus) -> int:
        row = session.definitions.get(form_id)
        if row is None or row.get(STATE_FIELDS[source]) is None:
            return 0
        row[STATE_FIELDS[target]] = copy.deepcopy(row[STATE_FIELDS[source]])
        return 1

    async def _upsert(self, session: InMemoryTables, form_id: str, draft: Dict[str, Any]) -> None:
        row = session.definitions.setdefault(form_id, {"draft": None, "live": None})
        row["draft"] = copy.deepcopy(draft)

    async def _delete(self, session: InMemoryTables, form_id: str) -> int:
        return 1 if session.definitions.pop(form_id, None) is not None else 0
