"""
In-memory implementation for Tier-1 tests.

Real storage semantics, queryable, no DB dependency.
"""

from typing import Optional

from forms_manager.domain.repositories.in_memory_store import InMemoryTables
from forms_manager.domain.repositories.secrets_repository import SecretsRepository


class InMemorySecretsRepository(SecretsRepository):
    async def _find(self, session: InMemoryTables, form_id: str, secret_name: str) -> Optional[str]:
        return session.secrets.get((form_id, secret_name))

    async def _save(self, session: InMemoryTables, form_id: str, secret_name: str, secret_value: str) -> None:
        session.secrets[(form_id, secret_name)] = secret_value
