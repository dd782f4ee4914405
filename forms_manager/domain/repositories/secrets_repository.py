"""Encrypted form secrets, keyed by form id and secret name."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from forms_manager.domain.errors import ApplicationError, NotFoundError, wrap_error

logger = logging.getLogger(__name__)


class SecretsRepository(ABC):
    """Shared secrets logic; storage primitives are implemented per backend."""

    @abstractmethod
    async def _find(self, session: Any, form_id: str, secret_name: str) -> Optional[str]:
        ...

    @abstractmethod
    async def _save(self, session: Any, form_id: str, secret_name: str, secret_value: str) -> None:
        """Insert or overwrite."""
        ...

    def _failure(self, operation: str, form_id: str, secret_name: str, error: Exception) -> ApplicationError:
        logger.error(f"[{operation}] Form secret '{secret_name}' with form ID {form_id} failed - {error}")
        return wrap_error(error)

    async def get(self, form_id: str, secret_name: str, session: Any) -> str:
        """The stored (still encrypted) value."""
        try:
            value = await self._find(session, form_id, secret_name)
            if value is None:
                raise NotFoundError(f"Form secret '{secret_name}' on form ID '{form_id}' not found")
            return value
        except Exception as error:
            raise self._failure("getSecret", form_id, secret_name, error)

    async def exists(self, form_id: str, secret_name: str, session: Any) -> bool:
        try:
            return await self._find(session, form_id, secret_name) is not None
        except Exception as error:
            raise self._failure("existsSecret", form_id, secret_name, error)

    async def save(self, form_id: str, secret_name: str, secret_value: str, session: Any) -> None:
        logger.info(f"Saving secret '{secret_name}' for form ID {form_id}")
        try:
            await self._save(session, form_id, secret_name, secret_value)
        except Exception as error:
            raise self._failure("saveSecret", form_id, secret_name, error)
