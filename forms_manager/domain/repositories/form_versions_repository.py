"""
Form version ledger.

Append-only: versions are inserted, read and bulk-removed with their form,
never updated. A duplicate (formId, versionNumber) is a conflict.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from forms_manager.domain.errors import ApplicationError, NotFoundError, wrap_error

logger = logging.getLogger(__name__)

VersionDocument = Dict[str, Any]


@dataclass
class VersionPage:
    """One page of a form's versions, newest first."""
    versions: List[VersionDocument]
    total_count: int


class FormVersionsRepository(ABC):
    """Shared ledger logic; storage primitives are implemented per backend."""

    # =========================================================================
    # STORAGE PRIMITIVES
    # =========================================================================

    @abstractmethod
    async def _insert(self, session: Any, document: VersionDocument) -> None:
        """Raises ConflictError when the version number is already taken."""
        ...

    @abstractmethod
    async def _find(self, session: Any, form_id: str, version_number: Optional[int]) -> Optional[VersionDocument]:
        """Given version, or the latest when ``version_number`` is None."""
        ...

    @abstractmethod
    async def _page(self, session: Any, form_id: str, limit: int, offset: int) -> Tuple[List[VersionDocument], int]:
        ...

    @abstractmethod
    async def _delete_for_form(self, session: Any, form_id: str) -> int:
        ...

    @abstractmethod
    async def _summaries(self, session: Any, form_ids: List[str]) -> List[Dict[str, Any]]:
        """``{formId, versionNumber, createdAt}`` rows for the given forms."""
        ...

    def _failure(self, operation: str, form_id: str, error: Exception) -> ApplicationError:
        logger.error(f"[{operation}] Failed for form ID {form_id} - {error}")
        return wrap_error(error)

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    async def create_version(self, document: VersionDocument, session: Any) -> VersionDocument:
        form_id = document["formId"]
        logger.info(f"Creating new version {document['versionNumber']} for form ID {form_id}")
        try:
            await self._insert(session, document)
            return document
        except Exception as error:
            raise self._failure("createVersion", form_id, error)

    async def get_latest_version_number(self, form_id: str, session: Any) -> int:
        try:
            latest = await self._find(session, form_id, None)
            return latest["versionNumber"] if latest else 0
        except Exception as error:
            raise self._failure("getLatestVersionNumber", form_id, error)

    async def get_version(self, form_id: str, version_number: int, session: Any) -> VersionDocument:
        try:
            version = await self._find(session, form_id, version_number)
            if version is None:
                raise NotFoundError(f"Version {version_number} for form ID '{form_id}' not found")
            return version
        except Exception as error:
            raise self._failure("getVersion", form_id, error)

    async def get_latest_version(self, form_id: str, session: Any) -> VersionDocument:
        try:
            version = await self._find(session, form_id, None)
            if version is None:
                raise NotFoundError(f"No versions found for form ID '{form_id}'")
            return version
        except Exception as error:
            raise self._failure("getLatestVersion", form_id, error)

    async def get_versions(self, form_id: str, session: Any, limit: int = 10, offset: int = 0) -> VersionPage:
        try:
            versions, total = await self._page(session, form_id, limit, offset)
            return VersionPage(versions=versions, total_count=total)
        except Exception as error:
            raise self._failure("getVersions", form_id, error)

    async def remove_versions_for_form(self, form_id: str, session: Any) -> int:
        try:
            removed = await self._delete_for_form(session, form_id)
            logger.info(f"Removed {removed} versions for form ID {form_id}")
            return removed
        except Exception as error:
            raise self._failure("removeVersionsForForm", form_id, error)

    async def get_version_summaries_batch(
        self, form_ids: List[str], session: Any
    ) -> Dict[str, List[Dict[str, Any]]]:
        """Newest-first summaries keyed by form id; every requested id is present."""
        try:
            batch: Dict[str, List[Dict[str, Any]]] = {form_id: [] for form_id in form_ids}
            if not form_ids:
                return batch
            for row in await self._summaries(session, form_ids):
                batch[row["formId"]].append(
                    {"versionNumber": row["versionNumber"], "createdAt": row["createdAt"]}
                )
            for summaries in batch.values():
                summaries.sort(key=lambda s: s["versionNumber"], reverse=True)
            return batch
        except Exception as error:
            raise self._failure("getVersionSummariesBatch", ",".join(form_ids), error)
