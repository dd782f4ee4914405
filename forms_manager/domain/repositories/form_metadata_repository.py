"""
Form metadata repository.

Key design rules:
- Repository does NOT commit (caller owns transaction)
- Documents are plain dicts in the API shape (camelCase keys, ISO dates)
- Audit changes are expressed as transitions, each producing one patch
- ``update`` requires exactly one affected row and returns the post-image
"""

import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from forms_manager.domain.definition.constants import STATE_FIELDS, FormStatus
from forms_manager.domain.errors import (
    ApplicationError,
    ConflictError,
    NotFoundError,
    wrap_error,
)
from forms_manager.domain.repositories.aggregation_pure import QueryOptions, QueryResult

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
Author = Dict[str, str]


def to_iso(date: datetime) -> str:
    return date.isoformat()


# =============================================================================
# TRANSITIONS
# =============================================================================

@dataclass(frozen=True)
class PatchTransition:
    """Set top-level fields and stamp the audit fields of ``state``."""
    author: Author
    date: datetime
    fields: Dict[str, Any] = field(default_factory=dict)
    state: FormStatus = FormStatus.DRAFT


@dataclass(frozen=True)
class PromoteTransition:
    """Draft made live: create or stamp the live audit block, clear the draft."""
    author: Author
    date: datetime


@dataclass(frozen=True)
class DemoteTransition:
    """Draft recreated from live: create a fresh draft audit block."""
    author: Author
    date: datetime


@dataclass(frozen=True)
class DiscardDraftTransition:
    """Draft deleted, live kept."""
    author: Author
    date: datetime


MetadataTransition = Union[PatchTransition, PromoteTransition, DemoteTransition, DiscardDraftTransition]


def _audit_block(author: Author, date: datetime) -> Dict[str, Any]:
    stamp = to_iso(date)
    return {"createdAt": stamp, "createdBy": author, "updatedAt": stamp, "updatedBy": author}


def apply_transition(document: Document, transition: MetadataTransition) -> Document:
    """Return the post-image of ``document`` after ``transition``. Pure."""
    updated = copy.deepcopy(document)
    stamp = to_iso(transition.date)

    if isinstance(transition, PatchTransition):
        updated.update(copy.deepcopy(transition.fields))
        block = updated.get(STATE_FIELDS[transition.state])
        if block:
            block["updatedAt"] = stamp
            block["updatedBy"] = transition.author
    elif isinstance(transition, PromoteTransition):
        if updated.get("live"):
            updated["live"]["updatedAt"] = stamp
            updated["live"]["updatedBy"] = transition.author
        else:
            updated["live"] = _audit_block(transition.author, transition.date)
        updated.pop("draft", None)
    elif isinstance(transition, DemoteTransition):
        updated["draft"] = _audit_block(transition.author, transition.date)
    elif isinstance(transition, DiscardDraftTransition):
        updated.pop("draft", None)
    else:
        raise TypeError(f"Unknown metadata transition {transition!r}")

    updated["updatedAt"] = stamp
    updated["updatedBy"] = transition.author
    return updated


# =============================================================================
# REPOSITORY
# =============================================================================

class FormMetadataRepository(ABC):
    """Shared metadata logic; storage primitives are implemented per backend."""

    # =========================================================================
    # STORAGE PRIMITIVES
    # =========================================================================

    @abstractmethod
    async def _find(self, session: Any, form_id: str, lock: bool = False) -> Optional[Document]:
        ...

    @abstractmethod
    async def _find_by_slug(self, session: Any, slug: str) -> Optional[Document]:
        ...

    @abstractmethod
    async def _query(self, session: Any, options: QueryOptions) -> QueryResult:
        """One filtered, sorted page plus the total count and facets."""
        ...

    @abstractmethod
    async def _insert(self, session: Any, document: Document) -> None:
        """Store a new document. Raises FormAlreadyExistsError on a slug collision."""
        ...

    @abstractmethod
    async def _replace(self, session: Any, form_id: str, document: Document) -> int:
        """Overwrite a document. Raises FormAlreadyExistsError on a slug collision."""
        ...

    @abstractmethod
    async def _delete(self, session: Any, form_id: str) -> int:
        ...

    @abstractmethod
    async def _increment_version(self, session: Any, form_id: str) -> Optional[int]:
        """Atomically bump and return ``lastVersionNumber``; None if absent."""
        ...

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _failure(self, operation: str, subject: str, error: Exception) -> ApplicationError:
        logger.error(f"[{operation}] Failed for form {subject} - {error}")
        return wrap_error(error)

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    async def list(self, options: QueryOptions, session: Any) -> QueryResult:
        try:
            return await self._query(session, options)
        except Exception as error:
            raise self._failure("listForms", "listing", error)

    async def get(self, form_id: str, session: Any) -> Document:
        logger.info(f"Getting form with ID {form_id}")
        try:
            document = await self._find(session, form_id)
            if document is None:
                raise NotFoundError(f"Form with ID '{form_id}' not found")
            return document
        except Exception as error:
            raise self._failure("getForm", form_id, error)

    async def get_by_slug(self, slug: str, session: Any) -> Document:
        logger.info(f"Getting form with slug {slug}")
        try:
            document = await self._find_by_slug(session, slug)
            if document is None:
                raise NotFoundError(f"Form with slug '{slug}' not found")
            return document
        except Exception as error:
            raise self._failure("getFormBySlug", slug, error)

    async def create(self, document: Document, session: Any) -> Document:
        logger.info(f"Creating form with slug {document['slug']}")
        try:
            await self._insert(session, document)
            logger.info(f"Form with slug {document['slug']} created as form ID {document['id']}")
            return document
        except Exception as error:
            raise self._failure("createForm", document["slug"], error)

    async def update(self, form_id: str, transition: MetadataTransition, session: Any) -> Document:
        """Apply ``transition`` to one document and return the post-image."""
        logger.info(f"Updating form with ID {form_id}")
        try:
            document = await self._find(session, form_id, lock=True)
            if document is None:
                raise NotFoundError(f"Form with ID '{form_id}' not found")

            count = await self._replace(session, form_id, apply_transition(document, transition))
            if count != 1:
                raise ConflictError(f"Form with ID {form_id} not updated. Modified count {count}")

            return await self.get(form_id, session)
        except Exception as error:
            raise self._failure("updateForm", form_id, error)

    async def update_audit(
        self,
        form_id: str,
        author: Author,
        session: Any,
        date: Optional[datetime] = None,
        state: FormStatus = FormStatus.DRAFT,
    ) -> Document:
        """Stamp ``updatedAt/By`` (and the state's own audit block)."""
        return await self.update(
            form_id,
            PatchTransition(author=author, date=date or datetime.now(timezone.utc), state=state),
            session,
        )

    async def remove(self, form_id: str, session: Any) -> None:
        logger.info(f"Removing form metadata with ID {form_id}")
        try:
            count = await self._delete(session, form_id)
            if count != 1:
                raise ConflictError(f"Form with ID {form_id} not removed. Deleted count {count}")
        except Exception as error:
            raise self._failure("removeForm", form_id, error)

    async def get_and_increment_version_number(self, form_id: str, session: Any) -> int:
        try:
            version_number = await self._increment_version(session, form_id)
            if version_number is None:
                raise NotFoundError(f"Form with ID '{form_id}' not found")
            return version_number
        except Exception as error:
            raise self._failure("getAndIncrementVersionNumber", form_id, error)

    async def add_version_summary(self, form_id: str, summary: Dict[str, Any], session: Any) -> None:
        """Append ``{versionNumber, createdAt}`` to the denormalised list."""
        try:
            document = await self._find(session, form_id, lock=True)
            if document is None:
                raise NotFoundError(f"Form with ID '{form_id}' not found")
            document.setdefault("versions", []).append(summary)
            if await self._replace(session, form_id, document) != 1:
                raise ConflictError(f"Form with ID {form_id} not updated")
        except Exception as error:
            raise self._failure("addVersionSummary", form_id, error)
