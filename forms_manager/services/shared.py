"""
Helpers shared by the service modules.

``run_in_transaction`` is the one transaction template every mutating
operation goes through.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, TypeVar

from forms_manager.domain.definition.constants import FormStatus
from forms_manager.domain.errors import InternalError
from forms_manager.services.context import FormsContext

logger = logging.getLogger(__name__)

T = TypeVar("T")

Author = Dict[str, str]

DEFAULT_AUTHOR = {"displayName": "Unknown", "id": "-1"}

# Date the service went live; stands in for audit fields older documents lack
DEFAULT_DATE = "2024-06-25T23:00:00+00:00"

_REQUIRED_FIELDS = ("slug", "title", "organisation", "teamName", "teamEmail")

_OPTIONAL_FIELDS = (
    "contact",
    "submissionGuidance",
    "privacyNoticeType",
    "privacyNoticeText",
    "privacyNoticeUrl",
    "termsAndConditionsAgreed",
    "notificationEmail",
    "draft",
    "live",
    "lastVersionNumber",
    "versions",
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_last_updated(document: Dict[str, Any]) -> Dict[str, Any]:
    if document.get("updatedAt") and document.get("updatedBy"):
        return {"updatedAt": document["updatedAt"], "updatedBy": document["updatedBy"]}
    # draft is newer than live
    for state in ("draft", "live"):
        if document.get(state):
            return {"updatedAt": document[state]["updatedAt"], "updatedBy": document[state]["updatedBy"]}
    return {"updatedAt": DEFAULT_DATE, "updatedBy": dict(DEFAULT_AUTHOR)}


def get_created(document: Dict[str, Any]) -> Dict[str, Any]:
    if document.get("createdAt") and document.get("createdBy"):
        return {"createdAt": document["createdAt"], "createdBy": document["createdBy"]}
    # live is older than draft
    for state in ("live", "draft"):
        if document.get(state):
            return {"createdAt": document[state]["createdAt"], "createdBy": document[state]["createdBy"]}
    return {"createdAt": DEFAULT_DATE, "createdBy": dict(DEFAULT_AUTHOR)}


def map_form(document: Dict[str, Any]) -> Dict[str, Any]:
    """Metadata document -> API form metadata, filling in missing audit fields."""
    if any(not document.get(name) for name in _REQUIRED_FIELDS):
        raise InternalError("Form is malformed in the database. Expected fields are missing.")

    form = {"id": str(document["id"])}
    form.update({name: document[name] for name in _REQUIRED_FIELDS})
    form.update({name: document[name] for name in _OPTIONAL_FIELDS if document.get(name) is not None})
    form.update(get_created(document))
    form.update(get_last_updated(document))
    return form


def snapshot_state(document: Dict[str, Any]) -> FormStatus:
    """State whose definition a version entry snapshots."""
    return FormStatus.DRAFT if document.get("draft") else FormStatus.LIVE


async def run_in_transaction(
    ctx: FormsContext,
    operation: str,
    form_id: str,
    handler: Callable[[Any], Awaitable[T]],
) -> T:
    """
    Run ``handler(session)`` in one transaction.

    The transaction commits when the handler returns and rolls back when it
    raises; the error is logged with the operation tag and re-raised unchanged.
    """
    try:
        async with ctx.database.transaction() as session:
            return await handler(session)
    except Exception as error:
        logger.error(f"[{operation}] Failed for form ID {form_id} - {error}")
        raise
