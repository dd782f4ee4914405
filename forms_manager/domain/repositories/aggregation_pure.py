"""
Form metadata listing: filtering, sorting, pagination and facets.

The in-memory repository runs its listings through ``run_query``; the
PostgreSQL repository pushes the same rules into SQL and shares only
``filter_options``. Ordering comparisons ignore case and diacritics.

All functions are pure (no DB, no I/O, no logging) to enable Tier-1 testing.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from forms_manager.domain.definition.constants import FormStatus
from forms_manager.domain.strings import casefold_key

Document = Dict[str, Any]

# Author names produced for accounts registered without a given/family name
_PLACEHOLDER_AUTHOR = "undefined undefined"


@dataclass
class QueryOptions:
    """Pagination, sorting and filtering for a form listing."""
    page: int = 1
    per_page: int = 10
    sort_by: Optional[str] = None  # title or updatedAt
    order: Optional[str] = None  # asc or desc
    title: Optional[str] = None
    author: Optional[str] = None
    organisations: List[str] = field(default_factory=list)
    status: List[FormStatus] = field(default_factory=list)


@dataclass
class QueryResult:
    documents: List[Document]
    total_items: int
    filters: Dict[str, List[str]]

    def total_pages(self, per_page: int) -> int:
        return math.ceil(self.total_items / per_page) if per_page else 0


# =============================================================================
# FILTERING
# =============================================================================

def document_status(document: Document) -> FormStatus:
    return FormStatus.LIVE if document.get("live") else FormStatus.DRAFT


def matches_filters(document: Document, options: QueryOptions) -> bool:
    if options.title and options.title.lower() not in (document.get("title") or "").lower():
        return False

    if options.author:
        author_name = ((document.get("createdBy") or {}).get("displayName") or "").lower()
        if options.author.lower() not in author_name:
            return False

    if options.organisations and document.get("organisation") not in options.organisations:
        return False

    if options.status and document_status(document) not in options.status:
        return False

    return True


def updated_date_only(document: Document) -> str:
    """``updatedAt`` as a UTC ``YYYY-MM-DD`` string."""
    value = document.get("updatedAt")
    if not value:
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%d")


# =============================================================================
# SORTING
# =============================================================================

def _updated_by_name(document: Document) -> str:
    return casefold_key((document.get("updatedBy") or {}).get("displayName") or "")


def sort_documents(documents: List[Document], options: QueryOptions) -> List[Document]:
    """
    Sort by the requested field with stable tiebreakers.

    Keys are applied least significant first; Python's sort is stable so
    each pass preserves the order established by the previous one.
    """
    descending = options.order != "asc"
    ordered = sorted(documents, key=_updated_by_name)

    if options.sort_by == "title":
        ordered.sort(key=updated_date_only, reverse=True)
        ordered.sort(key=lambda d: casefold_key(d.get("title") or ""), reverse=descending)
    elif options.sort_by == "updatedAt":
        ordered.sort(key=updated_date_only, reverse=descending)
    else:
        ordered.sort(key=updated_date_only, reverse=True)

    return ordered


# =============================================================================
# FACETS
# =============================================================================

def process_author_names(names: List[Optional[str]]) -> List[str]:
    return [name for name in names if name and name != _PLACEHOLDER_AUTHOR]


def filter_options(
    authors: Iterable[Optional[str]],
    organisations: Iterable[Optional[str]],
    statuses: Iterable[str],
) -> Dict[str, List[str]]:
    """Facet lists from raw (possibly repeated or empty) column values."""
    return {
        "authors": process_author_names(sorted(set(filter(None, authors)), key=casefold_key)),
        "organisations": sorted(set(filter(None, organisations)), key=casefold_key),
        "statuses": sorted(set(statuses)),
    }


def build_filter_options(documents: List[Document]) -> Dict[str, List[str]]:
    """Distinct authors, organisations and statuses across all documents."""
    return filter_options(
        [(d.get("createdBy") or {}).get("displayName") for d in documents],
        [d.get("organisation") for d in documents],
        [document_status(d).value for d in documents],
    )


# =============================================================================
# QUERY
# =============================================================================

def page_offset(page: int, per_page: int) -> int:
    return (max(page, 1) - 1) * per_page


def paginate(documents: List[Document], page: int, per_page: int) -> List[Document]:
    skip = page_offset(page, per_page)
    return documents[skip:skip + per_page]


def run_query(documents: List[Document], options: QueryOptions) -> QueryResult:
    filtered = [d for d in documents if matches_filters(d, options)]
    ordered = sort_documents(filtered, options)
    return QueryResult(
        documents=paginate(ordered, options.page, options.per_page),
        total_items=len(filtered),
        filters=build_filter_options(documents),
    )
