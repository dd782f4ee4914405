"""Tests for the form listing query engine.

Tier-1 tests: filtering, sorting, pagination and facets over
plain metadata documents.
"""

import pytest

from forms_manager.domain.definition.constants import FormStatus
from forms_manager.domain.repositories.aggregation_pure import (
    QueryOptions,
    QueryResult,
    build_filter_options,
    filter_options,
    page_offset,
    paginate,
    run_query,
    sort_documents,
    updated_date_only,
)


def _doc(title, updated_at="2024-07-01T10:00:00+00:00", org="Defra", author="Enrique Chase", live=False):
    document = {
        "id": title.lower().replace(" ", "-"),
        "title": title,
        "organisation": org,
        "updatedAt": updated_at,
        "createdBy": {"id": "1", "displayName": author},
        "updatedBy": {"id": "1", "displayName": author},
    }
    if live:
        document["live"] = {"createdAt": updated_at}
    return document


DOCUMENTS = [
    _doc("Apply for a licence", "2024-07-03T09:00:00+00:00"),
    _doc("Register a boat", "2024-07-01T09:00:00+00:00", org="Environment Agency", live=True),
    _doc("Licence renewal", "2024-07-02T09:00:00+00:00", author="Jane Doe"),
    _doc("Licence", "2024-06-30T09:00:00+00:00", org="Natural England"),
]


def _titles(documents):
    return [d["title"] for d in documents]


class TestSorting:

    def test_default_is_newest_first(self):
        ordered = sort_documents(DOCUMENTS, QueryOptions())
        assert _titles(ordered) == ["Apply for a licence", "Licence renewal", "Register a boat", "Licence"]

    def test_title_ascending_ignores_case(self):
        documents = [_doc("beta"), _doc("Alpha"), _doc("gamma")]
        ordered = sort_documents(documents, QueryOptions(sort_by="title", order="asc"))
        assert _titles(ordered) == ["Alpha", "beta", "gamma"]

    def test_title_search_keeps_requested_order(self):
        documents = [_doc("Zoo licence"), _doc("licence"), _doc("Apply for a licenceX")]
        ordered = sort_documents(documents, QueryOptions(sort_by="title", order="asc", title="licence"))
        assert _titles(ordered) == ["Apply for a licenceX", "licence", "Zoo licence"]

    def test_title_search_default_is_newest_first(self):
        result = run_query(DOCUMENTS, QueryOptions(title="licence"))
        assert _titles(result.documents) == ["Apply for a licence", "Licence renewal", "Licence"]

    def test_updated_date_only_strips_time(self):
        assert updated_date_only({"updatedAt": "2024-07-03T23:30:00Z"}) == "2024-07-03"


class TestFiltering:

    def test_title_filter_is_case_insensitive(self):
        result = run_query(DOCUMENTS, QueryOptions(title="LICENCE"))
        assert result.total_items == 3

    def test_author_filter(self):
        result = run_query(DOCUMENTS, QueryOptions(author="jane"))
        assert _titles(result.documents) == ["Licence renewal"]

    def test_organisation_filter(self):
        result = run_query(DOCUMENTS, QueryOptions(organisations=["Natural England", "Environment Agency"]))
        assert result.total_items == 2

    def test_status_filter(self):
        result = run_query(DOCUMENTS, QueryOptions(status=[FormStatus.LIVE]))
        assert _titles(result.documents) == ["Register a boat"]


class TestPagination:

    def test_paginate_slices(self):
        assert paginate(list(range(25)), page=3, per_page=10) == [20, 21, 22, 23, 24]

    @pytest.mark.parametrize("page,expected", [(0, 0), (1, 0), (3, 20)])
    def test_page_offset_clamps_to_first_page(self, page, expected):
        assert page_offset(page, 10) == expected

    def test_total_pages(self):
        result = run_query(DOCUMENTS, QueryOptions(page=2, per_page=3))
        assert len(result.documents) == 1
        assert result.total_pages(3) == 2

    def test_total_pages_with_no_items(self):
        assert QueryResult(documents=[], total_items=0, filters={}).total_pages(10) == 0


class TestFacets:

    def test_facets_cover_all_documents(self):
        result = run_query(DOCUMENTS, QueryOptions(title="boat"))
        assert result.filters["organisations"] == ["Defra", "Environment Agency", "Natural England"]
        assert result.filters["statuses"] == ["draft", "live"]

    def test_placeholder_authors_dropped(self):
        documents = [_doc("A"), _doc("B", author="undefined undefined")]
        assert build_filter_options(documents)["authors"] == ["Enrique Chase"]

    def test_filter_options_dedupes_and_drops_empty_values(self):
        options = filter_options(
            ["jane doe", None, "Enrique Chase", "jane doe"],
            ["Defra", "", "Defra"],
            ["draft", "draft"],
        )
        assert options == {"authors": ["Enrique Chase", "jane doe"], "organisations": ["Defra"], "statuses": ["draft"]}
