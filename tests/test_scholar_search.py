"""
Tests for keyword search: year filters, query expansion, venue ranking and
pagination.
"""

import pytest

from conftest import FakeResponse, FakeSession
from reference_tools.api.semantic_scholar_client import SemanticScholarClient
from reference_tools.metadata.scholar_search import ScholarSearch, year_filter


class _Ranking:
    def __init__(self, tags=None, error=None):
        self.tags = tags or {}
        self.error = error
        self.journals = []

    def get_journal_ranking_tag(self, journal):
        self.journals.append(journal)
        if self.error:
            raise self.error
        return self.tags.get(journal)


class _Summarizer:
    def __init__(self, answer=None, error=None):
        self.answer = answer
        self.error = error
        self.queries = []

    def enhance_search_query(self, query):
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.answer


def _results(*papers, total=None):
    data = [{'title': title, 'venue': venue, 'year': 2023} for title, venue in papers]
    return FakeResponse(200, {'total': len(data) if total is None else total, 'data': data})


def _search(session, ranking=None, summarizer=None, page_size=20):
    return ScholarSearch(SemanticScholarClient(session=session), ranking_resolver=ranking or _Ranking(),
                         summarizer=summarizer, page_size=page_size)


@pytest.mark.parametrize("selection, expected", [
    (None, None),
    ('all', None),
    ('recent', "2022-2024"),
    ('5years', "2019-2024"),
    ('2015-2020', "2015-2020"),
    ('2021', "2021"),
])
def test_year_filter(selection, expected):
    assert year_filter(selection, current_year=2024) == expected


class TestScholarSearch:

    def test_results_tagged_with_venue_ranking(self):
        """Test each result with a venue gets that venue's ranking tag."""
        session = FakeSession(_results(("Graph paper", "Nature"), ("Workshop paper", ""),
                                       ("Unranked paper", "Obscure Letters")))
        ranking = _Ranking({"Nature": "Q1 Journal"})

        page = _search(session, ranking).search("graph networks", year='2021')

        assert [r.journal_ranking for r in page.records] == ["Q1 Journal", None, None]
        assert ranking.journals == ["Nature", "Obscure Letters"]
        params = session.calls[0]['params']
        assert params['query'] == "graph networks"
        assert params['offset'] == 0
        assert params['limit'] == 20
        assert params['year'] == "2021"

    def test_ranking_error_leaves_result_untagged(self):
        """Test a failing ranking lookup does not drop the results."""
        session = FakeSession(_results(("Graph paper", "Nature")))
        page = _search(session, _Ranking(error=RuntimeError("down"))).search("graph networks")
        assert [r.title for r in page.records] == ["Graph paper"]
        assert page.records[0].journal_ranking is None

    def test_enhanced_query_is_sent(self):
        """Test the expanded query is the one searched and reported."""
        session = FakeSession(_results(("Graph paper", "")))
        summarizer = _Summarizer("graph networks OR GNN OR message passing")

        page = _search(session, summarizer=summarizer).search("graph networks", enhance=True)

        assert summarizer.queries == ["graph networks"]
        assert session.calls[0]['params']['query'] == "graph networks OR GNN OR message passing"
        assert page.query == "graph networks OR GNN OR message passing"

    def test_enhancement_error_keeps_original_query(self):
        """Test a failing query expansion searches the original query."""
        session = FakeSession(_results(("Graph paper", "")))
        summarizer = _Summarizer(error=RuntimeError("model down"))

        page = _search(session, summarizer=summarizer).search("graph networks", enhance=True)

        assert session.calls[0]['params']['query'] == "graph networks"
        assert page.query == "graph networks"

    def test_enhance_without_summarizer(self):
        """Test enhance is a no-op when no summarizer is configured."""
        session = FakeSession(_results(("Graph paper", "")))
        _search(session).search("graph networks", enhance=True)
        assert session.calls[0]['params']['query'] == "graph networks"

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_blank_query_makes_no_request(self, query):
        """Test a blank query returns None without searching."""
        session = FakeSession()
        assert _search(session).search(query) is None
        assert session.calls == []

    def test_failed_request_is_none(self):
        """Test a failed search request returns None."""
        assert _search(FakeSession(FakeResponse(503))).search("graph networks") is None

    def test_next_page_continues_from_offset(self):
        """Test the next page repeats the query and filter at the next offset."""
        session = FakeSession(_results(("First", ""), ("Second", ""), total=3), _results(("Third", ""), total=3))
        search = _search(session, page_size=2)

        first = search.search("graph networks", year='2015-2020')
        second = search.next_page(first)

        assert [r.title for r in second.records] == ["Third"]
        params = session.calls[1]['params']
        assert params['offset'] == 2
        assert params['limit'] == 2
        assert params['year'] == "2015-2020"
        assert params['query'] == "graph networks"

    def test_no_next_page_after_last(self):
        """Test next_page returns None without a request on the last page."""
        session = FakeSession(_results(("Only", "")))
        search = _search(session)
        page = search.search("graph networks")
        assert search.next_page(page) is None
        assert len(session.calls) == 1
