#!/usr/bin/env python3
"""
Keyword search over Semantic Scholar with optional AI query expansion and
journal ranking of each result's venue.
"""

import logging
from datetime import datetime
from typing import Optional

from .journal_ranking import JournalRankingResolver
from ..ai.summarizer import PaperSummarizer
from ..api.semantic_scholar_client import SemanticScholarClient
from ..models.reference import SearchPage


PAGE_SIZE = 20

# Named year filters; anything else is passed through ("2021", "2015-2020")
YEAR_WINDOWS = {
    'recent': 2,
    '5years': 5,
}


def year_filter(selection: Optional[str], current_year: Optional[int] = None) -> Optional[str]:
    """Translate a year selection into a Semantic Scholar ``year`` parameter.

    Args:
        selection: 'all', 'recent' (last 2 years), '5years', a year or a range
        current_year: Year the windows end at (defaults to this year)

    Returns:
        Filter string such as "2022-2024", or None for no filter
    """
    if not selection or selection == 'all':
        return None
    if selection in YEAR_WINDOWS:
        year = current_year or datetime.now().year
        return f"{year - YEAR_WINDOWS[selection]}-{year}"
    return selection


class ScholarSearch:
    """Paginated paper search with ranked venues."""

    def __init__(self, client: Optional[SemanticScholarClient] = None,
                 ranking_resolver: Optional[JournalRankingResolver] = None,
                 summarizer: Optional[PaperSummarizer] = None,
                 page_size: int = PAGE_SIZE):
        """
        Args:
            client: Semantic Scholar client
            ranking_resolver: Resolver used to tag each result's venue
            summarizer: Chat-completion client for query expansion (optional)
            page_size: Results per page
        """
        self.logger = logging.getLogger(__name__)
        self.client = client or SemanticScholarClient()
        self.ranking_resolver = ranking_resolver or JournalRankingResolver()
        self.summarizer = summarizer
        self.page_size = page_size

    def enhance_query(self, query: str) -> str:
        """Expanded query from the summarizer, or the query unchanged."""
        if self.summarizer is None:
            return query
        try:
            enhanced = self.summarizer.enhance_search_query(query)
        except Exception as e:
            self.logger.warning(f"AI enhancement failed, using original query: {e}")
            return query
        if enhanced and enhanced != query:
            self.logger.info(f"Enhanced query: {enhanced}")
            return enhanced
        return query

    def search(self, query: str, offset: int = 0, year: Optional[str] = None,
               enhance: bool = False) -> Optional[SearchPage]:
        """
        Search papers and tag each result with its venue's ranking.

        Args:
            query: Free-text query
            offset: Index of the first result
            year: Year selection (see year_filter)
            enhance: Expand the query with the summarizer first

        Returns:
            SearchPage whose records carry ``journal_ranking`` tags, or None
            if the search request failed
        """
        query = (query or '').strip()
        if not query:
            return None

        if enhance:
            query = self.enhance_query(query)

        page = self.client.search_papers(query, offset=offset, limit=self.page_size,
                                         year=year_filter(year))
        if page is None:
            return None

        for record in page.records:
            if not record.journal:
                continue
            try:
                record.journal_ranking = self.ranking_resolver.get_journal_ranking_tag(record.journal)
            except Exception as e:
                self.logger.warning(f"Failed to get ranking for {record.journal}: {e}")

        self.logger.info(f"Found {len(page.records)} of {page.total} results for: {query}")
        return page

    def next_page(self, page: SearchPage) -> Optional[SearchPage]:
        """Following page of a previous search, reusing its final query."""
        if not page.has_more:
            return None
        return self.search(page.query, offset=page.next_offset, year=page.year)
