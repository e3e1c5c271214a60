#!/usr/bin/env python3
"""
Semantic Scholar Graph API client for title lookup and keyword search.

API Documentation: https://api.semanticscholar.org/api-docs/graph
Used anonymously; no API key.
"""

import requests
from typing import Optional, Dict

from .base_client import BaseAPIClient, first_item, as_count
from ..models.reference import MetadataRecord, MetadataSource, SearchPage
from ..utils.abstract_cleaner import clean_abstract
from ..utils.identifier_validator import IdentifierValidator


class SemanticScholarClient(BaseAPIClient):
    """Client for the Semantic Scholar Graph API."""

    name = 'Semantic Scholar'
    BASE_URL = "https://api.semanticscholar.org/graph/v1"
    SEARCH_FIELDS = ','.join([
        'title', 'authors', 'year', 'venue', 'abstract', 'externalIds',
        'publicationTypes', 'publicationVenue', 'citationCount',
        'referenceCount', 'url',
    ])

    def __init__(self, base_url: Optional[str] = None, timeout: int = 10,
                 session: Optional[requests.Session] = None):
        super().__init__(base_url or self.BASE_URL, timeout=timeout, session=session)

    def search_by_title(self, title: str) -> Optional[MetadataRecord]:
        """Return Semantic Scholar's top paper for a title query."""
        self.logger.info(f"Searching Semantic Scholar for: {title}")
        params = {'query': title, 'limit': 1, 'fields': self.SEARCH_FIELDS}
        data = self._get_json('paper/search', params=params)
        if not data:
            return None

        item = first_item(data.get('data'))
        if not item:
            return None

        return self._parse_paper(item)

    def search_papers(self, query: str, offset: int = 0, limit: int = 20,
                      year: Optional[str] = None) -> Optional[SearchPage]:
        """Keyword search returning one page of results.

        Args:
            query: Free-text query
            offset: Index of the first result to return
            limit: Page size
            year: Semantic Scholar year filter, e.g. "2021" or "2019-2024"

        Returns:
            SearchPage (possibly with no records), or None if the request failed
        """
        self.logger.info(f"Searching Semantic Scholar papers for: {query} (offset {offset})")
        params = {'query': query, 'offset': offset, 'limit': limit, 'fields': self.SEARCH_FIELDS}
        if year:
            params['year'] = year
        data = self._get_json('paper/search', params=params)
        if data is None:
            return None

        items = data.get('data') or []
        records = [self._parse_paper(item) for item in items if isinstance(item, dict)]
        return SearchPage(query=query, records=records, total=as_count(data.get('total')),
                          offset=offset, limit=limit, year=year)

    def _parse_paper(self, item: Dict) -> MetadataRecord:
        # This source has no volume/issue/pages
        venue = item.get('publicationVenue') or {}
        doi = (item.get('externalIds') or {}).get('DOI') or ''
        issn = venue.get('issn') or ''
        if isinstance(issn, list):
            issn = first_item(issn) or ''

        return MetadataRecord(
            source=MetadataSource.SEMANTIC_SCHOLAR,
            title=item.get('title') or '',
            authors=[a.get('name') for a in item.get('authors') or [] if a and a.get('name')],
            year=item.get('year') or None,
            journal=venue.get('name') or item.get('venue') or '',
            abstract=clean_abstract(item.get('abstract')),
            doi=doi,
            type=first_item(item.get('publicationTypes')) or 'article',
            volume='',
            issue='',
            pages='',
            publisher=venue.get('publisher') or '',
            url=item.get('url') or IdentifierValidator.format_doi_url(doi),
            issn=issn,
            language='',
            reference_count=as_count(item.get('referenceCount')),
            citation_count=as_count(item.get('citationCount')),
        )
