#!/usr/bin/env python3
"""
OpenAlex API client for scholarly paper and journal lookup.

OpenAlex is a free, open catalog of the global research system,
providing 200M+ scholarly works with comprehensive metadata.

API Documentation: https://docs.openalex.org/
No authentication required, but include email for polite pool.
"""

import requests
from typing import Optional, Dict, List

from .base_client import BaseAPIClient, first_item, as_count
from ..models.reference import MetadataRecord, MetadataSource
from ..utils.abstract_cleaner import clean_abstract


MAX_ABSTRACT_LENGTH = 1000


class OpenAlexClient(BaseAPIClient):
    """Client for OpenAlex API."""

    name = 'OpenAlex'
    BASE_URL = "https://api.openalex.org"

    def __init__(self, base_url: Optional[str] = None, email: Optional[str] = None,
                 timeout: int = 10, session: Optional[requests.Session] = None):
        """Initialize OpenAlex client.

        Args:
            base_url: API root (defaults to the public OpenAlex API)
            email: Your email for polite pool (gets better rate limits)
            timeout: Request timeout in seconds
            session: Preconfigured requests session (optional)
        """
        super().__init__(base_url or self.BASE_URL, email=email, timeout=timeout, session=session)

    def _params(self, **params) -> Dict:
        if self.email:
            params['mailto'] = self.email
        return params

    def search_by_title(self, title: str) -> Optional[MetadataRecord]:
        """Return OpenAlex's top work for a title search.

        Args:
            title: Paper title

        Returns:
            MetadataRecord or None if nothing was found
        """
        self.logger.info(f"Searching OpenAlex for: {title}")
        data = self._get_json('works', params=self._params(**{'search': title, 'per-page': 1}))
        if not data:
            return None

        item = first_item(data.get('results'))
        if not item:
            return None

        return self._parse_openalex_work(item)

    def search_sources(self, name: str) -> Optional[Dict]:
        """Return the top matching journal/venue ("source") for a name.

        Args:
            name: Journal name

        Returns:
            Raw source object (with ``summary_stats`` and ``works_count``) or None
        """
        self.logger.info(f"Searching OpenAlex sources for: {name}")
        data = self._get_json('sources', params=self._params(**{'search': name, 'per-page': 1}))
        if not data:
            return None
        return first_item(data.get('results'))

    def _parse_openalex_work(self, data: Dict) -> MetadataRecord:
        """Map one OpenAlex work into a MetadataRecord.

        Args:
            data: Work object from the ``results`` list

        Returns:
            Normalized record
        """
        authors = []
        for authorship in data.get('authorships') or []:
            display_name = ((authorship or {}).get('author') or {}).get('display_name')
            if display_name:
                authors.append(display_name)

        primary_location = data.get('primary_location') or {}
        source = primary_location.get('source') or {}
        biblio = data.get('biblio') or {}

        first_page = biblio.get('first_page')
        last_page = biblio.get('last_page')
        if first_page and last_page:
            pages = f"{first_page}-{last_page}"
        else:
            pages = first_page or ''

        abstract = ''
        if data.get('abstract_inverted_index'):
            abstract = clean_abstract(reconstruct_abstract(data['abstract_inverted_index']))

        doi_url = data.get('doi') or ''

        return MetadataRecord(
            source=MetadataSource.OPENALEX,
            title=(data.get('title') or '').strip(),
            authors=authors,
            year=data.get('publication_year') or None,
            journal=source.get('display_name') or '',
            abstract=abstract,
            doi=doi_url.replace('https://doi.org/', ''),
            type=data.get('type') or 'article',
            volume=biblio.get('volume') or '',
            issue=biblio.get('issue') or '',
            pages=pages,
            publisher=source.get('host_organization_name') or '',
            url=doi_url or primary_location.get('landing_page_url') or '',
            issn=source.get('issn_l') or '',
            language=data.get('language') or '',
            reference_count=as_count(data.get('referenced_works_count')),
            citation_count=as_count(data.get('cited_by_count')),
        )


def reconstruct_abstract(inverted_index: Dict[str, List[int]]) -> str:
    """Rebuild abstract text from an OpenAlex word -> positions index.

    Positions that no word occupies are skipped rather than filled.

    Args:
        inverted_index: Mapping of word to the token positions it occurs at

    Returns:
        Abstract text, truncated to 1000 characters
    """
    if not inverted_index:
        return ''

    positions = [pos for word_positions in inverted_index.values() for pos in word_positions or []
                 if isinstance(pos, int) and pos >= 0]
    if not positions:
        return ''

    words: List[Optional[str]] = [None] * (max(positions) + 1)
    for word, word_positions in inverted_index.items():
        for pos in word_positions or []:
            if isinstance(pos, int) and pos >= 0:
                words[pos] = word

    return ' '.join(word for word in words if word)[:MAX_ABSTRACT_LENGTH]
