#!/usr/bin/env python3
"""
CrossRef API client for title search and DOI metadata lookup.

CrossRef is the official DOI registration agency and provides
authoritative metadata for scholarly works.

API Documentation: https://github.com/CrossRef/rest-api-doc
No authentication required, but please add email for "polite" pool.
"""

import requests
from requests.utils import quote
from typing import Optional, Dict, List

from .base_client import BaseAPIClient, first_item, as_count
from ..models.reference import MetadataRecord, MetadataSource
from ..utils.abstract_cleaner import clean_abstract
from ..utils.identifier_validator import IdentifierValidator


class CrossRefClient(BaseAPIClient):
    """Client for CrossRef API."""

    name = 'CrossRef'
    BASE_URL = "https://api.crossref.org"

    def __init__(self, base_url: Optional[str] = None, email: Optional[str] = None,
                 timeout: int = 10, session: Optional[requests.Session] = None):
        """Initialize CrossRef client.

        Args:
            base_url: API root (defaults to the public CrossRef API)
            email: Your email for polite pool (gets better rate limits)
            timeout: Request timeout in seconds
            session: Preconfigured requests session (optional)
        """
        super().__init__(base_url or self.BASE_URL, email=email, timeout=timeout, session=session)

    def search_by_title(self, title: str) -> Optional[MetadataRecord]:
        """Return CrossRef's top-ranked work for a title.

        Args:
            title: Paper title

        Returns:
            MetadataRecord or None if nothing was found
        """
        self.logger.info(f"Searching CrossRef for: {title}")
        data = self._get_json('works', params={'query.title': title, 'rows': 1})
        if not data:
            return None

        item = first_item((data.get('message') or {}).get('items'))
        if not item:
            return None

        return self._parse_crossref_item(item)

    def get_metadata(self, doi: str) -> Optional[MetadataRecord]:
        """Get metadata for a DOI from CrossRef.

        Args:
            doi: DOI string (with or without https://doi.org/ prefix)

        Returns:
            MetadataRecord or None if not found
        """
        normalized_doi = IdentifierValidator.normalize_doi(doi)
        if not normalized_doi:
            self.logger.debug(f"Not a DOI, skipping CrossRef lookup: {doi!r}")
            return None

        self.logger.info(f"Looking up DOI: {normalized_doi}")
        data = self._get_json(f"works/{quote(normalized_doi, safe='/')}")
        if not data:
            return None

        item = data.get('message')
        if not isinstance(item, dict) or not item:
            return None

        record = self._parse_crossref_item(item)
        if not record.doi:
            record.doi = normalized_doi
        return record

    def _parse_crossref_item(self, item: Dict) -> MetadataRecord:
        """Map one CrossRef work into a MetadataRecord.

        Args:
            item: A work object (``message`` or one of ``message.items``)

        Returns:
            Normalized record
        """
        doi = item.get('DOI') or ''

        return MetadataRecord(
            source=MetadataSource.CROSSREF,
            title=first_item(item.get('title')) or '',
            authors=self._parse_authors(item.get('author') or []),
            year=self._parse_year(item),
            journal=first_item(item.get('container-title')) or '',
            abstract=clean_abstract(item.get('abstract')),
            doi=doi,
            type=item.get('type') or 'journal-article',
            volume=item.get('volume') or '',
            issue=item.get('issue') or '',
            pages=item.get('page') or '',
            publisher=item.get('publisher') or '',
            url=item.get('URL') or IdentifierValidator.format_doi_url(doi),
            issn=first_item(item.get('ISSN')) or '',
            isbn=first_item(item.get('ISBN')) or '',
            language=item.get('language') or '',
            reference_count=as_count(item.get('references-count')),
            citation_count=as_count(item.get('is-referenced-by-count')),
        )

    @staticmethod
    def _parse_authors(author_list: List[Dict]) -> List[str]:
        """Authors as "Family, Given" in document order."""
        authors = []
        for author in author_list:
            given = (author.get('given') or '').strip()
            family = (author.get('family') or '').strip()
            if family:
                authors.append(f"{family}, {given}".strip().rstrip(','))
            elif given:
                authors.append(given)
        return authors

    @staticmethod
    def _parse_year(item: Dict) -> Optional[int]:
        """Year from ``published``, falling back to print then online dates."""
        for key in ('published', 'published-print', 'published-online'):
            date_parts = (item.get(key) or {}).get('date-parts') or []
            if date_parts and date_parts[0] and date_parts[0][0]:
                try:
                    return int(date_parts[0][0])
                except (TypeError, ValueError):
                    continue
        return None
