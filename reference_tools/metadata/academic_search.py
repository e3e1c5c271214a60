#!/usr/bin/env python3
"""
Search academic databases for paper metadata by title.

Sources are tried one at a time in priority order and the first hit is
returned as-is; results are never merged across sources. CrossRef comes
first because it carries the most complete bibliographic data (DOI, volume,
issue, pages).
"""

import logging
from typing import Optional, List

from ..api.base_client import BaseAPIClient
from ..api.crossref_client import CrossRefClient
from ..api.openalex_client import OpenAlexClient
from ..api.semantic_scholar_client import SemanticScholarClient
from ..models.reference import MetadataRecord, PublicationType


MIN_TITLE_LENGTH = 10

PUBLICATION_TYPE_MAP = {
    'journal-article': PublicationType.JOURNAL_ARTICLE,
    'article': PublicationType.JOURNAL_ARTICLE,
    'journalarticle': PublicationType.JOURNAL_ARTICLE,
    'proceedings-article': PublicationType.CONFERENCE_PAPER,
    'conference': PublicationType.CONFERENCE_PAPER,
    'conferencepaper': PublicationType.CONFERENCE_PAPER,
    'book-chapter': PublicationType.BOOK_CHAPTER,
    'dissertation': PublicationType.THESIS,
    'report': PublicationType.TECHNICAL_REPORT,
    'posted-content': PublicationType.PREPRINT,
    'preprint': PublicationType.PREPRINT,
}


def map_publication_type(raw_type: Optional[str]) -> str:
    """Map a source-specific type string to a reference type.

    Args:
        raw_type: Type as reported by CrossRef, OpenAlex or Semantic Scholar

    Returns:
        Display name of the reference type; "Journal Article" if unknown
    """
    if not raw_type:
        return PublicationType.JOURNAL_ARTICLE.value
    mapped = PUBLICATION_TYPE_MAP.get(raw_type.strip().lower(), PublicationType.JOURNAL_ARTICLE)
    return mapped.value


class AcademicSearch:
    """Ordered fallback over title-lookup sources."""

    def __init__(self, sources: Optional[List[BaseAPIClient]] = None):
        """
        Args:
            sources: Lookup clients in priority order. Defaults to CrossRef,
                OpenAlex, then Semantic Scholar.
        """
        self.logger = logging.getLogger(__name__)
        if sources is None:
            sources = [CrossRefClient(), OpenAlexClient(), SemanticScholarClient()]
        self.sources = list(sources)

    def search_academic_databases(self, title: Optional[str]) -> Optional[MetadataRecord]:
        """Return the first source's hit for a title.

        Args:
            title: Paper title; fewer than 10 characters is not searched

        Returns:
            MetadataRecord from the first source that found the paper, or None
        """
        if not title or len(title.strip()) < MIN_TITLE_LENGTH:
            self.logger.warning(f"Title too short for academic search: {title!r}")
            return None

        title = title.strip()
        self.logger.info(f"Starting academic database search for: {title}")

        for source in self.sources:
            source_name = getattr(source, 'name', source.__class__.__name__)
            try:
                result = source.search_by_title(title)
            except Exception as e:
                self.logger.error(f"{source_name} lookup raised unexpectedly: {e}")
                result = None

            if result is not None:
                self.logger.info(f"Found result from {source_name}")
                return result

        self.logger.info("No results found in any academic database")
        return None
