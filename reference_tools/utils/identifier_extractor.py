#!/usr/bin/env python3
"""
Fast regex-based DOI extraction from PDF text.
"""

import re
from typing import Optional


class IdentifierExtractor:
    """Regex-based identifier extraction."""

    # Tried in this order; the first pattern that matches anywhere wins
    DOI_PATTERNS = [
        # With doi: prefix (standard)
        re.compile(r'doi:\s*(10\.\d{4,}/[^\s]+)', re.IGNORECASE),
        # With https://doi.org/ prefix
        re.compile(r'https?://doi\.org/(10\.\d{4,}/[^\s]+)', re.IGNORECASE),
        # With DOI: prefix
        re.compile(r'DOI:\s*(10\.\d{4,}/[^\s]+)', re.IGNORECASE),
        # Raw DOI (no prefix)
        re.compile(r'\b(10\.\d{4,}/[^\s]+)\b'),
    ]

    TRAILING_PUNCTUATION = '.,;:!?'

    @classmethod
    def extract_doi(cls, text: Optional[str]) -> Optional[str]:
        """Extract the most reliable DOI from text.

        Args:
            text: Text to search for a DOI

        Returns:
            DOI without prefix or trailing punctuation, or None
        """
        if not text:
            return None

        for pattern in cls.DOI_PATTERNS:
            match = pattern.search(text)
            if match and match.group(1):
                doi = match.group(1).strip().rstrip(cls.TRAILING_PUNCTUATION)
                if doi:
                    return doi

        return None


def extract_doi(text: Optional[str]) -> Optional[str]:
    """Module-level shortcut for IdentifierExtractor.extract_doi."""
    return IdentifierExtractor.extract_doi(text)
