#!/usr/bin/env python3
"""
DOI validation and normalization.
"""

import re
from typing import Optional


class IdentifierValidator:
    """Validates and normalizes DOIs."""

    DOI_PATTERN = re.compile(r'^10\.\d{4,}/\S+$')
    DOI_URL_PREFIX = re.compile(r'^https?://doi\.org/', re.IGNORECASE)
    # Prefixes accepted when normalizing user input
    DOI_PREFIXES = re.compile(r'^(?:doi:\s*|https?://(?:dx\.)?doi\.org/)', re.IGNORECASE)

    @classmethod
    def is_valid_doi(cls, doi: Optional[str]) -> bool:
        """Check DOI format, allowing a https://doi.org/ prefix.

        Args:
            doi: DOI string to validate

        Returns:
            True if the DOI has the form 10.NNNN/suffix
        """
        if not doi:
            return False
        cleaned = cls.DOI_URL_PREFIX.sub('', doi.strip()).strip()
        return bool(cls.DOI_PATTERN.match(cleaned))

    @classmethod
    def normalize_doi(cls, doi: Optional[str]) -> Optional[str]:
        """Strip doi:/doi.org prefixes and return the bare DOI if valid.

        Args:
            doi: DOI with or without prefix

        Returns:
            Bare DOI or None if the format is invalid
        """
        if not doi:
            return None
        cleaned = cls.DOI_PREFIXES.sub('', doi.strip()).strip()
        if cls.DOI_PATTERN.match(cleaned):
            return cleaned
        return None

    @classmethod
    def format_doi_url(cls, doi: Optional[str]) -> str:
        """Format a DOI as a resolver URL ('' for empty input)."""
        if not doi:
            return ''
        cleaned = cls.DOI_URL_PREFIX.sub('', doi.strip()).strip()
        return f"https://doi.org/{cleaned}"


def is_valid_doi(doi: Optional[str]) -> bool:
    return IdentifierValidator.is_valid_doi(doi)


def normalize_doi(doi: Optional[str]) -> Optional[str]:
    return IdentifierValidator.normalize_doi(doi)


def format_doi_url(doi: Optional[str]) -> str:
    return IdentifierValidator.format_doi_url(doi)
