"""
Heuristic metadata extraction from the text of a PDF's first pages.
"""
import re
import logging
from datetime import datetime
from typing import Optional, List

from ..models.reference import MetadataRecord, MetadataSource, RawDocumentText
from ..utils.identifier_extractor import IdentifierExtractor


class TextHeuristicsExtractor:
    """Guess title, authors, year, abstract, journal and DOI from PDF text."""

    MIN_TITLE_LINE_LENGTH = 10
    MAX_TITLE_LENGTH = 300
    MAX_ABSTRACT_LENGTH = 1000
    MAX_JOURNAL_LENGTH = 200
    MIN_YEAR = 1900

    def __init__(self, current_year: Optional[int] = None):
        self.logger = logging.getLogger(__name__)
        self.current_year = current_year or datetime.now().year

        self.patterns = {
            'creation_year': re.compile(r'(\d{4})'),
            'year': re.compile(r'\b(19\d{2}|20[0-2]\d)\b'),
            'leading_number': re.compile(r'^\d+\s*'),
            'whitespace': re.compile(r'\s+'),
            'author_split': re.compile(r'[,;]'),
        }

        # "By Jane Doe, John Smith" / "Authors: ..." and "Jane A. Doe, John B. Smith"
        self.author_patterns = [
            re.compile(
                r'\b(?i:by|authors?:)\s*'
                r'([A-Z][a-z]+(?:\s+[A-Z][a-z]+)+(?:\s*,\s*[A-Z][a-z]+(?:\s+[A-Z][a-z]+)+)*)'
            ),
            re.compile(
                r'([A-Z][a-z]+\s+[A-Z]\.\s+[A-Z][a-z]+'
                r'(?:\s*,\s*[A-Z][a-z]+\s+[A-Z]\.\s+[A-Z][a-z]+)*)'
            ),
        ]

        self.abstract_patterns = [
            re.compile(
                r'abstract[:\s]*(.+?)(?=\n\s*\n|introduction|keywords|1\.|references)',
                re.IGNORECASE | re.DOTALL
            ),
            re.compile(
                r'summary[:\s]*(.+?)(?=\n\s*\n|introduction|keywords|1\.|references)',
                re.IGNORECASE | re.DOTALL
            ),
        ]

        self.journal_patterns = [
            re.compile(r'(?i:published in)\s+([A-Z][^,\n]+(?:Journal|Review|Magazine|Proceedings))'),
            re.compile(r'(Journal of [A-Z][^,\n]+)'),
            re.compile(r'([A-Z][^,\n]+\sJournal)'),
        ]

    def extract(self, raw: RawDocumentText) -> MetadataRecord:
        """
        Build a metadata record from document text and embedded info.

        Args:
            raw: Page texts and the PDF info dictionary

        Returns:
            MetadataRecord with source PDF_HEURISTIC; fields that cannot be
            found are empty strings, an empty author list or the current year
        """
        text = raw.full_text or ''
        info = raw.info or {}

        record = MetadataRecord(
            source=MetadataSource.PDF_HEURISTIC,
            title=self._extract_title(info, text),
            authors=self._extract_authors(info, text),
            year=self._extract_year(info, text),
            abstract=self._extract_abstract(text),
            doi=IdentifierExtractor.extract_doi(text) or '',
            journal=self._extract_journal(text),
        )
        self.logger.debug(f"PDF heuristics: title={record.title!r} year={record.year} doi={record.doi!r}")
        return record

    def _collapse(self, text: str) -> str:
        return self.patterns['whitespace'].sub(' ', text).strip()

    def _extract_title(self, info: dict, text: str) -> str:
        """Embedded title, otherwise the first substantial line."""
        embedded = _info_value(info, 'Title')
        if embedded:
            return embedded

        for line in text.split('\n'):
            line = line.strip()
            if len(line) > self.MIN_TITLE_LINE_LENGTH:
                title = self.patterns['leading_number'].sub('', line)
                return self._collapse(title)[:self.MAX_TITLE_LENGTH]

        return ''

    def _extract_authors(self, info: dict, text: str) -> List[str]:
        embedded = _info_value(info, 'Author')
        if embedded:
            return [a.strip() for a in self.patterns['author_split'].split(embedded) if a.strip()]

        for pattern in self.author_patterns:
            match = pattern.search(text)
            if match:
                return [a.strip() for a in match.group(1).split(',') if a.strip()]

        return []

    def _extract_year(self, info: dict, text: str) -> int:
        """Creation-date year if plausible, else the most recent year in the text."""
        latest_valid = self.current_year + 1

        creation_date = _info_value(info, 'CreationDate')
        if creation_date:
            match = self.patterns['creation_year'].search(creation_date)
            if match:
                year = int(match.group(1))
                if self.MIN_YEAR <= year <= latest_valid:
                    return year

        years = [int(y) for y in self.patterns['year'].findall(text)]
        valid_years = [y for y in years if self.MIN_YEAR <= y <= latest_valid]
        if valid_years:
            return max(valid_years)

        return self.current_year

    def _extract_abstract(self, text: str) -> str:
        for pattern in self.abstract_patterns:
            match = pattern.search(text)
            if match and match.group(1):
                return self._collapse(match.group(1))[:self.MAX_ABSTRACT_LENGTH]
        return ''

    def _extract_journal(self, text: str) -> str:
        for pattern in self.journal_patterns:
            match = pattern.search(text)
            if match and match.group(1):
                return match.group(1).strip()[:self.MAX_JOURNAL_LENGTH]
        return ''


def _info_value(info: dict, key: str) -> str:
    """Read a PDF info entry; pdfplumber may return bytes or non-str values."""
    value = info.get(key) or info.get(f'/{key}')
    if value is None:
        return ''
    if isinstance(value, bytes):
        value = value.decode('utf-8', errors='ignore')
    return str(value).strip()
