#!/usr/bin/env python3
"""
Metadata extraction for PDFs: text heuristics refined by academic databases.

Flow: read the first pages -> heuristic guess -> title search (CrossRef,
OpenAlex, Semantic Scholar) -> journal ranking -> merged record. Every
stage fails softly, so extract_pdf_metadata always returns a record.
"""

import logging
from dataclasses import fields
from pathlib import Path
from typing import Optional, Union

import pdfplumber

from .academic_search import AcademicSearch, map_publication_type
from .journal_ranking import JournalRankingResolver
from .text_heuristics import TextHeuristicsExtractor
from ..models.reference import MetadataRecord, RawDocumentText


DEFAULT_MAX_PAGES = 3

# A title this short is assumed too unreliable to search on
MIN_SEARCHABLE_TITLE_LENGTH = 10

# Fields whose value comes from the pipeline itself rather than the merge
PIPELINE_FIELDS = ('source', 'type', 'journal', 'journal_ranking')


def read_pdf_text(pdf_path: Union[str, Path], max_pages: int = DEFAULT_MAX_PAGES) -> RawDocumentText:
    """Extract text from the first pages and the info dictionary of a PDF.

    Args:
        pdf_path: Path to PDF file
        max_pages: Number of leading pages to read

    Returns:
        RawDocumentText

    Raises:
        Any pdfplumber/pdfminer error for unreadable files
    """
    with pdfplumber.open(pdf_path) as pdf:
        pages = []
        for page in pdf.pages[:max_pages]:
            pages.append(page.extract_text() or '')
        return RawDocumentText(pages=pages, info=dict(pdf.metadata or {}))


def _has_value(value) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list)):
        return len(value) > 0
    return True


def merge_records(pdf_guess: MetadataRecord, academic_hit: MetadataRecord,
                  journal_ranking: Optional[str] = None) -> MetadataRecord:
    """Combine a heuristic guess with a database hit.

    Every field takes the database value when it is present and non-empty,
    otherwise the heuristic value. The type is mapped to a reference type
    and the source is the database's.

    Args:
        pdf_guess: Record from the text heuristics
        academic_hit: Record from the first database that found the paper
        journal_ranking: Ranking tag for the merged journal, if any

    Returns:
        New merged MetadataRecord
    """
    merged = {}
    for f in fields(MetadataRecord):
        if f.name in PIPELINE_FIELDS:
            continue
        hit_value = getattr(academic_hit, f.name)
        merged[f.name] = hit_value if _has_value(hit_value) else getattr(pdf_guess, f.name)

    return MetadataRecord(
        source=academic_hit.source,
        type=map_publication_type(academic_hit.type),
        journal=academic_hit.journal or pdf_guess.journal,
        journal_ranking=journal_ranking,
        **merged,
    )


class PDFMetadataExtractor:
    """Reconcile heuristic PDF metadata with academic database lookups."""

    def __init__(self, heuristics: Optional[TextHeuristicsExtractor] = None,
                 academic_search: Optional[AcademicSearch] = None,
                 ranking_resolver: Optional[JournalRankingResolver] = None,
                 max_pages: int = DEFAULT_MAX_PAGES):
        """
        Args:
            heuristics: Text heuristics extractor
            academic_search: Ordered database lookup
            ranking_resolver: Journal ranking resolver
            max_pages: Number of leading pages to read from each PDF
        """
        self.logger = logging.getLogger(__name__)
        self.heuristics = heuristics or TextHeuristicsExtractor()
        self.academic_search = academic_search or AcademicSearch()
        self.ranking_resolver = ranking_resolver or JournalRankingResolver()
        self.max_pages = max_pages

    def extract_pdf_metadata(self, pdf_path: Union[str, Path]) -> MetadataRecord:
        """
        Extract metadata for a PDF.

        Args:
            pdf_path: Path to the PDF

        Returns:
            Best-guess MetadataRecord. An unreadable PDF gives an empty
            default record and a failed refinement gives the heuristic
            record; no exception reaches the caller.
        """
        self.logger.info(f"Starting PDF metadata extraction for: {Path(pdf_path).name}")

        try:
            raw = read_pdf_text(pdf_path, self.max_pages)
            self.logger.debug(f"Extracted {len(raw.full_text)} characters from {len(raw.pages)} page(s)")
            pdf_guess = self.heuristics.extract(raw)
        except Exception as e:
            self.logger.error(f"Error extracting PDF metadata from {pdf_path}: {e}")
            return MetadataRecord.empty(self.heuristics.current_year)

        try:
            return self.reconcile(pdf_guess)
        except Exception as e:
            self.logger.error(f"Error refining metadata for {pdf_path}: {e}")
            return pdf_guess

    def reconcile(self, pdf_guess: MetadataRecord) -> MetadataRecord:
        """
        Refine a partial record with the academic databases.

        Args:
            pdf_guess: Record from heuristics or manual entry

        Returns:
            Merged record, or pdf_guess unchanged when the title is too short
            to search or no database knows the paper
        """
        title = pdf_guess.title or ''
        if len(title) <= MIN_SEARCHABLE_TITLE_LENGTH:
            self.logger.info("Title too short to search, using PDF-extracted metadata")
            return pdf_guess

        academic_hit = self.academic_search.search_academic_databases(title)
        if academic_hit is None:
            self.logger.info("Using PDF-extracted metadata (no academic database match)")
            return pdf_guess

        self.logger.info(f"Found academic metadata from: {academic_hit.source.value}")

        journal_name = academic_hit.journal or pdf_guess.journal
        ranking_tag = None
        if journal_name and journal_name.strip():
            ranking_tag = self.ranking_resolver.get_journal_ranking_tag(journal_name)
            self.logger.debug(f"Journal ranking tag: {ranking_tag}")

        return merge_records(pdf_guess, academic_hit, ranking_tag)
