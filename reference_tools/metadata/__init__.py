"""
Metadata extraction and reconciliation for PDFs and partial records.
"""

from .academic_search import AcademicSearch, map_publication_type
from .journal_ranking import JournalRankingResolver
from .pdf_metadata import PDFMetadataExtractor
from .scholar_search import ScholarSearch
from .text_heuristics import TextHeuristicsExtractor

__all__ = [
    'AcademicSearch',
    'map_publication_type',
    'JournalRankingResolver',
    'PDFMetadataExtractor',
    'ScholarSearch',
    'TextHeuristicsExtractor',
]
