"""
Wire components together from configuration values.
"""
from typing import Optional

from .manager import ConfigManager
from ..ai.summarizer import PaperSummarizer
from ..api.crossref_client import CrossRefClient
from ..api.openalex_client import OpenAlexClient
from ..api.semantic_scholar_client import SemanticScholarClient
from ..library.reference_library import ReferenceLibrary
from ..library.storage import KeyValueStore, PDFStore
from ..metadata.academic_search import AcademicSearch
from ..metadata.journal_ranking import JournalRankingResolver
from ..metadata.pdf_metadata import PDFMetadataExtractor
from ..metadata.scholar_search import ScholarSearch


def build_crossref(config: ConfigManager) -> CrossRefClient:
    return CrossRefClient(base_url=config.get_api_url('crossref'),
                          email=config.get_contact_email(),
                          timeout=config.get_timeout())


def build_openalex(config: ConfigManager) -> OpenAlexClient:
    return OpenAlexClient(base_url=config.get_api_url('openalex'),
                          email=config.get_contact_email(),
                          timeout=config.get_timeout())


def build_pipeline(config: ConfigManager) -> PDFMetadataExtractor:
    """PDF metadata pipeline with every client configured from config."""
    openalex = build_openalex(config)
    sources = [
        build_crossref(config),
        openalex,
        SemanticScholarClient(base_url=config.get_api_url('semantic_scholar'),
                              timeout=config.get_timeout()),
    ]
    return PDFMetadataExtractor(
        academic_search=AcademicSearch(sources),
        ranking_resolver=JournalRankingResolver(openalex, config.get_journal_rankings_file()),
        max_pages=config.get_max_pages(),
    )


def build_library(config: ConfigManager,
                  extractor: Optional[PDFMetadataExtractor] = None) -> ReferenceLibrary:
    """Reference library stored under the configured library folder."""
    folder = config.get_library_folder()
    return ReferenceLibrary(
        store=KeyValueStore(folder / 'library.json'),
        pdf_store=PDFStore(folder / 'pdfs'),
        extractor=extractor or build_pipeline(config),
        crossref=build_crossref(config),
    )


def build_summarizer(config: ConfigManager, api_key: Optional[str] = None) -> PaperSummarizer:
    """Summarizer using the given key, else the key from the [AI] section."""
    return PaperSummarizer(
        api_key=api_key or config.get('AI', 'api_key', '') or None,
        models=config.get_ai_models() or None,
        base_url=config.get('AI', 'base_url'),
        timeout=config.getint('AI', 'timeout', 120),
    )


def build_scholar_search(config: ConfigManager, api_key: Optional[str] = None) -> ScholarSearch:
    """Keyword search; query expansion is available when an AI key is configured."""
    summarizer = build_summarizer(config, api_key=api_key)
    return ScholarSearch(
        client=SemanticScholarClient(base_url=config.get_api_url('semantic_scholar'),
                                     timeout=config.get_timeout()),
        ranking_resolver=JournalRankingResolver(build_openalex(config), config.get_journal_rankings_file()),
        summarizer=summarizer if summarizer.api_key else None,
        page_size=config.getint('PROCESSING', 'search_page_size', 20),
    )
