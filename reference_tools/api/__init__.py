"""
Clients for the bibliographic lookup services.
"""

from .base_client import BaseAPIClient
from .crossref_client import CrossRefClient
from .openalex_client import OpenAlexClient, reconstruct_abstract
from .semantic_scholar_client import SemanticScholarClient

__all__ = [
    'BaseAPIClient',
    'CrossRefClient',
    'OpenAlexClient',
    'SemanticScholarClient',
    'reconstruct_abstract',
]
