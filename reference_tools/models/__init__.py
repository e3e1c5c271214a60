"""
Data models for references and metadata records.
"""

from .reference import (
    MetadataSource,
    PublicationType,
    JournalTier,
    RawDocumentText,
    MetadataRecord,
    Reference,
    SearchPage,
)

__all__ = [
    'MetadataSource',
    'PublicationType',
    'JournalTier',
    'RawDocumentText',
    'MetadataRecord',
    'Reference',
    'SearchPage',
]
