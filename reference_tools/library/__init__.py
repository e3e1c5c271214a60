"""
Local reference library, storage and citation export.
"""

from .storage import KeyValueStore, PDFStore
from .reference_library import ReferenceLibrary

__all__ = ['KeyValueStore', 'PDFStore', 'ReferenceLibrary']
