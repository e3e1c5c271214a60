"""
reference-tools: a personal research-reference manager.

Extracts bibliographic metadata from PDFs, enriches it from CrossRef,
OpenAlex and Semantic Scholar, and keeps the result in a local library.
"""

__version__ = '1.0.0'
