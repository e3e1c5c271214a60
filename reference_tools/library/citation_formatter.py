"""
Citation export in BibTeX and APA style.
"""
import re
from typing import Iterable

from ..models.reference import PublicationType, Reference
from ..utils.identifier_validator import IdentifierValidator


BIBTEX_ENTRY_TYPES = {
    PublicationType.JOURNAL_ARTICLE.value: 'article',
    PublicationType.CONFERENCE_PAPER.value: 'inproceedings',
    PublicationType.BOOK_CHAPTER.value: 'incollection',
    PublicationType.THESIS.value: 'phdthesis',
    PublicationType.TECHNICAL_REPORT.value: 'techreport',
    PublicationType.PREPRINT.value: 'misc',
}


def _family_name(author: str) -> str:
    """Family name from "Family, Given" or "Given Family"."""
    author = author.strip()
    if ',' in author:
        return author.split(',')[0].strip()
    parts = author.split()
    return parts[-1] if parts else ''


def citation_key(ref: Reference) -> str:
    family = _family_name(ref.authors[0]) if ref.authors else 'unknown'
    family = re.sub(r'[^\w]', '', family) or 'unknown'
    return f"{family}{ref.year or ''}"


def to_bibtex(ref: Reference) -> str:
    """BibTeX entry for a reference; optional fields only when set."""
    entry_type = BIBTEX_ENTRY_TYPES.get(ref.type, 'article')
    fields = [
        ('title', ref.title),
        ('author', ' and '.join(ref.authors)),
        ('journal', ref.journal or ''),
        ('year', str(ref.year or '')),
    ]
    optional = [
        ('volume', ref.volume),
        ('number', ref.issue),
        ('pages', ref.pages),
        ('publisher', ref.publisher),
        ('doi', ref.doi),
    ]
    fields.extend((name, value) for name, value in optional if value)

    body = ',\n'.join(f"  {name}={{{value}}}" for name, value in fields)
    return f"@{entry_type}{{{citation_key(ref)},\n{body}\n}}"


def to_apa(ref: Reference) -> str:
    """APA-style one-line citation: Authors (year). Title. Journal."""
    authors = ', '.join(ref.authors)
    citation = f"{authors} ({ref.year}). {ref.title}. {ref.journal or ''}."
    if ref.doi:
        citation += f" {IdentifierValidator.format_doi_url(ref.doi)}"
    return citation


def export_bibtex(references: Iterable[Reference]) -> str:
    return '\n\n'.join(to_bibtex(ref) for ref in references)


def export_apa(references: Iterable[Reference]) -> str:
    return '\n'.join(to_apa(ref) for ref in references)
